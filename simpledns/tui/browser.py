"""Resource browser state shared by the Domains, Zones and Records tabs.

One :class:`BrowserModel` per category.  Each category has its own screens:

* Domains: a flat list; opening a domain builds a fresh
  :class:`DomainDashboardModel` shown as a full takeover, and the fuzzy
  search picks a domain straight from the list.
* Zones: a flat list with zone-file and distribution lookups.
* Records: a zone picker, then the records in the chosen zone.  Going back
  restores the picker as it was; only an explicit refresh reloads it.

List loads carry the generation they were issued under.  Anything that
changes what the list shows bumps the generation, so a late result from an
older load is dropped without touching the current ``loading`` flag.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from textual.message import Message

from simpledns.backend import Backend
from simpledns.fuzzy import SearchMatch, rank_matches
from simpledns.tui.categories import Category
from simpledns.tui.domain_dashboard import DashboardMessage, DomainDashboardModel, distribution_text
from simpledns.tui.layout import truncate_text, wrap_label_value
from simpledns.tui.messages import Job

logger = logging.getLogger(__name__)


class BrowserScreen(Enum):
    DOMAINS_LIST = "domains_list"
    DOMAIN_DASHBOARD = "domain_dashboard"
    ZONES_LIST = "zones_list"
    RECORDS_ZONES = "records_zones"
    RECORDS_LIST = "records_list"

    @property
    def list_screen(self) -> "BrowserScreen":
        """The list this screen sits on; the dashboard covers the domains list."""
        if self is BrowserScreen.DOMAIN_DASHBOARD:
            return BrowserScreen.DOMAINS_LIST
        return self


INITIAL_SCREEN = {
    Category.DOMAINS: BrowserScreen.DOMAINS_LIST,
    Category.ZONES: BrowserScreen.ZONES_LIST,
    Category.RECORDS: BrowserScreen.RECORDS_ZONES,
}

COLUMNS = {
    BrowserScreen.DOMAINS_LIST: ("Domain", "State", "Expires", "Auto-renew"),
    BrowserScreen.ZONES_LIST: ("Zone", "Flags"),
    BrowserScreen.RECORDS_ZONES: ("Zone", "Flags"),
    BrowserScreen.RECORDS_LIST: ("Type", "Name", "TTL", "Content", "Priority"),
}


@dataclass
class BrowserItem:
    key: str
    title: str
    subtitle: str = ""
    id: int = 0
    cells: tuple[str, ...] = ()


@dataclass
class BrowserListLoaded(Message):
    category: Category
    screen: BrowserScreen
    generation: int = 0
    zone: str = ""
    header: str = ""
    items: list[BrowserItem] = field(default_factory=list)
    status: str = ""
    error: str = ""


@dataclass
class BrowserDetailLoaded(Message):
    category: Category
    screen: BrowserScreen
    key: str = ""
    title: str = ""
    body: str = ""
    error: str = ""


@dataclass
class SearchState:
    visible: bool = False
    query: str = ""
    selected: int = 0
    matches: list[SearchMatch] = field(default_factory=list)


@dataclass
class _PickerSnapshot:
    items: list[BrowserItem]
    selected: int
    header: str
    status: str


def domain_item(d) -> BrowserItem:
    meta = f"state: {d.state}"
    if d.expires_at:
        meta += f" | expires: {truncate_text(d.expires_at, 10)}"
    if d.auto_renew:
        meta += " | auto-renew"
    cells = (d.name, d.state, truncate_text(d.expires_at, 10) if d.expires_at else "", "yes" if d.auto_renew else "no")
    return BrowserItem(key=d.name, title=d.name, subtitle=meta, id=d.id, cells=cells)


def zone_item(z, picker: bool = False) -> BrowserItem:
    flags = []
    if z.active:
        flags.append("active")
    elif not picker:
        flags.append("inactive")
    if z.reverse:
        flags.append("reverse")
    if z.secondary:
        flags.append("secondary")
    if not flags:
        flags.append("standard")
    subtitle = " | ".join(flags)
    return BrowserItem(key=z.name, title=z.name, subtitle=subtitle, id=z.id, cells=(z.name, subtitle))


def record_item(r) -> BrowserItem:
    meta = f"ttl {r.ttl} | {truncate_text(r.content, 72)}"
    if r.priority:
        meta += f" | pri {r.priority}"
    if r.system_record:
        meta += " | system"
    return BrowserItem(
        key=str(r.id),
        title=f"{r.type:<6} {r.display_name}",
        subtitle=meta,
        id=r.id,
        cells=(r.type, r.display_name, str(r.ttl), truncate_text(r.content, 72), str(r.priority or "")),
    )


def zone_detail(z) -> str:
    return "\n".join([
        f"ID: {z.id}",
        f"Name: {z.name}",
        f"Active: {str(z.active).lower()}",
        f"Reverse: {str(z.reverse).lower()}",
        f"Secondary: {str(z.secondary).lower()}",
        f"Created: {z.created_at}",
        f"Updated: {z.updated_at}",
    ])


def record_detail(r, zone: str) -> str:
    lines = [
        f"ID: {r.id}",
        f"Type: {r.type}",
        f"Name: {r.display_name}",
        f"Zone: {zone}",
    ]
    lines += wrap_label_value("Content: ", r.content, 80)
    lines.append(f"TTL: {r.ttl}")
    if r.priority:
        lines.append(f"Priority: {r.priority}")
    if r.regions:
        lines.append("Regions: " + ", ".join(r.regions))
    lines += [
        f"System: {str(r.system_record).lower()}",
        f"Created: {r.created_at}",
        f"Updated: {r.updated_at}",
    ]
    return "\n".join(lines)


class BrowserModel:

    def __init__(self, category: Category, backend: Backend) -> None:
        self.category = category
        self._backend = backend
        self.screen = INITIAL_SCREEN[category]
        self.items: list[BrowserItem] = []
        self.selected = 0
        self.loading = False
        self.error = ""
        self.status = ""
        self.header = category.label
        self.detail_title = ""
        self.detail_body = ""
        self.records_zone = ""
        self.dashboard: Optional[DomainDashboardModel] = None
        self.search = SearchState()
        self.generation = 0
        self._picker: Optional[_PickerSnapshot] = None
        self._notice = ""

    def init(self) -> Optional[Job]:
        return self.reload()

    def reload(self) -> Job:
        self.generation += 1
        self.loading = True
        self.error = ""
        return self._load_list_job()

    def columns(self) -> tuple[str, ...]:
        return COLUMNS[self.screen.list_screen]

    def selected_item(self) -> Optional[BrowserItem]:
        if 0 <= self.selected < len(self.items):
            return self.items[self.selected]
        return None

    # ------------------------------------------------------------------
    # User operations
    # ------------------------------------------------------------------

    def select(self, index: int) -> None:
        if self.loading or not self.items:
            return
        self.selected = min(max(0, index), len(self.items) - 1)

    def move(self, delta: int) -> None:
        self.select(self.selected + delta)

    def refresh(self) -> Job:
        self.detail_title = ""
        self.detail_body = ""
        return self.reload()

    def activate(self) -> Optional[Job]:
        """Enter on the selection: open a dashboard, a zone, or a detail view."""
        item = self.selected_item()
        if self.loading or item is None:
            return None
        if self.screen is BrowserScreen.DOMAINS_LIST:
            return self._open_dashboard(item)
        if self.screen is BrowserScreen.RECORDS_ZONES:
            self._picker = _PickerSnapshot(list(self.items), self.selected, self.header, self.status)
            self.records_zone = item.key
            self.screen = BrowserScreen.RECORDS_LIST
            self.items = []
            self.selected = 0
            self.header = f"Records / {item.key}"
            self.status = ""
            self.detail_title = ""
            self.detail_body = ""
            return self.reload()
        return self._start_detail(self._load_detail_job())

    def can_go_back(self) -> bool:
        """True when Esc stays inside this browser (records back to the picker)."""
        return self.screen is BrowserScreen.RECORDS_LIST

    def back_to_picker(self) -> Optional[Job]:
        if self.screen is not BrowserScreen.RECORDS_LIST:
            return None
        self.screen = BrowserScreen.RECORDS_ZONES
        self.records_zone = ""
        self.detail_title = ""
        self.detail_body = ""
        self.error = ""
        snapshot, self._picker = self._picker, None
        if snapshot is None:
            self.items = []
            self.selected = 0
            return self.reload()
        # an in-flight records load no longer has anywhere to land
        self.generation += 1
        self.loading = False
        self.items = snapshot.items
        self.selected = min(snapshot.selected, max(0, len(self.items) - 1))
        self.header = snapshot.header
        self.status = snapshot.status
        return None

    def zone_file(self) -> Optional[Job]:
        if self.loading or self.screen is not BrowserScreen.ZONES_LIST or not self.items:
            return None
        return self._start_detail(self._load_zone_file_job())

    def distribution(self) -> Optional[Job]:
        if self.loading or not self.items:
            return None
        if self.screen is BrowserScreen.ZONES_LIST:
            return self._start_detail(self._load_zone_distribution_job())
        if self.screen is BrowserScreen.RECORDS_LIST:
            return self._start_detail(self._load_record_distribution_job())
        return None

    def _start_detail(self, job: Optional[Job]) -> Optional[Job]:
        if job is None:
            return None
        self.error = ""
        self.loading = True
        return job

    # ------------------------------------------------------------------
    # Domain dashboard
    # ------------------------------------------------------------------

    def _open_dashboard(self, item: BrowserItem) -> Optional[Job]:
        self.dashboard = DomainDashboardModel(self._backend, item.key)
        self.screen = BrowserScreen.DOMAIN_DASHBOARD
        return self.dashboard.init()

    def close_dashboard(self) -> None:
        self.dashboard = None
        if self.screen is BrowserScreen.DOMAIN_DASHBOARD:
            self.screen = BrowserScreen.DOMAINS_LIST

    def domain_deleted(self, domain: str) -> Job:
        self.close_dashboard()
        self.detail_title = ""
        self.detail_body = ""
        self._notice = f"Domain '{domain}' deleted."
        return self.reload()

    def apply_dashboard(self, msg: DashboardMessage) -> Optional[Job]:
        dash = self.dashboard
        if dash is None:
            logger.debug("Dropping %s for closed dashboard %s", type(msg).__name__, msg.domain)
            return None
        job = dash.apply(msg)
        if dash.deleted:
            return self.domain_deleted(dash.domain)
        return job

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    def apply(self, msg: Message) -> Optional[Job]:
        if isinstance(msg, BrowserListLoaded):
            self._on_list_loaded(msg)
        elif isinstance(msg, BrowserDetailLoaded):
            self._on_detail_loaded(msg)
        elif isinstance(msg, DashboardMessage):
            return self.apply_dashboard(msg)
        return None

    def _on_list_loaded(self, msg: BrowserListLoaded) -> None:
        if msg.generation != self.generation:
            logger.debug("Dropping stale %s list for %s", msg.screen.value, msg.zone or "-")
            return
        self.loading = False
        if msg.screen is not self.screen.list_screen or msg.zone != self.records_zone:
            logger.debug("Dropping %s list for %s after navigation", msg.screen.value, msg.zone or "-")
            return
        if msg.error:
            self.error = msg.error
            self.items = []
            self.selected = 0
            self.header = self._default_header()
            return
        self.error = ""
        self.items = list(msg.items)
        self.header = msg.header
        self.status = self._notice or msg.status
        self._notice = ""
        if not self.items:
            self.selected = 0
        elif self.selected >= len(self.items):
            self.selected = len(self.items) - 1
        if self.search.visible:
            self._update_search_matches()

    def _on_detail_loaded(self, msg: BrowserDetailLoaded) -> None:
        self.loading = False
        item = self.selected_item()
        if msg.screen is not self.screen or item is None or item.key != msg.key:
            logger.debug("Dropping stale detail for %s", msg.key)
            return
        if msg.error:
            self.error = msg.error
            return
        self.error = ""
        self.detail_title = msg.title
        self.detail_body = msg.body

    # ------------------------------------------------------------------
    # Global domain search
    # ------------------------------------------------------------------

    def open_search(self) -> bool:
        if self.category is not Category.DOMAINS:
            return False
        self.close_dashboard()
        self.detail_title = ""
        self.detail_body = ""
        self.search = SearchState(visible=True)
        self._update_search_matches()
        return True

    def close_search(self) -> None:
        self.search = SearchState()

    def set_search_query(self, query: str) -> None:
        self.search.query = query
        self._update_search_matches()

    def move_search(self, delta: int) -> None:
        if self.search.matches:
            self.search.selected = min(max(0, self.search.selected + delta), len(self.search.matches) - 1)

    def search_item(self, match: SearchMatch) -> BrowserItem:
        return self.items[match.index]

    def submit_search(self) -> Optional[Job]:
        """Open the dashboard for the highlighted match, skipping the list."""
        if not self.search.visible or not self.search.matches:
            return None
        match = self.search.matches[self.search.selected]
        self.selected = match.index
        self.close_search()
        item = self.selected_item()
        if self.screen is not BrowserScreen.DOMAINS_LIST or item is None:
            return None
        return self._open_dashboard(item)

    def _update_search_matches(self) -> None:
        if self.category is not Category.DOMAINS or self.screen is not BrowserScreen.DOMAINS_LIST:
            self.search.matches = []
            self.search.selected = 0
            return
        self.search.matches = rank_matches(self.search.query, [item.title for item in self.items])
        if not self.search.matches:
            self.search.selected = 0
        elif self.search.selected >= len(self.search.matches):
            self.search.selected = len(self.search.matches) - 1

    # ------------------------------------------------------------------
    # Display text
    # ------------------------------------------------------------------

    def subtitle(self) -> str:
        if self.screen is BrowserScreen.RECORDS_ZONES:
            return "Choose a zone to inspect records"
        if self.screen is BrowserScreen.RECORDS_LIST:
            return f"Records in {self.records_zone}"
        if self.screen is BrowserScreen.ZONES_LIST:
            return "Use f for zone file and x for distribution status"
        return "Open a domain for its dashboard, or press / to search"

    def empty_detail_hint(self) -> str:
        if self.screen.list_screen is BrowserScreen.DOMAINS_LIST:
            return "Press Enter on a domain to open its dashboard."
        return "Select an item and press Enter."

    def _default_header(self) -> str:
        if self.screen is BrowserScreen.RECORDS_LIST and self.records_zone:
            return f"Records / {self.records_zone}"
        if self.screen is BrowserScreen.RECORDS_ZONES:
            return "Records / Zones"
        return self.category.label

    # ------------------------------------------------------------------
    # Jobs
    # ------------------------------------------------------------------

    def _load_list_job(self) -> Job:
        backend = self._backend
        category = self.category
        screen = self.screen.list_screen
        zone = self.records_zone
        generation = self.generation

        def load() -> BrowserListLoaded:
            try:
                if screen is BrowserScreen.DOMAINS_LIST:
                    items = [domain_item(d) for d in backend.list_domains()]
                    header = f"Domains ({len(items)})"
                    status = "Use Enter to inspect a domain."
                elif screen is BrowserScreen.ZONES_LIST:
                    items = [zone_item(z) for z in backend.list_zones()]
                    header = f"Zones ({len(items)})"
                    status = "Use Enter to inspect a zone."
                elif screen is BrowserScreen.RECORDS_ZONES:
                    items = [zone_item(z, picker=True) for z in backend.list_zones()]
                    header = f"Records / Zones ({len(items)})"
                    status = "Choose a zone, then press Enter to list its records."
                else:
                    items = [record_item(r) for r in backend.list_records(zone)]
                    header = f"Records / {zone} ({len(items)})"
                    status = "Use Enter to inspect a record. Esc returns to zones."
            except Exception as e:
                logger.warning("Loading %s failed: %s", screen.value, e)
                return BrowserListLoaded(category, screen, generation, zone=zone, error=str(e))
            return BrowserListLoaded(
                category, screen, generation, zone=zone, header=header, items=items, status=status,
            )

        return load

    def _detail_job(self, build) -> Optional[Job]:
        """Wrap *build(item)* -> (title, body) as a detail job for the selection."""
        item = self.selected_item()
        if item is None:
            return None
        category = self.category
        screen = self.screen

        def load() -> BrowserDetailLoaded:
            try:
                title, body = build(item)
            except Exception as e:
                logger.warning("Detail lookup for %s failed: %s", item.key, e)
                return BrowserDetailLoaded(category, screen, key=item.key, error=str(e))
            return BrowserDetailLoaded(category, screen, key=item.key, title=title, body=body)

        return load

    def _load_detail_job(self) -> Optional[Job]:
        backend = self._backend
        zone = self.records_zone

        if self.screen is BrowserScreen.ZONES_LIST:
            def build(item):
                z = backend.get_zone(item.key)
                return z.name, zone_detail(z)
        else:
            def build(item):
                r = backend.get_record(zone, item.id)
                return f"{r.type} {r.display_name}.{zone}", record_detail(r, zone)

        return self._detail_job(build)

    def _load_zone_file_job(self) -> Optional[Job]:
        backend = self._backend

        def build(item):
            return f"Zone file: {item.key}", backend.get_zone_file(item.key)

        return self._detail_job(build)

    def _load_zone_distribution_job(self) -> Optional[Job]:
        backend = self._backend

        def build(item):
            distributed = backend.check_zone_distribution(item.key)
            return f"Zone distribution: {item.key}", distribution_text(distributed)

        return self._detail_job(build)

    def _load_record_distribution_job(self) -> Optional[Job]:
        backend = self._backend
        zone = self.records_zone

        def build(item):
            distributed = backend.check_record_distribution(zone, item.id)
            return f"Record distribution: {item.id} ({zone})", distribution_text(distributed)

        return self._detail_job(build)
