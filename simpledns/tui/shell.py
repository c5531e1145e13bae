"""Shell state: five tabs, lazy first loads and result routing."""

from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from textual.message import Message

from simpledns.backend import Backend
from simpledns.config import CredentialStore
from simpledns.models import Whoami
from simpledns.tui.browser import BrowserDetailLoaded, BrowserListLoaded, BrowserModel
from simpledns.tui.categories import Category
from simpledns.tui.domain_dashboard import DashboardMessage
from simpledns.tui.help import HelpModel
from simpledns.tui.home import HomeModel, IdentityLoaded
from simpledns.tui.messages import Job, jobs


class Tab(Enum):
    HOME = ("Home", "1", "h")
    DOMAINS = ("Domains", "2", "d")
    ZONES = ("Zones", "3", "z")
    RECORDS = ("Records", "4", "R")
    HELP = ("Help", "5", "?")

    def __init__(self, label: str, number: str, mnemonic: str) -> None:
        self.label = label
        self.number = number
        self.mnemonic = mnemonic

    @property
    def shortcut(self) -> str:
        return f"{self.number}/{self.mnemonic}"

    @property
    def pane_id(self) -> str:
        return f"tab-{self.name.lower()}"

    @classmethod
    def for_pane(cls, pane_id: str) -> Optional["Tab"]:
        for tab in cls:
            if tab.pane_id == pane_id:
                return tab
        return None


TABS = list(Tab)
TAB_FOR_KEY = {k: tab for tab in Tab for k in (tab.number, tab.mnemonic)}
CATEGORY_TABS = {
    Category.DOMAINS: Tab.DOMAINS,
    Category.ZONES: Tab.ZONES,
    Category.RECORDS: Tab.RECORDS,
}

TabModel = Union[HomeModel, BrowserModel, HelpModel]


class ShellModel:
    """Owns one model per tab and initializes each on its first visit."""

    def __init__(
        self,
        backend: Backend,
        store: CredentialStore,
        whoami: Optional[Whoami] = None,
    ) -> None:
        self.active = Tab.HOME
        self.initialized: set[Tab] = set()
        self.home = HomeModel(backend, whoami)
        self.domains = BrowserModel(Category.DOMAINS, backend)
        self.zones = BrowserModel(Category.ZONES, backend)
        self.records = BrowserModel(Category.RECORDS, backend)
        self.help = HelpModel(store)
        self.demo = backend.is_demo

    def model_for(self, tab: Tab) -> TabModel:
        return {
            Tab.HOME: self.home,
            Tab.DOMAINS: self.domains,
            Tab.ZONES: self.zones,
            Tab.RECORDS: self.records,
            Tab.HELP: self.help,
        }[tab]

    def browser_for(self, category: Category) -> BrowserModel:
        return self.model_for(CATEGORY_TABS[category])

    def init(self) -> Optional[Job]:
        return self.init_tab(Tab.HOME)

    def init_tab(self, tab: Tab) -> Optional[Job]:
        if tab in self.initialized:
            return None
        self.initialized.add(tab)
        return self.model_for(tab).init()

    def activate(self, tab: Tab) -> Optional[Job]:
        self.active = tab
        return self.init_tab(tab)

    def step_tab(self, delta: int) -> Tab:
        return TABS[(TABS.index(self.active) + delta) % len(TABS)]

    def open_global_search(self) -> list[Job]:
        """Jump to Domains and open the search over its list."""
        self.active = Tab.DOMAINS
        load = self.init_tab(Tab.DOMAINS)
        self.domains.open_search()
        return jobs(load)

    def title(self) -> str:
        heading = "Simple - a TUI for DNSimple.com"
        if self.demo:
            heading += " (demo)"
        return heading

    def apply(self, msg: Message) -> Optional[Job]:
        """Hand a job result to whichever tab issued it, active or not."""
        if isinstance(msg, IdentityLoaded):
            return self.home.apply(msg)
        if isinstance(msg, (BrowserListLoaded, BrowserDetailLoaded)):
            return self.browser_for(msg.category).apply(msg)
        if isinstance(msg, DashboardMessage):
            return self.domains.apply_dashboard(msg)
        return None
