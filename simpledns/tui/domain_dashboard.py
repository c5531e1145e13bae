"""Single-domain dashboard state.

Five sections (Overview, Records, Zone, Diagnostics, Actions) are pure
display modes over one cached snapshot of the domain, its zone and its
records.  Mutations (zone activation/deactivation, record and domain
deletion) all go through one confirmation gate that only runs the call
once the user has typed ``confirm``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from textual.message import Message

from simpledns.backend import Backend
from simpledns.models import Domain, Zone, ZoneRecord
from simpledns.tui.messages import Job

logger = logging.getLogger(__name__)

CONFIRM_WORD = "confirm"


class Section(Enum):
    OVERVIEW = ("Overview", "o")
    RECORDS = ("Records", "c")       # reCords: r is taken by refresh
    ZONE = ("Zone", "z")
    DIAGNOSTICS = ("Diagnostics", "g")
    ACTIONS = ("Actions", "a")

    def __init__(self, label: str, key: str) -> None:
        self.label = label
        self.key = key

    @property
    def pane_id(self) -> str:
        return f"section-{self.name.lower()}"

    @classmethod
    def for_key(cls, key: str) -> Optional["Section"]:
        for section in cls:
            if section.key == key.lower():
                return section
        return None

    @classmethod
    def for_pane(cls, pane_id: str) -> Optional["Section"]:
        for section in cls:
            if section.pane_id == pane_id:
                return section
        return None


class Mutation(Enum):
    ZONE_ACTIVATE = "zone_activate"
    ZONE_DEACTIVATE = "zone_deactivate"
    DELETE_RECORD = "delete_record"
    DELETE_DOMAIN = "delete_domain"

    @property
    def title(self) -> str:
        return _MUTATION_TEXT[self][0]

    @property
    def description(self) -> str:
        return _MUTATION_TEXT[self][1]

    @property
    def failure_prefix(self) -> str:
        return _MUTATION_TEXT[self][2]

    @property
    def exits_dashboard(self) -> bool:
        return self is Mutation.DELETE_DOMAIN


_MUTATION_TEXT = {
    Mutation.ZONE_ACTIVATE: (
        "Activate Zone DNS",
        "This will activate DNS services for this zone.",
        "failed to activate zone",
    ),
    Mutation.ZONE_DEACTIVATE: (
        "Deactivate Zone DNS",
        "This will deactivate DNS services for this zone.",
        "failed to deactivate zone",
    ),
    Mutation.DELETE_RECORD: (
        "Delete Record",
        "This will permanently delete the selected record from the zone.",
        "failed to delete record",
    ),
    Mutation.DELETE_DOMAIN: (
        "Delete Domain",
        "This will permanently delete the domain from your account.",
        "failed to delete domain",
    ),
}


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------

@dataclass
class DashboardMessage(Message):
    """Result addressed to the dashboard open for ``domain``."""
    domain: str


@dataclass
class DashboardLoaded(DashboardMessage):
    data_domain: Optional[Domain] = None
    zone: Optional[Zone] = None
    records: list[ZoneRecord] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    error: str = ""


@dataclass
class RecordDetailLoaded(DashboardMessage):
    record: Optional[ZoneRecord] = None
    record_id: int = 0
    error: str = ""


@dataclass
class ZoneFileLoaded(DashboardMessage):
    text: str = ""
    error: str = ""


@dataclass
class ZoneDistributionLoaded(DashboardMessage):
    distributed: bool = False
    error: str = ""


@dataclass
class RecordDistributionLoaded(DashboardMessage):
    record_id: int = 0
    distributed: bool = False
    error: str = ""


@dataclass
class MutationFinished(DashboardMessage):
    mutation: Mutation = Mutation.ZONE_ACTIVATE
    status: str = ""
    error: str = ""


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------

@dataclass
class DashboardAction:
    id: str
    label: str
    hint: str = ""
    enabled: bool = True
    disabled_reason: str = ""


@dataclass
class ConfirmState:
    visible: bool = False
    busy: bool = False
    mutation: Optional[Mutation] = None
    title: str = ""
    body: str = ""
    record_id: int = 0
    error: str = ""


def distribution_text(distributed: bool) -> str:
    status = "Fully distributed" if distributed else "Not distributed yet"
    return f"Distributed: {str(distributed).lower()}\nStatus: {status}"


class DomainDashboardModel:
    """Single-domain view.  Built fresh for every domain that is opened."""

    def __init__(self, backend: Backend, domain: str) -> None:
        self._backend = backend
        self.domain = domain
        self.section = Section.OVERVIEW
        self.loading = False
        self.error = ""
        self.status = ""
        self.warnings: list[str] = []
        self.deleted = False

        self.data_domain: Optional[Domain] = None
        self.data_zone: Optional[Zone] = None
        self.records: list[ZoneRecord] = []

        self.selected_record = 0
        self.record_detail: Optional[ZoneRecord] = None

        self.diag_title = ""
        self.diag_body = ""

        self.selected_action = 0
        self.confirm = ConfirmState()

    def init(self) -> Optional[Job]:
        return self.refresh()

    def refresh(self) -> Optional[Job]:
        self.loading = True
        self.error = ""
        self.status = ""
        return self._load_dashboard_job()

    # ------------------------------------------------------------------
    # User operations
    # ------------------------------------------------------------------

    def set_section(self, section: Section) -> None:
        self.section = section

    def select_record(self, index: int) -> None:
        if self.section is Section.RECORDS and self.records:
            self.selected_record = min(max(0, index), len(self.records) - 1)

    def move_record(self, delta: int) -> None:
        self.select_record(self.selected_record + delta)

    def select_action(self, index: int) -> None:
        actions = self.available_actions()
        if self.section is Section.ACTIONS and actions:
            self.selected_action = min(max(0, index), len(actions) - 1)

    def move_action(self, delta: int) -> None:
        self.select_action(self.selected_action + delta)

    def request_refresh(self) -> Optional[Job]:
        if self.loading:
            return None
        return self.refresh()

    def open_record_detail(self) -> Optional[Job]:
        rec = self.selected_record_obj()
        if self.loading or rec is None:
            return None
        self.loading = True
        return self._load_record_detail_job(rec.id)

    def zone_file(self) -> Optional[Job]:
        if self.loading:
            return None
        return self._start_diagnostic(self._load_zone_file_job())

    def distribution(self) -> Optional[Job]:
        """Record distribution inside the Records section, zone distribution elsewhere."""
        if self.loading:
            return None
        if self.section is Section.RECORDS:
            rec = self.selected_record_obj()
            if rec is None:
                return None
            self.loading = True
            return self._load_record_distribution_job(rec.id)
        return self._start_diagnostic(self._load_zone_distribution_job())

    def request_record_delete(self) -> bool:
        """Open the confirmation for the selected record. False if there is none."""
        if self.loading or self.section is not Section.RECORDS or self.selected_record_obj() is None:
            return False
        self.open_confirm(Mutation.DELETE_RECORD)
        return True

    def run_action(self) -> Optional[Job]:
        """Run the selected action.  Mutations open the confirmation instead."""
        if self.loading or self.section is not Section.ACTIONS:
            return None
        actions = self.available_actions()
        if not actions or self.selected_action >= len(actions):
            return None
        action = actions[self.selected_action]
        if not action.enabled:
            self.error = action.disabled_reason
            return None

        if action.id == "refresh":
            return self.refresh()
        if action.id == "zone_file":
            return self._start_diagnostic(self._load_zone_file_job())
        if action.id == "zone_distribution":
            return self._start_diagnostic(self._load_zone_distribution_job())
        self.open_confirm(Mutation(action.id))
        return None

    def _start_diagnostic(self, job: Job) -> Job:
        self.section = Section.DIAGNOSTICS
        self.loading = True
        return job

    # ------------------------------------------------------------------
    # Confirmation gate
    # ------------------------------------------------------------------

    def open_confirm(self, mutation: Mutation) -> None:
        rec = self.selected_record_obj()
        body = mutation.description
        target = self._target_summary(mutation, rec)
        if target:
            body += "\n\n" + target
        self.confirm = ConfirmState(
            visible=True,
            mutation=mutation,
            title=mutation.title,
            body=body,
            record_id=rec.id if rec is not None else 0,
        )

    def submit_confirm(self, text: str) -> Optional[Job]:
        """Run the pending mutation if *text* is the confirm word."""
        if not self.confirm.visible or self.confirm.busy:
            return None
        if text.strip() != CONFIRM_WORD:
            self.confirm.error = f"Type {CONFIRM_WORD} to proceed"
            return None
        self.confirm.busy = True
        self.confirm.error = ""
        return self._mutation_job()

    def cancel_confirm(self) -> bool:
        """Close the confirmation. Refused while the call is in flight."""
        if self.confirm.busy:
            return False
        self.confirm = ConfirmState()
        return True

    def _target_summary(self, mutation: Mutation, rec: Optional[ZoneRecord]) -> str:
        if mutation in (Mutation.ZONE_ACTIVATE, Mutation.ZONE_DEACTIVATE):
            return f"Target zone:\n  {self.domain}"
        if mutation is Mutation.DELETE_DOMAIN:
            return f"Target domain:\n  {self.domain}"
        if rec is None:
            return "Target record: (none selected)"
        return f"Target record:\n  {rec.type} {rec.display_name}.{self.domain}\n  ID: {rec.id}"

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    def apply(self, msg: DashboardMessage) -> Optional[Job]:
        if msg.domain != self.domain:
            logger.debug("Dropping %s for %s on %s dashboard", type(msg).__name__, msg.domain, self.domain)
            return None
        if isinstance(msg, DashboardLoaded):
            self._on_loaded(msg)
        elif isinstance(msg, RecordDetailLoaded):
            self._on_record_detail(msg)
        elif isinstance(msg, ZoneFileLoaded):
            self._on_diagnostic("Zone File", msg.text, msg.error)
        elif isinstance(msg, ZoneDistributionLoaded):
            self._on_diagnostic("Zone Distribution", distribution_text(msg.distributed), msg.error)
        elif isinstance(msg, RecordDistributionLoaded):
            self._on_diagnostic(
                f"Record {msg.record_id} Distribution",
                distribution_text(msg.distributed),
                msg.error,
            )
        elif isinstance(msg, MutationFinished):
            return self._on_mutation_finished(msg)
        return None

    def _on_loaded(self, msg: DashboardLoaded) -> None:
        self.loading = False
        if msg.error:
            self.error = msg.error
            self.data_domain = None
            self.data_zone = None
            self.records = []
            self.warnings = []
            self.record_detail = None
            return
        self.error = ""
        self.warnings = list(msg.warnings)
        self.data_domain = msg.data_domain
        self.data_zone = msg.zone
        self.records = list(msg.records)
        if self.selected_record >= len(self.records):
            self.selected_record = max(0, len(self.records) - 1)
        if self.record_detail is not None and self.selected_record_obj() is None:
            self.record_detail = None

    def _on_record_detail(self, msg: RecordDetailLoaded) -> None:
        self.loading = False
        if msg.error:
            self.error = msg.error
            return
        rec = self.selected_record_obj()
        if rec is None or rec.id != msg.record_id:
            logger.debug("Dropping stale record detail for %s", msg.record_id)
            return
        self.error = ""
        self.record_detail = msg.record
        self.section = Section.RECORDS

    def _on_diagnostic(self, title: str, body: str, error: str) -> None:
        self.loading = False
        if error:
            self.error = error
            return
        self.error = ""
        self.section = Section.DIAGNOSTICS
        self.diag_title = title
        self.diag_body = body

    def _on_mutation_finished(self, msg: MutationFinished) -> Optional[Job]:
        self.confirm.busy = False
        if msg.error:
            # Keep the gate open so the user can retry or cancel.
            self.confirm.error = msg.error
            return None
        self.confirm = ConfirmState()
        self.status = msg.status
        if msg.mutation.exits_dashboard:
            self.deleted = True
            return None
        self.loading = True
        self.error = ""
        return self._load_dashboard_job()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def selected_record_obj(self) -> Optional[ZoneRecord]:
        if 0 <= self.selected_record < len(self.records):
            return self.records[self.selected_record]
        return None

    def available_actions(self) -> list[DashboardAction]:
        zone_ok = self.data_zone is not None
        rec_ok = self.selected_record_obj() is not None
        mutation_hint = "Mutation (confirm required)"
        return [
            DashboardAction("refresh", "Refresh dashboard", "Reload domain, zone, and records"),
            DashboardAction("zone_file", "Fetch zone file", "Read-only", zone_ok, "Zone unavailable"),
            DashboardAction("zone_distribution", "Check zone distribution", "Read-only", zone_ok, "Zone unavailable"),
            DashboardAction("zone_activate", "Activate DNS for zone", mutation_hint, zone_ok, "Zone unavailable"),
            DashboardAction("zone_deactivate", "Deactivate DNS for zone", mutation_hint, zone_ok, "Zone unavailable"),
            DashboardAction("delete_record", "Delete selected record", mutation_hint, rec_ok, "Select a record first"),
            DashboardAction("delete_domain", "Delete domain", mutation_hint),
        ]

    # ------------------------------------------------------------------
    # Jobs
    # ------------------------------------------------------------------

    def _load_dashboard_job(self) -> Job:
        backend = self._backend
        domain = self.domain

        def load() -> DashboardLoaded:
            try:
                data_domain = backend.get_domain(domain)
            except Exception as e:
                logger.warning("Dashboard load for %s failed: %s", domain, e)
                return DashboardLoaded(domain, error=str(e))

            zone = None
            records: list[ZoneRecord] = []
            warnings: list[str] = []
            try:
                zone = backend.get_zone(domain)
            except Exception as e:
                warnings.append(f"zone unavailable: {e}")
            if zone is not None:
                try:
                    records = backend.list_records(domain)
                except Exception as e:
                    warnings.append(f"records unavailable: {e}")
            return DashboardLoaded(
                domain, data_domain=data_domain, zone=zone, records=records, warnings=warnings,
            )

        return load

    def _load_record_detail_job(self, record_id: int) -> Job:
        backend = self._backend
        domain = self.domain

        def load() -> RecordDetailLoaded:
            try:
                record = backend.get_record(domain, record_id)
            except Exception as e:
                return RecordDetailLoaded(domain, record_id=record_id, error=str(e))
            return RecordDetailLoaded(domain, record=record, record_id=record_id)

        return load

    def _load_zone_file_job(self) -> Job:
        backend = self._backend
        domain = self.domain

        def load() -> ZoneFileLoaded:
            try:
                return ZoneFileLoaded(domain, text=backend.get_zone_file(domain))
            except Exception as e:
                return ZoneFileLoaded(domain, error=str(e))

        return load

    def _load_zone_distribution_job(self) -> Job:
        backend = self._backend
        domain = self.domain

        def load() -> ZoneDistributionLoaded:
            try:
                return ZoneDistributionLoaded(domain, distributed=backend.check_zone_distribution(domain))
            except Exception as e:
                return ZoneDistributionLoaded(domain, error=str(e))

        return load

    def _load_record_distribution_job(self, record_id: int) -> Job:
        backend = self._backend
        domain = self.domain

        def load() -> RecordDistributionLoaded:
            try:
                distributed = backend.check_record_distribution(domain, record_id)
            except Exception as e:
                return RecordDistributionLoaded(domain, record_id=record_id, error=str(e))
            return RecordDistributionLoaded(domain, record_id=record_id, distributed=distributed)

        return load

    def _mutation_job(self) -> Job:
        backend = self._backend
        domain = self.domain
        mutation = self.confirm.mutation
        record_id = self.confirm.record_id

        def run() -> MutationFinished:
            try:
                if mutation is Mutation.ZONE_ACTIVATE:
                    backend.activate_zone_dns(domain)
                    status = "Zone DNS activated."
                elif mutation is Mutation.ZONE_DEACTIVATE:
                    backend.deactivate_zone_dns(domain)
                    status = "Zone DNS deactivated."
                elif mutation is Mutation.DELETE_RECORD:
                    backend.delete_record(domain, record_id)
                    status = f"Record {record_id} deleted."
                else:
                    backend.delete_domain(domain)
                    status = "Domain deleted."
            except Exception as e:
                logger.warning("%s on %s failed: %s", mutation.value, domain, e)
                return MutationFinished(domain, mutation=mutation, error=f"{mutation.failure_prefix}: {e}")
            return MutationFinished(domain, mutation=mutation, status=status)

        return run
