"""Backend capability interface consumed by the TUI components.

Two implementations exist: :class:`simpledns.live_backend.LiveBackend`
talks to the DNSimple API, :class:`simpledns.demo_backend.DemoBackend`
serves a fixed in-memory data set.  The backend is chosen once at startup
and handed to every component that needs it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from simpledns.models import Domain, Whoami, Zone, ZoneRecord


class BackendError(Exception):
    """A backend operation failed."""
    pass


class Backend(ABC):

    @property
    def is_demo(self) -> bool:
        return False

    @abstractmethod
    def identity(self) -> Whoami: ...

    # -- domains ----------------------------------------------------------

    @abstractmethod
    def list_domains(self) -> list[Domain]: ...

    @abstractmethod
    def get_domain(self, name: str) -> Domain: ...

    @abstractmethod
    def delete_domain(self, name: str) -> None: ...

    # -- zones ------------------------------------------------------------

    @abstractmethod
    def list_zones(self) -> list[Zone]: ...

    @abstractmethod
    def get_zone(self, name: str) -> Zone: ...

    @abstractmethod
    def get_zone_file(self, name: str) -> str: ...

    @abstractmethod
    def check_zone_distribution(self, name: str) -> bool: ...

    @abstractmethod
    def activate_zone_dns(self, name: str) -> None: ...

    @abstractmethod
    def deactivate_zone_dns(self, name: str) -> None: ...

    # -- records ----------------------------------------------------------

    @abstractmethod
    def list_records(self, zone: str) -> list[ZoneRecord]: ...

    @abstractmethod
    def get_record(self, zone: str, record_id: int) -> ZoneRecord: ...

    @abstractmethod
    def check_record_distribution(self, zone: str, record_id: int) -> bool: ...

    @abstractmethod
    def delete_record(self, zone: str, record_id: int) -> None: ...
