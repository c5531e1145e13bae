"""Resource categories browsed by the Domains, Zones and Records tabs."""

from enum import Enum


class Category(Enum):
    DOMAINS = "domains"
    ZONES = "zones"
    RECORDS = "records"

    @property
    def label(self) -> str:
        return self.value.capitalize()
