"""In-memory fixture backend for ``simpledns demo`` and the test suite.

Seeded with a fixed set of 25 hosted domains, one zone per domain and five
records per zone.  Mutations behave like the live API: deleting a domain
drops its zone and records, activation flips the zone's ``active`` flag.
"""

from __future__ import annotations

import copy
import threading

from simpledns.backend import Backend, BackendError
from simpledns.models import Account, Domain, Whoami, Zone, ZoneRecord

DEMO_TIMESTAMP = "2026-02-26T12:00:00Z"

DEMO_DOMAINS = [
    "absurdophile.com", "acme.dev", "alpha-example.net", "beta-labs.io", "bluebird.ai",
    "canvasworks.co", "deltaops.com", "echovalley.org", "foxtrotapps.dev", "glaciermail.com",
    "harborstack.io", "ivorypixel.net", "jupiterhub.app", "kineticdata.dev", "lighthouse.tools",
    "mintorchard.com", "northfieldhq.com", "opalroute.io", "paperplane.dev", "quietforest.org",
    "rangergrid.com", "signalpath.io", "tideline.app", "umbraworks.dev", "vectorlane.net",
]

FIRST_DOMAIN_ID = 1028000
FIRST_ZONE_ID = 972300
FIRST_RECORD_ID = 8800000

SPF_TXT = (
    "v=spf1 include:_spf.google.com include:mailgun.org include:amazonses.com "
    "ip4:192.0.2.42 ip4:198.51.100.17 ~all"
)


def _not_found(kind: str, name: object) -> BackendError:
    return BackendError(f"{kind} not found (demo): {name}")


class DemoBackend(Backend):
    """Deterministic fixture implementation of :class:`Backend`."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._whoami = Whoami(account=Account(
            id=424242, email="demo@simpledns.local", plan_identifier="professional",
        ))
        self._domains: dict[str, Domain] = {}
        self._zones: dict[str, Zone] = {}
        self._records: dict[str, list[ZoneRecord]] = {}
        self._seed()

    @property
    def is_demo(self) -> bool:
        return True

    def identity(self) -> Whoami:
        with self._lock:
            return copy.deepcopy(self._whoami)

    # -- domains ----------------------------------------------------------

    def list_domains(self) -> list[Domain]:
        with self._lock:
            return [copy.copy(d) for _, d in sorted(self._domains.items())]

    def get_domain(self, name: str) -> Domain:
        with self._lock:
            if name not in self._domains:
                raise _not_found("domain", name)
            return copy.copy(self._domains[name])

    def delete_domain(self, name: str) -> None:
        with self._lock:
            if name not in self._domains:
                raise _not_found("domain", name)
            del self._domains[name]
            self._zones.pop(name, None)
            self._records.pop(name, None)

    # -- zones ------------------------------------------------------------

    def list_zones(self) -> list[Zone]:
        with self._lock:
            return [copy.copy(z) for _, z in sorted(self._zones.items())]

    def get_zone(self, name: str) -> Zone:
        with self._lock:
            return copy.copy(self._zone(name))

    def get_zone_file(self, name: str) -> str:
        with self._lock:
            self._zone(name)
            lines = [
                f"$ORIGIN {name}.",
                "@ 3600 IN SOA ns1.dnsimple.com. admin.dnsimple.com. 1 7200 3600 1209600 3600",
            ]
            for r in self._records.get(name, []):
                if r.priority:
                    lines.append(f"{r.display_name} {r.ttl} IN {r.type} {r.priority} {r.content}")
                else:
                    lines.append(f"{r.display_name} {r.ttl} IN {r.type} {r.content}")
            return "\n".join(lines)

    def check_zone_distribution(self, name: str) -> bool:
        with self._lock:
            return self._zone(name).active

    def activate_zone_dns(self, name: str) -> None:
        with self._lock:
            self._zone(name).active = True

    def deactivate_zone_dns(self, name: str) -> None:
        with self._lock:
            self._zone(name).active = False

    # -- records ----------------------------------------------------------

    def list_records(self, zone: str) -> list[ZoneRecord]:
        with self._lock:
            if zone not in self._records:
                raise _not_found("zone", zone)
            return sorted((copy.deepcopy(r) for r in self._records[zone]), key=lambda r: r.id)

    def get_record(self, zone: str, record_id: int) -> ZoneRecord:
        with self._lock:
            return copy.deepcopy(self._record(zone, record_id))

    def check_record_distribution(self, zone: str, record_id: int) -> bool:
        with self._lock:
            return self._record(zone, record_id).id % 2 == 0

    def delete_record(self, zone: str, record_id: int) -> None:
        with self._lock:
            record = self._record(zone, record_id)
            self._records[zone].remove(record)

    # -- helpers ----------------------------------------------------------

    def _zone(self, name: str) -> Zone:
        if name not in self._zones:
            raise _not_found("zone", name)
        return self._zones[name]

    def _record(self, zone: str, record_id: int) -> ZoneRecord:
        if zone not in self._records:
            raise _not_found("zone", zone)
        for r in self._records[zone]:
            if r.id == record_id:
                return r
        raise _not_found("record", record_id)

    def _seed(self) -> None:
        now = DEMO_TIMESTAMP
        for i, name in enumerate(DEMO_DOMAINS):
            self._domains[name] = Domain(
                id=FIRST_DOMAIN_ID + i,
                name=name,
                unicode_name=name,
                state="hosted",
                auto_renew=i % 3 == 0,
                private_whois=i % 2 == 0,
                expires_at="2027-12-31T00:00:00Z",
                created_at=now,
                updated_at=now,
            )
            self._zones[name] = Zone(
                id=FIRST_ZONE_ID + i,
                name=name,
                active=i % 4 != 0,
                reverse=False,
                secondary=i % 9 == 0,
                created_at=now,
                updated_at=now,
            )

            txt = SPF_TXT
            if i % 5 == 0:
                txt += " demo-segment=" + "abcdef0123456789" * 8

            base = FIRST_RECORD_ID + i * 10
            specs = [
                ("A", "", f"203.0.113.{(i % 200) + 10}", 3600, 0),
                ("CNAME", "www", f"{name}.", 3600, 0),
                ("MX", "", f"mail.{name}.", 3600, 10),
                ("TXT", "", txt, 3600, 0),
                ("TXT", "_acme-challenge", "challenge-token-" * 7 + str(i), 600, 0),
            ]
            self._records[name] = [
                ZoneRecord(
                    id=base + n,
                    type=rtype,
                    name=rname,
                    content=content,
                    ttl=ttl,
                    priority=priority,
                    zone_id=name,
                    created_at=now,
                    updated_at=now,
                )
                for n, (rtype, rname, content, ttl, priority) in enumerate(specs, start=1)
            ]
