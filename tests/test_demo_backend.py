"""Tests for the in-memory demo backend."""

import pytest

from simpledns.backend import BackendError
from simpledns.demo_backend import DEMO_DOMAINS, FIRST_RECORD_ID, DemoBackend


class TestDemoDomains:

    def test_listing_is_sorted_and_stable(self, backend):
        first = backend.list_domains()
        second = backend.list_domains()
        assert first == second
        names = [d.name for d in first]
        assert names == sorted(names)
        assert len(names) == len(DEMO_DOMAINS)

    def test_two_instances_are_identical(self):
        assert DemoBackend().list_domains() == DemoBackend().list_domains()

    def test_returned_objects_are_copies(self, backend):
        backend.list_domains()[0].name = "mutated"
        assert backend.list_domains()[0].name != "mutated"

    def test_delete_domain_cascades(self, backend):
        backend.delete_domain("acme.dev")
        assert "acme.dev" not in [d.name for d in backend.list_domains()]
        assert "acme.dev" not in [z.name for z in backend.list_zones()]
        with pytest.raises(BackendError, match="not found"):
            backend.list_records("acme.dev")
        with pytest.raises(BackendError):
            backend.get_domain("acme.dev")

    def test_unknown_domain(self, backend):
        with pytest.raises(BackendError, match=r"domain not found \(demo\): nope.example"):
            backend.get_domain("nope.example")

    def test_identity_is_an_account_token(self, backend):
        whoami = backend.identity()
        assert whoami.account is not None
        assert whoami.account.id == 424242
        assert backend.is_demo


class TestDemoZones:

    def test_activation_flips_flag(self, backend):
        zone = backend.get_zone("absurdophile.com")
        assert zone.active is False
        assert backend.check_zone_distribution("absurdophile.com") is False

        backend.activate_zone_dns("absurdophile.com")
        assert backend.get_zone("absurdophile.com").active is True
        assert backend.check_zone_distribution("absurdophile.com") is True

        backend.deactivate_zone_dns("absurdophile.com")
        assert backend.get_zone("absurdophile.com").active is False

    def test_zone_file_lists_records(self, backend):
        text = backend.get_zone_file("acme.dev")
        lines = text.split("\n")
        assert lines[0] == "$ORIGIN acme.dev."
        assert "SOA" in lines[1]
        assert len(lines) == 2 + 5
        assert "@ 3600 IN MX 10 mail.acme.dev." in lines


class TestDemoRecords:

    def test_acme_has_five_records_in_id_order(self, backend):
        records = backend.list_records("acme.dev")
        ids = [r.id for r in records]
        base = FIRST_RECORD_ID + 10
        assert ids == [base + 1, base + 2, base + 3, base + 4, base + 5]
        assert [r.type for r in records] == ["A", "CNAME", "MX", "TXT", "TXT"]

    def test_mx_priority(self, backend):
        mx = [r for r in backend.list_records("acme.dev") if r.type == "MX"][0]
        assert backend.get_record("acme.dev", mx.id).priority == 10

    def test_record_distribution_is_even_id(self, backend):
        records = backend.list_records("acme.dev")
        for r in records:
            assert backend.check_record_distribution("acme.dev", r.id) is (r.id % 2 == 0)

    def test_delete_record(self, backend):
        target = backend.list_records("acme.dev")[0].id
        backend.delete_record("acme.dev", target)
        assert target not in [r.id for r in backend.list_records("acme.dev")]
        with pytest.raises(BackendError, match="record not found"):
            backend.get_record("acme.dev", target)
