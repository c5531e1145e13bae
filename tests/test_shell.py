"""Tests for the shell: lazy tab init, result routing and the tabbed screen."""

import threading

import pytest
from textual.widgets import DataTable, Input, LoadingIndicator, TabbedContent

from conftest import drain, run_job, settle

from simpledns.app import SimpleDNSApp
from simpledns.demo_backend import DemoBackend
from simpledns.screens.browser import DomainSearchScreen
from simpledns.screens.domain_dashboard import ConfirmMutationScreen, DomainDashboardScreen
from simpledns.screens.shell import ShellScreen
from simpledns.tui.browser import BrowserListLoaded, BrowserScreen
from simpledns.tui.categories import Category
from simpledns.tui.domain_dashboard import Section
from simpledns.tui.home import IdentityLoaded
from simpledns.tui.shell import ShellModel, Tab


def started(backend, store):
    shell = ShellModel(backend, store)
    drain(shell, shell.init())
    return shell


class GatedBackend(DemoBackend):
    """Demo backend whose domain listing can be held until released."""

    def __init__(self):
        super().__init__()
        self.gate = threading.Event()
        self.gate.set()

    def list_domains(self):
        self.gate.wait(timeout=10)
        return super().list_domains()


class TestLazyInit:

    def test_home_is_initialized_on_start(self, backend, store):
        shell = ShellModel(backend, store)
        job = shell.init()
        assert shell.initialized == {Tab.HOME}
        assert job is not None
        drain(shell, job)
        assert shell.home.whoami.account.id == 424242

    def test_first_visit_loads_once(self, backend, store):
        shell = started(backend, store)
        for tab in (Tab.DOMAINS, Tab.ZONES, Tab.RECORDS):
            job = shell.activate(tab)
            assert shell.active is tab
            assert job is not None
            drain(shell, job)

        for tab in Tab:
            assert shell.activate(tab) is None

    def test_help_has_no_load(self, backend, store):
        shell = started(backend, store)
        assert shell.activate(Tab.HELP) is None
        assert shell.active is Tab.HELP

    def test_identity_passed_in_skips_lookup(self, backend, store):
        shell = ShellModel(backend, store, backend.identity())
        assert shell.init() is None


class TestTabOrder:

    def test_step_tab_wraps(self, backend, store):
        shell = started(backend, store)
        assert shell.step_tab(-1) is Tab.HELP
        shell.active = Tab.HELP
        assert shell.step_tab(1) is Tab.HOME

    def test_tab_lookup(self):
        assert Tab.for_pane("tab-records") is Tab.RECORDS
        assert Tab.for_pane("nope") is None
        assert Tab.RECORDS.shortcut == "4/R"

    def test_global_search_switches_to_domains(self, backend, store):
        shell = started(backend, store)
        pending = shell.open_global_search()
        assert shell.active is Tab.DOMAINS
        assert shell.domains.search.visible
        assert len(pending) == 1
        drain(shell, *pending)
        assert len(shell.domains.search.matches) == 25

    def test_title_marks_demo(self, backend, store):
        assert started(backend, store).title() == "Simple - a TUI for DNSimple.com (demo)"


class TestRouting:

    def test_results_reach_inactive_tabs(self, backend, store):
        shell = started(backend, store)
        load = shell.activate(Tab.ZONES)
        shell.activate(Tab.HOME)
        msg = run_job(load)
        assert isinstance(msg, BrowserListLoaded)
        shell.apply(msg)
        assert shell.active is Tab.HOME
        assert len(shell.zones.items) == 25
        assert shell.records.items == []

    def test_identity_goes_to_home(self, backend, store):
        shell = started(backend, store)
        shell.activate(Tab.HELP)
        shell.apply(IdentityLoaded(error="offline"))
        assert shell.home.error == "offline"

    def test_dashboard_results_follow_the_domain(self, backend, store):
        shell = started(backend, store)
        drain(shell, shell.activate(Tab.DOMAINS))
        shell.domains.move(1)
        job = shell.domains.activate()
        shell.activate(Tab.RECORDS)
        drain(shell, job)
        assert shell.domains.dashboard.data_domain.name == "acme.dev"

    def test_records_end_to_end(self, backend, store):
        shell = started(backend, store)
        drain(shell, shell.activate(Tab.RECORDS))
        records = shell.browser_for(Category.RECORDS)
        records.move(1)
        drain(shell, records.activate())
        assert records.screen is BrowserScreen.RECORDS_LIST
        assert [i.id for i in records.items] == sorted(i.id for i in records.items)
        assert len(records.items) == 5
        records.move(2)
        drain(shell, records.activate())
        assert "Priority: 10" in records.detail_body


@pytest.mark.anyio
class TestShellScreen:

    async def test_tabs_switch_and_load_lazily(self, store):
        app = SimpleDNSApp(DemoBackend(), store)
        async with app.run_test(size=(120, 40)) as pilot:
            await settle(app, pilot)
            shell = app.shell
            assert isinstance(app.screen, ShellScreen)
            assert shell.model.initialized == {Tab.HOME}

            await pilot.press("2")
            await settle(app, pilot)
            assert shell.model.active is Tab.DOMAINS
            assert shell.query_one("#shell-tabs", TabbedContent).active == Tab.DOMAINS.pane_id
            assert shell.query_one("#browser-domains DataTable", DataTable).row_count == 25

            await pilot.press("R")
            await settle(app, pilot)
            assert shell.model.active is Tab.RECORDS
            assert shell.query_one("#shell-tabs", TabbedContent).active == Tab.RECORDS.pane_id

            await pilot.press("shift+tab")
            await settle(app, pilot)
            assert shell.model.active is Tab.ZONES

            await pilot.press("escape")
            await settle(app, pilot)
            assert shell.model.active is Tab.HOME

    async def test_home_menu_opens_category(self, store):
        app = SimpleDNSApp(DemoBackend(), store)
        async with app.run_test(size=(120, 40)) as pilot:
            await settle(app, pilot)
            await pilot.press("j", "j", "enter")
            await settle(app, pilot)
            assert app.shell.model.active is Tab.RECORDS
            assert app.shell.model.records.items

    async def test_dashboard_opens_and_closes(self, store):
        app = SimpleDNSApp(DemoBackend(), store)
        async with app.run_test(size=(120, 40)) as pilot:
            await settle(app, pilot)
            await pilot.press("2")
            await settle(app, pilot)
            await pilot.press("j", "enter")
            await settle(app, pilot)
            assert isinstance(app.screen, DomainDashboardScreen)
            dash = app.shell.model.domains.dashboard
            assert dash.data_domain.name == "acme.dev"
            assert app.screen.query_one("#dashboard-records", DataTable).row_count == 5

            await pilot.press("z")
            await settle(app, pilot)
            assert dash.section is Section.ZONE
            assert app.screen.query_one("#dashboard-sections", TabbedContent).active == Section.ZONE.pane_id

            await pilot.press("escape")
            await settle(app, pilot)
            assert isinstance(app.screen, ShellScreen)
            assert app.shell.model.domains.dashboard is None

    async def test_tab_switch_keeps_dashboard_open(self, store):
        app = SimpleDNSApp(DemoBackend(), store)
        async with app.run_test(size=(120, 40)) as pilot:
            await settle(app, pilot)
            await pilot.press("2")
            await settle(app, pilot)
            await pilot.press("enter")
            await settle(app, pilot)
            dash = app.shell.model.domains.dashboard

            await pilot.press("3")
            await settle(app, pilot)
            assert isinstance(app.screen, ShellScreen)
            assert app.shell.model.active is Tab.ZONES
            assert app.shell.model.domains.dashboard is dash

            await pilot.press("2")
            await settle(app, pilot)
            assert isinstance(app.screen, DomainDashboardScreen)
            assert app.screen.model is dash

    async def test_confirm_requires_typed_word(self, store):
        app = SimpleDNSApp(DemoBackend(), store)
        async with app.run_test(size=(120, 40)) as pilot:
            await settle(app, pilot)
            await pilot.press("2")
            await settle(app, pilot)
            await pilot.press("j", "enter")
            await settle(app, pilot)
            dash = app.shell.model.domains.dashboard

            await pilot.press("c", "D")
            await settle(app, pilot)
            assert isinstance(app.screen, ConfirmMutationScreen)

            await pilot.press(*"nope", "enter")
            await settle(app, pilot)
            assert dash.confirm.error == "Type confirm to proceed"
            assert len(dash.records) == 5

            app.screen.query_one("#confirm-input", Input).value = ""
            await pilot.press(*"confirm", "enter")
            await settle(app, pilot)
            assert not dash.confirm.visible
            assert isinstance(app.screen, DomainDashboardScreen)
            assert len(dash.records) == 4

    async def test_confirm_escape_cancels(self, store):
        app = SimpleDNSApp(DemoBackend(), store)
        async with app.run_test(size=(120, 40)) as pilot:
            await settle(app, pilot)
            await pilot.press("2")
            await settle(app, pilot)
            await pilot.press("enter")
            await settle(app, pilot)
            await pilot.press("a", "j", "j", "j", "enter")
            await settle(app, pilot)
            assert isinstance(app.screen, ConfirmMutationScreen)

            await pilot.press("escape")
            await settle(app, pilot)
            assert isinstance(app.screen, DomainDashboardScreen)
            assert not app.shell.model.domains.dashboard.confirm.visible

    async def test_search_opens_dashboard(self, store):
        app = SimpleDNSApp(DemoBackend(), store)
        async with app.run_test(size=(120, 40)) as pilot:
            await settle(app, pilot)
            await pilot.press("slash")
            await settle(app, pilot)
            assert isinstance(app.screen, DomainSearchScreen)
            assert app.shell.model.active is Tab.DOMAINS

            await pilot.press(*"acme")
            await settle(app, pilot)
            results = app.screen.query_one("#search-results", DataTable)
            assert results.row_count >= 1

            await pilot.press("enter")
            await settle(app, pilot)
            assert isinstance(app.screen, DomainDashboardScreen)
            assert app.screen.model.domain == "acme.dev"

    async def test_reload_finishing_under_dashboard_clears_loading(self, store):
        backend = GatedBackend()
        app = SimpleDNSApp(backend, store)
        async with app.run_test(size=(120, 40)) as pilot:
            await settle(app, pilot)
            await pilot.press("2")
            await settle(app, pilot)
            domains = app.shell.model.domains
            assert len(domains.items) == 25

            backend.gate.clear()
            await pilot.press("r")
            await pilot.pause()
            assert domains.loading
            backend.delete_domain("acme.dev")

            await pilot.press("slash")
            await pilot.pause()
            await pilot.press(*"beta")
            await pilot.pause()
            await pilot.press("enter")
            await pilot.pause()
            assert isinstance(app.screen, DomainDashboardScreen)

            backend.gate.set()
            await settle(app, pilot)
            await pilot.press("escape")
            await settle(app, pilot)

            assert isinstance(app.screen, ShellScreen)
            assert not domains.loading
            assert not app.shell.query_one("#browser-domains .browser-loading", LoadingIndicator).display
            assert "acme.dev" not in [item.key for item in domains.items]
            table = app.shell.query_one("#browser-domains DataTable", DataTable)
            assert table.row_count == 24

            before = domains.selected
            await pilot.press("j")
            await settle(app, pilot)
            assert domains.selected == before + 1
            assert table.cursor_row == before + 1
