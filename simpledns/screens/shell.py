"""Main shell: Home, Domains, Zones, Records and Help tabs."""

from __future__ import annotations

import logging
from typing import Optional, Union

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Vertical, VerticalScroll
from textual.message import Message
from textual.screen import Screen
from textual.widgets import Footer, Header, Label, ListItem, ListView, Static, TabbedContent, TabPane

from simpledns.screens.browser import BrowserPane, DomainSearchScreen
from simpledns.screens.domain_dashboard import DomainDashboardScreen
from simpledns.tui import styles
from simpledns.tui.browser import BrowserDetailLoaded, BrowserListLoaded, BrowserModel
from simpledns.tui.categories import Category
from simpledns.tui.domain_dashboard import (
    DashboardLoaded, MutationFinished, RecordDetailLoaded, RecordDistributionLoaded,
    ZoneDistributionLoaded, ZoneFileLoaded,
)
from simpledns.tui.help import HelpModel
from simpledns.tui.home import HomeModel, IdentityLoaded
from simpledns.tui.messages import Job, jobs
from simpledns.tui.shell import CATEGORY_TABS, ShellModel, Tab

logger = logging.getLogger(__name__)

BROWSER_TABS = (Tab.DOMAINS, Tab.ZONES, Tab.RECORDS)

MENU_TEXT = {
    Category.DOMAINS: "Browse registered domains and open a domain dashboard",
    Category.ZONES: "Inspect hosted zones, zone files and distribution",
    Category.RECORDS: "Pick a zone and inspect its DNS records",
}


class HomePane(Vertical):
    """Account identity and the category menu."""

    def __init__(self, model: HomeModel, **kwargs) -> None:
        super().__init__(**kwargs)
        self.model = model
        self._ready = False

    def compose(self) -> ComposeResult:
        yield Static("Account", classes="section-title")
        yield Static("", id="home-account", markup=True)
        yield Static("Browse", classes="section-title")
        yield ListView(
            *[
                ListItem(
                    Label(
                        f"  {styles.code(CATEGORY_TABS[c].number)}  {c.label:<9} {styles.subtitle(MENU_TEXT[c])}",
                        markup=True,
                    ),
                    id=f"home-{c.value}",
                )
                for c in self.model.items
            ],
            id="home-menu",
        )
        yield Static(
            styles.subtitle("Enter opens a category. Press / to search domains from anywhere."),
            markup=True,
        )

    def on_mount(self) -> None:
        self._ready = True
        self.sync()

    def sync(self) -> None:
        if not self._ready:
            return
        self.query_one("#home-account", Static).update("\n".join(self.model.account_lines()))

    def focus_main(self) -> None:
        self.query_one("#home-menu", ListView).focus()

    def move(self, delta: int) -> None:
        menu = self.query_one("#home-menu", ListView)
        if delta > 0:
            menu.action_cursor_down()
        else:
            menu.action_cursor_up()

    def activate(self) -> None:
        index = self.query_one("#home-menu", ListView).index
        if index is not None and 0 <= index < len(self.model.items):
            self.screen.show_tab(CATEGORY_TABS[self.model.items[index]])

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        event.stop()
        self.activate()


class HelpPane(VerticalScroll):
    """Shortcut reference and storage paths."""

    def __init__(self, model: HelpModel, **kwargs) -> None:
        super().__init__(**kwargs)
        self.model = model

    def compose(self) -> ComposeResult:
        yield Static("Keyboard Shortcuts", classes="section-title")
        yield Static("\n".join(self.model.shortcut_lines()), markup=True)
        yield Static("Tab Actions", classes="section-title")
        yield Static("\n".join(self.model.action_lines()), markup=True)
        yield Static("Storage", classes="section-title")
        yield Static("\n".join(self.model.path_lines()), markup=True)

    def focus_main(self) -> None:
        self.focus()

    def move(self, delta: int) -> None:
        self.scroll_relative(y=delta)

    def activate(self) -> None:
        pass


Pane = Union[HomePane, BrowserPane, HelpPane]


class ShellScreen(Screen):
    """Tabbed shell.  Runs every backend job and routes the results."""

    BINDINGS = [
        Binding("1,h", "show_tab('home')", "Home", show=True),
        Binding("2,d", "show_tab('domains')", "Domains", show=True),
        Binding("3,z", "show_tab('zones')", "Zones", show=True),
        Binding("4,R", "show_tab('records')", "Records", show=True),
        Binding("5,question_mark", "show_tab('help')", "Help", show=True),
        Binding("tab,l", "step_tab(1)", "Next tab", show=False),
        Binding("shift+tab,H", "step_tab(-1)", "Prev tab", show=False),
        Binding("slash", "search", "Search", show=True),
        Binding("r", "refresh", "Refresh", show=True),
        Binding("f", "zone_file", "Zone file", show=False),
        Binding("x", "distribution", "Distribution", show=False),
        Binding("escape,backspace", "go_back", "Back", show=False),
        Binding("j", "move(1)", show=False),
        Binding("k", "move(-1)", show=False),
        Binding("enter", "open", show=False),
    ]

    def __init__(self, model: ShellModel) -> None:
        super().__init__()
        self.model = model

    def compose(self) -> ComposeResult:
        yield Header()
        with Container(id="shell-container"):
            with TabbedContent(id="shell-tabs", initial=Tab.HOME.pane_id):
                with TabPane(f"{Tab.HOME.shortcut} Home", id=Tab.HOME.pane_id):
                    yield HomePane(self.model.home, id="home-pane")
                for tab in BROWSER_TABS:
                    with TabPane(f"{tab.shortcut} {tab.label}", id=tab.pane_id):
                        yield BrowserPane(self.model.model_for(tab), id=f"browser-{tab.name.lower()}")
                with TabPane(f"{Tab.HELP.shortcut} Help", id=Tab.HELP.pane_id):
                    yield HelpPane(self.model.help, id="help-pane")
        yield Footer()

    def on_mount(self) -> None:
        self.app.title = self.model.title()
        self.run_jobs(self.model.init())
        self.sync()
        self.call_after_refresh(self._focus_active)

    # ------------------------------------------------------------------
    # Jobs and results
    # ------------------------------------------------------------------

    def run_jobs(self, *items: Optional[Job]) -> None:
        for job in jobs(*items):
            self._run_job(job)

    @work(thread=True, group="backend")
    def _run_job(self, job: Job) -> None:
        """Run one backend job off the UI thread and post its result here."""
        try:
            msg = job()
        except Exception:
            logger.exception("Background job %r raised", job)
            return
        if msg is not None:
            self.post_message(msg)

    @on(IdentityLoaded)
    @on(BrowserListLoaded)
    @on(BrowserDetailLoaded)
    @on(DashboardLoaded)
    @on(RecordDetailLoaded)
    @on(ZoneFileLoaded)
    @on(ZoneDistributionLoaded)
    @on(RecordDistributionLoaded)
    @on(MutationFinished)
    def _on_result(self, message: Message) -> None:
        message.stop()
        self.run_jobs(self.model.apply(message))
        self.sync()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def sync(self) -> None:
        """Bring every pane and any screen stacked above in line with the models."""
        self.query_one(HomePane).sync()
        for pane in self.query(BrowserPane):
            pane.sync()
        self._sync_dashboard()
        for screen in list(self.app.screen_stack):
            if isinstance(screen, (DomainDashboardScreen, DomainSearchScreen)):
                screen.sync()

    def _dashboard_screen(self) -> Optional[DomainDashboardScreen]:
        for screen in self.app.screen_stack:
            if isinstance(screen, DomainDashboardScreen):
                return screen
        return None

    def _sync_dashboard(self) -> None:
        dash = self.model.domains.dashboard
        shown = self._dashboard_screen()
        if shown is not None and shown.model is not dash:
            while self.app.screen is not shown:
                self.app.pop_screen()
            self.app.pop_screen()
            shown = None
        if dash is not None and shown is None and self.model.active is Tab.DOMAINS and self.app.screen is self:
            self.app.push_screen(DomainDashboardScreen(dash, self))

    def _pane(self, tab: Tab) -> Pane:
        if tab is Tab.HOME:
            return self.query_one(HomePane)
        if tab is Tab.HELP:
            return self.query_one(HelpPane)
        return self.query_one(f"#browser-{tab.name.lower()}", BrowserPane)

    def _browser(self) -> Optional[BrowserPane]:
        pane = self._pane(self.model.active)
        return pane if isinstance(pane, BrowserPane) else None

    def _focus_active(self) -> None:
        self._pane(self.model.active).focus_main()

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def show_tab(self, tab: Tab) -> None:
        self.run_jobs(self.model.activate(tab))
        tabs = self.query_one("#shell-tabs", TabbedContent)
        if tabs.active != tab.pane_id:
            tabs.active = tab.pane_id
        self.sync()
        self.call_after_refresh(self._focus_active)

    @on(TabbedContent.TabActivated, "#shell-tabs")
    def _on_tab_activated(self, event: TabbedContent.TabActivated) -> None:
        tab = Tab.for_pane(event.tabbed_content.active)
        if tab is not None and tab is not self.model.active:
            self.show_tab(tab)

    def close_dashboard(self) -> None:
        self.model.domains.close_dashboard()
        self.sync()

    def leave_dashboard(self, name: str) -> None:
        """Tab switch from the dashboard; the dashboard stays open underneath Domains."""
        tab = Tab[name.upper()]
        if tab is Tab.DOMAINS:
            return
        shown = self._dashboard_screen()
        if shown is not None and self.app.screen is shown:
            self.app.pop_screen()
        self.show_tab(tab)

    def action_show_tab(self, name: str) -> None:
        self.show_tab(Tab[name.upper()])

    def action_step_tab(self, delta: int) -> None:
        self.show_tab(self.model.step_tab(delta))

    def action_search(self) -> None:
        self.run_jobs(*self.model.open_global_search())
        tabs = self.query_one("#shell-tabs", TabbedContent)
        if tabs.active != Tab.DOMAINS.pane_id:
            tabs.active = Tab.DOMAINS.pane_id
        self.sync()
        self.app.push_screen(DomainSearchScreen(self.model.domains, self))

    def action_go_back(self) -> None:
        active = self.model.active
        browser = self.model.model_for(active)
        if isinstance(browser, BrowserModel) and browser.can_go_back():
            self.run_jobs(browser.back_to_picker())
            self.sync()
        elif active is not Tab.HOME:
            self.show_tab(Tab.HOME)

    def action_move(self, delta: int) -> None:
        self._pane(self.model.active).move(delta)

    def action_open(self) -> None:
        self._pane(self.model.active).activate()

    def action_refresh(self) -> None:
        browser = self._browser()
        if browser is not None:
            browser.refresh_list()

    def action_zone_file(self) -> None:
        browser = self._browser()
        if browser is not None:
            browser.zone_file()

    def action_distribution(self) -> None:
        browser = self._browser()
        if browser is not None:
            browser.distribution()
