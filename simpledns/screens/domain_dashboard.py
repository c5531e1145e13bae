"""Full-screen domain dashboard and its mutation confirmation modal."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from rich.text import Text
from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen, Screen
from textual.widgets import (
    Button, DataTable, Footer, Header, Input, Label, ListItem, ListView,
    LoadingIndicator, Static, TabbedContent, TabPane,
)

from simpledns.tui import styles
from simpledns.tui.domain_dashboard import (
    CONFIRM_WORD, DashboardAction, DomainDashboardModel, Section,
)
from simpledns.tui.layout import truncate_text, wrap_label_value
from simpledns.tui.messages import Job

if TYPE_CHECKING:
    from simpledns.screens.shell import ShellScreen

DIAGNOSTICS_MAX_LINES = 400
RECORD_COLUMNS = [("Type", 7), ("Name", 22), ("TTL", 7), ("Content", 44), ("Priority", 8)]


def _flag(value: bool) -> str:
    return str(value).lower()


# ---------------------------------------------------------------------------
# Section text
# ---------------------------------------------------------------------------

def overview_markup(model: DomainDashboardModel) -> str:
    """Domain and zone summary; only the error when the domain failed to load."""
    if model.data_domain is None:
        if model.error:
            return "\n".join([styles.error("Failed to load dashboard"), styles.value(model.error)])
        return styles.subtitle("Loading dashboard...")

    d = model.data_domain
    lines = [
        styles.heading("Overview"),
        "",
        styles.kv("Domain ID", d.id),
        styles.kv("Name", d.name),
        styles.kv("State", d.state),
        styles.kv("Auto-Renew", _flag(d.auto_renew)),
        styles.kv("Private WHOIS", _flag(d.private_whois)),
    ]
    if d.expires_at:
        lines.append(styles.kv("Expires", d.expires_at))
    lines += [styles.kv("Created", d.created_at), styles.kv("Updated", d.updated_at), ""]

    z = model.data_zone
    if z is None:
        lines.append(styles.warning("Zone not available for this domain"))
    else:
        lines += [
            styles.heading("Zone Summary"),
            "",
            styles.kv("Zone ID", z.id),
            styles.kv("Active", _flag(z.active)),
            styles.kv("Reverse", _flag(z.reverse)),
            styles.kv("Secondary", _flag(z.secondary)),
            styles.kv("Records loaded", len(model.records)),
        ]
    return "\n".join(lines)


def zone_markup(model: DomainDashboardModel) -> str:
    z = model.data_zone
    if z is None:
        return styles.warning("Zone not available.")
    return "\n".join([
        styles.kv("ID", z.id),
        styles.kv("Name", z.name),
        styles.kv("Active", _flag(z.active)),
        styles.kv("Reverse", _flag(z.reverse)),
        styles.kv("Secondary", _flag(z.secondary)),
        styles.kv("Created", z.created_at),
        styles.kv("Updated", z.updated_at),
        "",
        styles.subtitle("Use f for zone file, x for zone distribution, and the Actions tab for mutations."),
    ])


def record_detail_markup(model: DomainDashboardModel) -> str:
    rec = model.selected_record_obj()
    if rec is None:
        return styles.subtitle("No records loaded or zone unavailable.")
    lines = [
        styles.heading("Selected Record"),
        styles.subtitle(f"{model.selected_record + 1} of {len(model.records)}"),
        "",
        styles.kv("ID", rec.id),
        f"{styles.label('Type:')} {styles.rtype(rec.type)}",
        styles.kv("Name", rec.display_name),
    ]
    lines += [styles.value(line) for line in wrap_label_value("Content: ", rec.content, 60)]
    lines.append(styles.kv("TTL", rec.ttl))
    if rec.priority:
        lines.append(styles.kv("Priority", rec.priority))
    detail = model.record_detail
    if detail is not None and detail.id == rec.id:
        if detail.regions:
            lines.append(styles.kv("Regions", ", ".join(detail.regions)))
        lines += [
            styles.kv("System", _flag(detail.system_record)),
            styles.kv("Created", detail.created_at),
            styles.kv("Updated", detail.updated_at),
        ]
    else:
        lines += ["", styles.subtitle("Press Enter for the full record.")]
    return "\n".join(lines)


def diagnostics_markup(model: DomainDashboardModel) -> str:
    if not model.diag_title and not model.diag_body:
        return "\n".join([
            styles.subtitle("No diagnostic output yet."),
            "",
            f"{styles.code('f')}  Fetch zone file",
            f"{styles.code('x')}  Check zone distribution",
            styles.value("In the Records section, x checks the selected record's distribution"),
        ])
    lines = []
    if model.diag_title:
        lines += [styles.heading(model.diag_title), ""]
    lines.append(styles.clipped_block(model.diag_body, DIAGNOSTICS_MAX_LINES))
    return "\n".join(lines)


def action_markup(action: DashboardAction) -> str:
    if not action.enabled:
        return f"[dim]{styles.value(action.label)} (unavailable)[/dim]\n   [dim]{styles.value(action.disabled_reason)}[/dim]"
    line = styles.value(action.label)
    if action.hint:
        line += f"\n   {styles.subtitle(action.hint)}"
    return line


def status_markup(model: DomainDashboardModel) -> str:
    lines = []
    if model.status:
        lines.append(styles.success(model.status))
    if model.error and model.data_domain is not None:
        lines.append(styles.error(model.error))
    if model.warnings:
        lines.append(styles.warning("Warnings"))
        lines += [styles.value(f"- {w}") for w in model.warnings]
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Modal: typed confirmation for mutations
# ---------------------------------------------------------------------------

class ConfirmMutationScreen(ModalScreen[None]):
    """Runs the pending mutation only once ``confirm`` has been typed."""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=True),
    ]

    def __init__(self, model: DomainDashboardModel, dashboard: "DomainDashboardScreen") -> None:
        super().__init__()
        self.model = model
        self._dashboard = dashboard
        self._ready = False

    def compose(self) -> ComposeResult:
        confirm = self.model.confirm
        with Container(classes="modal-container"):
            with Vertical(classes="modal-box"):
                yield Static(styles.value(confirm.title), classes="modal-title", markup=True)
                yield Static(styles.value(confirm.body), markup=True)
                yield Static(
                    f"\nType [bold]{CONFIRM_WORD}[/bold] and press Enter to proceed.",
                    markup=True,
                )
                yield Input(placeholder=CONFIRM_WORD, id="confirm-input")
                yield LoadingIndicator(id="confirm-busy")
                yield Static("", id="confirm-error", classes="error-line", markup=True)
                with Horizontal(classes="modal-buttons"):
                    yield Button("Confirm", variant="error", id="confirm-yes-btn")
                    yield Button("Cancel", variant="default", id="confirm-no-btn")

    def on_mount(self) -> None:
        self._ready = True
        self.sync()
        self.query_one("#confirm-input", Input).focus()

    def sync(self) -> None:
        if not self._ready:
            return
        confirm = self.model.confirm
        self.query_one("#confirm-busy", LoadingIndicator).display = confirm.busy
        self.query_one("#confirm-input", Input).disabled = confirm.busy
        self.query_one("#confirm-yes-btn", Button).disabled = confirm.busy
        self.query_one("#confirm-no-btn", Button).disabled = confirm.busy
        self.query_one("#confirm-error", Static).update(
            styles.error(confirm.error) if confirm.error else ""
        )
        if not confirm.busy and confirm.error:
            self.query_one("#confirm-input", Input).focus()

    @on(Input.Submitted, "#confirm-input")
    @on(Button.Pressed, "#confirm-yes-btn")
    def _on_submit(self, event) -> None:
        text = self.query_one("#confirm-input", Input).value
        self._dashboard.run(self.model.submit_confirm(text))

    @on(Button.Pressed, "#confirm-no-btn")
    def _on_no(self, event: Button.Pressed) -> None:
        self.action_cancel()

    def action_cancel(self) -> None:
        if self.model.cancel_confirm():
            self._dashboard.sync()


# ---------------------------------------------------------------------------
# Dashboard screen
# ---------------------------------------------------------------------------

class DomainDashboardScreen(Screen):
    """Single-domain takeover opened from the Domains list."""

    BINDINGS = [
        Binding("escape", "go_back", "Back", show=True),
        Binding("backspace", "go_back", "Back", show=False),
        Binding("o,O", "section('overview')", "Overview", show=True),
        Binding("c,C", "section('records')", "Records", show=True),
        Binding("z,Z", "section('zone')", "Zone", show=True),
        Binding("g,G", "section('diagnostics')", "Diagnostics", show=True),
        Binding("a,A", "section('actions')", "Actions", show=True),
        Binding("R", "refresh", "Refresh", show=True),
        Binding("f", "zone_file", "Zone file", show=True),
        Binding("x", "distribution", "Distribution", show=True),
        Binding("D", "delete_record", "Delete record", show=True),
        Binding("j", "move(1)", show=False),
        Binding("k", "move(-1)", show=False),
        Binding("enter", "open", show=False),
        Binding("slash", "search", "Search", show=False),
        Binding("1", "switch_tab('home')", show=False),
        Binding("3", "switch_tab('zones')", show=False),
        Binding("4", "switch_tab('records')", show=False),
        Binding("5,question_mark", "switch_tab('help')", show=False),
        Binding("tab", "step_tab(1)", show=False),
        Binding("shift+tab", "step_tab(-1)", show=False),
    ]

    def __init__(self, model: DomainDashboardModel, shell: "ShellScreen") -> None:
        super().__init__()
        self.model = model
        self._shell = shell
        self._confirm_screen: Optional[ConfirmMutationScreen] = None
        self._shown_records: tuple = ()
        self._ready = False

    def compose(self) -> ComposeResult:
        yield Header()
        with Container(id="dashboard-container"):
            yield Static(
                f"Domain Dashboard  [dim]{styles.value(self.model.domain)}  |  full-screen domain operations[/dim]",
                classes="section-title",
                markup=True,
            )
            yield LoadingIndicator(id="dashboard-loading")
            yield Static("", id="dashboard-status", classes="status-line", markup=True)
            with TabbedContent(id="dashboard-sections", initial=Section.OVERVIEW.pane_id):
                with TabPane("Overview (o)", id=Section.OVERVIEW.pane_id):
                    with VerticalScroll():
                        yield Static("", id="overview-body", markup=True)
                with TabPane("Records (c)", id=Section.RECORDS.pane_id):
                    with Horizontal(classes="browser-main"):
                        yield DataTable(id="dashboard-records", classes="browser-list")
                        with VerticalScroll(classes="detail-panel"):
                            yield Static("", id="record-detail", markup=True)
                with TabPane("Zone (z)", id=Section.ZONE.pane_id):
                    with VerticalScroll():
                        yield Static("", id="zone-body", markup=True)
                with TabPane("Diagnostics (g)", id=Section.DIAGNOSTICS.pane_id):
                    with VerticalScroll():
                        yield Static("", id="diagnostics-body", markup=True)
                with TabPane("Actions (a)", id=Section.ACTIONS.pane_id):
                    yield ListView(
                        *[
                            ListItem(Label(action_markup(a), markup=True), id=f"action-{a.id}")
                            for a in self.model.available_actions()
                        ],
                        id="dashboard-actions",
                    )
                    yield Static(
                        styles.subtitle(f"Mutations open a confirm dialog and require typing '{CONFIRM_WORD}'."),
                        markup=True,
                    )
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#dashboard-records", DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        for name, width in RECORD_COLUMNS:
            table.add_column(Text(name, style="bold cyan"), key=name.lower(), width=width)
        self._ready = True
        self.sync()

    def run(self, job: Optional[Job]) -> None:
        self._shell.run_jobs(job)
        self.sync()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def sync(self) -> None:
        if not self._ready:
            return
        m = self.model
        self.query_one("#dashboard-loading", LoadingIndicator).display = m.loading
        self.query_one("#dashboard-status", Static).update(status_markup(m))
        tabs = self.query_one("#dashboard-sections", TabbedContent)
        if tabs.active != m.section.pane_id:
            tabs.active = m.section.pane_id
        self.query_one("#overview-body", Static).update(overview_markup(m))
        self.query_one("#zone-body", Static).update(zone_markup(m))
        self.query_one("#diagnostics-body", Static).update(diagnostics_markup(m))
        self.query_one("#record-detail", Static).update(record_detail_markup(m))
        self._sync_records()
        self._sync_actions()
        self._sync_confirm()

    def _sync_records(self) -> None:
        table = self.query_one("#dashboard-records", DataTable)
        rows = tuple((r.id, r.type, r.display_name, r.ttl, r.content, r.priority) for r in self.model.records)
        if rows != self._shown_records:
            self._shown_records = rows
            table.clear()
            for r in self.model.records:
                table.add_row(
                    Text(r.type, style=styles.RTYPE_COLORS.get(r.type, "white")),
                    Text(truncate_text(r.display_name, 22)),
                    str(r.ttl),
                    Text(truncate_text(r.content, 44)),
                    str(r.priority or ""),
                    key=str(r.id),
                )
        if self.model.records and table.cursor_row != self.model.selected_record:
            table.move_cursor(row=self.model.selected_record)

    def _sync_actions(self) -> None:
        actions = self.model.available_actions()
        for action in actions:
            item = self.query_one(f"#action-{action.id}", ListItem)
            item.query_one(Label).update(action_markup(action))
        lv = self.query_one("#dashboard-actions", ListView)
        if lv.index != self.model.selected_action:
            lv.index = self.model.selected_action

    def _sync_confirm(self) -> None:
        confirm = self._confirm_screen
        if self.model.confirm.visible:
            if confirm is None:
                self._confirm_screen = ConfirmMutationScreen(self.model, self)
                self.app.push_screen(self._confirm_screen)
            else:
                confirm.sync()
        elif confirm is not None:
            self._confirm_screen = None
            if self.app.screen is confirm:
                confirm.dismiss()

    def _focus_section(self) -> None:
        if self.model.section is Section.RECORDS:
            self.query_one("#dashboard-records", DataTable).focus()
        elif self.model.section is Section.ACTIONS:
            self.query_one("#dashboard-actions", ListView).focus()

    # ------------------------------------------------------------------
    # Widget events
    # ------------------------------------------------------------------

    @on(TabbedContent.TabActivated, "#dashboard-sections")
    def _on_section_activated(self, event: TabbedContent.TabActivated) -> None:
        section = Section.for_pane(event.tabbed_content.active)
        if section is not None and section is not self.model.section:
            self.model.set_section(section)
            self.call_after_refresh(self._focus_section)

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        if event.cursor_row != event.data_table.cursor_row:
            return  # superseded by a later cursor move
        if event.cursor_row != self.model.selected_record:
            self.model.select_record(event.cursor_row)
            self.query_one("#record-detail", Static).update(record_detail_markup(self.model))

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        self.model.select_record(event.cursor_row)
        self.run(self.model.open_record_detail())

    def on_list_view_highlighted(self, event: ListView.Highlighted) -> None:
        index = event.list_view.index
        if index is not None:
            self.model.select_action(index)

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        index = event.list_view.index
        if index is not None:
            self.model.select_action(index)
        self.run(self.model.run_action())

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def action_go_back(self) -> None:
        self._shell.close_dashboard()

    def action_section(self, name: str) -> None:
        self.model.set_section(Section[name.upper()])
        self.sync()
        self.call_after_refresh(self._focus_section)

    def action_refresh(self) -> None:
        self.run(self.model.request_refresh())

    def action_zone_file(self) -> None:
        self.run(self.model.zone_file())

    def action_distribution(self) -> None:
        self.run(self.model.distribution())

    def action_delete_record(self) -> None:
        if self.model.request_record_delete():
            self.sync()

    def action_move(self, delta: int) -> None:
        if self.model.section is Section.RECORDS:
            self.model.move_record(delta)
        elif self.model.section is Section.ACTIONS:
            self.model.move_action(delta)
        self.sync()

    def action_open(self) -> None:
        if self.model.section is Section.RECORDS:
            self.run(self.model.open_record_detail())
        elif self.model.section is Section.ACTIONS:
            self.run(self.model.run_action())

    def action_search(self) -> None:
        self._shell.action_search()

    def action_switch_tab(self, name: str) -> None:
        self._shell.leave_dashboard(name)

    def action_step_tab(self, delta: int) -> None:
        self._shell.leave_dashboard(self._shell.model.step_tab(delta).name)
