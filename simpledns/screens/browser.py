"""Resource browser pane (Domains, Zones, Records) and the domain search modal."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import DataTable, Input, LoadingIndicator, Static

from simpledns.tui import styles
from simpledns.tui.browser import BrowserModel
from simpledns.tui.layout import window_range

if TYPE_CHECKING:
    from simpledns.screens.shell import ShellScreen

DETAIL_MAX_LINES = 200


def detail_markup(model: BrowserModel) -> str:
    if not model.detail_title and not model.detail_body:
        return styles.subtitle(model.empty_detail_hint())
    lines = []
    if model.detail_title:
        lines += [styles.heading(model.detail_title), ""]
    lines.append(styles.clipped_block(model.detail_body, DETAIL_MAX_LINES))
    return "\n".join(lines)


def showing_text(total: int, selected: int, capacity: int) -> str:
    if total == 0:
        return "No items"
    start, end = window_range(total, selected, capacity)
    return f"Showing {start + 1}-{end} of {total}"


class BrowserPane(Vertical):
    """List and detail view over one :class:`BrowserModel`."""

    def __init__(self, model: BrowserModel, **kwargs) -> None:
        super().__init__(**kwargs)
        self.model = model
        self._columns: tuple[str, ...] = ()
        self._rows: tuple = ()
        self._ready = False

    @property
    def shell(self) -> "ShellScreen":
        return self.screen

    def compose(self) -> ComposeResult:
        yield Static("", classes="browser-header section-title", markup=True)
        yield Static("", classes="browser-subtitle subtitle", markup=True)
        yield LoadingIndicator(classes="browser-loading")
        with Horizontal(classes="browser-main"):
            with Vertical(classes="browser-list"):
                yield DataTable(classes="browser-table")
                yield Static("", classes="browser-footer subtitle", markup=True)
            with VerticalScroll(classes="detail-panel"):
                yield Static("", classes="browser-detail", markup=True)
        yield Static("", classes="browser-status status-line", markup=True)

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        self._ready = True
        self.sync()

    def focus_main(self) -> None:
        self.query_one(DataTable).focus()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def sync(self) -> None:
        if not self._ready:
            return
        m = self.model
        self.query_one(".browser-header", Static).update(styles.title(m.header))
        self.query_one(".browser-subtitle", Static).update(styles.subtitle(m.subtitle()))
        self.query_one(".browser-loading", LoadingIndicator).display = m.loading
        self._sync_table()
        self._sync_footer()
        self.query_one(".browser-detail", Static).update(detail_markup(m))
        status = self.query_one(".browser-status", Static)
        if m.error:
            status.update(styles.error(m.error))
        else:
            status.update(styles.subtitle(m.status))

    def _sync_table(self) -> None:
        m = self.model
        table = self.query_one(DataTable)
        columns = m.columns()
        if columns != self._columns:
            self._columns = columns
            self._rows = ()
            table.clear(columns=True)
            for name in columns:
                table.add_column(Text(name, style="bold cyan"), key=name.lower())
        rows = tuple((item.key, item.cells) for item in m.items)
        if rows != self._rows:
            self._rows = rows
            table.clear()
            for item in m.items:
                table.add_row(*(Text(cell) for cell in item.cells), key=item.key)
        if m.items and table.cursor_row != m.selected:
            table.move_cursor(row=m.selected)

    def _sync_footer(self) -> None:
        table = self.query_one(DataTable)
        total = len(self.model.items)
        capacity = table.size.height - 1 if table.size.height > 1 else total
        self.query_one(".browser-footer", Static).update(
            styles.subtitle(showing_text(total, self.model.selected, capacity))
        )

    # ------------------------------------------------------------------
    # Operations, called by the shell's bindings and the table's events
    # ------------------------------------------------------------------

    def move(self, delta: int) -> None:
        self.model.move(delta)
        self.sync()

    def refresh_list(self) -> None:
        self.shell.run_jobs(self.model.refresh())
        self.shell.sync()

    def activate(self) -> None:
        self.shell.run_jobs(self.model.activate())
        self.shell.sync()

    def zone_file(self) -> None:
        self.shell.run_jobs(self.model.zone_file())
        self.sync()

    def distribution(self) -> None:
        self.shell.run_jobs(self.model.distribution())
        self.sync()

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        if event.cursor_row != event.data_table.cursor_row:
            return  # superseded by a later cursor move
        if event.cursor_row != self.model.selected:
            self.model.select(event.cursor_row)
            self._sync_footer()

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        event.stop()
        self.model.select(event.cursor_row)
        self.activate()


class DomainSearchScreen(ModalScreen[None]):
    """Fuzzy search over the Domains list; Enter opens the dashboard."""

    BINDINGS = [
        Binding("escape", "cancel", "Close", show=True),
        Binding("down,ctrl+n", "move(1)", "Next", show=False),
        Binding("up,ctrl+p", "move(-1)", "Previous", show=False),
    ]

    DEFAULT_CSS = """
    #search-results {
        height: 14;
        margin-top: 1;
    }
    """

    def __init__(self, model: BrowserModel, shell: "ShellScreen") -> None:
        super().__init__()
        self.model = model
        self._shell = shell
        self._ready = False

    def compose(self) -> ComposeResult:
        with Container(classes="modal-container"):
            with Vertical(classes="modal-box"):
                yield Static("Domain Search", classes="modal-title")
                yield Input(placeholder="Type to fuzzy-search domains...", id="search-input")
                yield DataTable(id="search-results")
                yield Static("", id="search-footer", classes="modal-hint", markup=True)

    def on_mount(self) -> None:
        table = self.query_one("#search-results", DataTable)
        table.cursor_type = "row"
        table.can_focus = False
        table.add_column(Text("Domain", style="bold cyan"), key="domain")
        table.add_column(Text("State", style="bold cyan"), key="state")
        self.query_one("#search-input", Input).focus()
        self._ready = True
        self.sync()

    def sync(self) -> None:
        if not self._ready:
            return
        search = self.model.search
        table = self.query_one("#search-results", DataTable)
        table.clear()
        for match in search.matches:
            item = self.model.search_item(match)
            state = item.cells[1] if len(item.cells) > 1 else ""
            table.add_row(Text(item.title), Text(state), key=str(match.index))
        if search.matches:
            table.move_cursor(row=search.selected)

        if self.model.loading and not self.model.items:
            footer = styles.subtitle("Loading domains...")
        elif not search.matches:
            footer = styles.warning("No matching domains")
        else:
            footer = styles.subtitle(f"{len(search.matches)} match(es)  enter: open  esc: close")
        self.query_one("#search-footer", Static).update(footer)

    def on_input_changed(self, event: Input.Changed) -> None:
        self.model.set_search_query(event.value)
        self.sync()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        job = self.model.submit_search()
        if self.model.search.visible:
            return
        self.dismiss()
        self._shell.run_jobs(job)
        self._shell.sync()

    def action_move(self, delta: int) -> None:
        self.model.move_search(delta)
        self.sync()

    def action_cancel(self) -> None:
        self.model.close_search()
        self.dismiss()
        self._shell.sync()
