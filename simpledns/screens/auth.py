"""First-run sign-in screen."""

from __future__ import annotations

from typing import Optional

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Input, LoadingIndicator, Static

from simpledns.models import Whoami
from simpledns.tui import styles
from simpledns.tui.auth import TOKEN_HELP_URL, AuthStep, AuthWizard, TokenValidated
from simpledns.tui.home import whoami_lines
from simpledns.tui.messages import Job

TEXT_STEPS = (AuthStep.CONFIG_DIR, AuthStep.TOKEN_INPUT)


class AuthScreen(Screen[Optional[Whoami]]):
    """Walks through token entry; dismisses with the validated identity."""

    BINDINGS = [
        Binding("escape", "back", "Back", show=True),
        Binding("c", "config_dir", "Config dir", show=False),
    ]

    DEFAULT_CSS = """
    #auth-container {
        align: center top;
        padding: 1 2;
    }
    .auth-step {
        height: auto;
        width: 80;
        border: round $primary;
        padding: 1 2;
    }
    """

    def __init__(self, wizard: AuthWizard) -> None:
        super().__init__()
        self.wizard = wizard
        self._ready = False

    @property
    def accepting_text(self) -> bool:
        return self.wizard.step in TEXT_STEPS

    def compose(self) -> ComposeResult:
        yield Header()
        with Container(id="auth-container"):
            with Vertical(id=AuthStep.WELCOME.pane_id, classes="auth-step"):
                yield Static("Welcome to Simple", classes="section-title")
                yield Static(
                    "Simple needs a DNSimple API token to browse your domains, zones and records.\n"
                    f"Create one at {styles.code(TOKEN_HELP_URL)}",
                    markup=True,
                )
                yield Static("", id="welcome-config-dir", classes="subtitle", markup=True)
                with Horizontal(classes="modal-buttons"):
                    yield Button("Continue", variant="primary", id="auth-continue-btn")
                    yield Button("Config dir (c)", variant="default", id="auth-config-btn")
            with Vertical(id=AuthStep.CONFIG_DIR.pane_id, classes="auth-step"):
                yield Static("Config Directory", classes="section-title")
                yield Static("Where should the token and config be stored?")
                yield Input(placeholder="~/.config/simple", id="config-dir-input")
                yield Static(styles.subtitle("Enter saves  Esc goes back"), markup=True)
            with Vertical(id=AuthStep.TOKEN_INPUT.pane_id, classes="auth-step"):
                yield Static("API Token", classes="section-title")
                yield Static("Paste your DNSimple API token.")
                yield Input(placeholder="API token", password=True, id="token-input")
                yield Static(styles.subtitle("Enter validates  Esc goes back"), markup=True)
            with Vertical(id=AuthStep.VALIDATING.pane_id, classes="auth-step"):
                yield Static("Validating token...", classes="section-title")
                yield LoadingIndicator(id="auth-busy")
            with Vertical(id=AuthStep.SUCCESS.pane_id, classes="auth-step"):
                yield Static(styles.success("Token validated and saved"), markup=True)
                yield Static("", id="auth-identity", markup=True)
                with Horizontal(classes="modal-buttons"):
                    yield Button("Done", variant="success", id="auth-done-btn")
            with Vertical(id=AuthStep.ERROR.pane_id, classes="auth-step"):
                yield Static("Sign-in failed", classes="section-title")
                yield Static("", id="auth-error", classes="error-line", markup=True)
                with Horizontal(classes="modal-buttons"):
                    yield Button("Retry", variant="primary", id="auth-retry-btn")
                    yield Button("Start over", variant="default", id="auth-restart-btn")
        yield Footer()

    def on_mount(self) -> None:
        self._ready = True
        self.sync()

    def sync(self) -> None:
        if not self._ready:
            return
        step = self.wizard.step
        for s in AuthStep:
            self.query_one(f"#{s.pane_id}").display = s is step
        self.query_one("#welcome-config-dir", Static).update(
            styles.subtitle(f"Credentials go to {self.wizard.store.config_dir}")
        )
        self.query_one("#auth-error", Static).update(styles.error(self.wizard.error))
        self.query_one("#auth-identity", Static).update("\n".join(whoami_lines(self.wizard.whoami)))
        self.call_after_refresh(self._focus_step)

    def _focus_step(self) -> None:
        focus = {
            AuthStep.WELCOME: "#auth-continue-btn",
            AuthStep.CONFIG_DIR: "#config-dir-input",
            AuthStep.TOKEN_INPUT: "#token-input",
            AuthStep.SUCCESS: "#auth-done-btn",
            AuthStep.ERROR: "#auth-retry-btn",
        }.get(self.wizard.step)
        if focus:
            self.query_one(focus).focus()

    # ------------------------------------------------------------------
    # Validation worker
    # ------------------------------------------------------------------

    @work(thread=True, group="auth")
    def _validate(self, job: Job) -> None:
        msg = job()
        if msg is not None:
            self.post_message(msg)

    def on_token_validated(self, message: TokenValidated) -> None:
        self.wizard.apply(message)
        self.sync()

    # ------------------------------------------------------------------
    # Step transitions
    # ------------------------------------------------------------------

    @on(Button.Pressed, "#auth-continue-btn")
    @on(Button.Pressed, "#auth-retry-btn")
    def _on_continue(self, event: Button.Pressed) -> None:
        self.wizard.begin()
        self.query_one("#token-input", Input).value = ""
        self.sync()

    @on(Button.Pressed, "#auth-config-btn")
    def _on_config(self, event: Button.Pressed) -> None:
        self.action_config_dir()

    @on(Button.Pressed, "#auth-restart-btn")
    def _on_restart(self, event: Button.Pressed) -> None:
        self.action_back()

    @on(Button.Pressed, "#auth-done-btn")
    def _on_done(self, event: Button.Pressed) -> None:
        if self.wizard.step is AuthStep.SUCCESS:
            self.dismiss(self.wizard.whoami)

    @on(Input.Submitted, "#config-dir-input")
    def _on_config_dir(self, event: Input.Submitted) -> None:
        self.wizard.apply_config_dir(event.value)
        self.sync()

    @on(Input.Submitted, "#token-input")
    def _on_token(self, event: Input.Submitted) -> None:
        job = self.wizard.submit_token(event.value)
        if job is not None:
            self._validate(job)
        self.sync()

    def action_config_dir(self) -> None:
        if self.wizard.step is not AuthStep.WELCOME:
            return
        self.query_one("#config-dir-input", Input).value = self.wizard.edit_config_dir()
        self.sync()

    def action_back(self) -> None:
        self.wizard.back()
        self.sync()
