"""Main simpledns Textual Application."""

from __future__ import annotations

import logging
from typing import Optional

from textual.app import App
from textual.binding import Binding
from textual.screen import ModalScreen

from simpledns.backend import Backend
from simpledns.config import CredentialStore
from simpledns.dnsimple_client import validate_token
from simpledns.models import Whoami
from simpledns.screens.auth import AuthScreen
from simpledns.screens.shell import ShellScreen
from simpledns.tui.auth import AccountResolver, AuthWizard, Validator, resolve_user_account
from simpledns.tui.shell import ShellModel

logger = logging.getLogger(__name__)


class SimpleDNSApp(App):
    """simpledns - a terminal dashboard for DNSimple."""

    TITLE = "Simple"
    SUB_TITLE = "a TUI for DNSimple.com"
    CSS_PATH = "app.tcss"

    BINDINGS = [
        Binding("q", "request_quit", "Quit", show=True),
        Binding("ctrl+c", "quit", "Quit", show=False, priority=True),
    ]

    def __init__(
        self,
        backend: Backend,
        store: CredentialStore,
        validator: Validator = validate_token,
        resolver: AccountResolver = resolve_user_account,
        sandbox: bool = False,
    ):
        super().__init__()
        self.backend = backend
        self.store = store
        self._validator = validator
        self._resolver = resolver
        self._sandbox = sandbox
        self.shell: Optional[ShellScreen] = None

    def on_mount(self) -> None:
        if self.backend.is_demo or self.store.has_token():
            self._enter_shell(None)
        else:
            wizard = AuthWizard(self.store, self._validator, self._resolver, sandbox=self._sandbox)
            self.push_screen(AuthScreen(wizard), callback=self._enter_shell)

    def _enter_shell(self, whoami: Optional[Whoami]) -> None:
        if self.shell is not None:
            return
        logger.info("Opening shell (demo=%s)", self.backend.is_demo)
        self.shell = ShellScreen(ShellModel(self.backend, self.store, whoami))
        self.push_screen(self.shell)

    def action_request_quit(self) -> None:
        """Quit unless a dialog or a text prompt has the keyboard."""
        screen = self.screen
        if isinstance(screen, ModalScreen):
            return
        if isinstance(screen, AuthScreen) and screen.accepting_text:
            return
        self.exit()
