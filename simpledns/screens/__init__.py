"""simpledns TUI screens."""

from simpledns.screens.auth import AuthScreen
from simpledns.screens.browser import BrowserPane, DomainSearchScreen
from simpledns.screens.domain_dashboard import ConfirmMutationScreen, DomainDashboardScreen
from simpledns.screens.shell import ShellScreen

__all__ = [
    "AuthScreen",
    "BrowserPane",
    "ConfirmMutationScreen",
    "DomainDashboardScreen",
    "DomainSearchScreen",
    "ShellScreen",
]
