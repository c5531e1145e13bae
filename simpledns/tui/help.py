"""Help tab: shortcut reference and where credentials are stored."""

from __future__ import annotations

from simpledns.config import CONFIG_DIR_ENV, CredentialStore
from simpledns.tui import styles

GLOBAL_SHORTCUTS = [
    ("1 / h", "Home"),
    ("2 / d", "Domains"),
    ("3 / z", "Zones"),
    ("4 / R", "Records"),
    ("5 / ?", "Help"),
    ("", ""),
    ("tab / shift+tab", "Next/Prev tab (also l / H)"),
    ("/", "Domain search (global; jumps to Domains)"),
    ("j/k or arrows", "Move selection"),
    ("enter", "Open / inspect selected item"),
    ("esc", "Back (or return home)"),
    ("r", "Refresh current list"),
    ("q", "Quit"),
]

TAB_ACTIONS = [
    "Domains tab: enter opens the domain dashboard",
    "Dashboard: o/c/z/g/a sections, R refresh, f zone file, x distribution, D delete record",
    "Zones tab: f (zone file), x (distribution status)",
    "Records tab: enter on a zone first, then x (record distribution status)",
    "Scripting: simpledns domains list --json (see simpledns --help)",
]


class HelpModel:

    def __init__(self, store: CredentialStore) -> None:
        self._store = store

    def init(self) -> None:
        return None

    def shortcut_lines(self) -> list[str]:
        return [
            f"{styles.code(k.ljust(17))} {styles.value(v)}" if k else ""
            for k, v in GLOBAL_SHORTCUTS
        ]

    def path_lines(self) -> list[str]:
        return [
            styles.label("Config dir:"),
            styles.code(self._store.config_dir),
            "",
            styles.label("Token file:"),
            styles.code(self._store.token_path),
            "",
            styles.label("Config file:"),
            styles.code(self._store.config_path),
            "",
            styles.subtitle(f"Override config dir with {CONFIG_DIR_ENV}"),
        ]

    def action_lines(self) -> list[str]:
        lines = [styles.value(line) for line in TAB_ACTIONS]
        lines += ["", styles.subtitle("Mutations always ask you to type 'confirm' first.")]
        return lines
