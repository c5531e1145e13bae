"""Scriptable commands sharing the TUI's backends and credential store.

    simpledns whoami
    simpledns auth status | login | logout | setup
    simpledns domains list | get NAME
    simpledns zones list | get NAME | file NAME | distribution NAME
    simpledns records list ZONE | get ZONE ID | distribution ZONE ID

Every command accepts ``--json`` (machine-readable output), ``--sandbox``,
``--demo`` and ``--debug``.  Failures print ``Error: ...`` to stderr and
exit with status 1.
"""

import argparse
import dataclasses
import json
import logging
import os
from typing import Any, Callable, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from simpledns.backend import Backend, BackendError
from simpledns.config import ConfigError, CredentialStore
from simpledns.dnsimple_client import validate_token
from simpledns.tui import styles
from simpledns.tui.auth import TOKEN_HELP_URL, AuthStep, AuthWizard, resolve_user_account
from simpledns.tui.layout import truncate_text

logger = logging.getLogger(__name__)

LOG_FILE_ENV = "SIMPLEDNS_LOG_FILE"
COMMANDS = ("whoami", "auth", "domains", "domain", "dom", "zones", "zone", "records", "record")


def setup_logging(store: CredentialStore, debug: bool) -> None:
    """Send logs to a file; the terminal belongs to the TUI or the command output."""
    log_file = os.environ.get(LOG_FILE_ENV, "").strip()
    if not debug and not log_file:
        return
    path = log_file or str(store.log_path)
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    logging.basicConfig(
        filename=path,
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def to_data(value: Any) -> Any:
    """Model dataclasses (or lists of them) as plain JSON-ready values."""
    if isinstance(value, list):
        return [to_data(v) for v in value]
    if dataclasses.is_dataclass(value):
        return dataclasses.asdict(value)
    return value


def _row(label: str, val: object) -> str:
    return f"  {styles.label((label + ':').ljust(14))} {styles.value(val)}"


class Commands:
    """One instance per invocation; each public method is a subcommand."""

    def __init__(
        self,
        args: argparse.Namespace,
        store: CredentialStore,
        console: Console,
        backend: Optional[Backend] = None,
        validator: Callable = validate_token,
        resolver: Callable = resolve_user_account,
    ) -> None:
        self.args = args
        self.store = store
        self.console = console
        self._backend = backend
        self._validator = validator
        self._resolver = resolver

    @property
    def backend(self) -> Backend:
        if self._backend is None:
            if self.args.demo:
                from simpledns.demo_backend import DemoBackend
                self._backend = DemoBackend()
            else:
                from simpledns.live_backend import LiveBackend
                self._backend = LiveBackend(self.store, sandbox=True if self.args.sandbox else None)
        return self._backend

    def _json(self, value: Any) -> bool:
        if not self.args.json:
            return False
        self.console.out(json.dumps(to_data(value), indent=2), highlight=False)
        return True

    # -- identity ---------------------------------------------------------

    def whoami(self) -> int:
        who = self.backend.identity()
        config = self.store.load_config()
        if self._json(who):
            return 0
        self.console.print(styles.title("DNSimple Identity"))
        self.console.print()
        if who.account is not None:
            self.console.print(styles.heading("Account Token"))
            self.console.print(_row("ID", who.account.id))
            self.console.print(_row("Email", who.account.email))
            self.console.print(_row("Plan", who.account.plan_identifier or "n/a"))
        if who.user is not None:
            self.console.print(styles.heading("User Token"))
            self.console.print(_row("ID", who.user.id))
            self.console.print(_row("Email", who.user.email))
        if config.account_id:
            self.console.print()
            self.console.print(_row("Account ID", config.account_id))
        return 0

    # -- auth -------------------------------------------------------------

    def auth_status(self) -> int:
        config = self.store.load_config()
        authenticated = self.store.has_token()
        if self._json({
            "authenticated": authenticated,
            "token_path": str(self.store.token_path),
            "account_id": config.account_id,
            "sandbox": config.sandbox,
        }):
            return 0
        if not authenticated:
            self.console.print(styles.warning("Not authenticated"))
            self.console.print(styles.subtitle("Run 'simpledns auth login' to authenticate"))
            return 0
        self.console.print(styles.success("Authenticated"))
        self.console.print(styles.subtitle(f"Token location: {self.store.token_path}"))
        if config.account_id:
            self.console.print(styles.subtitle(f"Account ID: {config.account_id}"))
        return 0

    def auth_login(self) -> int:
        if self.store.has_token():
            self.console.print(styles.warning(
                "Already authenticated. Use 'simpledns auth logout' first to re-authenticate."
            ))
            return 0
        token = self.args.token
        if token is None:
            self.console.print(styles.title("DNSimple Authentication"))
            token = self.console.input("Enter your API token: ", password=True)

        wizard = AuthWizard(self.store, self._validator, self._resolver, sandbox=self.args.sandbox)
        wizard.begin()
        job = wizard.submit_token(token)
        if job is not None:
            self.console.print(styles.subtitle("Validating token..."))
            wizard.apply(job())
        if wizard.step is not AuthStep.SUCCESS:
            raise BackendError(wizard.error)

        self.console.print(styles.success("Authenticated with DNSimple!"))
        who = wizard.whoami
        if who is not None and who.account is not None:
            self.console.print(styles.subtitle(f"Account: {who.account.email} (ID: {who.account.id})"))
        elif who is not None and who.user is not None:
            self.console.print(styles.subtitle(f"User: {who.user.email} (ID: {who.user.id})"))
        self.console.print(styles.subtitle(f"Token saved to: {self.store.token_path}"))
        return 0

    def auth_logout(self) -> int:
        if self.store.remove_token():
            self.console.print(f"{styles.success('Logged out.')} Removed {escape(str(self.store.token_path))}")
        else:
            self.console.print(styles.warning("No stored token found."))
        return 0

    def auth_setup(self) -> int:
        steps = [
            "Log in to your DNSimple account at https://dnsimple.com",
            f"Go to Account > Access Tokens: {TOKEN_HELP_URL}",
            "Click \"New access token\", give it a name and copy the token",
            "Run 'simpledns auth login' (or just 'simpledns') and paste it",
        ]
        self.console.print(styles.title("DNSimple API Token Setup"))
        self.console.print()
        for n, step in enumerate(steps, start=1):
            self.console.print(f"  {styles.success(f'{n}.')} {styles.value(step)}")
        self.console.print()
        self.console.print(styles.subtitle("For sandbox testing use https://sandbox.dnsimple.com and pass --sandbox."))
        return 0

    # -- domains ----------------------------------------------------------

    def domains_list(self) -> int:
        domains = self.backend.list_domains()
        if self._json(domains):
            return 0
        if not domains:
            self.console.print(styles.warning("No domains found"))
            return 0
        table = Table(title=f"{len(domains)} domains", title_style=f"bold {styles.ACCENT}")
        table.add_column("Domain", style=styles.ACCENT, no_wrap=True)
        table.add_column("State")
        table.add_column("Expires")
        table.add_column("Auto-renew")
        for d in domains:
            state = styles.success(d.state) if d.state in ("registered", "hosted") else styles.warning(d.state)
            table.add_row(escape(d.name), state, escape(d.expires_at[:10]), "yes" if d.auto_renew else "no")
        self.console.print(table)
        return 0

    def domains_get(self) -> int:
        d = self.backend.get_domain(self.args.name)
        if self._json(d):
            return 0
        self.console.print(styles.title(d.name))
        self.console.print()
        self.console.print(_row("ID", d.id))
        self.console.print(_row("Name", d.name))
        if d.unicode_name and d.unicode_name != d.name:
            self.console.print(_row("Unicode", d.unicode_name))
        self.console.print(_row("State", d.state))
        self.console.print(_row("Auto-Renew", str(d.auto_renew).lower()))
        self.console.print(_row("Private WHOIS", str(d.private_whois).lower()))
        if d.expires_at:
            self.console.print(_row("Expires", d.expires_at))
        self.console.print(_row("Created", d.created_at))
        self.console.print(_row("Updated", d.updated_at))
        return 0

    # -- zones ------------------------------------------------------------

    def zones_list(self) -> int:
        zones = self.backend.list_zones()
        if self._json(zones):
            return 0
        if not zones:
            self.console.print(styles.warning("No zones found"))
            return 0
        table = Table(title=f"{len(zones)} zones", title_style=f"bold {styles.ACCENT}")
        table.add_column("Zone", style=styles.ACCENT, no_wrap=True)
        table.add_column("Active")
        table.add_column("Flags")
        for z in zones:
            flags = [name for name, on in (("reverse", z.reverse), ("secondary", z.secondary)) if on]
            table.add_row(escape(z.name), styles.yes_no(z.active), ", ".join(flags))
        self.console.print(table)
        return 0

    def zones_get(self) -> int:
        z = self.backend.get_zone(self.args.name)
        if self._json(z):
            return 0
        self.console.print(styles.title(z.name))
        self.console.print()
        self.console.print(_row("ID", z.id))
        self.console.print(_row("Name", z.name))
        self.console.print(_row("Active", str(z.active).lower()))
        self.console.print(_row("Reverse", str(z.reverse).lower()))
        self.console.print(_row("Secondary", str(z.secondary).lower()))
        self.console.print(_row("Created", z.created_at))
        self.console.print(_row("Updated", z.updated_at))
        return 0

    def zones_file(self) -> int:
        text = self.backend.get_zone_file(self.args.name)
        if self._json({"zone": text}):
            return 0
        self.console.print(styles.title(f"Zone file: {self.args.name}"))
        self.console.print()
        self.console.out(text, highlight=False)
        return 0

    def zones_distribution(self) -> int:
        name = self.args.name
        distributed = self.backend.check_zone_distribution(name)
        return self._distribution(distributed, f"Zone '{name}'")

    # -- records ----------------------------------------------------------

    def records_list(self) -> int:
        zone = self.args.zone
        records = self.backend.list_records(zone)
        if self._json(records):
            return 0
        if not records:
            self.console.print(styles.warning("No records found"))
            return 0
        table = Table(title=f"{len(records)} records for {zone}", title_style=f"bold {styles.ACCENT}")
        table.add_column("ID", justify="right", no_wrap=True)
        table.add_column("Type", no_wrap=True)
        table.add_column("Name", no_wrap=True)
        table.add_column("TTL", justify="right")
        table.add_column("Content")
        table.add_column("Priority", justify="right")
        for r in records:
            table.add_row(
                str(r.id),
                styles.rtype(r.type),
                escape(r.display_name),
                str(r.ttl),
                escape(truncate_text(r.content, 50)),
                str(r.priority or ""),
            )
        self.console.print(table)
        return 0

    def records_get(self) -> int:
        zone = self.args.zone
        r = self.backend.get_record(zone, self.args.record_id)
        if self._json(r):
            return 0
        self.console.print(styles.title(f"{r.type} {r.display_name}.{zone}"))
        self.console.print()
        self.console.print(_row("ID", r.id))
        self.console.print(_row("Type", r.type))
        self.console.print(_row("Name", r.display_name))
        self.console.print(_row("Content", r.content))
        self.console.print(_row("TTL", r.ttl))
        if r.priority:
            self.console.print(_row("Priority", r.priority))
        if r.regions:
            self.console.print(_row("Regions", ", ".join(r.regions)))
        self.console.print(_row("System", str(r.system_record).lower()))
        self.console.print(_row("Created", r.created_at))
        self.console.print(_row("Updated", r.updated_at))
        return 0

    def records_distribution(self) -> int:
        record_id = self.args.record_id
        distributed = self.backend.check_record_distribution(self.args.zone, record_id)
        return self._distribution(distributed, f"Record {record_id}")

    def _distribution(self, distributed: bool, subject: str) -> int:
        if self._json({"distributed": distributed}):
            return 0
        if distributed:
            self.console.print(styles.success(f"{subject} is fully distributed"))
        else:
            self.console.print(styles.warning(f"{subject} is NOT fully distributed yet"))
        return 0


def _flags(leaf: bool) -> argparse.ArgumentParser:
    # Leaf copies default to SUPPRESS so flags given before the command survive.
    extra = {"default": argparse.SUPPRESS} if leaf else {}
    flags = argparse.ArgumentParser(add_help=False)
    flags.add_argument("--json", action="store_true", help="print JSON instead of tables", **extra)
    flags.add_argument("--sandbox", action="store_true", help="use the DNSimple sandbox API", **extra)
    flags.add_argument("--demo", action="store_true", help="use the built-in demo data", **extra)
    flags.add_argument("--debug", action="store_true", help="write a debug log", **extra)
    return flags


def _record_id(raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid record id: {raw}")


def build_parser() -> argparse.ArgumentParser:
    leaf = [_flags(leaf=True)]
    parser = argparse.ArgumentParser(
        prog="simpledns",
        description="DNSimple from the command line. Run without a command for the TUI.",
        parents=[_flags(leaf=False)],
    )
    commands = parser.add_subparsers(dest="command", metavar="COMMAND")
    commands.required = True

    commands.add_parser("whoami", parents=leaf, help="show the identity behind the stored token") \
        .set_defaults(handler="whoami")

    auth = commands.add_parser("auth", help="manage the stored API token") \
        .add_subparsers(dest="action", metavar="ACTION")
    auth.required = True
    auth.add_parser("status", parents=leaf, help="check authentication status") \
        .set_defaults(handler="auth_status")
    login = auth.add_parser("login", parents=leaf, help="validate and store an API token")
    login.add_argument("--token", help="token to store (prompted for when omitted)")
    login.set_defaults(handler="auth_login")
    auth.add_parser("logout", parents=leaf, help="remove the stored token") \
        .set_defaults(handler="auth_logout")
    auth.add_parser("setup", parents=leaf, help="how to create an API token") \
        .set_defaults(handler="auth_setup")

    domains = commands.add_parser("domains", aliases=["domain", "dom"], help="list and inspect domains") \
        .add_subparsers(dest="action", metavar="ACTION")
    domains.required = True
    domains.add_parser("list", parents=leaf, help="list all domains") \
        .set_defaults(handler="domains_list")
    get = domains.add_parser("get", parents=leaf, help="show one domain")
    get.add_argument("name")
    get.set_defaults(handler="domains_get")

    zones = commands.add_parser("zones", aliases=["zone"], help="list and inspect zones") \
        .add_subparsers(dest="action", metavar="ACTION")
    zones.required = True
    zones.add_parser("list", parents=leaf, help="list all zones") \
        .set_defaults(handler="zones_list")
    for action, text in (
        ("get", "show one zone"),
        ("file", "print the zone file"),
        ("distribution", "check zone distribution"),
    ):
        sub = zones.add_parser(action, parents=leaf, help=text)
        sub.add_argument("name")
        sub.set_defaults(handler=f"zones_{action}")

    records = commands.add_parser("records", aliases=["record"], help="list and inspect zone records") \
        .add_subparsers(dest="action", metavar="ACTION")
    records.required = True
    listing = records.add_parser("list", parents=leaf, help="list the records of a zone")
    listing.add_argument("zone")
    listing.set_defaults(handler="records_list")
    for action, text in (("get", "show one record"), ("distribution", "check record distribution")):
        sub = records.add_parser(action, parents=leaf, help=text)
        sub.add_argument("zone")
        sub.add_argument("record_id", type=_record_id)
        sub.set_defaults(handler=f"records_{action}")

    return parser


def run(
    argv: list[str],
    store: Optional[CredentialStore] = None,
    backend: Optional[Backend] = None,
    console: Optional[Console] = None,
    err_console: Optional[Console] = None,
    validator: Callable = validate_token,
    resolver: Callable = resolve_user_account,
) -> int:
    """Run one command and return the process exit status."""
    args = build_parser().parse_args(argv)
    console = console or Console()
    err_console = err_console or Console(stderr=True)

    try:
        store = store or CredentialStore()
        setup_logging(store, args.debug)
        commands = Commands(args, store, console, backend, validator, resolver)
        return getattr(commands, args.handler)()
    except (BackendError, ConfigError) as e:
        logger.debug("Command %s failed: %s", args.handler, e)
        err_console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        return 1
