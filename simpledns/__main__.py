"""Entry point for the simpledns CLI.

    simpledns            launch the TUI (auth wizard on first run)
    simpledns demo       launch the TUI on built-in demo data
    simpledns logout     remove the stored API token
    simpledns COMMAND    run a scriptable command (see ``simpledns --help``)

Flags: ``--sandbox`` talks to the DNSimple sandbox API, ``--debug`` writes a
debug log to ``<config dir>/simpledns.log`` (or ``$SIMPLEDNS_LOG_FILE``).
"""

import sys

USAGE = (
    "usage: simpledns [demo | logout] [--sandbox] [--debug]\n"
    "       simpledns {whoami,auth,domains,zones,records} ... [--json]"
)


def main():
    """Main entry point."""
    from rich.console import Console

    from simpledns import cli
    from simpledns.config import ConfigError, CredentialStore

    console = Console()
    argv = sys.argv[1:]
    args = [a for a in argv if not a.startswith("--")]
    flags = {a for a in argv if a.startswith("--")}

    if args and args[0] in cli.COMMANDS:
        sys.exit(cli.run(argv))
    if "--help" in flags or (args and args[0] in ("help", "-h")):
        console.print(USAGE, markup=False, highlight=False)
        return
    unknown = flags - {"--sandbox", "--debug", "--help"}
    if unknown or len(args) > 1 or (args and args[0] not in ("demo", "logout")):
        console.print(f"[bold red]Unknown arguments:[/bold red] {' '.join(argv)}")
        console.print(USAGE, markup=False, highlight=False)
        sys.exit(2)

    try:
        store = CredentialStore()
    except ConfigError as e:
        console.print(f"\n[bold red]Configuration Error:[/bold red] {e}")
        sys.exit(1)

    # Check for logout mode
    if args and args[0] == "logout":
        sys.exit(cli.run(["auth", "logout"], store=store, console=console))

    cli.setup_logging(store, "--debug" in flags)

    # Check for demo mode
    if args and args[0] == "demo":
        from simpledns.demo_backend import DemoBackend
        backend = DemoBackend()
    else:
        from simpledns.live_backend import LiveBackend
        backend = LiveBackend(store, sandbox=True if "--sandbox" in flags else None)

    # Launch the TUI app
    from simpledns.app import SimpleDNSApp
    app = SimpleDNSApp(backend, store, sandbox="--sandbox" in flags)
    app.run()


if __name__ == "__main__":
    main()
