"""Rich markup helpers and colours shared by the screens."""

from __future__ import annotations

from rich.markup import escape

from simpledns.tui.layout import clip_text, overflow_marker

ACCENT = "cyan"

RTYPE_COLORS = {
    "A": "green",
    "AAAA": "cyan",
    "CNAME": "yellow",
    "MX": "bright_magenta",
    "TXT": "bright_blue",
    "NS": "blue",
    "SOA": "bright_black",
    "SRV": "bright_cyan",
    "PTR": "magenta",
}


def title(text: str) -> str:
    return f"[bold {ACCENT}]{escape(text)}[/bold {ACCENT}]"


def subtitle(text: str) -> str:
    return f"[dim]{escape(text)}[/dim]"


def heading(text: str) -> str:
    return f"[bold]{escape(text)}[/bold]"


def label(text: str) -> str:
    return f"[bold]{escape(text)}[/bold]"


def value(text: object) -> str:
    return escape(str(text))


def code(text: object) -> str:
    return f"[cyan]{escape(str(text))}[/cyan]"


def error(text: str) -> str:
    return f"[bold red]{escape(text)}[/bold red]"


def warning(text: str) -> str:
    return f"[yellow]{escape(text)}[/yellow]"


def success(text: str) -> str:
    return f"[green]{escape(text)}[/green]"


def kv(name: str, val: object) -> str:
    return f"{label(name + ':')} {value(val)}"


def yes_no(flag: bool) -> str:
    return "[green]true[/green]" if flag else "[red]false[/red]"


def rtype(rtype_name: str) -> str:
    color = RTYPE_COLORS.get(rtype_name, "white")
    return f"[{color}]{escape(rtype_name)}[/{color}]"


def clipped_block(text: str, max_lines: int) -> str:
    """Escape backend text for display, capped at *max_lines* with a marker."""
    body, hidden = clip_text(text, max_lines)
    out = escape(body)
    if hidden:
        out += "\n" + overflow_marker(hidden)
    return out
