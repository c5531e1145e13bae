"""Text layout helpers: list windowing, truncation, clipping and wrapping."""

from __future__ import annotations


def window_range(total: int, selected: int, capacity: int) -> tuple[int, int]:
    """Return the ``[start, end)`` slice of a list that fits *capacity* rows.

    The window is centred on *selected* and clamped to the list bounds, so
    it always contains the selection and holds ``min(capacity, total)``
    entries.
    """
    if total <= 0:
        return 0, 0
    if capacity <= 0 or total <= capacity:
        return 0, total
    selected = max(0, min(selected, total - 1))
    start = max(0, selected - capacity // 2)
    start = min(start, total - capacity)
    return start, start + capacity


def truncate_text(text: str, max_len: int) -> str:
    if len(text) <= max_len:
        return text
    if max_len <= 3:
        return text[:max_len]
    return text[: max_len - 3] + "..."


def clip_lines(lines: list[str], max_lines: int) -> tuple[list[str], int]:
    """Keep at most *max_lines* lines.

    Returns the kept lines and how many were dropped.  When lines are
    dropped the last kept slot is given up for the caller's overflow
    marker, so ``len(kept) + 1 == max_lines``.
    """
    if max_lines <= 0:
        return [], len(lines)
    if len(lines) <= max_lines:
        return lines, 0
    return lines[: max_lines - 1], len(lines) - max_lines + 1


def clip_text(text: str, max_lines: int) -> tuple[str, int]:
    if not text:
        return "", 0
    kept, hidden = clip_lines(text.split("\n"), max_lines)
    return "\n".join(kept), hidden


def overflow_marker(hidden: int) -> str:
    return f"[dim]... ({hidden} more lines)[/dim]"


def hard_wrap(text: str, width: int) -> list[str]:
    if width <= 0:
        return [text]
    if not text:
        return [""]
    return [text[i:i + width] for i in range(0, len(text), width)]


def wrap_label_value(label: str, value: str, width: int = 80) -> list[str]:
    """Wrap *value* at *width* with continuation lines indented under *label*."""
    chunks = hard_wrap(value, width if width > 0 else 80)
    indent = " " * len(label)
    return [label + chunks[0]] + [indent + c for c in chunks[1:]]
