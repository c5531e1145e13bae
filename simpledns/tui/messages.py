"""Background jobs and the messages they post back to the UI.

State models never block.  An operation that needs the backend returns a
*job*: a zero-argument callable the screen runs on a thread worker.  The
job catches its own errors and returns a :class:`textual.message.Message`
describing the outcome, which the screen posts to itself and hands back to
the model's ``apply()``.
"""

from __future__ import annotations

from typing import Callable, Optional

from textual.message import Message

Job = Callable[[], Optional[Message]]


def jobs(*items: Optional[Job]) -> list[Job]:
    """Drop the ``None`` entries from a set of optional jobs."""
    return [job for job in items if job is not None]
