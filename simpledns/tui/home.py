"""Home tab state: the token's identity and the category menu."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from textual.message import Message

from simpledns.backend import Backend
from simpledns.models import Whoami
from simpledns.tui import styles
from simpledns.tui.categories import Category
from simpledns.tui.messages import Job

logger = logging.getLogger(__name__)


@dataclass
class IdentityLoaded(Message):
    whoami: Optional[Whoami] = None
    error: str = ""


def whoami_lines(whoami: Optional[Whoami]) -> list[str]:
    """Markup lines describing a token's identity."""
    if whoami is None:
        return [styles.subtitle("No identity details available yet.")]
    lines = []
    if whoami.account is not None:
        a = whoami.account
        lines += [
            styles.kv("Type", "Account token"),
            styles.kv("Email", a.email),
            styles.kv("ID", a.id),
            styles.kv("Plan", a.plan_identifier or "n/a"),
        ]
    if whoami.user is not None:
        u = whoami.user
        if whoami.account is None:
            lines.append(styles.kv("Type", "User token"))
        lines += [styles.kv("User", u.email), styles.kv("User ID", u.id)]
    return lines or [styles.subtitle("Whoami returned no account or user details.")]


class HomeModel:

    def __init__(self, backend: Backend, whoami: Optional[Whoami] = None) -> None:
        self._backend = backend
        self.items = [Category.DOMAINS, Category.ZONES, Category.RECORDS]
        self.whoami = whoami
        self.loading = whoami is None
        self.error = ""

    def init(self) -> Optional[Job]:
        if self.loading:
            return self._load_identity_job()
        return None

    def apply(self, msg: IdentityLoaded) -> Optional[Job]:
        self.loading = False
        if msg.error:
            self.error = msg.error
            return None
        self.error = ""
        self.whoami = msg.whoami
        return None

    def account_lines(self) -> list[str]:
        if self.loading:
            return [styles.subtitle("Loading account info...")]
        if self.error:
            return [styles.error("Failed to load account info"), styles.value(self.error)]
        return whoami_lines(self.whoami)

    def _load_identity_job(self) -> Job:
        backend = self._backend

        def load() -> IdentityLoaded:
            try:
                return IdentityLoaded(whoami=backend.identity())
            except Exception as e:
                logger.warning("Identity lookup failed: %s", e)
                return IdentityLoaded(error=str(e))

        return load
