"""First-run authentication wizard state.

Welcome -> TokenInput -> Validating -> Success, with a detour through
ConfigDirOverride to pick where credentials are written.  Failures land on
the Error step, which offers a retry (back to the token prompt) or a fresh
start (back to Welcome).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from textual.message import Message

from simpledns.config import Config, ConfigError, CredentialStore
from simpledns.dnsimple_client import DNSimpleClient, resolve_account_id, validate_token
from simpledns.models import Whoami
from simpledns.tui.messages import Job

logger = logging.getLogger(__name__)

TOKEN_HELP_URL = "https://dnsimple.com/a/YOUR_ACCOUNT_ID/account/access_tokens"

Validator = Callable[[str, bool], Whoami]
AccountResolver = Callable[[str, bool], str]


class AuthStep(Enum):
    WELCOME = "welcome"
    CONFIG_DIR = "config_dir"
    TOKEN_INPUT = "token_input"
    VALIDATING = "validating"
    SUCCESS = "success"
    ERROR = "error"

    @property
    def pane_id(self) -> str:
        return f"step-{self.value}"


@dataclass
class TokenValidated(Message):
    token: str
    whoami: Optional[Whoami] = None
    account_id: str = ""
    error: str = ""


def resolve_user_account(token: str, sandbox: bool = False) -> str:
    return resolve_account_id(DNSimpleClient(token, sandbox=sandbox))


class AuthWizard:

    def __init__(
        self,
        store: CredentialStore,
        validator: Validator = validate_token,
        resolver: AccountResolver = resolve_user_account,
        sandbox: bool = False,
    ) -> None:
        self._store = store
        self._validator = validator
        self._resolver = resolver
        self._sandbox = sandbox
        self.step = AuthStep.WELCOME
        self.error = ""
        self.whoami: Optional[Whoami] = None

    @property
    def store(self) -> CredentialStore:
        return self._store

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def begin(self) -> None:
        """Welcome or Error -> token prompt."""
        if self.step in (AuthStep.WELCOME, AuthStep.ERROR):
            self.step = AuthStep.TOKEN_INPUT

    def edit_config_dir(self) -> str:
        """Welcome -> config dir prompt; returns the value to pre-fill."""
        if self.step is AuthStep.WELCOME:
            self.step = AuthStep.CONFIG_DIR
        return str(self._store.config_dir)

    def back(self) -> None:
        if self.step in (AuthStep.CONFIG_DIR, AuthStep.TOKEN_INPUT, AuthStep.ERROR):
            self.step = AuthStep.WELCOME

    def apply_config_dir(self, raw: str) -> None:
        try:
            self._store.set_config_dir(raw)
        except ConfigError as e:
            self._fail(str(e))
            return
        self.step = AuthStep.WELCOME

    def submit_token(self, raw: str) -> Optional[Job]:
        token = raw.strip()
        if not token:
            self._fail("token cannot be empty")
            return None
        self.step = AuthStep.VALIDATING
        self.error = ""
        return self._validate_job(token)

    def apply(self, msg: TokenValidated) -> None:
        if self.step is not AuthStep.VALIDATING:
            return
        if msg.error:
            self._fail(msg.error)
            return

        self.whoami = msg.whoami
        config = Config(account_id=msg.account_id, sandbox=self._sandbox)
        account = msg.whoami.account if msg.whoami else None
        if account is not None:
            config.account_id = str(account.id)
        try:
            self._store.save_token(msg.token)
            self._store.save_config(config)
        except ConfigError as e:
            self._fail(str(e))
            return
        self.step = AuthStep.SUCCESS

    def _fail(self, error: str) -> None:
        self.error = error
        self.step = AuthStep.ERROR

    # ------------------------------------------------------------------
    # Jobs
    # ------------------------------------------------------------------

    def _validate_job(self, token: str) -> Job:
        validator = self._validator
        resolver = self._resolver
        sandbox = self._sandbox

        def validate() -> TokenValidated:
            try:
                whoami = validator(token, sandbox)
            except Exception as e:
                logger.warning("Token validation failed: %s", e)
                return TokenValidated(token, error=str(e))
            account_id = ""
            if whoami.account is None and whoami.user is not None:
                # User tokens get their account looked up before anything is saved.
                try:
                    account_id = resolver(token, sandbox)
                except Exception as e:
                    logger.debug("Account lookup skipped: %s", e)
            return TokenValidated(token, whoami=whoami, account_id=account_id)

        return validate
