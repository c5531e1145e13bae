"""Backend implementation backed by the DNSimple API."""

from __future__ import annotations

import logging
import threading
from typing import Optional

from simpledns.backend import Backend, BackendError
from simpledns.config import ConfigError, CredentialStore
from simpledns.dnsimple_client import DNSimpleClient, resolve_account_id
from simpledns.models import Domain, Whoami, Zone, ZoneRecord

logger = logging.getLogger(__name__)


class LiveBackend(Backend):
    """Delegates every capability to :class:`DNSimpleClient`.

    The token is read from the credential store on use, so a token saved by
    the auth wizard is picked up without rebuilding the backend.  The
    resolved account id is cached in ``config.yaml``.
    """

    def __init__(self, store: CredentialStore, sandbox: Optional[bool] = None) -> None:
        self._store = store
        self._sandbox = sandbox
        self._lock = threading.Lock()
        self._token: str = ""
        self._client: Optional[DNSimpleClient] = None
        self._account_id: str = ""

    def _session(self) -> tuple[DNSimpleClient, str]:
        """Return ``(client, account_id)`` for the currently stored token."""
        try:
            token = self._store.load_token()
            config = self._store.load_config()
        except ConfigError as e:
            raise BackendError(str(e))
        sandbox = config.sandbox if self._sandbox is None else self._sandbox

        with self._lock:
            if self._client is None or token != self._token:
                self._client = DNSimpleClient(token, sandbox=sandbox)
                self._token = token
                self._account_id = ""
            client = self._client
            account_id = self._account_id or config.account_id

        if not account_id:
            try:
                account_id = resolve_account_id(client)
            except BackendError as e:
                raise BackendError(f"failed to identify account: {e}")
            config.account_id = account_id
            try:
                self._store.save_config(config)
            except ConfigError as e:
                logger.debug("Could not cache account id: %s", e)

        with self._lock:
            self._account_id = account_id
        return client, account_id

    def identity(self) -> Whoami:
        client, _ = self._session()
        return client.whoami()

    def list_domains(self) -> list[Domain]:
        client, account = self._session()
        return client.list_domains(account)

    def get_domain(self, name: str) -> Domain:
        client, account = self._session()
        return client.get_domain(account, name)

    def delete_domain(self, name: str) -> None:
        client, account = self._session()
        client.delete_domain(account, name)

    def list_zones(self) -> list[Zone]:
        client, account = self._session()
        return client.list_zones(account)

    def get_zone(self, name: str) -> Zone:
        client, account = self._session()
        return client.get_zone(account, name)

    def get_zone_file(self, name: str) -> str:
        client, account = self._session()
        return client.get_zone_file(account, name)

    def check_zone_distribution(self, name: str) -> bool:
        client, account = self._session()
        return client.check_zone_distribution(account, name)

    def activate_zone_dns(self, name: str) -> None:
        client, account = self._session()
        client.activate_zone_dns(account, name)

    def deactivate_zone_dns(self, name: str) -> None:
        client, account = self._session()
        client.deactivate_zone_dns(account, name)

    def list_records(self, zone: str) -> list[ZoneRecord]:
        client, account = self._session()
        return client.list_records(account, zone)

    def get_record(self, zone: str, record_id: int) -> ZoneRecord:
        client, account = self._session()
        return client.get_record(account, zone, record_id)

    def check_record_distribution(self, zone: str, record_id: int) -> bool:
        client, account = self._session()
        return client.check_record_distribution(account, zone, record_id)

    def delete_record(self, zone: str, record_id: int) -> None:
        client, account = self._session()
        client.delete_record(account, zone, record_id)
