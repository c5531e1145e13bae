"""DNSimple v2 API client for simpledns.

Thin wrapper over the DNSimple REST API using ``requests``.  Authentication
is a bearer API token (account or user token).  Every resource call is
scoped to an account id; :func:`resolve_account_id` picks one for a token.

See: https://developer.dnsimple.com/v2/
"""

from __future__ import annotations

from typing import Any, Optional

import requests

from simpledns import __version__
from simpledns.backend import BackendError
from simpledns.models import Account, Domain, Whoami, Zone, ZoneRecord

API_URL = "https://api.dnsimple.com/v2"
SANDBOX_API_URL = "https://api.sandbox.dnsimple.com/v2"
USER_AGENT = f"simpledns/{__version__}"
PER_PAGE = 100


class DNSimpleError(BackendError):
    """DNSimple API error."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class DNSimpleClient:
    """Client for the DNSimple v2 REST API.

    Constructor parameters:
      token: API token, sent as ``Authorization: Bearer <token>``.
      sandbox: Talk to the sandbox environment instead of production.
    """

    def __init__(self, token: str, sandbox: bool = False):
        if not token:
            raise DNSimpleError("api token is required")
        self.base_url = SANDBOX_API_URL if sandbox else API_URL
        self._session = requests.Session()
        self._session.headers.update({
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        })

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    def whoami(self) -> Whoami:
        """Call ``GET /whoami`` and return the token's identity."""
        return Whoami.from_api(self._request("GET", "/whoami").get("data") or {})

    def list_accounts(self) -> list[Account]:
        """List the accounts a user token can access (``GET /accounts``)."""
        data = self._request("GET", "/accounts").get("data") or []
        return [Account.from_api(a) for a in data]

    # ------------------------------------------------------------------
    # Domains
    # ------------------------------------------------------------------

    def list_domains(self, account_id: str) -> list[Domain]:
        return [Domain.from_api(d) for d in self._paginate(f"/{account_id}/domains")]

    def get_domain(self, account_id: str, name: str) -> Domain:
        resp = self._request("GET", f"/{account_id}/domains/{name}")
        return Domain.from_api(resp.get("data") or {})

    def delete_domain(self, account_id: str, name: str) -> None:
        self._request("DELETE", f"/{account_id}/domains/{name}")

    # ------------------------------------------------------------------
    # Zones
    # ------------------------------------------------------------------

    def list_zones(self, account_id: str) -> list[Zone]:
        return [Zone.from_api(z) for z in self._paginate(f"/{account_id}/zones")]

    def get_zone(self, account_id: str, name: str) -> Zone:
        resp = self._request("GET", f"/{account_id}/zones/{name}")
        return Zone.from_api(resp.get("data") or {})

    def get_zone_file(self, account_id: str, name: str) -> str:
        resp = self._request("GET", f"/{account_id}/zones/{name}/file")
        return str((resp.get("data") or {}).get("zone", "")).strip()

    def check_zone_distribution(self, account_id: str, name: str) -> bool:
        resp = self._request("GET", f"/{account_id}/zones/{name}/distribution")
        return bool((resp.get("data") or {}).get("distributed", False))

    def activate_zone_dns(self, account_id: str, name: str) -> Zone:
        resp = self._request("PUT", f"/{account_id}/zones/{name}/activation")
        return Zone.from_api(resp.get("data") or {})

    def deactivate_zone_dns(self, account_id: str, name: str) -> Zone:
        resp = self._request("DELETE", f"/{account_id}/zones/{name}/activation")
        return Zone.from_api(resp.get("data") or {})

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def list_records(self, account_id: str, zone: str) -> list[ZoneRecord]:
        return [
            ZoneRecord.from_api(r)
            for r in self._paginate(f"/{account_id}/zones/{zone}/records")
        ]

    def get_record(self, account_id: str, zone: str, record_id: int) -> ZoneRecord:
        resp = self._request("GET", f"/{account_id}/zones/{zone}/records/{record_id}")
        return ZoneRecord.from_api(resp.get("data") or {})

    def check_record_distribution(self, account_id: str, zone: str, record_id: int) -> bool:
        resp = self._request(
            "GET", f"/{account_id}/zones/{zone}/records/{record_id}/distribution",
        )
        return bool((resp.get("data") or {}).get("distributed", False))

    def delete_record(self, account_id: str, zone: str, record_id: int) -> None:
        self._request("DELETE", f"/{account_id}/zones/{zone}/records/{record_id}")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _paginate(self, path: str) -> list[dict]:
        """Follow ``pagination.total_pages`` and return every ``data`` item."""
        items: list[dict] = []
        page = 1
        while True:
            resp = self._request("GET", path, params={"page": page, "per_page": PER_PAGE})
            items.extend(resp.get("data") or [])
            total_pages = (resp.get("pagination") or {}).get("total_pages", 1) or 1
            if page >= total_pages:
                break
            page += 1
        return items

    def _request(
        self, method: str, path: str, params: dict | None = None,
    ) -> dict[str, Any]:
        """Make an authenticated API request.

        Returns the parsed JSON body, or ``{}`` for empty (204) responses.

        Raises:
          DNSimpleError: On connection failures, HTTP errors (with the API's
              ``message`` when present) or malformed JSON.
        """
        url = f"{self.base_url}{path}"
        try:
            resp = self._session.request(method, url, params=params, timeout=30)
        except requests.RequestException as e:
            raise DNSimpleError(f"Failed to connect to DNSimple API: {e}")

        if resp.status_code >= 400:
            message = ""
            try:
                body = resp.json()
                if isinstance(body, dict):
                    message = str(body.get("message") or "")
            except ValueError:
                pass
            raise DNSimpleError(
                f"DNSimple API error (HTTP {resp.status_code}): {message or resp.reason}",
                status=resp.status_code,
            )

        if resp.status_code == 204 or not resp.content:
            return {}
        try:
            body = resp.json()
        except ValueError as e:
            raise DNSimpleError(f"Invalid JSON response from DNSimple: {e}")
        return body if isinstance(body, dict) else {}


def validate_token(token: str, sandbox: bool = False) -> Whoami:
    """Check a token with a single ``/whoami`` round trip."""
    try:
        return DNSimpleClient(token, sandbox=sandbox).whoami()
    except DNSimpleError as e:
        raise DNSimpleError(f"invalid token: {e}", status=e.status)


def resolve_account_id(client: DNSimpleClient, whoami: Optional[Whoami] = None) -> str:
    """Pick the account a token operates on.

    Account tokens use their own account.  User tokens use the first account
    returned by ``GET /accounts``, even when several are available.
    """
    if whoami is None:
        whoami = client.whoami()
    if whoami.account is not None:
        return str(whoami.account.id)
    if whoami.user is not None:
        accounts = client.list_accounts()
        if not accounts:
            raise DNSimpleError("no accounts found for this user")
        return str(accounts[0].id)
    raise DNSimpleError("whoami returned neither account nor user")
