"""Data models for simpledns."""

from dataclasses import dataclass, field
from typing import Any, Optional


def _int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


@dataclass
class Account:
    id: int
    email: str = ""
    plan_identifier: str = ""

    @classmethod
    def from_api(cls, data: dict) -> "Account":
        return cls(
            id=_int(data.get("id")),
            email=str(data.get("email") or ""),
            plan_identifier=str(data.get("plan_identifier") or ""),
        )


@dataclass
class User:
    id: int
    email: str = ""

    @classmethod
    def from_api(cls, data: dict) -> "User":
        return cls(id=_int(data.get("id")), email=str(data.get("email") or ""))


@dataclass
class Whoami:
    """Identity behind a token: an account token, a user token, or neither."""
    account: Optional[Account] = None
    user: Optional[User] = None

    @classmethod
    def from_api(cls, data: dict) -> "Whoami":
        account = data.get("account")
        user = data.get("user")
        return cls(
            account=Account.from_api(account) if account else None,
            user=User.from_api(user) if user else None,
        )


@dataclass
class Domain:
    id: int
    name: str
    unicode_name: str = ""
    state: str = ""
    auto_renew: bool = False
    private_whois: bool = False
    expires_at: str = ""
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_api(cls, data: dict) -> "Domain":
        return cls(
            id=_int(data.get("id")),
            name=str(data.get("name") or ""),
            unicode_name=str(data.get("unicode_name") or ""),
            state=str(data.get("state") or ""),
            auto_renew=bool(data.get("auto_renew", False)),
            private_whois=bool(data.get("private_whois", False)),
            expires_at=str(data.get("expires_at") or ""),
            created_at=str(data.get("created_at") or ""),
            updated_at=str(data.get("updated_at") or ""),
        )


@dataclass
class Zone:
    id: int
    name: str
    active: bool = True
    reverse: bool = False
    secondary: bool = False
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_api(cls, data: dict) -> "Zone":
        return cls(
            id=_int(data.get("id")),
            name=str(data.get("name") or ""),
            active=bool(data.get("active", True)),
            reverse=bool(data.get("reverse", False)),
            secondary=bool(data.get("secondary", False)),
            created_at=str(data.get("created_at") or ""),
            updated_at=str(data.get("updated_at") or ""),
        )


@dataclass
class ZoneRecord:
    id: int
    type: str
    name: str = ""          # "" is the zone apex
    content: str = ""
    ttl: int = 3600
    priority: int = 0
    zone_id: str = ""
    regions: list[str] = field(default_factory=list)
    system_record: bool = False
    created_at: str = ""
    updated_at: str = ""

    @property
    def display_name(self) -> str:
        return self.name or "@"

    @classmethod
    def from_api(cls, data: dict) -> "ZoneRecord":
        regions = data.get("regions") or []
        if not isinstance(regions, list):
            regions = [str(regions)]
        return cls(
            id=_int(data.get("id")),
            type=str(data.get("type") or ""),
            name=str(data.get("name") or ""),
            content=str(data.get("content") or ""),
            ttl=_int(data.get("ttl")),
            priority=_int(data.get("priority")),
            zone_id=str(data.get("zone_id") or ""),
            regions=[str(r) for r in regions],
            system_record=bool(data.get("system_record", False)),
            created_at=str(data.get("created_at") or ""),
            updated_at=str(data.get("updated_at") or ""),
        )
