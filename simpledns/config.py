"""Configuration and credential storage for simpledns."""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "DNSIMPLE_CONFIG_DIR"
DEFAULT_CONFIG_DIR = Path.home() / ".config" / "simpledns"
TOKEN_FILE_NAME = "token"
CONFIG_FILE_NAME = "config.yaml"
LOG_FILE_NAME = "simpledns.log"


class ConfigError(Exception):
    """Configuration error."""
    pass


@dataclass
class Config:
    account_id: str = ""
    sandbox: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        return cls(
            account_id=str(data.get("account_id", "") or ""),
            sandbox=bool(data.get("sandbox", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def clean_config_path(raw: str) -> Path:
    """Expand ``~`` and normalise a user-supplied config directory."""
    path = (raw or "").strip()
    if not path:
        raise ConfigError("config directory cannot be empty")
    return Path(os.path.normpath(os.path.expanduser(path)))


def resolve_config_dir(override: Optional[str] = None) -> Path:
    """Resolve the config dir: explicit override, then env, then default."""
    if override and override.strip():
        return clean_config_path(override)
    env = os.environ.get(CONFIG_DIR_ENV, "").strip()
    if env:
        return clean_config_path(env)
    return DEFAULT_CONFIG_DIR


def _write_private(path: Path, text: str) -> None:
    """Write *text* to *path* with restricted permissions."""
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        os.chmod(path.parent, 0o700)
    except OSError:
        pass
    tmp = path.with_suffix(path.suffix + ".tmp")
    fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    try:
        with os.fdopen(fd, "w") as f:
            f.write(text)
        # O_CREAT's mode is ignored when the file already exists
        os.chmod(tmp, 0o600)
        tmp.replace(path)
    finally:
        if tmp.exists():
            tmp.unlink()


class CredentialStore:
    """Token and config persistence rooted at one config directory.

    The directory can be changed for the rest of the session with
    :meth:`set_config_dir` (the auth wizard's path override); nothing is
    written until a token or config is saved.
    """

    def __init__(self, config_dir: Optional[Path] = None) -> None:
        self._config_dir = config_dir or resolve_config_dir()

    @property
    def config_dir(self) -> Path:
        return self._config_dir

    @property
    def token_path(self) -> Path:
        return self._config_dir / TOKEN_FILE_NAME

    @property
    def config_path(self) -> Path:
        return self._config_dir / CONFIG_FILE_NAME

    @property
    def log_path(self) -> Path:
        return self._config_dir / LOG_FILE_NAME

    def set_config_dir(self, raw: str) -> Path:
        self._config_dir = clean_config_path(raw)
        return self._config_dir

    # -- token ------------------------------------------------------------

    def has_token(self) -> bool:
        return self.token_path.is_file()

    def load_token(self) -> str:
        try:
            token = self.token_path.read_text().strip()
        except OSError:
            raise ConfigError("not authenticated - run 'simpledns' to log in first")
        if not token:
            raise ConfigError("token file is empty - run 'simpledns' to log in again")
        return token

    def save_token(self, token: str) -> None:
        try:
            _write_private(self.token_path, token)
        except OSError as e:
            raise ConfigError(f"failed to save token to {self.token_path}: {e}")

    def remove_token(self) -> bool:
        """Delete the stored token. Returns False if there was none."""
        if not self.token_path.exists():
            return False
        try:
            self.token_path.unlink()
        except OSError as e:
            raise ConfigError(f"failed to remove token {self.token_path}: {e}")
        return True

    # -- config -----------------------------------------------------------

    def load_config(self) -> Config:
        if not self.config_path.exists():
            return Config()
        try:
            with open(self.config_path) as f:
                data = yaml.safe_load(f) or {}
        except Exception as e:
            raise ConfigError(f"Failed to read config file {self.config_path}: {e}")
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {self.config_path} is not a mapping")
        return Config.from_dict(data)

    def save_config(self, config: Config) -> None:
        text = yaml.dump(config.to_dict(), default_flow_style=False, sort_keys=False)
        try:
            _write_private(self.config_path, text)
        except OSError as e:
            raise ConfigError(f"failed to save config to {self.config_path}: {e}")
