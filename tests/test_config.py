"""Tests for config dir resolution and the credential store."""

import os
import stat

import pytest

from simpledns.config import CONFIG_DIR_ENV, DEFAULT_CONFIG_DIR, Config, ConfigError, CredentialStore, resolve_config_dir


class TestResolveConfigDir:

    def test_override_wins(self, monkeypatch, tmp_path):
        monkeypatch.setenv(CONFIG_DIR_ENV, str(tmp_path / "env"))
        assert resolve_config_dir(str(tmp_path / "override")) == tmp_path / "override"

    def test_env_then_default(self, monkeypatch, tmp_path):
        monkeypatch.setenv(CONFIG_DIR_ENV, str(tmp_path / "env"))
        assert resolve_config_dir() == tmp_path / "env"
        monkeypatch.delenv(CONFIG_DIR_ENV)
        assert resolve_config_dir() == DEFAULT_CONFIG_DIR

    def test_tilde_is_expanded(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert resolve_config_dir("~/dns") == tmp_path / "dns"


class TestCredentialStore:

    def test_token_round_trip(self, store):
        assert not store.has_token()
        store.save_token("secret-token")
        assert store.has_token()
        assert store.load_token() == "secret-token"

    def test_files_are_private(self, store):
        store.save_token("secret-token")
        store.save_config(Config(account_id="1234"))
        assert stat.S_IMODE(os.stat(store.token_path).st_mode) == 0o600
        assert stat.S_IMODE(os.stat(store.config_path).st_mode) == 0o600

    def test_missing_token(self, store):
        with pytest.raises(ConfigError, match="not authenticated"):
            store.load_token()

    def test_remove_token(self, store):
        assert store.remove_token() is False
        store.save_token("secret-token")
        assert store.remove_token() is True
        assert not store.has_token()

    def test_config_defaults_when_missing(self, store):
        assert store.load_config() == Config()

    def test_config_round_trip(self, store):
        store.save_config(Config(account_id="1234", sandbox=True))
        assert store.load_config() == Config(account_id="1234", sandbox=True)

    def test_bad_config_file(self, store):
        store.config_dir.mkdir(parents=True)
        store.config_path.write_text("- just\n- a list\n")
        with pytest.raises(ConfigError, match="not a mapping"):
            store.load_config()

    def test_set_config_dir(self, store, tmp_path):
        store.set_config_dir(str(tmp_path / "elsewhere"))
        assert store.token_path == tmp_path / "elsewhere" / "token"
        with pytest.raises(ConfigError, match="cannot be empty"):
            store.set_config_dir("   ")


class TestPrivateWrites:

    def test_temp_file_never_world_readable(self, store, monkeypatch):
        modes = []
        real_open = os.open

        def recording_open(path, flags, mode=0o777):
            modes.append(mode)
            return real_open(path, flags, mode)

        monkeypatch.setattr(os, "open", recording_open)
        store.save_token("secret-token")
        assert modes == [0o600]

    def test_failed_write_leaves_no_temp_file(self, store, monkeypatch):
        def broken_replace(self, target):
            raise OSError("disk full")

        monkeypatch.setattr(type(store.token_path), "replace", broken_replace)
        with pytest.raises(ConfigError, match="disk full"):
            store.save_token("secret-token")
        assert list(store.config_dir.iterdir()) == []
