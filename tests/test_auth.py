"""Tests for the authentication wizard and the sign-in screen."""

import pytest
from textual.widgets import Input

from conftest import run_job, settle

from simpledns.app import SimpleDNSApp
from simpledns.backend import BackendError
from simpledns.config import CredentialStore
from simpledns.demo_backend import DemoBackend
from simpledns.models import Account, User, Whoami
from simpledns.screens.auth import AuthScreen
from simpledns.screens.shell import ShellScreen
from simpledns.tui.auth import AuthStep, AuthWizard, TokenValidated

ACCOUNT = Whoami(account=Account(id=99, email="ops@example.com", plan_identifier="teams"))


def account_token(token, sandbox):
    return ACCOUNT


def user_token(token, sandbox):
    return Whoami(user=User(id=3, email="me@example.com"))


def rejecting(token, sandbox):
    raise BackendError("invalid token: DNSimple API error (HTTP 401): Authentication failed")


def submit(wizard, token):
    wizard.begin()
    job = wizard.submit_token(token)
    if job is not None:
        wizard.apply(run_job(job))


class LiveLikeBackend(DemoBackend):
    """Demo data without the demo flag, so the app asks for a token."""

    @property
    def is_demo(self):
        return False


class TestHappyPath:

    def test_account_token(self, store):
        wizard = AuthWizard(store, validator=account_token)
        assert wizard.step is AuthStep.WELCOME

        wizard.begin()
        assert wizard.step is AuthStep.TOKEN_INPUT

        job = wizard.submit_token("  tok-123\n")
        assert wizard.step is AuthStep.VALIDATING
        assert not store.has_token()
        wizard.apply(run_job(job))
        assert wizard.step is AuthStep.SUCCESS
        assert store.load_token() == "tok-123"
        assert store.load_config().account_id == "99"
        assert wizard.whoami == ACCOUNT

    def test_user_token_resolves_account_before_saving(self, store):
        seen = []

        def resolver(token, sandbox):
            seen.append((token, store.has_token()))
            return "555"

        wizard = AuthWizard(store, validator=user_token, resolver=resolver)
        submit(wizard, "tok")
        assert seen == [("tok", False)]
        assert wizard.step is AuthStep.SUCCESS
        assert store.load_config().account_id == "555"

    def test_validation_result_is_a_message(self, store):
        wizard = AuthWizard(store, validator=account_token)
        wizard.begin()
        msg = run_job(wizard.submit_token("tok"))
        assert isinstance(msg, TokenValidated)
        assert msg.whoami == ACCOUNT

    def test_account_token_skips_lookup(self, store):
        seen = []
        wizard = AuthWizard(store, validator=account_token, resolver=lambda t, s: seen.append(t) or "1")
        submit(wizard, "tok")
        assert seen == []

    def test_account_lookup_failure_is_silent(self, store):
        def broken(token, sandbox):
            raise BackendError("no accounts found for this user")

        wizard = AuthWizard(store, validator=user_token, resolver=broken)
        submit(wizard, "tok")
        assert wizard.step is AuthStep.SUCCESS
        assert wizard.error == ""
        assert store.has_token()
        assert store.load_config().account_id == ""

    def test_sandbox_is_recorded(self, store):
        calls = []

        def validator(token, sandbox):
            calls.append(sandbox)
            return ACCOUNT

        wizard = AuthWizard(store, validator=validator, sandbox=True)
        submit(wizard, "tok")
        assert calls == [True]
        assert store.load_config().sandbox is True


class TestFailures:

    def test_empty_token(self, store):
        wizard = AuthWizard(store, validator=account_token)
        wizard.begin()
        assert wizard.submit_token("   ") is None
        assert wizard.step is AuthStep.ERROR
        assert wizard.error == "token cannot be empty"

    def test_rejected_token(self, store):
        wizard = AuthWizard(store, validator=rejecting)
        submit(wizard, "bad")
        assert wizard.step is AuthStep.ERROR
        assert "HTTP 401" in wizard.error
        assert not store.has_token()

    def test_error_retry_and_start_over(self, store):
        wizard = AuthWizard(store, validator=rejecting)
        submit(wizard, "bad")
        wizard.begin()
        assert wizard.step is AuthStep.TOKEN_INPUT
        wizard.apply(run_job(wizard.submit_token("bad")))
        assert wizard.step is AuthStep.ERROR
        wizard.back()
        assert wizard.step is AuthStep.WELCOME

    def test_late_result_ignored_after_leaving_validation(self, store):
        wizard = AuthWizard(store, validator=account_token)
        wizard.begin()
        job = wizard.submit_token("tok")
        wizard.step = AuthStep.WELCOME
        wizard.apply(run_job(job))
        assert wizard.step is AuthStep.WELCOME
        assert not store.has_token()

    def test_persistence_failure_stays_unauthenticated(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")
        store = CredentialStore(blocker / "config")
        wizard = AuthWizard(store, validator=account_token)
        submit(wizard, "tok")
        assert wizard.step is AuthStep.ERROR
        assert "failed to save token" in wizard.error
        assert not store.has_token()


class TestConfigDir:

    def test_config_dir_override(self, store, tmp_path):
        wizard = AuthWizard(store, validator=account_token)
        assert wizard.edit_config_dir() == str(store.config_dir)
        assert wizard.step is AuthStep.CONFIG_DIR

        wizard.apply_config_dir(str(tmp_path / "custom"))
        assert wizard.step is AuthStep.WELCOME
        assert store.config_dir == tmp_path / "custom"
        assert not store.config_dir.exists()

        submit(wizard, "tok")
        assert (tmp_path / "custom" / "token").read_text() == "tok"

    def test_empty_config_dir(self, store):
        wizard = AuthWizard(store, validator=account_token)
        wizard.edit_config_dir()
        wizard.apply_config_dir("   ")
        assert wizard.step is AuthStep.ERROR
        assert wizard.error == "config directory cannot be empty"

    def test_back_from_config_dir(self, store):
        wizard = AuthWizard(store, validator=account_token)
        wizard.edit_config_dir()
        wizard.back()
        assert wizard.step is AuthStep.WELCOME


@pytest.mark.anyio
class TestAuthScreen:

    async def test_sign_in_enters_shell(self, store):
        app = SimpleDNSApp(LiveLikeBackend(), store, validator=account_token)
        async with app.run_test(size=(120, 40)) as pilot:
            await settle(app, pilot)
            assert isinstance(app.screen, AuthScreen)
            wizard = app.screen.wizard

            await pilot.click("#auth-continue-btn")
            await settle(app, pilot)
            assert wizard.step is AuthStep.TOKEN_INPUT
            token_input = app.screen.query_one("#token-input", Input)
            assert token_input.password
            assert token_input.has_focus

            await pilot.press(*"tok1", "enter")
            await settle(app, pilot)
            assert wizard.step is AuthStep.SUCCESS
            assert store.load_token() == "tok1"

            await pilot.click("#auth-done-btn")
            await settle(app, pilot)
            assert isinstance(app.screen, ShellScreen)
            assert app.shell.model.home.whoami == ACCOUNT

    async def test_q_types_into_token_input(self, store):
        app = SimpleDNSApp(LiveLikeBackend(), store, validator=account_token)
        async with app.run_test(size=(120, 40)) as pilot:
            await settle(app, pilot)
            await pilot.click("#auth-continue-btn")
            await settle(app, pilot)
            await pilot.press("q")
            await settle(app, pilot)
            assert isinstance(app.screen, AuthScreen)
            assert app.screen.query_one("#token-input", Input).value == "q"

    async def test_rejected_token_shows_error_step(self, store):
        app = SimpleDNSApp(LiveLikeBackend(), store, validator=rejecting)
        async with app.run_test(size=(120, 40)) as pilot:
            await settle(app, pilot)
            await pilot.click("#auth-continue-btn")
            await settle(app, pilot)
            await pilot.press(*"bad", "enter")
            await settle(app, pilot)
            screen = app.screen
            assert screen.wizard.step is AuthStep.ERROR
            assert screen.query_one(f"#{AuthStep.ERROR.pane_id}").display
            assert not screen.query_one(f"#{AuthStep.TOKEN_INPUT.pane_id}").display
            await pilot.press("escape")
            await settle(app, pilot)
            assert screen.wizard.step is AuthStep.WELCOME
