"""
Tests for the phone update automation sequence (operations/phone_update.py).
"""
import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from core.credentials import Credentials
from models.data_models import UpdateState
from operations.phone_update import AutomationFailed, PhoneUpdateOperation
from tests.fakes import BASE_URL, FakeBrowserFactory

CREDENTIALS = Credentials(username="ops@example.com", password="s3cret")
PHONE = "+15551234567"

HAPPY_PATH_STEPS = [
    "new_page:",
    f"goto:{BASE_URL}/login",
    "click:textbox[Email address]",
    "fill:textbox[Email address]",
    "fill:textbox[Password]",
    "click:button[Login]",
    f"response:{BASE_URL}/api/login",
    "wait_for_url:**/trials",
    "click:link[Settings]",
    "wait_for_url:**/settings",
    "click:row|^$>cell",
    "fill:row|Select Site>textbox",
    "click:combobox|Select Site",
    "click:option[Default]",
    "click:button[Save changes]",
    f"response:{BASE_URL}/api/settings",
    "wait_for_load_state:networkidle",
]


def run(operation, credentials=CREDENTIALS, phone=PHONE):
    return asyncio.run(operation.run(credentials, phone))


class TestSuccessfulUpdate:
    """Test suite for the fully successful path."""

    def test_walks_every_step_in_order(self, test_settings, browser_factory):
        """Test the browser actions follow the login, settings, save sequence."""
        operation = PhoneUpdateOperation(test_settings, browser_factory=browser_factory)

        run(operation)

        assert browser_factory.page.keys() == HAPPY_PATH_STEPS

    def test_outcome_reports_saved_number(self, test_settings, browser_factory):
        """Test the outcome echoes the phone number with a fresh timestamp."""
        operation = PhoneUpdateOperation(test_settings, browser_factory=browser_factory)
        before = datetime.now(timezone.utc)

        outcome = run(operation)

        assert outcome.success is True
        assert outcome.state is UpdateState.SAVE_SUCCEEDED
        assert outcome.phone_number == PHONE
        assert outcome.save_status == 200
        assert before <= outcome.finished_at <= datetime.now(timezone.utc) + timedelta(seconds=1)

    def test_fills_credentials_and_phone(self, test_settings, browser_factory):
        """Test credentials and phone number land in the right fields."""
        operation = PhoneUpdateOperation(test_settings, browser_factory=browser_factory)

        run(operation)

        filled = browser_factory.page.filled()
        assert filled["textbox[Email address]"] == "ops@example.com"
        assert filled["textbox[Password]"] == "s3cret"
        assert filled["row|Select Site>textbox"] == PHONE

    def test_state_history(self, test_settings, browser_factory):
        """Test the state machine path for a successful save."""
        operation = PhoneUpdateOperation(test_settings, browser_factory=browser_factory)

        run(operation)

        assert operation.history == [
            UpdateState.VALIDATING,
            UpdateState.AUTHENTICATING,
            UpdateState.LOGIN_PENDING,
            UpdateState.SETTINGS_PAGE,
            UpdateState.SAVE_PENDING,
            UpdateState.SAVE_SUCCEEDED,
            UpdateState.CLOSED,
        ]
        assert browser_factory.sessions[0].close_calls == 1

    def test_uses_configured_site_option(self, test_settings, browser_factory):
        """Test the site selector option comes from settings."""
        test_settings.platform.site_option = "North Clinic"
        operation = PhoneUpdateOperation(test_settings, browser_factory=browser_factory)

        run(operation)

        assert "click:option[North Clinic]" in browser_factory.page.keys()

    def test_repeated_requests_update_twice(self, test_settings, browser_factory):
        """Test identical requests are not deduplicated."""
        run(PhoneUpdateOperation(test_settings, browser_factory=browser_factory))
        run(PhoneUpdateOperation(test_settings, browser_factory=browser_factory))

        assert browser_factory.launches == 2
        for session in browser_factory.sessions:
            assert "click:button[Save changes]" in session.page.keys()
            assert session.close_calls == 1


class TestLoginFailure:
    """Test suite for rejected target-platform logins."""

    def test_non_200_login_response(self, test_settings):
        """Test a non-200 login response is a login failure, not an error."""
        factory = FakeBrowserFactory(login_status=401)
        operation = PhoneUpdateOperation(test_settings, browser_factory=factory)

        outcome = run(operation)

        assert outcome.state is UpdateState.LOGIN_FAILED
        assert outcome.logged_in is False
        assert factory.sessions[0].close_calls == 1
        assert "wait_for_url:**/trials" not in factory.page.keys()

    def test_200_login_without_landing_redirect(self, test_settings):
        """Test a 200 login that never reaches the landing route still fails."""
        factory = FakeBrowserFactory(lands=False)
        operation = PhoneUpdateOperation(test_settings, browser_factory=factory)

        outcome = run(operation)

        assert outcome.state is UpdateState.LOGIN_FAILED
        assert "click:link[Settings]" not in factory.page.keys()
        assert factory.sessions[0].close_calls == 1

    def test_login_failure_history(self, test_settings):
        """Test the state machine path for a rejected login."""
        factory = FakeBrowserFactory(login_status=500)
        operation = PhoneUpdateOperation(test_settings, browser_factory=factory)

        run(operation)

        assert operation.history[-2:] == [UpdateState.LOGIN_FAILED, UpdateState.CLOSED]


class TestSaveFailure:
    """Test suite for a save call answered with a non-200 status."""

    def test_non_200_save_response(self, test_settings):
        """Test the save status is inspected explicitly."""
        factory = FakeBrowserFactory(save_status=422)
        operation = PhoneUpdateOperation(test_settings, browser_factory=factory)

        outcome = run(operation)

        assert outcome.success is False
        assert outcome.state is UpdateState.SAVE_FAILED
        assert outcome.save_status == 422
        assert operation.history[-1] is UpdateState.CLOSED
        assert factory.sessions[0].close_calls == 1


class TestAutomationFaults:
    """Test suite for faults injected at every suspension point."""

    @pytest.mark.parametrize("step", HAPPY_PATH_STEPS)
    def test_fault_releases_session(self, test_settings, step):
        """Test any fault becomes AutomationFailed and the session is closed once."""
        factory = FakeBrowserFactory(fail_at=step)
        operation = PhoneUpdateOperation(test_settings, browser_factory=factory)

        with pytest.raises(AutomationFailed, match="Injected failure"):
            run(operation)

        assert factory.sessions[0].close_calls == 1
        assert operation.history[-2:] == [UpdateState.AUTOMATION_ERROR, UpdateState.CLOSED]
        assert factory.page.keys()[-1] == step

    def test_selector_timeout(self, test_settings):
        """Test a timeout waiting for a selector surfaces its message."""
        factory = FakeBrowserFactory(
            fail_at="click:link[Settings]", fail_with=PlaywrightTimeoutError
        )
        operation = PhoneUpdateOperation(test_settings, browser_factory=factory)

        with pytest.raises(AutomationFailed) as excinfo:
            run(operation)

        assert "click:link[Settings]" in str(excinfo.value)
        assert isinstance(excinfo.value.__cause__, PlaywrightTimeoutError)
        assert factory.sessions[0].close_calls == 1

    def test_settle_timeout_is_not_a_fault(self, test_settings):
        """Test the settle wait hitting its bound does not fail the update."""
        factory = FakeBrowserFactory(
            fail_at="wait_for_load_state:networkidle", fail_with=PlaywrightTimeoutError
        )
        operation = PhoneUpdateOperation(test_settings, browser_factory=factory)

        outcome = run(operation)

        assert outcome.success is True

    def test_launch_failure_still_ends_closed(self, test_settings):
        """Test a launch that fails part way is recorded as closed after the error."""
        factory = FakeBrowserFactory(fail_on_enter=True)
        operation = PhoneUpdateOperation(test_settings, browser_factory=factory)

        with pytest.raises(AutomationFailed, match="Executable"):
            run(operation)

        assert operation.history[-2:] == [UpdateState.AUTOMATION_ERROR, UpdateState.CLOSED]
        assert factory.sessions[0].enter_calls == 1

    def test_factory_failure_never_reaches_closed(self, test_settings):
        """Test nothing is reported closed when no session was ever created."""
        def broken_factory(settings, limiter=None):
            raise RuntimeError("no browser available")

        operation = PhoneUpdateOperation(test_settings, browser_factory=broken_factory)

        with pytest.raises(AutomationFailed, match="no browser available"):
            run(operation)

        assert operation.history[-1] is UpdateState.AUTOMATION_ERROR
        assert UpdateState.CLOSED not in operation.history

    def test_error_message_masks_credentials(self, test_settings, capsys):
        """Test values typed into the login form never leave in error text."""
        class FillError(PlaywrightError):
            def __init__(self, message):
                super().__init__(f'{message}: fill("s3cret") for "ops@example.com"')

        factory = FakeBrowserFactory(fail_at="fill:textbox[Password]", fail_with=FillError)
        operation = PhoneUpdateOperation(test_settings, browser_factory=factory)

        with pytest.raises(AutomationFailed) as excinfo:
            run(operation)

        assert "s3cret" not in str(excinfo.value)
        assert "ops@example.com" not in str(excinfo.value)
        assert "Injected failure" in str(excinfo.value)
        assert "s3cret" not in capsys.readouterr().err


class TestReject:
    """Test suite for requests refused before automation."""

    def test_reject_marks_validation_error(self, test_settings, browser_factory):
        """Test reject records the validation error without a launch."""
        operation = PhoneUpdateOperation(test_settings, browser_factory=browser_factory)

        operation.reject()

        assert operation.state is UpdateState.VALIDATION_ERROR
        assert browser_factory.launches == 0
