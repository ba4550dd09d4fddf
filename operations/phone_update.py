"""
Phone number update against the target platform.

One run owns one browser session from launch to close:

    authenticating-to-target -> login-pending -> login-failed
                                              -> settings-page -> save-pending -> save-succeeded
                                                                               -> save-failed
    any uncaught fault                        -> automation-error

and every run that entered its browser session ends in `closed`, including a
launch that failed part way (the manager releases whatever it had started).
"""
from typing import Callable, Optional

from config.settings import Settings
from core.browser import BrowserManager, SessionLimiter
from core.credentials import Credentials
from core.logger import automation_log, error_log, redact
from models.data_models import PhoneUpdateOutcome, UpdateState
from ui.auth import PlatformAuthenticator
from ui.settings_page import SettingsPage


class AutomationFailed(RuntimeError):
    """The browser sequence raised before an outcome was known."""


class PhoneUpdateOperation:
    def __init__(
        self,
        settings: Settings,
        limiter: Optional[SessionLimiter] = None,
        browser_factory: Callable[..., BrowserManager] = BrowserManager,
    ):
        self.settings = settings
        self.limiter = limiter
        self.browser_factory = browser_factory
        self.history: list[UpdateState] = [UpdateState.VALIDATING]

    @property
    def state(self) -> UpdateState:
        return self.history[-1]

    def _transition(self, state: UpdateState):
        automation_log(f"➡️ {self.state.value} -> {state.value}")
        self.history.append(state)

    def reject(self):
        """Mark the request as refused before any automation started."""
        self._transition(UpdateState.VALIDATION_ERROR)

    async def run(self, credentials: Credentials, phone_number: str) -> PhoneUpdateOutcome:
        self._transition(UpdateState.AUTHENTICATING)
        manager = None
        try:
            manager = self.browser_factory(self.settings, limiter=self.limiter)
            async with manager as session:
                page = await session.new_page()

                authenticator = PlatformAuthenticator(page, self.settings)
                await authenticator.fill_credentials(credentials)
                self._transition(UpdateState.LOGIN_PENDING)
                if not await authenticator.submit():
                    self._transition(UpdateState.LOGIN_FAILED)
                    return PhoneUpdateOutcome(UpdateState.LOGIN_FAILED, phone_number)

                settings_page = SettingsPage(page, self.settings)
                self._transition(UpdateState.SETTINGS_PAGE)
                await settings_page.open()

                self._transition(UpdateState.SAVE_PENDING)
                status = await settings_page.save_phone_number(phone_number)
                state = UpdateState.SAVE_SUCCEEDED if status == 200 else UpdateState.SAVE_FAILED
                self._transition(state)
                return PhoneUpdateOutcome(state, phone_number, save_status=status)
        except Exception as exc:
            self._transition(UpdateState.AUTOMATION_ERROR)
            message = redact(str(exc), credentials.username, credentials.password)
            error_log(f"❌ Phone number update error: {message}")
            raise AutomationFailed(message) from exc
        finally:
            if manager is not None:
                self._transition(UpdateState.CLOSED)
