from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class UpdateState(str, Enum):
    VALIDATING = "validating"
    VALIDATION_ERROR = "validation-error"
    AUTHENTICATING = "authenticating-to-target"
    LOGIN_PENDING = "login-pending"
    LOGIN_FAILED = "login-failed"
    SETTINGS_PAGE = "settings-page"
    SAVE_PENDING = "save-pending"
    SAVE_SUCCEEDED = "save-succeeded"
    SAVE_FAILED = "save-failed"
    AUTOMATION_ERROR = "automation-error"
    CLOSED = "closed"


TERMINAL_STATES = frozenset({
    UpdateState.VALIDATION_ERROR,
    UpdateState.LOGIN_FAILED,
    UpdateState.SAVE_SUCCEEDED,
    UpdateState.SAVE_FAILED,
    UpdateState.AUTOMATION_ERROR,
})


@dataclass
class PhoneUpdateOutcome:
    """Result of one automation run against the target platform."""
    state: UpdateState
    phone_number: str
    save_status: Optional[int] = None
    finished_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def logged_in(self) -> bool:
        return self.state is not UpdateState.LOGIN_FAILED

    @property
    def success(self) -> bool:
        return self.state is UpdateState.SAVE_SUCCEEDED


def isoformat_utc(moment: datetime) -> str:
    """Render like JavaScript's toISOString: millisecond precision, Z suffix."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utc_timestamp() -> str:
    return isoformat_utc(datetime.now(timezone.utc))
