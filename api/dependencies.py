from typing import Optional

from config.settings import Settings
from core.browser import SessionLimiter
from operations.phone_update import PhoneUpdateOperation

_settings: Optional[Settings] = None
_limiter: Optional[SessionLimiter] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


async def get_session_limiter() -> SessionLimiter:
    """Shared across requests so the browser bound applies process-wide.

    Resolved on the event loop, not the threadpool, so only one limiter is built.
    """
    global _limiter
    if _limiter is None:
        _limiter = SessionLimiter(get_settings().browser.max_sessions)
    return _limiter


async def get_phone_update_operation() -> PhoneUpdateOperation:
    return PhoneUpdateOperation(get_settings(), limiter=await get_session_limiter())
