import os
import sys
from typing import Dict, Optional

_TRUTHY = {"1", "true", "yes", "on"}
REDACTED = "***"


def _env_bool(name: str) -> bool:
    value = os.getenv(name)
    if value is None:
        return False
    return value.strip().lower() in _TRUTHY


_channel_verbose: Dict[str, bool] = {
    "general": _env_bool("APP_VERBOSE_LOGGING"),
    "automation": _env_bool("AUTOMATION_VERBOSE_LOGGING"),
}


def set_general_verbose(enabled: bool):
    _channel_verbose["general"] = bool(enabled)


def set_automation_verbose(enabled: bool):
    _channel_verbose["automation"] = bool(enabled)


def is_verbose(channel: str = "general") -> bool:
    return _channel_verbose.get(channel, False)


def redact(message: str, *secrets: Optional[str]) -> str:
    """
    Mask every occurrence of the given secrets in a message.

    Playwright call logs echo the values passed to fill(), so anything built
    from a browser error goes through here before it is printed or returned.
    Longer secrets are masked first so one secret containing another is
    hidden completely.
    """
    for secret in sorted(filter(None, secrets), key=len, reverse=True):
        message = message.replace(secret, REDACTED)
    return message


def _log(message: str, channel: str):
    if _channel_verbose.get(channel):
        print(message)


def app_log(message: str):
    _log(message, "general")


def automation_log(message: str):
    _log(message, "automation")


def error_log(message: str):
    """Errors are printed regardless of channel verbosity."""
    print(message, file=sys.stderr)
