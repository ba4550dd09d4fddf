import os
from dataclasses import dataclass, field

from core.logger import app_log, set_general_verbose, set_automation_verbose

DEFAULT_PLATFORM_URL = "https://platform.alleviatehealth.care"


def _env_flag(name: str, default: bool) -> bool:
    """Best-effort parsing of boolean env flags."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on", "y"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value.strip())
    except ValueError:
        app_log(f"⚠️ Ignoring non-integer {name}={value!r}; using {default}")
        return default


@dataclass
class BrowserConfig:
    headless: bool = True
    # 0 disables the bound and lets every request launch its own browser immediately.
    max_sessions: int = 3
    launch_args: list[str] = field(default_factory=lambda: [
        "--disable-gpu",
        "--disable-dev-shm-usage",
        "--disable-blink-features=AutomationControlled",
    ])


@dataclass
class PlatformLabels:
    """Accessible names on the target platform's pages."""
    email: str = "Email address"
    password: str = "Password"
    login_button: str = "Login"
    settings_link: str = "Settings"
    site_placeholder: str = "Select Site"
    save_button: str = "Save changes"


@dataclass
class PlatformConfig:
    base_url: str = DEFAULT_PLATFORM_URL
    login_path: str = "/login"
    landing_path: str = "/trials"
    settings_path: str = "/settings"
    site_option: str = "Default"
    labels: PlatformLabels = field(default_factory=PlatformLabels)

    @property
    def login_url(self) -> str:
        return self.base_url.rstrip("/") + self.login_path


@dataclass
class TimeoutConfig:
    """Milliseconds for each wait in the automation sequence."""
    login_response: int = 10000
    landing_navigation: int = 5000
    landing_grace: int = 2000
    settings_navigation: int = 5000
    save_response: int = 10000
    settle: int = 3000
    # Minimum dwell after saving; client-side route changes report network idle at once.
    settle_floor: int = 1000


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 3000
    expose_error_details: bool = True
    app_verbose_logging: bool = True
    automation_verbose_logging: bool = True


@dataclass
class Settings:
    browser: BrowserConfig = field(default_factory=BrowserConfig)
    platform: PlatformConfig = field(default_factory=PlatformConfig)
    timeouts: TimeoutConfig = field(default_factory=TimeoutConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    @classmethod
    def from_env(cls):
        """Load settings from environment variables"""
        settings = cls()

        settings.browser.headless = _env_flag("BROWSER_HEADLESS", settings.browser.headless)
        settings.browser.max_sessions = max(
            0, _env_int("MAX_BROWSER_SESSIONS", settings.browser.max_sessions)
        )

        settings.platform.base_url = os.getenv("PLATFORM_BASE_URL", settings.platform.base_url)
        settings.platform.site_option = os.getenv(
            "PLATFORM_SITE_OPTION", settings.platform.site_option
        )

        timeouts = settings.timeouts
        timeouts.login_response = _env_int("LOGIN_RESPONSE_TIMEOUT_MS", timeouts.login_response)
        timeouts.landing_navigation = _env_int(
            "LANDING_NAVIGATION_TIMEOUT_MS", timeouts.landing_navigation
        )
        timeouts.landing_grace = _env_int("LANDING_GRACE_MS", timeouts.landing_grace)
        timeouts.settings_navigation = _env_int(
            "SETTINGS_NAVIGATION_TIMEOUT_MS", timeouts.settings_navigation
        )
        timeouts.save_response = _env_int("SAVE_RESPONSE_TIMEOUT_MS", timeouts.save_response)
        timeouts.settle = _env_int("SETTLE_TIMEOUT_MS", timeouts.settle)
        timeouts.settle_floor = _env_int("SETTLE_FLOOR_MS", timeouts.settle_floor)

        settings.server.host = os.getenv("HOST", settings.server.host)
        settings.server.port = _env_int("PORT", settings.server.port)
        settings.server.expose_error_details = _env_flag(
            "EXPOSE_ERROR_DETAILS", settings.server.expose_error_details
        )
        settings.server.app_verbose_logging = _env_flag(
            "APP_VERBOSE_LOGGING", settings.server.app_verbose_logging
        )
        settings.server.automation_verbose_logging = _env_flag(
            "AUTOMATION_VERBOSE_LOGGING", settings.server.automation_verbose_logging
        )
        set_general_verbose(settings.server.app_verbose_logging)
        set_automation_verbose(settings.server.automation_verbose_logging)
        return settings
