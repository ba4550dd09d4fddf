from playwright.async_api import Page

from config.settings import Settings
from core.credentials import Credentials
from core.logger import automation_log
from utils.wait_utils import WaitUtils


class PlatformAuthenticator:
    def __init__(self, page: Page, settings: Settings):
        self.page = page
        self.settings = settings

    async def fill_credentials(self, credentials: Credentials):
        platform = self.settings.platform
        labels = platform.labels

        automation_log(f"🌐 Navigating to login page: {platform.login_url}")
        await self.page.goto(platform.login_url)

        email_field = self.page.get_by_role("textbox", name=labels.email)
        await email_field.click()
        await email_field.fill(credentials.username)
        await self.page.get_by_role("textbox", name=labels.password).fill(credentials.password)

    async def submit(self) -> bool:
        """Submit the login form. False means the platform rejected the credentials."""
        platform = self.settings.platform
        timeouts = self.settings.timeouts

        automation_log("Submitting login form...")
        async with self.page.expect_response(
            WaitUtils.url_contains(platform.login_path),
            timeout=timeouts.login_response,
        ) as response_info:
            await self.page.get_by_role("button", name=platform.labels.login_button).click()
        response = await response_info.value

        if response.status != 200:
            automation_log(f"❌ Login response status {response.status}")
            return False

        # The platform answers 200 on rejected logins too; only the redirect
        # to the landing route tells a real login apart.
        await WaitUtils.race_url_against_timer(
            self.page,
            f"**{platform.landing_path}",
            navigation_timeout_ms=timeouts.landing_navigation,
            grace_ms=timeouts.landing_grace,
        )
        if platform.landing_path not in self.page.url:
            automation_log("❌ Login did not reach the landing page")
            return False

        automation_log("✅ Logged in successfully")
        return True
