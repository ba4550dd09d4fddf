"""
Settings page of the target platform.

PhoneFieldLocator holds everything that depends on the table markup of the
settings page. Swap it out when the platform changes that layout.
"""
import re

from playwright.async_api import Locator, Page

from config.settings import PlatformLabels, Settings
from core.logger import automation_log
from utils.wait_utils import WaitUtils

EMPTY_TEXT = re.compile(r"^$")


class PhoneFieldLocator:
    """Finds the phone input and site selector of the unassigned row."""

    def __init__(self, page: Page, labels: PlatformLabels):
        self.page = page
        self.labels = labels

    async def locate_phone_field(self) -> Locator:
        # The empty row turns editable once its cell is clicked.
        await self.page.get_by_role("row").filter(has_text=EMPTY_TEXT).get_by_role("cell").click()
        return (
            self.page.get_by_role("row")
            .filter(has_text=self.labels.site_placeholder)
            .get_by_role("textbox")
        )

    async def choose_site(self, site: str):
        await self.page.get_by_role("combobox").filter(has_text=self.labels.site_placeholder).click()
        await self.page.get_by_role("option", name=site).click()


class SettingsPage:
    def __init__(self, page: Page, settings: Settings, field_locator: PhoneFieldLocator = None):
        self.page = page
        self.settings = settings
        self.field_locator = field_locator or PhoneFieldLocator(page, settings.platform.labels)

    async def open(self):
        platform = self.settings.platform
        automation_log("⚙️ Opening settings")
        await self.page.get_by_role("link", name=platform.labels.settings_link).click()
        await self.page.wait_for_url(
            f"**{platform.settings_path}",
            timeout=self.settings.timeouts.settings_navigation,
        )

    async def save_phone_number(self, phone_number: str) -> int:
        """Fill and save the phone number; returns the HTTP status of the save call."""
        platform = self.settings.platform
        timeouts = self.settings.timeouts

        phone_field = await self.field_locator.locate_phone_field()
        await phone_field.fill(phone_number)
        await self.field_locator.choose_site(platform.site_option)

        async with self.page.expect_response(
            WaitUtils.url_contains(platform.settings_path),
            timeout=timeouts.save_response,
        ) as response_info:
            await self.page.get_by_role("button", name=platform.labels.save_button).click()
        response = await response_info.value
        automation_log(f"💾 Save response status {response.status}")

        await WaitUtils.settle(self.page, timeouts.settle, floor_ms=timeouts.settle_floor)
        return response.status
