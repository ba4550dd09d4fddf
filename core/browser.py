import asyncio
from typing import Optional

from playwright.async_api import async_playwright, Browser, BrowserContext, Page, Playwright

from config.settings import Settings
from core.logger import automation_log


class SessionLimiter:
    """Caps how many browser sessions run at once; a bound of 0 means no cap."""

    def __init__(self, max_sessions: int = 0):
        self.max_sessions = max_sessions
        self._semaphore: Optional[asyncio.Semaphore] = (
            asyncio.Semaphore(max_sessions) if max_sessions > 0 else None
        )
        self.active = 0

    async def acquire(self):
        if self._semaphore is not None:
            await self._semaphore.acquire()
        self.active += 1

    def release(self):
        self.active -= 1
        if self._semaphore is not None:
            self._semaphore.release()


class BrowserManager:
    """One isolated headless browser, context and page set, owned by a single request."""

    def __init__(self, settings: Settings = None, limiter: Optional[SessionLimiter] = None):
        self.settings = settings or Settings()
        self.limiter = limiter
        self.playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None
        self._holds_slot = False

    async def __aenter__(self):
        if self.limiter is not None:
            await self.limiter.acquire()
            self._holds_slot = True
        try:
            self.playwright = await async_playwright().start()
            self.browser = await self._create_browser()
            self.context = await self._create_context()
        except BaseException:
            await self.close()
            raise
        automation_log("🧭 Browser session opened")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    @property
    def is_open(self) -> bool:
        return any(handle is not None for handle in (self.context, self.browser, self.playwright))

    async def close(self):
        """Release whatever was opened. Safe to call again once everything is released."""
        first_error: Optional[Exception] = None
        context, self.context = self.context, None
        browser, self.browser = self.browser, None
        playwright, self.playwright = self.playwright, None

        for name, closer in (
            ("context", context.close if context else None),
            ("browser", browser.close if browser else None),
            ("playwright", playwright.stop if playwright else None),
        ):
            if closer is None:
                continue
            try:
                await closer()
            except Exception as exc:
                automation_log(f"⚠️ Failed to close {name}: {exc}")
                first_error = first_error or exc

        if self._holds_slot:
            self._holds_slot = False
            self.limiter.release()

        if context or browser or playwright:
            automation_log("🧹 Browser session closed")
        if first_error is not None:
            raise first_error

    async def _create_browser(self) -> Browser:
        cfg = self.settings.browser
        return await self.playwright.chromium.launch(
            headless=cfg.headless,
            args=list(cfg.launch_args),
        )

    async def _create_context(self) -> BrowserContext:
        return await self.browser.new_context(ignore_https_errors=True)

    async def new_page(self) -> Page:
        return await self.context.new_page()
