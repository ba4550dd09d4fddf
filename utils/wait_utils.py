"""Async wait primitives used while driving the target platform."""

import asyncio
from typing import Callable

from playwright.async_api import Page, Response, TimeoutError as PlaywrightTimeoutError

from core.logger import automation_log


class WaitUtils:
    """Wait utilities."""

    @staticmethod
    def url_contains(fragment: str) -> Callable[[Response], bool]:
        """Predicate for page.expect_response matching any status."""
        def predicate(response: Response) -> bool:
            return fragment in response.url
        return predicate

    @staticmethod
    async def race_url_against_timer(
        page: Page,
        url_pattern: str,
        navigation_timeout_ms: int,
        grace_ms: int,
    ) -> bool:
        """
        Race a navigation to `url_pattern` against a plain timer.
        Whichever finishes first wins and the other is cancelled.
        Returns True only when the navigation completed first.
        A navigation timeout counts as losing; other navigation errors propagate.
        """
        navigation = asyncio.ensure_future(
            page.wait_for_url(url_pattern, timeout=navigation_timeout_ms)
        )
        timer = asyncio.ensure_future(asyncio.sleep(max(0, grace_ms) / 1000))
        try:
            done, _ = await asyncio.wait(
                {navigation, timer}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            for task in (navigation, timer):
                if not task.done():
                    task.cancel()
            await asyncio.gather(navigation, timer, return_exceptions=True)

        if navigation not in done:
            automation_log(f"⏱️ No navigation to {url_pattern} within {grace_ms}ms")
            return False

        error = navigation.exception()
        if error is None:
            return True
        if isinstance(error, PlaywrightTimeoutError):
            automation_log(f"⏱️ Navigation to {url_pattern} timed out")
            return False
        raise error

    @staticmethod
    async def settle(page: Page, timeout_ms: int = 3000, floor_ms: int = 0) -> bool:
        """
        Let the page finish asynchronous work after an action.
        Waits for network idle; hitting the bound is not an error.
        Always takes at least `floor_ms`, since a single-page app that changed
        route without navigating reports network idle immediately.
        """
        loop = asyncio.get_running_loop()
        started = loop.time()
        try:
            await page.wait_for_load_state("networkidle", timeout=timeout_ms)
            idle = True
        except PlaywrightTimeoutError:
            automation_log(f"⚠️ Page still busy after {timeout_ms}ms; continuing")
            idle = False

        remaining = floor_ms / 1000 - (loop.time() - started)
        if remaining > 0:
            await asyncio.sleep(remaining)
        return idle
