"""
Page driver - navigation, identity rotation, auto scroll and extractor calls
against one Tab. Every wait has a time limit.
"""

import asyncio
import random

from playwright.async_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError

from wattpad_archiver import config
from wattpad_archiver.exceptions import NavigationError, PageCrashError, ScrapeTimeoutError
from wattpad_archiver.scrapers.base import parse_document

# Wattpad render nội dung lazy khi scroll, phải scroll hết trang trước khi extract
SCROLL_SCRIPT = """
([distance, interval]) => new Promise((resolve) => {
    let totalHeight = 0;
    const timer = setInterval(() => {
        const scrollHeight = document.body.scrollHeight;
        window.scrollBy(0, distance);
        totalHeight += distance;
        if (totalHeight >= scrollHeight) {
            clearInterval(timer);
            resolve(totalHeight);
        }
    }, interval);
})
"""


def get_random_user_agent(user_agents=None):
    """Chọn ngẫu nhiên 1 user agent từ pool"""
    return random.choice(user_agents or config.USER_AGENTS)


class PageDriver:
    """Drives a Tab: navigate, scroll to bottom, run an extractor on the current page"""

    def __init__(self, referer=None, user_agents=None, navigation_timeout_ms=None,
                 scroll_distance=None, scroll_interval_ms=None, scroll_timeout=None):
        self.referer = referer or config.REFERER
        self.user_agents = list(user_agents or config.USER_AGENTS)
        self.navigation_timeout_ms = navigation_timeout_ms or config.NAVIGATION_TIMEOUT_MS
        self.scroll_distance = scroll_distance or config.SCROLL_DISTANCE
        self.scroll_interval_ms = scroll_interval_ms or config.SCROLL_INTERVAL_MS
        self.scroll_timeout = scroll_timeout or config.SCROLL_TIMEOUT

    def pick_identity(self):
        return get_random_user_agent(self.user_agents)

    @staticmethod
    def _check_alive(tab):
        if tab.crashed:
            raise PageCrashError("Tab crashed")

    @staticmethod
    def _browser_error(tab, error, action):
        if tab.crashed:
            return PageCrashError(f"Tab crashed during {action}: {error}")
        return NavigationError(f"{action} failed: {error}")

    async def navigate(self, tab, url, identity=None):
        """
        Load url in the tab and wait for DOMContentLoaded

        Args:
            tab: Tab owned by the caller
            url: absolute URL
            identity: user agent; a random one from the pool if None

        Returns:
            The user agent used for this navigation
        """
        self._check_alive(tab)
        identity = identity or self.pick_identity()
        page = tab.page

        try:
            # Đổi UA của tab cho mỗi lần navigate (header + navigator.userAgent)
            await tab.set_user_agent(identity)
            response = await page.goto(
                url,
                wait_until="domcontentloaded",
                timeout=self.navigation_timeout_ms,
                referer=self.referer,
            )
        except PlaywrightTimeoutError as e:
            raise ScrapeTimeoutError(f"Timed out loading {url} after {self.navigation_timeout_ms}ms") from e
        except PlaywrightError as e:
            raise self._browser_error(tab, e, f"goto {url}") from e

        if response is not None and response.status >= 400:
            raise NavigationError(f"HTTP {response.status} loading {url}")
        return identity

    async def auto_scroll(self, tab):
        """
        Scroll by scroll_distance px every scroll_interval_ms until the bottom

        Raises:
            ScrapeTimeoutError: page still not at the bottom after scroll_timeout seconds
        """
        self._check_alive(tab)
        script_args = [self.scroll_distance, self.scroll_interval_ms]
        try:
            return await asyncio.wait_for(
                tab.page.evaluate(SCROLL_SCRIPT, script_args),
                timeout=self.scroll_timeout,
            )
        except asyncio.TimeoutError as e:
            raise ScrapeTimeoutError(f"Auto scroll did not finish within {self.scroll_timeout}s") from e
        except PlaywrightError as e:
            raise self._browser_error(tab, e, "auto scroll") from e

    async def run_extractor(self, tab, extractor):
        """
        Run extractor(soup) against the tab's current document

        ExtractionError raised by the extractor propagates unchanged.
        """
        self._check_alive(tab)
        try:
            page_html = await tab.page.content()
        except PlaywrightError as e:
            raise self._browser_error(tab, e, "read page content") from e
        return extractor(parse_document(page_html))
