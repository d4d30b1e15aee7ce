"""
Browser session - one Chromium process shared by every job for the lifetime
of the server, handing out tabs that each job owns exclusively.
"""

import asyncio

from playwright.async_api import async_playwright, Error as PlaywrightError

from wattpad_archiver import config
from wattpad_archiver.exceptions import BrowserSessionError
from wattpad_archiver.utils import safe_print


class Tab:
    """
    A single browser page owned by one job.

    release() navigates to about:blank and closes the page. It only does this
    once: the normal exit path and the crash handler may both call it.
    """

    def __init__(self, page):
        self.page = page
        self.crashed = False
        self.released = False
        self._crash_callbacks = []
        self._cdp_session = None
        page.on("crash", self._on_crash)

    async def set_user_agent(self, user_agent):
        """
        Override the user agent of this tab only: the request header and
        navigator.userAgent both change. Can be called before every goto.
        """
        if self._cdp_session is None:
            self._cdp_session = await self.page.context.new_cdp_session(self.page)
        await self._cdp_session.send("Network.setUserAgentOverride", {"userAgent": user_agent})

    def on_crash(self, callback):
        """Register callback() to run when the page crashes"""
        self._crash_callbacks.append(callback)

    def _on_crash(self, *args):
        self.crashed = True
        for callback in list(self._crash_callbacks):
            callback()

    async def release(self):
        """Returns True if this call closed the page, False if it was already released"""
        if self.released:
            return False
        self.released = True

        # Trang đã crash thì không navigate được, vẫn phải close
        if not self.crashed:
            try:
                await self.page.goto("about:blank")
            except PlaywrightError as e:
                safe_print(f"⚠️ Không thể chuyển tab về about:blank: {e}")
        try:
            await self.page.close()
        except PlaywrightError as e:
            safe_print(f"⚠️ Lỗi khi đóng tab: {e}")
        return True


class BrowserSessionManager:
    """Owns the shared Playwright browser; created at startup, stopped at shutdown"""

    def __init__(self, browser=None, headless=None, args=None):
        """
        Args:
            browser: an already launched browser (tests inject a fake here)
            headless: default config.HEADLESS
            args: Chromium flags, default config.BROWSER_ARGS
        """
        self.playwright = None
        self.browser = browser
        self.headless = config.HEADLESS if headless is None else headless
        self.args = list(args if args is not None else config.BROWSER_ARGS)
        self._tab_lock = None

    async def start(self):
        """Khởi động Chromium (1 lần duy nhất cho cả server)"""
        if self.browser is not None:
            return
        try:
            self.playwright = await async_playwright().start()
            self.browser = await self.playwright.chromium.launch(
                headless=self.headless,
                args=self.args,
            )
        except PlaywrightError as e:
            raise BrowserSessionError(f"Không thể khởi động Chromium: {e}") from e
        safe_print("✅ [ONSTART] Chrome browser started")

    async def new_tab(self):
        """
        Open a new page in the shared browser

        Raises:
            BrowserSessionError: browser not started or page creation failed.
                Fatal to the job asking for the tab, not to the server.
        """
        if self.browser is None:
            raise BrowserSessionError("Browser chưa được khởi động")
        if self._tab_lock is None:
            self._tab_lock = asyncio.Lock()

        async with self._tab_lock:
            try:
                page = await self.browser.new_page()
            except PlaywrightError as e:
                raise BrowserSessionError(f"Không thể mở tab mới: {e}") from e
        return Tab(page)

    async def stop(self):
        """Đóng browser và Playwright"""
        if self.browser is not None:
            try:
                await self.browser.close()
            except PlaywrightError as e:
                safe_print(f"⚠️ Lỗi khi đóng browser: {e}")
            self.browser = None
        if self.playwright is not None:
            await self.playwright.stop()
            self.playwright = None
        safe_print("zzz Browser đã tắt.")
