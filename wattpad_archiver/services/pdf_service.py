"""
PDF service - render an already published story page to A4 PDF bytes
using a tab of the shared browser.
"""

from playwright.async_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError

from wattpad_archiver import config
from wattpad_archiver.exceptions import NavigationError, ScrapeTimeoutError
from wattpad_archiver.utils import safe_print


async def render_pdf(session, url, ready_selector=None, timeout_ms=None):
    """
    Args:
        session: BrowserSessionManager
        url: URL trang story đã publish (frontend)
        ready_selector: phần tử phải có trước khi in (default config.PDF_READY_SELECTOR)
        timeout_ms: giới hạn cho goto và wait_for_selector

    Returns:
        PDF bytes
    """
    ready_selector = ready_selector or config.PDF_READY_SELECTOR
    timeout_ms = timeout_ms or config.NAVIGATION_TIMEOUT_MS

    tab = await session.new_tab()
    try:
        page = tab.page
        try:
            await page.goto(url, timeout=timeout_ms)
            await page.wait_for_selector(ready_selector, timeout=timeout_ms)
            buffer = await page.pdf(format=config.PDF_FORMAT, margin=config.PDF_MARGIN)
        except PlaywrightTimeoutError as e:
            raise ScrapeTimeoutError(f"Timed out rendering {url}") from e
        except PlaywrightError as e:
            raise NavigationError(f"PDF render of {url} failed: {e}") from e
        safe_print(f"✅ [PDF] Success => Id: {url}")
        return buffer
    finally:
        await tab.release()
