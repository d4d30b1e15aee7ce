"""
Test BrowserSessionManager / Tab lifecycle
"""

import asyncio

import pytest

from wattpad_archiver.browser_session import BrowserSessionManager, Tab
from wattpad_archiver.exceptions import BrowserSessionError

from fakes import FakeBrowser, FakePage


def test_new_tab_wraps_new_page():
    browser = FakeBrowser()
    session = BrowserSessionManager(browser=browser)

    tab = asyncio.run(session.new_tab())

    assert isinstance(tab, Tab)
    assert tab.page is browser.pages[0]
    assert "crash" in tab.page.handlers


def test_tabs_are_distinct_per_call():
    browser = FakeBrowser()
    session = BrowserSessionManager(browser=browser)

    async def scenario():
        return await asyncio.gather(session.new_tab(), session.new_tab(), session.new_tab())

    tabs = asyncio.run(scenario())

    assert len({id(tab.page) for tab in tabs}) == 3


def test_release_blanks_then_closes_once():
    page = FakePage()
    tab = Tab(page)

    async def scenario():
        first = await tab.release()
        second = await tab.release()
        return first, second

    assert asyncio.run(scenario()) == (True, False)
    assert [url for url, _ in page.goto_calls] == ["about:blank"]
    assert page.close_count == 1


def test_crash_callbacks_and_release_skips_blank_navigation():
    page = FakePage()
    tab = Tab(page)
    seen = []
    tab.on_crash(lambda: seen.append("crash"))

    page.crash()
    asyncio.run(tab.release())

    assert tab.crashed
    assert seen == ["crash"]
    assert page.goto_calls == []
    assert page.close_count == 1


def test_new_tab_failure_is_browser_session_error():
    session = BrowserSessionManager(browser=FakeBrowser(fail=True))

    with pytest.raises(BrowserSessionError):
        asyncio.run(session.new_tab())


def test_new_tab_before_start():
    session = BrowserSessionManager()

    with pytest.raises(BrowserSessionError):
        asyncio.run(session.new_tab())


def test_stop_closes_browser():
    browser = FakeBrowser()
    session = BrowserSessionManager(browser=browser)

    asyncio.run(session.stop())

    assert browser.closed
    assert session.browser is None
