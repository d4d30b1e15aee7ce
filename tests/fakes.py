"""
In-memory stand-ins for the Playwright browser/page and the MongoDB database,
plus HTML fixtures shaped like Wattpad pages.
"""

import asyncio
import copy
import threading

from playwright.async_api import Error as PlaywrightError
from pymongo.errors import PyMongoError

BASE_URL = "https://www.wattpad.com"
ENTRY_URL = BASE_URL + "/story/83744060-the-friendly-neighbourhood-alien/parts"
LANDING_REF = "/story/83744060-the-friendly-neighbourhood-alien"
CHAPTER_REFS = ["/1000001-chapter-one", "/1000002-chapter-two", "/1000003-chapter-three"]


# ==================== HTML FIXTURES ====================

def toc_html(title="The Friendly Neighbourhood Alien", author="test_author",
             refs=CHAPTER_REFS, landing=LANDING_REF, summary=None):
    items = "".join(
        f'<li><a class="on-navigate" href="{ref}">Part {i}</a></li>'
        for i, ref in enumerate(refs, 1)
    )
    description = f'<h2 class="description"><pre>{summary}</pre></h2>' if summary else ""
    return f"""<html><body>
<div class="toc-header text-center"><a class="on-navigate" href="{landing}">{title}</a></div>
<span class="title h5">{title}</span>
<span class="author h6">{author}</span>
{description}
<ul class="table-of-contents">{items}</ul>
</body></html>"""


def chapter_html(heading, paragraphs):
    body = "".join(
        f'<p data-p-id="p{i}">{text}</p>' for i, text in enumerate(paragraphs)
    )
    return f"""<html><body>
<header><h2>{heading}</h2></header>
<div class="panel-reading">{body}</div>
</body></html>"""


def landing_html(summary):
    return f'<html><body><h2 class="description"><pre>{summary}</pre></h2></body></html>'


def build_site(refs=CHAPTER_REFS, summary="A friendly alien lands on Earth."):
    site = {ENTRY_URL: toc_html(refs=refs)}
    for i, ref in enumerate(refs, 1):
        site[BASE_URL + ref] = chapter_html(f"Chapter {i}", [f"Paragraph {i}.1", f"Paragraph {i}.2"])
    site[BASE_URL + LANDING_REF] = landing_html(summary)
    return site


# ==================== PLAYWRIGHT ====================

class FakeResponse:
    def __init__(self, status=200):
        self.status = status


class FakeCDPSession:
    def __init__(self, page):
        self.page = page
        self.sent = []

    async def send(self, method, params=None):
        if self.page.close_count:
            raise PlaywrightError("Target page, context or browser has been closed")
        self.sent.append((method, params))
        if method == "Network.setUserAgentOverride":
            self.page.user_agents.append(params["userAgent"])
        return {}


class FakeContext:
    def __init__(self):
        self.cdp_sessions = []

    async def new_cdp_session(self, page):
        session = FakeCDPSession(page)
        self.cdp_sessions.append(session)
        return session


class FakePage:
    """Async page serving HTML from a dict keyed by URL"""

    def __init__(self, site=None, statuses=None, on_goto=None):
        self.site = dict(site or {})
        self.statuses = dict(statuses or {})
        self.on_goto = on_goto
        self.url = "about:blank"
        self.goto_calls = []
        self.user_agents = []
        self.context = FakeContext()
        self.evaluate_calls = []
        self.scroll_delay = 0
        self.close_count = 0
        self.handlers = {}

    def on(self, event, handler):
        self.handlers.setdefault(event, []).append(handler)

    def crash(self):
        for handler in self.handlers.get("crash", []):
            handler(self)

    def visited(self):
        return [url for url, _ in self.goto_calls if url != "about:blank"]

    @property
    def user_agent(self):
        return self.user_agents[-1] if self.user_agents else "HeadlessChrome"

    async def goto(self, url, **kwargs):
        if self.close_count:
            raise PlaywrightError("Target page, context or browser has been closed")
        self.goto_calls.append((url, kwargs))
        if self.on_goto is not None:
            self.on_goto(self, url)
        self.url = url
        return FakeResponse(self.statuses.get(url, 200))

    async def content(self):
        return self.site.get(self.url, "<html><body></body></html>")

    async def evaluate(self, script, arg=None):
        self.evaluate_calls.append(arg)
        if self.scroll_delay:
            await asyncio.sleep(self.scroll_delay)
        return 0

    async def wait_for_selector(self, selector, **kwargs):
        return None

    async def pdf(self, **kwargs):
        self.pdf_options = kwargs
        return b"%PDF-1.4 fake"

    async def close(self):
        self.close_count += 1


class FakeBrowser:
    def __init__(self, site=None, fail=False, on_goto=None):
        self.site = site or {}
        self.fail = fail
        self.on_goto = on_goto
        self.pages = []
        self.closed = False

    async def new_page(self):
        if self.fail:
            raise PlaywrightError("Browser has been closed")
        page = FakePage(self.site, on_goto=self.on_goto)
        self.pages.append(page)
        return page

    async def close(self):
        self.closed = True


# ==================== MONGODB ====================

def _matches(doc, query):
    for key, condition in (query or {}).items():
        value = doc.get(key)
        if isinstance(condition, dict):
            if "$ne" in condition and value == condition["$ne"]:
                return False
        elif value != condition:
            return False
    return True


class FakeCursor:
    def __init__(self, docs):
        self.docs = list(docs)

    def sort(self, key, direction=1):
        self.docs.sort(key=lambda d: d.get(key) or 0, reverse=direction < 0)
        return self

    def limit(self, n):
        self.docs = self.docs[:n]
        return self

    def __iter__(self):
        return iter(self.docs)


class FakeCollection:
    """Subset of pymongo Collection used by ProgressStore"""

    def __init__(self):
        self.docs = {}
        self.writes = []
        self.fail = False
        self._lock = threading.Lock()

    def _check(self):
        if self.fail:
            raise PyMongoError("connection refused")

    def update_one(self, query, update, upsert=False):
        self._check()
        with self._lock:
            doc_id = query["_id"]
            doc = self.docs.get(doc_id)
            if doc is None:
                if not upsert:
                    return
                doc = {"_id": doc_id}
                self.docs[doc_id] = doc
            doc.update(copy.deepcopy(update["$set"]))
            self.writes.append(dict(update["$set"]))

    def replace_one(self, query, replacement, upsert=False):
        self._check()
        with self._lock:
            doc_id = query["_id"]
            if doc_id not in self.docs and not upsert:
                return
            doc = copy.deepcopy(replacement)
            doc["_id"] = doc_id
            self.docs[doc_id] = doc
            self.writes.append(dict(replacement))

    def insert(self, doc):
        self.docs[doc["_id"]] = copy.deepcopy(doc)

    def find_one(self, query):
        self._check()
        for doc in self.docs.values():
            if _matches(doc, query):
                return copy.deepcopy(doc)
        return None

    def find(self, query=None):
        self._check()
        return FakeCursor(copy.deepcopy(d) for d in self.docs.values() if _matches(d, query))


class FakeDatabase:
    def __init__(self):
        self.collections = {}

    def __getitem__(self, name):
        return self.collections.setdefault(name, FakeCollection())
