"""
Scrape orchestrator - turns one entry URL into a complete, ordered story.

States: STARTING -> NAVIGATING_TOC -> EXTRACTING_CHAPTERS -> NAVIGATING_SUMMARY
-> PERSISTING -> DONE, ending in SUCCEEDED or FAILED. Any error on the way,
including a tab crash signalled asynchronously, ends in FAILED: error flag and
deletion marker set, progress cleared, tab released.
"""

import asyncio
import traceback
from enum import Enum

from wattpad_archiver import config
from wattpad_archiver.exceptions import ExtractionError, JobAbortedError, PageCrashError, ScrapeError
from wattpad_archiver.models import Document, now_ms
from wattpad_archiver.page_driver import PageDriver
from wattpad_archiver.scrapers import ChapterContentScraper, StoryScraper
from wattpad_archiver.utils import job_tag, safe_print
from wattpad_archiver.utils.url_utils import build_page_url


class ScrapeState(Enum):
    """Trạng thái của một job"""

    STARTING = "starting"
    NAVIGATING_TOC = "navigating_toc"
    EXTRACTING_CHAPTERS = "extracting_chapters"
    NAVIGATING_SUMMARY = "navigating_summary"
    PERSISTING = "persisting"
    DONE = "done"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


TERMINAL_STATES = (ScrapeState.SUCCEEDED, ScrapeState.FAILED)


class ScrapeRun:
    """Mutable state of one in-flight job"""

    def __init__(self, job, tab):
        self.job = job
        self.tab = tab
        self.state = ScrapeState.STARTING
        self.error = None
        self.crash_task = None
        # Serializes store writes so no progress lands after the failure cleanup
        self.store_lock = asyncio.Lock()

    @property
    def finished(self):
        return self.state in TERMINAL_STATES


class ScrapeOrchestrator:
    """Drives a Tab through table of contents, chapters and summary page"""

    def __init__(self, session, store, driver=None, base_url=None):
        """
        Args:
            session: BrowserSessionManager (tab provider)
            store: ProgressStore
            driver: PageDriver (default PageDriver())
            base_url: origin cho chapter hrefs (default config.BASE_URL)
        """
        self.session = session
        self.store = store
        self.driver = driver or PageDriver()
        self.base_url = base_url or config.BASE_URL
        # job_id -> ScrapeRun, only while run() is executing
        self.active_runs = {}

    async def run(self, job):
        """
        Scrape job end to end

        Returns:
            job.job_id on success, None on failure (never raises ScrapeError)
        """
        tag = job_tag(job.job_id)
        safe_print(f"📚 {tag} requestedURL: {job.url}")

        try:
            tab = await self.session.new_tab()
        except ScrapeError as e:
            safe_print(f"❌ {tag} Không mở được tab: {e}")
            await self._report_error(job.job_id)
            return None

        run = ScrapeRun(job, tab)
        self.active_runs[job.job_id] = run
        loop = asyncio.get_running_loop()
        tab.on_crash(lambda: self._schedule_crash(loop, run))

        try:
            document = await self._scrape(run)

            async with run.store_lock:
                self._ensure_alive(run)
                run.state = ScrapeState.PERSISTING
                await asyncio.to_thread(self.store.save_story, job.job_id, document.to_dict())

            async with run.store_lock:
                if run.finished:
                    # Crashed or force-failed while the commit was in flight
                    return None
                run.state = ScrapeState.DONE
                await asyncio.to_thread(self.store.report_success, job.job_id)
                run.state = ScrapeState.SUCCEEDED
            safe_print(f"🎉 {tag} Hoàn thành: {document.title} ({len(document.pages)} chapters)")
            return job.job_id
        except Exception as e:
            await self._fail(run, e)
            return None
        finally:
            if self.active_runs.get(job.job_id) is run:
                del self.active_runs[job.job_id]
            await tab.release()
            if run.crash_task is not None:
                await run.crash_task

    async def force_fail(self, job_id):
        """
        Move a running job to FAILED from outside (termination sweep).

        The store is not written here: the caller reports the error. Returns
        once any store write of the job already in flight has landed, so no
        write of that job can follow the caller's cleanup.

        Returns:
            True if a running job was stopped
        """
        run = self.active_runs.get(job_id)
        if run is None or run.finished:
            return False
        run.state = ScrapeState.FAILED
        run.error = JobAbortedError(f"Job {job_id} was force-failed")
        safe_print(f"🛑 {job_tag(job_id)} Force-failed, job sẽ dừng ở bước kế tiếp")
        async with run.store_lock:
            pass
        return True

    # ==================== STATES ====================

    async def _scrape(self, run):
        job, tab = run.job, run.tab
        tag = job_tag(job.job_id)

        run.state = ScrapeState.NAVIGATING_TOC
        identity = await self.driver.navigate(tab, job.url)
        safe_print(f"   {tag} {identity}")

        title = await self.driver.run_extractor(tab, StoryScraper.extract_title)
        author = await self.driver.run_extractor(tab, StoryScraper.extract_author)
        chapter_refs = await self.driver.run_extractor(tab, StoryScraper.extract_chapters)
        landing_ref = await self.driver.run_extractor(tab, StoryScraper.extract_link)
        document = Document(
            title=title,
            author=author,
            summary=await self._provisional_summary(tab),
        )

        run.state = ScrapeState.EXTRACTING_CHAPTERS
        total = len(chapter_refs)
        for index, ref in enumerate(chapter_refs, 1):
            self._ensure_alive(run)
            chapter_url = build_page_url(ref, self.base_url)
            await self.driver.navigate(tab, chapter_url)
            await self.driver.auto_scroll(tab)
            items = await self.driver.run_extractor(tab, ChapterContentScraper.extract_content)
            document.pages.append(items)
            safe_print(f"   {tag} [{index}/{total}] {chapter_url}")
            await self._report_progress(run, index, total)

        self._ensure_alive(run)
        run.state = ScrapeState.NAVIGATING_SUMMARY
        summary_url = build_page_url(landing_ref, self.base_url)
        await self.driver.navigate(tab, summary_url)
        # Summary trang landing ghi đè summary đọc ở trang mục lục
        document.summary = await self.driver.run_extractor(tab, StoryScraper.extract_summary)
        document.url = summary_url
        document.timestamp = now_ms()
        safe_print(f"   {tag} summaryURL: {summary_url}")
        return document

    async def _provisional_summary(self, tab):
        try:
            return await self.driver.run_extractor(tab, StoryScraper.extract_summary)
        except ExtractionError:
            return None

    # ==================== DISPOSITION ====================

    @staticmethod
    def _ensure_alive(run):
        if run.tab.crashed:
            raise PageCrashError(f"Tab of job {run.job.job_id} crashed")
        if run.finished:
            raise JobAbortedError(f"Job {run.job.job_id} already failed")

    async def _report_progress(self, run, current, total):
        async with run.store_lock:
            self._ensure_alive(run)
            await asyncio.to_thread(self.store.report_progress, run.job.job_id, current, total)

    async def _report_error(self, job_id):
        try:
            await asyncio.to_thread(self.store.report_error, job_id)
        except ScrapeError as e:
            safe_print(f"⚠️ {job_tag(job_id)} Không ghi được trạng thái lỗi: {e}")

    async def _fail(self, run, error):
        """Move run to FAILED and report it; later calls are no-ops"""
        if run.finished:
            return
        run.state = ScrapeState.FAILED
        run.error = error
        safe_print(f"❌ {job_tag(run.job.job_id)} {type(error).__name__}: {error}")
        if not isinstance(error, ScrapeError):
            traceback.print_exception(type(error), error, error.__traceback__)
        async with run.store_lock:
            await self._report_error(run.job.job_id)

    def _schedule_crash(self, loop, run):
        if run.crash_task is None:
            run.crash_task = loop.create_task(self._handle_crash(run))

    async def _handle_crash(self, run):
        if run.finished:
            return
        await self._fail(run, PageCrashError(f"Tab of job {run.job.job_id} crashed"))
        await run.tab.release()
