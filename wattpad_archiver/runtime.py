"""
Scraper runtime - owns the event loop thread, the shared browser, the store
and the worker pool. Flask handlers call into it from their own threads.
"""

import asyncio
import threading

from wattpad_archiver import config
from wattpad_archiver.browser_session import BrowserSessionManager
from wattpad_archiver.handlers.progress_handler import ProgressStore
from wattpad_archiver.job_queue import ScrapeQueue
from wattpad_archiver.scraper_engine import ScrapeOrchestrator
from wattpad_archiver.services.pdf_service import render_pdf
from wattpad_archiver.utils import safe_print


class ScraperRuntime:
    """Process root: created once in main.py, injected into the Flask app"""

    def __init__(self, session=None, store=None, max_workers=None, driver=None):
        self.session = session or BrowserSessionManager()
        self.store = store
        self.max_workers = max_workers or config.MAX_CONCURRENT_JOBS
        self.driver = driver
        self.orchestrator = None
        self.queue = None
        self.loop = None
        self._thread = None

    # ==================== LIFECYCLE ====================

    def start(self):
        """Start the loop thread, connect MongoDB, launch Chromium and the workers"""
        if self.store is None:
            self.store = ProgressStore.connect()

        self.orchestrator = ScrapeOrchestrator(self.session, self.store, driver=self.driver)
        self.queue = ScrapeQueue(self.orchestrator, max_workers=self.max_workers)

        self.loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._run_loop, name="ScraperLoop", daemon=True)
        self._thread.start()

        self.run_coroutine(self._start_async())
        safe_print("✅ Scraper runtime đã khởi động!")

    def _run_loop(self):
        asyncio.set_event_loop(self.loop)
        self.loop.run_forever()

    async def _start_async(self):
        await self.session.start()
        await self.queue.start()

    async def _stop_async(self):
        await self.queue.stop()
        await self.session.stop()

    def stop(self, timeout=30):
        """Stop workers, close the browser and the Mongo client"""
        if self.loop is not None and self.loop.is_running():
            try:
                self.run_coroutine(self._stop_async(), timeout=timeout)
            finally:
                self.loop.call_soon_threadsafe(self.loop.stop)
                self._thread.join(timeout=5)
        if self.store is not None:
            self.store.close()
        safe_print("zzz Server đã tắt.")

    def run_coroutine(self, coro, timeout=None):
        """Run coro on the loop thread and block the caller until it finishes"""
        future = asyncio.run_coroutine_threadsafe(coro, self.loop)
        return future.result(timeout)

    # ==================== OPERATIONS ====================

    def submit(self, job):
        """Fire-and-forget: enqueue job and return immediately"""
        self.loop.call_soon_threadsafe(self.queue.submit, job)

    def render_pdf(self, url):
        return self.run_coroutine(render_pdf(self.session, url))

    def shutdown_sweep(self, sweep_all=None):
        """
        Force live jobs into the failed disposition (termination signal).
        Running jobs are stopped in the loop first, so none of them writes
        progress or a story after the cleanup. Does not wait for their tabs.

        Must not be called from the loop thread.

        Args:
            sweep_all: True = mọi job đang có progress (và mọi job đang chạy),
                False = chỉ job mới nhất (default config.SHUTDOWN_SWEEP_ALL)

        Returns:
            List of job ids marked as failed
        """
        if sweep_all is None:
            sweep_all = config.SHUTDOWN_SWEEP_ALL

        job_ids = self.store.find_live_jobs(limit=None if sweep_all else 1)
        if sweep_all and self.orchestrator is not None:
            job_ids += [job_id for job_id in list(self.orchestrator.active_runs) if job_id not in job_ids]

        for job_id in job_ids:
            safe_print(f"🧹 [SIGTERM] Cleaning up => {job_id}")
            self._stop_running_job(job_id)
            self.store.report_error(job_id)
        return job_ids

    def _stop_running_job(self, job_id, timeout=10):
        if self.orchestrator is None or self.loop is None or not self.loop.is_running():
            return False
        return self.run_coroutine(self.orchestrator.force_fail(job_id), timeout=timeout)
