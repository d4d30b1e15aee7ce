# -*- coding: utf-8 -*-
"""
Job queue - bounded pool of asyncio workers draining scrape jobs.

Intake never waits: submit() only enqueues. At most max_workers jobs (and so
at most max_workers tabs) are in flight at any time.
"""

import asyncio
import traceback
from typing import Dict, List, Optional

from wattpad_archiver import config
from wattpad_archiver.models import Job
from wattpad_archiver.utils import job_tag, safe_print


class ScrapeQueue:
    """FIFO of Jobs processed by a fixed number of worker tasks"""

    def __init__(self, orchestrator, max_workers: Optional[int] = None):
        """
        Args:
            orchestrator: object with async run(job)
            max_workers: số job chạy đồng thời (default: config.MAX_CONCURRENT_JOBS)
        """
        self.orchestrator = orchestrator
        self.max_workers = max_workers or config.MAX_CONCURRENT_JOBS
        self._queue: Optional[asyncio.Queue] = None
        self._workers: List[asyncio.Task] = []
        self._active: Dict[str, Job] = {}

    async def start(self):
        """Tạo queue và workers trên event loop hiện tại"""
        if self._workers:
            return
        self._queue = asyncio.Queue()
        self._workers = [
            asyncio.create_task(self._worker(i), name=f"ScrapeWorker_{i}")
            for i in range(self.max_workers)
        ]
        safe_print(f"✨ ScrapeQueue started with {self.max_workers} workers")

    def submit(self, job: Job):
        """Enqueue job; must be called on the queue's event loop thread"""
        if self._queue is None:
            raise RuntimeError("ScrapeQueue chưa được start()")
        self._queue.put_nowait(job)
        safe_print(f"📥 {job_tag(job.job_id)} queued ({self._queue.qsize()} waiting, {len(self._active)} running)")

    async def _worker(self, worker_id: int):
        while True:
            job = await self._queue.get()
            self._active[job.job_id] = job
            try:
                await self.orchestrator.run(job)
            except Exception as e:
                safe_print(f"❌ [ScrapeWorker_{worker_id}] {job_tag(job.job_id)} Unexpected error: {e}")
                traceback.print_exc()
            finally:
                self._active.pop(job.job_id, None)
                self._queue.task_done()

    async def join(self):
        """Đợi tất cả jobs đã submit chạy xong"""
        if self._queue is not None:
            await self._queue.join()

    async def stop(self):
        """Cancel workers; jobs still running are interrupted and release their tabs"""
        for worker in self._workers:
            worker.cancel()
        await asyncio.gather(*self._workers, return_exceptions=True)
        self._workers = []

    def active_jobs(self) -> List[str]:
        return list(self._active.keys())

    def pending(self) -> int:
        return self._queue.qsize() if self._queue is not None else 0
