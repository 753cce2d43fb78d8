"""Bounded in-process queue that runs comparison jobs.

Each submitted comparison has a ``comparison_jobs`` row; the row, not the
in-memory queue, is the source of truth, so jobs left behind by a stopped
process are picked up again by ``recover()``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.agents.llm_provider import LLMProvider
from app.agents.orchestrator import mark_comparison_failed, run_comparison_pipeline
from app.db import crud
from app.models.base import utcnow

logger = logging.getLogger(__name__)


class JobQueue:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        worker_count: int = 2,
        max_size: int = 100,
        llm_factory: Callable[[], LLMProvider] | None = None,
    ):
        self._session_factory = session_factory
        self._worker_count = worker_count
        self._max_size = max_size
        self._llm_factory = llm_factory
        self._queue: asyncio.Queue[str] | None = None
        self._workers: list[asyncio.Task] = []

    @property
    def running(self) -> bool:
        return bool(self._workers)

    def _get_queue(self) -> asyncio.Queue[str]:
        if self._queue is None:
            self._queue = asyncio.Queue(maxsize=self._max_size)
        return self._queue

    async def start(self):
        if self.running:
            return
        queue = self._get_queue()
        self._workers = [
            asyncio.create_task(self._worker(queue, n), name=f"comparison-worker-{n}")
            for n in range(self._worker_count)
        ]
        logger.info("Job queue started with %d worker(s)", self._worker_count)

    async def stop(self):
        for task in self._workers:
            task.cancel()
        await asyncio.gather(*self._workers, return_exceptions=True)
        self._workers = []
        logger.info("Job queue stopped")

    async def submit(self, job_id: str):
        """Enqueue a job; waits for room when the queue is full."""
        await self._get_queue().put(job_id)
        logger.debug("Job %s enqueued", job_id)

    async def join(self):
        await self._get_queue().join()

    async def _worker(self, queue: asyncio.Queue[str], n: int):
        while True:
            job_id = await queue.get()
            try:
                await self.run_job(job_id)
            except Exception:
                logger.exception("Worker %d crashed on job %s", n, job_id)
            finally:
                queue.task_done()

    async def run_job(self, job_id: str) -> dict:
        """Run one queued job to completion and record the outcome on its row."""
        async with self._session_factory() as db:
            job = await crud.get_job(db, job_id)
            if not job or job.status != "queued":
                logger.warning("Job %s is not queued, skipping", job_id)
                return {"status": "skipped"}

            await crud.update_job(db, job, status="running",
                                  attempts=job.attempts + 1, started_at=utcnow())
            llm = self._llm_factory() if self._llm_factory else None
            try:
                result = await run_comparison_pipeline(job.comparison_id, db, llm)
            except Exception as e:
                logger.exception("Job %s crashed outside the comparison run", job_id)
                await db.rollback()
                result = {"status": "failed", "error": f"{type(e).__name__}: {e}"}

            job = await crud.get_job(db, job_id)
            failed = result.get("status") != "completed"
            await crud.update_job(
                db, job,
                status="failed" if failed else "succeeded",
                error=result.get("error") if failed else None,
                finished_at=utcnow(),
            )
            return result

    async def recover(self) -> dict:
        """Requeue jobs that never started; fail jobs interrupted mid-run."""
        requeued, interrupted = [], []
        async with self._session_factory() as db:
            for job in await crud.list_jobs_by_status(db, "running"):
                await mark_comparison_failed(db, job.comparison_id, "Interrupted by a service restart")
                await crud.update_job(db, job, status="failed",
                                      error="interrupted", finished_at=utcnow())
                interrupted.append(job.id)
            for job in await crud.list_jobs_by_status(db, "queued"):
                requeued.append(job.id)
        for job_id in requeued:
            await self.submit(job_id)
        if requeued or interrupted:
            logger.info("Recovered jobs: %d requeued, %d interrupted", len(requeued), len(interrupted))
        return {"requeued": requeued, "interrupted": interrupted}


def _build_default_queue() -> JobQueue:
    from app.config import get_settings
    from app.db.engine import async_session_factory

    jobs = get_settings().jobs
    return JobQueue(async_session_factory, worker_count=jobs.worker_count, max_size=jobs.max_queue_size)


job_queue = _build_default_queue()
