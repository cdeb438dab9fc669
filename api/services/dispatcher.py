"""Launches job execution as detached asyncio tasks."""
import asyncio
import logging
from typing import Awaitable, Dict

logger = logging.getLogger(__name__)


class JobDispatcher:
    """Runs job coroutines in the background of the current event loop.

    The dispatcher holds a reference to every running task so it is not
    garbage collected mid-flight, and logs anything that escapes a task.
    """

    def __init__(self):
        self._tasks: Dict[str, asyncio.Task] = {}

    @property
    def active_count(self) -> int:
        """Number of job tasks still running."""
        return len(self._tasks)

    def dispatch(self, job_id: str, work: Awaitable) -> asyncio.Task:
        """Start work for a job without waiting for it."""
        task = asyncio.create_task(work, name=f"job-{job_id}")
        self._tasks[job_id] = task
        task.add_done_callback(lambda t: self._on_done(job_id, t))
        return task

    def _on_done(self, job_id: str, task: asyncio.Task):
        self._tasks.pop(job_id, None)
        if task.cancelled():
            logger.warning(f"Task for job {job_id} was cancelled")
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Task for job {job_id} raised: {exc}", exc_info=exc)

    async def wait_all(self):
        """Wait for every running job task to finish."""
        if self._tasks:
            await asyncio.gather(*self._tasks.values(), return_exceptions=True)

    async def shutdown(self):
        """Cancel running job tasks. Interrupted jobs stay in processing."""
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.info(f"Job dispatcher stopped, cancelled {len(tasks)} task(s)")


# Global dispatcher
dispatcher = JobDispatcher()
