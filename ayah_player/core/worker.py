import asyncio
from typing import Awaitable, Callable


class LatestTaskWorker:
    """Keyed asyncio task slots where a new submission supersedes the old one.

    Only the most recent task per key is allowed to run; submitting again
    cancels whatever is still pending in that slot.
    """

    def __init__(self) -> None:
        self._jobs: dict[str, asyncio.Task] = {}

    def submit(self, job_id: str, fn: Callable[[], Awaitable[None]]) -> asyncio.Task:
        previous = self._jobs.get(job_id)
        if previous is not None and not previous.done():
            previous.cancel()
        task = asyncio.get_running_loop().create_task(fn(), name=job_id)
        self._jobs[job_id] = task
        return task

    def cancel_all(self) -> None:
        for task in self._jobs.values():
            if not task.done():
                task.cancel()

    async def drain(self) -> None:
        # Tasks may submit follow-up tasks while we wait, so loop until quiet.
        while True:
            pending = [task for task in self._jobs.values() if not task.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)
