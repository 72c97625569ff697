"""Protocol interfaces for creativestudio."""

from typing import Awaitable, Callable, Protocol

from creativestudio.models.requests import GenerationTask
from creativestudio.models.responses import TaskOutcome


class IGenerator(Protocol):
    """Anything a batch can dispatch generation tasks to."""

    async def generate(self, task: GenerationTask) -> str:
        """Run one task. Returns the output URL or data URI, raises ApiError on failure."""
        ...

    def make_job(self, task: GenerationTask) -> Callable[[], Awaitable[TaskOutcome]]:
        """Zero-argument runner job; failures surface as TaskFailedError."""
        ...
