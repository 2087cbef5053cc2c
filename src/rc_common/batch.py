"""Best-effort batch fan-out.

Mass charge creation, the overdue sweep and mass notifications all issue N
independent writes concurrently. Each item runs in its own session from the
factory, so one failing item never rolls back the others. There is no
envelope: whatever committed before a failure stays committed.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from src.rc_common.database import SessionFactory

logger = logging.getLogger("rc.batch")

T = TypeVar("T")
R = TypeVar("R")


@dataclass
class BatchOutcome(Generic[R]):
    key: str
    ok: bool
    value: R | None = None
    error: Exception | None = None


@dataclass
class BatchResult(Generic[R]):
    outcomes: list[BatchOutcome[R]] = field(default_factory=list)

    @property
    def succeeded(self) -> list[BatchOutcome[R]]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failed(self) -> list[BatchOutcome[R]]:
        return [o for o in self.outcomes if not o.ok]

    def raise_first_failure(self) -> None:
        for outcome in self.outcomes:
            if outcome.error is not None:
                raise outcome.error

    def to_json(self) -> list[dict[str, Any]]:
        return [
            {"key": o.key, "ok": o.ok, "error": None if o.ok else str(o.error)}
            for o in self.outcomes
        ]


async def run_batch(
    session_factory: SessionFactory,
    items: Sequence[T],
    work: Callable[[AsyncSession, T], Awaitable[R]],
    key: Callable[[T], str],
) -> BatchResult[R]:
    """Run ``work(db, item)`` for every item concurrently and collect outcomes.

    ``work`` owns its commits. Results keep the order of ``items``.
    """

    async def _one(item: T) -> R:
        async with session_factory() as db:
            return await work(db, item)

    raw = await asyncio.gather(*(_one(item) for item in items), return_exceptions=True)

    result: BatchResult[R] = BatchResult()
    for item, value in zip(items, raw):
        if isinstance(value, Exception):
            logger.warning("Batch item %s failed: %s", key(item), value)
            result.outcomes.append(BatchOutcome(key=key(item), ok=False, error=value))
        elif isinstance(value, BaseException):
            raise value
        else:
            result.outcomes.append(BatchOutcome(key=key(item), ok=True, value=value))
    return result
