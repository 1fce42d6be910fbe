# fanout.py
"""
Sequential fan-out: one task per item, at most one task in flight.

Used for the per-meal recipe fetch. The external API rate-limits concurrent
calls, so items run strictly one after another and a failing item does not
discard what was already collected.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Generic, Iterable, List, Optional, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass
class FanOutResult(Generic[T, R]):
    results: List[R] = field(default_factory=list)
    failures: List[Tuple[T, str]] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        """True when at least one item could not be fetched."""
        return bool(self.failures)

    @property
    def attempted(self) -> int:
        return len(self.results) + len(self.failures)


def run_sequentially(
    items: Iterable[T],
    task: Callable[[T], Optional[R]],
    on_progress: Optional[Callable[[int, T], None]] = None,
) -> FanOutResult[T, R]:
    """
    Run task(item) for each item in order, waiting for each call to finish.

    A None result or an exception counts as a failure for that item and the
    sequence carries on with the next one.
    """
    outcome: FanOutResult[T, R] = FanOutResult()
    for index, item in enumerate(items):
        if on_progress is not None:
            on_progress(index, item)
        try:
            result = task(item)
        except Exception as e:
            logger.warning("Fan-out task failed for %r: %s", item, e)
            outcome.failures.append((item, str(e) or type(e).__name__))
            continue
        if result is None:
            outcome.failures.append((item, "no result"))
        else:
            outcome.results.append(result)
    return outcome
