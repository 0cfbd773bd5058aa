"""Sequential execution of rate-limited sub-queries."""

import logging
import time
from typing import Callable, Generic, Iterable, Iterator, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class ThrottledQueue(Generic[T, R]):
    """Run one call per item, strictly in order, pausing ``delay_seconds`` between items.

    A failing item is logged and skipped; it never stops the remaining items.
    Items are never run concurrently.
    """

    def __init__(self, handler: Callable[[T], R], delay_seconds: float, sleep: Callable[[float], None] = time.sleep):
        if delay_seconds < 0:
            raise ValueError("delay_seconds must be non-negative")
        self._handler = handler
        self.delay_seconds = delay_seconds
        self._sleep = sleep

    def run(self, items: Iterable[T]) -> Iterator[Tuple[T, R]]:
        first = True
        for item in items:
            if not first and self.delay_seconds:
                self._sleep(self.delay_seconds)
            first = False
            try:
                result = self._handler(item)
            except Exception as exc:  # noqa: BLE001
                logger.warning("Throttled item %s failed: %s", item, exc)
                continue
            yield item, result
