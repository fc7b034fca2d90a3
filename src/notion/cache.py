import asyncio
import logging
from collections.abc import Awaitable, Callable, Hashable
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SingleFlightCache:
    """
    Process-lifetime memoization of upstream lookups.

    Concurrent misses for the same key share one in-flight fetch. A failed
    fetch is not cached: its waiters get the error and the next call retries.
    """

    def __init__(self) -> None:
        self._values: dict[Hashable, Any] = {}
        self._in_flight: dict[Hashable, asyncio.Task] = {}

    async def get_or_fetch(self, key: Hashable, fetch: Callable[[], Awaitable[T]]) -> T:
        if key in self._values:
            return self._values[key]

        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._fill(key, fetch))
            self._in_flight[key] = task
        # A cancelled caller must not cancel the fetch other callers wait on
        return await asyncio.shield(task)

    async def _fill(self, key: Hashable, fetch: Callable[[], Awaitable[T]]) -> T:
        task = asyncio.current_task()
        try:
            value = await fetch()
        except Exception:
            logger.warning(f"Upstream fetch for {key!r} failed, not caching")
            raise
        finally:
            # False once invalidate() dropped this fetch
            current = self._in_flight.get(key) is task
            if current:
                del self._in_flight[key]
        if current:
            self._values[key] = value
        return value

    def invalidate(self, key: Hashable | None = None) -> None:
        """Forget cached values. Fetches already running finish but are not stored."""
        if key is None:
            self._values.clear()
            self._in_flight.clear()
        else:
            self._values.pop(key, None)
            self._in_flight.pop(key, None)
