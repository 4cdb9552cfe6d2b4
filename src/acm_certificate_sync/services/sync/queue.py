"""Keyed work queue for reconcile requests.

Semantics follow the Kubernetes controller work queue:

- a key waiting in the queue is stored once, however often it is added;
- a key handed out by ``get`` is not handed out again until ``done`` is
  called for it, so one key is never reconciled by two workers at once;
  adds that arrive meanwhile are replayed by ``done``;
- ``add_after`` schedules a key for later, ``add_rate_limited`` does so with
  a per-key exponential backoff that ``forget`` resets.
"""

from __future__ import annotations

import heapq
import itertools
import threading
import time
from collections import deque
from collections.abc import Callable, Hashable

DEFAULT_BASE_DELAY = 1.0
DEFAULT_MAX_DELAY = 300.0


class WorkQueue:
    """Thread-safe, de-duplicating, delay-capable queue of keys."""

    def __init__(
        self,
        base_delay: float = DEFAULT_BASE_DELAY,
        max_delay: float = DEFAULT_MAX_DELAY,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._base_delay = base_delay
        self._max_delay = max_delay
        self._clock = clock
        self._cond = threading.Condition()
        self._queue: deque[Hashable] = deque()
        self._dirty: set[Hashable] = set()
        self._processing: set[Hashable] = set()
        self._delayed: list[tuple[float, int, Hashable]] = []
        self._seq = itertools.count()
        self._failures: dict[Hashable, int] = {}
        self._shutting_down = False

    def __len__(self) -> int:
        with self._cond:
            return len(self._queue)

    @property
    def shutting_down(self) -> bool:
        return self._shutting_down

    def add(self, key: Hashable) -> None:
        """Queue ``key`` unless it is already waiting."""
        with self._cond:
            self._add_locked(key)

    def _add_locked(self, key: Hashable) -> None:
        if self._shutting_down or key in self._dirty:
            return
        self._dirty.add(key)
        if key in self._processing:
            return
        self._queue.append(key)
        self._cond.notify()

    def add_after(self, key: Hashable, delay: float) -> None:
        """Queue ``key`` once ``delay`` seconds have passed."""
        if delay <= 0:
            self.add(key)
            return
        with self._cond:
            if self._shutting_down:
                return
            heapq.heappush(self._delayed, (self._clock() + delay, next(self._seq), key))
            # Wake a waiting getter so it shortens its wait
            self._cond.notify()

    def backoff_for(self, failures: int) -> float:
        """Delay before the retry following ``failures`` earlier failures."""
        return float(min(self._base_delay * (2**failures), self._max_delay))

    def add_rate_limited(self, key: Hashable) -> float:
        """Queue ``key`` after its exponential backoff delay.

        Returns:
            The delay applied.
        """
        with self._cond:
            failures = self._failures.get(key, 0)
            self._failures[key] = failures + 1
        delay = self.backoff_for(failures)
        self.add_after(key, delay)
        return delay

    def forget(self, key: Hashable) -> None:
        """Reset the backoff of ``key``."""
        with self._cond:
            self._failures.pop(key, None)

    def num_requeues(self, key: Hashable) -> int:
        with self._cond:
            return self._failures.get(key, 0)

    def get(self) -> Hashable | None:
        """Block until a key is available.

        Returns:
            The next key, or None once the queue has been shut down.
        """
        with self._cond:
            while True:
                if self._shutting_down:
                    return None
                self._promote_due()
                if self._queue:
                    key = self._queue.popleft()
                    self._processing.add(key)
                    self._dirty.discard(key)
                    return key
                timeout = None
                if self._delayed:
                    timeout = max(0.0, self._delayed[0][0] - self._clock())
                self._cond.wait(timeout)

    def _promote_due(self) -> None:
        now = self._clock()
        while self._delayed and self._delayed[0][0] <= now:
            _, _, key = heapq.heappop(self._delayed)
            self._add_locked(key)

    def done(self, key: Hashable) -> None:
        """Mark ``key`` as finished, replaying any add made meanwhile."""
        with self._cond:
            self._processing.discard(key)
            if key in self._dirty and not self._shutting_down:
                self._queue.append(key)
                self._cond.notify()

    def shutdown(self) -> None:
        """Stop handing out keys and wake every waiting getter."""
        with self._cond:
            self._shutting_down = True
            self._cond.notify_all()
