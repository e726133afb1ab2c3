"""
Lazy, restartable pixel sequences.

A PixelStream never holds results: every iteration re-runs the chain of
stages from the underlying collection, so the same stream can be consumed
any number of times.  Parallel streams evaluate `map` / `filter` stages on a
thread pool; elements still come out in source order, but callers must not
rely on the order in which the user functions are *invoked*.
"""
from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from functools import reduce as _fold
from typing import Any, Callable, Iterator, Optional, Sequence, Tuple

_MISSING = object()


class PixelStream:

    def __init__(
        self,
        source: Sequence[Any] | Callable[[], Iterator[Any]],
        *,
        parallel: bool = False,
        workers: Optional[int] = None,
    ):
        # A sequence is wrapped into a factory so every stage has the same shape
        if callable(source):
            self._factory = source
        else:
            self._factory = lambda: iter(source)
        self.is_parallel = parallel
        self.workers = workers

    def __iter__(self) -> Iterator[Any]:
        return self._factory()

    def _derive(self, factory: Callable[[], Iterator[Any]]) -> "PixelStream":
        return PixelStream(factory, parallel=self.is_parallel, workers=self.workers)

    # ── Mode switches ────────────────────────────────────────────────
    def parallel(self, workers: Optional[int] = None) -> "PixelStream":
        return PixelStream(self._factory, parallel=True, workers=workers or self.workers)

    def sequential(self) -> "PixelStream":
        return PixelStream(self._factory, parallel=False, workers=self.workers)

    # ── Intermediate stages ──────────────────────────────────────────
    def map(self, fn: Callable[[Any], Any]) -> "PixelStream":
        upstream = self._factory
        if not self.is_parallel:
            return self._derive(lambda: map(fn, upstream()))

        workers = self.workers

        def run() -> Iterator[Any]:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                yield from pool.map(fn, list(upstream()))

        return self._derive(run)

    def filter(self, predicate: Callable[[Any], bool]) -> "PixelStream":
        upstream = self._factory
        if not self.is_parallel:
            return self._derive(lambda: filter(predicate, upstream()))

        workers = self.workers

        def run() -> Iterator[Any]:
            items = list(upstream())
            with ThreadPoolExecutor(max_workers=workers) as pool:
                keep = list(pool.map(predicate, items))
            return (item for item, ok in zip(items, keep) if ok)

        return self._derive(run)

    # ── Terminal operations ──────────────────────────────────────────
    def reduce(self, fn: Callable[[Any, Any], Any], initial: Any = _MISSING) -> Any:
        """
        Left fold over the stream.  Folding always happens on the calling
        thread, so `fn` need not be associative.
        """
        if initial is _MISSING:
            return _fold(fn, iter(self))
        return _fold(fn, iter(self), initial)

    def count(self) -> int:
        return sum(1 for _ in self)

    def collect(self) -> Tuple[Any, ...]:
        return tuple(self)

    def for_each(self, fn: Callable[[Any], None]) -> None:
        for item in self:
            fn(item)

