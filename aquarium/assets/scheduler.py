"""Background asset loading that hands results back to the update thread."""

from __future__ import annotations

import logging
import queue
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from .loader import AssetLoader
from .types import LoadedAsset, LoadError

logger = logging.getLogger("aquarium.assets")


@dataclass(frozen=True)
class LoadOutcome:
    ref: object
    asset: Optional[LoadedAsset] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.asset is not None and self.error is None


Continuation = Callable[[LoadOutcome], None]


class LoadScheduler:
    """Run loads on an executor; deliver outcomes only from :meth:`pump`.

    Completion callbacks fire on worker threads, so they only enqueue. The
    frame loop calls :meth:`pump` once per frame and continuations run there,
    which keeps every creature mutation on the update thread.
    """

    def __init__(
        self,
        loader: AssetLoader,
        *,
        executor: Optional[Executor] = None,
        max_workers: int = 2,
    ) -> None:
        self._loader = loader
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max(1, max_workers),
            thread_name_prefix="asset-load",
        )
        self._completed: "queue.SimpleQueue[Tuple[Continuation, object, Future]]" = queue.SimpleQueue()
        self._pending = 0

    @property
    def pending(self) -> int:
        """Loads submitted whose outcome has not been delivered yet."""
        return self._pending

    def submit(self, ref: object, continuation: Continuation) -> None:
        future = self._executor.submit(self._loader.load, ref)
        self._pending += 1
        future.add_done_callback(lambda done: self._completed.put((continuation, ref, done)))

    def pump(self) -> int:
        handled = 0
        while True:
            try:
                continuation, ref, future = self._completed.get_nowait()
            except queue.Empty:
                break
            self._pending -= 1
            continuation(self._outcome(ref, future))
            handled += 1
        return handled

    def _outcome(self, ref: object, future: Future) -> LoadOutcome:
        if future.cancelled():
            return LoadOutcome(ref, error=LoadError(ref, "cancelled"))
        error = future.exception()
        if error is None:
            return LoadOutcome(ref, asset=future.result())
        if not isinstance(error, LoadError):
            logger.error("Loader crashed on %r", ref, exc_info=error)
        return LoadOutcome(ref, error=error)

    def shutdown(self, wait: bool = False) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=wait, cancel_futures=True)
