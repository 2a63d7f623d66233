import queue
import threading
from typing import Any, Callable, List, Optional

from .config import FETCH_POOL_SIZE


_STOP = object()


class WorkerPool:
    """
    Fixed set of worker threads draining one unbounded FIFO queue.

    shutdown() appends one stop signal per worker after everything already
    scheduled, then joins the threads, so every task scheduled before the
    call has finished when it returns.
    """

    def __init__(self, size: int = FETCH_POOL_SIZE, log_callback=None):
        if size < 1:
            raise ValueError(f"pool size must be >= 1, got {size}")
        self._log = log_callback or (lambda msg, lvl="info": None)
        self.size = size
        self._queue: "queue.Queue[Any]" = queue.Queue()
        self._closed = False
        self._threads: List[threading.Thread] = [
            threading.Thread(target=self._worker, name=f"fb-scrape-worker-{i}", daemon=True)
            for i in range(size)
        ]
        for t in self._threads:
            t.start()

    def _worker(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    return
                func, args = item
                try:
                    func(*args)
                except Exception as e:
                    name = getattr(func, "__name__", repr(func))
                    self._log(f"task {name}{args!r} failed: {e!r}", "error")
            finally:
                self._queue.task_done()

    def schedule(self, func: Callable[..., Any], *args: Any) -> None:
        if self._closed:
            raise RuntimeError("pool is shut down")
        self._queue.put((func, args))

    def shutdown(self) -> None:
        if self._closed:
            return
        self._closed = True
        for _ in self._threads:
            self._queue.put(_STOP)
        for t in self._threads:
            t.join()

    def __enter__(self) -> "WorkerPool":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()
