import time
from typing import Callable, Iterable, Optional, Set

from .config import FETCH_POOL_SIZE, RATE_LIMIT_RETRY_SECONDS
from .errors import RateLimitError
from .flatten import flatten_post
from .pool import WorkerPool
from .writer import CsvRowWriter


class FetchPipeline:
    """
    Reads post ids, fetches each distinct id once on a worker pool and writes
    the flattened rows.

    - seen_ids is only touched by the thread calling run()
    - a rate-limited fetch sleeps `retry_seconds` and starts over, forever
    - any other failure is logged and the id is dropped (it stays in seen_ids)
    """

    def __init__(
        self,
        client,
        writer: CsvRowWriter,
        *,
        pool_size: int = FETCH_POOL_SIZE,
        retry_seconds: float = RATE_LIMIT_RETRY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
        log_callback=None,
    ):
        self._log = log_callback or (lambda msg, lvl="info": None)
        self.client = client
        self.writer = writer
        self.pool_size = pool_size
        self.retry_seconds = retry_seconds
        self._sleep = sleep
        self.seen_ids: Set[str] = set()

    def process(self, post_id: str) -> bool:
        """Fetch, flatten and write one post. Returns False when the post was abandoned."""
        while True:
            try:
                post = self.client.fetch_post(post_id)
                rows = flatten_post(post, log=self._log)
                self.writer.write(rows)
            except RateLimitError as e:
                self._log(
                    f"Rate limited while fetching {post_id}: {e}. Retrying in {self.retry_seconds:g}s...",
                    "warning",
                )
                self._sleep(self.retry_seconds)
                continue
            except Exception as e:
                self._log(f"Error while fetching {post_id}: {e}. Ignoring...", "error")
                return False

            self._log(f"post {post_id}: rows={len(rows)}")
            return True

    def run(self, lines: Iterable[str], pool: Optional[WorkerPool] = None) -> int:
        """
        Schedule every new id from `lines`, then block until all of them are done.
        Returns the number of ids admitted.
        """
        pool = pool or WorkerPool(self.pool_size, log_callback=self._log)
        admitted = 0
        try:
            for line in lines:
                post_id = line.strip()
                if not post_id or post_id in self.seen_ids:
                    continue
                self.seen_ids.add(post_id)
                pool.schedule(self.process, post_id)
                admitted += 1
        except Exception:
            pool.shutdown()
            raise
        # KeyboardInterrupt skips the drain; workers are daemon threads
        pool.shutdown()

        self._log(
            f"done: ids={admitted} rows={self.writer.rows_written} batches={self.writer.batches_written}",
            "success",
        )
        return admitted
