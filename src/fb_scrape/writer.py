import csv
import threading
from typing import IO, Iterable, Sequence

from .models import COLUMNS, Row


class CsvRowWriter:
    """
    Shared CSV output for all workers.
    The header is written on construction; each write() call lands as one
    contiguous block.
    """

    def __init__(self, fh: IO[str], fieldnames: Sequence[str] = COLUMNS):
        self.fieldnames = list(fieldnames)
        self._fh = fh
        self._lock = threading.Lock()
        self._writer = csv.writer(
            self._fh,
            lineterminator="\n",
            quoting=csv.QUOTE_MINIMAL,
        )
        self.rows_written = 0
        self.batches_written = 0

        self._writer.writerow(self.fieldnames)
        self._fh.flush()

    def write(self, rows: Iterable[Row]) -> int:
        batch = list(rows)
        width = len(self.fieldnames)
        for row in batch:
            if len(row) != width:
                raise ValueError(f"row has {len(row)} columns, expected {width}")

        with self._lock:
            self._writer.writerows(batch)
            self._fh.flush()
            self.rows_written += len(batch)
            self.batches_written += 1
        return len(batch)
