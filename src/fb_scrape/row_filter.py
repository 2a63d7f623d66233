import csv
import re
from typing import IO, Pattern, Union


def filter_rows(src: IO[str], dst: IO[str], field: str, pattern: Union[str, Pattern[str]]) -> int:
    """
    Copy a CSV (header first) keeping only rows whose `field` is non-empty and
    matches `pattern` (re.search). Returns the number of rows kept.
    The header is copied even when nothing matches; an unknown field matches nothing.
    """
    regex = re.compile(pattern) if isinstance(pattern, str) else pattern
    reader = csv.DictReader(src)
    if reader.fieldnames is None:
        return 0
    kept = 0

    writer = csv.DictWriter(dst, fieldnames=reader.fieldnames, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    writer.writeheader()

    for row in reader:
        value = row.get(field)
        if value and regex.search(value):
            writer.writerow(row)
            kept += 1
    dst.flush()
    return kept
