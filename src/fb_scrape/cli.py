import argparse
import sys
import threading
import traceback
from typing import IO, List, Optional

from . import config
from .graph_client import GraphClient
from .pipeline import FetchPipeline
from .row_filter import filter_rows
from .writer import CsvRowWriter


def make_logger(stream: IO[str]):
    lock = threading.Lock()

    def log(msg: str, level: str = "info"):
        prefix = {"info": "[*]", "success": "[+]", "warning": "[!]", "error": "[x]"}.get(level, "[*]")
        with lock:
            print(f"{prefix} {msg}", file=stream, flush=True)

    return log


def positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}")
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {n}")
    return n


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="fb_scrape",
        description="Fetch Facebook group posts (with likes and comment threads) from the Graph API as CSV.",
    )
    sub = p.add_subparsers(dest="command", metavar="COMMAND")

    sub.add_parser("group_ids", help="Print the ids of every group visible to the token.")

    pp = sub.add_parser("post_ids", help="Print the ids of every post in a group feed.")
    pp.add_argument("group_id", metavar="GROUP_ID")

    fp = sub.add_parser("fetch", help="Read post ids from stdin, write flattened CSV rows to stdout.")
    fp.add_argument("--pool-size", type=positive_int, default=config.FETCH_POOL_SIZE, help="Number of concurrent workers.")
    fp.add_argument(
        "--retry-seconds",
        type=float,
        default=config.RATE_LIMIT_RETRY_SECONDS,
        help="Back-off before retrying a rate-limited post.",
    )

    xp = sub.add_parser("filter", help="Keep CSV rows (stdin -> stdout) whose FIELD matches REGEX.")
    xp.add_argument("field", metavar="FIELD")
    xp.add_argument("regex", metavar="REGEX")

    sub.add_parser("help", help="Show this message.")
    return p


def _client(log) -> GraphClient:
    # raises MissingCredentialError before any request is made
    return GraphClient(config.ACCESS_TOKEN, log_callback=log)


def cmd_ids(args, stdout: IO[str], log) -> None:
    with _client(log) as client:
        ids = client.iter_group_ids() if args.command == "group_ids" else client.iter_post_ids(args.group_id)
        for item_id in ids:
            print(item_id, file=stdout)
    stdout.flush()


def cmd_fetch(args, stdin: IO[str], stdout: IO[str], log) -> None:
    with _client(log) as client:
        writer = CsvRowWriter(stdout)
        pipeline = FetchPipeline(
            client,
            writer,
            pool_size=args.pool_size,
            retry_seconds=args.retry_seconds,
            log_callback=log,
        )
        pipeline.run(stdin)


def cmd_filter(args, stdin: IO[str], stdout: IO[str], log) -> None:
    kept = filter_rows(stdin, stdout, args.field, args.regex)
    log(f"filter {args.field}: kept={kept}")


def run(
    argv: Optional[List[str]] = None,
    *,
    stdin: Optional[IO[str]] = None,
    stdout: Optional[IO[str]] = None,
    stderr: Optional[IO[str]] = None,
) -> int:
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr

    parser = build_parser()
    args = parser.parse_args(argv)
    log = make_logger(stderr)

    if args.command in (None, "help"):
        parser.print_help(stdout)
        return 0

    try:
        if args.command in ("group_ids", "post_ids"):
            cmd_ids(args, stdout, log)
        elif args.command == "fetch":
            cmd_fetch(args, stdin, stdout, log)
        elif args.command == "filter":
            cmd_filter(args, stdin, stdout, log)
    except Exception as ex:
        print(f"Error: {ex}", file=stderr)
        tb = traceback.format_exception(type(ex), ex, ex.__traceback__)
        print("".join("  " + line for line in "".join(tb).splitlines(True)), end="", file=stderr)
        stderr.flush()
        return 1
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
