#!/usr/bin/env python3
import sys
from pathlib import Path

# Allow running without installing the package
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = PROJECT_ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from fb_scrape.cli import main  # noqa: E402


if __name__ == "__main__":
    main()
