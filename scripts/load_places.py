"""
Places cache loader
-------------------
Reads saved places search responses ({"results": [...]}, one JSON document
per file or per line) and stores the normalized restaurants.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Iterator

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(PROJECT_ROOT / ".env")

sys.path.insert(0, str(PROJECT_ROOT))

from foodie.core.errors import RepositoryError
from foodie.db.session import get_repository
from foodie.services.places_normalizer import normalize_places

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
logger = logging.getLogger(__name__)


def iter_documents(path: Path) -> Iterator[Any]:
    """Yield a whole-file JSON document, or one per line for .jsonl files."""
    if path.suffix == ".jsonl":
        with path.open("r", encoding="utf-8") as fp:
            for line_no, line in enumerate(fp, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    yield json.loads(line)
                except json.JSONDecodeError as exc:
                    logger.warning("%s:%d is not valid JSON: %s", path, line_no, exc)
        return
    with path.open("r", encoding="utf-8") as fp:
        yield json.load(fp)


def load_places(paths: list[Path]) -> tuple[int, int]:
    """Return (normalized, stored) counts."""
    repo = get_repository()
    normalized = 0
    stored = 0
    for path in paths:
        for document in iter_documents(path):
            restaurants = normalize_places(document)
            normalized += len(restaurants)
            stored += repo.store_browsed_places(restaurants)
    return normalized, stored


def main() -> None:
    parser = argparse.ArgumentParser(description="saved places search responses -> places cache")
    parser.add_argument("files", type=Path, nargs="+", help="JSON or JSONL files")
    args = parser.parse_args()

    missing = [str(p) for p in args.files if not p.exists()]
    if missing:
        raise SystemExit(f"File not found: {', '.join(missing)}")

    try:
        normalized, stored = load_places(args.files)
    except RepositoryError as exc:
        raise SystemExit(f"Failed to store places: {exc}") from exc
    print(f"Normalized {normalized} places, stored {stored} new rows")


if __name__ == "__main__":
    main()
