# movie_resolver/cli.py
from __future__ import annotations

import argparse
import json
import sys
from typing import List, Optional

from loguru import logger
from pydantic import ValidationError

from .config import APP_NAME, APP_VERSION, FetcherConfig, MovieRecord
from .errors import ResolverError
from .http_fetch import Fetcher
from .pipeline import MovieResolver

# ---------- output ----------

def format_record(record: MovieRecord, fmt: str = "text") -> str:
    if fmt == "json":
        return json.dumps(record.model_dump(), ensure_ascii=False, indent=2)
    lines = [
        f"Title:   {record.title}",
        f"Year:    {record.year}",
        f"Rating:  {record.rating}",
        f"Genres:  {', '.join(record.genres)}",
        f"Cast:    {', '.join(record.cast)}",
        f"Summary: {record.summary}",
        f"Poster:  {record.poster}",
    ]
    return "\n".join(lines)

# ---------- CLI ----------

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog=APP_NAME, description="Resolve a movie name into a structured record")
    ap.add_argument("-m", "--movie", help="Movie name to look up")
    ap.add_argument("--format", choices=["text", "json"], default="text")
    ap.add_argument("--timeout-ms", type=int, default=None,
                    help="Per-attempt timeout (default from env or 10000)")
    ap.add_argument("--retries", type=int, default=None,
                    help="Extra attempts after the first (default from env or 3)")
    ap.add_argument("-v", "--verbose", action="store_true", help="Log pipeline progress to stderr")
    ap.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION}")
    return ap


def _configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    if not args.movie or not args.movie.strip():
        print("error: a non-empty --movie is required", file=sys.stderr)
        return 2

    cfg = FetcherConfig.from_env()
    overrides = {}
    if args.timeout_ms is not None:
        overrides["timeout_ms"] = args.timeout_ms
    if args.retries is not None:
        overrides["max_retries"] = args.retries
    if overrides:
        try:
            cfg = FetcherConfig(**{**cfg.model_dump(), **overrides})
        except ValidationError as e:
            print(f"error: invalid fetch options: {e.errors()[0]['msg']}", file=sys.stderr)
            return 2

    fetcher = Fetcher(cfg)
    try:
        record = MovieResolver(fetcher).resolve(args.movie)
    except ResolverError as e:
        print(f"error: {e.message}", file=sys.stderr)
        return e.exit_code
    finally:
        fetcher.close()

    print(format_record(record, args.format))
    return 0


if __name__ == "__main__":
    sys.exit(main())
