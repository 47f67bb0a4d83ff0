"""Command line for building, querying and checking a corpus index."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
import logging
from pathlib import Path
import sys

from pydantic import ValidationError

from corpus_search.config import Settings
from corpus_search.observability import configure_logging, init_tracing
from corpus_search.search.index import Index
from corpus_search.search.storage import StorageError, read_index_file, write_index_file


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_STALE = 2


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="corpus-search",
        description="Build a TF-IDF index over local files and search it",
    )
    parser.add_argument(
        "-i",
        "--index",
        type=Path,
        metavar="FILE",
        help="Index file to use (default: CORPUS_SEARCH_INDEX_FILE or index.json)",
    )
    parser.add_argument("--log-level", help="Logging level (default: CORPUS_SEARCH_LOG_LEVEL or info)")
    parser.add_argument(
        "--json-logs",
        action="store_true",
        default=None,
        help="Emit structured JSON logs on stderr",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="Build the index file if not present")
    build.add_argument("-f", "--force", action="store_true", help="Rebuild even if the index file exists")
    build.add_argument("directory", nargs="?", type=Path, default=Path("."), help="Directory to index")

    search = subparsers.add_parser("search", help="Search the index")
    search.add_argument("-c", "--count", type=int, help="Maximum number of results to display")
    search.add_argument("query", help="Free-text query")

    subparsers.add_parser("check", help="Check that the index is newer than every indexed file")
    return parser


def _validate_args(args: argparse.Namespace) -> None:
    if getattr(args, "count", None) is not None and args.count < 1:
        raise ValueError("--count must be >= 1")


def _ensure_not_directory(path: Path) -> None:
    if path.exists() and not path.is_file():
        raise ValueError(f"{path} does not point to a regular file")


def run_build(args: argparse.Namespace, settings: Settings, index_file: Path) -> int:
    _ensure_not_directory(index_file)
    if index_file.exists() and not args.force:
        logger.warning("Index already exists at %s; use --force to rebuild", index_file)
        return EXIT_OK

    try:
        index = Index.build(args.directory, extensions=settings.build_extension_map())
    except OSError as exc:
        logger.error("Cannot index %s: %s", args.directory, exc)
        return EXIT_ERROR

    write_index_file(index, index_file)
    return EXIT_OK


def run_search(args: argparse.Namespace, settings: Settings, index_file: Path) -> int:
    index = read_index_file(index_file)
    limit = args.count or settings.result_limit
    results = index.search(args.query, limit=limit)
    if not results:
        sys.stdout.write(f'No match for query "{args.query}"\n')
    for result in results:
        sys.stdout.write(f"{result.path}: {result.score}\n")
    return EXIT_OK


def run_check(args: argparse.Namespace, settings: Settings, index_file: Path) -> int:
    index_time = index_file.stat().st_mtime
    index = read_index_file(index_file)
    newest = index.last_modified_file()
    if newest is None or index_time >= newest[1]:
        sys.stdout.write(f"Index file {index_file} is up to date\n")
        return EXIT_OK
    sys.stdout.write(f"{newest[0]} is newer than index file ({index_file})\n")
    return EXIT_STALE


_COMMANDS = {
    "build": run_build,
    "search": run_search,
    "check": run_check,
}


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_argument_parser()
    args = parser.parse_args(argv)

    try:
        settings = Settings()
    except ValidationError as exc:
        configure_logging()
        logger.error("Invalid configuration: %s", exc)
        return EXIT_ERROR

    json_logs = settings.log_json if args.json_logs is None else args.json_logs
    configure_logging(args.log_level or settings.log_level, json_output=json_logs)
    init_tracing()

    try:
        _validate_args(args)
    except ValueError as exc:
        parser.error(str(exc))

    index_file = args.index or settings.index_file
    try:
        return _COMMANDS[args.command](args, settings, index_file)
    except StorageError as exc:
        logger.error("Invalid index file %s: %s", index_file, exc)
    except (OSError, ValueError) as exc:
        logger.error("%s", exc)
    return EXIT_ERROR


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
