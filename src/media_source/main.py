#!/usr/bin/env python3
"""Command line entry point for resolving media sources."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import logging.config
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from media_source.domain.shared.exceptions import ExtractionError
from media_source.domain.shared.messages import LogTemplates, UserMessages

if TYPE_CHECKING:
    from media_source.config.container import Container
    from media_source.domain.source.entities import Metadata

_LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "logging_config.json"

EXIT_OK = 0
EXIT_RESOLUTION_FAILED = 1
EXIT_USAGE = 2


def setup_logging(log_level: str = "INFO") -> None:
    resolved_level = getattr(logging, log_level.upper(), logging.INFO)

    try:
        with open(_LOGGING_CONFIG_PATH) as f:
            config = json.load(f)
        logging.config.dictConfig(config)
    except (FileNotFoundError, json.JSONDecodeError, ValueError):
        logging.basicConfig(
            level=resolved_level,
            format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            stream=sys.stderr,
        )
        logging.getLogger(__name__).warning(
            "Could not load %s, falling back to basic config", _LOGGING_CONFIG_PATH
        )

    logging.getLogger().setLevel(resolved_level)


def metadata_payload(metadata: Metadata) -> dict[str, Any]:
    """JSON-ready view of metadata, including the derived display fields."""
    payload = metadata.model_dump(mode="json")
    payload["duration"] = metadata.duration.total_seconds() if metadata.duration else None
    payload["duration_formatted"] = metadata.duration_formatted
    payload["preview_image_url"] = metadata.preview_image_url
    return payload


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="media-source",
        description="Resolve URLs, searches and playlists to audio sources with yt-dlp.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s resolve "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
  %(prog)s resolve "never gonna give you up"
  %(prog)s search "lofi hip hop" --limit 5
  %(prog)s playlist "https://www.youtube.com/playlist?list=PL123"
        """,
    )
    parser.add_argument("--log-level", default=None, help="override LOG_LEVEL for this run")

    subparsers = parser.add_subparsers(dest="action", required=True)

    resolve = subparsers.add_parser("resolve", help="print metadata for one URL or search")
    resolve.add_argument("query")

    search = subparsers.add_parser("search", help="print one JSON line per search hit")
    search.add_argument("terms")
    search.add_argument("--limit", type=int, default=5)

    playlist = subparsers.add_parser("playlist", help="print one JSON line per playlist entry")
    playlist.add_argument("url")

    return parser


def _emit(payload: dict[str, Any]) -> None:
    sys.stdout.write(json.dumps(payload) + "\n")


async def run(args: argparse.Namespace, container: Container) -> int:
    factory = container.source_factory

    if args.action == "resolve":
        query = args.query.strip()
        if not query:
            sys.stderr.write(UserMessages.EMPTY_QUERY + "\n")
            return EXIT_USAGE
        descriptor = factory.from_input(query)
        _emit(metadata_payload(await descriptor.aux_metadata()))
        return EXIT_OK

    if args.action == "search":
        for descriptor in await factory.search(args.terms, args.limit):
            if descriptor.metadata is not None:
                _emit(metadata_payload(descriptor.metadata))
        return EXIT_OK

    for descriptor in await container.playlist_resolver.resolve_playlist(args.url):
        if descriptor.metadata is not None:
            _emit(metadata_payload(descriptor.metadata))
    return EXIT_OK


async def _run_with_container(args: argparse.Namespace, container: Container) -> int:
    try:
        return await run(args, container)
    finally:
        await container.shutdown()


def main(argv: list[str] | None = None) -> int:
    try:
        args = build_parser().parse_args(argv)
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else EXIT_USAGE

    from media_source.config.settings import get_settings

    settings = get_settings()
    setup_logging(args.log_level or settings.log_level)

    logger = logging.getLogger(__name__)
    logger.debug(LogTemplates.APP_STARTING.format(environment=settings.environment))

    from media_source.application.commands.enqueue_source import result_for_error
    from media_source.config.container import create_container

    container = create_container(settings)

    try:
        return asyncio.run(_run_with_container(args, container))
    except ExtractionError as e:
        query = (
            getattr(args, "query", None) or getattr(args, "terms", None) or getattr(args, "url", "")
        )
        sys.stderr.write(result_for_error(e, query).message + "\n")
        logger.debug(LogTemplates.FATAL_ERROR, e)
        return EXIT_RESOLUTION_FAILED
    except ValueError as e:
        # Invalid argument values rejected by the query models.
        sys.stderr.write(f"{e}\n")
        return EXIT_USAGE
    except KeyboardInterrupt:
        return EXIT_RESOLUTION_FAILED
    except Exception as e:
        logger.exception(LogTemplates.FATAL_ERROR, e)
        return EXIT_RESOLUTION_FAILED


def cli() -> None:
    """Console script entry point (used by pyproject.toml [project.scripts])."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
