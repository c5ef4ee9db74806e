"""Command-line entry point for uploading imports and sending connector logs.

Connection settings come from ``INSIGHTS_BASE_URL``, ``INSIGHTS_SOURCE_ID``
and ``INSIGHTS_SOURCE_TOKEN``.

Examples
--------
Upload an import file shaped like ``{"entities": [...], "relationships":
[...], "streamItems": [...]}``::

    insights-client import fixture.json

Send an alert::

    insights-client log alert "connector credentials expire soon"

"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys
from pathlib import Path

import msgspec

from insights_client.config import InsightsConfig
from insights_client.errors import InsightsAPIError, InsightsConfigError
from insights_client.importer import log_alert, log_info, perform_import
from insights_client.logging import (
    LOG_LEVEL_ENV,
    configure_logging,
    get_logger,
    log_warning,
)
from insights_client.models import ConnectorLogLevel, GraphDocument

logger = get_logger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="insights-client",
        description="Upload imports and connector logs to an Insights server.",
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get(LOG_LEVEL_ENV, "INFO"),
        help=f"Log level (default: ${LOG_LEVEL_ENV} or INFO)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    import_parser = commands.add_parser("import", help="Upload an import file")
    import_parser.add_argument("path", type=Path, help="JSON import document")
    import_parser.add_argument(
        "--compression-level",
        type=int,
        default=-1,
        help="zlib compression level, -1 or 0-9 (default: -1)",
    )

    log_parser = commands.add_parser("log", help="Send a connector log")
    log_parser.add_argument(
        "level",
        choices=[level.value for level in ConnectorLogLevel],
        help="Log severity",
    )
    log_parser.add_argument("message", help="Log message")
    return parser


async def _run_import(
    config: InsightsConfig, document: GraphDocument, level: int
) -> None:
    await perform_import(
        config,
        document.entities,
        document.relationships,
        document.stream_items,
        level=level,
    )


def _load_document(path: Path) -> GraphDocument:
    return msgspec.json.decode(path.read_bytes(), type=GraphDocument)


def main(argv: list[str] | None = None) -> int:
    """Run the CLI.

    Parameters
    ----------
    argv : list[str] | None, optional
        Command-line arguments. ``None`` defaults to ``sys.argv``.

    Returns
    -------
    int
        Exit code: 0 on success, 1 on invalid input, configuration, or
        transport failure.

    """
    args = _build_parser().parse_args(argv)
    level, invalid = configure_logging(args.log_level)
    if invalid:
        log_warning(logger, "Invalid log level %r, using %s", args.log_level, level)

    try:
        config = InsightsConfig.from_env()
        if args.command == "import":
            document = _load_document(args.path)
            asyncio.run(_run_import(config, document, args.compression_level))
            print(
                f"imported {len(document.entities)} entities, "
                f"{len(document.relationships)} relationships, "
                f"{len(document.stream_items)} stream items"
            )
        else:
            send = log_alert if args.level == ConnectorLogLevel.ALERT else log_info
            asyncio.run(send(config, args.message))
    except (OSError, msgspec.DecodeError) as exc:
        print(f"error: cannot read import file: {exc}", file=sys.stderr)
        return 1
    except (InsightsConfigError, InsightsAPIError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
