# feedkeeper/cli/feed.py
"""
CLI commands for running and operating the feed service.

Usage:
    python -m feedkeeper.cli.feed serve --port 8080
    python -m feedkeeper.cli.feed check
    python -m feedkeeper.cli.feed unposted
    python -m feedkeeper.cli.feed mark-posted https://example.com/a https://example.com/b
"""

import argparse
import sys

from dotenv import load_dotenv

# Load .env before settings are read
load_dotenv()


def _setup_logging():
    from feedkeeper.config import get_settings
    from feedkeeper.logging_config import configure_logging

    settings = get_settings()
    configure_logging(
        json_format=settings.LOG_JSON,
        level=settings.LOG_LEVEL,
        log_file=settings.LOG_FILE or None,
    )


def cmd_serve(args):
    """Run the API and the periodic checker."""
    import uvicorn

    from feedkeeper.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "feedkeeper.main:app",
        host=args.host or settings.API_HOST,
        port=args.port or settings.API_PORT,
        log_config=None,
    )
    return 0


def cmd_check(args):
    """Run one feed check and print the outcome."""
    from feedkeeper.database import init_db
    from feedkeeper.exceptions import FeedKeeperError
    from feedkeeper.services.ingestion import get_ingestion_service

    _setup_logging()
    init_db()
    service = get_ingestion_service()
    try:
        result = service.ingest_once()
    except FeedKeeperError as e:
        print(f"Error: feed check failed: {e}", file=sys.stderr)
        return 1
    finally:
        service.client.close()

    print(f"\nFeed entries:      {result.total_entries}")
    print(f"Newly stored:      {result.ingested}")
    print(f"Already stored:    {result.skipped_existing}")
    print(f"Duration:          {result.duration_ms}ms")
    return 0


def cmd_unposted(args):
    """Print entries not yet marked posted."""
    from feedkeeper.database import init_db
    from feedkeeper.exceptions import StoreError
    from feedkeeper.services.publication import PublicationService
    from feedkeeper.storage.factory import get_entry_store

    init_db()
    try:
        entries = PublicationService(get_entry_store()).list_unposted()
    except StoreError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for entry in entries:
        print(f"{entry.link}\t{entry.title}")
    return 0


def cmd_mark_posted(args):
    """Mark the given links as posted."""
    from feedkeeper.database import init_db
    from feedkeeper.exceptions import StoreError
    from feedkeeper.services.publication import PublicationService
    from feedkeeper.storage.factory import get_entry_store

    init_db()
    try:
        modified = PublicationService(get_entry_store()).mark_posted(args.links)
    except StoreError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Marked {modified} of {len(set(args.links))} entries as posted")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="feedkeeper feed service CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run the API with the periodic checker
  python -m feedkeeper.cli.feed serve

  # Check the feed once
  python -m feedkeeper.cli.feed check

  # Publish workflow
  python -m feedkeeper.cli.feed unposted
  python -m feedkeeper.cli.feed mark-posted https://example.com/post-1
        """,
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API and periodic checker")
    serve_parser.add_argument("--host", default=None, help="Bind address (default: API_HOST)")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port (default: API_PORT)")
    serve_parser.set_defaults(func=cmd_serve)

    # check command
    check_parser = subparsers.add_parser("check", help="Fetch the feed once and store new entries")
    check_parser.set_defaults(func=cmd_check)

    # unposted command
    unposted_parser = subparsers.add_parser("unposted", help="List entries not yet posted")
    unposted_parser.set_defaults(func=cmd_unposted)

    # mark-posted command
    mark_parser = subparsers.add_parser("mark-posted", help="Mark entries as posted")
    mark_parser.add_argument("links", nargs="+", help="Entry links to mark posted")
    mark_parser.set_defaults(func=cmd_mark_posted)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
