#!/usr/bin/env python
"""
Command-line entry point for the blog publisher.
Run publishing, rollback and backup operations without the HTTP server.
"""
import argparse
import json
import logging
import sys
from typing import List, Optional

from src.config import Config
from src.errors import PublishingError
from src.publisher import Publisher
from src.publisher_factory import create_publisher

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Blog publishing pipeline")
    parser.add_argument(
        "--actor",
        default="cli",
        help="Name recorded as staged_by/published_by (default: cli)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    stage = subparsers.add_parser("stage", help="Render an approved article into staging")
    stage.add_argument("article_id")

    publish = subparsers.add_parser("publish", help="Promote a staged article to production")
    publish.add_argument("article_id")

    unpublish = subparsers.add_parser("unpublish", help="Remove an article from production")
    unpublish.add_argument("article_id")

    status = subparsers.add_parser("status", help="Show an article's publishing status")
    status.add_argument("article_id")

    subparsers.add_parser("stage-plp", help="Render the listing page into staging")
    subparsers.add_parser("publish-plp", help="Promote the listing page to production")
    subparsers.add_parser("assets", help="Upload the shared stylesheet")
    subparsers.add_parser("snapshot", help="Copy all of production into a full backup")
    subparsers.add_parser("list-backups", help="List backups, most recent first")

    rollback = subparsers.add_parser("rollback", help="Restore production from a backup")
    rollback.add_argument(
        "--timestamp",
        help="Backup timestamp (YYYY-MM-DD-HH-MM); defaults to the latest backup",
    )
    return parser


def run_command(publisher: Publisher, args: argparse.Namespace) -> dict:
    """Dispatch one parsed command and return a JSON-serialisable result."""
    if args.command == "stage":
        staging_url = publisher.publish_to_staging(args.article_id, args.actor)
        return {"success": True, "article_id": args.article_id, "staging_url": staging_url}
    if args.command == "publish":
        return publisher.publish_to_production(args.article_id, args.actor).to_dict()
    if args.command == "unpublish":
        return publisher.unpublish(args.article_id, args.actor).to_dict()
    if args.command == "status":
        return publisher.get_publishing_status(args.article_id)
    if args.command == "stage-plp":
        return {"success": True, "keys": publisher.publish_plp_to_staging()}
    if args.command == "publish-plp":
        return publisher.publish_plp_to_production().to_dict()
    if args.command == "assets":
        return publisher.publish_assets().to_dict()
    if args.command == "snapshot":
        return {"success": True, "backup_path": publisher.snapshot_production()}
    if args.command == "list-backups":
        return {"backups": [b.to_dict() for b in publisher.list_backups()]}
    if args.command == "rollback":
        return publisher.rollback(args.timestamp).to_dict()
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None, publisher: Optional[Publisher] = None) -> int:
    """Main entry point for the CLI."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if publisher is None:
        publisher = create_publisher(Config())

    try:
        result = run_command(publisher, args)
    except PublishingError as e:
        logger.error("%s failed: %s", args.command, e)
        print(json.dumps({"success": False, "error": str(e)}, indent=2))
        return 1

    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
