#!/usr/bin/env python3
# ruff: noqa: E402
# E402 disabled: sys.path modification must occur before imports
"""
Moderation console: review the pending idea queue from a terminal.

Loads every submitted idea from the API, prints the filtered queue and its
categories, then applies the requested verdicts one by one.

Usage:
    cd backend && python scripts/moderation_console.py --search solar
    python scripts/moderation_console.py --category Energy --approve 12 --reject 15
    python scripts/moderation_console.py --featured standard --feature 12

The admin token is read from --token or MODERATION_API_TOKEN; init_db.py
prints one for the seeded admin. The operator and their role are looked up
through the API before the queue is built, so the stored profile decides
who may moderate. Exit code is 1 when loading or any action failed.
"""

import argparse
import asyncio
import os
import sys
from pathlib import Path
from typing import Optional

# Add parent directory to path for imports
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from loguru import logger

from core.correlation import correlation_scope
from core.logging_config import configure_logging
from models.exceptions import InsufficientPermissionsException
from models.schemas import Idea
from moderation import (
    ALL_CATEGORIES,
    FeaturedFilter,
    HttpIdeaStore,
    IdeaStoreError,
    ModerationAction,
    ModerationError,
    ModerationQueue,
    ModerationResult,
)
from moderation.queue import DEFAULT_MAX_WORKING_SET

ACTION_ORDER = (
    ModerationAction.APPROVE,
    ModerationAction.REJECT,
    ModerationAction.FEATURE,
    ModerationAction.UNFEATURE,
)


def _env_float(name: str) -> Optional[float]:
    value = os.environ.get(name)
    return float(value) if value else None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Review ideas awaiting moderation",
    )
    parser.add_argument(
        "--api-url",
        default=os.environ.get("MODERATION_API_URL", "http://localhost:8000"),
        help="API base URL (default: MODERATION_API_URL or http://localhost:8000)",
    )
    parser.add_argument(
        "--token",
        default=os.environ.get("MODERATION_API_TOKEN"),
        help="Admin bearer token (default: MODERATION_API_TOKEN)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=_env_float("MODERATION_API_TIMEOUT"),
        help="Seconds per request; waits indefinitely when unset",
    )
    parser.add_argument(
        "--max-working-set",
        type=int,
        default=int(os.environ.get("MODERATION_MAX_WORKING_SET", DEFAULT_MAX_WORKING_SET)),
    )
    parser.add_argument("--search", default="", help="Free-text filter")
    parser.add_argument(
        "--category", default=ALL_CATEGORIES, help='Category label or "all"'
    )
    parser.add_argument(
        "--featured",
        choices=[choice.value for choice in FeaturedFilter],
        default=FeaturedFilter.ALL.value,
    )
    for action in ACTION_ORDER:
        parser.add_argument(
            f"--{action.value}",
            type=int,
            action="append",
            default=[],
            metavar="ID",
            help=f"{action.value.capitalize()} the idea with this ID (repeatable)",
        )
    return parser


def describe_error(error: Optional[ModerationError]) -> str:
    if error is None:
        return "unknown error"
    text = error.message
    if error.status_code:
        text += f" (HTTP {error.status_code})"
    if error.code:
        text += f" [{error.code}]"
    if error.details:
        text += f": {error.details}"
    if error.hint:
        text += f" Hint: {error.hint}"
    return text


def format_idea(idea: Idea) -> str:
    author = idea.author
    by = (author.full_name or author.email) if author else None
    line = f"#{idea.id:<5} [{idea.category or '-'}] {idea.title or '(untitled)'}"
    if by:
        line += f" by {by}"
    if idea.tags:
        line += f"  tags: {', '.join(idea.tags)}"
    if idea.is_featured:
        line += "  (featured)"
    return line


def format_result(result: ModerationResult) -> str:
    label = f"{result.action.value} #{result.idea_id}"
    if result.ok:
        return f"[OK] {label}"
    return f"[FAILED] {label}: {describe_error(result.error)}"


def print_queue(queue: ModerationQueue) -> None:
    visible = queue.filtered()
    print(f"{len(visible)} of {len(queue)} pending ideas match the filters")
    for idea in visible:
        print(f"  {format_idea(idea)}")
    categories = queue.categories()
    print(f"Categories: {', '.join(categories) if categories else '(none)'}")


async def run(args: argparse.Namespace) -> int:
    async with HttpIdeaStore(args.api_url, args.token, timeout=args.timeout) as store:
        try:
            auth = await store.fetch_caller()
        except IdeaStoreError as e:
            error = ModerationError.from_store_error(e)
            print(f"Failed to identify the console operator: {describe_error(error)}")
            return 1

        try:
            queue = ModerationQueue(store, auth, max_working_set=args.max_working_set)
        except InsufficientPermissionsException as e:
            print(f"{auth.email or auth.profile_id} cannot moderate: {e.message}")
            return 1
        queue.set_filters(args.search, args.category, args.featured)

        loaded = await queue.load()
        if not loaded.ok:
            print(f"Failed to load moderation queue: {describe_error(loaded.error)}")
            return 1

        print_queue(queue)

        failed = 0
        for action in ACTION_ORDER:
            for idea_id in getattr(args, action.value):
                result = await getattr(queue, action.value)(idea_id)
                print(format_result(result))
                if not result.ok:
                    failed += 1

    if failed:
        logger.warning(f"{failed} moderation action(s) failed")
        return 1
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.token:
        parser.error("an admin token is required (--token or MODERATION_API_TOKEN)")

    configure_logging(os.getenv("ENVIRONMENT", "development"), log_file=None)

    with correlation_scope() as correlation_id:
        logger.info(f"Moderation console session {correlation_id} against {args.api_url}")
        return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
