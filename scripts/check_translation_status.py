#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Show translation requests and stored locales for a post. Usage: python check_translation_status.py [post_id] [--poll]"""
import sys
import argparse
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from rich.console import Console
from rich.table import Table
from sqlalchemy import select

from post_translator.database import create_tables, get_session
from post_translator.models import Post, TranslationRequest
from post_translator.workflows.failure_reporter import CollectingFailureReporter
from post_translator.workflows.poll_scheduler import PollScheduler


console = Console()


def check(db, post_id: int):
    post = db.get(Post, post_id)
    if not post:
        console.print(f"[red]Post {post_id} does not exist[/red]")
        return

    console.print(f"[bold]Post {post_id}:[/bold] {post.title}")

    requests_table = Table(title="Translation requests")
    for column in ("request_id", "status", "attempts", "locales", "failure", "completed_at"):
        requests_table.add_column(column)

    requests = db.execute(
        select(TranslationRequest)
        .where(TranslationRequest.post_id == post_id)
        .order_by(TranslationRequest.id)
    ).scalars()
    for request in requests:
        requests_table.add_row(
            request.request_id,
            request.status,
            f"{request.attempt_count}/{request.max_attempts}",
            ", ".join(request.target_locales or []),
            request.failure_reason or "",
            str(request.completed_at or ""),
        )
    console.print(requests_table)

    locales_table = Table(title="Stored translations")
    locales_table.add_column("locale")
    locales_table.add_column("title")
    locales_table.add_column("description")
    for locale, translation in sorted(post.translations.items()):
        locales_table.add_row(locale, translation.title, (translation.description or "")[:60])
    console.print(locales_table)


def poll_now(post_id: int):
    """Run one immediate poll chain for each open request of the post."""
    reporter = CollectingFailureReporter()
    scheduler = PollScheduler(reporter=reporter, interval=0)

    with get_session() as db:
        request_ids = [
            r.request_id for r in db.execute(
                select(TranslationRequest).where(TranslationRequest.post_id == post_id)
            ).scalars()
            if r.status in ("submitted", "polling")
        ]

    for request_id in request_ids:
        outcome = scheduler.run(request_id)
        console.print(f"{request_id}: {outcome.status.value if outcome.status else 'untracked'}")
    for failure in reporter.failures:
        console.print(f"[red]{failure.request_id}: {failure.reason.value} - {failure.error}[/red]")


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("post_id", type=int, nargs="?", default=1)
    parser.add_argument("--poll", action="store_true", help="Poll open requests now, without waiting")
    args = parser.parse_args()

    create_tables()
    if args.poll:
        poll_now(args.post_id)

    with get_session() as db:
        check(db, args.post_id)
