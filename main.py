from __future__ import annotations

import logging
from dataclasses import dataclass

import click
from rich.console import Console
from rich.table import Table

from services.auth_service import AuthService
from services.credential_store import CredentialStore
from services.gmail_service import GmailService
from services.persistence_service import RepliedThreadStore
from services.pipeline import AutoReplyPipeline
from services.scheduler import RandomIntervalScheduler
from services.statistics_service import COUNTERS, StatisticsService
from utils.config import AppConfig, load_config
from utils.logger import configure_logging


LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class AppContext:
    config: AppConfig
    pipeline: AutoReplyPipeline
    stats: StatisticsService
    replied_store: RepliedThreadStore
    console: Console


def build_context(env_file: str) -> AppContext:
    config = load_config(env_file)
    configure_logging(config.log_dir, config.log_level)

    mailbox = config.mailbox
    auth_service = AuthService(mailbox, CredentialStore(mailbox.token_file))
    stats = StatisticsService(config.stats_file)
    replied_store = RepliedThreadStore(config.db_path)
    pipeline = AutoReplyPipeline(
        config,
        auth_service,
        lambda creds: GmailService(creds, user_id=mailbox.user_id),
        store=replied_store,
        stats=stats,
    )
    return AppContext(
        config=config,
        pipeline=pipeline,
        stats=stats,
        replied_store=replied_store,
        console=Console(),
    )


@click.group(invoke_without_command=True)
@click.option("--env-file", default=".env", show_default=True, help="Path to the .env file")
@click.pass_context
def cli(ctx: click.Context, env_file: str) -> None:
    """Gmail auto-responder. Without a command, replies on a random 45-120s loop."""

    try:
        ctx.obj = build_context(env_file)
    except ValueError as exc:
        raise click.UsageError(f"Invalid configuration: {exc}") from exc
    if ctx.invoked_subcommand is None:
        ctx.invoke(run)


@cli.command("run")
@click.option("--now", "run_now", is_flag=True, help="Run the first pass immediately instead of waiting")
@click.pass_obj
def run(app: AppContext, run_now: bool = False) -> None:
    """Poll the mailbox forever at random intervals."""

    scheduler = RandomIntervalScheduler(
        app.pipeline.run_pass,
        min_seconds=app.config.min_interval_seconds,
        max_seconds=app.config.max_interval_seconds,
    )
    app.console.print(
        f"Auto-replying as [bold]{app.config.mailbox.user_id}[/bold] with label "
        f"'{app.config.label_name}'. Press Ctrl+C to stop."
    )
    try:
        scheduler.run_forever(run_now=run_now)
    except KeyboardInterrupt:
        scheduler.stop()
        app.console.print("Scheduler stopped.")


@cli.command("once")
@click.pass_obj
def run_once(app: AppContext) -> None:
    """Run a single pass and print what happened."""

    summary = app.pipeline.run_pass()
    if not summary.authorized:
        app.console.print("[red]Authorization failed; see the log for details.[/red]")
        raise SystemExit(1)
    app.console.print(
        f"Checked {summary.candidates} thread(s): {summary.replied} replied, "
        f"{summary.skipped} skipped, {summary.errors} failed."
    )


@cli.command("stats")
@click.option("--recent", type=int, default=5, show_default=True, help="Number of recent replies to list")
@click.pass_obj
def stats(app: AppContext, recent: int) -> None:
    """Display local activity statistics."""

    snapshot = app.stats.snapshot()
    if not snapshot:
        app.console.print("No stats recorded yet.")
        return

    table = Table(title="Auto-reply stats")
    table.add_column("Metric")
    table.add_column("Value")
    for counter in COUNTERS:
        table.add_row(counter.replace("_", " ").capitalize(), str(snapshot.get(counter, 0)))
    if snapshot.get("failed_authorizations"):
        table.add_row("Failed authorizations", str(snapshot["failed_authorizations"]))
    table.add_row("Threads answered", str(app.replied_store.reply_count(app.config.mailbox.user_id)))
    table.add_row("Last pass", snapshot.get("last_pass_at", "-"))
    app.console.print(table)

    entries = app.replied_store.recent_replies(recent)
    if entries:
        replies = Table(title="Recent replies")
        replies.add_column("Replied at")
        replies.add_column("Sender")
        replies.add_column("Subject", overflow="fold")
        for entry in entries:
            replies.add_row(entry.replied_at.isoformat(timespec="seconds"), entry.sender, entry.subject)
        app.console.print(replies)


def main() -> None:
    cli(standalone_mode=True)


if __name__ == "__main__":
    main()
