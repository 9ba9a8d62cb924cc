"""Typer CLI entrypoints for st."""

from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import click
import typer
from typer.core import TyperGroup

from setstatus.catalog import LUNCH_KEYWORD, UnknownKeywordError, validate_keyword
from setstatus.config import (
    ConfigError,
    Settings,
    StatusConfig,
    initialize_config,
    load_settings,
    resolve_config_root,
)
from setstatus.kernel.debug_log import DebugLogWriter
from setstatus.kernel.dispatcher import Dispatcher
from setstatus.kernel.planner import plan_dispatch
from setstatus.services.factory import ServiceFactory
from setstatus.timeparse import ParseError, resolve_lunch_return, resolve_return
from setstatus.ui.render import (
    render_keywords_text,
    render_notice,
    render_plan_text,
    render_report,
)


class StatusGroup(TyperGroup):
    """Treat an unknown first positional token as the implicit `set` command."""

    def resolve_command(self, ctx: click.Context, args: List[str]):
        if args and not args[0].startswith("-"):
            known = set(self.list_commands(ctx))
            if args[0] not in known:
                set_command = self.get_command(ctx, "set")
                if set_command is not None:
                    return "set", set_command, args
        return super().resolve_command(ctx, args)


app = typer.Typer(
    no_args_is_help=True,
    help="Set your status across Slack, GitHub and Asana.",
)
app.info.cls = StatusGroup


def _now() -> datetime:
    return datetime.now()


def _load_settings_or_defaults(config_dir: Optional[Path]) -> Settings:
    try:
        return load_settings(config_dir)
    except ConfigError as exc:
        typer.echo(render_notice("warn", str(exc)), err=True)
        return Settings(config_root=resolve_config_root(config_dir), config=StatusConfig())


def _build_debug_log(settings: Settings) -> DebugLogWriter:
    config = settings.config
    return DebugLogWriter(
        logs_dir=settings.logs_dir,
        enabled=config.logs_enabled,
        max_file_bytes=config.logs_max_file_bytes,
        max_files=config.logs_max_files,
        redaction=config.logs_redaction,
    )


def _build_services(config: StatusConfig) -> ServiceFactory:
    return ServiceFactory(config)


def _resolve_back_time(
    keyword: str,
    date_token: Optional[str],
    time_token: Optional[str],
    now: datetime,
) -> Optional[datetime]:
    today = now.date()
    if keyword == LUNCH_KEYWORD:
        # For lunch the second argument is the return time.
        return resolve_lunch_return(date_token, today, now)
    return resolve_return(date_token, time_token, today)


def _execute_set(
    keyword: str,
    date_token: Optional[str],
    time_token: Optional[str],
    config_dir: Optional[Path],
    dry_run: bool,
) -> int:
    try:
        normalized = validate_keyword(keyword)
    except UnknownKeywordError as exc:
        typer.echo(render_notice("error", str(exc)), err=True)
        return 2

    now = _now()
    try:
        back_at = _resolve_back_time(normalized, date_token, time_token, now)
    except ParseError as exc:
        typer.echo(render_notice("error", str(exc)), err=True)
        return 2

    settings = _load_settings_or_defaults(config_dir)
    plan = plan_dispatch(
        normalized,
        back_at,
        now,
        today=now.date(),
        scope_id=settings.config.github_org_id,
    )

    if dry_run:
        typer.echo(render_plan_text(plan))
        return 0

    debug_log = _build_debug_log(settings)
    debug_log.write_entry(
        level="info",
        component="cli",
        kind="status.resolved",
        keyword=normalized,
        message="dispatching {0}".format(normalized),
        data={
            "date_token": date_token,
            "time_token": time_token,
            "back_at": back_at.isoformat() if back_at is not None else None,
            "transition": plan.transition.value,
        },
    )

    services = _build_services(settings.config)
    try:
        report = Dispatcher(services, debug_log=debug_log).dispatch(plan)
    finally:
        services.close()

    render_report(report, stdout=sys.stdout, stderr=sys.stderr)
    return 0


@app.callback()
def main(
    ctx: typer.Context,
    config_dir: Optional[Path] = typer.Option(
        None,
        "--config-dir",
        help="Config directory (default ~/.config/st)",
    ),
) -> None:
    ctx.obj = ctx.obj or {}
    ctx.obj["config_dir"] = config_dir


@app.command("set")
def set_cmd(
    ctx: typer.Context,
    keyword: str = typer.Argument(
        ...,
        help="Status keyword: lunch, zoom, tuple, meet, eod, vacation, sick, away, back, clear",
    ),
    back_date: Optional[str] = typer.Argument(
        None,
        help="When you'll return (friday, 2/28, 3-10-2026, tomorrow); a time for lunch",
    ),
    back_time: Optional[str] = typer.Argument(
        None,
        help="What time you'll return (8am, 9:30am, 15:00). Defaults to 7am.",
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show planned changes without calling services"),
) -> None:
    """Set a status (the `set` word may be omitted)."""
    parent_obj = ctx.obj or {}
    exit_code = _execute_set(
        keyword=keyword,
        date_token=back_date,
        time_token=back_time,
        config_dir=parent_obj.get("config_dir"),
        dry_run=dry_run,
    )
    raise typer.Exit(code=exit_code)


@app.command("list")
def list_cmd() -> None:
    """List status keywords."""
    typer.echo(render_keywords_text())


@app.command("init")
def init_cmd(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config file"),
) -> None:
    """Write a default config file."""
    parent_obj = ctx.obj or {}
    try:
        config_file = initialize_config(parent_obj.get("config_dir"), force=force)
    except ConfigError as exc:
        typer.echo(render_notice("error", str(exc)), err=True)
        raise typer.Exit(code=2)

    typer.echo(render_notice("success", "wrote {0}".format(config_file)))


if __name__ == "__main__":
    app()
