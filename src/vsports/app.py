"""Typer application and CLI entry point for vsports.

The ``vsports`` command exposes every endpoint of
:class:`~vsports.client.VSportsClient` and prints the decoded payload to
stdout. Global options choose the config file, bypass the cache, and
control output format and verbosity::

    vsports standings 42 --live
    vsports --no-cache events --start 2024-08-01 --end 2024-08-31
    vsports -v --json event 1234 --media

:func:`main` is the console-script entry point declared in
``pyproject.toml``. Known :class:`~vsports.exceptions.VSportsError`
failures exit with their category's code; anything else writes a crash log
under the data directory.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Callable, Optional

import typer
from pydantic import BaseModel

from vsports import __version__
from vsports.client import VSportsClient
from vsports.exceptions import VSportsError
from vsports.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INVALID_USAGE
from vsports.output import (
    OutputFormat,
    OutputManager,
    error,
    format_response,
    get_output,
    info,
    set_output,
    success,
)


app = typer.Typer(
    name="vsports",
    help="Query the vsports sports-data API through a Redis cache.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
config_app = typer.Typer(no_args_is_help=True)
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"vsports {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    config_path: Optional[str] = typer.Option(
        None, "--config", "-c", help="Path to the client config file."
    ),
    no_cache: bool = typer.Option(
        False, "--no-cache", help="Bypass the Redis cache for this call."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show cache and request diagnostics."
    ),
) -> None:
    """Install the global output manager and stash shared options in ``ctx.obj``."""
    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["use_cache"] = not no_cache


# ------------------------------------------------------------------ #
# Helpers
# ------------------------------------------------------------------ #


def _open_client(ctx: typer.Context) -> VSportsClient:
    return VSportsClient.from_file(ctx.obj.get("config_path"), get_output())


def _to_data(payload: Any) -> Any:
    if isinstance(payload, BaseModel):
        return payload.model_dump(mode="json", exclude_none=True)
    if isinstance(payload, list):
        return [_to_data(item) for item in payload]
    return payload


def _run(ctx: typer.Context, call: Callable[[VSportsClient, bool], Any]) -> None:
    """Open a client, run *call* with the cache flag, and print its result.

    :class:`VSportsError` is reported on stderr and turned into the
    matching exit code.
    """
    try:
        with _open_client(ctx) as client:
            payload = call(client, ctx.obj.get("use_cache", True))
    except VSportsError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    format_response(_to_data(payload))


# ------------------------------------------------------------------ #
# Endpoint commands
# ------------------------------------------------------------------ #


@app.command("tournaments")
def tournaments_command(
    ctx: typer.Context,
    tournament_id: Optional[int] = typer.Argument(None, help="Show a single tournament."),
) -> None:
    """List tournaments, or show one."""
    if tournament_id is None:
        _run(ctx, lambda c, cache: c.get_tournaments(cache))
    else:
        _run(ctx, lambda c, cache: c.get_tournament_by_id(tournament_id, cache))


@app.command("teams")
def teams_command(
    ctx: typer.Context,
    team_id: Optional[int] = typer.Argument(None, help="Show a single team."),
    tournament: Optional[int] = typer.Option(
        None, "--tournament", "-t", help="List the teams of a tournament."
    ),
) -> None:
    """Show a team, or list the teams of a tournament."""
    if team_id is not None:
        _run(ctx, lambda c, cache: c.get_team_by_id(team_id, cache))
    elif tournament is not None:
        _run(ctx, lambda c, cache: c.get_teams_by_tournament_id(tournament, cache))
    else:
        error("Pass a TEAM_ID or --tournament.")
        raise typer.Exit(code=EXIT_INVALID_USAGE)


@app.command("events")
def events_command(
    ctx: typer.Context,
    start: str = typer.Option(..., "--start", help="First day, YYYY-MM-DD."),
    end: str = typer.Option(..., "--end", help="Last day, YYYY-MM-DD."),
    detailed: bool = typer.Option(False, "--detailed", help="Include event details."),
) -> None:
    """List events in a date range."""
    if detailed:
        _run(ctx, lambda c, cache: c.get_events_detailed_by_date(start, end, cache))
    else:
        _run(ctx, lambda c, cache: c.get_events_by_date(start, end, cache))


@app.command("event")
def event_command(
    ctx: typer.Context,
    event_id: int = typer.Argument(..., help="Event id."),
    detailed: bool = typer.Option(False, "--detailed", help="Include event details."),
    occurrences: bool = typer.Option(False, "--occurrences", help="List occurrences."),
    media: bool = typer.Option(False, "--media", help="List media of all occurrences."),
) -> None:
    """Show an event, its occurrences, or its media."""
    if sum((detailed, occurrences, media)) > 1:
        error("--detailed, --occurrences and --media are mutually exclusive.")
        raise typer.Exit(code=EXIT_INVALID_USAGE)
    if occurrences:
        _run(ctx, lambda c, cache: c.get_event_occurrences(str(event_id), cache))
    elif media:
        _run(ctx, lambda c, cache: c.get_event_media(str(event_id), cache))
    elif detailed:
        _run(ctx, lambda c, cache: c.get_event_detailed(event_id, cache))
    else:
        _run(ctx, lambda c, cache: c.get_event_by_id(event_id, cache))


@app.command("person")
def person_command(
    ctx: typer.Context,
    person_id: int = typer.Argument(..., help="Person id."),
) -> None:
    """Show a player, coach or referee."""
    _run(ctx, lambda c, cache: c.get_person_by_id(person_id, cache))


@app.command("squad")
def squad_command(
    ctx: typer.Context,
    team_id: int = typer.Argument(..., help="Team id."),
    tournament: Optional[int] = typer.Option(
        None, "--tournament", "-t", help="Squad registered for this tournament."
    ),
    detailed: bool = typer.Option(False, "--detailed", help="Include player details."),
) -> None:
    """Show the squad of a team."""
    if tournament is not None and detailed:
        _run(ctx, lambda c, cache: c.get_squad_detailed_by_tournament(team_id, tournament, cache))
    elif tournament is not None:
        _run(ctx, lambda c, cache: c.get_squad_by_tournament(team_id, tournament, cache))
    elif detailed:
        _run(ctx, lambda c, cache: c.get_squad_detailed(team_id, cache))
    else:
        _run(ctx, lambda c, cache: c.get_squad(team_id, cache))


@app.command("standings")
def standings_command(
    ctx: typer.Context,
    tournament_id: int = typer.Argument(..., help="Tournament id."),
    live: bool = typer.Option(False, "--live", help="Live standings."),
) -> None:
    """Show the standings of a tournament."""
    if live:
        _run(ctx, lambda c, cache: c.get_standings_by_tournament_live(tournament_id, cache))
    else:
        _run(ctx, lambda c, cache: c.get_standings_by_tournament(tournament_id, cache))


@app.command("venue")
def venue_command(
    ctx: typer.Context,
    venue_id: int = typer.Argument(..., help="Venue id."),
) -> None:
    """Show a venue."""
    _run(ctx, lambda c, cache: c.get_venue(venue_id, cache))


@app.command("venues")
def venues_command(
    ctx: typer.Context,
    team: int = typer.Option(..., "--team", help="Team id."),
) -> None:
    """List the venues of a team."""
    _run(ctx, lambda c, cache: c.get_venues_by_team(team, cache))


# ------------------------------------------------------------------ #
# Config commands
# ------------------------------------------------------------------ #


def _mask(secret: str) -> str:
    if len(secret) <= 4:
        return "*" * len(secret)
    return "*" * (len(secret) - 4) + secret[-4:]


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Show the effective configuration with the API key masked."""
    from vsports.config import load_client_config

    try:
        config = load_client_config(ctx.obj.get("config_path"))
    except VSportsError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    data = config.model_dump(mode="json", by_alias=True)
    data["apiKey"] = _mask(config.api_key)
    if data["redisConfig"]["password"]:
        data["redisConfig"]["password"] = _mask(config.redis_config.password)
    format_response(data)


@config_app.command("init")
def config_init(
    ctx: typer.Context,
    api_key: str = typer.Option(..., "--api-key", help="Bearer token for the API."),
    timeout: float = typer.Option(30, "--timeout", help="Request timeout in seconds."),
    cache_duration: int = typer.Option(
        300, "--cache-duration", help="Cache TTL in seconds."
    ),
    redis_addr: str = typer.Option("localhost:6379", "--redis-addr", help="Redis host:port."),
    redis_password: str = typer.Option("", "--redis-password", help="Redis password."),
    redis_db: int = typer.Option(0, "--redis-db", help="Redis database index."),
) -> None:
    """Write a config file (the ``--config`` path, or the default location)."""
    from vsports.config import save_client_config
    from vsports.models import ClientConfig

    config = ClientConfig(
        apiKey=api_key,
        timeoutSeconds=timeout,
        cacheDuration=cache_duration,
        redisConfig={"addr": redis_addr, "password": redis_password, "db": redis_db},
    )
    path = save_client_config(config, ctx.obj.get("config_path"))
    success(f"Wrote config to {path}")
    info("Check it with: vsports config show")


# ------------------------------------------------------------------ #
# Entry point
# ------------------------------------------------------------------ #


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write the current traceback under the data directory and return its path."""
    from vsports.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(f"{type(exc).__name__}: {exc}\n\n{traceback.format_exc()}")
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``vsports`` console script."""
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except VSportsError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception as exc:
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
