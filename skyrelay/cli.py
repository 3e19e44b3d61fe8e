from __future__ import annotations

import json
import logging
from typing import Any, Callable, Optional

import click

from .config import get_settings
from .engine import InvalidRequestError, TravelEngine

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str, log_file: Optional[str] = None) -> None:
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(level=level, handlers=handlers, format=LOG_FORMAT, force=True)


def _emit(payload: Any) -> None:
    click.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def _run(ctx: click.Context, call: Callable[[TravelEngine], Any]) -> None:
    engine: TravelEngine = ctx.obj["engine"]
    try:
        result = call(engine)
    except InvalidRequestError as exc:
        raise click.UsageError(str(exc), ctx=ctx)
    _emit(result.to_dict() if hasattr(result, "to_dict") else result)
    if ctx.obj.get("show_stats"):
        _emit(engine.stats_snapshot())


@click.group()
@click.option("--log-level", default=None, help="Override LOG_LEVEL")
@click.option("--log-file", default=None, help="Also write logs to this file")
@click.option("--show-stats", is_flag=True, help="Print the stats snapshot after the result")
@click.pass_context
def cli(
    ctx: click.Context,
    log_level: Optional[str],
    log_file: Optional[str],
    show_stats: bool,
) -> None:
    """Travel data lookups with provider fallback."""
    settings = get_settings()
    configure_logging((log_level or settings.log_level).upper(), log_file)
    ctx.ensure_object(dict)
    if "engine" not in ctx.obj:
        ctx.obj["engine"] = TravelEngine(settings)
    ctx.obj["show_stats"] = show_stats


@cli.command()
@click.argument("code")
@click.pass_context
def airport(ctx: click.Context, code: str) -> None:
    """Airport metadata for an IATA CODE."""
    _run(ctx, lambda e: e.lookup_airport(code))


@cli.command()
@click.argument("origin")
@click.argument("destination")
@click.argument("date")
@click.option("--travelers", type=int, default=1, show_default=True)
@click.option(
    "--seat-class",
    type=click.Choice(["economy", "premium", "business"], case_sensitive=False),
    default="economy",
    show_default=True,
)
@click.option("--saf", is_flag=True, help="Apply the sustainable-fuel scenario")
@click.pass_context
def flight(
    ctx: click.Context,
    origin: str,
    destination: str,
    date: str,
    travelers: int,
    seat_class: str,
    saf: bool,
) -> None:
    """Flight, carbon footprint and planner hints for ORIGIN DESTINATION DATE."""
    _run(
        ctx,
        lambda e: e.lookup_flight(
            origin, destination, date, travelers, seat_class, sustainable_fuel=saf
        ),
    )


@cli.command()
@click.argument("code")
@click.option("--hours", type=float, default=None, help="Layover duration in hours")
@click.pass_context
def layover(ctx: click.Context, code: str, hours: Optional[float]) -> None:
    """Layover suggestions for an airport CODE."""
    _run(ctx, lambda e: e.layover_advisory(code, hours))


@cli.command()
@click.argument("origin")
@click.argument("destination")
@click.argument("date")
@click.option(
    "--mode",
    type=click.Choice(["calendar", "flights"]),
    default="calendar",
    show_default=True,
)
@click.pass_context
def fares(ctx: click.Context, origin: str, destination: str, date: str, mode: str) -> None:
    """Fare calendar or fare offers for ORIGIN DESTINATION DATE."""
    _run(ctx, lambda e: e.search_fares(origin, destination, date, mode))


@cli.command()
@click.pass_context
def stats(ctx: click.Context) -> None:
    """Request statistics collected by this process."""
    _run(ctx, lambda e: e.stats_snapshot())


@cli.command()
@click.pass_context
def health(ctx: click.Context) -> None:
    """Configured providers and cache state."""
    _run(ctx, lambda e: e.health())


if __name__ == "__main__":
    cli()
