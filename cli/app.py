from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

import typer

from cli.render import render_outcome, render_reading
from logging_config import configure_logging
from models.records import Reading
from services.dispatcher import Dispatcher, DispatchOutcome, build_dispatcher, build_http_client
from settings import Settings, get_settings

T = TypeVar("T")


@dataclass
class CLIState:
    settings: Settings


app = typer.Typer(
    help="Check air quality and relay notifications to Telegram.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1)
    return state


def _run(settings: Settings, operation: Callable[[Dispatcher], Awaitable[T]]) -> T:
    async def runner() -> T:
        async with build_http_client(settings) as http_client:
            dispatcher = build_dispatcher(http_client, settings)
            return await operation(dispatcher)

    return asyncio.run(runner())


def _run_or_exit(settings: Settings, operation: Callable[[Dispatcher], Awaitable[Reading]]) -> Reading:
    try:
        return _run(settings, operation)
    except Exception as exc:  # noqa: BLE001 - reported to the operator
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


@app.callback()
def main(
    ctx: typer.Context,
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Override the LOG_LEVEL environment variable.",
    ),
) -> None:
    """Entry point for the CLI."""
    configure_logging(log_level)
    ctx.obj = CLIState(settings=get_settings())


@app.command("check")
def check_command(ctx: typer.Context) -> None:
    """Fetch and print the current reading without notifying."""
    state = _get_state(ctx)
    reading = _run_or_exit(state.settings, lambda dispatcher: dispatcher.check())
    render_reading(reading, state.settings.monitor.pollutant_labels)


@app.command("alert")
def alert_command(ctx: typer.Context) -> None:
    """Send an alert notification regardless of the threshold."""
    state = _get_state(ctx)
    reading = _run_or_exit(state.settings, lambda dispatcher: dispatcher.send_alert())
    typer.secho(f"Alert sent! AQI: {reading.index}", fg=typer.colors.GREEN)


@app.command("summary")
def summary_command(ctx: typer.Context) -> None:
    """Send the daily summary notification now."""
    state = _get_state(ctx)
    reading = _run_or_exit(state.settings, lambda dispatcher: dispatcher.send_summary())
    typer.secho(f"Summary sent! AQI: {reading.index}", fg=typer.colors.GREEN)


@app.command("tick")
def tick_command(
    ctx: typer.Context,
    cron: str = typer.Option(
        ...,
        "--cron",
        "-c",
        help="Schedule expression that fired, e.g. '0 * * * *'.",
    ),
) -> None:
    """Run a scheduled check. Always exits 0; failures are only logged."""
    state = _get_state(ctx)
    outcome: DispatchOutcome = _run(
        state.settings, lambda dispatcher: dispatcher.run_scheduled(cron)
    )
    render_outcome(outcome)
