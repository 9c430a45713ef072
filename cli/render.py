from __future__ import annotations

from typing import Any, Iterable, Mapping

import typer

from models.records import Reading
from services.classifier import classify
from services.dispatcher import DispatchOutcome
from services.formatter import format_number, format_weather
from settings import DEFAULT_POLLUTANT_LABELS


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_reading(reading: Reading, labels: Mapping[str, str] = DEFAULT_POLLUTANT_LABELS) -> None:
    tier = classify(reading.index)
    echo_heading("Current Reading")
    echo_key_values(
        [
            ("location", reading.location_name),
            ("aqi", format_number(reading.index)),
            ("level", f"{tier.label} {tier.indicator}"),
            ("dominant_pollutant", reading.dominant_pollutant or "unknown"),
            ("observed_at", reading.observed_at),
        ]
    )

    typer.echo()
    echo_heading("Pollutants")
    present = [(code, value) for code, value in reading.pollutants.items() if value is not None]
    if present:
        for code, value in present:
            typer.echo(f"  - {labels.get(code, code)}: {format_number(value)}")
    else:
        typer.echo("No pollutant data available.")

    weather = format_weather(reading.weather)
    if weather:
        typer.echo()
        echo_heading("Weather")
        typer.echo(weather)


_OUTCOME_MESSAGES = {
    DispatchOutcome.summary_sent: "Daily summary sent.",
    DispatchOutcome.alert_sent: "Alert sent.",
    DispatchOutcome.below_threshold: "AQI within threshold; nothing sent.",
    DispatchOutcome.failed: "Check failed; see logs. Will retry on the next tick.",
}


def render_outcome(outcome: DispatchOutcome) -> None:
    color = typer.colors.RED if outcome is DispatchOutcome.failed else typer.colors.GREEN
    typer.secho(f"{_OUTCOME_MESSAGES[outcome]} outcome={outcome.value}", fg=color)
