"""CLI interface using Typer."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from hazard_relay import __version__
from hazard_relay.config import RelayConfig
from hazard_relay.fetchers.usgs import fetch_earthquakes, fetch_tsunami_alerts
from hazard_relay.http import create_session
from hazard_relay.models import MLPredictionInput
from hazard_relay.relays.chatbot import ChatbotError, ask_chatbot
from hazard_relay.relays.prediction import predict_impact

app = typer.Typer(
    name="hazard-relay",
    help="Live earthquake/tsunami feed relay with chatbot and impact prediction.",
    add_completion=False,
)
console = Console()

_SEVERITY_STYLE = {
    "warning": "[red]warning[/red]",
    "watch": "[dark_orange]watch[/dark_orange]",
    "advisory": "[yellow]advisory[/yellow]",
    "information": "[green]information[/green]",
}


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"hazard-relay {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[logging.StreamHandler()],
    )


def _format_time(time_ms: int) -> str:
    return datetime.fromtimestamp(time_ms / 1000, tz=timezone.utc).strftime("%Y-%m-%d %H:%M")


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Hazard Relay: earthquake and tsunami feed with chatbot and prediction relays."""


@app.command()
def serve(
    host: Annotated[str | None, typer.Option("--host", help="Bind address.")] = None,
    port: Annotated[int | None, typer.Option("--port", "-p", help="Bind port.")] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable verbose logging.")
    ] = False,
) -> None:
    """Run the HTTP API."""
    import uvicorn

    from hazard_relay.api import create_app

    _configure_logging(verbose)
    config = RelayConfig()
    uvicorn.run(
        create_app(config),
        host=host or config.host,
        port=port or config.port,
        log_level="debug" if verbose else "info",
    )


@app.command()
def earthquakes(
    limit: Annotated[
        int, typer.Option("--limit", "-n", min=1, help="Number of events to show.")
    ] = 20,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable verbose logging.")
    ] = False,
) -> None:
    """Fetch the live feed and list the most recent earthquakes."""
    _configure_logging(verbose)
    config = RelayConfig()
    events = fetch_earthquakes(
        url=config.feed_url,
        timeout=config.request_timeout,
        session=create_session(retries=config.http_retries),
    )
    if not events:
        console.print("[yellow]No earthquake data available.[/yellow]")
        raise typer.Exit()

    table = Table(title="Recent Earthquakes")
    table.add_column("Time (UTC)", style="dim")
    table.add_column("Mag", justify="right", style="red")
    table.add_column("Depth km", justify="right")
    table.add_column("Location", style="bold")
    table.add_column("Tsunami")
    for eq in events[:limit]:
        table.add_row(
            _format_time(eq.time),
            f"{eq.magnitude:.1f}",
            f"{eq.depth:.1f}",
            escape(eq.location),
            "[red]yes[/red]" if eq.tsunami else "-",
        )
    console.print(table)
    console.print(f"Total events: {len(events)}")


@app.command("tsunami-alerts")
def tsunami_alerts(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable verbose logging.")
    ] = False,
) -> None:
    """List tsunami alerts derived from the live feed."""
    _configure_logging(verbose)
    config = RelayConfig()
    alerts = fetch_tsunami_alerts(
        url=config.feed_url,
        timeout=config.request_timeout,
        session=create_session(retries=config.http_retries),
    )
    if not alerts:
        console.print("[green]No tsunami alerts.[/green]")
        raise typer.Exit()

    table = Table(title="Tsunami Alerts")
    table.add_column("Issued (UTC)", style="dim")
    table.add_column("Severity")
    table.add_column("Wave height", justify="right")
    table.add_column("Event", style="bold")
    for alert in alerts:
        table.add_row(
            _format_time(alert.issue_time),
            _SEVERITY_STYLE.get(alert.severity, alert.severity),
            alert.wave_height or "-",
            escape(alert.event),
        )
    console.print(table)


@app.command()
def predict(
    diameter: Annotated[float, typer.Option("--diameter", help="Diameter in km.")],
    velocity: Annotated[float, typer.Option("--velocity", help="Velocity in km/s.")],
    distance: Annotated[float, typer.Option("--distance", help="Distance from Earth.")],
    mass: Annotated[float, typer.Option("--mass", help="Mass in kg.")],
    angle: Annotated[
        float, typer.Option("--angle", help="Trajectory angle in degrees.")
    ] = 45.0,
) -> None:
    """Request an impact prediction, falling back to a local estimate."""
    config = RelayConfig()
    try:
        params = MLPredictionInput(
            diameter=diameter,
            velocity=velocity,
            distance=distance,
            mass=mass,
            trajectory_angle=angle,
        )
    except ValidationError as exc:
        for err in exc.errors(include_url=False):
            field = ".".join(str(part) for part in err["loc"])
            console.print(f"[red]{field}:[/red] {escape(err['msg'])}")
        raise typer.Exit(code=2) from None

    result = predict_impact(
        params,
        url=config.prediction_url,
        timeout=config.request_timeout,
        session=create_session(retries=config.http_retries),
    )
    out = result.output
    table = Table(title=f"Impact Prediction ({result.source})")
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Impact probability", f"{out.impact_probability:.2f}%")
    table.add_row("Risk level", out.risk_level)
    table.add_row("Potential damage", escape(out.potential_damage))
    table.add_row("Recommended action", escape(out.recommended_action))
    if out.estimated_energy is not None:
        table.add_row("Estimated energy", str(out.estimated_energy))
    console.print(table)


@app.command()
def ask(
    question: Annotated[str, typer.Argument(help="Question for the chatbot.")],
) -> None:
    """Send a question to the chatbot and print its JSON reply."""
    config = RelayConfig()
    try:
        answer = ask_chatbot(
            question,
            url=config.chatbot_url,
            timeout=config.request_timeout,
            session=create_session(retries=config.http_retries),
        )
    except ChatbotError as exc:
        console.print(f"[red]Chatbot failed:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from None
    console.print_json(json.dumps(answer))
