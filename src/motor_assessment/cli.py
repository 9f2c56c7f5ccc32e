"""CLI application using Typer."""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from motor_assessment.core.exceptions import ConfigurationError, SampleFormatError
from motor_assessment.core.types import Hand

app = typer.Typer(
    name="motor-assess",
    help="Finger-tapping and resting-tremor hand motor assessment",
    no_args_is_help=True,
)
console = Console()

# Sub-applications
config_app = typer.Typer(help="Configuration management")

app.add_typer(config_app, name="config")


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _fmt(value: Any, decimals: int = 2) -> str:
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, float):
        return f"{value:.{decimals}f}"
    return str(value)


# ============================================================================
# Config commands
# ============================================================================


@config_app.command("show")
def config_show():
    """Show current configuration."""
    from motor_assessment.core.config import get_settings

    settings = get_settings()
    data = settings.to_dict()

    console.print("[bold]Current Configuration[/bold]\n")

    for section, values in data.items():
        console.print(f"[cyan]{section}:[/cyan]")
        for key, value in values.items():
            console.print(f"  {key}: {value}")
        console.print()


@config_app.command("init")
def config_init(
    path: Annotated[Path, typer.Option("--path", "-p", help="Config file path")] = Path(
        "config/settings.yaml"
    ),
    force: Annotated[bool, typer.Option("--force", "-f", help="Overwrite existing file")] = False,
):
    """Write a configuration file holding the defaults."""
    from motor_assessment.core.config import Settings

    if path.exists() and not force:
        console.print(f"[yellow]Config already exists at {path}[/yellow]")
        if not typer.confirm("Overwrite?"):
            raise typer.Abort()

    Settings().to_yaml(path)
    console.print(f"[green]Created config at {path}[/green]")


# ============================================================================
# Display helpers
# ============================================================================


def _print_tapping(result) -> None:
    table = Table(title=f"Finger Tapping: {result.hand.value} Hand")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Taps", str(result.tap_count))
    table.add_row("Duration (s)", _fmt(result.duration, 1))
    table.add_row("Average frequency (Hz)", _fmt(result.average_frequency))
    table.add_row("Peak frequency (Hz)", _fmt(result.peak_frequency))
    table.add_row("Consistency", _fmt(result.consistency))
    table.add_row("Rhythm stability", _fmt(result.rhythm_stability))
    table.add_row("Fatigue index", _fmt(result.fatigue_index))
    table.add_row("Rhythmicity", _fmt(result.rhythmicity, 0))
    table.add_row("Score", _fmt(result.score, 0))
    table.add_row("Grade", result.grade.value)

    console.print(table)


def _print_tremor(result) -> None:
    table = Table(title=f"Resting Tremor: {result.hand.value} Hand")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Samples", f"{result.sample_count} ({result.data_quality})")
    table.add_row("Frequency (Hz)", _fmt(result.frequency))
    table.add_row("Tremor type", result.tremor_type.value)
    table.add_row("Amplitude", _fmt(result.amplitude, 4))
    table.add_row("Max amplitude", _fmt(result.max_amplitude, 4))
    table.add_row("Variability", _fmt(result.amplitude_variability, 4))
    table.add_row("Dominant axis", result.dominant_axis.value)
    table.add_row("Gyro stability", _fmt(result.gyro_stability, 0))
    table.add_row("Severity", result.severity.value)
    table.add_row("Tremor present", _fmt(result.has_tremor))

    console.print(table)


def _print_summary(summary) -> None:
    table = Table(title="Session Summary")
    table.add_column("Hand", style="cyan")
    table.add_column("Tap score", justify="right")
    table.add_column("Tap freq (Hz)", justify="right")
    table.add_column("Tremor amp", justify="right")
    table.add_column("Severity")
    table.add_column("Hand score", justify="right")
    table.add_column("Category")

    for hand in (Hand.LEFT, Hand.RIGHT):
        tapping = summary.record.tapping(hand)
        tremor = summary.record.tremor(hand)
        assessment = summary.hand_assessments.get(hand)
        table.add_row(
            hand.value,
            _fmt(tapping.score if tapping else None, 0),
            _fmt(tapping.average_frequency if tapping else None),
            _fmt(tremor.amplitude if tremor else None, 4),
            tremor.severity.value if tremor else "-",
            _fmt(assessment.score if assessment else None, 0),
            assessment.category.value if assessment else "-",
        )

    console.print(table)

    status_style = "green" if not summary.has_findings else "yellow"
    console.print(
        f"\n[bold]Overall:[/bold] [{status_style}]{summary.overall_status.value}[/{status_style}]"
    )
    confidence = (
        f" ({summary.dominance_confidence:.0f}% confidence)"
        if summary.dominance_confidence is not None
        else ""
    )
    console.print(f"[bold]Dominant hand:[/bold] {summary.dominant_hand}{confidence}")

    console.print("\n[bold]Recommendations:[/bold]")
    for item in summary.recommendations:
        console.print(f"  - {item}")


# ============================================================================
# Session commands
# ============================================================================


@app.command("simulate")
def simulate(
    seed: Annotated[int, typer.Option("--seed", "-s", help="Random seed")] = 42,
    left_tap_rate: Annotated[
        float, typer.Option("--left-tap-rate", help="Left hand tapping rate (Hz)")
    ] = 5.0,
    right_tap_rate: Annotated[
        float, typer.Option("--right-tap-rate", help="Right hand tapping rate (Hz)")
    ] = 6.0,
    left_tremor: Annotated[
        float, typer.Option("--left-tremor", help="Left hand tremor amplitude")
    ] = 0.03,
    right_tremor: Annotated[
        float, typer.Option("--right-tremor", help="Right hand tremor amplitude")
    ] = 0.015,
    report: Annotated[
        Optional[Path], typer.Option("--report", "-r", help="Write a Markdown report")
    ] = None,
    template: Annotated[
        Optional[Path], typer.Option("--template", "-t", help="Jinja2 template for the report")
    ] = None,
    json_path: Annotated[
        Optional[Path], typer.Option("--json", "-j", help="Write the summary as JSON")
    ] = None,
):
    """Run the full four-phase protocol against synthetic input."""
    from motor_assessment.core.config import get_settings
    from motor_assessment.report import generate_session_report
    from motor_assessment.session import DEFAULT_PROFILES, run_simulated_session

    if template is not None and not template.is_file():
        console.print(f"[red]Template not found: {template}[/red]")
        raise typer.Exit(1)

    profiles = {
        Hand.LEFT: replace(
            DEFAULT_PROFILES[Hand.LEFT], tap_rate=left_tap_rate, tremor_amplitude=left_tremor
        ),
        Hand.RIGHT: replace(
            DEFAULT_PROFILES[Hand.RIGHT], tap_rate=right_tap_rate, tremor_amplitude=right_tremor
        ),
    }

    def on_event(event: dict[str, Any]) -> None:
        if event["event"] == "phase_complete":
            console.print(f"[dim]Completed {event['hand']} {event['kind'].lower()} phase[/dim]")

    summary = run_simulated_session(get_settings(), profiles=profiles, seed=seed, event_cb=on_event)
    console.print()
    _print_summary(summary)

    if report:
        generate_session_report(summary, report, template)
        console.print(f"\n[green]Report saved to {report}[/green]")

    if json_path:
        json_path.parent.mkdir(parents=True, exist_ok=True)
        json_path.write_text(json.dumps(summary.to_dict(), indent=2))
        console.print(f"[green]Summary saved to {json_path}[/green]")


@app.command("analyze-taps")
def analyze_taps(
    file: Annotated[Path, typer.Argument(help="JSON file of tap times (s)")],
    hand: Annotated[Hand, typer.Option("--hand", case_sensitive=False, help="Hand tested")] = Hand.RIGHT,
    duration: Annotated[
        Optional[float], typer.Option("--duration", "-d", help="Test length (s)")
    ] = None,
):
    """Analyze a recorded tapping phase."""
    from motor_assessment.analysis import TappingAnalyzer
    from motor_assessment.core.config import get_settings
    from motor_assessment.sensing import load_tap_times

    try:
        taps = load_tap_times(file)
    except (FileNotFoundError, SampleFormatError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    analyzer = TappingAnalyzer(get_settings().tapping)
    _print_tapping(analyzer.analyze(taps, hand, duration))


@app.command("analyze-tremor")
def analyze_tremor(
    file: Annotated[Path, typer.Argument(help="JSON file of motion samples")],
    hand: Annotated[Hand, typer.Option("--hand", case_sensitive=False, help="Hand tested")] = Hand.RIGHT,
):
    """Analyze a recorded tremor phase."""
    from motor_assessment.analysis import TremorAnalyzer
    from motor_assessment.core.config import get_settings
    from motor_assessment.sensing import load_samples

    try:
        samples = load_samples(file)
    except (FileNotFoundError, SampleFormatError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    analyzer = TremorAnalyzer(get_settings().tremor)
    _print_tremor(analyzer.analyze(samples, hand))


# ============================================================================
# Main entry point
# ============================================================================


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
    config: Annotated[
        Optional[Path], typer.Option("--config", "-c", help="Settings YAML file")
    ] = None,
):
    """Finger-tapping and resting-tremor hand motor assessment."""
    from motor_assessment.core.config import reload_settings

    _setup_logging(verbose)
    try:
        reload_settings(config)
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
