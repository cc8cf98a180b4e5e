"""Command-line interface for repometer."""

import asyncio
import json
import subprocess
import sys
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from repometer import __version__
from repometer.config import Settings
from repometer.errors import ConfigError
from repometer.log import configure_logging
from repometer.scoring.factors import NetScoreResult
from repometer.services.batch import batch_evaluate, load_url_file
from repometer.services.evaluator import evaluate_repository

USAGE = """Usage:
    repometer install             # Install dependencies
    repometer URL_FILE            # Score every URL in URL_FILE (NDJSON output)
    repometer evaluate URL        # Score a single repository
    repometer test                # Run test suite"""

COMMANDS = {"score", "evaluate", "install", "test"}

app = typer.Typer(
    name="repometer",
    help="Repository quality metrics - bus factor, correctness, ramp-up, license and net score",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool):
    if value:
        console.print(f"repometer version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """repometer - repository quality metrics."""
    load_dotenv()
    try:
        settings = Settings.from_env(require_token=False)
    except ConfigError as e:
        err_console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    configure_logging(settings.log_level, settings.log_file)


def _load_settings() -> Settings:
    """Settings for commands that talk to GitHub; a missing token is fatal."""
    try:
        return Settings.from_env(require_token=True)
    except ConfigError as e:
        err_console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


@app.command()
def score(
    url_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="File with one repository URL per line"),
    max_concurrent: int = typer.Option(0, "--max-concurrent", "-n", help="Repositories evaluated at once (0 = from settings)"),
):
    """Score every URL in a file and print one NDJSON record per URL."""
    settings = _load_settings()
    urls = load_url_file(str(url_file))
    if not urls:
        err_console.print(f"[yellow]No URLs in {url_file}[/yellow]")
        return

    result = asyncio.run(batch_evaluate(urls, settings, max_concurrent=max_concurrent or None))
    for scored in result.results:
        typer.echo(json.dumps(scored.to_dict()))


@app.command()
def evaluate(
    url: str = typer.Argument(..., help="Repository or npm package URL"),
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
):
    """Score a single repository."""
    settings = _load_settings()

    if output_json:
        result = asyncio.run(evaluate_repository(url, settings=settings))
        typer.echo(json.dumps(result.to_dict(), indent=2))
        return

    with console.status(f"[bold blue]Evaluating {url}...[/bold blue]"):
        result = asyncio.run(evaluate_repository(url, settings=settings))
    _display_results(result)


def _score_style(value: float) -> str:
    if value < 0:
        return "red"
    if value >= 0.7:
        return "green"
    if value >= 0.4:
        return "yellow"
    return "orange1"


def _format_score(value: float) -> str:
    return "n/a" if value < 0 else f"{value:.3f}"


def _display_results(result: NetScoreResult):
    """Display results in a formatted way."""
    table = Table(title=result.repo or result.url)
    table.add_column("Metric", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Latency", justify="right", style="magenta")

    for name, metric in result.components.items():
        style = _score_style(metric.score)
        table.add_row(name, f"[{style}]{_format_score(metric.score)}[/{style}]", f"{metric.latency:.2f}s")

    table.add_section()
    style = _score_style(result.net_score)
    table.add_row(
        "[bold]Net Score[/bold]",
        f"[bold {style}]{_format_score(result.net_score)}[/bold {style}]",
        f"{result.latency:.2f}s",
    )
    console.print(table)

    for warning in result.warnings:
        console.print(f"[yellow]{warning}[/yellow]")


@app.command()
def install():
    """Install repometer and its dependencies into the current environment."""
    console.print("Installing dependencies...")
    completed = subprocess.run([sys.executable, "-m", "pip", "install", "-e", "."])
    if completed.returncode != 0:
        err_console.print("[red]Installation failed[/red]")
    raise typer.Exit(completed.returncode)


@app.command(context_settings={"allow_extra_args": True, "ignore_unknown_options": True})
def test(ctx: typer.Context):
    """Run the test suite (extra arguments are passed to pytest)."""
    console.print("Running tests...")
    completed = subprocess.run([sys.executable, "-m", "pytest", *ctx.args])
    raise typer.Exit(completed.returncode)


def run():
    """Console entry point: a bare URL file path means `score URL_FILE`."""
    args = sys.argv[1:]
    if not args:
        err_console.print(USAGE)
        raise SystemExit(1)

    first = args[0]
    if first not in COMMANDS and not first.startswith("-"):
        if not Path(first).is_file():
            err_console.print(f"Unknown command or file not found: {first}")
            err_console.print(USAGE)
            raise SystemExit(1)
        args = ["score", *args]

    app(args=args, prog_name="repometer")


if __name__ == "__main__":
    run()
