"""Rich display helpers for CLI output."""

import json
from typing import Any

from rich.console import Console
from rich.json import JSON
from rich.panel import Panel
from rich.table import Table

from partygen.content.kinds import KindSpec


# Shared console instance
console = Console()

SOURCE_STYLES = {
    "cache": "cyan",
    "fresh": "green",
    "fallback": "yellow",
}


def display_error(message: str) -> None:
    """Display error message.

    Args:
        message: Error message.
    """
    console.print(f"[bold red]Error:[/bold red] {message}")


def display_info(message: str) -> None:
    """Display info message.

    Args:
        message: Info message.
    """
    console.print(f"[dim]{message}[/dim]")


def display_kinds(specs: list[KindSpec]) -> None:
    """Display the content kind catalogue.

    Args:
        specs: Kind specs to list.
    """
    table = Table(title="Content Kinds")
    table.add_column("Kind", style="cyan")
    table.add_column("Name", style="white")
    table.add_column("Parameters", style="green")
    table.add_column("Caching", style="yellow")

    for spec in specs:
        params = ", ".join(spec.parameters_model.model_fields) or "-"
        caching = "per round" if spec.varies_per_round else "cached"
        table.add_row(spec.kind.value, spec.title, params, caching)

    console.print(table)


def display_payload(kind: str, data: dict[str, Any], source: str, attempts: int) -> None:
    """Display an acquired payload in a panel.

    Args:
        kind: Content kind value.
        data: Payload as JSON-compatible data.
        source: Where it came from (cache, fresh, fallback).
        attempts: Backend attempts made.
    """
    style = SOURCE_STYLES.get(source, "white")
    title = f"[bold]{kind}[/bold] [{style}]{source}[/{style}] [dim]attempts={attempts}[/dim]"
    console.print(Panel(JSON(json.dumps(data, ensure_ascii=False)), title=title, border_style=style))


def display_metrics(metrics: dict[str, Any]) -> None:
    """Display pipeline counters.

    Args:
        metrics: Output of PipelineMetrics.to_dict().
    """
    table = Table(title="Pipeline Metrics", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    for key, value in metrics.items():
        table.add_row(key, str(value))
    console.print(table)
