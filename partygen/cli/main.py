"""Developer CLI for the party content pipeline."""

import asyncio
import json
import logging
from typing import Optional

import typer
from rich.logging import RichHandler

from partygen.cli.display import (
    display_error,
    display_info,
    display_kinds,
    display_metrics,
    display_payload,
)
from partygen.content.fallback import FallbackProvider
from partygen.content.kinds import KIND_SPECS
from partygen.pipeline.exceptions import InvalidRequestError
from partygen.pipeline.request import ContentRequest
from partygen.pipeline.service import ContentPipeline

app = typer.Typer(
    name="partygen",
    help="Generate, cache and inspect party game content",
    add_completion=False,
)


def _parse_params(values: list[str] | None) -> dict[str, str]:
    """Parse repeated key=value options into a dict."""
    params: dict[str, str] = {}
    for item in values or []:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise typer.BadParameter(f"Expected key=value, got '{item}'")
        params[key.strip()] = value.strip()
    return params


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show pipeline logs"),
) -> None:
    """partygen - content pipeline for party games.

    Use 'partygen kinds' to see what can be generated.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
            force=True,
        )


@app.command()
def kinds() -> None:
    """List content kinds with their parameters and caching policy."""
    display_kinds(list(KIND_SPECS.values()))


@app.command()
def acquire(
    kind: str = typer.Argument(..., help="Content kind, e.g. trivia"),
    param: Optional[list[str]] = typer.Option(None, "--param", "-p", help="Parameter as key=value"),
    language: str = typer.Option("en", "--language", "-l", help="en or zh"),
    theme: str = typer.Option("default", "--theme", "-t", help="Party theme"),
    intensity: str = typer.Option("family", "--intensity", "-i", help="family, pg13 or spicy"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
    show_metrics: bool = typer.Option(False, "--metrics", help="Print pipeline counters"),
) -> None:
    """Acquire one item using the configured backend and cache."""
    params = _parse_params(param)
    settings = {"language": language, "theme": theme, "intensity": intensity}

    try:
        ContentRequest.build(kind, params, settings)
    except InvalidRequestError as e:
        display_error(str(e))
        raise typer.Exit(2)

    async def _run() -> tuple[dict, dict]:
        pipeline = ContentPipeline.from_settings()
        try:
            result = await pipeline.acquire(kind, params, settings)
        finally:
            await pipeline.aclose()
        return result.to_dict(), pipeline.metrics.to_dict()

    result, metrics = asyncio.run(_run())

    if not result["ok"]:
        display_error(f"No content available ({result['error_code']})")
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(result, ensure_ascii=False, indent=2))
    else:
        display_payload(kind, result["data"], result["source"], result["attempts"])
        if show_metrics:
            display_metrics(metrics)


@app.command()
def fallback(
    kind: str = typer.Argument(..., help="Content kind, e.g. impostor"),
    param: Optional[list[str]] = typer.Option(None, "--param", "-p", help="Parameter as key=value"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
) -> None:
    """Show the curated fallback for a kind. Never touches the network."""
    try:
        request = ContentRequest.build(kind, _parse_params(param))
    except InvalidRequestError as e:
        display_error(str(e))
        raise typer.Exit(2)

    data = FallbackProvider().fallback(request.kind, request.parameters).model_dump(mode="json")
    if as_json:
        typer.echo(json.dumps(data, ensure_ascii=False, indent=2))
    else:
        display_payload(request.kind.value, data, "fallback", 0)
        display_info("Curated content, English only")


if __name__ == "__main__":
    app()
