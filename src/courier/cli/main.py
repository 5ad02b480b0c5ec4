"""CLI entry point for courier.

``courier call`` issues one ad-hoc request through the typed client and
prints the decoded result; ``courier config`` shows the resolved settings.
"""

import asyncio
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from .. import __version__
from ..api_client import Endpoint, Failure, HttpMethod, Result, TypedApiClient
from ..core.config import ClientSettings, ConfigError, load_settings
from ..util.error import format_failure
from ..util.log import Log, LogFormat, LogLevel

app = typer.Typer(
    name="courier",
    help="courier - typed HTTP API client",
    no_args_is_help=True,
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        console.print(f"courier {__version__}")
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
    """courier - typed HTTP API client."""


def _settings(config: Optional[Path], base_url: Optional[str] = None) -> ClientSettings:
    try:
        settings = load_settings(config)
    except ConfigError as e:
        err_console.print(f"[red]{escape(str(e))}[/red]", soft_wrap=True)
        raise typer.Exit(2)
    if base_url:
        settings = settings.model_copy(update={"base_url": base_url})
        try:
            settings.transport()
        except ValidationError as e:
            raise typer.BadParameter(str(e), param_hint="--base-url")
    return settings


def _pairs(values: Optional[List[str]], sep: str, option: str) -> Dict[str, str]:
    result: Dict[str, str] = {}
    for item in values or []:
        key, found, value = item.partition(sep)
        if not found or not key.strip():
            raise typer.BadParameter(f"expected KEY{sep}VALUE, got {item!r}", param_hint=option)
        result[key.strip()] = value.strip()
    return result


async def _execute(
    settings: ClientSettings,
    endpoint: Endpoint[Any],
    payload: Any,
    query: Dict[str, str],
    headers: Dict[str, str],
) -> Result[Any]:
    async with TypedApiClient.from_settings(settings) as client:
        return await client.call(endpoint, payload, query=query, headers=headers)


@app.command()
def call(
    method: HttpMethod = typer.Argument(..., case_sensitive=False, help="HTTP method"),
    path: str = typer.Argument(..., help="Request path, relative to the base URL"),
    data: Optional[str] = typer.Option(None, "--data", "-d", help="JSON request body"),
    header: Optional[List[str]] = typer.Option(None, "--header", "-H", help="Extra header as KEY:VALUE"),
    query: Optional[List[str]] = typer.Option(None, "--query", "-q", help="Query parameter as KEY=VALUE"),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Override the configured base URL"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to a courier.json file"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Log to stderr at this level"),
):
    """Send one request and print the decoded JSON response."""
    settings = _settings(config, base_url)
    if log_level:
        Log.configure(
            level=LogLevel.parse(log_level),
            format=LogFormat.parse(settings.log_format),
            console=True,
            file=False,
        )

    payload: Any = None
    if data is not None:
        try:
            payload = json.loads(data)
        except ValueError as e:
            raise typer.BadParameter(f"invalid JSON: {e}", param_hint="--data")

    # Ad-hoc paths are literal; braces must not be read as template parameters.
    literal = path.replace("{", "%7B").replace("}", "%7D")
    try:
        endpoint: Endpoint[Any] = Endpoint(
            "cli",
            method,
            literal if literal.startswith("/") else f"/{literal}",
            response=Optional[Any],
            expects_body=payload is not None,
        )
    except ValueError as e:
        raise typer.BadParameter(str(e))

    result = asyncio.run(
        _execute(settings, endpoint, payload, _pairs(query, "=", "--query"), _pairs(header, ":", "--header"))
    )
    if isinstance(result, Failure):
        err_console.print(f"[red]{escape(format_failure(result))}[/red]", soft_wrap=True)
        raise typer.Exit(1)

    if result.value is None:
        console.print("[green]OK[/green] (no content)")
    else:
        console.print_json(json.dumps(result.value, ensure_ascii=False))


@app.command("config")
def show_config(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to a courier.json file"),
):
    """Print the resolved settings as JSON."""
    settings = _settings(config)
    typer.echo(json.dumps(settings.model_dump(mode="json"), indent=2))


if __name__ == "__main__":
    app()
