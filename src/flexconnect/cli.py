"""Diagnostic CLI for flexconnect.

Commands:
- connectors: Resolve and list the configured connector set
- url: Build a request url from its parts
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

import typer
from typer import Typer

from flexconnect.config import config
from flexconnect.connectors import (
    APPLY_CONNECTOR_NAMESPACE,
    WRITE_CONNECTOR_NAMESPACE,
    ConfigurationError,
    ConnectorResolver,
    ResolutionError,
    build_url,
)

app = Typer(
    name="flexconnect",
    help="Inspect flexibility connector configuration.",
)


@app.callback()
def init_app(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Log level (default: FLEX_LOG_LEVEL or INFO)",
    ),
):
    """Configure logging for all commands."""
    logging.basicConfig(
        level=(log_level or config.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command(name="connectors")
def list_connectors(
    write: bool = typer.Option(False, "--write", help="Resolve the write namespace"),
    static: bool = typer.Option(
        True, "--static/--no-static", help="Include the static file connector (apply only)"
    ),
):
    """Resolve the configured connectors and list them in order.

    Examples:
        flexconnect connectors
        flexconnect connectors --write
    """
    namespace = WRITE_CONNECTOR_NAMESPACE if write else APPLY_CONNECTOR_NAMESPACE
    resolver = ConnectorResolver.from_config(config)
    # Nothing is written through static files
    include_static = static and not write

    try:
        connectors = asyncio.run(resolver.resolve(namespace, include_static))
    except ResolutionError as e:
        typer.echo(f"❌ Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Namespace: {namespace}")
    for index, connector in enumerate(connectors, start=1):
        module = type(connector.connector_module).__name__
        layers = ", ".join(connector.layers or []) or "-"
        typer.echo(f"{index}. {connector.connector} [{layers}] ({module})")
        if connector.url:
            typer.echo(f"   url: {connector.url}")


@app.command(name="url")
def show_url(
    route: str = typer.Argument(..., help="Route suffix, e.g. /flex/data/"),
    base: str = typer.Option("", "--base", "-b", help="Connector url"),
    reference: Optional[str] = typer.Option(None, "--reference", "-r", help="Flex reference"),
    cache_key: Optional[str] = typer.Option(None, "--cache-key", "-c", help="Cache buster token"),
    params: Optional[List[str]] = typer.Option(
        None, "--param", "-p", help="Query parameter as key=value (repeatable)"
    ),
):
    """Print the request url built from the given parts.

    Examples:
        flexconnect url /flex/data/ --base /sap/bc/lrep -r my.app.Component -c abc
    """
    parameters = {}
    for param in params or []:
        key, sep, value = param.partition("=")
        if not sep:
            typer.echo(f"❌ Error: parameter must be key=value: {param}", err=True)
            raise typer.Exit(1)
        parameters[key] = value

    try:
        url = build_url(
            route,
            {"url": base, "reference": reference, "cache_key": cache_key},
            parameters,
        )
    except ConfigurationError as e:
        typer.echo(f"❌ Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(url)
