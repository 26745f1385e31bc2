"""Karma CLI: serve the webhook endpoint and dry-run commands."""

from __future__ import annotations

import json
import logging
import sys

import click
from rich.console import Console
from rich.markup import escape

from karma.command import parse
from karma.config import DEFAULT_HOST, DEFAULT_PORT, DEFAULT_STORAGE, DEFAULT_TRIGGER, KarmaConfig
from karma.errors import ParseError
from karma.registry import default_registry

_console = Console(highlight=False)
_err_console = Console(stderr=True, highlight=False)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group(invoke_without_command=True)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Karma chat-driven counters."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ---------------------------------------------------------------------------
# version
# ---------------------------------------------------------------------------


@cli.command()
def version() -> None:
    """Show the installed karma version."""
    from karma import __version__

    click.echo(f"karma {__version__}")


# ---------------------------------------------------------------------------
# backends
# ---------------------------------------------------------------------------


@cli.command()
def backends() -> None:
    """List the storage backends that can be selected with --storage."""
    for name in default_registry().names():
        _console.print(f"  {escape(name)}")


# ---------------------------------------------------------------------------
# parse
# ---------------------------------------------------------------------------


@cli.command("parse")
@click.argument("text")
@click.option("--strict", is_flag=True, help="Reject malformed '+=' / '-=' amounts.")
@click.option("--json", "as_json", is_flag=True, help="Print the parsed command as JSON.")
def parse_command(text: str, strict: bool, as_json: bool) -> None:
    """Dry-run the command parser on TEXT (e.g. "karma alice+=3")."""
    try:
        command = parse(text, strict=strict)
    except ParseError as e:
        if as_json:
            click.echo(json.dumps({"error": type(e).__name__, "message": str(e)}))
        else:
            _err_console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)

    op = command.operation
    if as_json:
        click.echo(
            json.dumps(
                {
                    "key": command.key,
                    "operation": op.kind.value,
                    "amount": op.amount,
                    "noop": op.is_noop,
                }
            )
        )
        return

    _console.print(f"[bold]Key:[/bold] {escape(command.key)}")
    _console.print(f"[bold]Operation:[/bold] {op.kind.value}")
    _console.print(f"[bold]Amount:[/bold] {op.amount}")
    if op.is_noop:
        _console.print("[yellow]  No-op amount, treated as a query.[/yellow]")


# ---------------------------------------------------------------------------
# serve
# ---------------------------------------------------------------------------


@cli.command()
@click.option("--token", envvar="KARMA_TOKEN", default="", show_envvar=True, help="Token requests must carry.")
@click.option("--trigger", envvar="KARMA_TRIGGER", default=DEFAULT_TRIGGER, show_envvar=True, help="Trigger word.")
@click.option("--storage", envvar="KARMA_STORAGE", default=DEFAULT_STORAGE, show_envvar=True, help="Storage backend.")
@click.option("--host", default=DEFAULT_HOST, help="Interface to bind.")
@click.option("--port", default=DEFAULT_PORT, type=int, help="Port to bind.")
@click.option("--strict", envvar="KARMA_STRICT", is_flag=True, help="Reject malformed '+=' / '-=' amounts.")
@click.option("--otel", envvar="KARMA_OTEL", is_flag=True, help="Export traces over OTLP (needs karma[otel]).")
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Logging level.",
)
def serve(
    token: str,
    trigger: str,
    storage: str,
    host: str,
    port: int,
    strict: bool,
    otel: bool,
    log_level: str,
) -> None:
    """Serve the webhook endpoint."""
    from karma.server import run

    logging.basicConfig(level=log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    registry = default_registry()
    if storage not in registry:
        _err_console.print(
            f"[red]Unknown storage backend {escape(storage)!r}. "
            f"Available: {escape(', '.join(registry.names()))}[/red]"
        )
        sys.exit(1)

    if otel:
        from karma.otel import configure_otel

        configure_otel(service_name="karma")

    config = KarmaConfig(token=token, trigger=trigger, storage=storage, host=host, port=port, strict_amounts=strict)
    run(config, registry)
