"""Typer CLI entrypoint."""

from __future__ import annotations

import logging

import typer

from batctl.core.config import load_settings
from batctl.core.errors import BatctlError
from batctl.transports.unix_http import UnixHTTPClient

app = typer.Typer(help="Talk to the batctl daemon over its Unix domain socket")

_SOCKET_HELP = "Daemon socket path (overrides config and BATCTL_SOCKET)"
_VERBOSE_HELP = "Trace requests and responses"


def _build_client(socket: str | None, verbose: bool) -> UnixHTTPClient:
    settings = load_settings()
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level, logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    return UnixHTTPClient(socket or settings.socket_path, timeout_s=settings.timeout_s)


def _run(method: str, path: str, data: str, socket: str | None, verbose: bool) -> None:
    try:
        client = _build_client(socket, verbose)
        body = client.send(method, path, data)
    except BatctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None
    if body:
        typer.echo(body.decode("utf-8", errors="replace"))


@app.command("get")
def get(
    path: str,
    socket: str | None = typer.Option(None, "--socket", help=_SOCKET_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help=_VERBOSE_HELP),
) -> None:
    """Query a daemon resource and print the response body."""
    _run("GET", path, "", socket, verbose)


@app.command("post")
def post(
    path: str,
    data: str = typer.Argument(""),
    socket: str | None = typer.Option(None, "--socket", help=_SOCKET_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help=_VERBOSE_HELP),
) -> None:
    """Send DATA to a daemon resource with POST."""
    _run("POST", path, data, socket, verbose)


@app.command("put")
def put(
    path: str,
    data: str = typer.Argument(""),
    socket: str | None = typer.Option(None, "--socket", help=_SOCKET_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help=_VERBOSE_HELP),
) -> None:
    """Send DATA to a daemon resource with PUT, e.g. `batctl put /charging 0`."""
    _run("PUT", path, data, socket, verbose)


@app.command("delete")
def delete(
    path: str,
    socket: str | None = typer.Option(None, "--socket", help=_SOCKET_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help=_VERBOSE_HELP),
) -> None:
    """Delete a daemon resource."""
    _run("DELETE", path, "", socket, verbose)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
