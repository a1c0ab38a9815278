"""Main CLI entry point using Typer."""

from __future__ import annotations

import typer
from rich.console import Console

from kube_facade import __version__
from kube_facade.cli.commands import resources
from kube_facade.logging.config import configure_logging

app = typer.Typer(
    name="kube-facade",
    help="Inspect and clean up namespaced Kubernetes resources.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"kube-facade version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug mode.",
    ),
) -> None:
    """kube-facade - typed access to the resources of one namespace.

    Connection settings are read from K8S_HOST, K8S_TOKEN, K8S_CA_CERT_PATH
    and K8S_NAMESPACE.
    """
    configure_logging(verbose=verbose, debug=debug)


app.command("list")(resources.list_resources)
app.command("cleanup")(resources.cleanup)


if __name__ == "__main__":
    app()
