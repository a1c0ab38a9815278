"""Shared options, facade construction and error handling for CLI commands."""

from __future__ import annotations

from typing import Annotated, NoReturn

import typer
from pydantic import ValidationError
from rich.console import Console

from kube_facade.integrations.kubernetes.config import ClusterConnectionConfig
from kube_facade.integrations.kubernetes.exceptions import (
    KubernetesAuthError,
    KubernetesConfigurationError,
    KubernetesConnectionError,
    KubernetesError,
    KubernetesTimeoutError,
    ResourceNotFoundError,
)
from kube_facade.services.kubernetes import GenericClientFacadeFactory, KubernetesApiClientFacade
from kube_facade.services.kubernetes.router import kind_for_plural

# Shared console instance
console = Console()


# =============================================================================
# Common Typer Option Annotations
# =============================================================================

NamespaceOption = Annotated[
    str | None,
    typer.Option(
        "--namespace",
        "-n",
        help="Kubernetes namespace (defaults to K8S_NAMESPACE or 'default')",
    ),
]

LabelSelectorOption = Annotated[
    str | None,
    typer.Option(
        "--selector",
        "-l",
        help="Label selector (e.g., 'app=nginx,tier=frontend')",
    ),
]

FieldSelectorOption = Annotated[
    str | None,
    typer.Option(
        "--field-selector",
        help="Field selector (e.g., 'status.phase=Running')",
    ),
]


# =============================================================================
# Facade Construction
# =============================================================================


def get_facade(namespace: str | None = None) -> KubernetesApiClientFacade:
    """Build a facade from K8S_* environment variables.

    Args:
        namespace: Overrides the namespace from the environment.

    Raises:
        typer.Exit: If the connection settings are missing or invalid.
    """
    try:
        config = ClusterConnectionConfig.from_env()
    except ValidationError as e:
        console.print("[red]Error:[/red] Invalid connection settings")
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"])
            console.print(f"  - {field}: {error['msg']}")
        console.print("\n[dim]Hint: Set K8S_HOST, K8S_TOKEN and K8S_CA_CERT_PATH.[/dim]")
        raise typer.Exit(1) from None

    if namespace:
        config = config.model_copy(update={"namespace": namespace})

    try:
        return GenericClientFacadeFactory().create_from_config(config)
    except KubernetesError as e:
        handle_k8s_error(e)


def resolve_kind(plural: str) -> type:
    """Resolve a kind name given on the command line.

    Raises:
        typer.BadParameter: If the kind is not supported.
    """
    try:
        return kind_for_plural(plural)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from None


def build_query(
    label_selector: str | None = None,
    field_selector: str | None = None,
) -> dict[str, str | int]:
    """Build a list/delete query from selector options."""
    query: dict[str, str | int] = {}
    if label_selector:
        query["labelSelector"] = label_selector
    if field_selector:
        query["fieldSelector"] = field_selector
    return query


# =============================================================================
# Error Handling
# =============================================================================


def handle_k8s_error(error: KubernetesError) -> NoReturn:
    """Handle Kubernetes errors with user-friendly output.

    Args:
        error: The Kubernetes error to handle.

    Raises:
        typer.Exit: Always exits with code 1.
    """
    if isinstance(error, KubernetesConfigurationError):
        console.print("[red]Error:[/red] Invalid configuration")
        console.print(f"  {error.message}")

    elif isinstance(error, KubernetesConnectionError):
        console.print("[red]Error:[/red] Cannot connect to Kubernetes cluster")
        console.print(f"  {error.message}")
        if error.original_error:
            console.print(f"  Cause: {error.original_error}")
        console.print("\n[dim]Hint: Check that K8S_HOST is reachable from this machine.[/dim]")

    elif isinstance(error, KubernetesAuthError):
        console.print("[red]Error:[/red] Authentication/authorization failed")
        console.print(f"  {error.message}")
        console.print("\n[dim]Hint: Check K8S_TOKEN and the RBAC permissions behind it.[/dim]")

    elif isinstance(error, ResourceNotFoundError):
        console.print(f"[red]Error:[/red] {error.message}")

    elif isinstance(error, KubernetesTimeoutError):
        console.print("[red]Error:[/red] Operation timed out")
        console.print(f"  {error.message}")
        console.print("\n[dim]Hint: Try increasing the timeout with --timeout.[/dim]")

    else:
        console.print(f"[red]Error:[/red] {error.message}")
        if error.status_code:
            console.print(f"  HTTP Status: {error.status_code}")

    raise typer.Exit(1)
