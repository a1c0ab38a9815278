"""Commands listing and cleaning up namespaced resources."""

from __future__ import annotations

from datetime import UTC, datetime
from itertools import islice
from typing import Annotated, Any

import structlog
import typer
from kubernetes.client import V1DeleteOptions
from rich.table import Table

from kube_facade.cli.commands.base import (
    FieldSelectorOption,
    LabelSelectorOption,
    NamespaceOption,
    build_query,
    console,
    get_facade,
    handle_k8s_error,
    resolve_kind,
)
from kube_facade.integrations.kubernetes.exceptions import KubernetesError
from kube_facade.services.kubernetes.facade import DEFAULT_WAIT_TIMEOUT
from kube_facade.services.kubernetes.router import RESOURCE_KINDS, kind_name

logger = structlog.get_logger()

KIND_CHOICES = ", ".join(kind.plural for kind in RESOURCE_KINDS)


def _age(timestamp: datetime | None) -> str:
    """Format the time since a creation timestamp like kubectl does."""
    if timestamp is None:
        return "-"
    seconds = int((datetime.now(UTC) - timestamp).total_seconds())
    if seconds < 120:
        return f"{max(seconds, 0)}s"
    if seconds < 2 * 3600:
        return f"{seconds // 60}m"
    if seconds < 2 * 86400:
        return f"{seconds // 3600}h"
    return f"{seconds // 86400}d"


def _labels(resource: Any) -> str:
    labels = resource.metadata.labels or {}
    return ",".join(f"{key}={value}" for key, value in sorted(labels.items())) or "-"


def list_resources(
    kind: Annotated[str, typer.Argument(help=f"Resource kind ({KIND_CHOICES})")],
    label_selector: LabelSelectorOption = None,
    field_selector: FieldSelectorOption = None,
    namespace: NamespaceOption = None,
    limit: Annotated[
        int | None,
        typer.Option("--limit", min=1, help="Page size used while listing (default: 100)"),
    ] = None,
    max_items: Annotated[
        int | None,
        typer.Option("--max-items", min=1, help="Stop after this many resources"),
    ] = None,
) -> None:
    """List resources of one kind, following pagination.

    Examples:
        kube-facade list pods
        kube-facade list secrets -l app=my-app --limit 20
    """
    model = resolve_kind(kind)
    query = build_query(label_selector, field_selector)
    if limit:
        query["limit"] = limit

    facade = get_facade(namespace)
    logger.debug("listing_kind", kind=kind_name(model), query=query)

    table = Table(title=f"{kind_name(model)} resources")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Labels", style="dim")
    table.add_column("Age", justify="right")

    count = 0
    try:
        for resource in islice(facade.list_matching(model, query), max_items):
            table.add_row(
                resource.metadata.name,
                _labels(resource),
                _age(resource.metadata.creation_timestamp),
            )
            count += 1
    except KubernetesError as e:
        handle_k8s_error(e)

    if count == 0:
        console.print(f"[yellow]No {kind.lower()} found[/yellow]")
        return

    console.print(table)
    console.print(f"\n[dim]{count} resource(s)[/dim]")


def cleanup(
    label_selector: Annotated[
        str,
        typer.Option(
            "--selector",
            "-l",
            help="Label selector of the resources to delete (e.g., 'app=my-app')",
        ),
    ],
    kinds: Annotated[
        list[str] | None,
        typer.Option(
            "--kind",
            "-k",
            help=f"Only delete these kinds; repeatable ({KIND_CHOICES})",
        ),
    ] = None,
    namespace: NamespaceOption = None,
    wait: Annotated[
        bool,
        typer.Option("--wait/--no-wait", help="Wait until the resources are gone"),
    ] = True,
    timeout: Annotated[
        float,
        typer.Option("--timeout", min=0, help="Seconds to wait for deletion"),
    ] = DEFAULT_WAIT_TIMEOUT,
    grace_period: Annotated[
        int | None,
        typer.Option("--grace-period", min=0, help="Deletion grace period in seconds"),
    ] = None,
) -> None:
    """Delete every resource matching a label selector.

    All selected kinds are attempted even when one of them fails; the
    command then exits with an error.

    Examples:
        kube-facade cleanup -l app=my-app
        kube-facade cleanup -l app=my-app -k pods -k secrets --timeout 60
    """
    models = [resolve_kind(kind) for kind in kinds] if kinds else None
    query = build_query(label_selector)
    delete_options = (
        V1DeleteOptions(grace_period_seconds=grace_period) if grace_period is not None else None
    )

    facade = get_facade(namespace)
    targets = [model for model in facade.kinds if models is None or model in models]

    try:
        facade.delete_all_matching(delete_options, query, kinds=targets)
        console.print(
            f"[green]Requested deletion of resources matching '{label_selector}'[/green] "
            f"({', '.join(kind_name(model) for model in targets)})"
        )

        if not wait:
            return

        remaining = [
            resource for model in targets for resource in facade.list_matching(model, query)
        ]
        if remaining:
            with console.status(f"Waiting for {len(remaining)} resource(s) to be deleted..."):
                facade.wait_while_exists(remaining, timeout=timeout)
    except KubernetesError as e:
        handle_k8s_error(e)

    console.print("[green]All matching resources are gone[/green]")
