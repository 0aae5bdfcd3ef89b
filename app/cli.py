from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from adapters.filesystem.catalog_repository import (
    CatalogSnapshotError,
    FileSystemLocationCatalogRepository,
)
from adapters.filesystem.highlight_repository import FileSystemHighlightRepository
from adapters.filesystem.layout_repository import FileSystemLayoutRepository, LayoutSnapshotError
from app.config import AppSettings, load_settings
from domain.component_types import STORAGE_UNIT, component_color
from domain.models import LayoutItem
from domain.services.boundary import (
    find_floor_plan,
    items_outside_boundary,
    required_boundary_size,
)
from domain.services.connections import detect_closed_shape, find_connected_pairs
from domain.services.geometry import resolve_padding
from domain.services.inventory_index import LocationSkuCatalog, build_inventory_index
from domain.services.inventory_query import (
    SEARCH_SCOPES,
    InventorySelection,
    query_layout,
    search_layout,
)
from domain.services.labeling import (
    apply_enhanced_labeling,
    get_contextual_label,
    has_auto_label,
    resolve_display_label,
    validate_storage_unit_label,
)
from domain.services.shape_paths import container_outline, generate_shape_path
from domain.services.storage_summary import summarize_storage_components

app = typer.Typer(no_args_is_help=True)
console = Console()
logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, "--config", help="YAML settings file."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    _configure_logging(verbose)
    try:
        ctx.obj = load_settings(config)
    except FileNotFoundError as exc:
        console.print(f"[red]{exc}[/]")
        raise typer.Exit(code=1) from exc


def _settings(ctx: typer.Context) -> AppSettings:
    if isinstance(ctx.obj, AppSettings):
        return ctx.obj
    return load_settings()


def _load_layout(path: Path) -> List[LayoutItem]:
    if not path.exists():
        console.print(f"[red]File not found:[/] {path}")
        raise typer.Exit(code=1)
    try:
        return FileSystemLayoutRepository().load(path)
    except LayoutSnapshotError as exc:
        logger.exception("Failed to load layout %s", path)
        console.print(f"[red]Invalid layout:[/] {exc}")
        raise typer.Exit(code=1) from exc


def _load_catalog(settings: AppSettings, catalog_path: Optional[Path]) -> LocationSkuCatalog:
    path = catalog_path or settings.inventory.catalog_path
    if path is None:
        return settings.inventory.build_catalog()
    if not path.exists():
        console.print(f"[red]File not found:[/] {path}")
        raise typer.Exit(code=1)
    try:
        entries = FileSystemLocationCatalogRepository().load(path)
    except CatalogSnapshotError as exc:
        logger.exception("Failed to load catalog %s", path)
        console.print(f"[red]Invalid catalog:[/] {exc}")
        raise typer.Exit(code=1) from exc
    return settings.inventory.build_catalog(entries)


@app.command("connections")
def connections(
    ctx: typer.Context,
    layout_path: Path = typer.Argument(..., help="Layout snapshot JSON."),
    tolerance: Optional[float] = typer.Option(None, help="Snap tolerance override."),
) -> None:
    settings = _settings(ctx)
    items = _load_layout(layout_path)
    snap = settings.layout.snap_tolerance if tolerance is None else tolerance
    pairs = find_connected_pairs(items, snap)
    if not pairs:
        console.print("[yellow]No touching components found[/]")
        return

    table = Table(title="Connections")
    table.add_column("Source")
    table.add_column("Target")
    table.add_column("Edge")
    table.add_column("Overlap", justify="right")
    for pair in pairs:
        for connection in pair.connections:
            table.add_row(
                pair.source_key,
                pair.target_key,
                connection.source_edge,
                f"{connection.overlap:g}",
            )
    console.print(table)


@app.command("closed")
def closed(
    ctx: typer.Context,
    layout_path: Path = typer.Argument(..., help="Layout snapshot JSON."),
    strict: bool = typer.Option(False, "--strict", help="Require a real connection cycle."),
) -> None:
    settings = _settings(ctx)
    items = _load_layout(layout_path)
    if detect_closed_shape(items, settings.layout.snap_tolerance, strict=strict):
        console.print("[green]Closed shape detected[/]")
    else:
        console.print("[yellow]Layout is open[/]")


@app.command("shape")
def shape(
    shape_type: str = typer.Argument(..., help="Shape type, e.g. shape_circle."),
    width: float = typer.Argument(..., help="Bounding box width."),
    height: float = typer.Argument(..., help="Bounding box height."),
    x: float = typer.Option(0.0, help="Bounding box origin x."),
    y: float = typer.Option(0.0, help="Bounding box origin y."),
    sides: int = typer.Option(6, help="Vertex count for shape_polygon."),
) -> None:
    path = generate_shape_path(shape_type, width, height, x, y, sides=sides)
    console.print(path.to_svg(), markup=False, highlight=False)


@app.command("outline")
def outline(
    ctx: typer.Context,
    layout_path: Path = typer.Argument(..., help="Layout snapshot JSON."),
    item_key: str = typer.Argument(..., help="Container id or derived key."),
) -> None:
    settings = _settings(ctx)
    items = _load_layout(layout_path)
    item = next((candidate for candidate in items if candidate.item_key() == item_key), None)
    if item is None:
        console.print(f"[red]Item not found:[/] {item_key}")
        raise typer.Exit(code=1)
    padding = resolve_padding(item, default=settings.layout.container_padding)
    path = container_outline(item, padding)
    if path is None:
        console.print(f"[red]Item is not a container:[/] {item_key}")
        raise typer.Exit(code=1)
    console.print(path.to_svg(), markup=False, highlight=False)


@app.command("boundary")
def boundary(
    ctx: typer.Context,
    layout_path: Path = typer.Argument(..., help="Layout snapshot JSON."),
) -> None:
    settings = _settings(ctx)
    items = _load_layout(layout_path)
    floor_plan = find_floor_plan(items)
    size = required_boundary_size(
        items,
        floor_plan,
        grid_size=settings.layout.boundary_grid_size,
        default_padding=settings.layout.boundary_padding,
    )
    console.print(f"Required boundary: {size.width:g} x {size.height:g}")
    if size.needs_resize:
        console.print("[yellow]Floor plan needs to grow[/]")
    for item in items_outside_boundary(items):
        console.print(f"[red]Outside boundary:[/] {item.item_key()}")


@app.command("index")
def index(
    ctx: typer.Context,
    layout_path: Path = typer.Argument(..., help="Layout snapshot JSON."),
    catalog_path: Optional[Path] = typer.Option(None, "--catalog", help="Location catalog JSON."),
    extra_asset: List[str] = typer.Option([], "--extra-asset", help="Additional asset id."),
    as_json: bool = typer.Option(False, "--json", help="Print the index as JSON."),
) -> None:
    settings = _settings(ctx)
    items = _load_layout(layout_path)
    catalog = _load_catalog(settings, catalog_path)
    extras = [*settings.inventory.extra_assets, *extra_asset]
    inventory_index = build_inventory_index(items, catalog, extras)
    if as_json:
        console.print_json(data=inventory_index.to_dict())
        return

    for title, values in (
        ("Location tags", inventory_index.location_tags),
        ("SKUs", inventory_index.skus),
        ("Assets", inventory_index.assets),
    ):
        table = Table(title=title)
        table.add_column("Value")
        for value in values:
            table.add_row(value)
        console.print(table)


@app.command("query")
def query(
    ctx: typer.Context,
    layout_path: Path = typer.Argument(..., help="Layout snapshot JSON."),
    location: Optional[str] = typer.Option(None, "--location", help="Location tag filter."),
    sku: Optional[str] = typer.Option(None, "--sku", help="SKU name filter."),
    asset: Optional[str] = typer.Option(None, "--asset", help="Asset type filter."),
    catalog_path: Optional[Path] = typer.Option(None, "--catalog", help="Location catalog JSON."),
    output: Optional[Path] = typer.Option(None, "--output", help="Write highlights as JSON."),
) -> None:
    settings = _settings(ctx)
    items = _load_layout(layout_path)
    catalog = _load_catalog(settings, catalog_path)
    selection = InventorySelection(location_tag=location, sku=sku, asset_type=asset)
    if selection.is_empty():
        console.print("[yellow]No filters selected[/]")

    outcome = query_layout(items, selection, catalog)
    if output is not None:
        FileSystemHighlightRepository().save(outcome, output)
        console.print(f"[green]Wrote[/] {output}")

    if not outcome.results:
        console.print("[yellow]No matching components[/]")
        return
    table = Table(title="Matches")
    table.add_column("Key")
    table.add_column("Title")
    table.add_column("Subtitle")
    table.add_column("Compartments")
    for result in outcome.results:
        table.add_row(
            result.item_key,
            result.title,
            result.subtitle,
            ", ".join(result.compartment_ids),
        )
    console.print(table)


@app.command("search")
def search(
    layout_path: Path = typer.Argument(..., help="Layout snapshot JSON."),
    term: str = typer.Argument(..., help="Free-text search term."),
    scope: str = typer.Option("all", help=f"One of: {', '.join(SEARCH_SCOPES)}."),
    limit: int = typer.Option(10, help="Maximum number of results."),
) -> None:
    items = _load_layout(layout_path)
    try:
        results = search_layout(items, term, scope, limit)
    except ValueError as exc:
        console.print(f"[red]{exc}[/]")
        raise typer.Exit(code=1) from exc
    if not results:
        console.print("[yellow]No results[/]")
        return
    for result in results:
        console.print(f"{result.item_key}: {result.title} ({result.subtitle}) - {result.reason}")


@app.command("labels")
def labels(layout_path: Path = typer.Argument(..., help="Layout snapshot JSON.")) -> None:
    items = apply_enhanced_labeling(_load_layout(layout_path))
    table = Table(title="Labels")
    table.add_column("Key")
    table.add_column("Type")
    table.add_column("Label")
    table.add_column("Color")
    for item in items:
        if has_auto_label(item.type):
            label = resolve_display_label(item)
        else:
            label = get_contextual_label(item)
        table.add_row(item.item_key(), item.type, label, component_color(item.type, item.category))
    console.print(table)


@app.command("validate-label")
def validate_label(
    ctx: typer.Context,
    label: str = typer.Argument(..., help="Custom label to validate."),
    component_type: str = typer.Option(STORAGE_UNIT, "--type", help="Component type."),
) -> None:
    settings = _settings(ctx)
    result = validate_storage_unit_label(
        label, component_type, max_length=settings.layout.label_max_length
    )
    if not result.is_valid:
        console.print(f"[red]Invalid label:[/] {result.error}")
        raise typer.Exit(code=1)
    console.print(f"[green]Valid label:[/] {result.formatted_label}")


@app.command("summary")
def summary(layout_path: Path = typer.Argument(..., help="Layout snapshot JSON.")) -> None:
    items = _load_layout(layout_path)
    summaries = summarize_storage_components(items)
    if not summaries:
        console.print("[yellow]No storage components[/]")
        return
    table = Table(title="Storage capacity")
    table.add_column("Type")
    table.add_column("Title")
    table.add_column("Location")
    table.add_column("Used", justify="right")
    table.add_column("Max", justify="right")
    for entry in summaries:
        table.add_row(
            entry.label,
            entry.title,
            entry.subtitle,
            f"{entry.used_capacity:g}",
            f"{entry.max_capacity:g}",
        )
    console.print(table)


if __name__ == "__main__":
    app()
