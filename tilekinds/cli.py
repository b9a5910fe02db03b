"""
tilekinds CLI.

Command-line interface for classifying GeoJSON features and inspecting the
per-zoom merge tables.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from shapely.geometry import shape

from .core.config import settings
from .features.source import OsmRelation, RelationMember, SimpleFeature
from .lod.merge import params_table
from .profile import Profile
from .utils.logging_config import ensure_logging

app = typer.Typer(
    name="tilekinds",
    help="tilekinds - classify map features into basemap kinds",
    add_completion=False,
)
console = Console()

# GeoJSON properties that are not tags
RELATIONS_PROPERTY = "@relations"
ID_PROPERTY = "@id"
OSM_TYPE_PROPERTY = "@osm_type"


def load_features(
    path: Path,
    profile: Profile,
    source: str,
    source_layer: Optional[str],
) -> list[SimpleFeature]:
    """
    Read a GeoJSON FeatureCollection (lon/lat) into source features.

    OSM relations a feature belongs to can be listed under `@relations` as
    {"id": ..., "tags": {...}}; they are preprocessed with the profile.
    """
    with open(path, "r") as f:
        data = json.load(f)

    features = []
    for position, item in enumerate(data.get("features", [])):
        properties: dict[str, Any] = dict(item.get("properties") or {})
        relations = properties.pop(RELATIONS_PROPERTY, None) or []
        feature_id = int(properties.pop(ID_PROPERTY, item.get("id", position)))
        osm_type = properties.pop(OSM_TYPE_PROPERTY, None)

        members = []
        for relation in relations:
            records = profile.preprocess_osm_relation(
                OsmRelation(id=int(relation.get("id", 0)), tags=relation.get("tags", {}))
            )
            members.extend(RelationMember(role="", relation=r) for r in records)

        geometry = shape(item["geometry"]) if item.get("geometry") else None
        tags = {k: v for k, v in properties.items() if v is not None}
        if geometry is None:
            features.append(SimpleFeature(
                None, tags, source=source, source_layer=source_layer,
                id=feature_id, relations=members, osm_type=osm_type,
            ))
        else:
            features.append(SimpleFeature.from_lonlat(
                geometry, tags, source=source, source_layer=source_layer,
                id=feature_id, relations=members, osm_type=osm_type,
            ))
    return features


@app.command()
def classify(
    input_file: Path = typer.Argument(..., exists=True, help="GeoJSON FeatureCollection"),
    source: str = typer.Option("osm", "--source", "-s", help="Source dataset: osm, ne, osm_water, osm_land"),
    source_layer: Optional[str] = typer.Option(
        None, "--source-layer", "-l", help="Source layer, e.g. ne_50m_admin_0_countries"
    ),
    workers: int = typer.Option(1, "--workers", "-w", help="Worker threads"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write JSON log lines here"),
):
    """
    Classify every feature of a GeoJSON file and list what would be emitted.
    """
    ensure_logging("DEBUG" if verbose else None, log_file)
    profile = Profile()
    features = load_features(input_file, profile, source, source_layer)
    results = profile.classify_all(features, max_workers=workers)

    if as_json:
        payload = [
            {"source_id": sf.id, "emitted": [f.to_dict() for f in emitted]}
            for sf, emitted in zip(features, results)
        ]
        typer.echo(json.dumps(payload, indent=2, default=str))
        return

    console.print(Panel.fit(
        f"[bold blue]{input_file.name}[/bold blue]\n"
        f"source={source} layer={source_layer or '-'} features={len(features)}",
        border_style="blue"
    ))

    table = Table(title="Emitted features")
    table.add_column("Source id", style="cyan")
    table.add_column("Layer")
    table.add_column("Geometry")
    table.add_column("Kind", style="green")
    table.add_column("Zoom")
    table.add_column("Attributes", style="dim")

    emitted_count = 0
    for sf, emitted in zip(features, results):
        for f in emitted:
            attrs = f.attributes
            kind = attrs.pop("kind", "")
            table.add_row(
                str(sf.id),
                f.layer,
                f.geometry_type,
                str(kind),
                f"{f.min_zoom}-{f.max_zoom}",
                ", ".join(f"{k}={v}" for k, v in attrs.items()),
            )
            emitted_count += 1

    console.print(table)
    console.print(f"[green]{emitted_count} output features from {len(features)} inputs[/green]")


@app.command("merge-params")
def merge_params(
    layer: str = typer.Argument(..., help="Layer name: admin_areas, water, earth"),
    max_zoom: Optional[int] = typer.Option(None, "--max-zoom", help="Last zoom to list"),
):
    """
    Show the per-zoom merge parameters a layer hands to the tile assembler.
    """
    profile = Profile()
    try:
        policy = profile.layer(layer).merge_policy
    except KeyError as e:
        console.print(f"[red]{escape(e.args[0])}[/red]")
        raise typer.Exit(code=1)

    table = Table(title=f"{layer} merge parameters")
    for column in ("Zoom", "Tolerance", "Min area", "Buffer", "Merge dist", "Simplify"):
        table.add_column(column)

    last_zoom = settings.max_zoom if max_zoom is None else max_zoom
    for zoom, params in params_table(policy, last_zoom):
        table.add_row(str(zoom), *(f"{value:g}" for value in params))

    console.print(table)


@app.command()
def version():
    """Show version information."""
    from . import __version__
    console.print(f"tilekinds v{__version__}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
