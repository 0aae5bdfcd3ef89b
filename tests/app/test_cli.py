from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from app.cli import app
from tests.helpers.layout_fixtures import (
    layout_payload,
    make_item,
    make_rack,
    steel_brackets_layout,
    write_json,
    zone_ring,
)

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def steel_layout_path(tmp_path: Path) -> Path:
    return write_json(tmp_path / "layout.json", layout_payload(steel_brackets_layout()))


@pytest.fixture
def steel_catalog_path(tmp_path: Path) -> Path:
    return write_json(
        tmp_path / "catalog.json",
        {
            "locations": [
                {"location_id": "LOC-007", "sku_name": "Steel Brackets"},
                {"location_id": "LOC-011", "sku_name": "Copper Pipe"},
            ]
        },
    )


def test_connections_lists_touching_pairs(tmp_path: Path) -> None:
    path = write_json(tmp_path / "ring.json", layout_payload(zone_ring()))

    result = runner.invoke(app, ["connections", str(path)])

    assert result.exit_code == 0, result.output
    assert "Connections" in result.output
    assert "nw" in result.output


def test_connections_reports_empty_layout(steel_layout_path: Path) -> None:
    result = runner.invoke(app, ["connections", str(steel_layout_path)])

    assert result.exit_code == 0, result.output
    assert "No touching components found" in result.output


def test_closed_detects_ring(tmp_path: Path) -> None:
    path = write_json(tmp_path / "ring.json", layout_payload(zone_ring()))

    result = runner.invoke(app, ["closed", str(path), "--strict"])

    assert result.exit_code == 0, result.output
    assert "Closed shape detected" in result.output


def test_shape_prints_svg_path() -> None:
    result = runner.invoke(app, ["shape", "shape_rectangle", "10", "20"])

    assert result.exit_code == 0, result.output
    assert "M 0 0 L 10 0 L 10 20 L 0 20 Z" in result.output


@pytest.fixture
def zone_layout_path(tmp_path: Path) -> Path:
    items = [
        make_item("storage_zone", id="zone", isContainer=True, width=100, height=80),
        make_item("storage_zone", id="padded", isContainer=True, containerPadding=20, x=200),
        make_item("storage_unit", id="su", x=400),
    ]
    return write_json(tmp_path / "zones.json", layout_payload(items))


def test_outline_uses_configured_container_padding(
    tmp_path: Path,
    zone_layout_path: Path,
) -> None:
    config_path = tmp_path / "layout.yaml"
    config_path.write_text("layout:\n  container_padding: 5\n", encoding="utf-8")

    configured = runner.invoke(
        app, ["--config", str(config_path), "outline", str(zone_layout_path), "zone"]
    )
    default = runner.invoke(app, ["outline", str(zone_layout_path), "zone"])

    assert configured.exit_code == 0, configured.output
    assert "M 5 5 L 95 5 L 95 75 L 5 75 Z" in configured.output
    assert default.exit_code == 0, default.output
    assert "M 10 10 L 90 10 L 90 70 L 10 70 Z" in default.output


def test_outline_prefers_item_padding(tmp_path: Path, zone_layout_path: Path) -> None:
    config_path = tmp_path / "layout.yaml"
    config_path.write_text("layout:\n  container_padding: 5\n", encoding="utf-8")

    result = runner.invoke(
        app, ["--config", str(config_path), "outline", str(zone_layout_path), "padded"]
    )

    assert result.exit_code == 0, result.output
    assert "M 220 20 L 240 20 L 240 40 L 220 40 Z" in result.output


def test_outline_rejects_unknown_item(zone_layout_path: Path) -> None:
    result = runner.invoke(app, ["outline", str(zone_layout_path), "missing"])

    assert result.exit_code == 1
    assert "Item not found" in result.output


def test_outline_rejects_non_container(zone_layout_path: Path) -> None:
    result = runner.invoke(app, ["outline", str(zone_layout_path), "su"])

    assert result.exit_code == 1
    assert "Item is not a container" in result.output


def test_boundary_reports_growth(tmp_path: Path) -> None:
    floor = make_item(
        "square_boundary", id="floor", isContainer=True, containerLevel=1, width=600, height=400
    )
    path = write_json(tmp_path / "floor.json", layout_payload([floor, make_rack("r", x=550)]))

    result = runner.invoke(app, ["boundary", str(path)])

    assert result.exit_code == 0, result.output
    assert "Required boundary: 720 x 400" in result.output
    assert "Floor plan needs to grow" in result.output
    assert "Outside boundary:" in result.output


def test_index_prints_json(steel_layout_path: Path, steel_catalog_path: Path) -> None:
    result = runner.invoke(
        app,
        ["index", str(steel_layout_path), "--catalog", str(steel_catalog_path), "--json"],
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert "Steel Brackets" in payload["skus"]
    assert "LOC-007" in payload["location_tags"]


def test_query_writes_highlights(
    tmp_path: Path,
    steel_layout_path: Path,
    steel_catalog_path: Path,
) -> None:
    output = tmp_path / "out" / "highlight.json"

    result = runner.invoke(
        app,
        [
            "query",
            str(steel_layout_path),
            "--sku",
            "Steel Brackets",
            "--catalog",
            str(steel_catalog_path),
            "--output",
            str(output),
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Rack A" in result.output
    payload = json.loads(output.read_text(encoding="utf-8"))
    assert payload["highlight"]["item_keys"] == ["A"]


def test_query_without_filters(steel_layout_path: Path) -> None:
    result = runner.invoke(app, ["query", str(steel_layout_path)])

    assert result.exit_code == 0, result.output
    assert "No filters selected" in result.output
    assert "No matching components" in result.output


def test_search_prints_reasons(steel_layout_path: Path) -> None:
    result = runner.invoke(app, ["search", str(steel_layout_path), "Rack"])

    assert result.exit_code == 0, result.output
    assert "Name match" in result.output


def test_search_rejects_unknown_scope(steel_layout_path: Path) -> None:
    result = runner.invoke(app, ["search", str(steel_layout_path), "Rack", "--scope", "bins"])

    assert result.exit_code == 1
    assert "Unknown search scope" in result.output


def test_labels_and_summary(steel_layout_path: Path) -> None:
    labels = runner.invoke(app, ["labels", str(steel_layout_path)])
    summary = runner.invoke(app, ["summary", str(steel_layout_path)])

    assert labels.exit_code == 0, labels.output
    assert "su-1" in labels.output
    assert summary.exit_code == 0, summary.output
    assert "Rack A" in summary.output


def test_validate_label_exit_codes() -> None:
    valid = runner.invoke(app, ["validate-label", "bin-1"])
    invalid = runner.invoke(app, ["validate-label", "bad label!"])

    assert valid.exit_code == 0, valid.output
    assert "Valid label: BIN-1" in valid.output
    assert invalid.exit_code == 1
    assert "Invalid label" in invalid.output


def test_missing_layout_file_fails(tmp_path: Path) -> None:
    result = runner.invoke(app, ["summary", str(tmp_path / "missing.json")])

    assert result.exit_code == 1
    assert "File not found" in result.output


def test_invalid_layout_json_fails(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    result = runner.invoke(app, ["summary", str(path)])

    assert result.exit_code == 1
    assert "Invalid layout" in result.output


def test_missing_config_file_fails(tmp_path: Path) -> None:
    result = runner.invoke(
        app, ["--config", str(tmp_path / "missing.yaml"), "shape", "shape_circle", "1", "1"]
    )

    assert result.exit_code == 1
    assert "Config file not found" in result.output
