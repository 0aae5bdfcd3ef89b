from __future__ import annotations

from domain.models import Rect
from domain.services.geometry import (
    bounds,
    container_bounds,
    find_enclosing_container,
    is_point_inside_container,
)
from tests.helpers.layout_fixtures import make_item


def test_bounds_reports_edges_and_center() -> None:
    item = make_item("storage_zone", x=10, y=20, width=100, height=50)

    result = bounds(item)

    assert (result.left, result.right, result.top, result.bottom) == (10, 110, 20, 70)
    assert (result.center_x, result.center_y) == (60, 45)
    assert (result.width, result.height) == (100, 50)


def test_container_bounds_default_padding() -> None:
    container = make_item("storage_zone", isContainer=True, width=100, height=80)

    assert container_bounds(container) == Rect(x=10, y=10, width=80, height=60)


def test_container_bounds_uses_item_padding_and_override() -> None:
    container = make_item(
        "storage_zone", isContainer=True, width=100, height=80, containerPadding=5
    )

    assert container_bounds(container) == Rect(x=5, y=5, width=90, height=70)
    assert container_bounds(container, padding=0) == Rect(x=0, y=0, width=100, height=80)


def test_container_bounds_for_plain_item_is_none() -> None:
    assert container_bounds(make_item("storage_unit")) is None


def test_point_inside_container_includes_edges() -> None:
    container = make_item("storage_zone", isContainer=True, width=100, height=100)

    assert is_point_inside_container(10, 10, container)
    assert is_point_inside_container(90, 90, container)
    assert not is_point_inside_container(9.5, 50, container)
    assert not is_point_inside_container(50, 50, make_item("storage_unit", width=100))


def test_find_enclosing_container_picks_deepest_level() -> None:
    floor = make_item(
        "square_boundary", id="floor", isContainer=True, containerLevel=1, width=1000, height=1000
    )
    zone = make_item(
        "solid_boundary",
        id="zone",
        isContainer=True,
        containerLevel=2,
        x=100,
        y=100,
        width=300,
        height=300,
    )
    unit = make_item("storage_unit", id="unit", x=150, y=150)
    items = [floor, zone, unit]

    enclosing_unit = find_enclosing_container(unit, items)
    enclosing_zone = find_enclosing_container(zone, items)

    assert enclosing_unit is not None and enclosing_unit.id == "zone"
    assert enclosing_zone is not None and enclosing_zone.id == "floor"
    assert find_enclosing_container(floor, items) is None
