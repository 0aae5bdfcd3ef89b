from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from domain.component_types import BOUNDARY_LEVEL
from domain.models import LayoutItem, Point

DEFAULT_BOUNDARY_PADDING = 20.0
DEFAULT_BOUNDARY_GRID_SIZE = 60.0
DEFAULT_FLOOR_PLAN_SIZE = (800.0, 500.0)
MIN_ITEM_DIMENSION = 15.0


@dataclass(frozen=True)
class BoundarySize:
    width: float
    height: float
    needs_resize: bool


@dataclass(frozen=True)
class PlacementCheck:
    position: Point
    is_valid: bool
    needs_boundary_expansion: bool = False


@dataclass(frozen=True)
class ResizeCheck:
    is_valid: bool
    width: float
    height: float
    needs_boundary_expansion: bool = False


def find_floor_plan(items: Sequence[LayoutItem]) -> LayoutItem | None:
    for item in items:
        if item.container_level == BOUNDARY_LEVEL and item.is_container:
            return item
    return None


def _boundary_padding(floor_plan: LayoutItem, default: float) -> float:
    return floor_plan.container_padding or default


def is_item_within_boundary(item: LayoutItem, floor_plan: LayoutItem | None) -> bool:
    if floor_plan is None:
        return True
    return (
        item.x >= floor_plan.x
        and item.y >= floor_plan.y
        and item.x + item.width <= floor_plan.x + floor_plan.width
        and item.y + item.height <= floor_plan.y + floor_plan.height
    )


def constrain_to_boundary(
    item: LayoutItem,
    floor_plan: LayoutItem | None,
    default_padding: float = DEFAULT_BOUNDARY_PADDING,
) -> Point:
    if floor_plan is None:
        return Point(item.x, item.y)
    padding = _boundary_padding(floor_plan, default_padding)
    min_x = floor_plan.x + padding
    min_y = floor_plan.y + padding
    max_x = floor_plan.x + floor_plan.width - padding - item.width
    max_y = floor_plan.y + floor_plan.height - padding - item.height
    return Point(max(min_x, min(item.x, max_x)), max(min_y, min(item.y, max_y)))


def required_boundary_size(
    items: Sequence[LayoutItem],
    floor_plan: LayoutItem | None,
    grid_size: float = DEFAULT_BOUNDARY_GRID_SIZE,
    default_padding: float = DEFAULT_BOUNDARY_PADDING,
) -> BoundarySize:
    if floor_plan is None:
        width, height = DEFAULT_FLOOR_PLAN_SIZE
        return BoundarySize(width=width, height=height, needs_resize=False)
    if not items:
        return BoundarySize(floor_plan.width, floor_plan.height, needs_resize=False)

    padding = _boundary_padding(floor_plan, default_padding)
    floor_key = floor_plan.item_key()
    max_right = floor_plan.x
    max_bottom = floor_plan.y
    for item in items:
        if item.item_key() == floor_key or item.container_level == BOUNDARY_LEVEL:
            continue
        max_right = max(max_right, item.x + item.width)
        max_bottom = max(max_bottom, item.y + item.height)

    required_width = max_right - floor_plan.x + padding
    required_height = max_bottom - floor_plan.y + padding
    step = grid_size if grid_size > 0 else 1.0
    snapped_width = math.ceil(required_width / step) * step
    snapped_height = math.ceil(required_height / step) * step
    needs_resize = snapped_width > floor_plan.width or snapped_height > floor_plan.height
    return BoundarySize(
        width=max(floor_plan.width, snapped_width),
        height=max(floor_plan.height, snapped_height),
        needs_resize=needs_resize,
    )


def validate_item_placement(
    item: LayoutItem,
    items: Sequence[LayoutItem],
    default_padding: float = DEFAULT_BOUNDARY_PADDING,
) -> PlacementCheck:
    floor_plan = find_floor_plan(items)
    if floor_plan is None or is_item_within_boundary(item, floor_plan):
        return PlacementCheck(position=Point(item.x, item.y), is_valid=True)
    return PlacementCheck(
        position=constrain_to_boundary(item, floor_plan, default_padding),
        is_valid=False,
        needs_boundary_expansion=True,
    )


def validate_item_resize(
    item: LayoutItem,
    new_width: float,
    new_height: float,
    items: Sequence[LayoutItem],
    default_padding: float = DEFAULT_BOUNDARY_PADDING,
) -> ResizeCheck:
    floor_plan = find_floor_plan(items)
    if floor_plan is None:
        return ResizeCheck(is_valid=True, width=new_width, height=new_height)
    padding = _boundary_padding(floor_plan, default_padding)
    max_width = floor_plan.x + floor_plan.width - padding - item.x
    max_height = floor_plan.y + floor_plan.height - padding - item.y
    width = min(new_width, max_width)
    height = min(new_height, max_height)
    is_valid = width == new_width and height == new_height
    return ResizeCheck(
        is_valid=is_valid,
        width=max(MIN_ITEM_DIMENSION, width),
        height=max(MIN_ITEM_DIMENSION, height),
        needs_boundary_expansion=not is_valid,
    )


def items_outside_boundary(items: Sequence[LayoutItem]) -> list[LayoutItem]:
    floor_plan = find_floor_plan(items)
    if floor_plan is None:
        return []
    floor_key = floor_plan.item_key()
    return [
        item
        for item in items
        if item.item_key() != floor_key
        and item.container_level != BOUNDARY_LEVEL
        and not is_item_within_boundary(item, floor_plan)
    ]
