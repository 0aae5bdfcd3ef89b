from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from domain.component_types import default_container_level
from domain.models import LayoutItem, Rect

DEFAULT_CONTAINER_PADDING = 10.0


@dataclass(frozen=True)
class Bounds:
    left: float
    right: float
    top: float
    bottom: float
    center_x: float
    center_y: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top


def bounds(item: LayoutItem) -> Bounds:
    return Bounds(
        left=item.x,
        right=item.x + item.width,
        top=item.y,
        bottom=item.y + item.height,
        center_x=item.x + item.width / 2,
        center_y=item.y + item.height / 2,
    )


def resolve_padding(
    container: LayoutItem,
    padding: float | None = None,
    default: float = DEFAULT_CONTAINER_PADDING,
) -> float:
    if padding is not None:
        return padding
    return container.container_padding or default


def container_bounds(container: LayoutItem, padding: float | None = None) -> Rect | None:
    if not container.is_container:
        return None
    inset = resolve_padding(container, padding)
    return Rect(
        x=container.x + inset,
        y=container.y + inset,
        width=container.width - inset * 2,
        height=container.height - inset * 2,
    )


def is_point_inside_container(
    x: float,
    y: float,
    container: LayoutItem,
    padding: float | None = None,
) -> bool:
    inner = container_bounds(container, padding)
    if inner is None:
        return False
    return inner.x <= x <= inner.x + inner.width and inner.y <= y <= inner.y + inner.height


def container_level(item: LayoutItem) -> int | None:
    if item.container_level is not None:
        return item.container_level
    return default_container_level(item.type)


def find_enclosing_container(
    item: LayoutItem,
    items: Iterable[LayoutItem],
) -> LayoutItem | None:
    """Return the deepest container that holds the item's center.

    Only containers with a strictly lower container level than the item qualify,
    so a zone is never reported as the parent of another zone. Items without a
    level are treated as leaves.
    """
    item_level = container_level(item)
    item_bounds = bounds(item)
    item_key = item.item_key()
    best: LayoutItem | None = None
    best_level = 0
    for candidate in items:
        if candidate.item_key() == item_key or not candidate.is_container:
            continue
        candidate_level = container_level(candidate)
        if candidate_level is None:
            continue
        if item_level is not None and candidate_level >= item_level:
            continue
        if not is_point_inside_container(item_bounds.center_x, item_bounds.center_y, candidate):
            continue
        if candidate_level > best_level:
            best = candidate
            best_level = candidate_level
    return best
