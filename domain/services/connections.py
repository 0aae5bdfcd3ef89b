from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from typing import Literal

from domain.component_types import CONTAINER_TYPES, DIVIDER_TYPES, LINKABLE_TYPES
from domain.models import LayoutItem, Point
from domain.services.geometry import bounds

SNAP_TOLERANCE = 10.0
MIN_CLOSED_SHAPE_ELEMENTS = 3

ConnectionDirection = Literal["horizontal", "vertical"]
Edge = Literal["left", "right", "top", "bottom"]


@dataclass(frozen=True)
class Connection:
    """Contact between an edge of a source item and the facing edge of a target.

    ``point1`` lies on the source edge and ``point2`` on the target edge, both at the
    middle of the shared span.
    """

    direction: ConnectionDirection
    source_edge: Edge
    point1: Point
    point2: Point
    overlap: float
    kind: str = "edge-to-edge"
    target: LayoutItem | None = None


@dataclass(frozen=True)
class ConnectedPair:
    source_key: str
    target_key: str
    connections: list[Connection]


def is_container_type(component_type: str | None) -> bool:
    return component_type in CONTAINER_TYPES


def is_divider_type(component_type: str | None) -> bool:
    return component_type in DIVIDER_TYPES


def can_link(first: LayoutItem, second: LayoutItem) -> bool:
    return first.type in LINKABLE_TYPES and second.type in LINKABLE_TYPES


def find_connection_points(
    first: LayoutItem,
    second: LayoutItem,
    tolerance: float = SNAP_TOLERANCE,
) -> list[Connection]:
    if not can_link(first, second):
        return []

    a = bounds(first)
    b = bounds(second)
    connections: list[Connection] = []

    # Facing vertical edges share a y-span, facing horizontal edges share an x-span.
    horizontal: list[tuple[Edge, float, float]] = [
        ("right", a.right, b.left),
        ("left", a.left, b.right),
    ]
    for source_edge, edge_a, edge_b in horizontal:
        if abs(edge_a - edge_b) > tolerance:
            continue
        overlap_start = max(a.top, b.top)
        overlap_end = min(a.bottom, b.bottom)
        if overlap_end > overlap_start:
            mid_y = (overlap_start + overlap_end) / 2
            connections.append(
                Connection(
                    direction="horizontal",
                    source_edge=source_edge,
                    point1=Point(edge_a, mid_y),
                    point2=Point(edge_b, mid_y),
                    overlap=overlap_end - overlap_start,
                )
            )

    vertical: list[tuple[Edge, float, float]] = [
        ("bottom", a.bottom, b.top),
        ("top", a.top, b.bottom),
    ]
    for source_edge, edge_a, edge_b in vertical:
        if abs(edge_a - edge_b) > tolerance:
            continue
        overlap_start = max(a.left, b.left)
        overlap_end = min(a.right, b.right)
        if overlap_end > overlap_start:
            mid_x = (overlap_start + overlap_end) / 2
            connections.append(
                Connection(
                    direction="vertical",
                    source_edge=source_edge,
                    point1=Point(mid_x, edge_a),
                    point2=Point(mid_x, edge_b),
                    overlap=overlap_end - overlap_start,
                )
            )

    return connections


def find_all_connections(
    item: LayoutItem,
    all_items: Sequence[LayoutItem],
    tolerance: float = SNAP_TOLERANCE,
) -> list[Connection]:
    item_key = item.item_key()
    connections: list[Connection] = []
    for other in all_items:
        if other.item_key() == item_key:
            continue
        for connection in find_connection_points(item, other, tolerance):
            connections.append(replace(connection, target=other))
    return connections


def snap_to_connection(item: LayoutItem, connection: Connection) -> LayoutItem:
    if connection.direction == "horizontal":
        if connection.source_edge == "left":
            x = connection.point2.x
        else:
            x = connection.point2.x - item.width
        y = connection.point2.y - item.height / 2
    else:
        if connection.source_edge == "top":
            y = connection.point2.y
        else:
            y = connection.point2.y - item.height
        x = connection.point2.x - item.width / 2
    return item.model_copy(update={"x": x, "y": y})


def extend_to_connect(
    item: LayoutItem,
    target: LayoutItem,
    tolerance: float = SNAP_TOLERANCE,
) -> LayoutItem:
    if not can_link(item, target) or not is_divider_type(item.type):
        return item

    a = bounds(item)
    b = bounds(target)
    if abs(a.center_y - b.center_y) <= tolerance:
        if a.right < b.left:
            return item.model_copy(update={"width": b.left - a.left})
        if a.left > b.right:
            return item.model_copy(update={"x": b.right, "width": a.right - b.right})
    elif abs(a.center_x - b.center_x) <= tolerance:
        if a.bottom < b.top:
            return item.model_copy(update={"height": b.top - a.top})
        if a.top > b.bottom:
            return item.model_copy(update={"y": b.bottom, "height": a.bottom - b.bottom})
    return item


def find_connected_pairs(
    items: Sequence[LayoutItem],
    tolerance: float = SNAP_TOLERANCE,
) -> list[ConnectedPair]:
    linkable = [item for item in items if item.type in LINKABLE_TYPES]
    pairs: list[ConnectedPair] = []
    for index, first in enumerate(linkable):
        for second in linkable[index + 1 :]:
            connections = find_connection_points(first, second, tolerance)
            if connections:
                pairs.append(
                    ConnectedPair(
                        source_key=first.item_key(),
                        target_key=second.item_key(),
                        connections=connections,
                    )
                )
    return pairs


def detect_closed_shape(
    items: Sequence[LayoutItem],
    tolerance: float = SNAP_TOLERANCE,
    *,
    strict: bool = False,
) -> bool:
    """Report whether the linkable items look like a closed outline.

    The default mode is a heuristic: the scene counts as closed when the number of
    touching pairs reaches the number of linkable items. ``strict=True`` instead
    requires an actual cycle in the connection graph.
    """
    linkable = [item for item in items if item.type in LINKABLE_TYPES]
    if len(linkable) < MIN_CLOSED_SHAPE_ELEMENTS:
        return False
    if strict:
        return find_connection_cycle(linkable, tolerance) is not None
    return len(find_connected_pairs(linkable, tolerance)) >= len(linkable)


def find_connection_cycle(
    items: Sequence[LayoutItem],
    tolerance: float = SNAP_TOLERANCE,
) -> list[str] | None:
    adjacency: dict[str, list[str]] = {
        item.item_key(): [] for item in items if item.type in LINKABLE_TYPES
    }
    for pair in find_connected_pairs(items, tolerance):
        adjacency[pair.source_key].append(pair.target_key)
        adjacency[pair.target_key].append(pair.source_key)
    return _find_undirected_cycle(adjacency)


def _find_undirected_cycle(adjacency: Mapping[str, list[str]]) -> list[str] | None:
    visited: set[str] = set()
    stack: list[str] = []

    def dfs(node: str, parent: str | None) -> list[str] | None:
        visited.add(node)
        stack.append(node)
        for neighbor in adjacency.get(node, []):
            if neighbor == parent:
                continue
            if neighbor not in visited:
                found = dfs(neighbor, node)
                if found:
                    return found
            elif neighbor in stack:
                idx = stack.index(neighbor)
                return stack[idx:] + [neighbor]
        stack.pop()
        return None

    for node in adjacency:
        if node not in visited:
            cycle = dfs(node, None)
            if cycle:
                return cycle
    return None
