from __future__ import annotations

from typing import Mapping

from domain.geometry import SQRT1_2, distance, lerp, midpoint, perpendicular, unit_direction
from domain.models import Curve, Edge, GridPosition, LayoutConfig, Point, Polygon

# Control point distance from the centre for self-loops, in radii.
SELF_LOOP_REACH = 3.0
# Sideways bow of a normal edge, in radii.
EDGE_BOW = 1.5


class MissingPositionError(KeyError):
    """Raised when an edge endpoint has no grid position (unreachable state)."""

    def __init__(self, state_id: int) -> None:
        super().__init__(state_id)
        self.state_id = state_id

    def __str__(self) -> str:
        return f"State {self.state_id} has no layout position"


def curve_for(
    edge: Edge,
    positions: Mapping[int, GridPosition],
    config: LayoutConfig | None = None,
) -> Curve:
    config = config or LayoutConfig()
    source = config.center(_lookup(positions, edge.source))
    target = config.center(_lookup(positions, edge.target))
    radius = config.radius

    if edge.is_self_loop:
        reach = SQRT1_2 * radius * SELF_LOOP_REACH
        control_a = Point(source.x + reach, source.y - reach)
        control_b = Point(source.x + reach, source.y + reach)
    else:
        span = distance(source, target)
        if span == 0:
            # unit_direction below reports the coincident centres.
            control_a = control_b = source
        else:
            factor = EDGE_BOW * radius / span
            offset = Point((target.y - source.y) * factor, -(target.x - source.x) * factor)
            control_a = lerp(source, target, 0.25) + offset
            control_b = lerp(source, target, 0.75) + offset

    start = source + unit_direction(source, control_a).scale(radius)
    end = target + unit_direction(target, control_b).scale(radius)
    return Curve(start=start, control_a=control_a, control_b=control_b, end=end)


def arrow_for(curve: Curve, config: LayoutConfig | None = None) -> Polygon:
    config = config or LayoutConfig()
    direction = unit_direction(curve.end, curve.control_b)
    side = perpendicular(direction).scale(config.arrow_size / 2)
    back = direction.scale(config.arrow_size * SQRT1_2)
    return Polygon(
        points=(
            curve.end,
            curve.end + back + side,
            curve.end + back - side,
        )
    )


def label_anchor_for(curve: Curve) -> Point:
    return midpoint(curve.control_a, curve.control_b)


def _lookup(positions: Mapping[int, GridPosition], state_id: int) -> GridPosition:
    position = positions.get(state_id)
    if position is None:
        raise MissingPositionError(state_id)
    return position
