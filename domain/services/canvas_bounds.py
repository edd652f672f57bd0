from __future__ import annotations

from typing import Mapping

from domain.models import CanvasBounds, GridPosition, LayoutConfig, Point, Size


def bounds(
    positions: Mapping[int, GridPosition],
    config: LayoutConfig | None = None,
) -> CanvasBounds:
    """Size the canvas so every positioned state fits with a margin around it.

    The viewbox covers the unscaled drawing shifted by ``-margin`` on both axes;
    width and height are the scaled on-screen size.
    """
    config = config or LayoutConfig()
    max_column = max((position.column for position in positions.values()), default=0)
    max_row = max((position.row for position in positions.values()), default=0)

    padding = config.radius + config.gap + 2 * config.margin
    extent_x = config.pixel(max_column) + padding
    extent_y = config.pixel(max_row) + padding

    return CanvasBounds(
        width=(extent_x + config.margin) * config.pixel_rate,
        height=(extent_y + config.margin) * config.pixel_rate,
        view_box_origin=Point(-config.margin, -config.margin),
        view_box_size=Size(extent_x, extent_y),
    )
