from __future__ import annotations

from dataclasses import dataclass
from typing import List
from xml.sax.saxutils import escape, quoteattr

from domain.models import DiagramPlan, EdgeGeometry, MarkerKind, Point, StateMarker
from domain.ports.rendering import DiagramRenderer

SVG_NAMESPACE = "http://www.w3.org/2000/svg"
ACCEPT_MARK_SCALE = 0.8

MARKER_HREFS = {
    MarkerKind.INITIAL: "#initial_state",
    MarkerKind.NORMAL: "#normal_state",
}


@dataclass(frozen=True)
class SvgStyle:
    initial_fill: str = "blue"
    normal_fill: str = "white"
    stroke: str = "black"


class SvgDiagramRenderer(DiagramRenderer):
    def __init__(self, style: SvgStyle | None = None) -> None:
        self.style = style or SvgStyle()

    def render(self, plan: DiagramPlan) -> str:
        canvas = plan.canvas
        lines: List[str] = [
            (
                f'<svg xmlns="{SVG_NAMESPACE}" width="{_num(canvas.width)}" '
                f'height="{_num(canvas.height)}" viewBox="{canvas.view_box()}" '
                'preserveAspectRatio="xMidYMid meet">'
            ),
            *self._defs(plan.config.radius),
        ]
        for marker in plan.markers:
            lines.extend(self._marker(marker))
        for geometry in plan.edges:
            lines.extend(self._edge(geometry))
        lines.append("</svg>")
        return "\n".join(lines) + "\n"

    def _defs(self, radius: float) -> List[str]:
        stroke = quoteattr(self.style.stroke)
        return [
            "  <defs>",
            (
                f'    <circle id="initial_state" fill={quoteattr(self.style.initial_fill)} '
                f"stroke={stroke} r=\"{_num(radius)}\"/>"
            ),
            (
                f'    <circle id="normal_state" fill={quoteattr(self.style.normal_fill)} '
                f"stroke={stroke} r=\"{_num(radius)}\"/>"
            ),
            (
                f'    <circle id="accept_mark" fill="transparent" stroke={stroke} '
                f'r="{_num(radius * ACCEPT_MARK_SCALE)}"/>'
            ),
            "  </defs>",
        ]

    def _marker(self, marker: StateMarker) -> List[str]:
        x = _num(marker.position.x)
        y = _num(marker.position.y)
        elements = [f'  <use href="{MARKER_HREFS[marker.kind]}" x="{x}" y="{y}"/>']
        if marker.accepts:
            elements.append(f'  <use href="#accept_mark" x="{x}" y="{y}"/>')
        return elements

    def _edge(self, geometry: EdgeGeometry) -> List[str]:
        curve = geometry.curve
        stroke = quoteattr(self.style.stroke)
        path = (
            f"M {_pt(curve.start)} C {_pt(curve.control_a)} "
            f"{_pt(curve.control_b)} {_pt(curve.end)}"
        )
        tip, left, right = geometry.arrow.points
        arrow = f"M {_pt(tip)} L {_pt(left)} L {_pt(right)} Z"
        anchor = geometry.label_anchor
        return [
            f'  <path d="{path}" stroke={stroke} fill="transparent"/>',
            f'  <path d="{arrow}" fill={stroke}/>',
            (
                f'  <text x="{_num(anchor.x)}" y="{_num(anchor.y)}" stroke={stroke} '
                f'text-anchor="middle" dominant-baseline="middle">'
                f"{escape(geometry.edge.label)}</text>"
            ),
        ]


def _num(value: float) -> str:
    return f"{round(value, 4):g}"


def _pt(point: Point) -> str:
    return f"{_num(point.x)} {_num(point.y)}"
