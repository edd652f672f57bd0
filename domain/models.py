from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

INITIAL_STATE_ID = 0
EPSILON_LABEL = ""


class AutomatonState(BaseModel):
    model_config = ConfigDict(frozen=True)

    accepts: bool = False
    epsilon_transitions: List[int] = Field(default_factory=list)
    branches: Dict[str, List[int]] = Field(default_factory=dict)

    @field_validator("branches", mode="after")
    @classmethod
    def ensure_single_char_symbols(cls, branches: Dict[str, List[int]]) -> Dict[str, List[int]]:
        for symbol in branches:
            if len(symbol) != 1:
                msg = f"Transition symbol must be a single character: {symbol!r}"
                raise ValueError(msg)
        return branches

    def targets(self) -> List[int]:
        referenced: List[int] = list(self.epsilon_transitions)
        for targets in self.branches.values():
            referenced.extend(targets)
        return referenced


class Automaton(BaseModel):
    model_config = ConfigDict(frozen=True)

    states: List[AutomatonState] = Field(..., min_length=1)

    @model_validator(mode="after")
    def ensure_valid_targets(self) -> Automaton:
        count = len(self.states)
        for state_id, state in enumerate(self.states):
            for target in state.targets():
                if target < 0 or target >= count:
                    msg = f"State {state_id} references unknown state {target}"
                    raise ValueError(msg)
        return self

    def edges(self) -> List[Edge]:
        edges: List[Edge] = []
        for state_id, state in enumerate(self.states):
            for target in state.epsilon_transitions:
                edges.append(Edge(source=state_id, target=target, label=EPSILON_LABEL))
            for symbol in sorted(state.branches):
                for target in state.branches[symbol]:
                    edges.append(Edge(source=state_id, target=target, label=symbol))
        return edges


class StateMachines(BaseModel):
    """Compiler output pair: the NFA and the DFA converted from it."""

    model_config = ConfigDict(frozen=True)

    nfa: Optional[Automaton] = None
    dfa: Optional[Automaton] = None

    @model_validator(mode="after")
    def ensure_any_machine(self) -> StateMachines:
        if self.nfa is None and self.dfa is None:
            raise ValueError("Document must contain at least one of 'nfa' or 'dfa'")
        return self

    def named(self) -> List[Tuple[str, Automaton]]:
        machines: List[Tuple[str, Automaton]] = []
        if self.nfa is not None:
            machines.append(("nfa", self.nfa))
        if self.dfa is not None:
            machines.append(("dfa", self.dfa))
        return machines


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def scale(self, factor: float) -> Point:
        return Point(self.x * factor, self.y * factor)

    def to_list(self) -> List[float]:
        return [self.x, self.y]


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class GridPosition:
    column: int
    row: int


@dataclass(frozen=True)
class Edge:
    source: int
    target: int
    label: str = EPSILON_LABEL

    @property
    def is_epsilon(self) -> bool:
        return self.label == EPSILON_LABEL

    @property
    def is_self_loop(self) -> bool:
        return self.source == self.target


@dataclass(frozen=True)
class Curve:
    start: Point
    control_a: Point
    control_b: Point
    end: Point


@dataclass(frozen=True)
class Polygon:
    points: Tuple[Point, ...]


@dataclass(frozen=True)
class CanvasBounds:
    width: float
    height: float
    view_box_origin: Point
    view_box_size: Size

    def view_box(self) -> str:
        return (
            f"{self.view_box_origin.x:g} {self.view_box_origin.y:g} "
            f"{self.view_box_size.width:g} {self.view_box_size.height:g}"
        )


class MarkerKind(str, Enum):
    INITIAL = "initial"
    NORMAL = "normal"


@dataclass(frozen=True)
class StateMarker:
    state_id: int
    position: Point
    kind: MarkerKind
    accepts: bool = False


@dataclass(frozen=True)
class EdgeGeometry:
    edge: Edge
    curve: Curve
    arrow: Polygon
    label_anchor: Point


@dataclass(frozen=True)
class LayoutConfig:
    radius: float = 10.0
    gap: float = 10.0
    arrow_size: float = 4.0
    margin: float = 8.0
    pixel_rate: float = 3.0

    def pixel(self, grid: int) -> float:
        return (self.radius + self.gap) * (2 * grid + 1)

    def center(self, position: GridPosition) -> Point:
        return Point(self.pixel(position.column), self.pixel(position.row))


@dataclass(frozen=True)
class DiagramPlan:
    markers: List[StateMarker]
    edges: List[EdgeGeometry]
    canvas: CanvasBounds
    config: LayoutConfig = field(default_factory=LayoutConfig)

    def to_dict(self) -> dict:
        return {
            "canvas": {
                "width": self.canvas.width,
                "height": self.canvas.height,
                "view_box": {
                    "x": self.canvas.view_box_origin.x,
                    "y": self.canvas.view_box_origin.y,
                    "width": self.canvas.view_box_size.width,
                    "height": self.canvas.view_box_size.height,
                },
            },
            "radius": self.config.radius,
            "markers": [
                {
                    "state_id": marker.state_id,
                    "kind": marker.kind.value,
                    "accepts": marker.accepts,
                    "position": marker.position.to_list(),
                }
                for marker in self.markers
            ],
            "edges": [
                {
                    "source": geometry.edge.source,
                    "target": geometry.edge.target,
                    "label": geometry.edge.label,
                    "curve": [
                        geometry.curve.start.to_list(),
                        geometry.curve.control_a.to_list(),
                        geometry.curve.control_b.to_list(),
                        geometry.curve.end.to_list(),
                    ],
                    "arrow": [point.to_list() for point in geometry.arrow.points],
                    "label_anchor": geometry.label_anchor.to_list(),
                }
                for geometry in self.edges
            ],
        }
