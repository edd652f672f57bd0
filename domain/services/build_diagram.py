from __future__ import annotations

import logging
from typing import Dict, List

from domain.models import (
    INITIAL_STATE_ID,
    Automaton,
    DiagramPlan,
    EdgeGeometry,
    GridPosition,
    LayoutConfig,
    MarkerKind,
    StateMarker,
)
from domain.ports.layout import LayoutEngine
from domain.services.canvas_bounds import bounds
from domain.services.edge_geometry import (
    MissingPositionError,
    arrow_for,
    curve_for,
    label_anchor_for,
)

logger = logging.getLogger(__name__)


class AutomatonDiagramBuilder:
    """Turns an automaton into draw instructions.

    Call ``build`` again whenever the automaton changes; nothing is cached
    between calls. States unreachable from the initial state are left out,
    together with every edge that touches them.
    """

    def __init__(self, layout_engine: LayoutEngine, config: LayoutConfig | None = None) -> None:
        self.layout_engine = layout_engine
        self.config = config or LayoutConfig()

    def build(self, automaton: Automaton) -> DiagramPlan:
        positions = self.layout_engine.assign(automaton)
        markers = self._build_markers(automaton, positions)
        edges = self._build_edges(automaton, positions)
        canvas = bounds(positions, self.config)
        logger.debug(
            "Built diagram with %d of %d states and %d edges",
            len(markers),
            len(automaton.states),
            len(edges),
        )
        return DiagramPlan(markers=markers, edges=edges, canvas=canvas, config=self.config)

    def _build_markers(
        self, automaton: Automaton, positions: Dict[int, GridPosition]
    ) -> List[StateMarker]:
        markers: List[StateMarker] = []
        for state_id, state in enumerate(automaton.states):
            position = positions.get(state_id)
            if position is None:
                logger.debug("Skipping unreachable state %d", state_id)
                continue
            kind = MarkerKind.INITIAL if state_id == INITIAL_STATE_ID else MarkerKind.NORMAL
            markers.append(
                StateMarker(
                    state_id=state_id,
                    position=self.config.center(position),
                    kind=kind,
                    accepts=state.accepts,
                )
            )
        return markers

    def _build_edges(
        self, automaton: Automaton, positions: Dict[int, GridPosition]
    ) -> List[EdgeGeometry]:
        geometries: List[EdgeGeometry] = []
        for edge in automaton.edges():
            try:
                curve = curve_for(edge, positions, self.config)
            except MissingPositionError as exc:
                logger.debug("Skipping edge %d -> %d: %s", edge.source, edge.target, exc)
                continue
            geometries.append(
                EdgeGeometry(
                    edge=edge,
                    curve=curve,
                    arrow=arrow_for(curve, self.config),
                    label_anchor=label_anchor_for(curve),
                )
            )
        return geometries
