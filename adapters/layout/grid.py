from __future__ import annotations

from typing import Dict, List

from domain.models import INITIAL_STATE_ID, Automaton, AutomatonState, GridPosition
from domain.ports.layout import LayoutEngine


class DepthFirstLayoutEngine(LayoutEngine):
    """Places states on a grid in depth-first discovery order.

    The column of a state is its depth along the first path that reaches it
    from the initial state; children discovered from the same parent are
    stacked downwards starting at the parent's row. States unreachable from
    the initial state get no position.
    """

    def assign(self, automaton: Automaton) -> Dict[int, GridPosition]:
        positions: Dict[int, GridPosition] = {INITIAL_STATE_ID: GridPosition(0, 0)}
        stack: List[int] = [INITIAL_STATE_ID]

        while stack:
            state_id = stack.pop()
            parent = positions[state_id]
            column = parent.column + 1
            row = parent.row
            for child_id in self._next_states(automaton.states[state_id]):
                if child_id in positions:
                    continue
                positions[child_id] = GridPosition(column, row)
                row += 1
                stack.append(child_id)

        return positions

    def _next_states(self, state: AutomatonState) -> List[int]:
        ordered: List[int] = []
        for symbol in sorted(state.branches):
            ordered.extend(state.branches[symbol])
        ordered.extend(state.epsilon_transitions)
        return ordered
