from __future__ import annotations

import logging

import pytest

from adapters.layout.grid import DepthFirstLayoutEngine
from domain.geometry import distance
from domain.models import Automaton, Edge, GridPosition, MarkerKind, Point
from domain.services.build_diagram import AutomatonDiagramBuilder
from tests.helpers.automaton_fixtures import automaton, load_automaton_payload


def test_single_state_plan(
    diagram_builder: AutomatonDiagramBuilder, single_state: Automaton
) -> None:
    plan = diagram_builder.build(single_state)
    assert len(plan.markers) == 1
    assert plan.markers[0].kind is MarkerKind.INITIAL
    assert plan.markers[0].position == Point(20.0, 20.0)
    assert plan.edges == []
    assert plan.canvas.width > 0 and plan.canvas.height > 0


def test_single_transition_plan(diagram_builder: AutomatonDiagramBuilder) -> None:
    machine = automaton({"branches": {"a": [1]}}, {"accepts": True})
    plan = diagram_builder.build(machine)

    assert [(m.state_id, m.kind, m.accepts) for m in plan.markers] == [
        (0, MarkerKind.INITIAL, False),
        (1, MarkerKind.NORMAL, True),
    ]
    assert [geometry.edge for geometry in plan.edges] == [Edge(0, 1, "a")]
    curve = plan.edges[0].curve
    assert distance(curve.start, plan.markers[0].position) == pytest.approx(10.0)
    assert distance(curve.end, plan.markers[1].position) == pytest.approx(10.0)


def test_epsilon_self_loop_plan(diagram_builder: AutomatonDiagramBuilder) -> None:
    plan = diagram_builder.build(automaton({"epsilon_transitions": [0]}))
    assert len(plan.edges) == 1
    geometry = plan.edges[0]
    assert geometry.edge == Edge(0, 0, "")
    assert geometry.arrow.points[0] == geometry.curve.end


def test_ping_pong_plan_has_two_distinct_curves(
    diagram_builder: AutomatonDiagramBuilder, ping_pong: Automaton
) -> None:
    plan = diagram_builder.build(ping_pong)
    labels = [geometry.edge.label for geometry in plan.edges]
    assert labels == ["a", "b"]
    forward, backward = (geometry.curve for geometry in plan.edges)
    assert forward != backward
    assert plan.edges[0].label_anchor.y < 20.0 < plan.edges[1].label_anchor.y


def test_unreachable_states_and_their_edges_are_omitted(
    diagram_builder: AutomatonDiagramBuilder, caplog: pytest.LogCaptureFixture
) -> None:
    machine = Automaton.model_validate(load_automaton_payload("unreachable.json"))
    with caplog.at_level(logging.DEBUG, logger="domain.services.build_diagram"):
        plan = diagram_builder.build(machine)

    assert [marker.state_id for marker in plan.markers] == [0, 1]
    assert [geometry.edge for geometry in plan.edges] == [Edge(0, 1, "a")]
    assert "Skipping unreachable state 2" in caplog.text


def test_nondeterministic_targets_each_get_an_edge(
    diagram_builder: AutomatonDiagramBuilder,
) -> None:
    machine = automaton({"branches": {"a": [1, 2, 1]}}, {}, {})
    plan = diagram_builder.build(machine)
    assert [geometry.edge for geometry in plan.edges] == [
        Edge(0, 1, "a"),
        Edge(0, 2, "a"),
        Edge(0, 1, "a"),
    ]
    assert plan.edges[0].curve == plan.edges[2].curve


def test_build_is_deterministic(diagram_builder: AutomatonDiagramBuilder) -> None:
    payload = load_automaton_payload("a_or_b.json")
    machine = Automaton.model_validate(payload["nfa"])
    assert diagram_builder.build(machine) == diagram_builder.build(machine)


def test_builder_uses_injected_layout_engine() -> None:
    class DiagonalLayout:
        def assign(self, machine: Automaton) -> dict[int, GridPosition]:
            return {idx: GridPosition(idx, idx) for idx in range(len(machine.states))}

    machine = automaton({"branches": {"a": [1]}}, {})
    plan = AutomatonDiagramBuilder(DiagonalLayout()).build(machine)
    assert plan.markers[1].position == Point(60.0, 60.0)
    assert plan.canvas.view_box_size.width == plan.canvas.view_box_size.height


def test_plan_to_dict_is_plain_data(
    diagram_builder: AutomatonDiagramBuilder, ping_pong: Automaton
) -> None:
    payload = diagram_builder.build(ping_pong).to_dict()
    assert payload["canvas"]["view_box"] == {"x": -8.0, "y": -8.0, "width": 96.0, "height": 56.0}
    assert payload["markers"][0] == {
        "state_id": 0,
        "kind": "initial",
        "accepts": False,
        "position": [20.0, 20.0],
    }
    assert payload["edges"][0]["label"] == "a"
    assert len(payload["edges"][0]["curve"]) == 4
    assert len(payload["edges"][0]["arrow"]) == 3


def test_default_engine_positions_match_plan_markers(
    diagram_builder: AutomatonDiagramBuilder, layout_config
) -> None:
    payload = load_automaton_payload("a_or_b.json")
    machine = Automaton.model_validate(payload["dfa"])
    positions = DepthFirstLayoutEngine().assign(machine)
    plan = diagram_builder.build(machine)
    assert {m.state_id: m.position for m in plan.markers} == {
        state_id: layout_config.center(position) for state_id, position in positions.items()
    }
