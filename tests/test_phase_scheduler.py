from dataclasses import replace

import pytest

from idea_planner.core.catalog.node_catalog import BASELINE_NODES, build_nodes
from idea_planner.core.errors import IntegrityError
from idea_planner.core.model import FeatureTags, PlanNode
from idea_planner.core.schedule.phase_scheduler import compute_layers, schedule_phases


def _node(nid: str, *deps: str) -> PlanNode:
    return PlanNode(
        id=nid,
        title=nid,
        description=nid,
        category="backend",
        priority="medium",
        estimated_time="1 day",
        complexity="simple",
        dependencies=deps,
    )


def test_layers_follow_longest_dependency_chain():
    layers = compute_layers(BASELINE_NODES)
    assert layers["system-architecture"] == 0
    assert layers["database-schema"] == 1
    assert layers["ui-design"] == 1
    assert layers["api-development"] == 2
    assert layers["testing-strategy"] == 4
    assert layers["deployment-pipeline"] == 5


def test_default_three_phases_clamp_deep_layers():
    phases = schedule_phases(BASELINE_NODES)
    assert [p.name for p in phases] == ["Foundation & Design", "Core Development", "Testing & Deployment"]
    assert phases[0].node_ids == ["system-architecture"]
    assert phases[1].node_ids == ["database-schema", "ui-design"]
    assert "deployment-pipeline" in phases[2].node_ids


def test_conditional_nodes_are_scheduled():
    nodes = build_nodes(FeatureTags(is_ai=True, is_mobile_app=True))
    phases = schedule_phases(nodes)
    placed = [nid for p in phases for nid in p.node_ids]
    assert sorted(placed) == sorted(n.id for n in nodes)
    assert "ai-ml-integration" in phases[2].node_ids
    assert "mobile-app-development" in phases[2].node_ids


def test_one_phase_per_layer_when_enough_phases():
    nodes = build_nodes(FeatureTags(is_ai=True, is_mobile_app=True))
    phases = schedule_phases(nodes, phase_count=6)
    assert [p.name for p in phases] == [f"Phase {i}" for i in range(1, 7)]
    assert phases[2].node_ids == ["component-library", "api-development", "mobile-app-development"]
    assert phases[3].node_ids == ["business-logic", "security-hardening", "ai-ml-integration"]
    assert phases[5].node_ids == ["deployment-pipeline"]


def test_extra_phases_stay_empty():
    phases = schedule_phases([_node("a"), _node("b", "a")], phase_count=4)
    assert [p.node_ids for p in phases] == [["a"], ["b"], [], []]


def test_single_phase_holds_everything():
    phases = schedule_phases(BASELINE_NODES, phase_count=1)
    assert len(phases) == 1
    assert len(phases[0].nodes) == 9


def test_phase_count_must_be_positive():
    with pytest.raises(ValueError):
        schedule_phases(BASELINE_NODES, phase_count=0)


def test_custom_names_must_match_count():
    with pytest.raises(ValueError):
        schedule_phases(BASELINE_NODES, phase_count=2, names=["only one"])


def test_unknown_dependency_is_integrity_error():
    with pytest.raises(IntegrityError) as exc:
        compute_layers([_node("a"), _node("b", "missing")])
    assert exc.value.code == "E_UNKNOWN_DEPENDENCY"


def test_cycle_is_integrity_error():
    nodes = [_node("a", "c"), _node("b", "a"), _node("c", "b")]
    with pytest.raises(IntegrityError) as exc:
        schedule_phases(nodes)
    assert exc.value.code == "E_DEPENDENCY_CYCLE"
    assert "a -> c -> b -> a" in exc.value.message


def test_self_dependency_is_a_cycle():
    looped = replace(BASELINE_NODES[0], dependencies=("system-architecture",))
    with pytest.raises(IntegrityError):
        compute_layers([looped])


def test_deep_chain_does_not_recurse():
    chain = [_node("n0")] + [_node(f"n{i}", f"n{i - 1}") for i in range(1, 3000)]
    layers = compute_layers(reversed(chain))
    assert layers["n2999"] == 2999
    assert layers["n0"] == 0
