from dataclasses import replace

import pytest

from idea_planner.core.catalog import node_catalog
from idea_planner.core.catalog.node_catalog import BASELINE_NODES, build_nodes, check_integrity
from idea_planner.core.errors import IntegrityError
from idea_planner.core.model import FeatureTags


def _ids(nodes) -> list[str]:
    return [n.id for n in nodes]


def test_baseline_has_nine_nodes_authored_in_dependency_order():
    assert len(BASELINE_NODES) == 9
    seen: set[str] = set()
    for n in BASELINE_NODES:
        assert set(n.dependencies) <= seen, n.id
        seen.add(n.id)


def test_every_prompt_has_idea_placeholder():
    for _, n in node_catalog.CONDITIONAL_NODES:
        assert all("{idea}" in p for p in n.prompts)
    for n in BASELINE_NODES:
        assert all("{idea}" in p for p in n.prompts)


def test_no_tags_yields_baseline_only():
    assert _ids(build_nodes(FeatureTags())) == _ids(BASELINE_NODES)


def test_ai_and_mobile_nodes_are_appended():
    nodes = build_nodes(FeatureTags(is_ai=True, is_mobile_app=True))
    assert _ids(nodes)[9:] == ["ai-ml-integration", "mobile-app-development"]
    by_id = {n.id: n for n in nodes}
    assert by_id["ai-ml-integration"].dependencies == ("api-development",)
    assert by_id["mobile-app-development"].dependencies == ("ui-design",)
    check_integrity(nodes)


def test_injected_id_is_made_unique(monkeypatch):
    clash = replace(BASELINE_NODES[0], id="ai-ml-integration", dependencies=())
    monkeypatch.setattr(node_catalog, "BASELINE_NODES", BASELINE_NODES + (clash,))
    nodes = build_nodes(FeatureTags(is_ai=True))
    assert _ids(nodes)[-1] == "ai-ml-integration-A"
    check_integrity(nodes)


def test_check_integrity_unknown_dependency():
    broken = list(BASELINE_NODES) + [replace(BASELINE_NODES[1], id="extra", dependencies=("nope",))]
    with pytest.raises(IntegrityError) as exc:
        check_integrity(broken)
    assert exc.value.code == "E_UNKNOWN_DEPENDENCY"
    assert "nope" in exc.value.message


def test_check_integrity_duplicate_id():
    with pytest.raises(IntegrityError) as exc:
        check_integrity(list(BASELINE_NODES) + [BASELINE_NODES[0]])
    assert exc.value.code == "E_DUPLICATE_ID"


def test_check_integrity_repeated_dependency():
    repeated = replace(BASELINE_NODES[4], dependencies=("system-architecture", "database-schema", "system-architecture"))
    with pytest.raises(IntegrityError) as exc:
        check_integrity(list(BASELINE_NODES[:4]) + [repeated])
    assert exc.value.code == "E_DUPLICATE_DEPENDENCY"
    assert exc.value.path == "nodes[4].dependencies[2]"
