from __future__ import annotations

from typing import Any, Callable, Iterable, Optional, cast

from idea_planner.core.errors import IntegrityError, PlanValidationError
from idea_planner.core.model import (
    FeatureTags,
    NodeCategory,
    NodeComplexity,
    NodePriority,
    Phase,
    Plan,
    PlanNode,
)
from idea_planner.core.schedule.phase_scheduler import compute_layers


ALLOWED_CATEGORIES: set[str] = {
    "architecture", "ui", "backend", "database", "security", "deployment", "testing", "marketing"
}
ALLOWED_PRIORITIES: set[str] = {"critical", "high", "medium", "low"}
ALLOWED_COMPLEXITIES: set[str] = {"simple", "moderate", "complex"}

_REQUIRED_STRINGS: tuple[str, ...] = ("idea_text", "description", "timeline_estimate", "budget_estimate")
_NODE_STRINGS: tuple[str, ...] = ("id", "title", "description", "estimated_time")
_NODE_LISTS: tuple[str, ...] = ("dependencies", "tools", "prompts", "resources")

ErrorSink = Callable[[str, str, str], None]


def _is_list_of_str(v: Any) -> bool:
    return isinstance(v, list) and all(isinstance(x, str) for x in v)


def validate_plan(plan: dict[str, Any]) -> tuple[Optional[Plan], list[PlanValidationError]]:
    """Validate a saved plan against the synthesis invariants.

    Checks field shapes, dependency integrity, acyclicity, that phases
    partition the node set, that no node sits in an earlier phase than one of
    its dependencies, and that the tech stack has no duplicates.

    Returns (plan, errors). Plan is None when errors exist.
    """

    file = cast(Optional[str], plan.get("__file__"))
    errors: list[PlanValidationError] = []

    def err(code: str, message: str, path: str) -> None:
        errors.append(PlanValidationError(code=code, message=message, file=file, path=path))

    for key in _REQUIRED_STRINGS:
        v = plan.get(key)
        if not isinstance(v, str) or not v.strip():
            err("E_REQUIRED_FIELD", f"{key} is required and must be a non-empty string", key)

    team_roles = plan.get("team_roles")
    if not _is_list_of_str(team_roles):
        err("E_INVALID_TYPE", "team_roles must be an array of strings", "team_roles")

    tech_stack = plan.get("tech_stack")
    if not _is_list_of_str(tech_stack):
        err("E_INVALID_TYPE", "tech_stack must be an array of strings", "tech_stack")
    else:
        seen_tech: set[str] = set()
        for ti, tech in enumerate(tech_stack):
            if tech in seen_tech:
                err("E_DUPLICATE_TECH", f"duplicate tech stack entry: {tech}", f"tech_stack[{ti}]")
            seen_tech.add(tech)

    tags = plan.get("tags")
    tag_names = set(FeatureTags.names())
    if tags is not None:
        if not _is_list_of_str(tags):
            err("E_INVALID_TYPE", "tags must be an array of strings", "tags")
        else:
            for gi, tag in enumerate(tags):
                if tag not in tag_names:
                    err("E_INVALID_ENUM", f"tags must be drawn from {sorted(tag_names)}", f"tags[{gi}]")

    nodes = plan.get("nodes")
    if not isinstance(nodes, list):
        err("E_REQUIRED_FIELD", "nodes is required and must be an array", "nodes")
        return None, _sorted(errors)

    nodes_by_id: dict[str, PlanNode] = {}
    for i, raw in enumerate(nodes):
        node = _validate_node(raw, f"nodes[{i}]", nodes_by_id, err)
        if node is not None:
            nodes_by_id[node.id] = node

    # Referential integrity checks.
    unknown_deps = False
    for nid, node in nodes_by_id.items():
        listed: set[str] = set()
        for di, dep in enumerate(node.dependencies):
            if dep in listed:
                err(
                    "E_DUPLICATE_DEPENDENCY",
                    f"dependencies lists {dep} more than once",
                    f"nodes[{_index_of_node(nodes, nid)}].dependencies[{di}]",
                )
                continue
            listed.add(dep)
            if dep not in nodes_by_id:
                unknown_deps = True
                err(
                    "E_UNKNOWN_DEPENDENCY",
                    f"dependencies references unknown id: {dep}",
                    f"nodes[{_index_of_node(nodes, nid)}].dependencies[{di}]",
                )

    if not unknown_deps:
        try:
            compute_layers(nodes_by_id.values())
        except IntegrityError as e:
            err(e.code, e.message, e.path or "nodes")

    phases = _validate_phases(plan.get("phases"), nodes_by_id, err)

    if errors:
        return None, _sorted(errors)

    active = set(cast(list[str], tags or []))
    return (
        Plan(
            idea_text=cast(str, plan["idea_text"]),
            description=cast(str, plan["description"]),
            nodes=tuple(nodes_by_id.values()),
            tech_stack=tuple(cast(list[str], tech_stack)),
            timeline_estimate=cast(str, plan["timeline_estimate"]),
            budget_estimate=cast(str, plan["budget_estimate"]),
            team_roles=tuple(cast(list[str], team_roles)),
            phases=tuple(phases),
            tags=FeatureTags(**{name: name in active for name in FeatureTags.names()}),
        ),
        [],
    )


def _validate_node(raw: Any, node_path: str, nodes_by_id: dict[str, PlanNode], err: ErrorSink) -> Optional[PlanNode]:
    if not isinstance(raw, dict):
        err("E_INVALID_TYPE", "node must be an object", node_path)
        return None

    for key in _NODE_STRINGS:
        v = raw.get(key)
        if not isinstance(v, str) or not v.strip():
            err("E_REQUIRED_FIELD", f"{key} is required and must be a non-empty string", f"{node_path}.{key}")
            return None

    nid = raw["id"]
    if nid in nodes_by_id:
        err("E_DUPLICATE_ID", f"duplicate node id: {nid}", f"{node_path}.id")
        return None

    for key, allowed in (
        ("category", ALLOWED_CATEGORIES),
        ("priority", ALLOWED_PRIORITIES),
        ("complexity", ALLOWED_COMPLEXITIES),
    ):
        v = raw.get(key)
        if not isinstance(v, str) or v not in allowed:
            err("E_INVALID_ENUM", f"{key} must be one of {sorted(allowed)}", f"{node_path}.{key}")
            return None

    for key in _NODE_LISTS:
        v = raw.get(key, [])
        if not _is_list_of_str(v):
            err("E_INVALID_TYPE", f"{key} must be an array of strings", f"{node_path}.{key}")
            return None

    return PlanNode(
        id=nid,
        title=raw["title"],
        description=raw["description"],
        category=cast(NodeCategory, raw["category"]),
        priority=cast(NodePriority, raw["priority"]),
        estimated_time=raw["estimated_time"],
        complexity=cast(NodeComplexity, raw["complexity"]),
        dependencies=tuple(raw.get("dependencies", [])),
        tools=tuple(raw.get("tools", [])),
        prompts=tuple(raw.get("prompts", [])),
        resources=tuple(raw.get("resources", [])),
    )


def _validate_phases(raw_phases: Any, nodes_by_id: dict[str, PlanNode], err: ErrorSink) -> list[Phase]:
    if not isinstance(raw_phases, list) or not raw_phases:
        err("E_REQUIRED_FIELD", "phases is required and must be a non-empty array", "phases")
        return []

    phases: list[Phase] = []
    phase_of: dict[str, int] = {}

    for pi, raw in enumerate(raw_phases):
        phase_path = f"phases[{pi}]"
        if not isinstance(raw, dict):
            err("E_INVALID_TYPE", "phase must be an object", phase_path)
            continue
        name = raw.get("name")
        if not isinstance(name, str) or not name.strip():
            err("E_REQUIRED_FIELD", "name is required and must be a non-empty string", f"{phase_path}.name")
            continue
        index = raw.get("index", pi)
        if index != pi:
            err("E_PHASE_INDEX", f"phase index must equal its position ({pi}), got {index}", f"{phase_path}.index")
        node_ids = raw.get("node_ids")
        if not _is_list_of_str(node_ids):
            err("E_INVALID_TYPE", "node_ids must be an array of strings", f"{phase_path}.node_ids")
            continue

        members: list[PlanNode] = []
        for ni, nid in enumerate(node_ids):
            member_path = f"{phase_path}.node_ids[{ni}]"
            if nid not in nodes_by_id:
                err("E_PHASE_UNKNOWN_NODE", f"phase references unknown node id: {nid}", member_path)
                continue
            if nid in phase_of:
                err(
                    "E_PHASE_DUPLICATE_NODE",
                    f"node {nid} already placed in phases[{phase_of[nid]}]",
                    member_path,
                )
                continue
            phase_of[nid] = pi
            members.append(nodes_by_id[nid])
        phases.append(Phase(index=pi, name=name, nodes=tuple(members)))

    for nid in nodes_by_id:
        if nid not in phase_of:
            err("E_PHASE_MISSING_NODE", f"node {nid} is not placed in any phase", "phases")

    for nid, node in nodes_by_id.items():
        if nid not in phase_of:
            continue
        for dep in node.dependencies:
            if dep in phase_of and phase_of[dep] > phase_of[nid]:
                err(
                    "E_PHASE_ORDER",
                    f"{nid} is in phases[{phase_of[nid]}] but its dependency {dep} is in phases[{phase_of[dep]}]",
                    f"phases[{phase_of[nid]}]",
                )

    return phases


def summarize_validation(plan: Plan) -> str:
    parts = [f"{p.name}={len(p.nodes)}" for p in plan.phases]
    return f"OK: {len(plan.nodes)} nodes in {len(plan.phases)} phases (" + ", ".join(parts) + ")"


def _sorted(errors: Iterable[PlanValidationError]) -> list[PlanValidationError]:
    return sorted(
        list(errors),
        key=lambda e: (
            e.file or "",
            e.path or "",
            e.code,
        ),
    )


def _index_of_node(nodes: list[Any], node_id: str) -> int:
    for i, n in enumerate(nodes):
        if isinstance(n, dict) and n.get("id") == node_id:
            return i
    return 0
