from __future__ import annotations

import json
import logging
from typing import Any, Optional, Sequence

import yaml

from idea_planner.core.catalog.node_catalog import build_nodes, check_integrity
from idea_planner.core.classify.keyword_classifier import FeatureClassifier, KeywordClassifier
from idea_planner.core.errors import InvalidInputError
from idea_planner.core.model import FeatureTags, Phase, Plan, PlanNode
from idea_planner.core.schedule.phase_scheduler import DEFAULT_PHASE_COUNT, schedule_phases
from idea_planner.core.stack.tech_stack import infer_tech_stack

logger = logging.getLogger(__name__)


DEFAULT_TIMELINE = "8-12 weeks"
DEFAULT_BUDGET = "$15,000 - $50,000"
DEFAULT_TEAM: tuple[str, ...] = (
    "Frontend Developer",
    "Backend Developer",
    "UI/UX Designer",
    "DevOps Engineer",
)


def synthesize(
    idea_text: str,
    description: Optional[str] = None,
    *,
    classifier: Optional[FeatureClassifier] = None,
    phase_count: int = DEFAULT_PHASE_COUNT,
) -> Plan:
    """Turn an idea into a complete development plan.

    Raises InvalidInputError when the idea is empty or whitespace-only, and
    IntegrityError when the generated node graph does not hold together.
    Neither case returns a partial plan.
    """

    if not isinstance(idea_text, str) or not idea_text.strip():
        raise InvalidInputError(
            code="E_EMPTY_IDEA",
            message="idea text is required and must be a non-empty string",
            path="idea_text",
        )
    idea = idea_text.strip()

    tags = (classifier or KeywordClassifier()).classify(idea)
    nodes = build_nodes(tags)
    check_integrity(nodes)
    phases = schedule_phases(nodes, phase_count=phase_count)
    tech_stack = infer_tech_stack(tags)

    logger.debug(
        "synthesized plan: nodes=%d phases=%s stack=%d",
        len(nodes),
        [len(p.nodes) for p in phases],
        len(tech_stack),
    )

    return assemble_plan(
        idea_text=idea,
        description=description,
        tags=tags,
        nodes=nodes,
        phases=phases,
        tech_stack=tech_stack,
    )


def assemble_plan(
    *,
    idea_text: str,
    description: Optional[str],
    tags: FeatureTags,
    nodes: Sequence[PlanNode],
    phases: Sequence[Phase],
    tech_stack: Sequence[str],
) -> Plan:
    """Aggregate the pipeline outputs and fill in default estimates."""

    desc = description.strip() if isinstance(description, str) else ""
    return Plan(
        idea_text=idea_text,
        description=desc or f"A comprehensive {idea_text} application",
        nodes=tuple(nodes),
        tech_stack=tuple(tech_stack),
        timeline_estimate=DEFAULT_TIMELINE,
        budget_estimate=DEFAULT_BUDGET,
        team_roles=DEFAULT_TEAM,
        phases=tuple(phases),
        tags=tags,
    )


def plan_to_dict(plan: Plan) -> dict[str, Any]:
    out: dict[str, Any] = {
        "idea_text": plan.idea_text,
        "description": plan.description,
        "tags": plan.tags.active() if plan.tags is not None else [],
        "nodes": [_node_to_dict(n) for n in plan.nodes],
        "tech_stack": list(plan.tech_stack),
        "timeline_estimate": plan.timeline_estimate,
        "budget_estimate": plan.budget_estimate,
        "team_roles": list(plan.team_roles),
        "phases": [
            {"index": p.index, "name": p.name, "node_ids": p.node_ids} for p in plan.phases
        ],
    }
    return out


def dump_plan_yaml(plan: dict[str, Any], path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(plan, f, sort_keys=False, default_flow_style=False, allow_unicode=True)


def dump_plan_json(plan: dict[str, Any], path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(plan, f, indent=2, ensure_ascii=False)
        f.write("\n")


def _node_to_dict(n: PlanNode) -> dict[str, Any]:
    return {
        "id": n.id,
        "title": n.title,
        "description": n.description,
        "category": n.category,
        "priority": n.priority,
        "estimated_time": n.estimated_time,
        "complexity": n.complexity,
        "dependencies": list(n.dependencies),
        "tools": list(n.tools),
        "prompts": list(n.prompts),
        "resources": list(n.resources),
    }
