from __future__ import annotations

from dataclasses import dataclass
from typing import get_args

from idea_planner.core.model import NodeCategory, Plan


CATEGORY_ORDER: tuple[str, ...] = get_args(NodeCategory)


def summarize_plan(plan: Plan) -> str:
    tags = plan.tags.active() if plan.tags is not None else []
    lines = [
        f"OK: {len(plan.nodes)} nodes in {len(plan.phases)} phases",
        f"Idea: {plan.idea_text}",
        f"Description: {plan.description}",
        "Tags: " + (", ".join(tags) if tags else "(none)"),
        f"Timeline: {plan.timeline_estimate}",
        f"Budget: {plan.budget_estimate}",
        "Team: " + ", ".join(plan.team_roles),
    ]
    for phase in plan.phases:
        lines.append(f"Phase {phase.index + 1}: {phase.name}")
        for n in phase.nodes:
            lines.append(f"  - {n.id}: {n.title} [{n.priority}, {n.estimated_time}]")
    lines.append("Tech stack: " + ", ".join(plan.tech_stack))
    return "\n".join(lines)


@dataclass(frozen=True)
class CategoryTools:
    node_count: int
    tools: list[tuple[str, int]]


def tool_usage(plan: Plan) -> dict[str, CategoryTools]:
    """Per category, its node count and each tool with the number of its nodes using it.

    Every category is listed in canonical order, including ones with no nodes
    (node_count 0, no tools); tools keep first-seen order.
    """

    out: dict[str, CategoryTools] = {}
    for category in CATEGORY_ORDER:
        category_nodes = [n for n in plan.nodes if n.category == category]
        counts: dict[str, int] = {}
        for n in category_nodes:
            for tool in dict.fromkeys(n.tools):
                counts[tool] = counts.get(tool, 0) + 1
        out[category] = CategoryTools(node_count=len(category_nodes), tools=list(counts.items()))
    return out
