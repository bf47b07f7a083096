from __future__ import annotations

from datetime import date, timedelta
from typing import Any

from idea_planner.core.model import Plan


PROJECT_CATEGORY = "Web Development"
PROJECT_DURATION = timedelta(weeks=12)


def to_project_draft(plan: Plan, *, today: date) -> dict[str, Any]:
    """Map a plan onto a new project record with one pending step per node.

    `today` is explicit so the mapping stays deterministic.
    """

    steps: list[dict[str, Any]] = []
    for order, node in enumerate(plan.nodes, start=1):
        steps.append(
            {
                "order": order,
                "node_id": node.id,
                "title": node.title,
                "description": node.description,
                "category": node.category,
                "priority": node.priority,
                "estimated_time": node.estimated_time,
                "phase": plan.phase_index_of(node.id) + 1,
                "status": "pending",
                "dependencies": list(node.dependencies),
            }
        )

    return {
        "title": plan.idea_text,
        "description": plan.description,
        "category": PROJECT_CATEGORY,
        "priority": "high",
        "due_date": (today + PROJECT_DURATION).isoformat(),
        "technologies": list(plan.tech_stack),
        "team": list(plan.team_roles),
        "budget": plan.budget_estimate,
        "time_spent": "0 hours",
        "estimated_completion": plan.timeline_estimate,
        "progress": 0,
        "status": "planning",
        "steps_completed": 0,
        "total_steps": len(plan.nodes),
        "steps": steps,
    }
