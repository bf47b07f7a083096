from __future__ import annotations

from idea_planner.core.model import PlanNode


IDEA_PLACEHOLDER = "{idea}"


def render_prompt(template: str, idea: str) -> str:
    # Literal replace: idea text may itself contain braces.
    return template.replace(IDEA_PLACEHOLDER, idea)


def render_node_prompts(node: PlanNode, idea: str) -> list[str]:
    return [render_prompt(t, idea) for t in node.prompts]
