from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Literal, Optional


NodeCategory = Literal[
    "architecture", "ui", "backend", "database", "security", "deployment", "testing", "marketing"
]
NodePriority = Literal["critical", "high", "medium", "low"]
NodeComplexity = Literal["simple", "moderate", "complex"]


@dataclass(frozen=True)
class FeatureTags:
    is_web_app: bool = False
    is_mobile_app: bool = False
    is_ecommerce: bool = False
    is_social: bool = False
    is_ai: bool = False

    @classmethod
    def names(cls) -> list[str]:
        return [f.name for f in fields(cls)]

    def active(self) -> list[str]:
        return [name for name in self.names() if getattr(self, name)]


@dataclass(frozen=True)
class PlanNode:
    id: str
    title: str
    description: str
    category: NodeCategory
    priority: NodePriority
    estimated_time: str
    complexity: NodeComplexity
    dependencies: tuple[str, ...] = ()
    tools: tuple[str, ...] = ()
    prompts: tuple[str, ...] = ()  # templates with an {idea} placeholder
    resources: tuple[str, ...] = ()


@dataclass(frozen=True)
class Phase:
    index: int
    name: str
    nodes: tuple[PlanNode, ...]

    @property
    def node_ids(self) -> list[str]:
        return [n.id for n in self.nodes]


@dataclass(frozen=True)
class Plan:
    idea_text: str
    description: str
    nodes: tuple[PlanNode, ...]
    tech_stack: tuple[str, ...]
    timeline_estimate: str
    budget_estimate: str
    team_roles: tuple[str, ...]
    phases: tuple[Phase, ...]
    tags: Optional[FeatureTags] = None

    def node(self, node_id: str) -> PlanNode:
        for n in self.nodes:
            if n.id == node_id:
                return n
        raise KeyError(node_id)

    def phase_index_of(self, node_id: str) -> int:
        for phase in self.phases:
            if node_id in phase.node_ids:
                return phase.index
        raise KeyError(node_id)
