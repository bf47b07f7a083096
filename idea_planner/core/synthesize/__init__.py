"""Idea-to-plan synthesis.

`synthesize` is a pure function: the same idea text always yields the same
plan, and nothing here performs I/O or keeps state between calls. Callers own
any loading indicators, caching or persistence.
"""

from idea_planner.core.synthesize.synthesize_plan import assemble_plan, plan_to_dict, synthesize

__all__ = ["assemble_plan", "plan_to_dict", "synthesize"]
