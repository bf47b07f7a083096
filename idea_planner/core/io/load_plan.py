from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from idea_planner.core.errors import PlanLoadError


PLAN_KEYS: tuple[str, ...] = (
    "idea_text",
    "description",
    "tags",
    "nodes",
    "tech_stack",
    "timeline_estimate",
    "budget_estimate",
    "team_roles",
    "phases",
)

_PARSERS = {
    ".yaml": ("E_YAML_PARSE", yaml.safe_load),
    ".yml": ("E_YAML_PARSE", yaml.safe_load),
    ".json": ("E_JSON_PARSE", json.loads),
}


def load_plan(path: str) -> dict[str, Any]:
    """Read a plan previously written by `synthesize --out`.

    The result carries exactly the plan fields (absent ones as None) plus
    `__file__`, so validation errors can point back at the source file.
    Field types are left untouched; `validate_plan` judges them.
    """

    p = Path(path)
    if not p.is_file():
        raise PlanLoadError(code="E_FILE_NOT_FOUND", message="file does not exist", file=str(p))

    parser = _PARSERS.get(p.suffix.lower())
    if parser is None:
        raise PlanLoadError(
            code="E_UNSUPPORTED_FORMAT",
            message=f"supported formats are {', '.join(sorted(_PARSERS))}",
            file=str(p),
        )
    parse_code, parse = parser

    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise PlanLoadError(code="E_FILE_READ", message=str(e), file=str(p)) from e

    try:
        data = parse(text)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise PlanLoadError(code=parse_code, message=str(e), file=str(p)) from e

    if not isinstance(data, dict):
        raise PlanLoadError(
            code="E_INVALID_TOP_LEVEL",
            message="a saved plan must be a mapping of plan fields",
            file=str(p),
        )

    plan = {key: data.get(key) for key in PLAN_KEYS}
    plan["__file__"] = str(p)
    return plan
