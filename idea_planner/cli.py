from __future__ import annotations

import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Any, NoReturn, Optional

import typer
import yaml

from idea_planner.core.catalog.node_catalog import BASELINE_NODES, CONDITIONAL_NODES
from idea_planner.core.classify.keyword_classifier import KeywordClassifier
from idea_planner.core.classify.keyword_config import KEYWORDS_ENV_VAR, KeywordConfigError, load_and_merge
from idea_planner.core.errors import IntegrityError, InvalidInputError, PlanError, PlanLoadError, PlanValidationError
from idea_planner.core.io.load_plan import load_plan
from idea_planner.core.model import Plan
from idea_planner.core.prompts.render_prompts import render_node_prompts
from idea_planner.core.report.plan_report import summarize_plan, tool_usage
from idea_planner.core.report.project_draft import to_project_draft
from idea_planner.core.synthesize.synthesize_plan import dump_plan_json, dump_plan_yaml, plan_to_dict, synthesize
from idea_planner.core.validate.validate_plan import summarize_validation, validate_plan

app = typer.Typer(add_completion=False, no_args_is_help=True)

KEYWORDS_FILE_HELP = f"Optional YAML file to override classifier keywords (env: {KEYWORDS_ENV_VAR})"


@app.callback()
def _callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr"),
) -> None:
    """Idea planner CLI."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(levelname)s %(name)s: %(message)s",
        )


@app.command("synthesize")
def synthesize_cmd(
    idea: str = typer.Argument(..., help="Free-text description of the app idea"),
    description: Optional[str] = typer.Option(None, "--description", help="Optional one-line description"),
    format: str = typer.Option("text", "--format", help="Output format: text|json|yaml"),
    out: Optional[str] = typer.Option(
        None, "--out", help="Write the plan to this file (.json writes JSON, anything else YAML)"
    ),
    phases: int = typer.Option(3, "--phases", help="Number of delivery phases"),
    keywords_file: Optional[str] = typer.Option(None, "--keywords-file", envvar=KEYWORDS_ENV_VAR, help=KEYWORDS_FILE_HELP),
) -> None:
    """Synthesize a phased development plan from an idea."""
    if format not in ("text", "json", "yaml"):
        _fail(
            PlanValidationError(
                code="E_SYNTHESIZE_UNKNOWN_FORMAT",
                message=f"unknown format: {format} (choose one of: text, json, yaml)",
                path="format",
            ),
            exit_code=2,
        )
    if phases < 1:
        _fail(
            PlanValidationError(
                code="E_SYNTHESIZE_INVALID_PHASES",
                message=f"--phases must be >= 1, got {phases}",
                path="phases",
            ),
            exit_code=2,
        )

    plan = _synthesize_or_exit(idea, description, keywords_file, phase_count=phases)
    plan_dict = plan_to_dict(plan)

    if out is not None:
        try:
            _write_plan(out, plan_dict)
        except OSError as e:
            _fail(
                PlanLoadError(code="E_FILE_WRITE", message=f"could not write plan: {e}", file=out, path="out"),
                exit_code=1,
            )
        typer.echo(f"OK: wrote plan to {out}")
        return

    if format == "json":
        typer.echo(json.dumps(plan_dict, indent=2, ensure_ascii=False))
    elif format == "yaml":
        typer.echo(yaml.safe_dump(plan_dict, sort_keys=False, default_flow_style=False, allow_unicode=True), nl=False)
    else:
        typer.echo(summarize_plan(plan))
        typer.echo("Tools:")
        for category, usage in tool_usage(plan).items():
            tools = ", ".join(f"{t} ({n})" for t, n in usage.tools) or "-"
            typer.echo(f"  {category} [{usage.node_count} nodes]: {tools}")


@app.command("validate")
def validate(
    path: str = typer.Argument(..., help="Path to a saved plan file (.yaml/.yml/.json)"),
    format: str = typer.Option("text", "--format", help="Output format: text|json"),
) -> None:
    """Validate a saved plan file against the plan invariants."""
    if format not in ("text", "json"):
        _fail(
            PlanValidationError(
                code="E_VALIDATE_UNKNOWN_FORMAT",
                message=f"unknown format: {format} (choose one of: text, json)",
                path="format",
            ),
            exit_code=2,
        )

    def _to_item(e: PlanError) -> dict:
        source = "load" if isinstance(e, PlanLoadError) else "validate"
        return {
            "code": e.code,
            "message": e.message,
            "file": e.file,
            "path": e.path,
            "severity": "error",
            "source": source,
        }

    def _emit_json(ok: bool, *, exit_code: int, errors: list[PlanError], summary: dict | None) -> None:
        payload = {
            "tool": "idea-planner",
            "command": "validate",
            "ok": ok,
            "error_count": len(errors),
            "errors": [_to_item(e) for e in errors],
            "summary": summary,
        }
        typer.echo(json.dumps(payload, indent=2, sort_keys=True))
        raise typer.Exit(code=exit_code)

    try:
        raw = load_plan(path)
    except PlanLoadError as e:
        if format == "json":
            _emit_json(False, exit_code=1, errors=[e], summary=None)
        _print_errors([e])
        raise typer.Exit(code=1)

    plan, errors = validate_plan(raw)
    if errors:
        if format == "json":
            _emit_json(False, exit_code=2, errors=list(errors), summary=None)
        _print_errors(list(errors))
        raise typer.Exit(code=2)

    assert plan is not None

    if format == "text":
        typer.echo(summarize_validation(plan))
        return

    summary = {
        "node_count": len(plan.nodes),
        "phase_sizes": {p.name: len(p.nodes) for p in plan.phases},
        "tech_stack": list(plan.tech_stack),
    }
    _emit_json(True, exit_code=0, errors=[], summary=summary)


@app.command("prompts")
def prompts(
    idea: str = typer.Argument(..., help="Free-text description of the app idea"),
    node: Optional[str] = typer.Option(None, "--node", help="Only print prompts for this node id"),
    keywords_file: Optional[str] = typer.Option(None, "--keywords-file", envvar=KEYWORDS_ENV_VAR, help=KEYWORDS_FILE_HELP),
) -> None:
    """Print ready-to-copy prompts with the idea filled in."""
    plan = _synthesize_or_exit(idea, None, keywords_file)

    if node is not None:
        try:
            selected = [plan.node(node)]
        except KeyError:
            _fail(
                PlanValidationError(
                    code="E_PROMPTS_UNKNOWN_NODE",
                    message=f"--node references unknown id: {node} (choose one of: {', '.join(n.id for n in plan.nodes)})",
                    path="node",
                ),
                exit_code=2,
            )
    else:
        selected = list(plan.nodes)

    for n in selected:
        typer.echo(f"## {n.id}: {n.title}")
        for p in render_node_prompts(n, plan.idea_text):
            typer.echo(f"- {p}")


@app.command("project")
def project(
    idea: str = typer.Argument(..., help="Free-text description of the app idea"),
    description: Optional[str] = typer.Option(None, "--description", help="Optional one-line description"),
    today: Optional[str] = typer.Option(None, "--today", help="Start date (YYYY-MM-DD), defaults to today"),
    format: str = typer.Option("json", "--format", help="Output format: json|yaml"),
    keywords_file: Optional[str] = typer.Option(None, "--keywords-file", envvar=KEYWORDS_ENV_VAR, help=KEYWORDS_FILE_HELP),
) -> None:
    """Print a project record (with steps) ready to hand to a project store."""
    if format not in ("json", "yaml"):
        _fail(
            PlanValidationError(
                code="E_PROJECT_UNKNOWN_FORMAT",
                message=f"unknown format: {format} (choose one of: json, yaml)",
                path="format",
            ),
            exit_code=2,
        )

    start = date.today()
    if today is not None:
        try:
            start = date.fromisoformat(today)
        except ValueError:
            _fail(
                PlanValidationError(
                    code="E_PROJECT_INVALID_DATE",
                    message=f"--today must be an ISO date (YYYY-MM-DD), got {today}",
                    path="today",
                ),
                exit_code=2,
            )

    plan = _synthesize_or_exit(idea, description, keywords_file)
    draft = to_project_draft(plan, today=start)

    if format == "json":
        typer.echo(json.dumps(draft, indent=2, ensure_ascii=False))
    else:
        typer.echo(yaml.safe_dump(draft, sort_keys=False, default_flow_style=False, allow_unicode=True), nl=False)


@app.command("keywords")
def keywords(
    keywords_file: Optional[str] = typer.Option(None, "--keywords-file", envvar=KEYWORDS_ENV_VAR, help=KEYWORDS_FILE_HELP),
) -> None:
    """List the classifier keywords per feature tag."""
    keywords_map = _load_keywords_or_exit(keywords_file)
    typer.echo("Keywords:")
    for tag, words in keywords_map.items():
        typer.echo(f"- {tag}: {', '.join(words)}")


@app.command("catalog")
def catalog() -> None:
    """List the baseline and conditional node catalog."""
    typer.echo("Baseline:")
    for n in BASELINE_NODES:
        deps = ", ".join(n.dependencies) or "-"
        typer.echo(f"- {n.id}: {n.title} (depends on: {deps})")
    typer.echo("Conditional:")
    for tag, n in CONDITIONAL_NODES:
        deps = ", ".join(n.dependencies) or "-"
        typer.echo(f"- {n.id} [{tag}]: {n.title} (depends on: {deps})")


def _synthesize_or_exit(
    idea: str, description: Optional[str], keywords_file: Optional[str], *, phase_count: int = 3
) -> Plan:
    classifier = KeywordClassifier(_load_keywords_or_exit(keywords_file))
    try:
        return synthesize(idea, description, classifier=classifier, phase_count=phase_count)
    except InvalidInputError as e:
        _fail(e, exit_code=2)
    except IntegrityError as e:
        typer.echo("internal error: generated plan failed integrity checks", err=True)
        _fail(e, exit_code=3)


def _load_keywords_or_exit(keywords_file: Optional[str]) -> dict[str, list[str]]:
    try:
        return load_and_merge(keywords_file)
    except FileNotFoundError:
        _fail(
            PlanLoadError(
                code="E_KEYWORD_FILE_NOT_FOUND",
                message=f"keyword file not found: {keywords_file}",
                path="keywords_file",
            ),
            exit_code=1,
        )
    except (OSError, UnicodeDecodeError) as e:
        _fail(
            PlanLoadError(
                code="E_KEYWORD_FILE_READ",
                message=f"could not read keyword file: {e}",
                file=keywords_file,
                path="keywords_file",
            ),
            exit_code=1,
        )
    except (KeywordConfigError, yaml.YAMLError) as e:
        _fail(
            PlanValidationError(
                code="E_KEYWORD_FILE_INVALID",
                message=str(e),
                file=keywords_file,
                path="keywords_file",
            ),
            exit_code=2,
        )


def _write_plan(path: str, plan_dict: dict[str, Any]) -> None:
    p = Path(path)
    if str(p.parent) not in (".", ""):
        p.parent.mkdir(parents=True, exist_ok=True)
    if p.suffix.lower() == ".json":
        dump_plan_json(plan_dict, str(p))
    else:
        dump_plan_yaml(plan_dict, str(p))


def _fail(error: PlanError, *, exit_code: int) -> NoReturn:
    _print_errors([error])
    raise typer.Exit(code=exit_code)


def _print_errors(errors: list[PlanError]) -> None:
    errors_sorted = sorted(errors, key=lambda e: (e.file or "", e.path or "", e.code))
    for e in errors_sorted:
        typer.echo(str(e), err=True)


def main() -> None:
    app(prog_name="idea-planner")


cli = typer.main.get_command(app)

if __name__ == "__main__":
    main()
