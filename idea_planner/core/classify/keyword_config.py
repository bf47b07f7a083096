from __future__ import annotations

from pathlib import Path

import yaml

from idea_planner.core.model import FeatureTags


DEFAULT_KEYWORDS: dict[str, list[str]] = {
    "is_web_app": ["web", "website", "platform", "marketplace", "ecommerce"],
    "is_mobile_app": ["mobile", "app", "ios", "android"],
    "is_ecommerce": ["shop", "store", "marketplace", "ecommerce"],
    "is_social": ["social", "community", "network"],
    # Plain substring match: "ai" also fires inside words like "email".
    "is_ai": ["ai", "machine learning", "intelligent"],
}

KEYWORDS_ENV_VAR = "IDEA_PLANNER_KEYWORDS_FILE"


class KeywordConfigError(ValueError):
    pass


def load_keyword_file(path: str | Path) -> dict[str, list[str]]:
    """Load keyword overrides from a YAML file.

    Format:
      <tag>: ["keyword1", "keyword2", ...]

    Tags must be FeatureTags field names. Keywords are lowercased.
    """
    p = Path(path)
    raw = yaml.safe_load(p.read_text(encoding="utf-8"))
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise KeywordConfigError("keyword file must be a mapping of tag -> list[str]")

    known = set(FeatureTags.names())
    out: dict[str, list[str]] = {}
    for k, v in raw.items():
        if not isinstance(k, str) or not k.strip():
            raise KeywordConfigError("tag names must be non-empty strings")
        tag = k.strip()
        if tag not in known:
            raise KeywordConfigError(f"unknown tag '{tag}' (choose one of: {', '.join(sorted(known))})")
        if not isinstance(v, list) or not v:
            raise KeywordConfigError(f"tag '{tag}' must map to a non-empty list")
        keywords: list[str] = []
        for item in v:
            if not isinstance(item, str) or not item.strip():
                raise KeywordConfigError(f"tag '{tag}' keywords must be non-empty strings")
            keywords.append(item.strip().lower())
        out[tag] = keywords
    return out


def merged_keywords(overrides: dict[str, list[str]] | None = None) -> dict[str, list[str]]:
    """Return DEFAULT_KEYWORDS merged with optional overrides.

    An override replaces the whole keyword list of its tag.
    """
    merged = {tag: list(words) for tag, words in DEFAULT_KEYWORDS.items()}
    if overrides:
        for k, v in overrides.items():
            merged[k] = list(v)
    return merged


def load_and_merge(keyword_file: str | None) -> dict[str, list[str]]:
    if not keyword_file:
        return merged_keywords()
    overrides = load_keyword_file(keyword_file)
    return merged_keywords(overrides)
