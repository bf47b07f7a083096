from pathlib import Path

import pytest

from idea_planner.core.classify.keyword_classifier import KeywordClassifier
from idea_planner.core.classify.keyword_config import (
    DEFAULT_KEYWORDS,
    KeywordConfigError,
    load_and_merge,
    load_keyword_file,
    merged_keywords,
)


def test_defaults_without_file():
    assert load_and_merge(None) == DEFAULT_KEYWORDS


def test_file_overrides_replace_whole_tag():
    merged = load_and_merge("examples/keywords.yaml")
    assert merged["is_ai"] == ["machine learning", "intelligent", "llm", "chatbot"]
    assert "friends" in merged["is_social"]
    assert merged["is_web_app"] == DEFAULT_KEYWORDS["is_web_app"]


def test_overrides_change_classification():
    classifier = KeywordClassifier(load_and_merge("examples/keywords.yaml"))
    assert classifier.classify("A chatbot for recipes").is_ai
    assert not classifier.classify("Detailed budget reports").is_ai


def test_merged_keywords_does_not_mutate_defaults():
    merged = merged_keywords({"is_ai": ["robot"]})
    merged["is_social"].append("xyz")
    assert DEFAULT_KEYWORDS["is_ai"] == ["ai", "machine learning", "intelligent"]
    assert "xyz" not in DEFAULT_KEYWORDS["is_social"]


def test_unknown_tag_rejected():
    with pytest.raises(KeywordConfigError, match="unknown tag"):
        load_keyword_file("examples/invalid-keywords.yaml")


def test_empty_list_rejected(tmp_path: Path):
    p = tmp_path / "kw.yaml"
    p.write_text("is_ai: []\n", encoding="utf-8")
    with pytest.raises(KeywordConfigError):
        load_keyword_file(p)


def test_keywords_are_lowercased(tmp_path: Path):
    p = tmp_path / "kw.yaml"
    p.write_text("is_ai:\n  - '  Neural Net '\n", encoding="utf-8")
    assert load_keyword_file(p) == {"is_ai": ["neural net"]}


def test_empty_file_means_no_overrides(tmp_path: Path):
    p = tmp_path / "kw.yaml"
    p.write_text("", encoding="utf-8")
    assert load_keyword_file(p) == {}
