from __future__ import annotations

import logging
from typing import Protocol

from idea_planner.core.classify.keyword_config import DEFAULT_KEYWORDS
from idea_planner.core.model import FeatureTags

logger = logging.getLogger(__name__)


class FeatureClassifier(Protocol):
    def classify(self, text: str) -> FeatureTags: ...


class KeywordClassifier:
    """Tag an idea by case-insensitive substring matches.

    Each tag is tested on its own; several tags may fire for one idea and an
    idea matching nothing yields all-false tags.
    """

    def __init__(self, keywords: dict[str, list[str]] | None = None) -> None:
        table = keywords if keywords is not None else DEFAULT_KEYWORDS
        self._keywords: dict[str, tuple[str, ...]] = {
            tag: tuple(w.lower() for w in table.get(tag, [])) for tag in FeatureTags.names()
        }

    @property
    def keywords(self) -> dict[str, tuple[str, ...]]:
        return dict(self._keywords)

    def classify(self, text: str) -> FeatureTags:
        normalized = text.lower()
        flags = {
            tag: any(word in normalized for word in words)
            for tag, words in self._keywords.items()
        }
        tags = FeatureTags(**flags)
        logger.debug("classified idea: tags=%s", tags.active())
        return tags
