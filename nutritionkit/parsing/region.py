"""Choose which part of an image holds the nutrition label."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from ..geometry import Rect
from ..nutrition.vocabulary import KEYWORDS_BY_LANGUAGE, LabelLanguage
from ..vision import RectangleObservation, TextBox
from .language import detect_language

logger = logging.getLogger(__name__)

DEFAULT_EXPANSION = 1.1


@dataclass(frozen=True)
class RegionScore:
    language: LabelLanguage
    keywords: frozenset[str]

    @property
    def keyword_count(self) -> int:
        return len(self.keywords)


@dataclass
class RegionCandidate:
    """One perspective-corrected candidate and its fast OCR output.

    ``area`` is the corrected image's pixel area; ``image`` is carried along
    untouched for the caller.
    """

    observation: RectangleObservation
    texts: list[TextBox]
    area: float
    image: Any = None
    score: RegionScore | None = field(default=None, compare=False)


def _keywords_in(texts: Iterable[TextBox], language: LabelLanguage) -> set[str]:
    keywords = KEYWORDS_BY_LANGUAGE[language]
    found: set[str] = set()
    for text in texts:
        search_text = text.text.lower()
        found.update(keyword for keyword in keywords if keyword in search_text)
    return found


def score_region(texts: list[TextBox]) -> RegionScore:
    """Detect the language and collect the distinct keywords it finds."""
    language = detect_language(texts)
    return RegionScore(language, frozenset(_keywords_in(texts, language)))


def select_region(candidates: Iterable[RegionCandidate]) -> RegionCandidate | None:
    """Pick the candidate with the most distinct keywords.

    Ties go to the smaller area. Returns None when no candidate contains a
    single keyword. Each returned candidate has ``score`` filled in.
    """
    best: RegionCandidate | None = None
    most_keywords = 0
    smallest_area = float("inf")

    for candidate in candidates:
        candidate.score = score_region(candidate.texts)
        count = candidate.score.keyword_count
        logger.debug(
            "Region %s: %d keywords (%s), area %.0f",
            candidate.observation.bounding_box.to_list(),
            count,
            candidate.score.language.value,
            candidate.area,
        )
        if count == 0:
            continue

        if count > most_keywords or (count == most_keywords and candidate.area < smallest_area):
            best = candidate
            most_keywords = count
            smallest_area = candidate.area

    return best


def fallback_region(
    texts: Iterable[TextBox],
    language: LabelLanguage,
    expansion: float = DEFAULT_EXPANSION,
) -> Rect | None:
    """Union of every fragment holding a keyword, grown by ``expansion``.

    The result is clipped to the unit square. None when nothing matches.
    """
    keywords = KEYWORDS_BY_LANGUAGE[language]
    bounding_box: Rect | None = None

    for text in texts:
        search_text = text.text.lower()
        if not any(keyword in search_text for keyword in keywords):
            continue
        bounding_box = text.box if bounding_box is None else bounding_box.union(text.box)

    if bounding_box is None:
        return None

    region = bounding_box.scaled(expansion).clamped()
    if region.area <= 0:
        return None
    return region
