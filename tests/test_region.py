"""Tests for label region scoring and selection."""

import pytest

from nutritionkit.geometry import Rect
from nutritionkit.nutrition.vocabulary import LabelLanguage
from nutritionkit.parsing.region import (
    RegionCandidate,
    fallback_region,
    score_region,
    select_region,
)
from nutritionkit.vision import RectangleObservation, TextBox


def _texts(*texts: str) -> list[TextBox]:
    return [TextBox(text, Rect(0.1, 0.1 * i, 0.3, 0.05)) for i, text in enumerate(texts)]


def _candidate(area: float, *texts: str) -> RegionCandidate:
    return RegionCandidate(
        observation=RectangleObservation.from_rect(Rect(0.1, 0.1, 0.5, 0.5)),
        texts=_texts(*texts),
        area=area,
    )


class TestScoreRegion:
    def test_distinct_keywords(self):
        score = score_region(_texts("Sodium", "SODIUM", "Protein"))
        assert score.language is LabelLanguage.ENGLISH
        assert score.keywords == {"sodium", "protein"}
        assert score.keyword_count == 2

    def test_german(self):
        score = score_region(_texts("Fett", "Salz"))
        assert score.language is LabelLanguage.GERMAN
        assert score.keywords == {"fett", "salz"}

    def test_nothing(self):
        assert score_region(_texts("hello")).keyword_count == 0


class TestSelectRegion:
    def test_most_keywords_wins(self):
        small = _candidate(100, "Sodium")
        large = _candidate(400, "Sodium", "Protein")
        assert select_region([small, large]) is large

    def test_tie_goes_to_smaller_area(self):
        large = _candidate(400, "Sodium")
        small = _candidate(100, "Protein")
        assert select_region([large, small]) is small
        assert select_region([small, large]) is small

    def test_no_keywords(self):
        assert select_region([_candidate(100, "hello"), _candidate(50, "world")]) is None

    def test_empty_candidate_never_wins_on_area(self):
        keyword = _candidate(400, "Sodium")
        empty = _candidate(10, "hello")
        assert select_region([empty, keyword]) is keyword

    def test_no_candidates(self):
        assert select_region([]) is None

    def test_score_filled_in(self):
        best = select_region([_candidate(100, "Fett", "Salz")])
        assert best is not None
        assert best.score.language is LabelLanguage.GERMAN
        assert best.score.keyword_count == 2


class TestFallbackRegion:
    def test_union_of_keyword_fragments(self):
        texts = [
            TextBox("Sodium 240mg", Rect(0.2, 0.2, 0.2, 0.1)),
            TextBox("Protein 3g", Rect(0.2, 0.4, 0.3, 0.1)),
            TextBox("Best before 2025", Rect(0.8, 0.8, 0.1, 0.1)),
        ]
        region = fallback_region(texts, LabelLanguage.ENGLISH)
        assert region.x == pytest.approx(0.185)
        assert region.y == pytest.approx(0.185)
        assert region.width == pytest.approx(0.33)
        assert region.height == pytest.approx(0.33)

    def test_clamped_to_image(self):
        texts = [TextBox("Sodium", Rect(0.0, 0.0, 1.0, 1.0))]
        region = fallback_region(texts, LabelLanguage.ENGLISH)
        assert region == Rect(0.0, 0.0, 1.0, 1.0)

    def test_custom_expansion(self):
        texts = [TextBox("Sodium", Rect(0.4, 0.4, 0.2, 0.2))]
        region = fallback_region(texts, LabelLanguage.ENGLISH, expansion=2.0)
        assert region.x == pytest.approx(0.3)
        assert region.width == pytest.approx(0.4)

    def test_no_keywords(self):
        assert fallback_region(_texts("hello"), LabelLanguage.ENGLISH) is None

    def test_uses_given_language(self):
        texts = [TextBox("Fett 3 g", Rect(0.2, 0.2, 0.2, 0.1))]
        assert fallback_region(texts, LabelLanguage.ENGLISH) is None
        assert fallback_region(texts, LabelLanguage.GERMAN) is not None
