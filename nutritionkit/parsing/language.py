"""Label language detection from keyword hits."""

from __future__ import annotations

from collections.abc import Iterable

from ..nutrition.vocabulary import FALLBACK_LANGUAGE, KEYWORDS_BY_LANGUAGE, LabelLanguage
from ..vision import TextBox


def score_languages(fragments: Iterable[TextBox]) -> dict[LabelLanguage, int]:
    """Count keyword hits per language.

    A fragment scores one point for every keyword of a language that occurs
    in its lower-cased text.
    """
    scores = {language: 0 for language in LabelLanguage}
    for fragment in fragments:
        search_text = fragment.text.lower()
        for language, keywords in KEYWORDS_BY_LANGUAGE.items():
            scores[language] += sum(1 for keyword in keywords if keyword in search_text)
    return scores


def detect_language(
    fragments: Iterable[TextBox], default: LabelLanguage = FALLBACK_LANGUAGE
) -> LabelLanguage:
    """Return the best-scoring language.

    Ties go to the language scanned first; no hits at all give ``default``.
    """
    best = default
    best_score = 0
    for language, score in score_languages(fragments).items():
        if score > best_score:
            best = language
            best_score = score
    return best
