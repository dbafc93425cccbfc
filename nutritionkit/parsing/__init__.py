"""OCR text to nutrition label: tokenizer, spatial matcher, region and skew heuristics."""

from .language import detect_language, score_languages
from .lexer import Lexer, tokenize
from .parser import LabelParser, parse_label
from .region import RegionCandidate, RegionScore, fallback_region, score_region, select_region
from .skew import estimate_skew
from .tokens import (
    AmountValue,
    CategorizedToken,
    InvariantViolation,
    KnownLabelText,
    NutritionFactLabel,
    ServingSizeValue,
    UncategorizedText,
)

__all__ = [
    "detect_language",
    "score_languages",
    "Lexer",
    "tokenize",
    "LabelParser",
    "parse_label",
    "RegionCandidate",
    "RegionScore",
    "score_region",
    "select_region",
    "fallback_region",
    "estimate_skew",
    "CategorizedToken",
    "InvariantViolation",
    "NutritionFactLabel",
    "AmountValue",
    "ServingSizeValue",
    "KnownLabelText",
    "UncategorizedText",
]
