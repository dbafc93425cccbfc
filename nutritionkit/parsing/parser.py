"""Spatial matcher: pair label tokens with value tokens on the same row.

Labels are visited in descending precedence so that the most reliable ones
get first pick of nearby values. Precedence is also the tie-breaker between
candidate values; distance only decides among equal-precedence candidates.
"""

from __future__ import annotations

import math
import uuid
from collections.abc import Callable, Iterable

from ..nutrition.items import KnownLabel, NutritionItem
from ..nutrition.label import NutritionLabel
from ..nutrition.units import Energy, NutritionAmount, ServingAmount, ServingSize, Unitless
from ..nutrition.vocabulary import LabelLanguage
from ..vision import TextBox
from .lexer import Lexer
from .tokens import (
    AmountValue,
    CategorizedToken,
    KnownLabelText,
    NutritionFactLabel,
    UncategorizedText,
)

# A candidate is on the same row when its vertical center is within this
# fraction of the label's box height.
ROW_TOLERANCE = 0.5

# Calories may sit anywhere near their label (e.g. large headline figures).
CALORIES_FALLBACK_MAX_DISTANCE = 0.5

_ENERGY_ITEMS = (NutritionItem.CALORIES, NutritionItem.CALORIES_FROM_FAT)

TokenPredicate = Callable[[CategorizedToken], bool]


def _distance(a: CategorizedToken, b: CategorizedToken) -> float:
    return (a.box.center - b.box.center).magnitude


class LabelParser:
    """Assemble a ``NutritionLabel`` from one region's tokens.

    Usage:
        parser = LabelParser.from_text_boxes(fragments, LabelLanguage.ENGLISH)
        label = parser.parse()
    """

    def __init__(self, tokens: Iterable[CategorizedToken], language: LabelLanguage) -> None:
        self.tokens = list(tokens)
        self.language = language

    @classmethod
    def from_text_boxes(cls, fragments: Iterable[TextBox], language: LabelLanguage) -> LabelParser:
        tokens: list[CategorizedToken] = []
        for fragment in fragments:
            tokens.extend(Lexer(fragment, language).tokenize())
        return cls(tokens, language)

    def find_on_same_row(
        self,
        segment: CategorizedToken,
        *,
        leading: bool,
        trailing: bool,
        max_distance: float = math.inf,
        where: TokenPredicate,
    ) -> CategorizedToken | None:
        """Closest token on ``segment``'s row that satisfies ``where``.

        ``leading`` admits tokens starting left of the segment, ``trailing``
        tokens starting right of it. A farther candidate replaces the current
        best when its precedence is higher; a nearer one never displaces a
        best of higher precedence.
        """
        max_y_distance = segment.box.height * ROW_TOLERANCE

        closest: CategorizedToken | None = None
        closest_distance = math.inf
        closest_precedence = 0

        for other in self.tokens:
            if not where(other):
                continue

            y_distance = abs(other.box.mid_y - segment.box.mid_y)
            if not segment.same_fragment(other) and y_distance > max_y_distance:
                continue

            x_distance = other.box.min_x - segment.box.min_x
            if not leading and x_distance < 0:
                continue
            if not trailing and x_distance > 0:
                continue

            distance = _distance(segment, other)
            if not (distance < closest_distance or closest_precedence < other.precedence):
                continue
            if distance > max_distance:
                continue
            if closest is not None and closest.precedence > other.precedence:
                continue

            closest = other
            closest_distance = distance
            closest_precedence = other.precedence

        return closest

    def find_close_by(
        self,
        segment: CategorizedToken,
        *,
        max_distance: float = math.inf,
        where: TokenPredicate,
    ) -> CategorizedToken | None:
        """Closest token anywhere, with the same precedence rule as above."""
        closest: CategorizedToken | None = None
        closest_distance = math.inf
        closest_precedence = 0

        for other in self.tokens:
            if not where(other):
                continue

            distance = _distance(segment, other)
            if not (distance < closest_distance or closest_precedence < other.precedence):
                continue
            if distance > max_distance:
                continue
            if closest is not None and closest.precedence > other.precedence:
                continue

            closest = other
            closest_distance = distance
            closest_precedence = other.precedence

        return closest

    def _has_incl_prefix(self, token: CategorizedToken) -> bool:
        """Whether "incl." precedes an added-sugar label on its row."""
        if token.leading:
            return True
        found = self.find_on_same_row(
            token,
            leading=True,
            trailing=False,
            where=lambda other: (
                isinstance(other.description, UncategorizedText)
                and other.description.text.lower() == "incl."
            ),
        )
        return found is not None

    def parse(self) -> NutritionLabel:
        """Match every label token to a value and build the label.

        Validity is not checked here; see ``NutritionLabel.is_valid``.
        """
        used: set[uuid.UUID] = set()
        nutrition_facts: dict[NutritionItem, NutritionAmount] = {}
        serving_size: ServingSize | None = None

        def unused_amount(other: CategorizedToken) -> bool:
            return isinstance(other.description, AmountValue) and other.id not in used

        def unused_energy_like(other: CategorizedToken) -> bool:
            return unused_amount(other) and isinstance(
                other.description.amount, (Unitless, Energy)
            )

        for token in sorted(self.tokens, key=lambda t: t.precedence, reverse=True):
            description = token.description
            match description:
                case NutritionFactLabel():
                    pass
                case KnownLabelText(label=KnownLabel.SERVING_SIZE):
                    pass
                case _:
                    continue

            # Handle cases like 'incl. 13g added sugar'
            leading = False
            if isinstance(description, NutritionFactLabel) and description.item is NutritionItem.ADDED_SUGAR:
                leading = self._has_incl_prefix(token)

            value = self.find_on_same_row(token, leading=leading, trailing=True, where=unused_amount)

            if (
                value is None
                and isinstance(description, NutritionFactLabel)
                and description.item is NutritionItem.CALORIES
            ):
                value = self.find_close_by(
                    token,
                    max_distance=CALORIES_FALLBACK_MAX_DISTANCE,
                    where=unused_energy_like,
                )

            if value is None:
                continue

            amount = value.description.amount
            if isinstance(description, NutritionFactLabel):
                item = description.item
                existing = nutrition_facts.get(item)
                if existing is not None and existing.precedence >= amount.precedence:
                    continue
                if item in _ENERGY_ITEMS and isinstance(amount, Unitless):
                    amount = Energy(amount.value)
                nutrition_facts[item] = amount
            else:
                serving_size = ServingAmount(amount)

            used.add(value.id)

        return NutritionLabel(
            language=self.language,
            serving_size=serving_size,
            nutrition_facts=nutrition_facts,
        )


def parse_label(fragments: Iterable[TextBox], language: LabelLanguage) -> NutritionLabel:
    return LabelParser.from_text_boxes(fragments, language).parse()
