"""Categorized lexer tokens."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Union

from ..geometry import Rect
from ..nutrition.items import KnownLabel, NutritionItem
from ..nutrition.units import NutritionAmount, ServingSize
from ..vision import TextBox


class InvariantViolation(RuntimeError):
    """The keyword tables and the lexer state machine disagree.

    Signals a defect in the dictionaries or the lexer, never bad OCR input,
    so it is not caught inside the pipeline.
    """


@dataclass(frozen=True)
class NutritionFactLabel:
    item: NutritionItem


@dataclass(frozen=True)
class AmountValue:
    amount: NutritionAmount


@dataclass(frozen=True)
class ServingSizeValue:
    value: ServingSize


@dataclass(frozen=True)
class KnownLabelText:
    label: KnownLabel


@dataclass(frozen=True)
class UncategorizedText:
    text: str


TextDescription = Union[
    NutritionFactLabel, AmountValue, ServingSizeValue, KnownLabelText, UncategorizedText
]


@dataclass(frozen=True)
class CategorizedToken:
    description: TextDescription | None
    source: TextBox
    box: Rect
    # "incl." precedes this label inside its own fragment
    leading: bool = False
    id: uuid.UUID = field(default_factory=uuid.uuid4, compare=False)

    @property
    def precedence(self) -> int:
        match self.description:
            case NutritionFactLabel(item=item):
                if item in (NutritionItem.CALORIES, NutritionItem.CALORIES_FROM_FAT):
                    return 9
                return 8
            case ServingSizeValue() | KnownLabelText():
                return 8
            case UncategorizedText():
                return 5
            case AmountValue(amount=amount):
                return amount.precedence
        return 0

    def same_fragment(self, other: CategorizedToken) -> bool:
        return self.source.id == other.source.id
