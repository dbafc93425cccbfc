"""Parsed nutrition label and food item records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .items import NutritionItem
from .units import NutritionAmount, ServingSize
from .vocabulary import LabelLanguage

# serving size (1 point) + one point per nutrition fact
MIN_VALID_SCORE = 5


@dataclass(frozen=True)
class NutritionLabel:
    language: LabelLanguage
    serving_size: ServingSize | None = None
    # dicts are unhashable; the facts take part in equality only
    nutrition_facts: dict[NutritionItem, NutritionAmount] = field(default_factory=dict, hash=False)

    @property
    def score(self) -> int:
        return (1 if self.serving_size is not None else 0) + len(self.nutrition_facts)

    @property
    def is_valid(self) -> bool:
        """Whether enough was read to trust the label.

        Rejects spurious partial detections such as a single "fat 5g" row.
        """
        return self.score >= MIN_VALID_SCORE

    def to_dict(self) -> dict[str, Any]:
        return {
            "language": self.language.value,
            "serving_size": self.serving_size.to_dict() if self.serving_size else None,
            "nutrition_facts": {
                item.value: amount.to_dict()
                for item, amount in self.nutrition_facts.items()
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> NutritionLabel:
        serving = data.get("serving_size")
        return cls(
            language=LabelLanguage(data["language"]),
            serving_size=ServingSize.from_dict(serving) if serving else None,
            nutrition_facts={
                NutritionItem(key): NutritionAmount.from_dict(value)
                for key, value in data.get("nutrition_facts", {}).items()
            },
        )

    def display(self) -> str:
        """Human-readable summary, one fact per line in enum order."""
        lines = [f"Language: {self.language.value}"]
        if self.serving_size is not None:
            lines.append(f"Serving size: {self.serving_size.describe()}")
        for item in NutritionItem:
            amount = self.nutrition_facts.get(item)
            if amount is None:
                continue
            lines.append(f"  {item.display_name:<22} {amount.describe(item)}")
        return "\n".join(lines)


@dataclass(frozen=True)
class FoodItem:
    product_name: str | None = None
    nutrition: NutritionLabel | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "product_name": self.product_name,
            "nutrition": self.nutrition.to_dict() if self.nutrition else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FoodItem:
        nutrition = data.get("nutrition")
        return cls(
            product_name=data.get("product_name"),
            nutrition=NutritionLabel.from_dict(nutrition) if nutrition else None,
        )
