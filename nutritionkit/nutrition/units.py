"""Measurement units and canonical nutrition amounts.

Every amount is stored in a canonical base unit (milligrams, milliliters,
kcal or whole percent) no matter which unit was printed on the label.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar

from .items import NutritionItemCategory

if TYPE_CHECKING:
    from .items import NutritionItem


class UnitKind(str, Enum):
    SOLID = "solid"
    LIQUID = "liquid"
    ENERGY = "energy"
    PERCENT = "percent"


class MeasurementUnit(str, Enum):
    # Solid
    GRAM = "gram"
    MILLIGRAM = "milligram"
    MICROGRAM = "microgram"
    OUNCE = "ounce"

    # Liquid
    LITER = "liter"
    MILLILITER = "milliliter"
    CUP = "cup"
    LIQUID_OUNCE = "liquid_ounce"

    # Other
    PERCENT = "percent"
    KILOCALORIES = "kilocalories"
    KILOJOULES = "kilojoules"

    @property
    def kind(self) -> UnitKind:
        return _UNIT_KINDS[self]

    @property
    def conversion_factor(self) -> float:
        """Multiplier from this unit into its canonical base unit."""
        return _TO_BASE_UNIT[self]

    @property
    def is_solid(self) -> bool:
        return self.kind is UnitKind.SOLID

    @property
    def is_liquid(self) -> bool:
        return self.kind is UnitKind.LIQUID

    @property
    def is_energy(self) -> bool:
        return self.kind is UnitKind.ENERGY

    def normalize(self, amount: float) -> float:
        """Convert ``amount`` of this unit to mg, ml, kcal or percent."""
        return amount * self.conversion_factor


# Unit → base unit (mg for solids, ml for liquids, kcal for energy)
_TO_BASE_UNIT: dict[MeasurementUnit, float] = {
    MeasurementUnit.GRAM: 1000.0,
    MeasurementUnit.MILLIGRAM: 1.0,
    MeasurementUnit.MICROGRAM: 1 / 1000,
    MeasurementUnit.OUNCE: 28_349.0,
    MeasurementUnit.LITER: 1000.0,
    MeasurementUnit.MILLILITER: 1.0,
    MeasurementUnit.CUP: 236.59,
    MeasurementUnit.LIQUID_OUNCE: 29.57,
    MeasurementUnit.PERCENT: 1.0,
    MeasurementUnit.KILOCALORIES: 1.0,
    MeasurementUnit.KILOJOULES: 0.239,
}

_UNIT_KINDS: dict[MeasurementUnit, UnitKind] = {
    MeasurementUnit.GRAM: UnitKind.SOLID,
    MeasurementUnit.MILLIGRAM: UnitKind.SOLID,
    MeasurementUnit.MICROGRAM: UnitKind.SOLID,
    MeasurementUnit.OUNCE: UnitKind.SOLID,
    MeasurementUnit.LITER: UnitKind.LIQUID,
    MeasurementUnit.MILLILITER: UnitKind.LIQUID,
    MeasurementUnit.CUP: UnitKind.LIQUID,
    MeasurementUnit.LIQUID_OUNCE: UnitKind.LIQUID,
    MeasurementUnit.PERCENT: UnitKind.PERCENT,
    MeasurementUnit.KILOCALORIES: UnitKind.ENERGY,
    MeasurementUnit.KILOJOULES: UnitKind.ENERGY,
}


def _format_decimal(value: float, places: int = 1) -> str:
    """Format with up to ``places`` decimals, dropping trailing zeros."""
    text = f"{value:.{places}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


class NutritionAmount:
    """Base class for the amount variants below.

    Precedence orders the variants when the same item is seen twice:
    daily value < unitless < energy/solid/liquid.
    """

    kind: ClassVar[str]
    precedence: ClassVar[int]

    @property
    def magnitude(self) -> float:
        raise NotImplementedError

    def describe(self, item: NutritionItem | None = None) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.describe()

    def to_dict(self) -> dict[str, Any]:
        return {self.kind: self.magnitude}

    @staticmethod
    def from_dict(data: dict[str, Any]) -> NutritionAmount:
        if not data:
            raise ValueError("cannot decode nutrition amount from empty mapping")
        kind, value = next(iter(data.items()))
        match kind:
            case "unitless":
                return Unitless(float(value))
            case "energy":
                return Energy(float(value))
            case "solid":
                return Solid(float(value))
            case "liquid":
                return Liquid(float(value))
            case "daily_value":
                return DailyValue(int(value))
            case _:
                raise ValueError(f"unknown nutrition amount kind: {kind!r}")

    @staticmethod
    def from_unit(amount: float, unit: MeasurementUnit) -> NutritionAmount:
        """Build the canonical amount for ``amount`` printed in ``unit``.

        Percentages round half up, so "2.5%" reads as 3.
        """
        match unit.kind:
            case UnitKind.SOLID:
                return Solid(unit.normalize(amount))
            case UnitKind.LIQUID:
                return Liquid(unit.normalize(amount))
            case UnitKind.ENERGY:
                return Energy(unit.normalize(amount))
            case UnitKind.PERCENT:
                return DailyValue(int(math.floor(amount + 0.5)))
        return Unitless(amount)


@dataclass(frozen=True)
class Unitless(NutritionAmount):
    value: float

    kind: ClassVar[str] = "unitless"
    precedence: ClassVar[int] = 1

    @property
    def magnitude(self) -> float:
        return self.value

    def describe(self, item: NutritionItem | None = None) -> str:
        return f"{self.value:g}"


@dataclass(frozen=True)
class Energy(NutritionAmount):
    kcal: float

    kind: ClassVar[str] = "energy"
    precedence: ClassVar[int] = 2

    @property
    def magnitude(self) -> float:
        return self.kcal

    def describe(self, item: NutritionItem | None = None) -> str:
        if item is not None:
            return f"{int(self.kcal)} kcal"
        return f"{self.kcal:g} kcal"


@dataclass(frozen=True)
class Solid(NutritionAmount):
    milligrams: float

    kind: ClassVar[str] = "solid"
    precedence: ClassVar[int] = 2

    @property
    def magnitude(self) -> float:
        return self.milligrams

    def describe(self, item: NutritionItem | None = None) -> str:
        mg = self.milligrams
        if item is not None and item.category is NutritionItemCategory.MACRONUTRIENT and mg >= 100:
            return f"{_format_decimal(mg / 1000)}g"
        if 0 < mg < 1:
            return f"{int(round(mg * 1000))}mcg"
        if mg > 1000 or mg == 0:
            return f"{int(mg / 1000)}g"
        return f"{int(mg)}mg"


@dataclass(frozen=True)
class Liquid(NutritionAmount):
    milliliters: float

    kind: ClassVar[str] = "liquid"
    precedence: ClassVar[int] = 2

    @property
    def magnitude(self) -> float:
        return self.milliliters

    def describe(self, item: NutritionItem | None = None) -> str:
        ml = self.milliliters
        if ml > 1000 or ml == 0:
            return f"{int(ml / 1000)}l"
        return f"{int(ml)}ml"


@dataclass(frozen=True)
class DailyValue(NutritionAmount):
    percentage: int

    kind: ClassVar[str] = "daily_value"
    precedence: ClassVar[int] = 0

    @property
    def magnitude(self) -> float:
        return float(self.percentage)

    def to_dict(self) -> dict[str, Any]:
        return {self.kind: self.percentage}

    def describe(self, item: NutritionItem | None = None) -> str:
        return f"{self.percentage}%"


class ServingSize:
    """Base class for the serving size variants below."""

    kind: ClassVar[str]

    def describe(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.describe()

    def to_dict(self) -> dict[str, Any]:
        raise NotImplementedError

    @staticmethod
    def from_dict(data: dict[str, Any]) -> ServingSize:
        if not data:
            raise ValueError("cannot decode serving size from empty mapping")
        kind, value = next(iter(data.items()))
        match kind:
            case "amount":
                return ServingAmount(NutritionAmount.from_dict(value))
            case "container":
                return ContainerFraction(float(value))
            case "absolute_value":
                return AbsoluteServing(float(value["value"]), value.get("unit"))
            case _:
                raise ValueError(f"unknown serving size kind: {kind!r}")


@dataclass(frozen=True)
class ServingAmount(ServingSize):
    amount: NutritionAmount

    kind: ClassVar[str] = "amount"

    def describe(self) -> str:
        return self.amount.describe()

    def to_dict(self) -> dict[str, Any]:
        return {self.kind: self.amount.to_dict()}


@dataclass(frozen=True)
class ContainerFraction(ServingSize):
    percentage: float

    kind: ClassVar[str] = "container"

    def describe(self) -> str:
        return f"{self.percentage:g}% container"

    def to_dict(self) -> dict[str, Any]:
        return {self.kind: self.percentage}


@dataclass(frozen=True)
class AbsoluteServing(ServingSize):
    """A serving given as a count, e.g. 1 cookie."""

    value: float
    unit: str | None = None

    kind: ClassVar[str] = "absolute_value"

    def describe(self) -> str:
        return f"{self.value:g} {self.unit or ''}".rstrip()

    def to_dict(self) -> dict[str, Any]:
        return {self.kind: {"value": self.value, "unit": self.unit}}
