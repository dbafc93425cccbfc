"""Nutrition data model: items, units, keyword tables and labels."""

from .items import KnownLabel, NutritionItem, NutritionItemCategory
from .label import MIN_VALID_SCORE, FoodItem, NutritionLabel
from .openfoodfacts import OPEN_FOOD_FACTS_KEYS, food_item_from_product, product_url
from .units import (
    AbsoluteServing,
    ContainerFraction,
    DailyValue,
    Energy,
    Liquid,
    MeasurementUnit,
    NutritionAmount,
    ServingAmount,
    ServingSize,
    Solid,
    UnitKind,
    Unitless,
)
from .vocabulary import FALLBACK_LANGUAGE, LabelLanguage, parse_language

__all__ = [
    "NutritionItem",
    "NutritionItemCategory",
    "KnownLabel",
    "NutritionLabel",
    "FoodItem",
    "MIN_VALID_SCORE",
    "MeasurementUnit",
    "UnitKind",
    "NutritionAmount",
    "Unitless",
    "Energy",
    "Solid",
    "Liquid",
    "DailyValue",
    "ServingSize",
    "ServingAmount",
    "ContainerFraction",
    "AbsoluteServing",
    "LabelLanguage",
    "FALLBACK_LANGUAGE",
    "parse_language",
    "OPEN_FOOD_FACTS_KEYS",
    "product_url",
    "food_item_from_product",
]
