"""Nutrition items and the fixed labels found on nutrition panels."""

from __future__ import annotations

from enum import Enum


class NutritionItemCategory(str, Enum):
    MACRONUTRIENT = "macronutrient"
    MICRONUTRIENT = "micronutrient"
    VITAMIN = "vitamin"
    OTHER = "other"


class NutritionItem(str, Enum):
    """A nutrient (or energy figure) that can appear on a label."""

    CALORIES = "calories"
    CALORIES_FROM_FAT = "calories_from_fat"

    FAT = "fat"
    SATURATED_FAT = "saturated_fat"
    UNSATURATED_FAT = "unsaturated_fat"
    MONOUNSATURATED_FAT = "monounsaturated_fat"
    POLYUNSATURATED_FAT = "polyunsaturated_fat"
    OMEGA3_FATTY_ACIDS = "omega3_fatty_acids"
    TRANS_FAT = "trans_fat"

    CARBOHYDRATES = "carbohydrates"
    SUGAR = "sugar"
    ADDED_SUGAR = "added_sugar"
    SUGAR_ALCOHOLS = "sugar_alcohols"
    STARCH = "starch"
    DIETARY_FIBER = "dietary_fiber"

    PROTEIN = "protein"

    SALT = "salt"
    SODIUM = "sodium"
    CHOLESTEROL = "cholesterol"

    VITAMIN_A = "vitamin_a"
    VITAMIN_C = "vitamin_c"
    VITAMIN_D = "vitamin_d"
    VITAMIN_E = "vitamin_e"
    VITAMIN_K = "vitamin_k"
    VITAMIN_B1 = "vitamin_b1"
    VITAMIN_B2 = "vitamin_b2"
    VITAMIN_B6 = "vitamin_b6"
    VITAMIN_B9 = "vitamin_b9"
    VITAMIN_B12 = "vitamin_b12"

    CAFFEINE = "caffeine"
    TAURINE = "taurine"
    ALCOHOL = "alcohol"

    MAGNESIUM = "magnesium"
    CALCIUM = "calcium"
    ZINC = "zinc"
    POTASSIUM = "potassium"
    IRON = "iron"
    FLUORIDE = "fluoride"
    COPPER = "copper"
    CHLORIDE = "chloride"
    PHOSPHORUS = "phosphorus"
    IODINE = "iodine"
    CHROMIUM = "chromium"

    @property
    def category(self) -> NutritionItemCategory:
        """Display grouping; parsing never looks at this."""
        return _CATEGORIES.get(self, NutritionItemCategory.MICRONUTRIENT)

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").capitalize()


class KnownLabel(str, Enum):
    """Non-nutrient text that the lexer recognises."""

    NUTRITION_FACTS = "nutrition_facts"
    SERVING_SIZE = "serving_size"
    PER_SERVING = "per_serving"
    PER_CONTAINER = "per_container"


_MACROS = (
    NutritionItem.FAT,
    NutritionItem.SATURATED_FAT,
    NutritionItem.UNSATURATED_FAT,
    NutritionItem.MONOUNSATURATED_FAT,
    NutritionItem.POLYUNSATURATED_FAT,
    NutritionItem.OMEGA3_FATTY_ACIDS,
    NutritionItem.TRANS_FAT,
    NutritionItem.CARBOHYDRATES,
    NutritionItem.SUGAR,
    NutritionItem.ADDED_SUGAR,
    NutritionItem.SUGAR_ALCOHOLS,
    NutritionItem.STARCH,
    NutritionItem.DIETARY_FIBER,
    NutritionItem.PROTEIN,
)

_VITAMINS = (
    NutritionItem.VITAMIN_A,
    NutritionItem.VITAMIN_B1,
    NutritionItem.VITAMIN_B2,
    NutritionItem.VITAMIN_B6,
    NutritionItem.VITAMIN_B9,
    NutritionItem.VITAMIN_B12,
    NutritionItem.VITAMIN_C,
    NutritionItem.VITAMIN_D,
    NutritionItem.VITAMIN_E,
    NutritionItem.VITAMIN_K,
)

# Everything not listed here (minerals, sodium, caffeine, ...) is a micronutrient.
_CATEGORIES: dict[NutritionItem, NutritionItemCategory] = {
    NutritionItem.CALORIES: NutritionItemCategory.OTHER,
    NutritionItem.CALORIES_FROM_FAT: NutritionItemCategory.OTHER,
    **{item: NutritionItemCategory.MACRONUTRIENT for item in _MACROS},
    **{item: NutritionItemCategory.VITAMIN for item in _VITAMINS},
}
