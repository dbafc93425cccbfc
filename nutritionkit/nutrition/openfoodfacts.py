"""Open Food Facts product payloads mapped onto the label data model.

Only the mapping lives here; fetching ``product_url(barcode)`` is left to
the caller.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from .items import NutritionItem
from .label import FoodItem, NutritionLabel
from .units import Energy, NutritionAmount, ServingAmount, ServingSize
from .vocabulary import LabelLanguage, unit_for_spelling

API_URL = "https://world.openfoodfacts.org/api/v2/product"

PRODUCT_NAME = "product_name"
ENERGY_KCAL = "energy-kcal_value"
SERVING_SIZE = "serving_size"
NUTRIMENTS = "nutriments"

DEFAULT_FIELDS = (PRODUCT_NAME, ENERGY_KCAL, SERVING_SIZE, NUTRIMENTS)

_I = NutritionItem

# None: the database has no matching field
OPEN_FOOD_FACTS_KEYS: dict[NutritionItem, str | None] = {
    _I.CALORIES: "energy_kcal",
    _I.CALORIES_FROM_FAT: None,
    _I.FAT: "fat",
    _I.SATURATED_FAT: "saturated-fat",
    _I.UNSATURATED_FAT: None,
    _I.MONOUNSATURATED_FAT: "monounsaturated-fat",
    _I.POLYUNSATURATED_FAT: "polyunsaturated-fat",
    _I.OMEGA3_FATTY_ACIDS: "omega-3-fat",
    _I.TRANS_FAT: "trans-fat",
    _I.CARBOHYDRATES: "carbohydrates",
    _I.SUGAR: "sugars",
    _I.ADDED_SUGAR: None,
    _I.SUGAR_ALCOHOLS: None,
    _I.STARCH: "starch",
    _I.DIETARY_FIBER: "fiber",
    _I.PROTEIN: "proteins",
    _I.SALT: "salt",
    _I.SODIUM: "sodium",
    _I.CHOLESTEROL: "cholesterol",
    _I.VITAMIN_A: "vitamin-a",
    _I.VITAMIN_B1: "vitamin-b1",
    _I.VITAMIN_B2: "vitamin-b2",
    _I.VITAMIN_B6: "vitamin-b6",
    _I.VITAMIN_B9: "vitamin-b9",
    _I.VITAMIN_B12: "vitamin-b12",
    _I.VITAMIN_C: "vitamin-c",
    _I.VITAMIN_D: "vitamin-d",
    _I.VITAMIN_E: "vitamin-e",
    _I.VITAMIN_K: "vitamin-k",
    _I.CAFFEINE: "caffeine",
    _I.TAURINE: "taurine",
    _I.ALCOHOL: "alcohol",
    _I.MAGNESIUM: "magnesium",
    _I.CALCIUM: "calcium",
    _I.ZINC: "zinc",
    _I.POTASSIUM: "potassium",
    _I.IRON: "iron",
    _I.FLUORIDE: "fluoride",
    _I.COPPER: "copper",
    _I.CHLORIDE: "chloride",
    _I.PHOSPHORUS: "phosphorus",
    _I.IODINE: "iodine",
    _I.CHROMIUM: "chromium",
}


def product_url(barcode: str, fields: tuple[str, ...] | list[str] = DEFAULT_FIELDS) -> str:
    """API v2 URL for one product, restricted to ``fields``."""
    query = ",".join(quote(field, safe="-_") for field in fields)
    return f"{API_URL}/{quote(barcode, safe='')}?fields={query}"


def _number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _read_amount(key: str, nutriments: dict[str, Any]) -> NutritionAmount | None:
    value = _number(nutriments.get(f"{key}_value"))
    unit_spelling = nutriments.get(f"{key}_unit")
    if value is None or not isinstance(unit_spelling, str):
        return None

    # the API writes micrograms with the micro sign
    spelling = unit_spelling.strip().lower().replace("µ", "μ")
    unit = unit_for_spelling(spelling, LabelLanguage.ENGLISH)
    if unit is None:
        return None
    return NutritionAmount.from_unit(value, unit)


def _read_serving_size(text: str) -> ServingSize | None:
    # deferred: parsing imports the nutrition package
    from ..geometry import Rect
    from ..parsing.lexer import Lexer
    from ..parsing.tokens import AmountValue
    from ..vision import TextBox

    lexer = Lexer(TextBox(text, Rect(0, 0, 0, 0)), LabelLanguage.ENGLISH)
    serving: ServingSize | None = None
    for token in lexer.tokenize():
        if isinstance(token.description, AmountValue):
            serving = ServingAmount(token.description.amount)
    return serving


def food_item_from_product(payload: dict[str, Any]) -> FoodItem:
    """Map a ``{"product": {...}}`` response body onto a ``FoodItem``.

    Raises ValueError when the product or its nutriments are missing.
    """
    product = payload.get("product")
    if not isinstance(product, dict):
        raise ValueError("product lookup payload has no 'product' object")

    nutriments = product.get(NUTRIMENTS)
    if not isinstance(nutriments, dict):
        raise ValueError("product lookup payload has no 'nutriments' object")

    product_name = product.get(PRODUCT_NAME)
    if not isinstance(product_name, str):
        product_name = None

    serving_size = None
    raw_serving = product.get(SERVING_SIZE)
    if isinstance(raw_serving, str):
        serving_size = _read_serving_size(raw_serving)

    facts: dict[NutritionItem, NutritionAmount] = {}
    calories = _number(nutriments.get(ENERGY_KCAL))
    if calories is not None:
        facts[NutritionItem.CALORIES] = Energy(calories)

    for item, key in OPEN_FOOD_FACTS_KEYS.items():
        if key is None:
            continue
        amount = _read_amount(key, nutriments)
        if amount is not None:
            facts[item] = amount

    return FoodItem(
        product_name=product_name,
        nutrition=NutritionLabel(
            language=LabelLanguage.ENGLISH,
            serving_size=serving_size,
            nutrition_facts=facts,
        ),
    )
