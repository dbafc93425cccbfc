"""Per-language keyword and unit spelling tables.

All tables are built once at import time and never mutated afterwards.
Spellings are lower-case; OCR text is lower-cased before lookup.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping

from .items import KnownLabel, NutritionItem
from .units import MeasurementUnit


class LabelLanguage(str, Enum):
    ENGLISH = "english"
    GERMAN = "german"

    @property
    def decimal_separator(self) -> str:
        return "," if self is LabelLanguage.GERMAN else "."


FALLBACK_LANGUAGE = LabelLanguage.ENGLISH

_I = NutritionItem

_ITEM_SPELLINGS_EN: dict[NutritionItem, frozenset[str]] = {
    _I.CALORIES: frozenset({"total calories", "calories", "total cal.", "cal."}),
    _I.CALORIES_FROM_FAT: frozenset({"calories from fat"}),
    _I.FAT: frozenset({"total fat", "fat"}),
    _I.SATURATED_FAT: frozenset({"saturated fat", "sat. fat"}),
    _I.UNSATURATED_FAT: frozenset({"unsaturated fat", "unsat. fat"}),
    _I.MONOUNSATURATED_FAT: frozenset({"monounsaturated fat"}),
    _I.POLYUNSATURATED_FAT: frozenset({"polyunsaturated fat"}),
    _I.OMEGA3_FATTY_ACIDS: frozenset(
        {"omega 3 fatty acids", "omega-3 fatty acids", "omega 3", "omega-3"}
    ),
    _I.TRANS_FAT: frozenset({"trans fat"}),
    _I.CARBOHYDRATES: frozenset({
        "total carbohydrate", "total carbohydrates", "carbohydrates",
        "carbohydrate", "total carbs", "total carb.", "carbs", "carb.",
    }),
    _I.SUGAR: frozenset({"total sugars", "total sugar", "sugars", "sugar"}),
    _I.ADDED_SUGAR: frozenset(
        {"incl. added sugars", "incl. added sugar", "added sugars", "added sugar"}
    ),
    _I.SUGAR_ALCOHOLS: frozenset({"sugar alcohols"}),
    _I.STARCH: frozenset({"starch"}),
    _I.DIETARY_FIBER: frozenset({
        "dietary fibre", "dietary fiber", "total fibre", "total fiber",
        "fibre", "fiber",
    }),
    _I.PROTEIN: frozenset({"total protein", "protein"}),
    _I.SALT: frozenset({"total salt", "salt"}),
    _I.SODIUM: frozenset({"total sodium", "sodium"}),
    _I.CHOLESTEROL: frozenset({"total cholesterol", "cholesterol", "cholest."}),
    _I.CAFFEINE: frozenset({"caffeine"}),
    _I.TAURINE: frozenset({"taurine"}),
    _I.ALCOHOL: frozenset({"alcohol", "alc.", "alc.%"}),
    _I.MAGNESIUM: frozenset({"magnesium"}),
    _I.ZINC: frozenset({"zinc"}),
    _I.POTASSIUM: frozenset({"potassium", "potas."}),
    _I.CALCIUM: frozenset({"calcium"}),
    _I.IRON: frozenset({"iron"}),
    _I.FLUORIDE: frozenset({"fluoride", "flouride"}),
    _I.COPPER: frozenset({"copper"}),
    _I.CHLORIDE: frozenset({"chloride"}),
    _I.PHOSPHORUS: frozenset({"phosphorus"}),
    _I.IODINE: frozenset({"iodine"}),
    _I.CHROMIUM: frozenset({"chromium"}),
}

_ITEM_SPELLINGS_DE: dict[NutritionItem, frozenset[str]] = {
    _I.CALORIES: frozenset({"energie", "brennwert", "kalorien"}),
    _I.FAT: frozenset({"fett"}),
    _I.SATURATED_FAT: frozenset({
        "davon gesättigte fettsäuren", "davon ges. fettsäuren",
        "gesättigte fettsäuren", "ges. fettsäuren",
    }),
    _I.UNSATURATED_FAT: frozenset({
        "davon ungesättigte fettsäuren", "davon unges. fettsäuren",
        "ungesättigte fettsäuren", "unges. fettsäuren",
    }),
    _I.MONOUNSATURATED_FAT: frozenset({
        "davon einfach ungesättigte fettsäuren", "davon einfach unges. fettsäuren",
        "einfach ungesättigte fettsäuren", "einfach unges. fettsäuren",
    }),
    _I.POLYUNSATURATED_FAT: frozenset({
        "davon mehrfach ungesättigte fettsäuren", "davon mehrfach unges. fettsäuren",
        "mehrfach ungesättigte fettsäuren", "mehrfach unges. fettsäuren",
    }),
    _I.OMEGA3_FATTY_ACIDS: frozenset(
        {"omega-3 fettsäuren", "omega 3 fettsäuren", "omega-3", "omega 3"}
    ),
    _I.CARBOHYDRATES: frozenset({"kohlenhydrate"}),
    _I.SUGAR: frozenset({"davon zucker", "zucker"}),
    _I.SUGAR_ALCOHOLS: frozenset({"davon mehrwertige alkohole", "mehrwertige alkohole"}),
    _I.STARCH: frozenset({"davon stärke", "stärke"}),
    _I.DIETARY_FIBER: frozenset({"davon ballaststoffe", "ballaststoffe"}),
    _I.PROTEIN: frozenset({"protein", "eiweiß", "eiweiss"}),
    _I.SALT: frozenset({"salz"}),
    _I.SODIUM: frozenset({"natrium"}),
    _I.CHOLESTEROL: frozenset({"cholesterin"}),
    _I.CAFFEINE: frozenset({"koffein"}),
    _I.TAURINE: frozenset({"taurin"}),
    _I.ALCOHOL: frozenset({"alkohol", "alk.", "alk.%"}),
    _I.MAGNESIUM: frozenset({"magnesium"}),
    _I.ZINC: frozenset({"zink"}),
    _I.POTASSIUM: frozenset({"kalium"}),
    _I.CALCIUM: frozenset({"kalzium"}),
    _I.IRON: frozenset({"eisen"}),
    _I.FLUORIDE: frozenset({"fluorid", "flourid"}),
    _I.COPPER: frozenset({"kupfer"}),
    _I.CHLORIDE: frozenset({"chlor"}),
    _I.PHOSPHORUS: frozenset({"phosphor"}),
    _I.IODINE: frozenset({"iod", "jod"}),
    _I.CHROMIUM: frozenset({"chrom"}),
}

# Vitamin spellings are shared by both languages
_VITAMIN_SUFFIXES: dict[NutritionItem, str] = {
    _I.VITAMIN_A: "a",
    _I.VITAMIN_B1: "b1",
    _I.VITAMIN_B2: "b2",
    _I.VITAMIN_B6: "b6",
    _I.VITAMIN_B9: "b9",
    _I.VITAMIN_B12: "b12",
    _I.VITAMIN_C: "c",
    _I.VITAMIN_D: "d",
    _I.VITAMIN_E: "e",
    _I.VITAMIN_K: "k",
}
for _item, _suffix in _VITAMIN_SUFFIXES.items():
    _vitamin = frozenset({f"vit. {_suffix}", f"vitamin {_suffix}"})
    _ITEM_SPELLINGS_EN[_item] = _vitamin
    _ITEM_SPELLINGS_DE[_item] = _vitamin

_KNOWN_LABELS_EN: dict[KnownLabel, frozenset[str]] = {
    KnownLabel.NUTRITION_FACTS: frozenset({"nutrition facts"}),
    KnownLabel.SERVING_SIZE: frozenset({"serving size", "serv. size"}),
    KnownLabel.PER_SERVING: frozenset({"per serving", "/ serving", "/serving"}),
    KnownLabel.PER_CONTAINER: frozenset({"per container", "/ container", "/container"}),
}

_KNOWN_LABELS_DE: dict[KnownLabel, frozenset[str]] = {
    KnownLabel.NUTRITION_FACTS: frozenset({
        "durchschnittliche nährwertangaben", "durchschn. nährwertangaben",
        "durchschnittliche nährwerte", "durchschn. nährwerte",
        "nährwertangaben", "nährwerte",
    }),
    KnownLabel.SERVING_SIZE: frozenset({"portion"}),
    KnownLabel.PER_SERVING: frozenset({"pro portion", "/ portion", "/portion"}),
}

_UNIT_SPELLINGS_EN: dict[MeasurementUnit, frozenset[str]] = {
    MeasurementUnit.GRAM: frozenset({"gram", "grams", "g"}),
    MeasurementUnit.MILLIGRAM: frozenset({"milligram", "milligrams", "mg"}),
    MeasurementUnit.MICROGRAM: frozenset({"microgram", "micrograms", "mcg", "μg"}),
    MeasurementUnit.OUNCE: frozenset({"ounce", "ounces", "oz", "oz."}),
    MeasurementUnit.LITER: frozenset({"liter", "litre", "l"}),
    MeasurementUnit.MILLILITER: frozenset({"milliliter", "millilitre", "ml"}),
    MeasurementUnit.CUP: frozenset({"cup", "cups"}),
    MeasurementUnit.LIQUID_OUNCE: frozenset(
        {"liquid ounces", "liquid oz.", "fluid oz.", "fl. oz."}
    ),
    MeasurementUnit.PERCENT: frozenset({"%", "percent"}),
    MeasurementUnit.KILOCALORIES: frozenset({"calories", "cal.", "cal", "kcal"}),
    MeasurementUnit.KILOJOULES: frozenset({"kj", "kilojoules", "kilojoule", "kjoule"}),
}

_UNIT_SPELLINGS_DE: dict[MeasurementUnit, frozenset[str]] = {
    MeasurementUnit.GRAM: frozenset({"gramm", "g"}),
    MeasurementUnit.MILLIGRAM: frozenset({"milligramm", "mg"}),
    MeasurementUnit.OUNCE: frozenset({"unze", "unzen"}),
    MeasurementUnit.LITER: frozenset({"liter", "l"}),
    MeasurementUnit.MILLILITER: frozenset({"milliliter", "ml"}),
    MeasurementUnit.PERCENT: frozenset({"%", "prozent"}),
    MeasurementUnit.KILOCALORIES: frozenset({"kalorien", "kal.", "cal", "kcal"}),
    MeasurementUnit.KILOJOULES: frozenset({"kj", "kilojoules", "kilojoule", "kjoule"}),
}

ITEM_SPELLINGS: Mapping[LabelLanguage, Mapping[NutritionItem, frozenset[str]]] = (
    MappingProxyType({
        LabelLanguage.ENGLISH: MappingProxyType(_ITEM_SPELLINGS_EN),
        LabelLanguage.GERMAN: MappingProxyType(_ITEM_SPELLINGS_DE),
    })
)

KNOWN_LABEL_SPELLINGS: Mapping[LabelLanguage, Mapping[KnownLabel, frozenset[str]]] = (
    MappingProxyType({
        LabelLanguage.ENGLISH: MappingProxyType(_KNOWN_LABELS_EN),
        LabelLanguage.GERMAN: MappingProxyType(_KNOWN_LABELS_DE),
    })
)

UNIT_SPELLINGS: Mapping[LabelLanguage, Mapping[MeasurementUnit, frozenset[str]]] = (
    MappingProxyType({
        LabelLanguage.ENGLISH: MappingProxyType(_UNIT_SPELLINGS_EN),
        LabelLanguage.GERMAN: MappingProxyType(_UNIT_SPELLINGS_DE),
    })
)


def _flatten(table: Mapping[object, frozenset[str]]) -> frozenset[str]:
    return frozenset(s for spellings in table.values() for s in spellings)


# Language detection and region scoring vocabulary
KEYWORDS_BY_LANGUAGE: Mapping[LabelLanguage, frozenset[str]] = MappingProxyType({
    language: _flatten(ITEM_SPELLINGS[language]) for language in LabelLanguage
})

# Everything the lexer may consume as a label
LABEL_SPELLINGS: Mapping[LabelLanguage, frozenset[str]] = MappingProxyType({
    language: _flatten(ITEM_SPELLINGS[language]) | _flatten(KNOWN_LABEL_SPELLINGS[language])
    for language in LabelLanguage
})

UNIT_SPELLING_SET: Mapping[LabelLanguage, frozenset[str]] = MappingProxyType({
    language: _flatten(UNIT_SPELLINGS[language]) for language in LabelLanguage
})


def item_for_spelling(spelling: str, language: LabelLanguage) -> NutritionItem | None:
    for item, spellings in ITEM_SPELLINGS[language].items():
        if spelling in spellings:
            return item
    return None


def known_label_for_spelling(spelling: str, language: LabelLanguage) -> KnownLabel | None:
    for label, spellings in KNOWN_LABEL_SPELLINGS[language].items():
        if spelling in spellings:
            return label
    return None


def unit_for_spelling(spelling: str, language: LabelLanguage) -> MeasurementUnit | None:
    for unit, spellings in UNIT_SPELLINGS[language].items():
        if spelling in spellings:
            return unit
    return None


def parse_language(name: str) -> LabelLanguage:
    """Resolve a language by name (``"english"``) or short code (``"de"``)."""
    key = name.strip().lower()
    aliases = {"en": LabelLanguage.ENGLISH, "de": LabelLanguage.GERMAN}
    if key in aliases:
        return aliases[key]
    try:
        return LabelLanguage(key)
    except ValueError:
        raise ValueError(
            f"unknown label language: {name!r} "
            f"(choose from {', '.join(lang.value for lang in LabelLanguage)})"
        ) from None
