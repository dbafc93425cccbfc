"""Tests for the spatial label matcher."""

from nutritionkit.geometry import Rect
from nutritionkit.nutrition.items import NutritionItem
from nutritionkit.nutrition.units import (
    DailyValue,
    Energy,
    Liquid,
    NutritionAmount,
    ServingAmount,
    Solid,
    Unitless,
)
from nutritionkit.nutrition.vocabulary import LabelLanguage
from nutritionkit.parsing.parser import LabelParser, parse_label
from nutritionkit.parsing.tokens import AmountValue, CategorizedToken, NutritionFactLabel
from nutritionkit.vision import TextBox

EN = LabelLanguage.ENGLISH


def _box(text: str, x: float, y: float, width: float = 0.2, height: float = 0.05) -> TextBox:
    return TextBox(text, Rect(x, y, width, height))


def _token(description, x: float, y: float, width: float = 0.1, height: float = 0.05) -> CategorizedToken:
    box = Rect(x, y, width, height)
    return CategorizedToken(description, source=TextBox("", box), box=box)


def _amount(amount: NutritionAmount, x: float, y: float = 0.1) -> CategorizedToken:
    return _token(AmountValue(amount), x, y)


def _fat_label(x: float = 0.1, y: float = 0.1) -> CategorizedToken:
    return _token(NutritionFactLabel(NutritionItem.FAT), x, y)


def _same_row(parser: LabelParser, segment: CategorizedToken, **kwargs):
    kwargs.setdefault("leading", False)
    kwargs.setdefault("trailing", True)
    return parser.find_on_same_row(
        segment,
        where=lambda t: isinstance(t.description, AmountValue),
        **kwargs,
    )


class TestScenarios:
    def test_three_aligned_rows(self):
        label = parse_label(
            [
                _box("Total Fat", 0.1, 0.1),
                _box("5g", 0.6, 0.1),
                _box("Sodium", 0.1, 0.2),
                _box("240mg", 0.6, 0.2),
                _box("Total Carbohydrate", 0.1, 0.3),
                _box("35g", 0.6, 0.3),
            ],
            EN,
        )
        assert label.nutrition_facts == {
            NutritionItem.FAT: Solid(5000.0),
            NutritionItem.SODIUM: Solid(240.0),
            NutritionItem.CARBOHYDRATES: Solid(35000.0),
        }
        assert label.serving_size is None

    def test_added_sugar_matches_leftward_after_incl(self):
        label = parse_label(
            [
                _box("incl. 13g added sugar", 0.1, 0.5, width=0.6),
                _box("26%", 0.8, 0.5, width=0.1),
            ],
            EN,
        )
        assert label.nutrition_facts == {NutritionItem.ADDED_SUGAR: Solid(13000.0)}

    def test_added_sugar_finds_incl_in_separate_fragment(self):
        label = parse_label(
            [
                _box("incl.", 0.05, 0.5, width=0.1),
                _box("13g", 0.2, 0.5, width=0.1),
                _box("added sugar", 0.35, 0.5, width=0.3),
                _box("26%", 0.8, 0.5, width=0.1),
            ],
            EN,
        )
        assert label.nutrition_facts == {NutritionItem.ADDED_SUGAR: Solid(13000.0)}

    def test_added_sugar_without_incl_only_looks_right(self):
        label = parse_label(
            [
                _box("13g", 0.05, 0.5, width=0.1),
                _box("added sugar", 0.35, 0.5, width=0.3),
                _box("26%", 0.8, 0.5, width=0.1),
            ],
            EN,
        )
        assert label.nutrition_facts == {NutritionItem.ADDED_SUGAR: DailyValue(26)}

    def test_full_label_is_valid(self):
        label = parse_label(
            [
                _box("Serving Size 1 cup (228g)", 0.1, 0.05, width=0.6),
                _box("Calories 250", 0.1, 0.15, width=0.4),
                _box("Total Fat 12g", 0.1, 0.25, width=0.4),
                _box("18%", 0.8, 0.25, width=0.1),
                _box("Sodium 470mg", 0.1, 0.35, width=0.4),
                _box("Protein 5g", 0.1, 0.45, width=0.4),
            ],
            EN,
        )
        assert label.serving_size == ServingAmount(Liquid(236.59))
        assert label.nutrition_facts[NutritionItem.CALORIES] == Energy(250.0)
        assert label.nutrition_facts[NutritionItem.FAT] == Solid(12000.0)
        assert label.nutrition_facts[NutritionItem.SODIUM] == Solid(470.0)
        assert label.nutrition_facts[NutritionItem.PROTEIN] == Solid(5000.0)
        assert label.is_valid

    def test_german_label(self):
        label = parse_label(
            [
                _box("Energie", 0.1, 0.1),
                _box("250 kcal", 0.6, 0.1),
                _box("Fett", 0.1, 0.2),
                _box("3,5 g", 0.6, 0.2),
                _box("davon Zucker", 0.1, 0.3),
                _box("12 g", 0.6, 0.3),
            ],
            LabelLanguage.GERMAN,
        )
        assert label.language is LabelLanguage.GERMAN
        assert label.nutrition_facts == {
            NutritionItem.CALORIES: Energy(250.0),
            NutritionItem.FAT: Solid(3500.0),
            NutritionItem.SUGAR: Solid(12000.0),
        }


class TestServingSize:
    def test_serving_size_label_sets_amount(self):
        label = parse_label([_box("Serving Size 30g", 0.1, 0.1, width=0.5)], EN)
        assert label.serving_size == ServingAmount(Solid(30000.0))
        assert label.nutrition_facts == {}

    def test_other_known_labels_are_skipped(self):
        label = parse_label(
            [_box("Nutrition Facts", 0.1, 0.1), _box("12", 0.6, 0.1)],
            EN,
        )
        assert label.serving_size is None
        assert label.nutrition_facts == {}


class TestCalories:
    def test_unitless_calories_become_energy(self):
        label = parse_label([_box("Calories", 0.1, 0.1), _box("230", 0.6, 0.1)], EN)
        assert label.nutrition_facts == {NutritionItem.CALORIES: Energy(230.0)}

    def test_calories_from_fat_become_energy(self):
        label = parse_label(
            [_box("Calories from Fat", 0.1, 0.1, width=0.4), _box("90", 0.6, 0.1)],
            EN,
        )
        assert label.nutrition_facts == {NutritionItem.CALORIES_FROM_FAT: Energy(90.0)}

    def test_fallback_finds_value_below(self):
        label = parse_label(
            [_box("Calories", 0.1, 0.1), _box("230", 0.1, 0.2, height=0.1)],
            EN,
        )
        assert label.nutrition_facts == {NutritionItem.CALORIES: Energy(230.0)}

    def test_fallback_ignores_solid_amounts(self):
        label = parse_label([_box("Calories", 0.1, 0.1), _box("5g", 0.1, 0.2)], EN)
        assert label.nutrition_facts == {}

    def test_fallback_respects_max_distance(self):
        label = parse_label([_box("Calories", 0.1, 0.1), _box("230", 0.1, 0.8)], EN)
        assert label.nutrition_facts == {}

    def test_other_labels_have_no_fallback(self):
        label = parse_label([_box("Sodium", 0.1, 0.1), _box("240mg", 0.1, 0.2)], EN)
        assert label.nutrition_facts == {}


class TestConsumption:
    def test_value_used_once(self):
        label = parse_label(
            [
                _box("Total Fat", 0.1, 0.1),
                _box("Sodium", 0.3, 0.1),
                _box("5g", 0.6, 0.1),
            ],
            EN,
        )
        # Both labels see 5g; only the first visited one keeps it
        assert len(label.nutrition_facts) == 1

    def test_higher_precedence_label_picks_first(self):
        label = parse_label(
            [
                _box("Total Fat", 0.1, 0.1),
                _box("Calories", 0.3, 0.1),
                _box("120", 0.6, 0.1),
            ],
            EN,
        )
        assert label.nutrition_facts == {NutritionItem.CALORIES: Energy(120.0)}


class TestPrecedenceMonotonicity:
    def _rows(self, first: str, second: str):
        return [
            _box("Total Fat", 0.1, 0.1),
            _box(first, 0.6, 0.1),
            _box("Total Fat", 0.1, 0.3),
            _box(second, 0.6, 0.3),
        ]

    def test_better_amount_seen_first(self):
        label = parse_label(self._rows("5g", "7%"), EN)
        assert label.nutrition_facts[NutritionItem.FAT] == Solid(5000.0)

    def test_better_amount_seen_second(self):
        label = parse_label(self._rows("7%", "5g"), EN)
        assert label.nutrition_facts[NutritionItem.FAT] == Solid(5000.0)

    def test_equal_precedence_keeps_first(self):
        label = parse_label(self._rows("5g", "6g"), EN)
        assert label.nutrition_facts[NutritionItem.FAT] == Solid(5000.0)


class TestIdempotence:
    def test_parse_twice(self):
        parser = LabelParser.from_text_boxes(
            [
                _box("Total Fat 5g", 0.1, 0.1, width=0.5),
                _box("Sodium 240mg", 0.1, 0.2, width=0.5),
                _box("Calories", 0.1, 0.3),
                _box("230", 0.1, 0.4),
            ],
            EN,
        )
        assert parser.parse() == parser.parse()


class TestRowAlignment:
    def test_matched_values_are_on_label_row(self):
        fragments = [
            _box("Total Fat", 0.1, 0.10),
            _box("5g", 0.6, 0.11),
            _box("Sodium", 0.1, 0.20),
            _box("240mg", 0.6, 0.19),
            _box("Protein", 0.1, 0.30),
            _box("3g", 0.6, 0.36),
        ]
        label = parse_label(fragments, EN)
        assert label.nutrition_facts == {
            NutritionItem.FAT: Solid(5000.0),
            NutritionItem.SODIUM: Solid(240.0),
        }


class TestFindOnSameRow:
    def test_nearest_of_equal_precedence(self):
        label = _fat_label()
        near = _amount(Solid(1.0), 0.3)
        far = _amount(Solid(2.0), 0.6)
        for tokens in ([label, far, near], [label, near, far]):
            assert _same_row(LabelParser(tokens, EN), label) is near

    def test_farther_higher_precedence_displaces_nearer(self):
        label = _fat_label()
        near = _amount(DailyValue(5), 0.3)
        far = _amount(Solid(2.0), 0.6)
        assert _same_row(LabelParser([label, near, far], EN), label) is far

    def test_nearer_lower_precedence_never_displaces(self):
        label = _fat_label()
        far = _amount(Solid(2.0), 0.6)
        near = _amount(Unitless(5), 0.3)
        assert _same_row(LabelParser([label, far, near], EN), label) is far

    def test_nearer_equal_precedence_replaces_promoted_candidate(self):
        label = _fat_label()
        low = _amount(Unitless(1), 0.2)
        far = _amount(Solid(2.0), 0.7)
        mid = _amount(Solid(3.0), 0.4)
        assert _same_row(LabelParser([label, low, far, mid], EN), label) is mid
        assert _same_row(LabelParser([label, low, mid, far], EN), label) is mid

    def test_max_distance_excludes_promotion(self):
        label = _fat_label()
        near = _amount(DailyValue(5), 0.3)
        far = _amount(Solid(2.0), 0.8)
        parser = LabelParser([label, near, far], EN)
        assert _same_row(parser, label, max_distance=0.4) is near

    def test_trailing_only_by_default(self):
        label = _fat_label(x=0.5)
        left = _amount(Solid(1.0), 0.2)
        assert _same_row(LabelParser([label, left], EN), label) is None

    def test_leading_admits_left(self):
        label = _fat_label(x=0.5)
        left = _amount(Solid(1.0), 0.2)
        found = _same_row(LabelParser([label, left], EN), label, leading=True)
        assert found is left

    def test_leading_only(self):
        label = _fat_label(x=0.5)
        left = _amount(Solid(1.0), 0.2)
        right = _amount(Solid(2.0), 0.7)
        parser = LabelParser([label, left, right], EN)
        assert _same_row(parser, label, leading=True, trailing=False) is left

    def test_row_tolerance_is_half_height(self):
        label = _fat_label(y=0.1)
        inside = _amount(Solid(1.0), 0.6, y=0.124)
        outside = _amount(Solid(2.0), 0.6, y=0.126)
        assert _same_row(LabelParser([label, inside], EN), label) is inside
        assert _same_row(LabelParser([label, outside], EN), label) is None

    def test_same_fragment_ignores_row_tolerance(self):
        source = TextBox("", Rect(0.1, 0.1, 0.8, 0.05))
        label = CategorizedToken(
            NutritionFactLabel(NutritionItem.FAT), source=source, box=Rect(0.1, 0.1, 0.1, 0.05)
        )
        value = CategorizedToken(
            AmountValue(Solid(1.0)), source=source, box=Rect(0.5, 0.3, 0.1, 0.05)
        )
        assert _same_row(LabelParser([label, value], EN), label) is value

    def test_predicate_filters(self):
        label = _fat_label()
        value = _amount(Solid(1.0), 0.4)
        parser = LabelParser([label, value], EN)
        assert parser.find_on_same_row(
            label, leading=False, trailing=True, where=lambda t: False
        ) is None


class TestFindCloseBy:
    def test_nearest_anywhere(self):
        label = _fat_label()
        below = _amount(Solid(1.0), 0.1, y=0.3)
        far = _amount(Solid(2.0), 0.9, y=0.9)
        parser = LabelParser([label, far, below], EN)
        found = parser.find_close_by(
            label, where=lambda t: isinstance(t.description, AmountValue)
        )
        assert found is below

    def test_max_distance(self):
        label = _fat_label()
        far = _amount(Solid(2.0), 0.9, y=0.9)
        parser = LabelParser([label, far], EN)
        found = parser.find_close_by(
            label, max_distance=0.5, where=lambda t: isinstance(t.description, AmountValue)
        )
        assert found is None
