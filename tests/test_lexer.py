"""Tests for the backtracking lexer."""

import pytest

from nutritionkit.geometry import Rect
from nutritionkit.nutrition.items import KnownLabel, NutritionItem
from nutritionkit.nutrition.units import DailyValue, Energy, Liquid, Solid, Unitless
from nutritionkit.nutrition.vocabulary import LabelLanguage
from nutritionkit.parsing.lexer import Lexer, tokenize
from nutritionkit.parsing.tokens import (
    AmountValue,
    InvariantViolation,
    KnownLabelText,
    NutritionFactLabel,
    UncategorizedText,
)
from nutritionkit.vision import TextBox


def _descriptions(text: str, language: LabelLanguage = LabelLanguage.ENGLISH) -> list:
    fragment = TextBox(text, Rect(0.0, 0.0, 1.0, 0.1))
    return [token.description for token in tokenize(fragment, language)]


class TestLabels:
    def test_single_label(self):
        assert _descriptions("Sodium") == [NutritionFactLabel(NutritionItem.SODIUM)]

    def test_multi_word_label(self):
        assert _descriptions("Total Fat") == [NutritionFactLabel(NutritionItem.FAT)]

    def test_longest_match(self):
        assert _descriptions("Calories from Fat 90") == [
            NutritionFactLabel(NutritionItem.CALORIES_FROM_FAT),
            AmountValue(Unitless(90.0)),
        ]

    def test_rolls_back_to_shorter_label(self):
        assert _descriptions("Calories 230") == [
            NutritionFactLabel(NutritionItem.CALORIES),
            AmountValue(Unitless(230.0)),
        ]

    def test_text_ends_inside_longer_label(self):
        assert _descriptions("Calories fr") == [
            NutritionFactLabel(NutritionItem.CALORIES),
            UncategorizedText("fr"),
        ]

    def test_known_label(self):
        assert _descriptions("Nutrition Facts") == [KnownLabelText(KnownLabel.NUTRITION_FACTS)]

    def test_prefix_followed_by_other_word(self):
        assert _descriptions("total xyz") == [
            UncategorizedText("total"),
            UncategorizedText("xyz"),
        ]

    def test_prefix_at_end(self):
        assert _descriptions("total") == [UncategorizedText("total")]

    def test_german_label(self):
        assert _descriptions("davon gesättigte Fettsäuren 1,2 g", LabelLanguage.GERMAN) == [
            NutritionFactLabel(NutritionItem.SATURATED_FAT),
            AmountValue(Solid(1200.0)),
        ]


class TestAmounts:
    def test_amount_with_attached_unit(self):
        assert _descriptions("5g") == [AmountValue(Solid(5000.0))]

    def test_amount_with_spaced_unit(self):
        assert _descriptions("240 mg") == [AmountValue(Solid(240.0))]

    def test_unitless(self):
        assert _descriptions("12") == [AmountValue(Unitless(12.0))]

    def test_daily_value(self):
        assert _descriptions("Vitamin C 10%") == [
            NutritionFactLabel(NutritionItem.VITAMIN_C),
            AmountValue(DailyValue(10)),
        ]

    def test_daily_value_rounds(self):
        assert _descriptions("2.6%") == [AmountValue(DailyValue(3))]

    def test_daily_value_half_rounds_up(self):
        assert _descriptions("12.5%") == [AmountValue(DailyValue(13))]

    def test_energy_unit(self):
        assert _descriptions("Energie 250 kcal", LabelLanguage.GERMAN) == [
            NutritionFactLabel(NutritionItem.CALORIES),
            AmountValue(Energy(250.0)),
        ]

    def test_liquid(self):
        assert _descriptions("1 cup") == [AmountValue(Liquid(236.59))]

    def test_german_decimal_comma(self):
        assert _descriptions("Fett 3,5 g", LabelLanguage.GERMAN) == [
            NutritionFactLabel(NutritionItem.FAT),
            AmountValue(Solid(3500.0)),
        ]

    def test_english_thousands_separator(self):
        assert _descriptions("1,234.5mg") == [AmountValue(Solid(1234.5))]

    def test_german_thousands_separator(self):
        (description,) = _descriptions("1.234,5 kj", LabelLanguage.GERMAN)
        assert isinstance(description.amount, Energy)
        assert description.amount.kcal == pytest.approx(1234.5 * 0.239)

    def test_unit_scan_rolls_back_partial_spelling(self):
        descriptions = _descriptions("5 gra")
        assert descriptions[0] == AmountValue(Solid(5000.0))

    def test_unit_scan_stops_at_longest_unit(self):
        assert _descriptions("5 g sugar") == [
            AmountValue(Solid(5000.0)),
            NutritionFactLabel(NutritionItem.SUGAR),
        ]

    def test_unparseable_number_degrades(self):
        assert _descriptions("1.2.3") == [UncategorizedText("1.2.3")]


class TestFragments:
    def test_full_row(self):
        assert _descriptions("Total Fat 5g 7%") == [
            NutritionFactLabel(NutritionItem.FAT),
            AmountValue(Solid(5000.0)),
            AmountValue(DailyValue(7)),
        ]

    def test_trailing_whitespace(self):
        assert _descriptions("Fat 5g   ") == [
            NutritionFactLabel(NutritionItem.FAT),
            AmountValue(Solid(5000.0)),
        ]

    def test_empty_fragment(self):
        assert _descriptions("") == []
        assert _descriptions("   ") == []

    def test_uncategorized_word(self):
        assert _descriptions("(228g)") == [UncategorizedText("(228g)")]

    def test_serving_size_row(self):
        assert _descriptions("Serving Size 1 cup (228g)") == [
            KnownLabelText(KnownLabel.SERVING_SIZE),
            AmountValue(Liquid(236.59)),
            UncategorizedText("(228g)"),
        ]


class TestTokenBoxes:
    def test_boxes_interpolated_over_characters(self):
        fragment = TextBox("Fat 5g", Rect(0.0, 0.2, 0.6, 0.1))
        fat, amount = tokenize(fragment)
        assert fat.box.min_x == pytest.approx(0.0)
        assert fat.box.width == pytest.approx(0.3)
        assert amount.box.min_x == pytest.approx(0.4)
        assert amount.box.width == pytest.approx(0.2)
        assert amount.box.min_y == 0.2
        assert amount.box.height == 0.1

    def test_tokens_keep_source(self):
        fragment = TextBox("Fat 5g", Rect(0.0, 0.2, 0.6, 0.1))
        tokens = tokenize(fragment)
        assert all(token.source is fragment for token in tokens)
        assert tokens[0].same_fragment(tokens[1])


class TestIncl:
    def test_added_sugar_after_incl_is_leading(self):
        fragment = TextBox("incl. 13g added sugar", Rect(0.1, 0.5, 0.6, 0.05))
        tokens = tokenize(fragment)
        assert [t.description for t in tokens] == [
            UncategorizedText("incl."),
            AmountValue(Solid(13000.0)),
            NutritionFactLabel(NutritionItem.ADDED_SUGAR),
        ]
        assert tokens[2].leading

    def test_plain_added_sugar_is_not_leading(self):
        fragment = TextBox("Added Sugars 10g", Rect(0.1, 0.5, 0.6, 0.05))
        assert not tokenize(fragment)[0].leading


class TestPrecedence:
    def test_token_precedence(self):
        fragment = TextBox("Calories 230 Fat 5g 7% Serving Size xyz", Rect(0, 0, 1, 0.1))
        precedences = [t.precedence for t in tokenize(fragment)]
        assert precedences == [9, 1, 8, 2, 0, 8, 5]


class TestInvariants:
    def test_restore_without_checkpoint(self):
        lexer = Lexer(TextBox("fat", Rect(0, 0, 1, 1)))
        with pytest.raises(InvariantViolation):
            lexer._restore()

    def test_eat_past_end(self):
        lexer = Lexer(TextBox("", Rect(0, 0, 1, 1)))
        with pytest.raises(InvariantViolation):
            lexer._eat()

    def test_invariant_violation_is_runtime_error(self):
        assert issubclass(InvariantViolation, RuntimeError)
