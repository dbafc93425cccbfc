"""Backtracking lexer for single OCR fragments.

The lexer walks the lower-cased fragment text with an index cursor. The
current token is the slice ``text[buffer_start:pos]``; a reset point stores a
``(pos, buffer_start)`` pair whenever the slice is a complete keyword or a
complete number, so that the longest match can be recovered once the next
characters stop extending it.
"""

from __future__ import annotations

from functools import lru_cache

from ..geometry import Rect
from ..nutrition.items import NutritionItem
from ..nutrition.units import NutritionAmount, Unitless
from ..nutrition.vocabulary import (
    FALLBACK_LANGUAGE,
    LABEL_SPELLINGS,
    UNIT_SPELLING_SET,
    LabelLanguage,
    item_for_spelling,
    known_label_for_spelling,
    unit_for_spelling,
)
from ..vision import TextBox
from .tokens import (
    AmountValue,
    CategorizedToken,
    InvariantViolation,
    KnownLabelText,
    NutritionFactLabel,
    TextDescription,
    UncategorizedText,
)

_INCL = "incl."


@lru_cache(maxsize=None)
def _prefixes(spellings: frozenset[str]) -> frozenset[str]:
    """Every non-empty prefix of every spelling (spellings included)."""
    return frozenset(s[:i] for s in spellings for i in range(1, len(s) + 1))


class Lexer:
    """Split one ``TextBox`` into categorized tokens.

    Usage:
        tokens = Lexer(fragment, LabelLanguage.ENGLISH).tokenize()
    """

    def __init__(
        self, fragment: TextBox, language: LabelLanguage = FALLBACK_LANGUAGE
    ) -> None:
        self.fragment = fragment
        self.language = language

        self._text = fragment.text.lower()
        self._labels = LABEL_SPELLINGS[language]
        self._label_prefixes = _prefixes(self._labels)
        self._units = UNIT_SPELLING_SET[language]
        self._unit_prefixes = _prefixes(self._units)

        self._pos = 0
        self._buffer_start = 0
        self._token_start = 0
        self._reset_point: tuple[int, int] | None = None

    # -- cursor primitives ---------------------------------------------------

    @property
    def _buffer(self) -> str:
        return self._text[self._buffer_start:self._pos]

    @property
    def _at_end(self) -> bool:
        return self._pos >= len(self._text)

    def _next_is_whitespace(self) -> bool:
        return not self._at_end and self._text[self._pos].isspace()

    def _eat(self) -> None:
        if self._at_end:
            raise InvariantViolation(
                f"lexer ran past the end of {self.fragment.text!r}"
            )
        self._pos += 1

    def _eat_whitespace(self) -> None:
        """Skip whitespace and start a fresh buffer after it."""
        while self._next_is_whitespace():
            self._pos += 1
        self._buffer_start = self._pos

    def _eat_until_whitespace(self) -> None:
        while not self._at_end and not self._next_is_whitespace():
            self._pos += 1

    def _remember(self) -> None:
        self._reset_point = (self._pos, self._buffer_start)

    def _restore(self) -> None:
        if self._reset_point is None:
            raise InvariantViolation(
                f"lexer has no state to restore in {self.fragment.text!r}"
            )
        self._pos, self._buffer_start = self._reset_point
        self._reset_point = None

    def _buffer_is_numeric(self) -> bool:
        buffer = self._buffer
        return bool(buffer) and all(ch.isdigit() or ch in ",." for ch in buffer)

    # -- tokenization --------------------------------------------------------

    def tokenize(self) -> list[CategorizedToken]:
        tokens: list[CategorizedToken] = []
        while not self._at_end:
            self._eat_whitespace()
            if self._at_end:
                break
            tokens.append(self._next_token())
        return tokens

    def _next_token(self) -> CategorizedToken:
        self._buffer_start = self._pos
        self._token_start = self._pos
        self._reset_point = None

        found_label = False
        is_start_of_label = True
        found_number = False
        skipped_whitespace = False

        while True:
            if self._next_is_whitespace() and not found_number and not found_label:
                self._remember()
                skipped_whitespace = True

            self._eat()
            buffer = self._buffer

            if is_start_of_label:
                if buffer in self._labels:
                    if self._at_end:
                        return self._label_token()
                    found_label = True
                    self._remember()
                elif buffer not in self._label_prefixes:
                    if found_label:
                        self._restore()
                        return self._label_token()

                    if not self._buffer_is_numeric():
                        if skipped_whitespace:
                            # "total xyz": keep only the part before the space
                            self._restore()
                        else:
                            self._eat_until_whitespace()
                        return self._token(UncategorizedText(self._buffer))

                    is_start_of_label = False

            if self._buffer_is_numeric():
                if self._at_end:
                    return self._measurement_token()
                found_number = True
                self._remember()
            elif found_number:
                self._restore()
                return self._measurement_token()

            if self._at_end:
                # text ended inside a longer spelling ("calories fr")
                if found_label:
                    self._restore()
                    return self._label_token()
                if skipped_whitespace:
                    self._restore()
                return self._token(UncategorizedText(self._buffer))

    def _label_token(self) -> CategorizedToken:
        buffer = self._buffer

        item = item_for_spelling(buffer, self.language)
        if item is not None:
            leading = item is NutritionItem.ADDED_SUGAR and _INCL in self._text[:self._token_start]
            return self._token(NutritionFactLabel(item), leading=leading)

        label = known_label_for_spelling(buffer, self.language)
        if label is not None:
            return self._token(KnownLabelText(label))

        raise InvariantViolation(
            f"{buffer!r} matched as a {self.language.value} label "
            f"but is in no keyword table"
        )

    def _measurement_token(self) -> CategorizedToken:
        amount = self._parse_number(self._buffer)
        if amount is None:
            self._eat_until_whitespace()
            return self._token(UncategorizedText(self._buffer))

        # Try to find a unit
        self._remember()
        self._eat_whitespace()

        found_unit = False
        while not self._at_end:
            self._eat()
            buffer = self._buffer
            if buffer in self._units:
                found_unit = True
                self._remember()
            elif buffer not in self._unit_prefixes:
                if found_unit:
                    self._restore()
                break

        if not found_unit:
            self._restore()
            return self._token(AmountValue(Unitless(amount)))

        if self._buffer not in self._units:
            # ran out of text inside a longer spelling ("5 gra")
            self._restore()

        unit = unit_for_spelling(self._buffer, self.language)
        if unit is None:
            raise InvariantViolation(
                f"{self._buffer!r} matched as a {self.language.value} unit "
                f"but is in no unit table"
            )
        return self._token(AmountValue(NutritionAmount.from_unit(amount, unit)))

    def _parse_number(self, text: str) -> float | None:
        """Parse a numeric buffer, accepting "," or "." as the decimal point.

        When both appear, the language's decimal separator wins and the other
        one is dropped as a thousands separator.
        """
        if "," in text and "." in text:
            thousands = "." if self.language.decimal_separator == "," else ","
            text = text.replace(thousands, "")
        try:
            return float(text.replace(",", "."))
        except ValueError:
            return None

    def _token(self, description: TextDescription, leading: bool = False) -> CategorizedToken:
        return CategorizedToken(
            description=description,
            source=self.fragment,
            box=self._estimate_token_box(),
            leading=leading,
        )

    def _estimate_token_box(self) -> Rect:
        """Interpolate the token's box from its character offsets."""
        box = self.fragment.box
        total = max(len(self._text), 1)
        char_width = box.width / total
        length = self._pos - self._token_start
        return Rect(
            box.min_x + self._token_start * char_width,
            box.min_y,
            length * char_width,
            box.height,
        )


def tokenize(fragment: TextBox, language: LabelLanguage = FALLBACK_LANGUAGE) -> list[CategorizedToken]:
    return Lexer(fragment, language).tokenize()
