"""Local Tesseract OCR backend."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from ..geometry import Rect
from . import RectangleObservation, TextBox, VisionBackend
from .imaging import find_rectangles, image_size

if TYPE_CHECKING:
    import numpy as np

logger = logging.getLogger(__name__)

# 11: sparse text, fast enough for scoring candidates
# 6: one uniform block, better for the final label scan
_FAST_CONFIG = "--oem 1 --psm 11"
_ACCURATE_CONFIG = "--oem 1 --psm 6"


def _pytesseract():
    try:
        import pytesseract
    except ImportError:
        raise ImportError(
            "pytesseract is required: pip install pytesseract"
        ) from None
    return pytesseract


def _to_pil(image: np.ndarray):
    try:
        import cv2
        from PIL import Image
    except ImportError:
        raise ImportError(
            "opencv-python and Pillow are required for the Tesseract backend"
        ) from None

    if image.ndim == 2:
        return Image.fromarray(image)
    return Image.fromarray(cv2.cvtColor(image, cv2.COLOR_BGR2RGB))


def group_lines(data: dict[str, list[Any]], width: int, height: int) -> list[TextBox]:
    """Join ``image_to_data`` words into one fragment per text line."""
    lines: dict[tuple[int, int, int], list[int]] = {}
    for i, raw in enumerate(data["text"]):
        text = (raw or "").strip()
        try:
            conf = float(data["conf"][i])
        except (TypeError, ValueError):
            conf = -1.0
        if not text or conf < 0:
            continue
        key = (int(data["block_num"][i]), int(data["par_num"][i]), int(data["line_num"][i]))
        lines.setdefault(key, []).append(i)

    fragments: list[TextBox] = []
    for indices in lines.values():
        indices.sort(key=lambda i: int(data["left"][i]))
        left = min(int(data["left"][i]) for i in indices)
        top = min(int(data["top"][i]) for i in indices)
        right = max(int(data["left"][i]) + int(data["width"][i]) for i in indices)
        bottom = max(int(data["top"][i]) + int(data["height"][i]) for i in indices)
        fragments.append(TextBox(
            text=" ".join(data["text"][i].strip() for i in indices),
            box=Rect(left / width, top / height, (right - left) / width, (bottom - top) / height),
        ))
    return fragments


def parse_boxes(output: str, width: int, height: int) -> list[Rect]:
    """Convert ``image_to_boxes`` output (bottom-left origin) to normalized rects."""
    characters: list[Rect] = []
    for line in output.splitlines():
        parts = line.split()
        if len(parts) < 5:
            continue
        try:
            x1, y1, x2, y2 = (int(v) for v in parts[1:5])
        except ValueError:
            continue
        characters.append(Rect(
            x1 / width,
            (height - y2) / height,
            (x2 - x1) / width,
            (y2 - y1) / height,
        ))
    return characters


class TesseractVisionBackend(VisionBackend):
    """Recognise label text with a local tesseract binary.

    Works offline. Rectangles come from OpenCV contour detection.
    """

    def __init__(
        self,
        cmd: str = "",
        lang: str = "eng+deu",
        max_rectangles: int = 4,
        min_rectangle_confidence: float = 0.7,
    ) -> None:
        self._cmd = cmd
        self._lang = lang
        self._max_rectangles = max_rectangles
        self._min_rectangle_confidence = min_rectangle_confidence

    def _load(self):
        pytesseract = _pytesseract()
        if self._cmd:
            pytesseract.pytesseract.tesseract_cmd = self._cmd
        return pytesseract

    def _detect_text(self, image: np.ndarray, accurate: bool) -> list[TextBox]:
        pytesseract = self._load()
        width, height = image_size(image)
        if not width or not height:
            return []
        data = pytesseract.image_to_data(
            _to_pil(image),
            lang=self._lang,
            config=_ACCURATE_CONFIG if accurate else _FAST_CONFIG,
            output_type=pytesseract.Output.DICT,
        )
        fragments = group_lines(data, width, height)
        logger.debug("Tesseract found %d text lines (accurate=%s)", len(fragments), accurate)
        return fragments

    def _detect_characters(self, image: np.ndarray) -> list[Rect]:
        pytesseract = self._load()
        width, height = image_size(image)
        if not width or not height:
            return []
        output = pytesseract.image_to_boxes(
            _to_pil(image), lang=self._lang, config=_FAST_CONFIG
        )
        return parse_boxes(output, width, height)

    async def detect_text(self, image: np.ndarray, accurate: bool = False) -> list[TextBox]:
        return await asyncio.to_thread(self._detect_text, image, accurate)

    async def detect_rectangles(self, image: np.ndarray) -> list[RectangleObservation]:
        return await asyncio.to_thread(
            find_rectangles,
            image,
            self._max_rectangles,
            self._min_rectangle_confidence,
        )

    async def detect_characters(self, image: np.ndarray) -> list[Rect]:
        return await asyncio.to_thread(self._detect_characters, image)
