"""Claude API vision backend for label text recognition."""

from __future__ import annotations

import asyncio
import base64
import json
import logging
from typing import TYPE_CHECKING

from ..geometry import Rect
from . import RectangleObservation, TextBox, VisionBackend
from .imaging import encode_image, find_rectangles

if TYPE_CHECKING:
    import numpy as np

logger = logging.getLogger(__name__)

_PROMPT = """\
This image shows (part of) a food package.
Transcribe every line of text exactly as printed, one entry per line of text.
Do not correct spelling and do not translate.

Return only a JSON array in this format (no other text):
[
  {"text": "Total Fat 5g", "box": [x, y, width, height]}
]

The box is the line's bounding box as fractions of the image size, with
x and y measured from the top-left corner.
"""

_ACCURATE_NOTE = "\nTake extra care with digits, decimal separators and units."


class ClaudeVisionBackend(VisionBackend):
    """Recognise label text using Claude's vision capability.

    Claude reports line boxes only; character boxes are not available, so
    skew estimation sees an empty list and never rotates.
    """

    def __init__(
        self,
        api_key: str = "",
        model: str = "claude-sonnet-4-5-20250929",
        max_rectangles: int = 4,
        min_rectangle_confidence: float = 0.7,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._max_rectangles = max_rectangles
        self._min_rectangle_confidence = min_rectangle_confidence

    async def detect_text(self, image: np.ndarray, accurate: bool = False) -> list[TextBox]:
        if not self._api_key:
            raise ValueError(
                "Anthropic API key is not set. "
                "Check the config file or the ANTHROPIC_API_KEY environment variable."
            )

        try:
            import anthropic
        except ImportError:
            raise ImportError(
                "anthropic SDK is required: pip install anthropic"
            ) from None

        data = encode_image(image, ".png")
        content: list[dict] = [
            {
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": "image/png",
                    "data": base64.standard_b64encode(data).decode(),
                },
            },
            {"type": "text", "text": _PROMPT + (_ACCURATE_NOTE if accurate else "")},
        ]

        client = anthropic.AsyncAnthropic(api_key=self._api_key)
        response = await client.messages.create(
            model=self._model,
            max_tokens=4096,
            messages=[{"role": "user", "content": content}],
        )

        text = response.content[0].text
        fragments = _parse_response(text)
        logger.debug("Claude returned %d text lines", len(fragments))
        return fragments

    async def detect_rectangles(self, image: np.ndarray) -> list[RectangleObservation]:
        return await asyncio.to_thread(
            find_rectangles,
            image,
            self._max_rectangles,
            self._min_rectangle_confidence,
        )

    async def detect_characters(self, image: np.ndarray) -> list[Rect]:
        logger.debug("Claude backend has no character boxes; skipping skew detection")
        return []


def _parse_response(text: str) -> list[TextBox]:
    """Parse the JSON array from Claude's response."""
    # Strip markdown fences if present
    cleaned = text.strip()
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")
        lines = [l for l in lines[1:] if not l.strip().startswith("```")]
        cleaned = "\n".join(lines)

    items = json.loads(cleaned)
    fragments: list[TextBox] = []
    for item in items:
        text = str(item.get("text", "")).strip()
        box = item.get("box")
        if not text or not isinstance(box, list) or len(box) != 4:
            continue
        fragments.append(TextBox(text=text, box=Rect.from_list(box).clamped()))
    return fragments
