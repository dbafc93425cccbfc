"""Vision backend base class, data types, and factory."""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ..geometry import Point, Rect

if TYPE_CHECKING:
    import numpy as np

    from ..config import ScannerConfig


@dataclass(frozen=True)
class TextBox:
    """One OCR fragment: recognised text and its normalized bounding box."""

    text: str
    box: Rect
    id: uuid.UUID = field(default_factory=uuid.uuid4, compare=False)

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "box": self.box.to_list()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TextBox:
        return cls(text=str(data["text"]), box=Rect.from_list(data["box"]))


@dataclass(frozen=True)
class RectangleObservation:
    """A detected quadrilateral, corners in normalized coordinates."""

    top_left: Point
    top_right: Point
    bottom_left: Point
    bottom_right: Point
    confidence: float = 1.0

    @property
    def corners(self) -> tuple[Point, Point, Point, Point]:
        return (self.top_left, self.top_right, self.bottom_right, self.bottom_left)

    @property
    def bounding_box(self) -> Rect:
        xs = [p.x for p in self.corners]
        ys = [p.y for p in self.corners]
        return Rect(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))

    @classmethod
    def from_rect(cls, rect: Rect, confidence: float = 1.0) -> RectangleObservation:
        return cls(
            top_left=Point(rect.min_x, rect.min_y),
            top_right=Point(rect.max_x, rect.min_y),
            bottom_left=Point(rect.min_x, rect.max_y),
            bottom_right=Point(rect.max_x, rect.max_y),
            confidence=confidence,
        )


class VisionBackend(ABC):
    """Abstract OCR / shape detection collaborator.

    Images are numpy arrays as returned by ``imaging.load_image``.
    """

    @abstractmethod
    async def detect_text(self, image: np.ndarray, accurate: bool = False) -> list[TextBox]:
        """Recognise text fragments.

        ``accurate`` trades speed for recognition quality; region scoring uses
        the fast mode, the final label scan the accurate one.
        """
        ...

    @abstractmethod
    async def detect_rectangles(self, image: np.ndarray) -> list[RectangleObservation]:
        """Detect candidate label rectangles, largest first."""
        ...

    @abstractmethod
    async def detect_characters(self, image: np.ndarray) -> list[Rect]:
        """Detect individual character boxes for skew estimation."""
        ...


def create_backend(config: ScannerConfig) -> VisionBackend:
    """Create a vision backend based on configuration."""
    backend_name = config.vision.backend

    match backend_name:
        case "tesseract":
            from .tesseract import TesseractVisionBackend

            return TesseractVisionBackend(
                cmd=config.vision.tesseract.cmd,
                lang=config.vision.tesseract.lang,
                max_rectangles=config.vision.max_rectangles,
                min_rectangle_confidence=config.vision.min_rectangle_confidence,
            )
        case "claude":
            from .claude import ClaudeVisionBackend

            return ClaudeVisionBackend(
                api_key=config.vision.claude.api_key,
                model=config.vision.claude.model,
                max_rectangles=config.vision.max_rectangles,
                min_rectangle_confidence=config.vision.min_rectangle_confidence,
            )
        case _:
            raise ValueError(
                f"unknown vision backend: {backend_name!r} "
                f"(choose from tesseract / claude)"
            )
