"""Find and read the nutrition label in a photographed image."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .config import ScannerConfig
from .nutrition.label import NutritionLabel
from .nutrition.vocabulary import LabelLanguage
from .parsing.language import detect_language
from .parsing.parser import LabelParser
from .parsing.region import RegionCandidate, fallback_region, select_region
from .parsing.skew import estimate_skew
from .vision import RectangleObservation, VisionBackend
from .vision.imaging import crop, image_size, perspective_correct, rotate

if TYPE_CHECKING:
    import numpy as np

logger = logging.getLogger(__name__)


@dataclass
class DetectedRegion:
    image: np.ndarray
    observation: RectangleObservation
    language: LabelLanguage


class NutritionLabelDetector:
    """Locate a nutrition label in one image and parse it.

    Usage:
        detector = NutritionLabelDetector(image, backend, config)
        label = await detector.scan()

    Rectangles found by the backend are tried first. When none of them
    contains a keyword, the image is deskewed and the label is cut out
    around the keyword fragments instead.
    """

    def __init__(
        self,
        image: np.ndarray,
        backend: VisionBackend,
        config: ScannerConfig | None = None,
    ) -> None:
        self.image = image
        self.backend = backend
        self.config = config or ScannerConfig()
        self.region: DetectedRegion | None = None

    async def find_nutrition_label(self) -> DetectedRegion | None:
        region = await self._find_primary()
        if region is None:
            logger.info("No rectangle holds a label keyword; trying keyword bounding box")
            region = await self._find_secondary()

        self.region = region
        return region

    async def _find_primary(self) -> DetectedRegion | None:
        rectangles = await self.backend.detect_rectangles(self.image)
        logger.debug("Evaluating %d candidate rectangles", len(rectangles))

        candidates: list[RegionCandidate] = []
        for rectangle in rectangles:
            corrected = perspective_correct(self.image, rectangle)
            if corrected is None:
                continue
            texts = await self.backend.detect_text(corrected, accurate=False)
            width, height = image_size(corrected)
            candidates.append(RegionCandidate(
                observation=rectangle,
                texts=texts,
                area=float(width * height),
                image=corrected,
            ))

        best = select_region(candidates)
        if best is None or best.score is None:
            return None

        logger.info(
            "Selected rectangle with %d keywords (%s)",
            best.score.keyword_count,
            best.score.language.value,
        )
        return DetectedRegion(best.image, best.observation, best.score.language)

    async def _find_secondary(self) -> DetectedRegion | None:
        characters = await self.backend.detect_characters(self.image)
        angle = estimate_skew(characters)
        if angle:
            logger.info("Rotating image by %.0f° to level text", angle)
        rotated = rotate(self.image, angle)

        texts = await self.backend.detect_text(rotated, accurate=False)
        language = detect_language(texts, self.config.scanner.default_language)

        box = fallback_region(texts, language, self.config.scanner.fallback_expansion)
        if box is None:
            logger.info("No label keywords found in image")
            return None

        cropped = crop(rotated, box)
        if cropped is None:
            return None
        return DetectedRegion(cropped, RectangleObservation.from_rect(box), language)

    async def scan_nutrition_label(self) -> NutritionLabel | None:
        """Read the region found by ``find_nutrition_label``.

        Looks for the region first if that has not happened yet. Returns
        None when there is no region or the parsed label is not valid.
        """
        region = self.region or await self.find_nutrition_label()
        if region is None:
            return None

        texts = await self.backend.detect_text(region.image, accurate=True)
        label = LabelParser.from_text_boxes(texts, region.language).parse()
        if not label.is_valid:
            logger.info(
                "Parsed label scores %d; too few values to trust", label.score
            )
            return None
        return label

    async def scan(self) -> NutritionLabel | None:
        await self.find_nutrition_label()
        return await self.scan_nutrition_label()
