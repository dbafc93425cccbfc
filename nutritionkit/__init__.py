"""Nutrition label recognition from OCR output."""

from .config import (
    ClaudeVisionConfig,
    ScannerConfig,
    ScannerSection,
    TesseractConfig,
    VisionConfig,
    load_config,
)
from .detector import DetectedRegion, NutritionLabelDetector
from .geometry import Point, Rect
from .nutrition import (
    FoodItem,
    LabelLanguage,
    MeasurementUnit,
    NutritionAmount,
    NutritionItem,
    NutritionLabel,
    ServingSize,
)
from .parsing import InvariantViolation, LabelParser, detect_language, estimate_skew
from .vision import RectangleObservation, TextBox, VisionBackend, create_backend

__all__ = [
    "NutritionLabelDetector",
    "DetectedRegion",
    "LabelParser",
    "InvariantViolation",
    "detect_language",
    "estimate_skew",
    "NutritionLabel",
    "NutritionItem",
    "NutritionAmount",
    "ServingSize",
    "MeasurementUnit",
    "LabelLanguage",
    "FoodItem",
    "TextBox",
    "RectangleObservation",
    "VisionBackend",
    "create_backend",
    "Point",
    "Rect",
    "ScannerConfig",
    "VisionConfig",
    "TesseractConfig",
    "ClaudeVisionConfig",
    "ScannerSection",
    "load_config",
]
