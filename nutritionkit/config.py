"""TOML configuration loader for the label scanner."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

from .nutrition.vocabulary import LabelLanguage, parse_language

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]


@dataclass
class TesseractConfig:
    cmd: str = ""
    lang: str = "eng+deu"


@dataclass
class ClaudeVisionConfig:
    api_key: str = ""
    model: str = "claude-sonnet-4-5-20250929"


@dataclass
class VisionConfig:
    backend: str = "tesseract"
    max_rectangles: int = 4
    min_rectangle_confidence: float = 0.7
    tesseract: TesseractConfig = field(default_factory=TesseractConfig)
    claude: ClaudeVisionConfig = field(default_factory=ClaudeVisionConfig)


@dataclass
class ScannerSection:
    default_language: LabelLanguage = LabelLanguage.ENGLISH
    # growth applied around keyword fragments when no rectangle qualifies
    fallback_expansion: float = 1.1


@dataclass
class ScannerConfig:
    vision: VisionConfig = field(default_factory=VisionConfig)
    scanner: ScannerSection = field(default_factory=ScannerSection)


def load_config(path: str | Path | None = None) -> ScannerConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    The tesseract binary and the API key can be set via environment variables.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path)
        if p.exists():
            if tomllib is None:
                raise ImportError(
                    "tomli is required on Python < 3.11: pip install tomli"
                )
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    vis = raw.get("vision", {})
    scn = raw.get("scanner", {})

    tesseract_cfg = vis.get("tesseract", {})
    claude_cfg = vis.get("claude", {})

    # Resolve config file → environment variable
    tesseract_cmd = tesseract_cfg.get("cmd", "") or os.environ.get("TESSERACT_CMD", "")
    claude_api_key = claude_cfg.get("api_key", "") or os.environ.get(
        "ANTHROPIC_API_KEY", ""
    )

    return ScannerConfig(
        vision=VisionConfig(
            backend=vis.get("backend", "tesseract"),
            max_rectangles=vis.get("max_rectangles", 4),
            min_rectangle_confidence=vis.get("min_rectangle_confidence", 0.7),
            tesseract=TesseractConfig(
                cmd=tesseract_cmd,
                lang=tesseract_cfg.get("lang", "eng+deu"),
            ),
            claude=ClaudeVisionConfig(
                api_key=claude_api_key,
                model=claude_cfg.get("model", "claude-sonnet-4-5-20250929"),
            ),
        ),
        scanner=ScannerSection(
            default_language=parse_language(scn.get("default_language", "english")),
            fallback_expansion=scn.get("fallback_expansion", 1.1),
        ),
    )
