"""CLI entry point for the nutrition label scanner."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from .config import load_config
from .detector import NutritionLabelDetector
from .nutrition.label import FoodItem, NutritionLabel
from .nutrition.openfoodfacts import food_item_from_product
from .nutrition.vocabulary import parse_language
from .parsing.language import detect_language
from .parsing.parser import LabelParser
from .parsing.tokens import InvariantViolation
from .vision import TextBox, create_backend
from .vision.imaging import load_image


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="nutritionkit",
        description="Read nutrition facts from photographed food labels",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="config file path (TOML)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="show debug logging"
    )

    sub = parser.add_subparsers(dest="command")

    # scan
    scan_parser = sub.add_parser("scan", help="find and read the label in an image")
    scan_parser.add_argument("image", type=str, help="image file")
    scan_parser.add_argument("--json", action="store_true", help="output JSON")

    # parse
    parse_parser = sub.add_parser(
        "parse", help="read a label from recorded OCR fragments"
    )
    parse_parser.add_argument(
        "boxes", type=str, help='JSON file: [{"text": ..., "box": [x, y, w, h]}]'
    )
    parse_parser.add_argument(
        "--language", type=str, default=None,
        help="label language (detected when omitted)",
    )
    parse_parser.add_argument("--json", action="store_true", help="output JSON")

    # product
    product_parser = sub.add_parser(
        "product", help="convert a saved Open Food Facts product response"
    )
    product_parser.add_argument("product", type=str, help="product JSON file")
    product_parser.add_argument("--json", action="store_true", help="output JSON")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
        match args.command:
            case "scan":
                if asyncio.run(_cmd_scan(config, args)) is None:
                    sys.exit(1)
            case "parse":
                _cmd_parse(config, args)
            case "product":
                _cmd_product(args)
    except InvariantViolation as e:
        print(f"internal error: {e}", file=sys.stderr)
        sys.exit(2)
    except (ValueError, FileNotFoundError, ImportError) as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)


def _print_label(label: NutritionLabel | None, as_json: bool) -> None:
    if as_json:
        data = label.to_dict() if label is not None else None
        print(json.dumps(data, ensure_ascii=False, indent=2))
        return
    if label is None:
        print("No nutrition label found.")
        return
    print(label.display())


async def _cmd_scan(config, args) -> NutritionLabel | None:
    image = load_image(args.image)
    backend = create_backend(config)
    detector = NutritionLabelDetector(image, backend, config)
    label = await detector.scan()
    _print_label(label, args.json)
    return label


def _cmd_parse(config, args) -> None:
    raw = json.loads(Path(args.boxes).read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError(f"{args.boxes}: expected a JSON array of text boxes")
    texts = [TextBox.from_dict(item) for item in raw]

    if args.language:
        language = parse_language(args.language)
    else:
        language = detect_language(texts, config.scanner.default_language)

    label = LabelParser.from_text_boxes(texts, language).parse()
    if not args.json and not label.is_valid:
        print(f"Warning: only {label.score} values found; label is not valid.")
    _print_label(label, args.json)


def _cmd_product(args) -> None:
    payload = json.loads(Path(args.product).read_text(encoding="utf-8"))
    item: FoodItem = food_item_from_product(payload)

    if args.json:
        print(json.dumps(item.to_dict(), ensure_ascii=False, indent=2))
        return

    print(item.product_name or "(unnamed product)")
    if item.nutrition is not None:
        print(item.nutrition.display())
