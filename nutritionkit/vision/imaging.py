"""OpenCV image helpers: loading, perspective correction, rotation, cropping.

Images are BGR (or grayscale) numpy arrays as produced by ``cv2.imread``.
Regions and corners are given in normalized top-left-origin coordinates.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from ..geometry import Point, Rect
from . import RectangleObservation

if TYPE_CHECKING:
    import numpy as np

logger = logging.getLogger(__name__)

# Ignore quadrilaterals smaller than this share of the image.
MIN_RECTANGLE_AREA = 0.01


def _cv2():
    try:
        import cv2
    except ImportError:
        raise ImportError(
            "opencv-python is required: pip install opencv-python"
        ) from None
    return cv2


def _np():
    try:
        import numpy
    except ImportError:
        raise ImportError("numpy is required: pip install numpy") from None
    return numpy


def load_image(path: str | Path) -> np.ndarray:
    """Read an image file into a BGR array."""
    cv2 = _cv2()
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"image not found: {path}")
    image = cv2.imread(str(path))
    if image is None:
        raise ValueError(f"could not decode image: {path}")
    return image


def encode_image(image: np.ndarray, ext: str = ".png") -> bytes:
    cv2 = _cv2()
    ok, buffer = cv2.imencode(ext, image)
    if not ok:
        raise ValueError(f"could not encode image as {ext}")
    return buffer.tobytes()


def image_size(image: np.ndarray) -> tuple[int, int]:
    """(width, height) in pixels."""
    height, width = image.shape[:2]
    return width, height


def _to_pixels(point: Point, width: int, height: int) -> tuple[float, float]:
    return point.x * width, point.y * height


def perspective_correct(image: np.ndarray, observation: RectangleObservation) -> np.ndarray | None:
    """Warp the observed quadrilateral into an upright rectangle.

    Returns None for degenerate quadrilaterals.
    """
    cv2 = _cv2()
    np = _np()
    width, height = image_size(image)

    tl, tr, br, bl = (
        np.array(_to_pixels(p, width, height), dtype="float32")
        for p in observation.corners
    )
    out_width = int(max(np.linalg.norm(br - bl), np.linalg.norm(tr - tl)))
    out_height = int(max(np.linalg.norm(tr - br), np.linalg.norm(tl - bl)))
    if out_width < 1 or out_height < 1:
        return None

    src = np.array([tl, tr, br, bl], dtype="float32")
    dst = np.array(
        [
            [0, 0],
            [out_width - 1, 0],
            [out_width - 1, out_height - 1],
            [0, out_height - 1],
        ],
        dtype="float32",
    )
    matrix = cv2.getPerspectiveTransform(src, dst)
    return cv2.warpPerspective(image, matrix, (out_width, out_height))


def rotate(image: np.ndarray, degrees: float) -> np.ndarray:
    """Rotate counter-clockwise by ``degrees``, growing the canvas to fit."""
    if degrees == 0:
        return image
    cv2 = _cv2()
    width, height = image_size(image)
    center = (width / 2, height / 2)

    matrix = cv2.getRotationMatrix2D(center, degrees, 1.0)
    cos = abs(matrix[0, 0])
    sin = abs(matrix[0, 1])
    new_width = int(height * sin + width * cos)
    new_height = int(height * cos + width * sin)
    matrix[0, 2] += new_width / 2 - center[0]
    matrix[1, 2] += new_height / 2 - center[1]

    return cv2.warpAffine(
        image,
        matrix,
        (new_width, new_height),
        flags=cv2.INTER_CUBIC,
        borderMode=cv2.BORDER_REPLICATE,
    )


def crop(image: np.ndarray, region: Rect) -> np.ndarray | None:
    """Cut out a normalized region; None if it covers no pixels."""
    width, height = image_size(image)
    region = region.clamped()
    left = int(round(region.min_x * width))
    right = int(round(region.max_x * width))
    top = int(round(region.min_y * height))
    bottom = int(round(region.max_y * height))
    if right <= left or bottom <= top:
        return None
    return image[top:bottom, left:right].copy()


def _order_corners(points: list[tuple[float, float]]) -> tuple[tuple[float, float], ...]:
    """Sort four points into top-left, top-right, bottom-right, bottom-left."""
    by_sum = sorted(points, key=lambda p: p[0] + p[1])
    by_diff = sorted(points, key=lambda p: p[1] - p[0])
    return by_sum[0], by_diff[0], by_sum[-1], by_diff[-1]


def find_rectangles(
    image: np.ndarray,
    max_observations: int = 4,
    min_confidence: float = 0.7,
) -> list[RectangleObservation]:
    """Detect quadrilateral outlines, largest first.

    Confidence is the quadrilateral's area over the area of its minimum
    bounding rectangle, i.e. how close it is to a true rectangle.
    """
    cv2 = _cv2()
    width, height = image_size(image)
    image_area = float(width * height)
    if image_area == 0:
        return []

    gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY) if image.ndim == 3 else image
    blurred = cv2.GaussianBlur(gray, (5, 5), 0)
    edges = cv2.Canny(blurred, 50, 150)
    contours, _ = cv2.findContours(edges, cv2.RETR_LIST, cv2.CHAIN_APPROX_SIMPLE)

    found: list[tuple[float, RectangleObservation]] = []
    for contour in contours:
        perimeter = cv2.arcLength(contour, True)
        approx = cv2.approxPolyDP(contour, 0.02 * perimeter, True)
        if len(approx) != 4 or not cv2.isContourConvex(approx):
            continue

        area = cv2.contourArea(approx)
        if area / image_area < MIN_RECTANGLE_AREA:
            continue

        (_, _), (box_w, box_h), _ = cv2.minAreaRect(approx)
        box_area = box_w * box_h
        confidence = area / box_area if box_area else 0.0
        if confidence < min_confidence:
            continue

        points = [(float(x) / width, float(y) / height) for x, y in approx.reshape(4, 2)]
        tl, tr, br, bl = (Point(x, y) for x, y in _order_corners(points))
        found.append((
            area,
            RectangleObservation(
                top_left=tl,
                top_right=tr,
                bottom_left=bl,
                bottom_right=br,
                confidence=min(confidence, 1.0),
            ),
        ))

    found.sort(key=lambda entry: entry[0], reverse=True)
    observations = [observation for _, observation in found[:max_observations]]
    logger.debug("Found %d rectangle candidates (%d kept)", len(found), len(observations))
    return observations
