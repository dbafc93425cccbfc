"""Estimate page rotation from individual character boxes.

Characters are chained greedily into text lines; each line votes for its
angle in an integer-degree histogram and the best-supported window wins.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from collections.abc import Sequence

from ..geometry import Point, Rect

logger = logging.getLogger(__name__)

# Squared normalized distance between neighbouring character centers.
MAX_CHARACTER_DISTANCE_SQUARED = 0.001
# Radians a new link may deviate from the previous one.
DIRECTION_TOLERANCE = 0.05
MIN_LINE_LENGTH = 0.03
HISTOGRAM_WINDOW = 2
MIN_CONFIDENCE = 5.0
MIN_ROTATION = 3


def _fit_line(points: Sequence[Point]) -> tuple[Point, Point]:
    """Least-squares fit of y over x, evaluated at the first and last x."""
    n = len(points)
    mean_x = sum(p.x for p in points) / n
    mean_y = sum(p.y for p in points) / n
    sxx = sum((p.x - mean_x) ** 2 for p in points)
    sxy = sum((p.x - mean_x) * (p.y - mean_y) for p in points)
    slope = sxy / sxx if sxx else 0.0
    intercept = mean_y - slope * mean_x

    first, last = points[0], points[-1]
    return (
        Point(first.x, slope * first.x + intercept),
        Point(last.x, slope * last.x + intercept),
    )


def find_character_line(
    start: int, centers: Sequence[Point], used: set[int]
) -> tuple[Point, Point] | None:
    """Chain characters rightward from ``centers[start]``.

    Marks every chained index in ``used``. Returns the line's start and end
    points, or None if no neighbour was found.
    """
    line = [start]
    current = centers[start]

    while True:
        closest: int | None = None
        min_distance = math.inf

        for index, other in enumerate(centers):
            if index in used:
                continue
            delta = other - current
            if delta.x <= 0:
                continue
            distance = delta.magnitude_squared
            if distance == 0 or distance > MAX_CHARACTER_DISTANCE_SQUARED or distance >= min_distance:
                continue

            if len(line) > 1:
                previous = (centers[line[-1]] - centers[line[-2]]).angle
                if abs(previous - delta.angle) >= DIRECTION_TOLERANCE:
                    continue

            closest = index
            min_distance = distance

        if closest is None:
            break

        used.add(closest)
        line.append(closest)
        current = centers[closest]

    if len(line) < 2:
        return None

    points = [centers[i] for i in line]
    if len(points) == 2:
        return points[0], points[1]
    return _fit_line(points)


def angle_histogram(characters: Sequence[Rect]) -> Counter[int]:
    """Integer-degree line angles, one vote per chained line."""
    centers = [c.center for c in characters]
    used: set[int] = set()
    histogram: Counter[int] = Counter()

    for index in range(len(centers)):
        if index in used:
            continue
        used.add(index)

        found = find_character_line(index, centers, used)
        if found is None:
            continue

        start, end = found
        line = end - start
        if line.magnitude < MIN_LINE_LENGTH:
            continue

        histogram[round(math.degrees(line.angle))] += 1

    return histogram


def estimate_skew(characters: Sequence[Rect]) -> float:
    """Rotation in degrees needed to level the text, or 0.0.

    Positive means the text descends to the right, so the image must be
    rotated counter-clockwise by this many degrees.
    """
    histogram = angle_histogram(characters)
    if not histogram:
        return 0.0

    best_score = 0.0
    best_angle = 0
    for angle in range(min(histogram), max(histogram) + 1):
        counts = [
            histogram[angle + offset]
            for offset in range(-HISTOGRAM_WINDOW, HISTOGRAM_WINDOW + 1)
            if angle + offset in histogram
        ]
        if not counts:
            continue
        average = sum(counts) / len(counts)
        if average > best_score:
            best_score = average
            best_angle = angle

    logger.debug("Skew histogram %s: best %d° (score %.1f)", dict(histogram), best_angle, best_score)

    if best_score <= MIN_CONFIDENCE or abs(best_angle) <= MIN_ROTATION:
        return 0.0
    return float(best_angle)
