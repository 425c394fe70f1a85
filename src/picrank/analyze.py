"""Analyze module: heuristic quality measurements on decoded images."""

from __future__ import annotations

from typing import Sequence

import numpy as np
from PIL import Image

from picrank.models import FaceObservation, ObjectObservation

DEFAULT_OBJECT_CONFIDENCE_FLOOR = 0.1
DEFAULT_MAX_OBJECTS = 20


def _aspect_ratio(image: Image.Image) -> float:
    width, height = image.size
    return width / height if height else 0.0


def compute_sharpness(image: Image.Image) -> float:
    """Estimate sharpness potential from resolution and framing.

    Higher resolution and a moderate aspect ratio (less cropping) score
    higher. The grayscale conversion stands in for the analysis pass; if
    it fails the score is 0.0.

    Args:
        image: Decoded PIL Image.

    Returns:
        Sharpness score from 0.0 to 1.0.
    """
    try:
        image.convert("L")
    except (OSError, ValueError):
        return 0.0

    width, height = image.size
    pixel_count = width * height

    score = 0.3
    if pixel_count > 2_000_000:
        score += 0.4
    elif pixel_count > 1_000_000:
        score += 0.3
    elif pixel_count > 500_000:
        score += 0.2

    if 0.75 <= _aspect_ratio(image) <= 1.77:
        score += 0.2

    # Conversion succeeded
    score += 0.1

    return min(1.0, score)


def average_luminance(image: Image.Image) -> float:
    """Mean RGB brightness scaled to 0-1."""
    rgb = np.asarray(image.convert("RGB"), dtype=np.float64)
    return float(rgb.mean() / 255.0)


def compute_exposure(image: Image.Image) -> float:
    """Score exposure from average brightness.

    Returns:
        1.0 for 0.4-0.6 brightness, 0.3 below 0.2 or above 0.8, else 0.7.
        0.0 if the image cannot be converted.
    """
    try:
        brightness = average_luminance(image)
    except (OSError, ValueError):
        return 0.0

    if brightness < 0.2 or brightness > 0.8:
        return 0.3
    if 0.4 <= brightness <= 0.6:
        return 1.0
    return 0.7


def compute_composition(image: Image.Image) -> float:
    """Score composition from aspect ratio and resolution.

    Square-ish (0.75-1.33) or 3:2 / 16:9 (1.5-1.8) frames earn 0.3,
    more than one megapixel earns 0.2, on top of a 0.5 base.
    """
    aspect = _aspect_ratio(image)
    good_aspect = 0.75 <= aspect <= 1.33 or 1.5 <= aspect <= 1.8

    width, height = image.size
    high_resolution = width * height > 1_000_000

    score = 0.5
    if good_aspect:
        score += 0.3
    if high_resolution:
        score += 0.2
    return min(1.0, score)


def compute_basic_aesthetic(
    faces: Sequence[FaceObservation], objects: Sequence[ObjectObservation]
) -> float:
    """Fallback aesthetic score from detected faces and objects.

    People photos get +0.2 plus 10% of the mean face quality; recognizable
    content adds 15% of the mean object confidence.
    """
    score = 0.5

    if faces:
        score += 0.2
        score += sum(f.capture_quality for f in faces) / len(faces) * 0.1

    if objects:
        score += sum(o.confidence for o in objects) / len(objects) * 0.15

    return min(1.0, score)


def select_objects(
    objects: Sequence[ObjectObservation],
    confidence_floor: float = DEFAULT_OBJECT_CONFIDENCE_FLOOR,
    limit: int = DEFAULT_MAX_OBJECTS,
) -> list[ObjectObservation]:
    """Keep the first `limit` observations above the confidence floor.

    Provider order is preserved; nothing is re-sorted.
    """
    kept = [o for o in objects if o.confidence > confidence_floor]
    return kept[:limit]


def scene_confidence(objects: Sequence[ObjectObservation]) -> float:
    """Confidence of the first object observation, or 0.0."""
    if not objects:
        return 0.0
    return float(objects[0].confidence)
