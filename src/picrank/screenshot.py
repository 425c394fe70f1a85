"""Screenshot detection from photo metadata alone.

Six independent checks each add a fixed weight to an evidence score; 5 or
more points marks the photo as a likely screenshot. Image data is never
decoded.
"""

from __future__ import annotations

from dataclasses import dataclass

from picrank.models import Photo

SCREENSHOT_THRESHOLD = 5
MAX_CONFIDENCE = 10

WEIGHT_NO_LOCATION = 3
WEIGHT_NO_CAMERA_MODEL = 3
WEIGHT_NO_CAMERA_SETTINGS = 2
WEIGHT_SCREEN_ASPECT = 2
WEIGHT_KEYWORD = 4
WEIGHT_SCREEN_RESOLUTION = 3

# Phone and tablet screen aspect ratios
SCREEN_ASPECT_RATIOS = (
    16.0 / 9.0,  # iPhone 8 and earlier
    19.5 / 9.0,  # iPhone X through 13
    20.0 / 9.0,  # iPhone 14 Pro, 15 Pro
    2.16,  # iPhone 14/15 Pro Max
    1.78,  # iPad landscape
    1.33,  # iPad 4:3
)
ASPECT_RATIO_TOLERANCE = 0.1

SCREENSHOT_KEYWORDS = (
    "screenshot",
    "screen shot",
    "screen_shot",
    "screen recording",
    "screen_recording",
    "screenrecording",
    "img_",
    "photo_",
)

# Portrait orientation; the swapped pair is checked as well
SCREEN_RESOLUTIONS = frozenset(
    {
        (1290, 2796),  # iPhone 15 Pro Max, 14 Pro Max
        (1179, 2556),  # iPhone 15 Pro, 14 Pro
        (1170, 2532),  # iPhone 14, 13, 12
        (1080, 2340),  # iPhone 13 mini, 12 mini
        (1242, 2688),  # iPhone 11 Pro Max, XS Max
        (1125, 2436),  # iPhone 11 Pro, XS, X
        (828, 1792),  # iPhone 11, XR
        (1242, 2208),  # iPhone 8 Plus through 6 Plus
        (750, 1334),  # iPhone 8, 7, 6s, 6, SE 2/3
        (640, 1136),  # iPhone SE 1, 5s, 5c, 5
        (2048, 2732),  # iPad Pro 12.9"
        (1668, 2388),  # iPad Pro 11", iPad Air 4/5
        (1620, 2360),  # iPad 10
        (1488, 2266),  # iPad mini 6
    }
)


@dataclass(frozen=True)
class ScreenshotAnalysis:
    """Detailed screenshot verdict."""

    is_likely_screenshot: bool
    confidence: int  # 0-10
    indicators: tuple[str, ...]
    aspect_ratio: float

    @property
    def confidence_description(self) -> str:
        if self.confidence <= 2:
            return "Very Low"
        if self.confidence <= 4:
            return "Low"
        if self.confidence <= 6:
            return "Medium"
        if self.confidence <= 8:
            return "High"
        return "Very High"


def has_screen_aspect_ratio(width: int, height: int) -> bool:
    """Aspect ratio, or its inverse, within tolerance of a device screen."""
    if width <= 0 or height <= 0:
        return False
    aspect = width / height
    return any(
        abs(aspect - ratio) < ASPECT_RATIO_TOLERANCE
        or abs(aspect - 1.0 / ratio) < ASPECT_RATIO_TOLERANCE
        for ratio in SCREEN_ASPECT_RATIOS
    )


def has_screenshot_keywords(asset_identifier: str) -> bool:
    lowered = asset_identifier.lower()
    return any(keyword in lowered for keyword in SCREENSHOT_KEYWORDS)


def has_screen_resolution(width: int, height: int) -> bool:
    return (width, height) in SCREEN_RESOLUTIONS or (height, width) in SCREEN_RESOLUTIONS


def _indicators(photo: Photo) -> list[tuple[int, str]]:
    meta = photo.metadata
    checks = [
        (photo.location is None, WEIGHT_NO_LOCATION, "No GPS location data"),
        (meta.camera_model is None, WEIGHT_NO_CAMERA_MODEL, "No camera model information"),
        (
            not meta.has_camera_settings,
            WEIGHT_NO_CAMERA_SETTINGS,
            "No camera settings (focal length, aperture, etc.)",
        ),
        (
            has_screen_aspect_ratio(meta.width, meta.height),
            WEIGHT_SCREEN_ASPECT,
            "Aspect ratio matches device screen",
        ),
        (
            has_screenshot_keywords(photo.asset_identifier),
            WEIGHT_KEYWORD,
            "Filename contains screenshot keywords",
        ),
        (
            has_screen_resolution(meta.width, meta.height),
            WEIGHT_SCREEN_RESOLUTION,
            "Exact dimensions match device screen resolution",
        ),
    ]
    return [(weight, text) for fired, weight, text in checks if fired]


def screenshot_evidence(photo: Photo) -> int:
    """Total evidence score (unclamped)."""
    return sum(weight for weight, _ in _indicators(photo))


def is_screenshot(photo: Photo) -> bool:
    return screenshot_evidence(photo) >= SCREENSHOT_THRESHOLD


def screenshot_analysis(photo: Photo) -> ScreenshotAnalysis:
    """Screenshot verdict with the indicators that fired, in check order."""
    fired = _indicators(photo)
    score = sum(weight for weight, _ in fired)
    return ScreenshotAnalysis(
        is_likely_screenshot=score >= SCREENSHOT_THRESHOLD,
        confidence=max(0, min(score, MAX_CONFIDENCE)),
        indicators=tuple(text for _, text in fired),
        aspect_ratio=photo.metadata.aspect_ratio,
    )
