"""Rule-based photo categorization from faces and object labels."""

from __future__ import annotations

from picrank.models import AnalysisResult, Photo, PhotoType

LANDSCAPE_KEYWORDS = (
    "mountain",
    "tree",
    "sky",
    "water",
    "landscape",
    "nature",
    "outdoor",
    "scenery",
    "field",
    "forest",
    "beach",
    "sunset",
    "sunrise",
    "cloud",
    "horizon",
    "valley",
    "hill",
)

# Highest priority first
PRIORITY = (
    PhotoType.PORTRAIT,
    PhotoType.MULTI_FACE,
    PhotoType.LANDSCAPE,
    PhotoType.OTHER,
)


class KeywordCategorizer:
    """Categorizes by face count, then by landscape words in object labels."""

    def __init__(self, landscape_keywords: tuple[str, ...] = LANDSCAPE_KEYWORDS) -> None:
        self.landscape_keywords = tuple(k.lower() for k in landscape_keywords)

    def has_landscape_objects(self, result: AnalysisResult) -> bool:
        return any(
            keyword in obj.label.lower()
            for obj in result.objects
            for keyword in self.landscape_keywords
        )

    def categories(self, result: AnalysisResult, photo: Photo) -> set[PhotoType]:
        """Every category that applies; OTHER only when nothing else does."""
        found: set[PhotoType] = set()
        if result.face_count == 1:
            found.add(PhotoType.PORTRAIT)
        elif result.face_count > 1:
            found.add(PhotoType.MULTI_FACE)

        if self.has_landscape_objects(result):
            found.add(PhotoType.LANDSCAPE)

        return found or {PhotoType.OTHER}

    def primary_category(self, result: AnalysisResult, photo: Photo) -> PhotoType:
        found = self.categories(result, photo)
        for photo_type in PRIORITY:
            if photo_type in found:
                return photo_type
        return PhotoType.OTHER
