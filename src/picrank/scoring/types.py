"""Score dataclasses produced by the aggregator."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import NamedTuple


def clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


# Technical weights
WEIGHT_SHARPNESS = 0.4
WEIGHT_EXPOSURE = 0.3
WEIGHT_COMPOSITION = 0.3


@dataclass(frozen=True)
class TechnicalQualityScore:
    """Technical quality metrics, each 0-1."""

    sharpness: float = 0.0
    exposure: float = 0.0
    composition: float = 0.0  # already boosted by saliency when available

    def __post_init__(self) -> None:
        object.__setattr__(self, "sharpness", clamp01(self.sharpness))
        object.__setattr__(self, "exposure", clamp01(self.exposure))
        object.__setattr__(self, "composition", clamp01(self.composition))

    @property
    def overall(self) -> float:
        """Weighted technical score (0-1)."""
        return clamp01(
            self.sharpness * WEIGHT_SHARPNESS
            + self.exposure * WEIGHT_EXPOSURE
            + self.composition * WEIGHT_COMPOSITION
        )


@dataclass(frozen=True)
class FaceQualityScore:
    """Face quality summary across all faces in a photo."""

    face_count: int
    average_score: float  # mean per-face score
    eyes_open: bool  # no face known to have closed eyes
    good_expressions: bool  # enough smiling or neutral faces
    optimal_sizes: bool  # every face 1%-50% of the frame

    def __post_init__(self) -> None:
        object.__setattr__(self, "face_count", max(0, self.face_count))
        object.__setattr__(self, "average_score", clamp01(self.average_score))

    @property
    def has_faces(self) -> bool:
        return self.face_count > 0

    @property
    def composite_score(self) -> float:
        """Average face score plus 0.1 per satisfied attribute (0-1)."""
        if self.face_count == 0:
            return 0.5

        score = self.average_score
        if self.eyes_open:
            score += 0.1
        if self.good_expressions:
            score += 0.1
        if self.optimal_sizes:
            score += 0.1
        return clamp01(score)


NO_FACES = FaceQualityScore(
    face_count=0,
    average_score=0.5,
    eyes_open=False,
    good_expressions=False,
    optimal_sizes=False,
)


@dataclass(frozen=True)
class PhotoScore:
    """Final per-photo score. calculated_at does not take part in equality."""

    technical: float
    faces: float
    context: float
    overall: float
    photo_type: str = "other"
    calculated_at: datetime = field(
        default_factory=lambda: datetime.now(UTC), compare=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "technical", clamp01(self.technical))
        object.__setattr__(self, "faces", clamp01(self.faces))
        object.__setattr__(self, "context", clamp01(self.context))
        object.__setattr__(self, "overall", clamp01(self.overall))


class ScoreSet(NamedTuple):
    """The three score objects produced for one photo."""

    technical: TechnicalQualityScore
    face: FaceQualityScore
    overall: PhotoScore
