"""Photo records and the observations produced while analyzing them."""

from __future__ import annotations

import dataclasses
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from picrank.scoring.types import (
        FaceQualityScore,
        PhotoScore,
        TechnicalQualityScore,
    )


class PhotoType(str, Enum):
    """Photo categories used to pick the composite weighting."""

    PORTRAIT = "portrait"
    MULTI_FACE = "multi_face"
    LANDSCAPE = "landscape"
    OTHER = "other"


@dataclass(frozen=True)
class Location:
    """GPS coordinates attached to a photo."""

    latitude: float
    longitude: float
    altitude: float | None = None


@dataclass(frozen=True)
class PhotoMetadata:
    """Capture metadata, mostly from EXIF."""

    width: int
    height: int
    camera_model: str | None = None
    lens_model: str | None = None
    focal_length: float | None = None  # mm
    f_number: float | None = None
    exposure_time: float | None = None  # seconds
    iso: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "width", max(0, int(self.width)))
        object.__setattr__(self, "height", max(0, int(self.height)))

    @property
    def aspect_ratio(self) -> float:
        if self.height <= 0:
            return 1.0
        return self.width / self.height

    @property
    def megapixels(self) -> float:
        return self.width * self.height / 1_000_000

    @property
    def has_camera_settings(self) -> bool:
        """True when any of focal length, aperture, shutter or ISO is known."""
        return any(
            v is not None
            for v in (self.focal_length, self.f_number, self.exposure_time, self.iso)
        )


@dataclass(frozen=True)
class Photo:
    """A library photo.

    Owned by the persistence layer. Scoring never mutates a Photo; use
    with_scores() to get an updated copy.
    """

    asset_identifier: str
    metadata: PhotoMetadata
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    timestamp: datetime | None = None
    location: Location | None = None
    fingerprint: str | None = None  # perceptual hash, hex
    technical_quality: TechnicalQualityScore | None = None
    face_quality: FaceQualityScore | None = None
    overall_score: PhotoScore | None = None

    def with_scores(
        self,
        technical: TechnicalQualityScore,
        face: FaceQualityScore,
        overall: PhotoScore,
    ) -> Photo:
        return dataclasses.replace(
            self,
            technical_quality=technical,
            face_quality=face,
            overall_score=overall,
        )

    @property
    def is_scored(self) -> bool:
        return self.overall_score is not None


@dataclass(frozen=True)
class BoundingBox:
    """Rectangle in normalized [0, 1] image coordinates."""

    x: float = 0.0
    y: float = 0.0
    width: float = 1.0
    height: float = 1.0

    @property
    def area(self) -> float:
        return self.width * self.height


FULL_FRAME = BoundingBox()


@dataclass(frozen=True)
class Pose:
    """Head orientation in degrees."""

    pitch: float = 0.0
    yaw: float = 0.0
    roll: float = 0.0


@dataclass(frozen=True)
class FaceObservation:
    """A detected face. Every quality signal besides the box is optional."""

    bounding_box: BoundingBox
    confidence: float
    quality: float | None = None  # capture quality 0-1, falls back to confidence
    smiling: bool | None = None
    eyes_open: bool | None = None
    pose: Pose | None = None
    landmarks: tuple[tuple[float, float], ...] | None = None

    @property
    def capture_quality(self) -> float:
        return self.quality if self.quality is not None else self.confidence


@dataclass(frozen=True)
class ObjectObservation:
    """A classification label, usually for the whole frame."""

    label: str
    confidence: float
    bounding_box: BoundingBox = FULL_FRAME


@dataclass(frozen=True)
class AestheticObservation:
    """Learned aesthetic assessment."""

    overall_score: float  # -1 to 1
    is_utility: bool = False  # screenshot / document-like
    confidence: float = 0.0

    @property
    def normalized_score(self) -> float:
        """overall_score mapped onto 0-1."""
        return max(0.0, min(1.0, (self.overall_score + 1.0) / 2.0))


@dataclass(frozen=True)
class SaliencyObservation:
    """Salient regions and the composition score derived from them."""

    regions: tuple[BoundingBox, ...] = ()
    focus_points: tuple[tuple[float, float], ...] = ()
    composition_score: float = 0.0
    heatmap: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class AnalysisResult:
    """Everything measured for one photo in a single analysis run."""

    photo_id: uuid.UUID
    asset_identifier: str
    sharpness: float
    exposure: float
    composition: float
    faces: tuple[FaceObservation, ...] = ()
    objects: tuple[ObjectObservation, ...] = ()
    aesthetic_score: float = 0.5  # fallback when no AestheticObservation
    aesthetics: AestheticObservation | None = None
    saliency: SaliencyObservation | None = None
    scene_confidence: float = 0.0
    timestamp: datetime = field(
        default_factory=lambda: datetime.now(UTC), compare=False
    )

    @property
    def face_count(self) -> int:
        return len(self.faces)
