"""Collaborator interfaces consumed by the scoring pipeline.

Implementations are passed in explicitly; nothing in picrank creates a
default instance behind the caller's back.
"""

from __future__ import annotations

import uuid
from typing import Any, Protocol, Sequence, runtime_checkable

from PIL import Image

from picrank.models import (
    AestheticObservation,
    AnalysisResult,
    FaceObservation,
    ObjectObservation,
    Photo,
    PhotoType,
    SaliencyObservation,
)


@runtime_checkable
class VisionProvider(Protocol):
    """ML detectors. Any method may raise ProviderUnavailable or return nothing."""

    def detect_faces(self, image: Image.Image) -> Sequence[FaceObservation]: ...

    def classify_objects(self, image: Image.Image) -> Sequence[ObjectObservation]: ...

    def assess_aesthetics(self, image: Image.Image) -> AestheticObservation | None: ...

    def compute_saliency(self, image: Image.Image) -> SaliencyObservation | None: ...


@runtime_checkable
class ImageSource(Protocol):
    def load_full_resolution_image(
        self, asset_identifier: str
    ) -> Image.Image | bytes | None:
        """Return image data, or raise AssetNotFound for unknown identifiers."""
        ...


@runtime_checkable
class PhotoRepository(Protocol):
    def load_photo(self, photo_id: uuid.UUID) -> Photo | None: ...

    def save_photo(self, photo: Photo) -> None: ...

    def load_photos_without_scores(self) -> list[Photo]: ...

    def load_photos(self) -> list[Photo]: ...


@runtime_checkable
class CategorizationProvider(Protocol):
    def primary_category(
        self, result: AnalysisResult, photo: Photo
    ) -> PhotoType | str: ...


@runtime_checkable
class ContextProvider(Protocol):
    def analyze_context(self, photo: Photo, result: AnalysisResult) -> Any: ...

    def context_score(self, signal: Any) -> float: ...
