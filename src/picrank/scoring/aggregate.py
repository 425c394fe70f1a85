"""Combine an analysis result into technical, face and overall scores."""

from __future__ import annotations

import logging

from picrank.models import AnalysisResult, Photo, PhotoType
from picrank.providers import CategorizationProvider, ContextProvider
from picrank.scoring.context import compute_context_score
from picrank.scoring.faces import compute_face_score
from picrank.scoring.technical import compute_technical_score
from picrank.scoring.types import PhotoScore, ScoreSet
from picrank.scoring.weights import WeightTable

logger = logging.getLogger(__name__)


class ScoreAggregator:
    """Turns an AnalysisResult into a ScoreSet.

    Args:
        categorizer: Resolves the photo type used to pick composite weights.
            Without one every photo is scored as PhotoType.OTHER.
        context_provider: Supplies the external context score. Without one
            the external blend step is skipped.
        weights: Per-photo-type weighting table.
    """

    def __init__(
        self,
        categorizer: CategorizationProvider | None = None,
        context_provider: ContextProvider | None = None,
        weights: WeightTable | None = None,
    ) -> None:
        self.categorizer = categorizer
        self.context_provider = context_provider
        self.weights = weights or WeightTable()

    def photo_type(self, result: AnalysisResult, photo: Photo) -> PhotoType | str:
        if self.categorizer is None:
            return PhotoType.OTHER
        return self.categorizer.primary_category(result, photo)

    def external_context(self, result: AnalysisResult, photo: Photo) -> float | None:
        if self.context_provider is None:
            return None
        signal = self.context_provider.analyze_context(photo, result)
        return self.context_provider.context_score(signal)

    def aggregate(self, result: AnalysisResult, photo: Photo) -> ScoreSet:
        """Score one analyzed photo. Pure function of its inputs."""
        technical = compute_technical_score(result)
        face = compute_face_score(result.faces)
        context = compute_context_score(result, self.external_context(result, photo))

        photo_type = self.photo_type(result, photo)
        weights = self.weights.weights_for(photo_type)
        type_name = photo_type.value if isinstance(photo_type, PhotoType) else str(photo_type)

        overall = PhotoScore(
            technical=technical.overall,
            faces=face.composite_score,
            context=context,
            overall=weights.combine(technical.overall, face.composite_score, context),
            photo_type=type_name,
        )
        logger.debug(
            "scored %s as %s: overall=%.3f tech=%.3f faces=%.3f ctx=%.3f",
            photo.asset_identifier,
            type_name,
            overall.overall,
            overall.technical,
            overall.faces,
            overall.context,
        )
        return ScoreSet(technical=technical, face=face, overall=overall)
