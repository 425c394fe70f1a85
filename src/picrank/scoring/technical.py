"""Technical scoring: sharpness, exposure and saliency-boosted composition."""

from __future__ import annotations

from picrank.models import AnalysisResult, SaliencyObservation
from picrank.scoring.types import TechnicalQualityScore

# Share of the saliency composition score added to the heuristic one
SALIENCY_COMPOSITION_BOOST = 0.3


def boost_composition(
    composition: float, saliency: SaliencyObservation | None
) -> float:
    """Raise composition by up to 30% of the saliency composition score.

    Returns composition unchanged when no saliency observation exists.
    """
    if saliency is None:
        return composition
    return min(1.0, composition + saliency.composition_score * SALIENCY_COMPOSITION_BOOST)


def compute_technical_score(result: AnalysisResult) -> TechnicalQualityScore:
    """Build the technical score for an analysis result.

    The composition boost is applied before the weighted combination.
    """
    return TechnicalQualityScore(
        sharpness=result.sharpness,
        exposure=result.exposure,
        composition=boost_composition(result.composition, result.saliency),
    )
