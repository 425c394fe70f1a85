"""Context scoring: aesthetic blend, external context and scene bonus."""

from __future__ import annotations

from picrank.models import AnalysisResult

UTILITY_CONTEXT_CAP = 0.2
AESTHETIC_BLEND = 0.7  # share of the provider score when blending
EXTERNAL_CONTEXT_BLEND = 0.4
SCENE_BONUS = 0.08


def blend_aesthetics(result: AnalysisResult) -> float:
    """Context before the external blend.

    Starts from the fallback aesthetic score. A provider observation caps
    utility images at 0.2, otherwise its normalized score is mixed in 70/30.
    """
    context = result.aesthetic_score
    aesthetics = result.aesthetics
    if aesthetics is None:
        return context

    if aesthetics.is_utility:
        return min(context, UTILITY_CONTEXT_CAP)

    return context * (1.0 - AESTHETIC_BLEND) + aesthetics.normalized_score * AESTHETIC_BLEND


def compute_context_score(
    result: AnalysisResult, external_context: float | None = None
) -> float:
    """Full context score (0-1).

    Args:
        result: Analysis result for the photo.
        external_context: Score from a context provider, if one is configured.

    Returns:
        Context after aesthetics, external context and scene bonus, in that
        order.
    """
    context = blend_aesthetics(result)

    if external_context is not None:
        external = max(0.0, min(1.0, external_context))
        context = context * (1.0 - EXTERNAL_CONTEXT_BLEND) + external * EXTERNAL_CONTEXT_BLEND

    context = min(1.0, context + result.scene_confidence * SCENE_BONUS)
    return max(0.0, context)
