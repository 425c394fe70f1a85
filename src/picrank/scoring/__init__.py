"""Score aggregation for analyzed photos.

Scoring steps:
    1. Technical - sharpness, exposure, composition (saliency boosted)
    2. Faces - per-face quality, pose, expression, eyes, size
    3. Context - aesthetics, external context, scene confidence
    4. Overall - photo-type weighted combination of the three

Every step clamps to 0-1 as it goes, so the order of operations matters.
"""

from __future__ import annotations

from picrank.scoring.aggregate import ScoreAggregator
from picrank.scoring.context import blend_aesthetics, compute_context_score
from picrank.scoring.faces import (
    compute_face_score,
    has_good_expressions,
    has_optimal_sizes,
    pose_quality,
    score_face,
)
from picrank.scoring.technical import boost_composition, compute_technical_score
from picrank.scoring.types import (
    NO_FACES,
    FaceQualityScore,
    PhotoScore,
    ScoreSet,
    TechnicalQualityScore,
)
from picrank.scoring.weights import DEFAULT_WEIGHTS, CompositeWeights, WeightTable

__all__ = [
    # Types
    "TechnicalQualityScore",
    "FaceQualityScore",
    "PhotoScore",
    "ScoreSet",
    "NO_FACES",
    # Weights
    "CompositeWeights",
    "WeightTable",
    "DEFAULT_WEIGHTS",
    # Aggregation
    "ScoreAggregator",
    # Steps
    "boost_composition",
    "compute_technical_score",
    "pose_quality",
    "score_face",
    "has_good_expressions",
    "has_optimal_sizes",
    "compute_face_score",
    "blend_aesthetics",
    "compute_context_score",
]
