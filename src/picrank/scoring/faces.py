"""Face scoring: per-face quality, pose, expression and size checks."""

from __future__ import annotations

from typing import Sequence

from picrank.models import FaceObservation, Pose
from picrank.scoring.types import NO_FACES, FaceQualityScore

# Pose tolerances in degrees; beyond these the pose bonus shrinks linearly
# and reaches zero at 90 degrees on that axis.
MAX_YAW = 45.0
MAX_PITCH = 30.0
MAX_ROLL = 20.0

POSE_BONUS = 0.2
SMILE_BONUS = 0.15
EYES_OPEN_BONUS = 0.10

GOOD_EXPRESSION_RATIO = 0.6
MIN_FACE_AREA = 0.01
MAX_FACE_AREA = 0.5


def _axis_penalty(angle: float, limit: float) -> float:
    excess = abs(angle) - limit
    if excess <= 0:
        return 0.0
    return excess / (90.0 - limit)


def pose_quality(pose: Pose) -> float:
    """Score head pose from 1.0 (frontal) down to 0.0.

    Each axis contributes a linear penalty once past its tolerance
    (yaw 45, pitch 30, roll 20); penalties add up and the result is
    floored at 0.
    """
    penalty = (
        _axis_penalty(pose.yaw, MAX_YAW)
        + _axis_penalty(pose.pitch, MAX_PITCH)
        + _axis_penalty(pose.roll, MAX_ROLL)
    )
    return max(0.0, 1.0 - penalty)


def score_face(face: FaceObservation) -> float:
    """Score a single face (0-1).

    Starts from capture quality and adds pose, smile and open-eye bonuses,
    clamping to 1.0 after every step.
    """
    score = face.capture_quality
    if face.pose is not None:
        score = min(1.0, score + POSE_BONUS * pose_quality(face.pose))
    if face.smiling is True:
        score = min(1.0, score + SMILE_BONUS)
    if face.eyes_open is True:
        score = min(1.0, score + EYES_OPEN_BONUS)
    return max(0.0, min(1.0, score))


def has_good_expressions(faces: Sequence[FaceObservation]) -> bool:
    """True when smiling plus unknown-expression faces make up 60% or more.

    A face with smiling=False counts against the ratio.
    """
    if not faces:
        return False
    good = sum(1 for f in faces if f.smiling is not False)
    return good / len(faces) >= GOOD_EXPRESSION_RATIO


def has_optimal_sizes(faces: Sequence[FaceObservation]) -> bool:
    return all(
        MIN_FACE_AREA <= f.bounding_box.area <= MAX_FACE_AREA for f in faces
    )


def compute_face_score(faces: Sequence[FaceObservation]) -> FaceQualityScore:
    """Summarize all faces of a photo, or NO_FACES when there are none."""
    if not faces:
        return NO_FACES

    average = sum(score_face(f) for f in faces) / len(faces)

    return FaceQualityScore(
        face_count=len(faces),
        average_score=average,
        eyes_open=all(f.eyes_open is not False for f in faces),
        good_expressions=has_good_expressions(faces),
        optimal_sizes=has_optimal_sizes(faces),
    )
