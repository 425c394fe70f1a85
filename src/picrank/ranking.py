"""Ranking and summary helpers over scored photos."""

from __future__ import annotations

from typing import Iterable

from picrank.models import AnalysisResult, Photo

ISSUE_THRESHOLD = 0.5

# (label, lower bound inclusive), highest first
QUALITY_BUCKETS = (
    ("Excellent (0.8+)", 0.8),
    ("Good (0.6-0.8)", 0.6),
    ("Fair (0.4-0.6)", 0.4),
    ("Poor (0.0-0.4)", 0.0),
)
UNSCORED = "Unscored"


def overall_quality(photo: Photo) -> float | None:
    if photo.overall_score is None:
        return None
    return photo.overall_score.overall


def rank_by_quality(photos: Iterable[Photo]) -> list[Photo]:
    """Sort photos best first. Unscored photos go last, in input order."""
    photos = list(photos)
    scored = [p for p in photos if p.overall_score is not None]
    unscored = [p for p in photos if p.overall_score is None]
    scored.sort(key=lambda p: p.overall_score.overall, reverse=True)
    return scored + unscored


def top_quality(photos: Iterable[Photo], limit: int = 10) -> list[Photo]:
    """The best `limit` scored photos."""
    if limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")
    return [p for p in rank_by_quality(photos) if p.overall_score is not None][:limit]


def filter_by_threshold(photos: Iterable[Photo], threshold: float) -> list[Photo]:
    """Scored photos whose overall score is at least `threshold`."""
    return [
        p
        for p in photos
        if p.overall_score is not None and p.overall_score.overall >= threshold
    ]


def quality_bucket(score: float) -> str:
    for label, lower in QUALITY_BUCKETS:
        if score >= lower:
            return label
    return QUALITY_BUCKETS[-1][0]


def quality_distribution(photos: Iterable[Photo]) -> dict[str, int]:
    """Count photos per quality bucket, including an Unscored bucket."""
    counts = {label: 0 for label, _ in QUALITY_BUCKETS}
    counts[UNSCORED] = 0
    for photo in photos:
        score = overall_quality(photo)
        counts[UNSCORED if score is None else quality_bucket(score)] += 1
    return counts


def average_quality(photos: Iterable[Photo]) -> float | None:
    """Mean overall score of the scored photos, or None if none are scored."""
    scores = [s for s in (overall_quality(p) for p in photos) if s is not None]
    if not scores:
        return None
    return sum(scores) / len(scores)


def photo_issues(photo: Photo) -> list[str]:
    issues = []
    technical = photo.technical_quality
    if technical is not None:
        if technical.sharpness < ISSUE_THRESHOLD:
            issues.append("Sharpness")
        if technical.exposure < ISSUE_THRESHOLD:
            issues.append("Exposure")
        if technical.composition < ISSUE_THRESHOLD:
            issues.append("Composition")
    score = overall_quality(photo)
    if score is not None and score < ISSUE_THRESHOLD:
        issues.append("Overall Quality")
    return issues


def needing_improvement(photos: Iterable[Photo]) -> list[tuple[Photo, list[str]]]:
    """Photos with at least one measurement below 0.5, with the issues found."""
    result = []
    for photo in photos:
        issues = photo_issues(photo)
        if issues:
            result.append((photo, issues))
    return result


def quality_description(result: AnalysisResult) -> str:
    """Short verdict on the mean of sharpness, exposure and composition."""
    overall = (result.sharpness + result.exposure + result.composition) / 3.0
    if overall >= 0.8:
        return "Excellent"
    if overall >= 0.6:
        return "Good"
    if overall >= 0.4:
        return "Fair"
    return "Poor"


def primary_issues(result: AnalysisResult) -> list[str]:
    """Human-readable issues found in one analysis result."""
    issues = []
    if result.sharpness < ISSUE_THRESHOLD:
        issues.append("Image appears blurry")
    if result.exposure < ISSUE_THRESHOLD:
        issues.append("Poor exposure")
    if result.composition < ISSUE_THRESHOLD:
        issues.append("Weak composition")
    if result.faces and all(f.eyes_open is False for f in result.faces):
        issues.append("Eyes closed")
    return issues
