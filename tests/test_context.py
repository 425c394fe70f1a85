"""Tests for picrank.context module."""

from datetime import datetime

import pytest

from picrank.context import (
    AestheticContext,
    CameraType,
    ContextAnalyzer,
    Season,
    SocialSetting,
    TimeOfDay,
    VisualComplexity,
    camera_type,
    social_context,
    time_context,
    visual_complexity,
)
from picrank.models import (
    AnalysisResult,
    BoundingBox,
    FaceObservation,
    Location,
    ObjectObservation,
    Photo,
    PhotoMetadata,
)
from picrank.providers import ContextProvider


def make_photo(timestamp=None, location=None, camera_model=None) -> Photo:
    return Photo(
        asset_identifier="IMG_0001.JPG",
        metadata=PhotoMetadata(4032, 3024, camera_model=camera_model),
        timestamp=timestamp,
        location=location,
    )


def make_result(photo: Photo, faces=(), objects=(), exposure=0.5) -> AnalysisResult:
    return AnalysisResult(
        photo_id=photo.id,
        asset_identifier=photo.asset_identifier,
        sharpness=0.5,
        exposure=exposure,
        composition=0.5,
        faces=tuple(faces),
        objects=tuple(objects),
    )


def make_faces(n: int, smiling=None) -> list[FaceObservation]:
    return [
        FaceObservation(bounding_box=BoundingBox(0.1, 0.1, 0.1, 0.1), confidence=0.9, smiling=smiling)
        for _ in range(n)
    ]


class TestTime:
    def test_time_of_day_buckets(self):
        assert TimeOfDay.from_hour(6) == TimeOfDay.MORNING
        assert TimeOfDay.from_hour(12) == TimeOfDay.AFTERNOON
        assert TimeOfDay.from_hour(18) == TimeOfDay.GOLDEN_HOUR
        assert TimeOfDay.from_hour(20) == TimeOfDay.EVENING
        assert TimeOfDay.from_hour(2) == TimeOfDay.NIGHT

    def test_weekend_golden_hour(self):
        # 2024-06-15 is a Saturday
        ctx = time_context(datetime(2024, 6, 15, 18, 0))
        assert ctx.is_weekend
        assert ctx.is_golden_hour
        assert not ctx.is_magic_hour
        assert ctx.score == 1.0

    def test_weekday_noon(self):
        ctx = time_context(datetime(2024, 6, 12, 12, 0))
        assert not ctx.is_weekend
        assert ctx.score == pytest.approx(0.6)

    def test_unknown_time_is_neutral(self):
        assert time_context(None).score == 0.5

    def test_seasons(self):
        assert Season.from_month(4) == Season.SPRING
        assert Season.from_month(7) == Season.SUMMER
        assert Season.from_month(10) == Season.FALL
        assert Season.from_month(1) == Season.WINTER


class TestSocial:
    def test_solo(self):
        photo = make_photo()
        ctx = social_context(make_result(photo, make_faces(1)))
        assert ctx.setting == SocialSetting.SOLO
        assert not ctx.is_group_activity

    def test_smiling_group(self):
        photo = make_photo()
        ctx = social_context(make_result(photo, make_faces(6, smiling=True)))
        assert ctx.setting == SocialSetting.CELEBRATION
        assert ctx.is_group_activity
        assert ctx.score == 1.0

    def test_unsmiling_group(self):
        photo = make_photo()
        ctx = social_context(make_result(photo, make_faces(6)))
        assert ctx.setting == SocialSetting.FRIENDS


class TestTechnicalAndAesthetic:
    def test_camera_type(self):
        assert camera_type("iPhone 15 Pro") == CameraType.SMARTPHONE
        assert camera_type("Canon EOS R5") == CameraType.DSLR
        assert camera_type(None) == CameraType.UNKNOWN

    def test_visual_complexity(self):
        assert visual_complexity(0) == VisualComplexity.SIMPLE
        assert visual_complexity(4) == VisualComplexity.BALANCED
        assert visual_complexity(8) == VisualComplexity.COMPLEX
        assert visual_complexity(11) == VisualComplexity.CHAOTIC

    def test_chaotic_penalty(self):
        assert AestheticContext(complexity=VisualComplexity.CHAOTIC).score == pytest.approx(0.4)


class TestContextAnalyzer:
    def test_is_context_provider(self):
        assert isinstance(ContextAnalyzer(), ContextProvider)

    def test_minimal_photo(self):
        analyzer = ContextAnalyzer()
        photo = make_photo()
        ctx = analyzer.analyze_context(photo, make_result(photo))
        # time .5, location .4, season .5, social .58, technical .5, aesthetic .6
        expected = 0.5 * 0.2 + 0.4 * 0.15 + 0.5 * 0.1 + 0.58 * 0.2 + 0.5 * 0.2 + 0.6 * 0.15
        assert analyzer.context_score(ctx) == pytest.approx(expected)

    def test_rich_photo_scores_higher(self):
        analyzer = ContextAnalyzer()
        plain = make_photo()
        rich = make_photo(
            timestamp=datetime(2024, 5, 4, 18, 30),
            location=Location(48.85, 2.35),
            camera_model="Nikon Z8",
        )
        plain_score = analyzer.context_score(analyzer.analyze_context(plain, make_result(plain)))
        rich_result = make_result(
            rich,
            faces=make_faces(3, smiling=True),
            objects=[ObjectObservation("sky", 0.9)] * 4,
            exposure=1.0,
        )
        rich_score = analyzer.context_score(analyzer.analyze_context(rich, rich_result))
        assert rich_score > plain_score
        assert 0.0 <= rich_score <= 1.0
