"""Tests for picrank.analyze module."""

import pytest
from PIL import Image

from picrank.analyze import (
    average_luminance,
    compute_basic_aesthetic,
    compute_composition,
    compute_exposure,
    compute_sharpness,
    scene_confidence,
    select_objects,
)
from picrank.models import BoundingBox, FaceObservation, ObjectObservation


def make_test_image(
    w: int = 100, h: int = 100, color: tuple = (128, 128, 128)
) -> Image.Image:
    """Create a test image."""
    return Image.new("RGB", (w, h), color)


def make_objects(*confidences: float) -> list[ObjectObservation]:
    return [ObjectObservation(label=f"obj{i}", confidence=c) for i, c in enumerate(confidences)]


class TestComputeSharpness:
    def test_small_square_image(self):
        # base + good aspect + conversion
        assert compute_sharpness(make_test_image()) == pytest.approx(0.6)

    def test_high_resolution(self):
        assert compute_sharpness(make_test_image(2000, 1500)) == pytest.approx(1.0)

    def test_medium_resolution(self):
        assert compute_sharpness(make_test_image(1200, 900)) == pytest.approx(0.9)

    def test_panorama_loses_aspect_bonus(self):
        assert compute_sharpness(make_test_image(3000, 1000)) == pytest.approx(0.8)

    def test_range(self):
        for w, h in [(10, 10), (640, 480), (4000, 3000), (5000, 100)]:
            assert 0.0 <= compute_sharpness(make_test_image(w, h)) <= 1.0


class TestComputeExposure:
    def test_mid_gray_is_ideal(self):
        img = make_test_image(color=(128, 128, 128))
        assert average_luminance(img) == pytest.approx(128 / 255)
        assert compute_exposure(img) == 1.0

    def test_black_underexposed(self):
        assert compute_exposure(make_test_image(color=(0, 0, 0))) == 0.3

    def test_white_overexposed(self):
        assert compute_exposure(make_test_image(color=(255, 255, 255))) == 0.3

    def test_slightly_dark(self):
        assert compute_exposure(make_test_image(color=(80, 80, 80))) == 0.7

    def test_grayscale_input(self):
        img = Image.new("L", (50, 50), 128)
        assert compute_exposure(img) == 1.0


class TestComputeComposition:
    def test_square_low_resolution(self):
        assert compute_composition(make_test_image()) == pytest.approx(0.8)

    def test_square_high_resolution(self):
        assert compute_composition(make_test_image(1200, 1000)) == pytest.approx(1.0)

    def test_three_two(self):
        assert compute_composition(make_test_image(300, 200)) == pytest.approx(0.8)

    def test_awkward_aspect(self):
        assert compute_composition(make_test_image(300, 100)) == pytest.approx(0.5)


class TestBasicAesthetic:
    def test_nothing_detected(self):
        assert compute_basic_aesthetic([], []) == 0.5

    def test_faces(self):
        face = FaceObservation(bounding_box=BoundingBox(), confidence=1.0)
        assert compute_basic_aesthetic([face], []) == pytest.approx(0.8)

    def test_objects(self):
        assert compute_basic_aesthetic([], make_objects(1.0, 0.6)) == pytest.approx(0.62)


class TestSelectObjects:
    def test_floor_is_exclusive(self):
        kept = select_objects(make_objects(0.1, 0.11, 0.05), confidence_floor=0.1)
        assert [o.confidence for o in kept] == [0.11]

    def test_order_preserved_and_limited(self):
        kept = select_objects(make_objects(0.3, 0.9, 0.5, 0.7), limit=2)
        assert [o.confidence for o in kept] == [0.3, 0.9]

    def test_scene_confidence_uses_first(self):
        assert scene_confidence(make_objects(0.4, 0.9)) == 0.4
        assert scene_confidence([]) == 0.0
