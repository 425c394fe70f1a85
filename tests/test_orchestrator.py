"""Tests for picrank.orchestrator module."""

import asyncio
import io
import threading
import time

import pytest
from PIL import Image

from picrank.config import ScoringConfig
from picrank.errors import DecodeError, ProviderUnavailable
from picrank.models import (
    AestheticObservation,
    BoundingBox,
    FaceObservation,
    ObjectObservation,
    Photo,
    PhotoMetadata,
    SaliencyObservation,
)
from picrank.orchestrator import AnalysisOrchestrator
from picrank.providers import VisionProvider


def make_test_image(
    w: int = 100, h: int = 100, color: tuple = (128, 128, 128)
) -> Image.Image:
    """Create a test image."""
    return Image.new("RGB", (w, h), color)


def encode(img: Image.Image, fmt: str = "PNG") -> bytes:
    buf = io.BytesIO()
    img.save(buf, fmt)
    return buf.getvalue()


def make_photo(name: str = "IMG_0001.JPG") -> Photo:
    return Photo(asset_identifier=name, metadata=PhotoMetadata(100, 100))


class FakeVision:
    """Returns fixed observations."""

    def __init__(self, faces=(), objects=(), aesthetics=None, saliency=None):
        self.faces = list(faces)
        self.objects = list(objects)
        self.aesthetics = aesthetics
        self.saliency = saliency

    def detect_faces(self, image):
        return self.faces

    def classify_objects(self, image):
        return self.objects

    def assess_aesthetics(self, image):
        return self.aesthetics

    def compute_saliency(self, image):
        return self.saliency


class BrokenVision:
    def detect_faces(self, image):
        raise RuntimeError("model crashed")

    def classify_objects(self, image):
        raise ProviderUnavailable("no classifier")

    def assess_aesthetics(self, image):
        raise ProviderUnavailable("needs a newer OS")

    def compute_saliency(self, image):
        raise ValueError("bad tensor")


class SlowVision(FakeVision):
    """detect_faces keeps working for a while after it starts."""

    def __init__(self):
        super().__init__()
        self.started = threading.Event()
        self.finished = threading.Event()

    def detect_faces(self, image):
        self.started.set()
        time.sleep(0.3)
        self.finished.set()
        return []


class RendezvousVision(FakeVision):
    """Face detection and object classification wait for each other."""

    def __init__(self):
        super().__init__(
            faces=[FaceObservation(bounding_box=BoundingBox(0.3, 0.3, 0.2, 0.2), confidence=1.0)],
            objects=[ObjectObservation("sky", 0.9)],
        )
        self.barrier = threading.Barrier(2, timeout=5)

    def detect_faces(self, image):
        self.barrier.wait()
        return self.faces

    def classify_objects(self, image):
        self.barrier.wait()
        return self.objects


class TestAnalyze:
    def test_without_vision(self):
        photo = make_photo()
        result = asyncio.run(AnalysisOrchestrator().analyze(photo, make_test_image()))

        assert result.photo_id == photo.id
        assert result.asset_identifier == photo.asset_identifier
        assert result.sharpness == pytest.approx(0.6)
        assert result.exposure == 1.0
        assert result.composition == pytest.approx(0.8)
        assert result.faces == ()
        assert result.objects == ()
        assert result.aesthetics is None
        assert result.saliency is None
        assert result.aesthetic_score == 0.5
        assert result.scene_confidence == 0.0

    def test_accepts_encoded_bytes(self):
        result = asyncio.run(
            AnalysisOrchestrator().analyze(make_photo(), encode(make_test_image()))
        )
        assert result.exposure == 1.0

    def test_decode_failure_raises(self):
        with pytest.raises(DecodeError):
            asyncio.run(AnalysisOrchestrator().analyze(make_photo(), b"not an image"))

    def test_unsupported_type_raises(self):
        with pytest.raises(DecodeError):
            asyncio.run(AnalysisOrchestrator().analyze(make_photo(), 42))

    def test_collects_provider_observations(self):
        face = FaceObservation(bounding_box=BoundingBox(0.3, 0.3, 0.2, 0.2), confidence=1.0)
        vision = FakeVision(
            faces=[face],
            objects=[
                ObjectObservation("sky", 0.9),
                ObjectObservation("noise", 0.05),
                ObjectObservation("tree", 0.6),
            ],
            aesthetics=AestheticObservation(overall_score=0.4),
            saliency=SaliencyObservation(composition_score=0.7),
        )
        assert isinstance(vision, VisionProvider)

        result = asyncio.run(AnalysisOrchestrator(vision).analyze(make_photo(), make_test_image()))

        assert result.faces == (face,)
        assert [o.label for o in result.objects] == ["sky", "tree"]
        assert result.scene_confidence == 0.9
        assert result.aesthetics.overall_score == 0.4
        assert result.saliency.composition_score == 0.7
        assert result.aesthetic_score == pytest.approx(0.5 + 0.2 + 0.1 + 0.75 * 0.15)

    def test_object_limit_from_config(self):
        vision = FakeVision(objects=[ObjectObservation(f"o{i}", 0.5) for i in range(10)])
        orchestrator = AnalysisOrchestrator(vision, ScoringConfig(max_objects=3))
        result = asyncio.run(orchestrator.analyze(make_photo(), make_test_image()))
        assert [o.label for o in result.objects] == ["o0", "o1", "o2"]

    def test_provider_failures_degrade(self):
        result = asyncio.run(
            AnalysisOrchestrator(BrokenVision()).analyze(make_photo(), make_test_image())
        )
        assert result.faces == ()
        assert result.objects == ()
        assert result.aesthetics is None
        assert result.saliency is None
        assert result.exposure == 1.0

    def test_measurement_failure_scores_zero(self, monkeypatch):
        def boom(image):
            raise RuntimeError("measurement crashed")

        monkeypatch.setattr("picrank.orchestrator.compute_sharpness", boom)
        result = asyncio.run(AnalysisOrchestrator().analyze(make_photo(), make_test_image()))
        assert result.sharpness == 0.0
        assert result.exposure == 1.0

    def test_same_input_same_result(self):
        photo = make_photo()
        orchestrator = AnalysisOrchestrator(FakeVision(objects=[ObjectObservation("sky", 0.8)]))
        first = asyncio.run(orchestrator.analyze(photo, make_test_image()))
        second = asyncio.run(orchestrator.analyze(photo, make_test_image()))
        assert first == second

    def test_oversized_image_is_decode_error(self, monkeypatch):
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
        with pytest.raises(DecodeError):
            asyncio.run(
                AnalysisOrchestrator().analyze(make_photo(), encode(make_test_image(200, 200)))
            )

    def test_detectors_run_concurrently(self):
        result = asyncio.run(
            AnalysisOrchestrator(RendezvousVision()).analyze(make_photo(), make_test_image())
        )
        # Either call alone would time out on the barrier and degrade to empty
        assert len(result.faces) == 1
        assert [o.label for o in result.objects] == ["sky"]


class TestCancellation:
    def test_cancel_waits_for_running_detectors(self):
        vision = SlowVision()
        orchestrator = AnalysisOrchestrator(vision)

        async def run():
            task = asyncio.create_task(orchestrator.analyze(make_photo(), make_test_image()))
            while not vision.started.is_set():
                await asyncio.sleep(0.01)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task
            return vision.finished.is_set()

        assert asyncio.run(run())
