"""Concurrent per-photo analysis.

AnalysisOrchestrator.analyze() fans out the independent measurements
(sharpness, exposure, composition, faces, objects, aesthetics, saliency)
inside one asyncio.TaskGroup and joins them before building the
AnalysisResult. Blocking work runs on a thread pool owned by the call.
Cancelling analyze() cancels every measurement not yet started and waits
for the running ones, so none outlives the call.
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, TypeVar

from PIL import Image

from picrank.analyze import (
    compute_basic_aesthetic,
    compute_composition,
    compute_exposure,
    compute_sharpness,
    scene_confidence,
    select_objects,
)
from picrank.config import ScoringConfig
from picrank.errors import ProviderUnavailable
from picrank.imaging import decode_image
from picrank.models import (
    AestheticObservation,
    AnalysisResult,
    FaceObservation,
    ObjectObservation,
    Photo,
    SaliencyObservation,
)
from picrank.providers import VisionProvider

logger = logging.getLogger(__name__)

T = TypeVar("T")

# One worker per measurement
MEASUREMENT_COUNT = 7


class _WorkerCalls:
    """Blocking calls submitted to one analysis' thread pool."""

    def __init__(self, pool: ThreadPoolExecutor) -> None:
        self.pool = pool
        self.futures: list[Future] = []

    async def run(self, func: Callable[..., T], *args: Any) -> T:
        future = self.pool.submit(func, *args)
        self.futures.append(future)
        return await asyncio.wrap_future(future)

    async def drain(self) -> None:
        """Drop queued calls and wait for the running ones to return."""
        for future in self.futures:
            future.cancel()
        running = [asyncio.wrap_future(f) for f in self.futures if not f.done()]
        if running:
            await asyncio.shield(asyncio.gather(*running, return_exceptions=True))


class AnalysisOrchestrator:
    """Runs every measurement for one photo and assembles the result.

    Args:
        vision: Detector backend. Without one, faces and objects are empty
            and aesthetics/saliency are absent.
        config: Object filtering limits.
    """

    def __init__(
        self,
        vision: VisionProvider | None = None,
        config: ScoringConfig | None = None,
    ) -> None:
        self.vision = vision
        self.config = config or ScoringConfig()

    async def analyze(
        self, photo: Photo, image: Image.Image | bytes | Any
    ) -> AnalysisResult:
        """Analyze one photo.

        Raises:
            DecodeError: If the image cannot be decoded. No other failure
                escapes; each measurement falls back to its default.
        """
        with ThreadPoolExecutor(
            max_workers=MEASUREMENT_COUNT, thread_name_prefix="picrank-analyze"
        ) as pool:
            calls = _WorkerCalls(pool)
            try:
                return await self._analyze(photo, image, calls)
            finally:
                await calls.drain()

    async def _analyze(
        self, photo: Photo, image: Image.Image | bytes | Any, calls: _WorkerCalls
    ) -> AnalysisResult:
        img = await calls.run(decode_image, image)

        async with asyncio.TaskGroup() as tg:
            sharpness = tg.create_task(
                self._measure(calls, "sharpness", compute_sharpness, img)
            )
            exposure = tg.create_task(
                self._measure(calls, "exposure", compute_exposure, img)
            )
            composition = tg.create_task(
                self._measure(calls, "composition", compute_composition, img)
            )
            faces = tg.create_task(self._detect_faces(calls, img))
            objects = tg.create_task(self._classify_objects(calls, img))
            aesthetics = tg.create_task(self._assess_aesthetics(calls, img))
            saliency = tg.create_task(self._compute_saliency(calls, img))

        face_list = faces.result()
        object_list = objects.result()

        return AnalysisResult(
            photo_id=photo.id,
            asset_identifier=photo.asset_identifier,
            sharpness=sharpness.result(),
            exposure=exposure.result(),
            composition=composition.result(),
            faces=tuple(face_list),
            objects=tuple(object_list),
            aesthetic_score=compute_basic_aesthetic(face_list, object_list),
            aesthetics=aesthetics.result(),
            saliency=saliency.result(),
            scene_confidence=scene_confidence(object_list),
        )

    async def _measure(
        self,
        calls: _WorkerCalls,
        name: str,
        func: Callable[[Image.Image], float],
        img: Image.Image,
    ) -> float:
        try:
            return await calls.run(func, img)
        except Exception:
            logger.warning("%s measurement failed, using 0.0", name, exc_info=True)
            return 0.0

    async def _call_provider(
        self,
        calls: _WorkerCalls,
        name: str,
        method: Callable[[Image.Image], T],
        img: Image.Image,
    ) -> T | None:
        try:
            return await calls.run(method, img)
        except ProviderUnavailable as e:
            logger.debug("%s unavailable: %s", name, e)
        except Exception:
            logger.warning("%s failed", name, exc_info=True)
        return None

    async def _detect_faces(
        self, calls: _WorkerCalls, img: Image.Image
    ) -> list[FaceObservation]:
        if self.vision is None:
            return []
        faces = await self._call_provider(
            calls, "face detection", self.vision.detect_faces, img
        )
        return list(faces or [])

    async def _classify_objects(
        self, calls: _WorkerCalls, img: Image.Image
    ) -> list[ObjectObservation]:
        if self.vision is None:
            return []
        objects = await self._call_provider(
            calls, "object classification", self.vision.classify_objects, img
        )
        return select_objects(
            objects or [],
            confidence_floor=self.config.object_confidence_floor,
            limit=self.config.max_objects,
        )

    async def _assess_aesthetics(
        self, calls: _WorkerCalls, img: Image.Image
    ) -> AestheticObservation | None:
        if self.vision is None:
            return None
        return await self._call_provider(
            calls, "aesthetic assessment", self.vision.assess_aesthetics, img
        )

    async def _compute_saliency(
        self, calls: _WorkerCalls, img: Image.Image
    ) -> SaliencyObservation | None:
        if self.vision is None:
            return None
        return await self._call_provider(
            calls, "saliency", self.vision.compute_saliency, img
        )
