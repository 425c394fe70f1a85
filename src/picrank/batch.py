"""Batch scoring over photo collections.

A failed photo is logged and left out of the result; it never aborts the
batch. Progress is reported once per photo, in input order, so the
completed count always reaches the total.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Sequence

from picrank.config import ScoringConfig
from picrank.errors import AssetNotFound
from picrank.models import Photo
from picrank.orchestrator import AnalysisOrchestrator
from picrank.providers import ImageSource, PhotoRepository
from picrank.scoring.aggregate import ScoreAggregator
from picrank.scoring.types import PhotoScore, ScoreSet

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


@dataclass
class ScoreOutcome:
    """Result of scoring a single photo."""

    photo: Photo
    success: bool
    scores: ScoreSet | None = None
    error: str | None = None


def _as_list(photos: Iterable[Photo]) -> list[Photo]:
    try:
        return list(photos)
    except TypeError as e:
        raise TypeError(f"photos must be an iterable of Photo, got {type(photos).__name__}") from e


def chunked(photos: Sequence[Photo], size: int) -> Iterator[Sequence[Photo]]:
    """Split photos into consecutive chunks of at most `size`."""
    if size < 1:
        raise ValueError(f"batch size must be at least 1, got {size}")
    for start in range(0, len(photos), size):
        yield photos[start : start + size]


class BatchScorer:
    """Drives analysis and aggregation over many photos.

    Args:
        orchestrator: Per-photo analysis.
        aggregator: Turns analysis results into scores.
        image_source: Loads image data by asset identifier.
        repository: Needed only by the persisting operations.
        config: Default batch size and rescore threshold.
    """

    def __init__(
        self,
        orchestrator: AnalysisOrchestrator,
        aggregator: ScoreAggregator,
        image_source: ImageSource,
        repository: PhotoRepository | None = None,
        config: ScoringConfig | None = None,
    ) -> None:
        self.orchestrator = orchestrator
        self.aggregator = aggregator
        self.image_source = image_source
        self.repository = repository
        self.config = config or ScoringConfig()

    def _require_repository(self) -> PhotoRepository:
        if self.repository is None:
            raise RuntimeError("this operation needs a photo repository")
        return self.repository

    async def score_photo(self, photo: Photo) -> ScoreSet:
        """Load, analyze and score one photo.

        Raises:
            AssetNotFound: If the image source has no image for the photo.
            DecodeError: If the image cannot be decoded.
        """
        image = await asyncio.to_thread(
            self.image_source.load_full_resolution_image, photo.asset_identifier
        )
        if image is None:
            raise AssetNotFound(photo.asset_identifier)

        result = await self.orchestrator.analyze(photo, image)
        return self.aggregator.aggregate(result, photo)

    async def _score_outcome(self, photo: Photo) -> ScoreOutcome:
        try:
            scores = await self.score_photo(photo)
        except Exception as e:
            logger.warning("Failed to score %s: %s", photo.asset_identifier, e)
            return ScoreOutcome(photo=photo, success=False, error=str(e))
        return ScoreOutcome(photo=photo, success=True, scores=scores)

    async def _run_chunk(self, chunk: Sequence[Photo]) -> list[ScoreOutcome]:
        """Score a chunk concurrently; outcomes come back in input order."""
        if len(chunk) == 1:
            return [await self._score_outcome(chunk[0])]
        async with asyncio.TaskGroup() as tg:
            tasks = [tg.create_task(self._score_outcome(photo)) for photo in chunk]
        return [task.result() for task in tasks]

    async def _run(
        self,
        photos: list[Photo],
        batch_size: int,
        progress_callback: ProgressCallback | None,
        persist: bool,
    ) -> dict[uuid.UUID, PhotoScore]:
        total = len(photos)
        completed = 0
        failed = 0
        scores: dict[uuid.UUID, PhotoScore] = {}

        for chunk in chunked(photos, batch_size):
            for outcome in await self._run_chunk(chunk):
                if outcome.success and outcome.scores is not None:
                    if persist and not self._persist(outcome):
                        failed += 1
                    else:
                        scores[outcome.photo.id] = outcome.scores.overall
                else:
                    failed += 1

                completed += 1
                if progress_callback is not None:
                    progress_callback(completed, total)

        logger.info("Scored %d of %d photos (%d failed)", len(scores), total, failed)
        return scores

    def _persist(self, outcome: ScoreOutcome) -> bool:
        repository = self._require_repository()
        technical, face, overall = outcome.scores
        try:
            repository.save_photo(outcome.photo.with_scores(technical, face, overall))
        except Exception as e:
            logger.warning(
                "Failed to persist scores for %s: %s", outcome.photo.asset_identifier, e
            )
            return False
        return True

    async def score_batch(
        self,
        photos: Iterable[Photo],
        progress_callback: ProgressCallback | None = None,
    ) -> dict[uuid.UUID, PhotoScore]:
        """Score photos one at a time, in input order.

        Returns:
            Mapping of photo id to PhotoScore for every photo that scored.

        Raises:
            TypeError: If photos is not iterable.
        """
        return await self._run(_as_list(photos), 1, progress_callback, persist=False)

    async def score_in_chunks(
        self,
        photos: Iterable[Photo],
        batch_size: int | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> dict[uuid.UUID, PhotoScore]:
        """Score photos in sequential chunks.

        Photos inside a chunk are analyzed concurrently, so batch_size caps
        the number of decoded images in flight. Results and progress are
        the same as score_batch.
        """
        size = self.config.batch_size if batch_size is None else batch_size
        return await self._run(_as_list(photos), size, progress_callback, persist=False)

    async def score_and_persist(self, photo: Photo) -> Photo:
        """Score one photo and save the updated copy to the repository."""
        repository = self._require_repository()
        technical, face, overall = await self.score_photo(photo)
        updated = photo.with_scores(technical, face, overall)
        repository.save_photo(updated)
        return updated

    async def score_and_persist_batch(
        self,
        photos: Iterable[Photo],
        progress_callback: ProgressCallback | None = None,
        batch_size: int | None = None,
    ) -> dict[uuid.UUID, PhotoScore]:
        """Chunked scoring that saves every successfully scored photo."""
        self._require_repository()
        size = self.config.batch_size if batch_size is None else batch_size
        return await self._run(_as_list(photos), size, progress_callback, persist=True)

    async def photos_needing_scoring(self) -> list[Photo]:
        repository = self._require_repository()
        return await asyncio.to_thread(repository.load_photos_without_scores)

    async def rescore_low_quality(
        self,
        threshold: float | None = None,
        batch_size: int | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> dict[uuid.UUID, PhotoScore]:
        """Rescore unscored photos and photos scoring below the threshold."""
        repository = self._require_repository()
        if threshold is None:
            threshold = self.config.rescore_threshold

        photos = await asyncio.to_thread(repository.load_photos)
        to_rescore = [
            p
            for p in photos
            if p.overall_score is None or p.overall_score.overall < threshold
        ]
        logger.info(
            "Rescoring %d photos with quality below %.2f", len(to_rescore), threshold
        )
        return await self.score_and_persist_batch(
            to_rescore, progress_callback=progress_callback, batch_size=batch_size
        )
