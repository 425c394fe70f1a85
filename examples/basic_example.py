"""Basic example: score a few generated photos with a stub vision provider."""

import asyncio

from PIL import Image

from picrank.batch import BatchScorer
from picrank.categorize import KeywordCategorizer
from picrank.context import ContextAnalyzer
from picrank.models import (
    AestheticObservation,
    BoundingBox,
    FaceObservation,
    ObjectObservation,
    Photo,
    PhotoMetadata,
    Pose,
    SaliencyObservation,
)
from picrank.orchestrator import AnalysisOrchestrator
from picrank.scoring import ScoreAggregator
from picrank.screenshot import screenshot_analysis


class StubVision:
    """Pretends every image holds one smiling face in front of a mountain."""

    def detect_faces(self, image):
        return [
            FaceObservation(
                bounding_box=BoundingBox(0.35, 0.2, 0.3, 0.4),
                confidence=0.95,
                quality=0.7,
                smiling=True,
                eyes_open=True,
                pose=Pose(yaw=10.0),
            )
        ]

    def classify_objects(self, image):
        return [ObjectObservation("mountain", 0.8), ObjectObservation("sky", 0.6)]

    def assess_aesthetics(self, image):
        return AestheticObservation(overall_score=0.4, confidence=0.8)

    def compute_saliency(self, image):
        return SaliencyObservation(composition_score=0.6)


class MemoryImageSource:
    def __init__(self, images):
        self.images = images

    def load_full_resolution_image(self, asset_identifier):
        return self.images.get(asset_identifier)


def main() -> None:
    images = {
        "IMG_0001.JPG": Image.new("RGB", (1600, 1200), (120, 130, 140)),
        "DSC_0002.JPG": Image.new("RGB", (1500, 1000), (30, 30, 30)),
    }
    photos = [
        Photo(asset_identifier=name, metadata=PhotoMetadata(*img.size))
        for name, img in images.items()
    ]
    photos.append(Photo(asset_identifier="missing.jpg", metadata=PhotoMetadata(10, 10)))

    scorer = BatchScorer(
        orchestrator=AnalysisOrchestrator(StubVision()),
        aggregator=ScoreAggregator(KeywordCategorizer(), ContextAnalyzer()),
        image_source=MemoryImageSource(images),
    )

    def report(completed: int, total: int) -> None:
        print(f"   {completed}/{total}")

    print("Scoring:")
    scores = asyncio.run(scorer.score_batch(photos, report))

    print("\nResults:")
    for photo in photos:
        score = scores.get(photo.id)
        if score is None:
            print(f"   {photo.asset_identifier}: failed")
            continue
        print(
            f"   {photo.asset_identifier}: {score.overall:.3f} ({score.photo_type}) "
            f"tech={score.technical:.2f} faces={score.faces:.2f} ctx={score.context:.2f}"
        )

    print("\nScreenshot check:")
    for photo in photos:
        analysis = screenshot_analysis(photo)
        print(
            f"   {photo.asset_identifier}: {analysis.is_likely_screenshot} "
            f"({analysis.confidence_description})"
        )


if __name__ == "__main__":
    main()
