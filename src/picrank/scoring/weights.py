"""Per-photo-type weighting for the overall composite score."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from picrank.models import PhotoType


@dataclass(frozen=True)
class CompositeWeights:
    """Weights for technical, face and context scores."""

    technical: float
    faces: float
    context: float

    def __post_init__(self) -> None:
        if min(self.technical, self.faces, self.context) < 0:
            raise ValueError(f"weights must be non-negative: {self}")
        if self.technical + self.faces + self.context <= 0:
            raise ValueError(f"weights must not all be zero: {self}")

    def combine(self, technical: float, faces: float, context: float) -> float:
        """Weighted sum of the three scores, clamped to 0-1."""
        score = (
            technical * self.technical
            + faces * self.faces
            + context * self.context
        )
        return max(0.0, min(1.0, score))


DEFAULT_WEIGHTS: dict[str, CompositeWeights] = {
    # Person-focused photos
    PhotoType.PORTRAIT.value: CompositeWeights(technical=0.4, faces=0.4, context=0.2),
    PhotoType.MULTI_FACE.value: CompositeWeights(technical=0.3, faces=0.5, context=0.2),
    # Scenery
    PhotoType.LANDSCAPE.value: CompositeWeights(technical=0.5, faces=0.1, context=0.4),
    PhotoType.OTHER.value: CompositeWeights(technical=0.4, faces=0.4, context=0.2),
}


class WeightTable:
    """Maps photo types to composite weights.

    Keys are plain strings so a categorizer with its own taxonomy can add
    types; unknown types use the fallback weights.
    """

    def __init__(
        self,
        weights: Mapping[str, CompositeWeights] | None = None,
        fallback: CompositeWeights | None = None,
    ) -> None:
        self._weights = dict(DEFAULT_WEIGHTS if weights is None else weights)
        self.fallback = fallback or self._weights.get(
            PhotoType.OTHER.value, DEFAULT_WEIGHTS[PhotoType.OTHER.value]
        )

    def weights_for(self, photo_type: PhotoType | str) -> CompositeWeights:
        key = photo_type.value if isinstance(photo_type, PhotoType) else str(photo_type)
        return self._weights.get(key, self.fallback)

    def types(self) -> list[str]:
        return sorted(self._weights)

    @classmethod
    def from_dict(cls, data: Mapping[str, Mapping[str, float]]) -> WeightTable:
        """Build a table from {"portrait": {"technical": .., "faces": .., "context": ..}}.

        Types not named keep their default weights.
        """
        weights = dict(DEFAULT_WEIGHTS)
        for name, values in data.items():
            try:
                weights[name] = CompositeWeights(
                    technical=float(values["technical"]),
                    faces=float(values["faces"]),
                    context=float(values["context"]),
                )
            except KeyError as e:
                raise ValueError(f"weights for {name!r} missing {e.args[0]!r}") from e
        return cls(weights)

    def to_dict(self) -> dict[str, dict[str, float]]:
        return {
            name: {"technical": w.technical, "faces": w.faces, "context": w.context}
            for name, w in self._weights.items()
        }
