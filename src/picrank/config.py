"""Scoring configuration.

Defaults live on ScoringConfig; load_config() reads overrides from a JSON
file such as:

    {
        "batch_size": 20,
        "rescore_threshold": 0.3,
        "weights": {
            "portrait": {"technical": 0.4, "faces": 0.4, "context": 0.2}
        }
    }
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path

from picrank.analyze import DEFAULT_MAX_OBJECTS, DEFAULT_OBJECT_CONFIDENCE_FLOOR
from picrank.scoring.weights import WeightTable

DEFAULT_BATCH_SIZE = 20
DEFAULT_RESCORE_THRESHOLD = 0.3


@dataclass
class ScoringConfig:
    """Tunable constants for analysis, batching and composite weighting."""

    object_confidence_floor: float = DEFAULT_OBJECT_CONFIDENCE_FLOOR
    max_objects: int = DEFAULT_MAX_OBJECTS
    batch_size: int = DEFAULT_BATCH_SIZE
    rescore_threshold: float = DEFAULT_RESCORE_THRESHOLD
    weights: WeightTable = field(default_factory=WeightTable)

    def __post_init__(self) -> None:
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {self.batch_size}")
        if self.max_objects < 0:
            raise ValueError(f"max_objects must be non-negative, got {self.max_objects}")
        if not 0.0 <= self.object_confidence_floor <= 1.0:
            raise ValueError(
                f"object_confidence_floor must be in [0, 1], got {self.object_confidence_floor}"
            )
        if not 0.0 <= self.rescore_threshold <= 1.0:
            raise ValueError(
                f"rescore_threshold must be in [0, 1], got {self.rescore_threshold}"
            )

    @classmethod
    def from_dict(cls, data: dict) -> ScoringConfig:
        known = {"object_confidence_floor", "max_objects", "batch_size", "rescore_threshold"}
        unknown = set(data) - known - {"weights"}
        if unknown:
            raise ValueError(f"unknown config keys: {', '.join(sorted(unknown))}")

        kwargs = {k: data[k] for k in known if k in data}
        if "weights" in data:
            kwargs["weights"] = WeightTable.from_dict(data["weights"])
        return cls(**kwargs)

    def to_dict(self) -> dict:
        return {
            "object_confidence_floor": self.object_confidence_floor,
            "max_objects": self.max_objects,
            "batch_size": self.batch_size,
            "rescore_threshold": self.rescore_threshold,
            "weights": self.weights.to_dict(),
        }


def load_config(path: Path | str) -> ScoringConfig:
    """Load a ScoringConfig from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not valid JSON or has invalid values.
    """
    path = Path(path)
    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Could not parse config {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Config {path} must contain a JSON object")

    return ScoringConfig.from_dict(data)
