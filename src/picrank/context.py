"""Photo context analysis: when, where, who and with what.

ContextAnalyzer scores six facets of a photo's context and combines them
into the external context score consumed by the aggregator.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from picrank.models import AnalysisResult, Photo

# time, location, season, social, technical, aesthetic
FACET_WEIGHTS = (0.2, 0.15, 0.1, 0.2, 0.2, 0.15)


class TimeOfDay(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    GOLDEN_HOUR = "golden_hour"
    EVENING = "evening"
    NIGHT = "night"

    @classmethod
    def from_hour(cls, hour: int) -> TimeOfDay:
        if 5 <= hour < 9:
            return cls.MORNING
        if 9 <= hour < 17:
            return cls.AFTERNOON
        if 17 <= hour < 19:
            return cls.GOLDEN_HOUR
        if 19 <= hour < 22:
            return cls.EVENING
        return cls.NIGHT


class Season(str, Enum):
    SPRING = "spring"
    SUMMER = "summer"
    FALL = "fall"
    WINTER = "winter"

    @classmethod
    def from_month(cls, month: int) -> Season:
        if 3 <= month <= 5:
            return cls.SPRING
        if 6 <= month <= 8:
            return cls.SUMMER
        if 9 <= month <= 11:
            return cls.FALL
        return cls.WINTER


class SocialSetting(str, Enum):
    CELEBRATION = "celebration"
    FRIENDS = "friends"
    SOLO = "solo"


class CameraType(str, Enum):
    SMARTPHONE = "smartphone"
    DSLR = "dslr"
    UNKNOWN = "unknown"


class VisualComplexity(str, Enum):
    SIMPLE = "simple"
    BALANCED = "balanced"
    COMPLEX = "complex"
    CHAOTIC = "chaotic"


TIME_OF_DAY_BONUS = {
    TimeOfDay.GOLDEN_HOUR: 0.3,
    TimeOfDay.MORNING: 0.2,
    TimeOfDay.EVENING: 0.2,
    TimeOfDay.AFTERNOON: 0.1,
    TimeOfDay.NIGHT: 0.05,
}
SEASON_BONUS = {
    Season.SPRING: 0.15,
    Season.FALL: 0.15,
    Season.SUMMER: 0.1,
    Season.WINTER: 0.05,
}
SETTING_BONUS = {
    SocialSetting.CELEBRATION: 0.2,
    SocialSetting.FRIENDS: 0.12,
    SocialSetting.SOLO: 0.08,
}
CAMERA_BONUS = {
    CameraType.DSLR: 0.15,
    CameraType.SMARTPHONE: 0.05,
    CameraType.UNKNOWN: 0.0,
}
COMPLEXITY_BONUS = {
    VisualComplexity.SIMPLE: 0.1,
    VisualComplexity.BALANCED: 0.15,
    VisualComplexity.COMPLEX: 0.05,
    VisualComplexity.CHAOTIC: -0.1,
}

SMARTPHONE_MARKERS = ("iphone", "android", "pixel", "galaxy")
DSLR_MARKERS = ("canon", "nikon", "sony", "fujifilm", "olympus", "panasonic")


@dataclass(frozen=True)
class TimeContext:
    time_of_day: TimeOfDay | None = None  # None when the capture time is unknown
    is_weekend: bool = False
    is_golden_hour: bool = False
    is_magic_hour: bool = False

    @property
    def score(self) -> float:
        if self.time_of_day is None:
            return 0.5
        score = 0.5 + TIME_OF_DAY_BONUS[self.time_of_day]
        if self.is_weekend:
            score += 0.1
        if self.is_golden_hour:
            score += 0.2
        if self.is_magic_hour:
            score += 0.15
        return min(1.0, score)


@dataclass(frozen=True)
class LocationContext:
    has_location: bool = False

    @property
    def score(self) -> float:
        return 0.6 if self.has_location else 0.4


@dataclass(frozen=True)
class SeasonalContext:
    season: Season | None = None

    @property
    def score(self) -> float:
        if self.season is None:
            return 0.5
        return min(1.0, 0.5 + SEASON_BONUS[self.season])


@dataclass(frozen=True)
class SocialContext:
    number_of_people: int = 0
    has_smiles: bool = False
    is_group_activity: bool = False
    setting: SocialSetting = SocialSetting.SOLO

    @property
    def score(self) -> float:
        n = self.number_of_people
        score = 0.5
        if n == 1:
            score += 0.1
        elif 2 <= n <= 4:
            score += 0.2
        elif 5 <= n <= 10:
            score += 0.25
        elif n > 10:
            score += 0.15
        if self.has_smiles:
            score += 0.15
        if self.is_group_activity:
            score += 0.1
        score += SETTING_BONUS[self.setting]
        return min(1.0, score)


@dataclass(frozen=True)
class TechnicalContext:
    camera_type: CameraType = CameraType.UNKNOWN
    has_portrait_mode: bool = False

    @property
    def score(self) -> float:
        score = 0.5 + CAMERA_BONUS[self.camera_type]
        if self.has_portrait_mode:
            score += 0.1
        return min(1.0, score)


@dataclass(frozen=True)
class AestheticContext:
    has_good_lighting: bool = False
    has_interesting_composition: bool = False
    has_color_harmony: bool = False
    complexity: VisualComplexity = VisualComplexity.SIMPLE

    @property
    def score(self) -> float:
        score = 0.5
        if self.has_good_lighting:
            score += 0.2
        if self.has_interesting_composition:
            score += 0.15
        if self.has_color_harmony:
            score += 0.1
        score += COMPLEXITY_BONUS[self.complexity]
        return max(0.0, min(1.0, score))


@dataclass(frozen=True)
class PhotoContext:
    time: TimeContext
    location: LocationContext
    seasonal: SeasonalContext
    social: SocialContext
    technical: TechnicalContext
    aesthetic: AestheticContext

    @property
    def overall_score(self) -> float:
        scores = (
            self.time.score,
            self.location.score,
            self.seasonal.score,
            self.social.score,
            self.technical.score,
            self.aesthetic.score,
        )
        return sum(s * w for s, w in zip(scores, FACET_WEIGHTS))


def time_context(timestamp: datetime | None) -> TimeContext:
    if timestamp is None:
        return TimeContext()
    hour = timestamp.hour
    return TimeContext(
        time_of_day=TimeOfDay.from_hour(hour),
        is_weekend=timestamp.weekday() >= 5,
        is_golden_hour=6 <= hour <= 8 or 17 <= hour <= 19,
        is_magic_hour=19 <= hour <= 20 or 5 <= hour <= 6,
    )


def seasonal_context(timestamp: datetime | None) -> SeasonalContext:
    if timestamp is None:
        return SeasonalContext()
    return SeasonalContext(season=Season.from_month(timestamp.month))


def social_context(result: AnalysisResult) -> SocialContext:
    n = result.face_count
    has_smiles = any(f.smiling is True for f in result.faces)

    if n <= 1:
        setting = SocialSetting.SOLO
    elif n <= 4:
        setting = SocialSetting.FRIENDS
    elif n <= 10:
        setting = SocialSetting.CELEBRATION if has_smiles else SocialSetting.FRIENDS
    else:
        setting = SocialSetting.CELEBRATION

    return SocialContext(
        number_of_people=n,
        has_smiles=has_smiles,
        is_group_activity=n >= 3,
        setting=setting,
    )


def camera_type(camera_model: str | None) -> CameraType:
    model = (camera_model or "").lower()
    if any(m in model for m in SMARTPHONE_MARKERS):
        return CameraType.SMARTPHONE
    if any(m in model for m in DSLR_MARKERS):
        return CameraType.DSLR
    return CameraType.UNKNOWN


def visual_complexity(object_count: int) -> VisualComplexity:
    if object_count <= 2:
        return VisualComplexity.SIMPLE
    if object_count <= 5:
        return VisualComplexity.BALANCED
    if object_count <= 10:
        return VisualComplexity.COMPLEX
    return VisualComplexity.CHAOTIC


def aesthetic_context(result: AnalysisResult) -> AestheticContext:
    saliency = result.saliency
    aesthetics = result.aesthetics
    return AestheticContext(
        has_good_lighting=result.exposure > 0.7,
        has_interesting_composition=saliency is not None and saliency.composition_score > 0.6,
        has_color_harmony=aesthetics is not None and aesthetics.overall_score > 0.3,
        complexity=visual_complexity(len(result.objects)),
    )


class ContextAnalyzer:
    """Context provider built from metadata and analysis results."""

    def analyze_context(self, photo: Photo, result: AnalysisResult) -> PhotoContext:
        return PhotoContext(
            time=time_context(photo.timestamp),
            location=LocationContext(has_location=photo.location is not None),
            seasonal=seasonal_context(photo.timestamp),
            social=social_context(result),
            technical=TechnicalContext(
                camera_type=camera_type(photo.metadata.camera_model),
                has_portrait_mode=result.face_count == 1 and result.exposure > 0.7,
            ),
            aesthetic=aesthetic_context(result),
        )

    def context_score(self, signal: PhotoContext) -> float:
        return max(0.0, min(1.0, signal.overall_score))
