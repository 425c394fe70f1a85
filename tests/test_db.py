"""Tests for picrank.db module."""

import uuid
from datetime import datetime
from pathlib import Path

from picrank.db import get_db
from picrank.models import Location, Photo, PhotoMetadata
from picrank.providers import PhotoRepository
from picrank.scoring.types import (
    NO_FACES,
    FaceQualityScore,
    PhotoScore,
    TechnicalQualityScore,
)


def make_photo(name: str = "IMG_0001.JPG", **kwargs) -> Photo:
    return Photo(
        asset_identifier=name,
        metadata=PhotoMetadata(
            width=4032, height=3024, camera_model="iPhone 15 Pro", f_number=1.8, iso=100
        ),
        **kwargs,
    )


def with_scores(photo: Photo, overall: float = 0.7, face=NO_FACES) -> Photo:
    return photo.with_scores(
        TechnicalQualityScore(0.6, 0.9, 0.8),
        face,
        PhotoScore(technical=0.77, faces=0.5, context=0.6, overall=overall, photo_type="portrait"),
    )


def test_database_init(tmp_path: Path):
    """Database initializes schema on creation."""
    db = get_db(tmp_path)
    assert db.db_path.exists()
    assert db.count_photos() == 0
    assert isinstance(db, PhotoRepository)


def test_save_and_load_photo(tmp_path: Path):
    """Insert and retrieve a photo with metadata."""
    db = get_db(tmp_path)
    photo = make_photo(
        timestamp=datetime(2024, 6, 15, 18, 30),
        location=Location(48.8566, 2.3522, 35.0),
        fingerprint="c3a5f0e1b2d49687",
    )
    db.save_photo(photo)

    loaded = db.load_photo(photo.id)
    assert loaded == photo


def test_load_missing_photo(tmp_path: Path):
    assert get_db(tmp_path).load_photo(uuid.uuid4()) is None


def test_save_scores(tmp_path: Path):
    """Scores round-trip through the scores table."""
    db = get_db(tmp_path)
    face = FaceQualityScore(2, 0.8, True, False, True)
    photo = with_scores(make_photo(), face=face)
    db.save_photo(photo)

    loaded = db.load_photo(photo.id)
    assert loaded.technical_quality == photo.technical_quality
    assert loaded.face_quality == face
    assert loaded.overall_score == photo.overall_score
    assert loaded.overall_score.photo_type == "portrait"


def test_save_updates_existing(tmp_path: Path):
    """Saving again updates the same row."""
    db = get_db(tmp_path)
    photo = make_photo()
    db.save_photo(photo)
    db.save_photo(with_scores(photo, overall=0.2))
    db.save_photo(with_scores(photo, overall=0.9))

    assert db.count_photos() == 1
    assert db.load_photo(photo.id).overall_score.overall == 0.9


def test_photos_without_scores(tmp_path: Path):
    db = get_db(tmp_path)
    pending = make_photo("a.jpg")
    done = with_scores(make_photo("b.jpg"))
    db.save_photo(pending)
    db.save_photo(done)

    assert [p.id for p in db.load_photos_without_scores()] == [pending.id]
    assert len(db.load_photos()) == 2


def test_delete_photo_cascades(tmp_path: Path):
    db = get_db(tmp_path)
    photo = with_scores(make_photo())
    db.save_photo(photo)
    db.delete_photo(photo.id)

    assert db.count_photos() == 0
    with db.connection() as conn:
        row = conn.execute("SELECT COUNT(*) as cnt FROM photo_scores").fetchone()
        assert row["cnt"] == 0
