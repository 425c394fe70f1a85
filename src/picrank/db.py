"""SQLite photo repository."""

from __future__ import annotations

import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator

from picrank.models import Location, Photo, PhotoMetadata
from picrank.scoring.types import FaceQualityScore, PhotoScore, TechnicalQualityScore

# Default database location
DEFAULT_DB_NAME = ".picrank.db"

SCHEMA = """
CREATE TABLE IF NOT EXISTS photos (
    id TEXT PRIMARY KEY,
    asset_identifier TEXT NOT NULL,
    width INTEGER NOT NULL,
    height INTEGER NOT NULL,
    camera_model TEXT,
    lens_model TEXT,
    focal_length REAL,
    f_number REAL,
    exposure_time REAL,
    iso INTEGER,
    timestamp TEXT,
    latitude REAL,
    longitude REAL,
    altitude REAL,
    fingerprint TEXT
);

CREATE TABLE IF NOT EXISTS photo_scores (
    photo_id TEXT PRIMARY KEY REFERENCES photos(id) ON DELETE CASCADE,
    sharpness REAL,
    exposure REAL,
    composition REAL,
    face_count INTEGER,
    face_average REAL,
    eyes_open INTEGER,
    good_expressions INTEGER,
    optimal_sizes INTEGER,
    technical REAL,
    faces REAL,
    context REAL,
    overall REAL,
    photo_type TEXT,
    calculated_at TEXT
);

CREATE INDEX IF NOT EXISTS idx_photos_asset ON photos(asset_identifier);
CREATE INDEX IF NOT EXISTS idx_photos_timestamp ON photos(timestamp);
CREATE INDEX IF NOT EXISTS idx_scores_overall ON photo_scores(overall);
"""

_SELECT = """
SELECT p.*, s.photo_id AS scored_id, s.sharpness, s.exposure, s.composition,
       s.face_count, s.face_average, s.eyes_open, s.good_expressions,
       s.optimal_sizes, s.technical, s.faces, s.context, s.overall,
       s.photo_type, s.calculated_at
FROM photos p
LEFT JOIN photo_scores s ON s.photo_id = p.id
"""


class PhotoDatabase:
    """SQLite database wrapper implementing the photo repository."""

    def __init__(self, db_path: Path | str) -> None:
        self.db_path = Path(db_path)

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Get a database connection with row access by column name."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
        finally:
            conn.close()

    def init_schema(self) -> None:
        """Initialize database schema."""
        with self.connection() as conn:
            conn.executescript(SCHEMA)
            conn.commit()

    def save_photo(self, photo: Photo) -> None:
        """Insert or update a photo and, when present, its scores."""
        meta = photo.metadata
        loc = photo.location
        with self.connection() as conn:
            conn.execute(
                """
                INSERT INTO photos (
                    id, asset_identifier, width, height, camera_model,
                    lens_model, focal_length, f_number, exposure_time, iso,
                    timestamp, latitude, longitude, altitude, fingerprint
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    asset_identifier = excluded.asset_identifier,
                    width = excluded.width,
                    height = excluded.height,
                    camera_model = excluded.camera_model,
                    lens_model = excluded.lens_model,
                    focal_length = excluded.focal_length,
                    f_number = excluded.f_number,
                    exposure_time = excluded.exposure_time,
                    iso = excluded.iso,
                    timestamp = excluded.timestamp,
                    latitude = excluded.latitude,
                    longitude = excluded.longitude,
                    altitude = excluded.altitude,
                    fingerprint = excluded.fingerprint
                """,
                (
                    str(photo.id),
                    photo.asset_identifier,
                    meta.width,
                    meta.height,
                    meta.camera_model,
                    meta.lens_model,
                    meta.focal_length,
                    meta.f_number,
                    meta.exposure_time,
                    meta.iso,
                    photo.timestamp.isoformat() if photo.timestamp else None,
                    loc.latitude if loc else None,
                    loc.longitude if loc else None,
                    loc.altitude if loc else None,
                    photo.fingerprint,
                ),
            )
            if photo.overall_score is not None:
                self._upsert_scores(conn, photo)
            conn.commit()

    def _upsert_scores(self, conn: sqlite3.Connection, photo: Photo) -> None:
        technical = photo.technical_quality or TechnicalQualityScore()
        face = photo.face_quality
        score = photo.overall_score
        conn.execute(
            """
            INSERT INTO photo_scores (
                photo_id, sharpness, exposure, composition, face_count,
                face_average, eyes_open, good_expressions, optimal_sizes,
                technical, faces, context, overall, photo_type, calculated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(photo_id) DO UPDATE SET
                sharpness = excluded.sharpness,
                exposure = excluded.exposure,
                composition = excluded.composition,
                face_count = excluded.face_count,
                face_average = excluded.face_average,
                eyes_open = excluded.eyes_open,
                good_expressions = excluded.good_expressions,
                optimal_sizes = excluded.optimal_sizes,
                technical = excluded.technical,
                faces = excluded.faces,
                context = excluded.context,
                overall = excluded.overall,
                photo_type = excluded.photo_type,
                calculated_at = excluded.calculated_at
            """,
            (
                str(photo.id),
                technical.sharpness,
                technical.exposure,
                technical.composition,
                face.face_count if face else None,
                face.average_score if face else None,
                int(face.eyes_open) if face else None,
                int(face.good_expressions) if face else None,
                int(face.optimal_sizes) if face else None,
                score.technical,
                score.faces,
                score.context,
                score.overall,
                score.photo_type,
                score.calculated_at.isoformat(),
            ),
        )

    def load_photo(self, photo_id: uuid.UUID) -> Photo | None:
        """Get a photo by id."""
        with self.connection() as conn:
            row = conn.execute(_SELECT + " WHERE p.id = ?", (str(photo_id),)).fetchone()
            if row is None:
                return None
            return self._row_to_photo(row)

    def load_photos(self) -> list[Photo]:
        """Get all photos, oldest capture first."""
        with self.connection() as conn:
            rows = conn.execute(
                _SELECT + " ORDER BY p.timestamp, p.asset_identifier"
            ).fetchall()
            return [self._row_to_photo(row) for row in rows]

    def load_photos_without_scores(self) -> list[Photo]:
        with self.connection() as conn:
            rows = conn.execute(
                _SELECT + " WHERE s.photo_id IS NULL ORDER BY p.timestamp, p.asset_identifier"
            ).fetchall()
            return [self._row_to_photo(row) for row in rows]

    def count_photos(self) -> int:
        """Count stored photos."""
        with self.connection() as conn:
            row = conn.execute("SELECT COUNT(*) as cnt FROM photos").fetchone()
            return row["cnt"] if row else 0

    def delete_photo(self, photo_id: uuid.UUID) -> None:
        """Delete a photo and its scores."""
        with self.connection() as conn:
            conn.execute("DELETE FROM photos WHERE id = ?", (str(photo_id),))
            conn.commit()

    def _row_to_photo(self, row: sqlite3.Row) -> Photo:
        """Convert a joined database row to Photo."""
        location = None
        if row["latitude"] is not None and row["longitude"] is not None:
            location = Location(
                latitude=row["latitude"],
                longitude=row["longitude"],
                altitude=row["altitude"],
            )

        technical = face = overall = None
        if row["scored_id"] is not None:
            technical = TechnicalQualityScore(
                sharpness=row["sharpness"],
                exposure=row["exposure"],
                composition=row["composition"],
            )
            if row["face_count"] is not None:
                face = FaceQualityScore(
                    face_count=row["face_count"],
                    average_score=row["face_average"],
                    eyes_open=bool(row["eyes_open"]),
                    good_expressions=bool(row["good_expressions"]),
                    optimal_sizes=bool(row["optimal_sizes"]),
                )
            overall = PhotoScore(
                technical=row["technical"],
                faces=row["faces"],
                context=row["context"],
                overall=row["overall"],
                photo_type=row["photo_type"],
                calculated_at=datetime.fromisoformat(row["calculated_at"]),
            )

        return Photo(
            id=uuid.UUID(row["id"]),
            asset_identifier=row["asset_identifier"],
            metadata=PhotoMetadata(
                width=row["width"],
                height=row["height"],
                camera_model=row["camera_model"],
                lens_model=row["lens_model"],
                focal_length=row["focal_length"],
                f_number=row["f_number"],
                exposure_time=row["exposure_time"],
                iso=row["iso"],
            ),
            timestamp=(
                datetime.fromisoformat(row["timestamp"]) if row["timestamp"] else None
            ),
            location=location,
            fingerprint=row["fingerprint"],
            technical_quality=technical,
            face_quality=face,
            overall_score=overall,
        )


def get_db(directory: Path) -> PhotoDatabase:
    """Get database for a directory, creating if needed."""
    db_path = Path(directory) / DEFAULT_DB_NAME
    db = PhotoDatabase(db_path)
    db.init_schema()
    return db
