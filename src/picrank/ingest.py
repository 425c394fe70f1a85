"""Ingest module: image discovery, EXIF extraction and the file image source."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any

import imagehash
from PIL import Image, ImageOps

from picrank.errors import AssetNotFound, DecodeError
from picrank.models import Location, Photo, PhotoMetadata

IMAGE_EXTENSIONS = frozenset(
    {".jpg", ".jpeg", ".png", ".heic", ".heif", ".tif", ".tiff", ".webp", ".bmp"}
)

# EXIF tag IDs
TAG_MAKE = 271
TAG_MODEL = 272
TAG_ORIENTATION = 274
TAG_DATETIME = 306
TAG_EXPOSURE_TIME = 33434
TAG_FNUMBER = 33437
TAG_ISO = 34855
TAG_DATETIME_ORIGINAL = 36867
TAG_FOCAL_LENGTH = 37386
TAG_LENS_MODEL = 42036

IFD_EXIF = 0x8769
IFD_GPS = 0x8825

# GPS IFD tags
GPS_LATITUDE_REF = 1
GPS_LATITUDE = 2
GPS_LONGITUDE_REF = 3
GPS_LONGITUDE = 4
GPS_ALTITUDE_REF = 5
GPS_ALTITUDE = 6


def find_image_files(
    directory: Path, extensions: frozenset[str] = IMAGE_EXTENSIONS
) -> list[Path]:
    """Recursively find image files, sorted by path.

    Args:
        directory: Root to search.
        extensions: Lower-case suffixes to accept.

    Returns:
        Sorted list of matching files. Hidden files are skipped.
    """
    directory = Path(directory)
    files = [
        p
        for p in directory.rglob("*")
        if p.is_file()
        and p.suffix.lower() in extensions
        and not p.name.startswith(".")
    ]
    return sorted(files)


def _to_float(value: Any) -> float | None:
    """EXIF rationals and plain numbers to float."""
    if value is None:
        return None
    try:
        if hasattr(value, "numerator") and hasattr(value, "denominator"):
            if value.denominator == 0:
                return None
            return value.numerator / value.denominator
        return float(value)
    except (TypeError, ValueError, ZeroDivisionError):
        return None


def _to_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="ignore")
    text = str(value).strip("\x00 ").strip()
    return text or None


def _parse_timestamp(value: Any) -> datetime | None:
    text = _to_text(value)
    if not text:
        return None
    try:
        return datetime.strptime(text, "%Y:%m:%d %H:%M:%S")
    except ValueError:
        return None


def _parse_coordinate(value: Any, ref: Any) -> float | None:
    """Degrees/minutes/seconds triple to signed decimal degrees."""
    try:
        degrees, minutes, seconds = (_to_float(v) for v in value)
    except (TypeError, ValueError):
        return None
    if degrees is None or minutes is None or seconds is None:
        return None
    decimal = degrees + minutes / 60.0 + seconds / 3600.0
    if _to_text(ref) in ("S", "W"):
        decimal = -decimal
    return decimal


def _parse_location(gps: dict) -> Location | None:
    if not gps:
        return None
    latitude = _parse_coordinate(gps.get(GPS_LATITUDE), gps.get(GPS_LATITUDE_REF))
    longitude = _parse_coordinate(gps.get(GPS_LONGITUDE), gps.get(GPS_LONGITUDE_REF))
    if latitude is None or longitude is None:
        return None

    altitude = _to_float(gps.get(GPS_ALTITUDE))
    if altitude is not None and gps.get(GPS_ALTITUDE_REF) in (1, b"\x01"):
        altitude = -altitude
    return Location(latitude=latitude, longitude=longitude, altitude=altitude)


def _oriented_size(img: Image.Image, orientation: Any) -> tuple[int, int]:
    width, height = img.size
    # Orientations 5-8 swap the axes
    if orientation in (5, 6, 7, 8):
        return height, width
    return width, height


def extract_metadata(
    path: Path,
) -> tuple[PhotoMetadata, datetime | None, Location | None]:
    """Read dimensions and EXIF from an image file using PIL.

    Args:
        path: Path to image file.

    Returns:
        (metadata, capture timestamp, GPS location). Missing EXIF fields
        are None.

    Raises:
        DecodeError: If the file is not a readable image.
    """
    try:
        with Image.open(path) as img:
            exif = img.getexif()
            base = dict(exif)
            details = dict(exif.get_ifd(IFD_EXIF))
            gps = dict(exif.get_ifd(IFD_GPS))
            width, height = _oriented_size(img, base.get(TAG_ORIENTATION))
    except (OSError, Image.DecompressionBombError) as e:
        raise DecodeError(f"cannot read {path}: {e}") from e

    iso = details.get(TAG_ISO)
    if isinstance(iso, tuple):
        iso = iso[0] if iso else None

    metadata = PhotoMetadata(
        width=width,
        height=height,
        camera_model=_to_text(base.get(TAG_MODEL)),
        lens_model=_to_text(details.get(TAG_LENS_MODEL)),
        focal_length=_to_float(details.get(TAG_FOCAL_LENGTH)),
        f_number=_to_float(details.get(TAG_FNUMBER)),
        exposure_time=_to_float(details.get(TAG_EXPOSURE_TIME)),
        iso=int(iso) if iso else None,
    )
    timestamp = _parse_timestamp(
        details.get(TAG_DATETIME_ORIGINAL) or base.get(TAG_DATETIME)
    )
    return metadata, timestamp, _parse_location(gps)


def compute_fingerprint(path: Path) -> str:
    """Perceptual hash (pHash) of the oriented image, as hex."""
    try:
        with Image.open(path) as img:
            return str(imagehash.phash(ImageOps.exif_transpose(img)))
    except (OSError, Image.DecompressionBombError) as e:
        raise DecodeError(f"cannot read {path}: {e}") from e


def photo_from_path(path: Path, root: Path | None = None) -> Photo:
    """Build an unscored Photo for an image file.

    The asset identifier is the path relative to `root` when given, so it
    resolves through a FileImageSource on the same root.
    """
    path = Path(path)
    metadata, timestamp, location = extract_metadata(path)
    identifier = str(path.relative_to(root)) if root is not None else str(path)
    return Photo(
        asset_identifier=identifier,
        metadata=metadata,
        timestamp=timestamp,
        location=location,
        fingerprint=compute_fingerprint(path),
    )


class FileImageSource:
    """Image source backed by files below a root directory."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root).resolve()

    def resolve(self, asset_identifier: str) -> Path:
        path = (self.root / asset_identifier).resolve()
        if not path.is_relative_to(self.root) or not path.is_file():
            raise AssetNotFound(asset_identifier)
        return path

    def load_full_resolution_image(self, asset_identifier: str) -> bytes:
        """Encoded file bytes; decoding happens during analysis.

        Raises:
            AssetNotFound: If no file exists for the identifier.
        """
        return self.resolve(asset_identifier).read_bytes()
