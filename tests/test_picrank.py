"""Tests for the picrank command line."""

from pathlib import Path

from PIL import Image

from picrank import main
from picrank.db import get_db


def make_library(directory: Path) -> Path:
    """Two camera-sized images and one phone-screen-sized PNG."""
    Image.new("RGB", (300, 200), (128, 128, 128)).save(directory / "DSC_0001.jpg")
    Image.new("RGB", (200, 200), (20, 20, 20)).save(directory / "DSC_0002.jpg")
    Image.new("RGB", (750, 1334), (240, 240, 240)).save(directory / "Screenshot_1.png")
    return directory


def test_no_command(capsys):
    assert main([]) == 1


def test_not_a_directory(tmp_path: Path, capsys):
    assert main(["index", str(tmp_path / "missing")]) == 1
    assert "not a directory" in capsys.readouterr().err


def test_score_before_index(tmp_path: Path, capsys):
    assert main(["score", str(tmp_path)]) == 1
    assert "picrank index" in capsys.readouterr().err


def test_index_score_and_report(tmp_path: Path, capsys):
    make_library(tmp_path)

    assert main(["index", str(tmp_path)]) == 0
    db = get_db(tmp_path)
    assert db.count_photos() == 3

    # Indexing again adds nothing
    assert main(["index", str(tmp_path)]) == 0
    assert db.count_photos() == 3

    assert main(["score", str(tmp_path)]) == 0
    photos = db.load_photos()
    assert all(p.is_scored for p in photos)
    assert db.load_photos_without_scores() == []

    capsys.readouterr()
    assert main(["status", str(tmp_path)]) == 0
    out = capsys.readouterr().out
    assert "Total photos: 3" in out
    assert "Average quality" in out

    assert main(["top", str(tmp_path), "--n", "2"]) == 0
    out = capsys.readouterr().out
    assert out.count(".jpg") + out.count(".png") == 2

    assert main(["screenshots", str(tmp_path)]) == 0
    out = capsys.readouterr().out
    assert "Screenshot_1.png" in out
    assert "Exact dimensions match device screen resolution" in out


def test_rescore(tmp_path: Path, capsys):
    make_library(tmp_path)
    main(["index", str(tmp_path)])
    main(["score", str(tmp_path)])

    assert main(["score", str(tmp_path), "--rescore", "--threshold", "1.0"]) == 0
    assert "Scored 3 photos" in capsys.readouterr().out


def test_bad_config(tmp_path: Path, capsys):
    make_library(tmp_path)
    main(["index", str(tmp_path)])
    config = tmp_path / "bad.json"
    config.write_text('{"batch_size": 0}', encoding="utf-8")

    assert main(["score", str(tmp_path), "--config", str(config)]) == 1
    assert "batch_size" in capsys.readouterr().err


def test_index_skips_oversized_image(tmp_path: Path, capsys, monkeypatch):
    make_library(tmp_path)
    # Only the 750x1334 screenshot is past twice this limit
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100_000)

    assert main(["index", str(tmp_path)]) == 0
    assert get_db(tmp_path).count_photos() == 2
    assert "skipped Screenshot_1.png" in capsys.readouterr().err
