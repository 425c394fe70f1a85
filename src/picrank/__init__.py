"""picrank: photo quality scoring."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

__version__ = "0.1.0"

DEFAULT_TOP = 10


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="picrank",
        description="Photo quality scoring.",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Show debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # index command
    index_parser = subparsers.add_parser("index", help="Index a directory of photos")
    index_parser.add_argument("directory", type=Path, help="Directory to index")

    # score command
    score_parser = subparsers.add_parser("score", help="Score indexed photos")
    score_parser.add_argument("directory", type=Path, help="Indexed directory")
    score_parser.add_argument(
        "--rescore",
        action="store_true",
        help="Also rescore photos below the rescore threshold",
    )
    score_parser.add_argument(
        "--threshold", type=float, default=None, help="Rescore threshold (0-1)"
    )
    score_parser.add_argument(
        "--batch-size", type=int, default=None, help="Photos analyzed concurrently"
    )
    score_parser.add_argument(
        "--config", type=Path, default=None, help="JSON scoring config"
    )

    # status command
    status_parser = subparsers.add_parser("status", help="Show index status")
    status_parser.add_argument(
        "directory", type=Path, nargs="?", default=Path("."), help="Directory to check"
    )

    # top command
    top_parser = subparsers.add_parser("top", help="List the best scored photos")
    top_parser.add_argument("directory", type=Path, help="Indexed directory")
    top_parser.add_argument(
        "--n",
        type=int,
        default=DEFAULT_TOP,
        help=f"Number of photos (default: {DEFAULT_TOP})",
    )

    # screenshots command
    shots_parser = subparsers.add_parser(
        "screenshots", help="List indexed photos that look like screenshots"
    )
    shots_parser.add_argument("directory", type=Path, help="Indexed directory")

    args = parser.parse_args(argv)

    from picrank.ui import setup_logging

    setup_logging(args.verbose)

    if args.command == "index":
        return cmd_index(args.directory)
    if args.command == "score":
        return cmd_score(
            args.directory, args.rescore, args.threshold, args.batch_size, args.config
        )
    if args.command == "status":
        return cmd_status(args.directory)
    if args.command == "top":
        return cmd_top(args.directory, args.n)
    if args.command == "screenshots":
        return cmd_screenshots(args.directory)

    parser.print_help()
    return 1


def cmd_index(directory: Path) -> int:
    """Index a directory of photos."""
    from picrank.db import get_db
    from picrank.errors import DecodeError
    from picrank.ingest import find_image_files, photo_from_path
    from picrank.ui import create_progress

    if not directory.is_dir():
        print(f"Error: {directory} is not a directory", file=sys.stderr)
        return 1

    db = get_db(directory)
    known = {p.asset_identifier for p in db.load_photos()}
    files = [
        p for p in find_image_files(directory) if str(p.relative_to(directory)) not in known
    ]

    if not files:
        print(f"Total: {db.count_photos()} photos in index")
        return 0

    indexed = 0
    with create_progress() as progress:
        task = progress.add_task("[cyan]Indexing photos...", total=len(files))
        for path in files:
            progress.update(task, description=f"[cyan]Processing {path.name}...")
            try:
                db.save_photo(photo_from_path(path, root=directory))
                indexed += 1
            except DecodeError as e:
                print(f"  Warning: skipped {path.name}: {e}", file=sys.stderr)
            progress.advance(task)

    print(f"\nIndexed {indexed} photos, skipped {len(files) - indexed}")
    print(f"Total: {db.count_photos()} photos in index")
    return 0


def cmd_score(
    directory: Path,
    rescore: bool,
    threshold: float | None,
    batch_size: int | None,
    config_path: Path | None,
) -> int:
    """Score unscored photos, or rescore low-quality ones."""
    from picrank.batch import BatchScorer
    from picrank.categorize import KeywordCategorizer
    from picrank.config import ScoringConfig, load_config
    from picrank.context import ContextAnalyzer
    from picrank.db import get_db
    from picrank.ingest import FileImageSource
    from picrank.orchestrator import AnalysisOrchestrator
    from picrank.scoring import ScoreAggregator
    from picrank.ui import create_progress, progress_callback

    if not directory.is_dir():
        print(f"Error: {directory} is not a directory", file=sys.stderr)
        return 1

    try:
        config = load_config(config_path) if config_path else ScoringConfig()
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    db = get_db(directory)
    if db.count_photos() == 0:
        print("No photos indexed. Run 'picrank index' first.", file=sys.stderr)
        return 1

    scorer = BatchScorer(
        orchestrator=AnalysisOrchestrator(config=config),
        aggregator=ScoreAggregator(
            categorizer=KeywordCategorizer(),
            context_provider=ContextAnalyzer(),
            weights=config.weights,
        ),
        image_source=FileImageSource(directory),
        repository=db,
        config=config,
    )

    with create_progress() as progress:
        task = progress.add_task("[cyan]Scoring photos...", total=None)
        callback = progress_callback(progress, task)
        if rescore:
            scores = asyncio.run(
                scorer.rescore_low_quality(
                    threshold=threshold,
                    batch_size=batch_size,
                    progress_callback=callback,
                )
            )
        else:
            pending = db.load_photos_without_scores()
            scores = asyncio.run(
                scorer.score_and_persist_batch(
                    pending, progress_callback=callback, batch_size=batch_size
                )
            )

    print(f"\nScored {len(scores)} photos")
    return 0


def cmd_status(directory: Path) -> int:
    """Show index status."""
    from picrank.db import get_db
    from picrank.ranking import average_quality, quality_distribution

    if not directory.is_dir():
        print(f"Error: {directory} is not a directory", file=sys.stderr)
        return 1

    db = get_db(directory)
    photos = db.load_photos()
    average = average_quality(photos)

    print(f"Index: {db.db_path}")
    print(f"Total photos: {len(photos)}")
    for label, count in quality_distribution(photos).items():
        print(f"  {label:<18} {count}")
    if average is not None:
        print(f"Average quality: {average:.2f}")
    return 0


def cmd_top(directory: Path, n: int) -> int:
    """Print the top n scored photos."""
    from picrank.db import get_db
    from picrank.ranking import photo_issues, top_quality

    if not directory.is_dir():
        print(f"Error: {directory} is not a directory", file=sys.stderr)
        return 1

    db = get_db(directory)
    best = top_quality(db.load_photos(), n)
    if not best:
        print("No scored photos. Run 'picrank score' first.", file=sys.stderr)
        return 1

    print(f"{'Rank':<5} {'Score':<6} {'Tech':<6} {'Face':<6} {'Ctx':<6} {'Type':<11} {'File'}")
    print("-" * 80)
    for i, photo in enumerate(best, 1):
        s = photo.overall_score
        issues = ", ".join(photo_issues(photo))
        print(
            f"{i:<5} {s.overall:>5.2f}  {s.technical:>5.2f}  {s.faces:>5.2f}  "
            f"{s.context:>5.2f}  {s.photo_type:<11} {photo.asset_identifier}"
            + (f"  [{issues}]" if issues else "")
        )
    return 0


def cmd_screenshots(directory: Path) -> int:
    """List photos that look like screenshots."""
    from picrank.db import get_db
    from picrank.screenshot import screenshot_analysis

    if not directory.is_dir():
        print(f"Error: {directory} is not a directory", file=sys.stderr)
        return 1

    db = get_db(directory)
    found = 0
    for photo in db.load_photos():
        analysis = screenshot_analysis(photo)
        if not analysis.is_likely_screenshot:
            continue
        found += 1
        print(f"{photo.asset_identifier}  ({analysis.confidence_description})")
        for indicator in analysis.indicators:
            print(f"    - {indicator}")

    print(f"\n{found} likely screenshots")
    return 0


if __name__ == "__main__":
    sys.exit(main())
