# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Command-line interface for Geotagger

Geotags photos using GPX tracks and already geotagged photos as location
anchors.

Usage:
    geotagger --anchors track.gpx --input photos/ --output tagged/
    geotagger -a anchors/ -i photo.jpg --photos-time-offset -60 --verbose

Copyright 2025 DNAi inc.
"""

import argparse
import sys
from pathlib import Path
from typing import Callable, List, Optional

from loguru import logger

from geotagger import __version__
from geotagger.config import GeotaggerSettings
from geotagger.counter import GeotaggingCounter
from geotagger.exceptions import (
    GeotaggerError,
    MetadataReadError,
    NoGeoAnchorsFoundError,
    OutputIsNotADirectoryError,
)
from geotagger.exif_io import ExifReader, ExifWriter
from geotagger.geotagger import Geotagger
from geotagger.gpx_loader import GPXGeoAnchorsLoader
from geotagger.items import TimeAdjustmentSaveMode
from geotagger.loaders import GeoAnchorsLoader, TimeOffsetGeoAnchorsLoader
from geotagger.logging_item import LoggingGeotaggingItem
from geotagger.models import LocationReferences
from geotagger.photo_item import ExifGeoAnchorsLoader, ExifGeotaggingItem
from geotagger.scanner import is_gpx_file, is_photo_file, scan_directory
from geotagger.timezone_offsets import format_timezone_offset, parse_timezone_offset


def setup_logging(verbose: bool = False, level: str = "INFO") -> None:
    """
    Configure loguru for command-line use.

    Args:
        verbose: Log debug messages and per-item traces
        level: Minimum level when not verbose
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else level,
        format="<level>{level: <8}</level> | {message}",
    )


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="geotagger",
        description="A tool for geotagging photos using GPX tracks and other geotagged photos as location references.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('-a', '--anchors', required=True,
                        help='Path to directory or file containing GPX or image files that will be used as location anchors')
    parser.add_argument('-i', '--input', required=True,
                        help='Path to input directory or file')
    parser.add_argument('-o', '--output',
                        help='Path to output directory or file. If not provided, original files will be overwritten.')
    parser.add_argument('--exact-match-range', type=float,
                        help='Seconds within which the closest anchor location is reused as the photo location (default: 60)')
    parser.add_argument('--interpolation-match-range', type=float,
                        help='Seconds within which anchor locations are interpolated (default: 240)')
    parser.add_argument('--include-already-tagged', action='store_true',
                        help='Tag again photos that already have a location')
    parser.add_argument('--verbose', action='store_true',
                        help='Enable additional logging')
    parser.add_argument('--anchors-time-offset', type=int, metavar='MINUTES',
                        help='Time offset in minutes to apply to anchor timestamps (positive or negative)')
    parser.add_argument('--photos-time-offset', type=int, metavar='MINUTES',
                        help='Time offset in minutes to apply to photo timestamps (positive or negative)')
    parser.add_argument('--photos-timezone-override', metavar='TIMEZONE',
                        help="Timezone written to the photos: GMT offset ('+05:00', '-08:00', 'Z'), "
                             "abbreviation ('EST', 'PST') or identifier ('America/New_York'). "
                             "Does not change the time used for matching.")
    parser.add_argument('--save-time-adjustments', choices=TimeAdjustmentSaveMode.values(),
                        default=TimeAdjustmentSaveMode.NONE.value,
                        help="When to save time adjustments: 'all', 'tagged' or 'none' (default)")
    parser.add_argument('--max-concurrency', type=int,
                        help='Maximum number of photos processed at once (default: unbounded)')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def _with_time_offset(loader: GeoAnchorsLoader, time_offset: Optional[float]) -> GeoAnchorsLoader:
    if time_offset:
        return TimeOffsetGeoAnchorsLoader(loader, time_offset)
    return loader


def load_anchors(geotagger: Geotagger, anchors_path: Path, time_offset: Optional[float] = None) -> None:
    """
    Load anchors from a GPX file, a photo, or every GPX file and photo of
    a directory tree.

    Raises:
        AnchorLoadError: A GPX file is malformed
    """
    if anchors_path.is_dir():
        files = scan_directory(anchors_path, recursive=True)
        for gpx_file in (path for path in files if is_gpx_file(path)):
            geotagger.load_anchors(_with_time_offset(GPXGeoAnchorsLoader(gpx_file), time_offset))
        photo_files = [path for path in files if is_photo_file(path)]
        geotagger.load_anchors(_with_time_offset(ExifGeoAnchorsLoader(photo_files), time_offset))
    elif is_gpx_file(anchors_path):
        geotagger.load_anchors(_with_time_offset(GPXGeoAnchorsLoader(anchors_path), time_offset))
    elif is_photo_file(anchors_path):
        geotagger.load_anchors(_with_time_offset(ExifGeoAnchorsLoader([anchors_path]), time_offset))


def mirror_output_path(photo_path: Path, input_directory: Path, output_directory: Optional[Path]) -> Path:
    """Path of a photo of input_directory inside output_directory (same relative path)."""
    if output_directory is None:
        return photo_path
    return output_directory / photo_path.relative_to(input_directory)


def collect_photo_items(
    photo_paths: List[Path],
    save_to: Callable[[Path], Path],
    include_already_tagged: bool = False,
    counter: Optional[GeotaggingCounter] = None,
    verbose: bool = False,
    photos_time_offset: Optional[float] = None,
    timezone_override: Optional[str] = None,
    time_adjustment_save_mode: TimeAdjustmentSaveMode = TimeAdjustmentSaveMode.NONE
) -> List[LoggingGeotaggingItem]:
    """
    Build taggable items for photos.

    Photos that already carry GPS data are left out unless
    include_already_tagged is set.
    """
    reader = ExifReader()
    writer = ExifWriter()
    items = []
    for photo_path in photo_paths:
        logger.debug("Loading {}...", photo_path.name)
        if not include_already_tagged:
            try:
                if reader.read_geotag(photo_path) is not None:
                    continue
            except MetadataReadError as e:
                # Unreadable photos are kept and end up skipped without a date
                logger.debug("{}: {}", photo_path, e)
        item = ExifGeotaggingItem(
            photo_path,
            save_to(photo_path),
            reader,
            writer,
            time_offset=photos_time_offset,
            timezone_override=timezone_override,
            time_adjustment_save_mode=time_adjustment_save_mode
        )
        items.append(LoggingGeotaggingItem(item, counter=counter, verbose=verbose))
    return items


def parse_timezone_override(value: Optional[str]) -> Optional[str]:
    """Normalize a --photos-timezone-override value to an EXIF offset string."""
    if value is None:
        return None
    offset = parse_timezone_offset(value)
    if offset is None:
        print(f"Warning: Failed to parse timezone '{value}'. Using original photo timezone.")
        return None
    return format_timezone_offset(offset)


def run(args: argparse.Namespace, settings: GeotaggerSettings) -> None:
    """
    Execute a geotagging run.

    Raises:
        GeotaggerError: The run could not be performed
    """
    geotagger = Geotagger(
        exact_match_time_range=args.exact_match_range if args.exact_match_range is not None else settings.exact_match_range,
        interpolation_match_time_range=(
            args.interpolation_match_range if args.interpolation_match_range is not None
            else settings.interpolation_match_range
        ),
        location_references=LocationReferences(altitude=settings.altitude_reference),
        max_concurrency=args.max_concurrency or settings.max_concurrency
    )
    verbose = args.verbose or settings.verbose

    anchors_time_offset = args.anchors_time_offset * 60 if args.anchors_time_offset is not None else None
    photos_time_offset = args.photos_time_offset * 60 if args.photos_time_offset is not None else None
    timezone_override = parse_timezone_override(args.photos_timezone_override)
    save_mode = TimeAdjustmentSaveMode(args.save_time_adjustments)

    load_anchors(geotagger, Path(args.anchors), anchors_time_offset)
    if not geotagger.anchors:
        raise NoGeoAnchorsFoundError()
    print(f"Location anchors found: {len(geotagger.anchors)}")

    counter = GeotaggingCounter()
    input_path = Path(args.input)
    output_path = Path(args.output) if args.output else None

    if input_path.is_dir():
        if output_path is not None and output_path.exists() and not output_path.is_dir():
            raise OutputIsNotADirectoryError()
        photo_paths = [path for path in scan_directory(input_path, recursive=True) if is_photo_file(path)]

        def save_to(path: Path) -> Path:
            return mirror_output_path(path, input_path, output_path)
    else:
        photo_paths = [input_path]

        def save_to(path: Path) -> Path:
            return output_path or path

    print("Started tagging...")
    items = collect_photo_items(
        photo_paths,
        save_to,
        include_already_tagged=args.include_already_tagged,
        counter=counter,
        verbose=verbose,
        photos_time_offset=photos_time_offset,
        timezone_override=timezone_override,
        time_adjustment_save_mode=save_mode
    )
    print(f"Found {len(items)} items to tag")
    geotagger.tag_all(items)

    print("Done")
    print(f"Tagged: {counter.tagged}")
    print(f"Skipped: {counter.skipped}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    settings = GeotaggerSettings()
    setup_logging(args.verbose or settings.verbose, settings.log_level)

    try:
        run(args, settings)
    except GeotaggerError as e:
        print(f"Error: {e.message or type(e).__name__}", file=sys.stderr)
        return 1
    return 0
