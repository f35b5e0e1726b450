# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
GPX (GPS Exchange Format) anchor loader

This module turns GPX track logs into location anchors.
GPX files are XML-based GPS track log files.
Structure:
- GPX root element with version and creator
- Waypoints (wpt elements)
- Tracks (trk elements) with track segments (trkseg) and track points (trkpt)
- Routes (rte elements) with route points (rtept)

Only points carrying a time and both coordinates become anchors.

Copyright 2025 DNAi inc.
"""

import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Union

from loguru import logger

from geotagger.exceptions import AnchorLoadError
from geotagger.loaders import GeoAnchorsLoader
from geotagger.models import GeoAnchor, Location

# Matched by local name so GPX 1.0, 1.1 and namespace-less files all work
POINT_TAGS = ('wpt', 'trkpt', 'rtept')


def parse_gpx_time(value: str) -> Optional[datetime]:
    """
    Parse a GPX (ISO 8601) time value.

    Times without an offset are UTC, as GPX requires.

    Args:
        value: Time string such as "2025-06-28T12:00:00Z"

    Returns:
        Timezone-aware datetime, or None if the value is malformed
    """
    text = value.strip()
    if text.endswith('Z') or text.endswith('z'):
        text = text[:-1] + '+00:00'
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _local_name(tag: str) -> str:
    return tag.rsplit('}', 1)[-1]


def _child_text(element: ET.Element, name: str) -> Optional[str]:
    for child in element:
        if _local_name(child.tag) == name and child.text is not None:
            return child.text.strip()
    return None


def _child_float(element: ET.Element, name: str) -> Optional[float]:
    text = _child_text(element, name)
    if text is None:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def anchor_from_gpx_point(point: ET.Element) -> Optional[GeoAnchor]:
    """
    Build an anchor from a wpt/trkpt/rtept element.

    The elevation becomes the altitude and the geoid height, when present,
    its reference point.

    Returns:
        GeoAnchor, or None if time or coordinates are missing
    """
    try:
        latitude = float(point.get('lat'))
        longitude = float(point.get('lon'))
    except (TypeError, ValueError):
        return None

    time_text = _child_text(point, 'time')
    if time_text is None:
        return None
    timestamp = parse_gpx_time(time_text)
    if timestamp is None:
        return None

    elevation = _child_float(point, 'ele')
    geoid_height = _child_float(point, 'geoidheight')

    return GeoAnchor(
        timestamp=timestamp,
        location=Location.from_degrees(
            latitude,
            longitude,
            altitude=elevation,
            altitude_reference=geoid_height or 0.0
        )
    )


class GPXGeoAnchorsLoader(GeoAnchorsLoader):
    """
    Load anchors from a GPX file.

    Args:
        gpx_file: Path to GPX file
    """

    def __init__(self, gpx_file: Union[str, Path]):
        self.gpx_file = Path(gpx_file)

    def load_anchors(self) -> List[GeoAnchor]:
        try:
            file_data = self.gpx_file.read_bytes()
        except OSError as e:
            raise AnchorLoadError(f"Failed to read GPX file {self.gpx_file}: {str(e)}")

        if len(file_data) == 0:
            raise AnchorLoadError(f"Invalid GPX file {self.gpx_file}: empty file")

        try:
            root = ET.fromstring(file_data)
        except ET.ParseError as e:
            raise AnchorLoadError(f"Invalid GPX file {self.gpx_file}: XML parse error: {str(e)}")

        if _local_name(root.tag) != 'gpx':
            raise AnchorLoadError(f"Invalid GPX file {self.gpx_file}: root element is not gpx")

        anchors = []
        skipped = 0
        for element in root.iter():
            if _local_name(element.tag) not in POINT_TAGS:
                continue
            anchor = anchor_from_gpx_point(element)
            if anchor is None:
                skipped += 1
                continue
            anchors.append(anchor)

        if skipped:
            logger.debug("{}: ignored {} points without time or coordinates", self.gpx_file, skipped)
        return anchors
