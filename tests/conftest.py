"""Shared fixtures and fake items for the Geotagger test suite."""

import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

import piexif
import pytest
from PIL import Image

from geotagger.exif_io import EXIF_DATE_FORMAT, degrees_to_dms
from geotagger.items import GeotaggingItem
from geotagger.models import GeoAnchor, Geotag, Location

BASE_DATE = datetime(2025, 6, 28, 12, 0, 0, tzinfo=timezone.utc)


def make_anchor(seconds: float, latitude: float, longitude: float, altitude: Optional[float] = None) -> GeoAnchor:
    return GeoAnchor(
        timestamp=BASE_DATE + timedelta(seconds=seconds),
        location=Location.from_degrees(latitude, longitude, altitude=altitude)
    )


class MockGeotaggingItem(GeotaggingItem):
    """In-memory item recording what the orchestrator did with it."""

    def __init__(self, item_id: str, date: Optional[datetime], fail_apply: bool = False, fail_skip: bool = False):
        self._id = item_id
        self._date = date
        self.fail_apply = fail_apply
        self.fail_skip = fail_skip
        self.applied_geotag: Optional[Geotag] = None
        self.skip_error: Optional[Exception] = None
        self.apply_calls = 0
        self.skip_calls = 0
        self._lock = threading.Lock()

    @property
    def id(self) -> str:
        return self._id

    @property
    def date(self) -> Optional[datetime]:
        return self._date

    async def apply(self, geotag: Geotag) -> None:
        with self._lock:
            self.apply_calls += 1
        if self.fail_apply:
            raise RuntimeError(f"{self._id}: write failed")
        self.applied_geotag = geotag

    async def skip(self, error: Exception) -> None:
        with self._lock:
            self.skip_calls += 1
            self.skip_error = error
        if self.fail_skip:
            raise RuntimeError(f"{self._id}: skip failed")


def write_jpeg(
    path: Path,
    date: Optional[datetime] = None,
    offset: Optional[str] = None,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    altitude: Optional[float] = None
) -> Path:
    """Write a tiny JPEG carrying the given EXIF date and GPS data."""
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new('RGB', (8, 8), color=(120, 160, 200)).save(path, 'JPEG')

    exif = {}
    if date is not None:
        date_string = date.strftime(EXIF_DATE_FORMAT).encode('ascii')
        exif[piexif.ExifIFD.DateTimeOriginal] = date_string
        exif[piexif.ExifIFD.DateTimeDigitized] = date_string
    if offset is not None:
        exif[piexif.ExifIFD.OffsetTimeOriginal] = offset.encode('ascii')

    gps = {}
    if latitude is not None and longitude is not None:
        gps[piexif.GPSIFD.GPSLatitudeRef] = b'S' if latitude < 0 else b'N'
        gps[piexif.GPSIFD.GPSLatitude] = degrees_to_dms(latitude)
        gps[piexif.GPSIFD.GPSLongitudeRef] = b'W' if longitude < 0 else b'E'
        gps[piexif.GPSIFD.GPSLongitude] = degrees_to_dms(longitude)
    if altitude is not None:
        gps[piexif.GPSIFD.GPSAltitudeRef] = 1 if altitude < 0 else 0
        gps[piexif.GPSIFD.GPSAltitude] = (int(round(abs(altitude) * 100)), 100)

    exif_bytes = piexif.dump({'0th': {}, 'Exif': exif, 'GPS': gps, '1st': {}, 'thumbnail': None})
    piexif.insert(exif_bytes, str(path))
    return path


@pytest.fixture
def base_date() -> datetime:
    return BASE_DATE


@pytest.fixture
def photo_date() -> datetime:
    """Capture time of test photos, recorded with a +02:00 offset."""
    return datetime(2025, 6, 28, 14, 0, 0, tzinfo=timezone(timedelta(hours=2)))
