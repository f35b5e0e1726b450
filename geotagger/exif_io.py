# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
EXIF metadata store

Reads capture dates, timezone offsets and GPS positions from photos and
writes geotags and adjusted capture dates back. EXIF segments are decoded
and encoded with piexif; JPEG and WebP files can be written, TIFF files
can only be read.

Date tags are written in EXIF format (YYYY:MM:DD HH:MM:SS). Offsets are
written to the OffsetTime* tags only when they pass
is_valid_timezone_offset().

Copyright 2025 DNAi inc.
"""

import os
import shutil
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import piexif
from loguru import logger

from geotagger.exceptions import MetadataReadError, MetadataWriteError
from geotagger.models import Altitude, Coordinate, GeoAnchor, Geotag, Location
from geotagger.timezone_offsets import is_valid_timezone_offset, offset_to_tzinfo

EXIF_DATE_FORMAT = '%Y:%m:%d %H:%M:%S'

# Coordinates are stored as deg/1, min/1, sec/SECONDS_DENOMINATOR
SECONDS_DENOMINATOR = 10000
ALTITUDE_DENOMINATOR = 100

PathLike = Union[str, Path]


def normalize_longitude(value: float) -> float:
    """Wrap a longitude in decimal degrees into [-180, 180)."""
    return ((value + 180.0) % 360.0) - 180.0


def _decode(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bytes):
        value = value.decode('ascii', errors='ignore')
    value = str(value).strip('\x00').strip()
    return value or None


def _rational_to_float(value: Any) -> Optional[float]:
    try:
        numerator, denominator = value
        if denominator == 0:
            return None
        return numerator / denominator
    except (TypeError, ValueError):
        return None


def _dms_to_degrees(value: Any) -> Optional[float]:
    try:
        parts = [_rational_to_float(part) for part in value]
    except TypeError:
        return None
    if len(parts) != 3 or any(part is None for part in parts):
        return None
    degrees, minutes, seconds = parts
    return degrees + minutes / 60.0 + seconds / 3600.0


def degrees_to_dms(value: float) -> Tuple[Tuple[int, int], Tuple[int, int], Tuple[int, int]]:
    """
    Convert absolute decimal degrees to EXIF degree/minute/second rationals.

    Args:
        value: Decimal degrees; the sign is ignored (it goes into the Ref tag)

    Returns:
        ((deg, 1), (min, 1), (sec * SECONDS_DENOMINATOR, SECONDS_DENOMINATOR))
    """
    total = int(round(abs(value) * 3600 * SECONDS_DENOMINATOR))
    degrees, remainder = divmod(total, 3600 * SECONDS_DENOMINATOR)
    minutes, seconds = divmod(remainder, 60 * SECONDS_DENOMINATOR)
    return (degrees, 1), (minutes, 1), (seconds, SECONDS_DENOMINATOR)


def parse_exif_date(value: str, offset: Optional[str] = None) -> Optional[datetime]:
    """
    Parse an EXIF date string into a timezone-aware datetime.

    Args:
        value: Date in EXIF format (YYYY:MM:DD HH:MM:SS)
        offset: Optional OffsetTime value recorded with the date

    Returns:
        Aware datetime in the recorded offset, or in the local timezone when
        no usable offset is recorded; None if the date is malformed
    """
    try:
        naive = datetime.strptime(value[:19], EXIF_DATE_FORMAT)
    except ValueError:
        return None
    tzinfo = offset_to_tzinfo(offset) if offset else None
    if tzinfo is not None:
        return naive.replace(tzinfo=tzinfo)
    return naive.astimezone()


class ExifReader:
    """Read dates and GPS positions from photo EXIF data."""

    def load(self, path: PathLike) -> Dict[str, Any]:
        try:
            return piexif.load(str(path))
        except Exception as e:
            raise MetadataReadError(f"Failed to read EXIF data from {path}: {str(e)}")

    def read_date(self, path: PathLike) -> Optional[datetime]:
        """Capture timestamp of the photo, or None if it has none."""
        date, _ = self.read_date_and_timezone(path)
        return date

    def read_date_and_timezone(self, path: PathLike) -> Tuple[Optional[datetime], Optional[str]]:
        """
        Read the capture timestamp together with its recorded offset.

        Args:
            path: Photo file path

        Returns:
            Tuple (timestamp, offset string). The offset is None when the
            photo records none.
        """
        return self._read_date_from_metadata(self.load(path))

    def read_geotag(self, path: PathLike) -> Optional[Geotag]:
        """Geotag already stored in the photo, or None."""
        return self._read_geotag_from_metadata(self.load(path))

    def read_geo_anchor(self, path: PathLike) -> Optional[GeoAnchor]:
        """Anchor made from a photo that has both a date and GPS data."""
        metadata = self.load(path)
        date, _ = self._read_date_from_metadata(metadata)
        geotag = self._read_geotag_from_metadata(metadata)
        if date is None or geotag is None:
            return None
        return GeoAnchor(timestamp=date, location=geotag.location)

    @staticmethod
    def _read_date_from_metadata(metadata: Dict[str, Any]) -> Tuple[Optional[datetime], Optional[str]]:
        exif = metadata.get('Exif') or {}

        date_string = _decode(exif.get(piexif.ExifIFD.DateTimeOriginal))
        offset = _decode(exif.get(piexif.ExifIFD.OffsetTimeOriginal))
        if date_string is None:
            date_string = _decode(exif.get(piexif.ExifIFD.DateTimeDigitized))
            offset = _decode(exif.get(piexif.ExifIFD.OffsetTimeDigitized))
        if date_string is None:
            return None, None
        if offset is None:
            offset = _decode(exif.get(piexif.ExifIFD.OffsetTime))

        return parse_exif_date(date_string, offset), offset

    @staticmethod
    def _read_geotag_from_metadata(metadata: Dict[str, Any]) -> Optional[Geotag]:
        gps = metadata.get('GPS') or {}

        latitude = _dms_to_degrees(gps.get(piexif.GPSIFD.GPSLatitude))
        longitude = _dms_to_degrees(gps.get(piexif.GPSIFD.GPSLongitude))
        if latitude is None or longitude is None:
            return None

        if (_decode(gps.get(piexif.GPSIFD.GPSLatitudeRef)) or 'N').upper() == 'S':
            latitude = -latitude
        if (_decode(gps.get(piexif.GPSIFD.GPSLongitudeRef)) or 'E').upper() == 'W':
            longitude = -longitude

        altitude = None
        altitude_value = _rational_to_float(gps.get(piexif.GPSIFD.GPSAltitude))
        if altitude_value is not None:
            # Ref 1 = below sea level
            if gps.get(piexif.GPSIFD.GPSAltitudeRef) == 1:
                altitude_value = -altitude_value
            altitude = Altitude(altitude_value, 0.0)

        return Geotag(Location(
            latitude=Coordinate.from_degrees(latitude),
            longitude=Coordinate.from_degrees(longitude),
            altitude=altitude
        ))


class ExifWriter:
    """Write geotags and adjusted capture dates to photos."""

    def write(
        self,
        geotag: Optional[Geotag],
        timezone_override: Optional[str],
        original_timezone: Optional[str],
        adjusted_date: Optional[datetime],
        source: PathLike,
        destination: PathLike
    ) -> None:
        """
        Write GPS and date metadata into a copy (or the original) of a photo.

        Args:
            geotag: Geotag to store in the GPS tags, or None to leave them
            timezone_override: Offset string preferred over the original one
            original_timezone: Offset string recorded in the photo
            adjusted_date: Capture timestamp to store, or None to keep it
            source: Photo to read
            destination: Path to write; may equal source

        Raises:
            MetadataWriteError: If the photo cannot be read or written
        """
        source = Path(source)
        destination = Path(destination)

        try:
            metadata = piexif.load(str(source))
        except Exception as e:
            raise MetadataWriteError(f"Failed to read EXIF data from {source}: {str(e)}")

        if geotag is not None:
            metadata['GPS'] = self._gps_dictionary(geotag, metadata.get('GPS') or {})

        timezone = self._choose_timezone(timezone_override, original_timezone)
        exif = metadata.setdefault('Exif', {})
        if adjusted_date is not None:
            tzinfo = offset_to_tzinfo(timezone) if timezone else None
            local_date = adjusted_date.astimezone(tzinfo) if tzinfo else adjusted_date.astimezone()
            date_string = local_date.strftime(EXIF_DATE_FORMAT).encode('ascii')
            exif[piexif.ExifIFD.DateTimeOriginal] = date_string
            exif[piexif.ExifIFD.DateTimeDigitized] = date_string
        if timezone is not None and (adjusted_date is not None or timezone_override is not None):
            encoded = timezone.encode('ascii')
            exif[piexif.ExifIFD.OffsetTime] = encoded
            exif[piexif.ExifIFD.OffsetTimeOriginal] = encoded
            exif[piexif.ExifIFD.OffsetTimeDigitized] = encoded

        # A thumbnail without its IFD cannot be re-encoded
        if not metadata.get('1st'):
            metadata['thumbnail'] = None
        try:
            exif_bytes = piexif.dump(metadata)
        except Exception as e:
            raise MetadataWriteError(f"Failed to encode EXIF data for {source}: {str(e)}")

        # Written beside the destination, then moved into place
        temporary = destination.with_name(f".{destination.name}.geotagger-tmp")
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, temporary)
            piexif.insert(exif_bytes, str(temporary))
            os.replace(temporary, destination)
        except Exception as e:
            temporary.unlink(missing_ok=True)
            raise MetadataWriteError(f"Failed to write EXIF data to {destination}: {str(e)}")

        logger.debug("Wrote metadata to {}", destination)

    @staticmethod
    def _choose_timezone(timezone_override: Optional[str], original_timezone: Optional[str]) -> Optional[str]:
        for candidate in (timezone_override, original_timezone):
            if candidate is None:
                continue
            if is_valid_timezone_offset(candidate):
                return candidate
            logger.warning("Ignoring invalid timezone offset '{}'", candidate)
        return None

    @staticmethod
    def _gps_dictionary(geotag: Geotag, gps: Dict[int, Any]) -> Dict[int, Any]:
        location = geotag.location
        latitude = location.latitude.degrees
        longitude = normalize_longitude(location.longitude.degrees)

        gps = dict(gps)
        gps[piexif.GPSIFD.GPSVersionID] = (2, 3, 0, 0)
        gps[piexif.GPSIFD.GPSLatitudeRef] = b'S' if latitude < 0 else b'N'
        gps[piexif.GPSIFD.GPSLatitude] = degrees_to_dms(latitude)
        gps[piexif.GPSIFD.GPSLongitudeRef] = b'W' if longitude < 0 else b'E'
        gps[piexif.GPSIFD.GPSLongitude] = degrees_to_dms(longitude)

        if location.altitude is not None:
            altitude = location.altitude.zero_based().value
            gps[piexif.GPSIFD.GPSAltitudeRef] = 1 if altitude < 0 else 0
            gps[piexif.GPSIFD.GPSAltitude] = (int(round(abs(altitude) * ALTITUDE_DENOMINATOR)), ALTITUDE_DENOMINATOR)
        else:
            gps.pop(piexif.GPSIFD.GPSAltitudeRef, None)
            gps.pop(piexif.GPSIFD.GPSAltitude, None)
        return gps
