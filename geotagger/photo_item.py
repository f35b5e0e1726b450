# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Photo file backend

Taggable items and anchor loader backed by photo files on disk.

Copyright 2025 DNAi inc.
"""

import asyncio
import threading
from datetime import datetime, timedelta
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from loguru import logger

from geotagger.exceptions import MetadataReadError
from geotagger.exif_io import ExifReader, ExifWriter
from geotagger.items import GeotaggingItem, TimeAdjustmentSaveMode
from geotagger.loaders import GeoAnchorsLoader
from geotagger.models import GeoAnchor, Geotag


class ExifGeotaggingItem(GeotaggingItem):
    """
    Photo file that receives its geotag through EXIF.

    Args:
        photo_path: Photo to read
        output_path: Path the tagged photo is written to (may equal photo_path)
        reader: EXIF reader
        writer: EXIF writer
        time_offset: Seconds added to the photo timestamp before matching
        timezone_override: Offset string written to the EXIF timezone fields
            instead of the photo's own; does not change the matching time
        time_adjustment_save_mode: When the adjusted timestamp is written
    """

    def __init__(
        self,
        photo_path: Union[str, Path],
        output_path: Union[str, Path],
        reader: ExifReader,
        writer: ExifWriter,
        time_offset: Optional[float] = None,
        timezone_override: Optional[str] = None,
        time_adjustment_save_mode: TimeAdjustmentSaveMode = TimeAdjustmentSaveMode.NONE
    ):
        self.photo_path = Path(photo_path)
        self.output_path = Path(output_path)
        self.reader = reader
        self.writer = writer
        self.time_offset = time_offset
        self.timezone_override = timezone_override
        self.time_adjustment_save_mode = time_adjustment_save_mode
        self._lock = threading.Lock()
        self._date_info: Optional[Tuple[Optional[datetime], Optional[str]]] = None

    @property
    def id(self) -> str:
        return str(self.photo_path)

    @property
    def date(self) -> Optional[datetime]:
        original_date, _ = self._read_date_info()
        if original_date is None:
            return None
        if self.time_offset:
            return original_date + timedelta(seconds=self.time_offset)
        return original_date

    @property
    def original_timezone(self) -> Optional[str]:
        _, offset = self._read_date_info()
        return offset

    @property
    def has_time_adjustment(self) -> bool:
        return bool(self.time_offset) or self.timezone_override is not None

    async def apply(self, geotag: Geotag) -> None:
        save_adjustment = self.time_adjustment_save_mode in (
            TimeAdjustmentSaveMode.ALL,
            TimeAdjustmentSaveMode.TAGGED,
        )
        adjusted_date = self.date if save_adjustment and self.has_time_adjustment else None
        await asyncio.to_thread(
            self.writer.write,
            geotag,
            self.timezone_override,
            self.original_timezone,
            adjusted_date,
            self.photo_path,
            self.output_path
        )

    async def skip(self, error: Exception) -> None:
        if self.time_adjustment_save_mode != TimeAdjustmentSaveMode.ALL or not self.has_time_adjustment:
            return
        adjusted_date = self.date
        if adjusted_date is None:
            return
        await asyncio.to_thread(
            self.writer.write,
            None,
            self.timezone_override,
            self.original_timezone,
            adjusted_date,
            self.photo_path,
            self.output_path
        )

    def _read_date_info(self) -> Tuple[Optional[datetime], Optional[str]]:
        with self._lock:
            if self._date_info is None:
                try:
                    self._date_info = self.reader.read_date_and_timezone(self.photo_path)
                except MetadataReadError as e:
                    logger.debug("{}: {}", self.photo_path, e)
                    self._date_info = (None, None)
            return self._date_info


class ExifGeoAnchorsLoader(GeoAnchorsLoader):
    """
    Load anchors from photos that already carry GPS data.

    Photos without a date or without GPS data, and photos that cannot be
    read, contribute no anchor.

    Args:
        photo_paths: Photos to read
        reader: EXIF reader
    """

    def __init__(self, photo_paths: Iterable[Union[str, Path]], reader: Optional[ExifReader] = None):
        self.photo_paths = [Path(path) for path in photo_paths]
        self.reader = reader or ExifReader()

    def load_anchors(self) -> List[GeoAnchor]:
        anchors = []
        for path in self.photo_paths:
            try:
                anchor = self.reader.read_geo_anchor(path)
            except MetadataReadError as e:
                logger.debug("Ignoring anchor photo {}: {}", path, e)
                continue
            if anchor is not None:
                anchors.append(anchor)
        return anchors
