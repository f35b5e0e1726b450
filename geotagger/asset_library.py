# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Photo library backend

Taggable items and anchor loader backed by assets of a photo library
(any catalogue that stores a creation date and a location per asset).
Library writes are expensive, so changes are queued and committed in
batches by AssetGeotagBatchProcessor: every new change restarts a debounce
timer, only one batch is committed at a time, and every caller waiting on
a change of that batch is resumed with the batch outcome.

Copyright 2025 DNAi inc.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from loguru import logger

from geotagger.config import GeotaggerSettings
from geotagger.exceptions import AssetGeotaggingError
from geotagger.items import GeotaggingItem, TimeAdjustmentSaveMode
from geotagger.loaders import GeoAnchorsLoader
from geotagger.models import GeoAnchor, Geotag, Location


@dataclass
class Asset:
    """Library asset as seen by the geotagger."""
    local_identifier: str
    creation_date: Optional[datetime] = None
    location: Optional[Location] = None
    can_edit: bool = True


@dataclass(frozen=True)
class AssetChange:
    """Pending update of one asset."""
    asset: Asset
    geotag: Optional[Geotag] = None
    adjusted_date: Optional[datetime] = None


class AssetLibrary(ABC):
    """Photo library able to commit a batch of asset changes atomically."""

    @abstractmethod
    async def perform_changes(self, changes: List[AssetChange]) -> None:
        """
        Commit all changes in one library transaction.

        Raises:
            Exception: If the transaction fails; no change is kept then
        """


class AssetGeotagBatchProcessor:
    """
    Debounced, batched writer of asset changes.

    Args:
        library: Library receiving the batches
        batch_delay: Seconds without new changes before a batch is committed
    """

    def __init__(self, library: AssetLibrary, batch_delay: float = 3.0):
        self.library = library
        self.batch_delay = batch_delay
        self._pending = []
        self._timer: Optional[asyncio.Task] = None
        self._commit_lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, library: AssetLibrary, settings: GeotaggerSettings) -> 'AssetGeotagBatchProcessor':
        return cls(library, batch_delay=settings.batch_delay)

    async def record_geotag(self, asset: Asset, geotag: Geotag, adjusted_date: Optional[datetime] = None) -> None:
        """Queue a geotag (and optional date) and wait for its batch to commit."""
        await self._enqueue(AssetChange(asset=asset, geotag=geotag, adjusted_date=adjusted_date))

    async def record_time_adjustment(self, asset: Asset, adjusted_date: datetime) -> None:
        """Queue a date-only change and wait for its batch to commit."""
        await self._enqueue(AssetChange(asset=asset, adjusted_date=adjusted_date))

    async def flush(self) -> None:
        """Commit pending changes now instead of waiting for the timer."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        await self._process_batch()

    async def _enqueue(self, change: AssetChange) -> None:
        future = asyncio.get_running_loop().create_future()
        self._pending.append((change, future))
        self._schedule_processing()
        await future

    def _schedule_processing(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self._timer = asyncio.ensure_future(self._process_after_delay())

    async def _process_after_delay(self) -> None:
        try:
            await asyncio.sleep(self.batch_delay)
        except asyncio.CancelledError:
            return
        self._timer = None
        await self._process_batch()

    async def _process_batch(self) -> None:
        async with self._commit_lock:
            batch, self._pending = self._pending, []
            if not batch:
                return
            logger.debug("Committing {} asset changes", len(batch))
            try:
                await self.library.perform_changes([change for change, _ in batch])
            except Exception as e:
                for _, future in batch:
                    if not future.done():
                        future.set_exception(e)
                return
            for _, future in batch:
                if not future.done():
                    future.set_result(None)


class AssetGeotaggingItem(GeotaggingItem):
    """
    Library asset that receives its geotag through a batch processor.

    Args:
        asset: Asset to tag
        batch_processor: Shared batch processor of the library
        time_offset: Seconds added to the creation date before matching
        time_adjustment_save_mode: When the adjusted creation date is written
    """

    def __init__(
        self,
        asset: Asset,
        batch_processor: Optional[AssetGeotagBatchProcessor],
        time_offset: Optional[float] = None,
        time_adjustment_save_mode: TimeAdjustmentSaveMode = TimeAdjustmentSaveMode.NONE
    ):
        self.asset = asset
        self.batch_processor = batch_processor
        self.time_offset = time_offset
        self.time_adjustment_save_mode = time_adjustment_save_mode

    @property
    def id(self) -> str:
        return self.asset.local_identifier

    @property
    def date(self) -> Optional[datetime]:
        if self.asset.creation_date is None:
            return None
        if self.time_offset:
            return self.asset.creation_date + timedelta(seconds=self.time_offset)
        return self.asset.creation_date

    async def apply(self, geotag: Geotag) -> None:
        if not self.asset.can_edit:
            raise AssetGeotaggingError("Cannot edit this asset")
        if self.batch_processor is None:
            raise AssetGeotaggingError("Batch processor is not available")

        save_adjustment = self.time_adjustment_save_mode in (
            TimeAdjustmentSaveMode.ALL,
            TimeAdjustmentSaveMode.TAGGED,
        )
        adjusted_date = self.date if save_adjustment else None
        await self.batch_processor.record_geotag(self.asset, geotag, adjusted_date)

    async def skip(self, error: Exception) -> None:
        if self.time_adjustment_save_mode != TimeAdjustmentSaveMode.ALL or not self.time_offset:
            return
        adjusted_date = self.date
        if adjusted_date is None:
            return
        if self.batch_processor is None:
            raise AssetGeotaggingError("Batch processor is not available")
        await self.batch_processor.record_time_adjustment(self.asset, adjusted_date)


class AssetGeoAnchorsLoader(GeoAnchorsLoader):
    """
    Load anchors from located assets.

    An altitude of exactly 0 is how libraries report a missing altitude,
    so it is dropped.
    """

    def __init__(self, assets: Iterable[Asset]):
        self.assets = list(assets)

    def load_anchors(self) -> List[GeoAnchor]:
        anchors = []
        for asset in self.assets:
            if asset.location is None or asset.creation_date is None:
                continue
            location = asset.location
            altitude = location.altitude
            if altitude is not None and altitude.zero_based().value == 0:
                altitude = None
            anchors.append(GeoAnchor(
                timestamp=asset.creation_date,
                location=Location(location.latitude, location.longitude, altitude)
            ))
        return anchors
