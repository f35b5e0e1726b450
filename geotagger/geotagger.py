# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Geotagging orchestration

The Geotagger owns the anchor store of a run and applies the geotag
resolver to many items concurrently. Each item is an independent unit of
work: a failure while writing one item is logged and never aborts, blocks
or cancels its siblings.

Copyright 2025 DNAi inc.
"""

import asyncio
from typing import List, Optional, Sequence, Tuple

from loguru import logger

from geotagger.geotag_finder import GeotagFinder
from geotagger.items import GeotaggingItem
from geotagger.loaders import GeoAnchorsLoader
from geotagger.models import GeoAnchor, LocationReferences


class Geotagger:
    """
    Geotag items against location anchors.

    Anchors are loaded once, before tagging. Every call to tag() works on a
    snapshot of the anchors taken when the call starts.

    Args:
        exact_match_time_range: Seconds within which the closest anchor is
            reused as the exact location
        interpolation_match_time_range: Seconds within which anchors are
            interpolated; None disables interpolation
        location_references: Reference points applied before combining
            anchor locations
        max_concurrency: Optional bound on items processed at once
    """

    def __init__(
        self,
        exact_match_time_range: float = 0,
        interpolation_match_time_range: Optional[float] = None,
        location_references: LocationReferences = LocationReferences(),
        max_concurrency: Optional[int] = None
    ):
        self.exact_match_time_range = exact_match_time_range
        self.interpolation_match_time_range = interpolation_match_time_range
        self.location_references = location_references
        self.max_concurrency = max_concurrency
        self._anchors: List[GeoAnchor] = []

    @property
    def anchors(self) -> Tuple[GeoAnchor, ...]:
        return tuple(self._anchors)

    def load_anchors(self, loader: GeoAnchorsLoader) -> int:
        """
        Append the anchors of a loader to the store.

        Loader errors propagate to the caller; nothing is appended then.

        Args:
            loader: Anchor source

        Returns:
            Number of anchors added
        """
        anchors = loader.load_anchors()
        self._anchors.extend(anchors)
        logger.debug("Loaded {} anchors from {}", len(anchors), type(loader).__name__)
        return len(anchors)

    def unload_anchors(self) -> None:
        self._anchors.clear()

    def make_finder(self) -> GeotagFinder:
        return GeotagFinder(
            exact_match_time_range=self.exact_match_time_range,
            interpolation_match_time_range=self.interpolation_match_time_range,
            location_references=self.location_references
        )

    async def tag(self, items: Sequence[GeotaggingItem]) -> None:
        """
        Geotag all items concurrently.

        Returns once every item has been applied or skipped. Item failures
        are logged, never raised.

        Args:
            items: Items to geotag
        """
        finder = self.make_finder()
        anchors = tuple(self._anchors)
        semaphore = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None

        async def run(item: GeotaggingItem) -> None:
            if semaphore is None:
                await self._tag_item(item, finder, anchors)
                return
            async with semaphore:
                await self._tag_item(item, finder, anchors)

        await asyncio.gather(*(run(item) for item in items))

    def tag_all(self, items: Sequence[GeotaggingItem]) -> None:
        """Synchronous entry point for tag()."""
        asyncio.run(self.tag(items))

    @staticmethod
    async def _tag_item(item: GeotaggingItem, finder: GeotagFinder, anchors: Tuple[GeoAnchor, ...]) -> None:
        try:
            # Reading the item date may touch the file system
            result = await asyncio.to_thread(finder.find_geotag_result, item, anchors)
        except Exception as e:
            logger.warning("{}: failed to resolve geotag: {}", item.id, e)
            await Geotagger._skip_item(item, e)
            return

        if not result.ok:
            await Geotagger._skip_item(item, result.error)
            return

        try:
            await item.apply(result.geotag)
        except Exception as e:
            logger.warning("{}: failed to apply geotag: {}", item.id, e)
            await Geotagger._skip_item(item, e)

    @staticmethod
    async def _skip_item(item: GeotaggingItem, error: Exception) -> None:
        try:
            await item.skip(error)
        except Exception as e:
            logger.warning("{}: failed to skip item: {}", item.id, e)
