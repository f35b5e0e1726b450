# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Logging decorator for taggable items.

Copyright 2025 DNAi inc.
"""

from datetime import datetime
from typing import Optional

from loguru import logger

from geotagger.counter import GeotaggingCounter
from geotagger.items import GeotaggingItem
from geotagger.models import Geotag


class LoggingGeotaggingItem(GeotaggingItem):
    """
    Wrap an item to count its outcome and trace it when verbose.

    Failures of the wrapped item are logged and re-raised.
    """

    def __init__(self, item: GeotaggingItem, counter: Optional[GeotaggingCounter] = None, verbose: bool = False):
        self.item = item
        self.counter = counter
        self.verbose = verbose

    @property
    def id(self) -> str:
        return self.item.id

    @property
    def date(self) -> Optional[datetime]:
        return self.item.date

    async def apply(self, geotag: Geotag) -> None:
        try:
            await self.item.apply(geotag)
        except Exception as e:
            self._log_error("Failed to apply geotag", e)
            raise
        if self.counter is not None:
            self.counter.increment_tagged()
        if self.verbose:
            logger.info("{}: found geotag {}", self.id, geotag.location.debug_info)

    async def skip(self, error: Exception) -> None:
        try:
            await self.item.skip(error)
        except Exception as e:
            self._log_error("Failed to skip item", e)
            raise
        finally:
            if self.counter is not None:
                self.counter.increment_skipped()
        if self.verbose:
            logger.info("{}: skipped with {}", self.id, error)

    def _log_error(self, message: str, error: Exception) -> None:
        if self.verbose:
            logger.error("{}: {}: {}", self.id, message, error)
