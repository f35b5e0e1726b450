# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Taggable item contract

A taggable item is anything with a capture timestamp that can receive a
resolved geotag or be explicitly skipped. The orchestrator only depends on
this contract; photo files and photo library assets implement it
independently.

Copyright 2025 DNAi inc.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from typing import Optional

from geotagger.models import Geotag


class TimeAdjustmentSaveMode(Enum):
    """When adjusted capture times are written back to an item."""
    ALL = "all"  # Save time adjustments for all items
    TAGGED = "tagged"  # Save only for items that get geotagged
    NONE = "none"  # Never save time adjustments

    @classmethod
    def values(cls):
        return [mode.value for mode in cls]


class GeotaggingItem(ABC):
    """
    Abstract taggable item.

    Implementations are consumed exactly once by the orchestrator and
    must not share mutable state with other items.
    """

    @property
    @abstractmethod
    def id(self) -> str:
        """Stable identifier used in log traces."""

    @property
    @abstractmethod
    def date(self) -> Optional[datetime]:
        """Timezone-aware capture timestamp, or None when unknown."""

    @abstractmethod
    async def apply(self, geotag: Geotag) -> None:
        """
        Write the resolved geotag back to the item.

        Args:
            geotag: Geotag resolved for this item

        Raises:
            Exception: Any write failure; the orchestrator isolates it.
        """

    @abstractmethod
    async def skip(self, error: Exception) -> None:
        """
        Mark the item as skipped.

        Args:
            error: Reason the item could not be geotagged
        """
