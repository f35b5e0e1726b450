# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Location anchor loaders

Loaders produce the location anchors used as ground truth during a run.
Concrete sources (GPX tracks, geotagged photos, photo library assets) live
in their own modules; this module holds the contract and the composable
loaders that do not depend on a source format.

Copyright 2025 DNAi inc.
"""

from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Iterable, List

from geotagger.models import GeoAnchor


class GeoAnchorsLoader(ABC):
    """Source of location anchors."""

    @abstractmethod
    def load_anchors(self) -> List[GeoAnchor]:
        """
        Load all anchors of this source.

        Returns:
            List of GeoAnchor objects, in any order

        Raises:
            AnchorLoadError: Source is malformed or unreadable
        """


class StaticGeoAnchorsLoader(GeoAnchorsLoader):
    """Loader returning anchors that are already in memory."""

    def __init__(self, anchors: Iterable[GeoAnchor]):
        self._anchors = list(anchors)

    def load_anchors(self) -> List[GeoAnchor]:
        return list(self._anchors)


class TimeOffsetGeoAnchorsLoader(GeoAnchorsLoader):
    """
    Shift every anchor of a wrapped loader by a fixed duration.

    Used to correct the clock skew between the anchor source device and
    the real time. Locations are left untouched.

    Args:
        loader: Wrapped anchor loader
        time_offset: Offset in seconds, positive or negative
    """

    def __init__(self, loader: GeoAnchorsLoader, time_offset: float):
        self._wrapped_loader = loader
        self._time_offset = timedelta(seconds=time_offset)

    def load_anchors(self) -> List[GeoAnchor]:
        return [
            GeoAnchor(timestamp=anchor.timestamp + self._time_offset, location=anchor.location)
            for anchor in self._wrapped_loader.load_anchors()
        ]
