# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Geotag resolution

Finds the geotag of a moment in time from a set of location anchors.
The closest anchors inside the exact match window are reused verbatim
(their spherical centroid when several are tied). Otherwise, when an
interpolation window is configured, the location is interpolated along the
great circle between two anchors from that window.

Resolution never performs I/O and never mutates the anchors, so a single
finder can be shared by concurrently processed items.

Copyright 2025 DNAi inc.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional, Sequence, Tuple

from geotagger.exceptions import (
    CannotReadDateInformation,
    GeotaggingError,
    NotEnoughAnchorCandidates,
)
from geotagger.geometry import calculate_centroid, calculate_interpolated_location
from geotagger.items import GeotaggingItem
from geotagger.models import GeoAnchor, Geotag, LocationReferences


@dataclass(frozen=True)
class GeotagResult:
    """Outcome of a resolution: either a geotag or a geotagging error."""
    geotag: Optional[Geotag] = None
    error: Optional[GeotaggingError] = None

    @classmethod
    def success(cls, geotag: Geotag) -> 'GeotagResult':
        return cls(geotag=geotag)

    @classmethod
    def failure(cls, error: GeotaggingError) -> 'GeotagResult':
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.geotag is not None

    def unwrap(self) -> Geotag:
        if self.geotag is None:
            raise self.error
        return self.geotag


class GeotagFinder:
    """
    Resolve geotags using the exact-match-then-interpolate policy.

    Args:
        exact_match_time_range: Seconds around the target time in which the
            closest anchor is reused as the exact location
        interpolation_match_time_range: Seconds around the target time in
            which anchors are used for interpolation; None disables it
        location_references: Reference points applied to anchor locations
    """

    def __init__(
        self,
        exact_match_time_range: float = 0,
        interpolation_match_time_range: Optional[float] = None,
        location_references: LocationReferences = LocationReferences()
    ):
        self.exact_match_time_range = exact_match_time_range
        self.interpolation_match_time_range = interpolation_match_time_range
        self.location_references = location_references

    def resolve(self, date: Optional[datetime], anchors: Sequence[GeoAnchor]) -> GeotagResult:
        """
        Resolve the geotag for a moment in time.

        Args:
            date: Target timestamp; None fails with CannotReadDateInformation
            anchors: Location anchors, in any order

        Returns:
            GeotagResult holding the geotag or the reason it was not found
        """
        if date is None:
            return GeotagResult.failure(CannotReadDateInformation())

        exact_candidates = self._find_closest_anchors(date, anchors, self.exact_match_time_range)
        if exact_candidates:
            return GeotagResult.success(self._calculate_exact_geotag(exact_candidates))

        if self.interpolation_match_time_range is not None:
            pair = self._find_anchors_for_interpolation(date, anchors, self.interpolation_match_time_range)
            if pair is not None:
                return GeotagResult.success(self._calculate_interpolated_geotag(date, pair[0], pair[1]))

        return GeotagResult.failure(NotEnoughAnchorCandidates())

    def find_geotag_result(self, item: GeotaggingItem, anchors: Sequence[GeoAnchor]) -> GeotagResult:
        """Resolve the geotag for an item's capture timestamp."""
        return self.resolve(item.date, anchors)

    def find_geotag(self, item: GeotaggingItem, anchors: Sequence[GeoAnchor]) -> Geotag:
        """
        Resolve the geotag for an item, raising on failure.

        Raises:
            CannotReadDateInformation: Item has no timestamp
            NotEnoughAnchorCandidates: No anchor matched
        """
        return self.find_geotag_result(item, anchors).unwrap()

    @staticmethod
    def _find_all_anchors(date: datetime, anchors: Sequence[GeoAnchor], radius: float) -> List[GeoAnchor]:
        window = timedelta(seconds=radius)
        return [anchor for anchor in anchors if abs(anchor.timestamp - date) <= window]

    def _find_closest_anchors(self, date: datetime, anchors: Sequence[GeoAnchor], radius: float) -> List[GeoAnchor]:
        candidates = self._find_all_anchors(date, anchors, radius)
        if not candidates:
            return []
        closest_distance = min(abs(anchor.timestamp - date) for anchor in candidates)
        return [anchor for anchor in candidates if abs(anchor.timestamp - date) == closest_distance]

    def _find_anchors_for_interpolation(
        self,
        date: datetime,
        anchors: Sequence[GeoAnchor],
        radius: float
    ) -> Optional[Tuple[GeoAnchor, GeoAnchor]]:
        candidates = self._find_all_anchors(date, anchors, radius)

        before = [anchor for anchor in candidates if anchor.timestamp < date]
        after = [anchor for anchor in candidates if anchor.timestamp > date]
        if before and after:
            last_before = max(before, key=lambda anchor: anchor.timestamp)
            first_after = min(after, key=lambda anchor: anchor.timestamp)
            return last_before, first_after

        # No bracketing pair: the two closest anchors, which extrapolates
        # when both lie on the same side of the target time
        if len(candidates) < 2:
            return None
        closest = sorted(candidates, key=lambda anchor: abs(anchor.timestamp - date))[:2]
        first, second = sorted(closest, key=lambda anchor: anchor.timestamp)
        return first, second

    def _calculate_exact_geotag(self, anchors: Sequence[GeoAnchor]) -> Geotag:
        locations = [anchor.location.based(self.location_references) for anchor in anchors]
        return Geotag(calculate_centroid([(location, 1.0) for location in locations]))

    def _calculate_interpolated_geotag(self, date: datetime, first: GeoAnchor, second: GeoAnchor) -> Geotag:
        first_location = first.location.based(self.location_references)
        second_location = second.location.based(self.location_references)
        span = second.timestamp - first.timestamp
        if not span:
            return Geotag(calculate_centroid([(first_location, 1.0), (second_location, 1.0)]))
        ratio = (date - first.timestamp) / span
        return Geotag(calculate_interpolated_location(first_location, second_location, ratio))
