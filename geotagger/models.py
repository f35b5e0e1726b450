# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Location models for Geotagger

This module defines the value types shared by the anchor loaders, the
geotag resolver and the metadata store: angular coordinates, altitudes
with a reference point, locations, location anchors and resolved geotags.

Copyright 2025 DNAi inc.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Coordinate:
    """
    Angular coordinate stored either in degrees or in radians.

    No range is enforced; callers normalize values for output.
    """
    value: float
    is_radians: bool = False

    @classmethod
    def from_degrees(cls, degrees: float) -> 'Coordinate':
        return cls(float(degrees), False)

    @classmethod
    def from_radians(cls, radians: float) -> 'Coordinate':
        return cls(float(radians), True)

    @property
    def degrees(self) -> float:
        if self.is_radians:
            return self.value * 180 / math.pi
        return self.value

    @property
    def radians(self) -> float:
        if self.is_radians:
            return self.value
        return self.value * math.pi / 180


@dataclass(frozen=True)
class Altitude:
    """
    Altitude value relative to a reference point elevation.

    The absolute elevation is ``reference + value``.
    """
    value: float
    reference: float = 0.0

    def based(self, new_reference: float) -> 'Altitude':
        """
        Re-base the altitude on another reference point.

        Args:
            new_reference: Elevation of the new reference point

        Returns:
            Altitude describing the same absolute elevation
        """
        absolute_value = self.reference + self.value
        return Altitude(absolute_value - new_reference, new_reference)

    def zero_based(self) -> 'Altitude':
        return self.based(0.0)


@dataclass(frozen=True)
class LocationReferences:
    """Global reference points applied to locations before combining them."""
    altitude: float = 0.0


@dataclass(frozen=True)
class Location:
    """Latitude/longitude pair with an optional altitude."""
    latitude: Coordinate
    longitude: Coordinate
    altitude: Optional[Altitude] = None

    @classmethod
    def from_degrees(
        cls,
        latitude: float,
        longitude: float,
        altitude: Optional[float] = None,
        altitude_reference: float = 0.0
    ) -> 'Location':
        """
        Build a location from decimal degrees.

        Args:
            latitude: Latitude in decimal degrees
            longitude: Longitude in decimal degrees
            altitude: Optional altitude relative to altitude_reference
            altitude_reference: Reference point of the altitude value

        Returns:
            Location instance
        """
        return cls(
            latitude=Coordinate.from_degrees(latitude),
            longitude=Coordinate.from_degrees(longitude),
            altitude=Altitude(float(altitude), float(altitude_reference)) if altitude is not None else None
        )

    def based(self, references: LocationReferences) -> 'Location':
        """Return a copy whose altitude is re-based on the given references."""
        return Location(
            latitude=self.latitude,
            longitude=self.longitude,
            altitude=self.altitude.based(references.altitude) if self.altitude is not None else None
        )

    @property
    def debug_info(self) -> str:
        parts = [
            f"lat={self.latitude.degrees}",
            f"lon={self.longitude.degrees}",
        ]
        if self.altitude is not None:
            parts.append(f"alt={self.altitude.value}")
        return ",".join(parts)


@dataclass(frozen=True)
class GeoAnchor:
    """A location with a trusted, timezone-aware timestamp."""
    timestamp: datetime
    location: Location


@dataclass(frozen=True)
class Geotag:
    """Resolved location for a taggable item."""
    location: Location
