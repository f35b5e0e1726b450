# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Spherical geometry for Geotagger

Great-circle centroid and great-circle interpolation of locations.
Angles are averaged on the unit sphere, never as plain degrees, so results
stay correct across the antimeridian and near the poles. Altitudes are
combined linearly after re-basing them on reference point 0.

Copyright 2025 DNAi inc.
"""

from math import asin, atan2, cos, sin, sqrt
from typing import List, Optional, Sequence, Tuple

from geotagger.models import Altitude, Coordinate, Location


def calculate_centroid(weighted_locations: Sequence[Tuple[Location, float]]) -> Location:
    """
    Calculate the weighted spherical centroid of locations.

    Each location is converted to a unit vector, the vectors are averaged
    with normalized weights and the result is converted back to
    latitude/longitude.

    Args:
        weighted_locations: Sequence of (location, weight) pairs. Weights do
            not need to sum to 1.

    Returns:
        Centroid location. Altitude is the weighted average of the zero-based
        altitudes of the inputs that have one, or None if none has.
    """
    if not weighted_locations:
        raise ValueError("Cannot calculate centroid of an empty location list")

    altitudes_with_weights: List[Tuple[float, float]] = [
        (location.altitude.zero_based().value, weight)
        for location, weight in weighted_locations
        if location.altitude is not None
    ]
    centroid_altitude: Optional[Altitude] = None
    if altitudes_with_weights:
        altitude_weights_sum = sum(weight for _, weight in altitudes_with_weights)
        value = sum(altitude * weight / altitude_weights_sum for altitude, weight in altitudes_with_weights)
        centroid_altitude = Altitude(value, 0.0)

    weights_sum = sum(weight for _, weight in weighted_locations)
    x = y = z = 0.0
    for location, weight in weighted_locations:
        lat = location.latitude.radians
        lon = location.longitude.radians
        normalized_weight = weight / weights_sum
        x += cos(lat) * cos(lon) * normalized_weight
        y += cos(lat) * sin(lon) * normalized_weight
        z += sin(lat) * normalized_weight

    longitude = atan2(y, x)
    latitude = atan2(z, sqrt(x ** 2 + y ** 2))

    return Location(
        latitude=Coordinate.from_radians(latitude),
        longitude=Coordinate.from_radians(longitude),
        altitude=centroid_altitude
    )


def initial_bearing(first: Location, second: Location) -> float:
    """Initial great-circle bearing from first to second, in radians."""
    dlon = second.longitude.radians - first.longitude.radians
    x = cos(second.latitude.radians) * sin(dlon)
    y = (cos(first.latitude.radians) * sin(second.latitude.radians)
         - sin(first.latitude.radians) * cos(second.latitude.radians) * cos(dlon))
    return atan2(x, y)


def angular_distance(first: Location, second: Location) -> float:
    """Central angle between two locations (Haversine formula), in radians."""
    lat1 = first.latitude.radians
    lat2 = second.latitude.radians
    dlat = lat2 - lat1
    dlon = second.longitude.radians - first.longitude.radians

    a = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    return 2 * atan2(sqrt(a), sqrt(1 - a))


def calculate_interpolated_location(first: Location, second: Location, ratio: float) -> Location:
    """
    Interpolate between two locations along the great circle.

    Args:
        first: Location at ratio 0
        second: Location at ratio 1
        ratio: Position along the arc. Values outside [0, 1] extrapolate.

    Returns:
        Interpolated location. Altitude is interpolated linearly between the
        zero-based altitudes when both inputs have one.
    """
    altitude: Optional[Altitude] = None
    if first.altitude is not None and second.altitude is not None:
        first_altitude = first.altitude.zero_based().value
        second_altitude = second.altitude.zero_based().value
        altitude = Altitude(first_altitude + (second_altitude - first_altitude) * ratio, 0.0)

    bearing = initial_bearing(first, second)
    distance = angular_distance(first, second) * ratio

    lat1 = first.latitude.radians
    lon1 = first.longitude.radians

    latitude = asin(sin(lat1) * cos(distance) + cos(lat1) * sin(distance) * cos(bearing))
    longitude = lon1 + atan2(
        sin(bearing) * sin(distance) * cos(lat1),
        cos(distance) - sin(lat1) * sin(latitude)
    )

    return Location(
        latitude=Coordinate.from_radians(latitude),
        longitude=Coordinate.from_radians(longitude),
        altitude=altitude
    )
