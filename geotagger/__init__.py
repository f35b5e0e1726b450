# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Geotagger - Photo geotagging from location anchors

Assigns locations to photos by matching their capture time against
location anchors taken from GPX tracks and already geotagged photos.
Locations are reused from the closest anchor in time or interpolated
along the great circle between two anchors.

Copyright 2025 DNAi inc.
"""

__version__ = "0.1.0"
__author__ = "DNAi inc."

from geotagger.exceptions import (
    GeotaggerError,
    GeotaggingError,
    CannotReadDateInformation,
    NotEnoughAnchorCandidates,
    AnchorLoadError,
    MetadataReadError,
    MetadataWriteError,
    AssetGeotaggingError,
)
from geotagger.models import (
    Coordinate,
    Altitude,
    Location,
    LocationReferences,
    GeoAnchor,
    Geotag,
)
from geotagger.geometry import calculate_centroid, calculate_interpolated_location
from geotagger.items import GeotaggingItem, TimeAdjustmentSaveMode
from geotagger.geotag_finder import GeotagFinder, GeotagResult
from geotagger.geotagger import Geotagger
from geotagger.loaders import GeoAnchorsLoader, StaticGeoAnchorsLoader, TimeOffsetGeoAnchorsLoader
from geotagger.gpx_loader import GPXGeoAnchorsLoader
from geotagger.exif_io import ExifReader, ExifWriter
from geotagger.photo_item import ExifGeotaggingItem, ExifGeoAnchorsLoader
from geotagger.logging_item import LoggingGeotaggingItem
from geotagger.counter import GeotaggingCounter
from geotagger.asset_library import (
    Asset,
    AssetChange,
    AssetLibrary,
    AssetGeotagBatchProcessor,
    AssetGeotaggingItem,
    AssetGeoAnchorsLoader,
)
from geotagger.timezone_offsets import (
    parse_timezone_offset,
    format_timezone_offset,
    is_valid_timezone_offset,
)
from geotagger.config import GeotaggerSettings

__all__ = [
    "GeotaggerError",
    "GeotaggingError",
    "CannotReadDateInformation",
    "NotEnoughAnchorCandidates",
    "AnchorLoadError",
    "MetadataReadError",
    "MetadataWriteError",
    "AssetGeotaggingError",
    "Coordinate",
    "Altitude",
    "Location",
    "LocationReferences",
    "GeoAnchor",
    "Geotag",
    "calculate_centroid",
    "calculate_interpolated_location",
    "GeotaggingItem",
    "TimeAdjustmentSaveMode",
    "GeotagFinder",
    "GeotagResult",
    "Geotagger",
    "GeoAnchorsLoader",
    "StaticGeoAnchorsLoader",
    "TimeOffsetGeoAnchorsLoader",
    "GPXGeoAnchorsLoader",
    "ExifReader",
    "ExifWriter",
    "ExifGeotaggingItem",
    "ExifGeoAnchorsLoader",
    "LoggingGeotaggingItem",
    "GeotaggingCounter",
    "Asset",
    "AssetChange",
    "AssetLibrary",
    "AssetGeotagBatchProcessor",
    "AssetGeotaggingItem",
    "AssetGeoAnchorsLoader",
    "parse_timezone_offset",
    "format_timezone_offset",
    "is_valid_timezone_offset",
    "GeotaggerSettings",
]
