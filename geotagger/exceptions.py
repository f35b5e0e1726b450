# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Exception classes for Geotagger

This module defines the exception hierarchy used by the geotagging engine,
the anchor loaders, the metadata store and the command-line interface.

Copyright 2025 DNAi inc.
"""


class GeotaggerError(Exception):
    """
    Base exception for all Geotagger errors.
    
    All Geotagger exceptions inherit from this class, allowing
    catch-all error handling for any geotagging-related errors.
    """
    def __init__(self, message: str = ""):
        """
        Initialize the exception with an optional error message.
        
        Args:
            message: Descriptive error message explaining what went wrong
        """
        self.message = message
        super().__init__(message)


class GeotaggingError(GeotaggerError):
    """
    Raised (or carried inside a GeotagResult) when no geotag can be
    resolved for an item.
    
    These are routine outcomes for real photo collections and only ever
    affect the single item being resolved.
    """
    pass


class CannotReadDateInformation(GeotaggingError):
    """Raised when the item has no usable capture timestamp."""
    
    def __init__(self, message: str = "Can not read date information"):
        super().__init__(message)


class NotEnoughAnchorCandidates(GeotaggingError):
    """Raised when neither exact matching nor interpolation found anchors."""
    
    def __init__(self, message: str = "Not enough geo anchor candidates"):
        super().__init__(message)


class AnchorLoadError(GeotaggerError):
    """
    Raised when a location anchor source cannot be loaded.
    
    This exception is raised when:
    - GPX file is missing, empty or not well-formed XML
    - Anchor source contains values that cannot be converted
    """
    pass


class MetadataReadError(GeotaggerError):
    """
    Raised when metadata cannot be read from a photo.
    
    This exception is raised when:
    - File does not exist or cannot be opened
    - File format does not carry EXIF data
    - EXIF structure cannot be parsed
    """
    pass


class MetadataWriteError(GeotaggerError):
    """
    Raised when metadata cannot be written to a photo.
    
    This exception is raised when:
    - File format does not support EXIF insertion
    - Destination directory cannot be created
    - File permissions prevent writing
    """
    pass


class AssetGeotaggingError(GeotaggerError):
    """Raised when a photo library asset cannot be updated."""
    pass


class CLIError(GeotaggerError):
    """Base class for errors reported by the command-line interface."""
    pass


class NoGeoAnchorsFoundError(CLIError):
    """Raised when the anchors path yielded no location anchors at all."""
    
    def __init__(self, message: str = "No location anchors found"):
        super().__init__(message)


class OutputIsNotADirectoryError(CLIError):
    """Raised when the input is a directory but the output is an existing file."""
    
    def __init__(self, message: str = "Output path exists and is not a directory"):
        super().__init__(message)
