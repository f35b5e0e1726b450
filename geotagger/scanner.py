# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
File discovery for anchor sources and photos to tag.

Copyright 2025 DNAi inc.
"""

from pathlib import Path
from typing import List, Union

# Photo formats with EXIF data that can be read
PHOTO_EXTENSIONS = {'.jpg', '.jpeg', '.jpe', '.webp', '.tif', '.tiff'}

GPX_EXTENSIONS = {'.gpx'}


def is_photo_file(path: Union[str, Path]) -> bool:
    path = Path(path)
    return path.suffix.lower() in PHOTO_EXTENSIONS and not path.is_dir()


def is_gpx_file(path: Union[str, Path]) -> bool:
    path = Path(path)
    return path.suffix.lower() in GPX_EXTENSIONS and not path.is_dir()


def scan_directory(directory: Union[str, Path], recursive: bool = True) -> List[Path]:
    """
    List the files of a directory, skipping hidden files and directories.

    Args:
        directory: Directory to scan
        recursive: Whether to descend into subdirectories

    Returns:
        Sorted list of file paths
    """
    directory = Path(directory)
    files = []
    for entry in directory.iterdir():
        if entry.name.startswith('.'):
            continue
        if entry.is_dir():
            if recursive:
                files.extend(scan_directory(entry, recursive=True))
        elif entry.is_file():
            files.append(entry)
    return sorted(files)
