# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Thread-safe tagged/skipped counter used for the end-of-run summary.

Copyright 2025 DNAi inc.
"""

import threading


class GeotaggingCounter:
    """Counts tagged and skipped items; increments are serialized by a lock."""

    def __init__(self):
        self._lock = threading.Lock()
        self._tagged = 0
        self._skipped = 0

    @property
    def tagged(self) -> int:
        with self._lock:
            return self._tagged

    @property
    def skipped(self) -> int:
        with self._lock:
            return self._skipped

    def increment_tagged(self) -> None:
        with self._lock:
            self._tagged += 1

    def increment_skipped(self) -> None:
        with self._lock:
            self._skipped += 1
