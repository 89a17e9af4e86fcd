from __future__ import annotations

import os

import bittensor as bt


class ArtifactCache:
    """
    Tracks which pipeline steps can be skipped.

    Each cache key maps to a marker file. A key is cached exactly when its
    marker exists on disk; contents and timestamps are never inspected.
    Several stages may share one key so they are skipped together.
    """

    def __init__(self):
        self.markers: dict[str, str] = {}

    def register(self, key: str, marker_path: str):
        """
        Associate a cache key with its marker file.

        Args:
            key (str): Stage name or stage group name.
            marker_path (str): File whose presence marks the key as built.
        """
        existing = self.markers.get(key)
        if existing is not None and existing != marker_path:
            raise ValueError(
                f"Cache key {key} already registered with marker {existing}"
            )
        self.markers[key] = marker_path

    def marker(self, key: str) -> str | None:
        return self.markers.get(key)

    def is_cached(self, key: str | None) -> bool:
        if key is None:
            return False
        marker_path = self.markers.get(key)
        if marker_path is None:
            bt.logging.trace(f"No cache marker registered for {key}")
            return False
        return os.path.isfile(marker_path)

    def status(self) -> dict[str, bool]:
        return {key: self.is_cached(key) for key in self.markers}
