"""Persistence for analysis snapshots."""

from .snapshot_cache import SnapshotCache, snapshot_from_dict, snapshot_to_dict

__all__ = ["SnapshotCache", "snapshot_from_dict", "snapshot_to_dict"]
