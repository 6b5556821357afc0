"""Helper modules for ProcessSnapshotProvider."""

from .descriptor_builder import SNAPSHOT_ATTRIBUTES, build_descriptor

__all__ = [
    "SNAPSHOT_ATTRIBUTES",
    "build_descriptor",
]
