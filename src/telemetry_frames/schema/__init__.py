"""
Schema Module
=============

Project file loading and validation.

Components:
    - SchemaStore: Holds the active schema template
    - SchemaInfo: Summary returned by a successful load
"""

from telemetry_frames.schema.store import SchemaInfo, SchemaStore


__all__ = [
    "SchemaInfo",
    "SchemaStore",
]
