"""
Fixed-size building blocks shared by every record kind.

This package has no dependencies on the payload kinds, avoiding circular
imports.
"""

from .header import VlrHeader, EvlrHeader
from .index_entry import VlrIndexEntry
from .stream import read_exact

__all__ = ["VlrHeader", "EvlrHeader", "VlrIndexEntry", "read_exact"]
