"""
VLR/EVLR records of LAS/LAZ and COPC point-cloud files.

Headers, the record index entry, the payload kinds and the registry the
enclosing file reader uses to pick a payload decoder.
"""

import logging

from .exceptions import (
    MisalignedPayloadError,
    TruncatedInputError,
    UnknownRecordError,
    VlrError,
)
from .primitives import EvlrHeader, VlrHeader, VlrIndexEntry
from .vlrs import (
    COPC_HIERARCHY_RECORD_ID,
    COPC_USER_ID,
    Coder,
    Compressor,
    CopcInfoVlr,
    EbDataType,
    EbField,
    EbOptions,
    EbVlr,
    HierarchyEntry,
    HierarchyPage,
    ItemType,
    LazItem,
    LazVlr,
    RawVlr,
    VoxelKey,
    Vlr,
    WktVlr,
)
from .registry import VlrRegistry, default_registry
from .catalog import VlrCatalog

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "VlrError",
    "TruncatedInputError",
    "MisalignedPayloadError",
    "UnknownRecordError",
    "VlrHeader",
    "EvlrHeader",
    "VlrIndexEntry",
    "Vlr",
    "LazVlr",
    "LazItem",
    "Compressor",
    "Coder",
    "ItemType",
    "EbVlr",
    "EbField",
    "EbDataType",
    "EbOptions",
    "WktVlr",
    "CopcInfoVlr",
    "HierarchyEntry",
    "HierarchyPage",
    "VoxelKey",
    "COPC_USER_ID",
    "COPC_HIERARCHY_RECORD_ID",
    "RawVlr",
    "VlrRegistry",
    "default_registry",
    "VlrCatalog",
]
