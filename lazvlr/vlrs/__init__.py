from .vlr import Vlr
from .laz_vlr import LazVlr, LazItem, Compressor, Coder, ItemType, items_for_format
from .eb_vlr import EbVlr, EbField, EbDataType, EbOptions
from .wkt_vlr import WktVlr
from .copc_info_vlr import CopcInfoVlr
from .copc_hierarchy import (
    COPC_HIERARCHY_RECORD_ID,
    COPC_USER_ID,
    HierarchyEntry,
    HierarchyPage,
    VoxelKey,
)
from .raw_vlr import RawVlr

__all__ = [
    "Vlr",
    "LazVlr",
    "LazItem",
    "Compressor",
    "Coder",
    "ItemType",
    "items_for_format",
    "EbVlr",
    "EbField",
    "EbDataType",
    "EbOptions",
    "WktVlr",
    "CopcInfoVlr",
    "COPC_USER_ID",
    "COPC_HIERARCHY_RECORD_ID",
    "HierarchyEntry",
    "HierarchyPage",
    "VoxelKey",
    "RawVlr",
]
