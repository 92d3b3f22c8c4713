import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import BinaryIO, ClassVar, List, Optional, Tuple

from ..config import DEFAULT_CHUNK_SIZE, LAZPERF_VERSION, LEGACY_UNSET, VARIABLE_CHUNK_SIZE
from ..exceptions import MisalignedPayloadError
from ..primitives.stream import Buffer, check_buffer, check_uint, read_exact
from .vlr import Vlr


class Compressor(IntEnum):
    NONE = 0
    POINTWISE = 1
    POINTWISE_CHUNKED = 2
    LAYERED_CHUNKED = 3


class Coder(IntEnum):
    ARITHMETIC = 0


class ItemType(IntEnum):
    BYTE = 0
    SHORT = 1
    INT = 2
    LONG = 3
    FLOAT = 4
    DOUBLE = 5
    POINT10 = 6
    GPSTIME11 = 7
    RGB12 = 8
    WAVEPACKET13 = 9
    POINT14 = 10
    RGB14 = 11
    RGBNIR14 = 12
    WAVEPACKET14 = 13
    BYTE14 = 14


@dataclass(frozen=True)
class LazItem:
    """
    One entry of the compressor's item table.

    Storage format: type, size, version as three little-endian uint16
    (6 bytes). Each item names a field group of the point record that the
    coder compresses separately.
    """

    SIZE: ClassVar[int] = 6
    _STRUCT: ClassVar[struct.Struct] = struct.Struct("<HHH")

    type: int
    size: int
    version: int

    def __post_init__(self):
        for name in ("type", "size", "version"):
            check_uint(getattr(self, name), 0xFFFF, f"LazItem.{name}")

    def serialize(self) -> bytes:
        return self._STRUCT.pack(self.type, self.size, self.version)

    @classmethod
    def deserialize(cls, data: Buffer, offset: int = 0) -> "LazItem":
        return cls(*cls._STRUCT.unpack_from(data, offset))

    def __str__(self) -> str:
        try:
            name = ItemType(self.type).name
        except ValueError:
            name = str(self.type)
        return f"LazItem({name}, size={self.size}, v{self.version})"


# (size, version) of the fixed-size item types written for each format
_ITEM_LAYOUTS = {
    ItemType.POINT10: (20, 2),
    ItemType.GPSTIME11: (8, 2),
    ItemType.RGB12: (6, 2),
    ItemType.POINT14: (30, 3),
    ItemType.RGB14: (6, 3),
    ItemType.RGBNIR14: (8, 3),
}

# Item table per point format; extra bytes are appended as BYTE / BYTE14
_FORMAT_ITEMS = {
    0: (ItemType.POINT10,),
    1: (ItemType.POINT10, ItemType.GPSTIME11),
    2: (ItemType.POINT10, ItemType.RGB12),
    3: (ItemType.POINT10, ItemType.GPSTIME11, ItemType.RGB12),
    6: (ItemType.POINT14,),
    7: (ItemType.POINT14, ItemType.RGB14),
    8: (ItemType.POINT14, ItemType.RGBNIR14),
}


def items_for_format(point_format: int, eb_count: int = 0) -> List[LazItem]:
    """
    Return the item table a LAZ writer uses for a point format.

    Args:
        point_format: LAS point data format id (0-3 or 6-8)
        eb_count: Number of extra bytes per point

    Raises:
        ValueError: For formats without a known item table (including the
            wave packet formats 4, 5, 9 and 10)
    """
    if point_format not in _FORMAT_ITEMS:
        raise ValueError(f"No LAZ item table for point format {point_format}")
    if not (0 <= eb_count <= 0xFFFF):
        raise ValueError(f"Extra byte count {eb_count} out of range [0, 65535]")

    items = [LazItem(int(t), *_ITEM_LAYOUTS[t]) for t in _FORMAT_ITEMS[point_format]]
    if eb_count:
        if point_format <= 5:
            items.append(LazItem(int(ItemType.BYTE), eb_count, 2))
        else:
            items.append(LazItem(int(ItemType.BYTE14), eb_count, 3))
    return items


class LazVlr(Vlr):
    """
    Compression descriptor (the "laszip encoded" VLR).

    Storage format (little-endian):
    - 32-byte prefix: compressor (u16), coder (u16), version major (u8),
      version minor (u8), revision (u16), options (u32), chunk size (u32),
      num_points (8 bytes), num_bytes (8 bytes)
    - 6 bytes per LazItem, in coder order

    The item count is not stored; it follows from the header's
    data_length. num_points and num_bytes are not reliable in files found
    in the wild and are kept as opaque bytes.
    """

    USER_ID = "laszip encoded"
    RECORD_ID = 22204
    DESCRIPTION = "lazperf variant"

    PREFIX_SIZE = 32
    _PREFIX = struct.Struct("<HHBBHII8s8s")

    def __init__(self, compressor: int = Compressor.NONE, coder: int = Coder.ARITHMETIC,
                 ver_major: int = 0, ver_minor: int = 0, revision: int = 0,
                 options: int = 0, chunk_size: int = 0,
                 num_points: bytes = LEGACY_UNSET, num_bytes: bytes = LEGACY_UNSET,
                 items: Optional[List[LazItem]] = None):
        for name, value, limit in (("compressor", compressor, 0xFFFF),
                                   ("coder", coder, 0xFFFF),
                                   ("ver_major", ver_major, 0xFF),
                                   ("ver_minor", ver_minor, 0xFF),
                                   ("revision", revision, 0xFFFF),
                                   ("options", options, 0xFFFFFFFF),
                                   ("chunk_size", chunk_size, 0xFFFFFFFF)):
            check_uint(value, limit, f"LazVlr.{name}")
        for name, raw in (("num_points", num_points), ("num_bytes", num_bytes)):
            if not isinstance(raw, (bytes, bytearray)) or len(raw) != 8:
                raise ValueError(f"{name} must be exactly 8 bytes")
        items = list(items) if items else []
        for item in items:
            if not isinstance(item, LazItem):
                raise TypeError(f"Expected LazItem, got {type(item)}")

        self.compressor = int(compressor)
        self.coder = int(coder)
        self.ver_major = ver_major
        self.ver_minor = ver_minor
        self.revision = revision
        self.options = options
        self.chunk_size = chunk_size
        self.num_points = bytes(num_points)
        self.num_bytes = bytes(num_bytes)
        self.items: List[LazItem] = items

    @classmethod
    def from_format(cls, point_format: int, eb_count: int = 0,
                    chunk_size: int = DEFAULT_CHUNK_SIZE) -> "LazVlr":
        """Build the descriptor a writer emits for a point format."""
        items = items_for_format(point_format, eb_count)
        compressor = Compressor.POINTWISE_CHUNKED if point_format <= 5 else Compressor.LAYERED_CHUNKED
        major, minor, revision = LAZPERF_VERSION
        return cls(compressor=compressor, coder=Coder.ARITHMETIC,
                   ver_major=major, ver_minor=minor, revision=revision,
                   options=0, chunk_size=chunk_size, items=items)

    @classmethod
    def item_count_for(cls, data_length: int) -> int:
        """
        Number of items implied by a payload length.

        Raises:
            MisalignedPayloadError: If the length is shorter than the prefix
                or does not end on an item boundary
        """
        table = data_length - cls.PREFIX_SIZE
        if table < 0 or table % LazItem.SIZE:
            raise MisalignedPayloadError(
                f"LazVlr length {data_length} is not {cls.PREFIX_SIZE} + "
                f"{LazItem.SIZE} * n bytes")
        return table // LazItem.SIZE

    @classmethod
    def read(cls, stream: BinaryIO, data_length: int) -> "LazVlr":
        """Read a descriptor whose header announced ``data_length`` bytes."""
        cls.item_count_for(data_length)
        return cls.deserialize(read_exact(stream, data_length, cls.__name__))

    @classmethod
    def deserialize(cls, data: Buffer) -> "LazVlr":
        check_buffer(data, cls.PREFIX_SIZE, cls.__name__)
        count = cls.item_count_for(len(data))

        (compressor, coder, ver_major, ver_minor, revision,
         options, chunk_size, num_points, num_bytes) = cls._PREFIX.unpack_from(data)
        items = [LazItem.deserialize(data, cls.PREFIX_SIZE + i * LazItem.SIZE)
                 for i in range(count)]

        return cls(compressor=compressor, coder=coder, ver_major=ver_major,
                   ver_minor=ver_minor, revision=revision, options=options,
                   chunk_size=chunk_size, num_points=num_points,
                   num_bytes=num_bytes, items=items)

    def serialize(self) -> bytes:
        prefix = self._PREFIX.pack(
            self.compressor, self.coder, self.ver_major, self.ver_minor,
            self.revision, self.options, self.chunk_size,
            self.num_points, self.num_bytes)
        return prefix + b"".join(item.serialize() for item in self.items)

    def size(self) -> int:
        return self.PREFIX_SIZE + LazItem.SIZE * len(self.items)

    def valid(self) -> bool:
        """
        Check that the descriptor names a scheme this layer knows.

        An unknown compressor, coder or item type makes the descriptor
        invalid; callers may still pass the raw bytes through.
        """
        known_compressors = {c.value for c in Compressor}
        known_coders = {c.value for c in Coder}
        known_items = {t.value for t in ItemType}

        if self.compressor not in known_compressors or self.coder not in known_coders:
            return False
        if any(item.type not in known_items for item in self.items):
            return False
        if self.compressor != Compressor.NONE and not self.items:
            return False
        try:
            return self.size() == len(self.serialize())
        except struct.error:
            return False

    @property
    def uses_variable_chunks(self) -> bool:
        """True when each chunk's point count is stored in the chunk table."""
        return self.chunk_size == VARIABLE_CHUNK_SIZE

    @property
    def extra_bytes(self) -> int:
        """Per-point extra byte count carried by a BYTE/BYTE14 item, or 0."""
        for item in self.items:
            if item.type in (ItemType.BYTE, ItemType.BYTE14):
                return item.size
        return 0

    @property
    def point_format(self) -> Optional[int]:
        """Point format whose item table matches this descriptor, if any."""
        types: Tuple[int, ...] = tuple(
            item.type for item in self.items
            if item.type not in (ItemType.BYTE, ItemType.BYTE14))

        for point_format, expected in _FORMAT_ITEMS.items():
            if types == tuple(int(t) for t in expected):
                return point_format
        return None

    def __eq__(self, other: object) -> bool:
        return isinstance(other, LazVlr) and self.serialize() == other.serialize()

    def __repr__(self) -> str:
        return (f"LazVlr(compressor={self.compressor}, coder={self.coder}, "
                f"version={self.ver_major}.{self.ver_minor}.{self.revision}, "
                f"chunk_size={self.chunk_size}, items={len(self.items)})")
