import logging
import struct
from typing import BinaryIO, Optional, Sequence

from ..primitives.stream import Buffer, check_buffer, check_float, check_uint, read_exact
from .vlr import Vlr

logger = logging.getLogger(__name__)

_U64 = 0xFFFFFFFFFFFFFFFF


class CopcInfoVlr(Vlr):
    """
    Root descriptor of a COPC octree (copc record 1).

    Storage format (little-endian, 160 bytes):
    - center_x, center_y, center_z, halfsize, spacing: 5 doubles
    - root_hier_offset, root_hier_size: 2 uint64, location of the root
      hierarchy page
    - gpstime_minimum, gpstime_maximum: 2 doubles
    - reserved: 11 uint64, zero unless read from a file

    A payload read from a file may be longer than 160 bytes. The bytes past
    the fixed fields are kept in ``trailing`` and written back unchanged.
    """

    USER_ID = "copc"
    RECORD_ID = 1
    DESCRIPTION = "COPC info VLR"

    SIZE = 160
    RESERVED_COUNT = 11
    _STRUCT = struct.Struct("<5d2Q2d11Q")

    def __init__(self, center_x: float = 0.0, center_y: float = 0.0, center_z: float = 0.0,
                 halfsize: float = 0.0, spacing: float = 0.0,
                 root_hier_offset: int = 0, root_hier_size: int = 0,
                 gpstime_minimum: float = 0.0, gpstime_maximum: float = 0.0,
                 reserved: Optional[Sequence[int]] = None, trailing: bytes = b""):
        if reserved is None:
            reserved = [0] * self.RESERVED_COUNT
        if len(reserved) != self.RESERVED_COUNT:
            raise ValueError(
                f"CopcInfoVlr requires {self.RESERVED_COUNT} reserved words, got {len(reserved)}")
        for name, value in (("center_x", center_x), ("center_y", center_y),
                            ("center_z", center_z), ("halfsize", halfsize),
                            ("spacing", spacing), ("gpstime_minimum", gpstime_minimum),
                            ("gpstime_maximum", gpstime_maximum)):
            check_float(value, f"CopcInfoVlr.{name}")
        check_uint(root_hier_offset, _U64, "CopcInfoVlr.root_hier_offset")
        check_uint(root_hier_size, _U64, "CopcInfoVlr.root_hier_size")
        for word in reserved:
            check_uint(word, _U64, "CopcInfoVlr.reserved")
        if not isinstance(trailing, (bytes, bytearray)):
            raise TypeError(f"Expected bytes or bytearray, got {type(trailing)}")

        self.center_x = center_x
        self.center_y = center_y
        self.center_z = center_z
        self.halfsize = halfsize
        self.spacing = spacing
        self.root_hier_offset = root_hier_offset
        self.root_hier_size = root_hier_size
        self.gpstime_minimum = gpstime_minimum
        self.gpstime_maximum = gpstime_maximum
        self.reserved = list(reserved)
        self.trailing = bytes(trailing)

    @classmethod
    def read(cls, stream: BinaryIO, data_length: int = SIZE) -> "CopcInfoVlr":
        """Read the descriptor from a payload of ``data_length`` bytes."""
        return cls.deserialize(read_exact(stream, data_length, cls.__name__))

    @classmethod
    def deserialize(cls, data: Buffer) -> "CopcInfoVlr":
        """
        Decode from an in-memory buffer.

        Raises:
            TruncatedInputError: If fewer than 160 bytes are given
        """
        check_buffer(data, cls.SIZE, cls.__name__)
        trailing = bytes(data[cls.SIZE:])
        if trailing:
            logger.warning("CopcInfoVlr payload has %d bytes, keeping the last %d undecoded",
                           len(data), len(trailing))

        values = cls._STRUCT.unpack_from(data)
        return cls(*values[:9], reserved=values[9:], trailing=trailing)

    def serialize(self) -> bytes:
        return self._STRUCT.pack(
            self.center_x, self.center_y, self.center_z, self.halfsize, self.spacing,
            self.root_hier_offset, self.root_hier_size,
            self.gpstime_minimum, self.gpstime_maximum,
            *self.reserved,
        ) + self.trailing

    def size(self) -> int:
        return self.SIZE + len(self.trailing)

    @property
    def bounds(self) -> tuple:
        """(min_x, min_y, min_z, max_x, max_y, max_z) of the root cube."""
        h = self.halfsize
        return (self.center_x - h, self.center_y - h, self.center_z - h,
                self.center_x + h, self.center_y + h, self.center_z + h)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, CopcInfoVlr) and self.serialize() == other.serialize()

    def __repr__(self) -> str:
        return (f"CopcInfoVlr(center=({self.center_x}, {self.center_y}, {self.center_z}), "
                f"halfsize={self.halfsize}, root_hier=({self.root_hier_offset}, "
                f"{self.root_hier_size}))")
