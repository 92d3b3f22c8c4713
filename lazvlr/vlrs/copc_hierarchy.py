import struct
from dataclasses import dataclass
from typing import BinaryIO, ClassVar, Iterable, Iterator, Optional

from ..exceptions import MisalignedPayloadError
from ..primitives.stream import Buffer, check_buffer, read_exact

# Hierarchy pages travel as payload of EVLRs with this identity
COPC_USER_ID = "copc"
COPC_HIERARCHY_RECORD_ID = 1000


@dataclass(frozen=True)
class VoxelKey:
    """
    Address of an octree node: depth plus integer cell coordinates.

    A negative level marks an invalid key.
    """

    level: int
    x: int
    y: int
    z: int

    @classmethod
    def invalid(cls) -> "VoxelKey":
        return cls(-1, -1, -1, -1)

    @property
    def is_valid(self) -> bool:
        return self.level >= 0

    def child(self, direction: int) -> "VoxelKey":
        """
        Return one of the eight children.

        Bit 0 of ``direction`` selects x, bit 1 y, bit 2 z.
        """
        if not (0 <= direction < 8):
            raise ValueError(f"Child direction must be in [0, 7], got {direction}")
        return VoxelKey(
            self.level + 1,
            (self.x << 1) | (direction & 1),
            (self.y << 1) | ((direction >> 1) & 1),
            (self.z << 1) | ((direction >> 2) & 1),
        )

    def parent(self) -> "VoxelKey":
        """Return the parent key; the root's parent is invalid."""
        if self.level <= 0:
            return VoxelKey.invalid()
        return VoxelKey(self.level - 1, self.x >> 1, self.y >> 1, self.z >> 1)

    def __str__(self) -> str:
        return f"{self.level}-{self.x}-{self.y}-{self.z}"


@dataclass(frozen=True)
class HierarchyEntry:
    """
    One node record of a hierarchy page.

    Storage format (little-endian, 32 bytes): key as 4 int32, offset
    (uint64), byte_size (int32), point_count (int32).

    point_count selects what offset/byte_size point at:
    - > 0: a compressed chunk holding that many points
    - 0: nothing; offset and byte_size are both 0 (children may exist)
    - -1: another hierarchy page holding this node's subtree
    """

    SIZE: ClassVar[int] = 32
    _STRUCT: ClassVar[struct.Struct] = struct.Struct("<4iQii")

    key: VoxelKey
    offset: int
    byte_size: int
    point_count: int

    def __post_init__(self):
        if self.point_count < -1:
            raise ValueError(f"Invalid point count {self.point_count}")
        if self.point_count == -1 and (self.offset == 0 or self.byte_size == 0):
            raise ValueError(
                f"Entry {self.key} points at a hierarchy page but has "
                f"offset={self.offset}, byte_size={self.byte_size}")
        if self.point_count == 0 and (self.offset != 0 or self.byte_size != 0):
            raise ValueError(
                f"Entry {self.key} has no points but has "
                f"offset={self.offset}, byte_size={self.byte_size}")

    @property
    def is_chunk(self) -> bool:
        return self.point_count > 0

    @property
    def is_empty(self) -> bool:
        return self.point_count == 0

    @property
    def is_page_pointer(self) -> bool:
        return self.point_count == -1

    def serialize(self) -> bytes:
        return self._STRUCT.pack(self.key.level, self.key.x, self.key.y, self.key.z,
                                 self.offset, self.byte_size, self.point_count)

    @classmethod
    def deserialize(cls, data: Buffer, offset: int = 0) -> "HierarchyEntry":
        check_buffer(data, offset + cls.SIZE, cls.__name__)
        level, x, y, z, chunk_offset, byte_size, point_count = cls._STRUCT.unpack_from(data, offset)
        return cls(VoxelKey(level, x, y, z), chunk_offset, byte_size, point_count)


class HierarchyPage:
    """
    A run of hierarchy entries, carried as the payload of a plain EVLR.

    The page does not look inside its entries: it keeps the raw bytes and
    only checks that they hold a whole number of 32-byte records.
    entries() decodes them on demand, which is where the point count
    rules of HierarchyEntry are enforced.
    """

    def __init__(self, data: Buffer = b""):
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"Expected bytes or bytearray, got {type(data)}")
        self._data = bytes(data)
        self.entry_count_for(len(self._data))

    @classmethod
    def entry_count_for(cls, byte_size: int) -> int:
        """
        Raises:
            MisalignedPayloadError: If byte_size is not a multiple of 32
        """
        if byte_size < 0 or byte_size % HierarchyEntry.SIZE:
            raise MisalignedPayloadError(
                f"Hierarchy page length {byte_size} is not a multiple of {HierarchyEntry.SIZE}")
        return byte_size // HierarchyEntry.SIZE

    @classmethod
    def read(cls, stream: BinaryIO, byte_size: int) -> "HierarchyPage":
        cls.entry_count_for(byte_size)
        return cls(read_exact(stream, byte_size, cls.__name__))

    @classmethod
    def deserialize(cls, data: Buffer) -> "HierarchyPage":
        return cls(data)

    @classmethod
    def from_entries(cls, entries: Iterable[HierarchyEntry]) -> "HierarchyPage":
        return cls(b"".join(entry.serialize() for entry in entries))

    def append(self, entry: HierarchyEntry) -> None:
        self._data += entry.serialize()

    def serialize(self) -> bytes:
        return self._data

    def write(self, stream: BinaryIO) -> None:
        stream.write(self._data)

    def size(self) -> int:
        return len(self._data)

    @property
    def entry_count(self) -> int:
        return self.size() // HierarchyEntry.SIZE

    def entry(self, index: int) -> HierarchyEntry:
        if not (0 <= index < self.entry_count):
            raise IndexError(f"Entry index {index} out of range [0, {self.entry_count})")
        return HierarchyEntry.deserialize(self._data, index * HierarchyEntry.SIZE)

    def entries(self) -> Iterator[HierarchyEntry]:
        for index in range(self.entry_count):
            yield HierarchyEntry.deserialize(self._data, index * HierarchyEntry.SIZE)

    def find(self, key: VoxelKey) -> Optional[HierarchyEntry]:
        """Return the entry stored for ``key`` in this page, if any."""
        for entry in self.entries():
            if entry.key == key:
                return entry
        return None

    def __iter__(self) -> Iterator[HierarchyEntry]:
        return self.entries()

    def __len__(self) -> int:
        return self.entry_count

    def __eq__(self, other: object) -> bool:
        return isinstance(other, HierarchyPage) and self._data == other._data

    def __repr__(self) -> str:
        return f"HierarchyPage(entries={self.entry_count})"
