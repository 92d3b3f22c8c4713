import struct
from enum import IntEnum, IntFlag
from typing import BinaryIO, ClassVar, Iterator, List, Optional, Sequence, Tuple

from ..exceptions import MisalignedPayloadError
from ..primitives.stream import Buffer, check_buffer, decode_text, encode_text, read_exact
from .vlr import Vlr

Vector = Tuple[float, float, float]


class EbDataType(IntEnum):
    """
    Extra byte data types.

    Codes 1-10 are scalars; 11-20 and 21-30 are the (deprecated) two and
    three element arrays of the same base types in the same order.
    """
    UNDOCUMENTED = 0
    UCHAR = 1
    CHAR = 2
    USHORT = 3
    SHORT = 4
    ULONG = 5
    LONG = 6
    ULONGLONG = 7
    LONGLONG = 8
    FLOAT = 9
    DOUBLE = 10

    def get_length(self) -> int:
        """Get the length of one element of this type in bytes."""
        length_map = {
            EbDataType.UNDOCUMENTED: 1,
            EbDataType.UCHAR: 1,
            EbDataType.CHAR: 1,
            EbDataType.USHORT: 2,
            EbDataType.SHORT: 2,
            EbDataType.ULONG: 4,
            EbDataType.LONG: 4,
            EbDataType.ULONGLONG: 8,
            EbDataType.LONGLONG: 8,
            EbDataType.FLOAT: 4,
            EbDataType.DOUBLE: 8,
        }

        return length_map[self]


class EbOptions(IntFlag):
    """Which of the per-field vector arrays carry meaning."""
    NONE = 0
    NO_DATA = 1
    MIN = 2
    MAX = 4
    SCALE = 8
    OFFSET = 16


_ZERO = (0.0, 0.0, 0.0)


def _vector(value: Sequence[float], name: str) -> Vector:
    values = tuple(float(v) for v in value)
    if len(values) != 3:
        raise ValueError(f"{name} requires 3 components, got {len(values)}")
    return values


class EbField:
    """
    Descriptor of one extra per-point attribute.

    Storage format (little-endian, 192 bytes):
    - 2 bytes: reserved
    - 1 byte: data type (EbDataType code)
    - 1 byte: options (EbOptions bits)
    - 32 bytes: name, NUL-padded
    - 4 bytes: unused
    - 5 x 24 bytes: no_data, min, max, scale, offset as 3 doubles each
    - 32 bytes: description, NUL-padded

    The five arrays are always three components wide, whatever the
    options say. Scalar fields only use the first component; the other
    two are carried through unchanged.
    """

    SIZE: ClassVar[int] = 192
    NAME_LENGTH: ClassVar[int] = 32
    DESCRIPTION_LENGTH: ClassVar[int] = 32
    _STRUCT: ClassVar[struct.Struct] = struct.Struct("<2sBB32s4s3d3d3d3d3d32s")

    def __init__(self, name: str = "", data_type: int = EbDataType.UNDOCUMENTED,
                 options: int = EbOptions.NONE, description: str = "",
                 no_data: Sequence[float] = _ZERO, minval: Sequence[float] = _ZERO,
                 maxval: Sequence[float] = _ZERO, scale: Sequence[float] = _ZERO,
                 offset: Sequence[float] = _ZERO,
                 reserved: bytes = b"\0\0", unused: bytes = b"\0\0\0\0"):
        if not (0 <= int(data_type) <= 0xFF):
            raise ValueError(f"data_type {data_type} out of range [0, 255]")
        if not (0 <= int(options) <= 0xFF):
            raise ValueError(f"options {options} out of range [0, 255]")
        if len(reserved) != 2:
            raise ValueError("reserved must be exactly 2 bytes")
        if len(unused) != 4:
            raise ValueError("unused must be exactly 4 bytes")
        encode_text(name, self.NAME_LENGTH, "name")
        encode_text(description, self.DESCRIPTION_LENGTH, "description")

        self.reserved = bytes(reserved)
        self.data_type = int(data_type)
        self.options = int(options)
        self.name = name
        self.unused = bytes(unused)
        self.no_data = _vector(no_data, "no_data")
        self.minval = _vector(minval, "minval")
        self.maxval = _vector(maxval, "maxval")
        self.scale = _vector(scale, "scale")
        self.offset = _vector(offset, "offset")
        self.description = description

    @property
    def element_count(self) -> int:
        """1 for scalars, 2 or 3 for array types, 0 for undocumented bytes."""
        if self.data_type == EbDataType.UNDOCUMENTED:
            return 0
        return (self.data_type - 1) // 10 + 1

    @property
    def base_type(self) -> EbDataType:
        """Element type with the array dimension removed."""
        if self.data_type == EbDataType.UNDOCUMENTED:
            return EbDataType.UNDOCUMENTED
        return EbDataType((self.data_type - 1) % 10 + 1)

    @property
    def byte_size(self) -> int:
        """
        Bytes this attribute occupies in each point record.

        For undocumented extra bytes the options byte holds the count.
        """
        if self.data_type == EbDataType.UNDOCUMENTED:
            return self.options
        if self.data_type > 30:
            raise ValueError(f"Reserved extra byte data type {self.data_type}")
        return self.base_type.get_length() * self.element_count

    @property
    def has_no_data(self) -> bool:
        return self._flag(EbOptions.NO_DATA)

    @property
    def has_min(self) -> bool:
        return self._flag(EbOptions.MIN)

    @property
    def has_max(self) -> bool:
        return self._flag(EbOptions.MAX)

    @property
    def has_scale(self) -> bool:
        return self._flag(EbOptions.SCALE)

    @property
    def has_offset(self) -> bool:
        return self._flag(EbOptions.OFFSET)

    def _flag(self, flag: EbOptions) -> bool:
        if self.data_type == EbDataType.UNDOCUMENTED:
            return False
        return bool(self.options & flag)

    def serialize(self) -> bytes:
        return self._STRUCT.pack(
            self.reserved, self.data_type, self.options,
            encode_text(self.name, self.NAME_LENGTH, "name"),
            self.unused,
            *self.no_data, *self.minval, *self.maxval, *self.scale, *self.offset,
            encode_text(self.description, self.DESCRIPTION_LENGTH, "description"),
        )

    @classmethod
    def deserialize(cls, data: Buffer, offset: int = 0) -> "EbField":
        check_buffer(data, offset + cls.SIZE, cls.__name__)
        values = cls._STRUCT.unpack_from(data, offset)
        reserved, data_type, options, name, unused = values[:5]
        arrays = values[5:20]
        description = values[20]

        return cls(
            name=decode_text(name),
            data_type=data_type,
            options=options,
            description=decode_text(description),
            no_data=arrays[0:3],
            minval=arrays[3:6],
            maxval=arrays[6:9],
            scale=arrays[9:12],
            offset=arrays[12:15],
            reserved=reserved,
            unused=unused,
        )

    def __eq__(self, other: object) -> bool:
        # Byte comparison keeps NaN no-data markers equal to themselves
        return isinstance(other, EbField) and self.serialize() == other.serialize()

    def __repr__(self) -> str:
        return (f"EbField(name={self.name!r}, data_type={self.data_type}, "
                f"options={self.options:#04x})")


class EbVlr(Vlr):
    """
    Extra-attribute descriptor (LASF_Spec record 4).

    The payload is a plain run of 192-byte EbField entries, so the field
    count is data_length / 192. Adding a field changes size(); callers
    must fetch header() again after any add_field().
    """

    USER_ID = "LASF_Spec"
    RECORD_ID = 4
    DESCRIPTION = ""

    def __init__(self, items: Optional[List[EbField]] = None):
        self.items: List[EbField] = list(items) if items else []

    @classmethod
    def field_count_for(cls, byte_size: int) -> int:
        """
        Number of fields in a payload of ``byte_size`` bytes.

        Raises:
            MisalignedPayloadError: If byte_size is not a multiple of 192
        """
        if byte_size < 0 or byte_size % EbField.SIZE:
            raise MisalignedPayloadError(
                f"EbVlr length {byte_size} is not a multiple of {EbField.SIZE}")
        return byte_size // EbField.SIZE

    @classmethod
    def read(cls, stream: BinaryIO, byte_size: int) -> "EbVlr":
        cls.field_count_for(byte_size)
        return cls.deserialize(read_exact(stream, byte_size, cls.__name__))

    @classmethod
    def deserialize(cls, data: Buffer) -> "EbVlr":
        count = cls.field_count_for(len(data))
        return cls([EbField.deserialize(data, i * EbField.SIZE) for i in range(count)])

    def serialize(self) -> bytes:
        return b"".join(field.serialize() for field in self.items)

    def size(self) -> int:
        return EbField.SIZE * len(self.items)

    def add_field(self, field: EbField) -> None:
        """Append a field; size() grows by exactly 192 bytes."""
        if not isinstance(field, EbField):
            raise TypeError(f"Expected EbField, got {type(field)}")
        self.items.append(field)

    def get_field(self, name: str) -> EbField:
        """
        Look up a field by name.

        Raises:
            KeyError: If no field has this name
        """
        for field in self.items:
            if field.name == name:
                return field
        raise KeyError(f"No extra byte field named {name!r}")

    def point_byte_size(self) -> int:
        """Total extra bytes per point described by all fields."""
        return sum(field.byte_size for field in self.items)

    def __iter__(self) -> Iterator[EbField]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, EbVlr) and self.items == other.items

    def __repr__(self) -> str:
        names = ", ".join(field.name for field in self.items)
        return f"EbVlr([{names}])"
