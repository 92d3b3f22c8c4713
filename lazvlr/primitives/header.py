import struct
from dataclasses import dataclass
from typing import BinaryIO, ClassVar

from .stream import (
    Buffer, check_buffer, check_uint, decode_text, encode_text, read_exact)


@dataclass
class VlrHeader:
    """
    Header of a variable length record (VLR).

    Storage format (little-endian, 54 bytes):
    - 2 bytes: reserved (kept as-is)
    - 16 bytes: user id, NUL-padded
    - 2 bytes: record id
    - 2 bytes: data_length, byte count of the payload that follows
    - 32 bytes: description, NUL-padded

    data_length must equal the encoded payload length exactly, otherwise
    every record after this one is read from the wrong offset.
    """

    USER_ID_LENGTH: ClassVar[int] = 16
    DESCRIPTION_LENGTH: ClassVar[int] = 32
    MAX_DATA_LENGTH: ClassVar[int] = 0xFFFF
    SIZE: ClassVar[int] = 54
    _STRUCT: ClassVar[struct.Struct] = struct.Struct("<H16sHH32s")

    user_id: str = ""
    record_id: int = 0
    data_length: int = 0
    description: str = ""
    reserved: int = 0

    def __post_init__(self):
        owner = type(self).__name__
        check_uint(self.reserved, 0xFFFF, f"{owner}.reserved")
        check_uint(self.record_id, 0xFFFF, f"{owner}.record_id")
        check_uint(self.data_length, self.MAX_DATA_LENGTH, f"{owner}.data_length")

        encode_text(self.user_id, self.USER_ID_LENGTH, "user_id")
        encode_text(self.description, self.DESCRIPTION_LENGTH, "description")

    @classmethod
    def read(cls, stream: BinaryIO) -> "VlrHeader":
        """Read a header from the current stream position."""
        return cls.deserialize(read_exact(stream, cls.SIZE, cls.__name__))

    @classmethod
    def deserialize(cls, data: Buffer) -> "VlrHeader":
        """
        Decode a header from the start of an in-memory buffer.

        Raises:
            TruncatedInputError: If the buffer is shorter than SIZE
        """
        check_buffer(data, cls.SIZE, cls.__name__)
        reserved, user_id, record_id, data_length, description = \
            cls._STRUCT.unpack_from(data)
        return cls(
            user_id=decode_text(user_id),
            record_id=record_id,
            data_length=data_length,
            description=decode_text(description),
            reserved=reserved,
        )

    def serialize(self) -> bytes:
        """Encode the header to exactly SIZE bytes."""
        return self._STRUCT.pack(
            self.reserved,
            encode_text(self.user_id, self.USER_ID_LENGTH, "user_id"),
            self.record_id,
            self.data_length,
            encode_text(self.description, self.DESCRIPTION_LENGTH, "description"),
        )

    def write(self, stream: BinaryIO) -> None:
        stream.write(self.serialize())


@dataclass
class EvlrHeader(VlrHeader):
    """
    Header of an extended variable length record (EVLR).

    Same layout as VlrHeader except data_length is 64 bits wide, for
    payloads larger than 64 KiB (60 bytes in total).
    """

    MAX_DATA_LENGTH: ClassVar[int] = 0xFFFFFFFFFFFFFFFF
    SIZE: ClassVar[int] = 60
    _STRUCT: ClassVar[struct.Struct] = struct.Struct("<H16sHQ32s")
