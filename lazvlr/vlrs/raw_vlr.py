from typing import BinaryIO

from ..primitives import VlrHeader
from ..primitives.stream import Buffer, encode_text, read_exact
from .vlr import Vlr


class RawVlr(Vlr):
    """
    Payload of a record kind no decoder is registered for.

    The bytes are kept untouched so a writer can copy the record through.
    Identity comes from the header the record was read with.
    """

    def __init__(self, user_id: str, record_id: int, data: Buffer = b"", description: str = ""):
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"Expected bytes or bytearray, got {type(data)}")
        if not (0 <= record_id <= 0xFFFF):
            raise ValueError(f"record_id {record_id} out of range [0, 65535]")
        encode_text(user_id, VlrHeader.USER_ID_LENGTH, "user_id")
        encode_text(description, VlrHeader.DESCRIPTION_LENGTH, "description")

        self._user_id = user_id
        self._record_id = record_id
        self._description = description
        self.data = bytes(data)

    @property
    def user_id(self) -> str:
        return self._user_id

    @property
    def record_id(self) -> int:
        return self._record_id

    @property
    def description(self) -> str:
        return self._description

    @classmethod
    def read(cls, stream: BinaryIO, user_id: str, record_id: int, data_length: int,
             description: str = "") -> "RawVlr":
        data = read_exact(stream, data_length, f"record ({user_id!r}, {record_id})")
        return cls(user_id, record_id, data, description)

    def serialize(self) -> bytes:
        return self.data

    def size(self) -> int:
        return len(self.data)

    def __eq__(self, other: object) -> bool:
        return (isinstance(other, RawVlr) and
                self.user_id == other.user_id and
                self.record_id == other.record_id and
                self.description == other.description and
                self.data == other.data)

    def __repr__(self) -> str:
        return f"RawVlr(user_id={self.user_id!r}, record_id={self.record_id}, size={self.size()})"
