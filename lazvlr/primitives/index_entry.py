from dataclasses import dataclass, field
from typing import Union

from .header import EvlrHeader, VlrHeader


@dataclass(frozen=True)
class VlrIndexEntry:
    """
    Catalog entry locating a record inside a file without its payload.

    An entry built from a VlrHeader and one built from an EvlrHeader have
    the same shape and compare equal: data_length is always carried as a
    64-bit count. extended only records which header kind precedes the
    payload, so payload_offset needs no hint from the caller.
    byte_offset is the absolute position of the record header in the file.
    """

    user_id: str
    record_id: int
    data_length: int
    description: str
    byte_offset: int
    extended: bool = field(default=False, compare=False)

    def __post_init__(self):
        if self.byte_offset < 0:
            raise ValueError(
                f"Byte offset must be non-negative, got {self.byte_offset}")

    @classmethod
    def from_header(cls, header: Union[VlrHeader, EvlrHeader], byte_offset: int) -> "VlrIndexEntry":
        """Build an entry from either header kind and the record's file offset."""
        if not isinstance(header, VlrHeader):
            raise TypeError(
                f"Expected VlrHeader or EvlrHeader, got {type(header)}")

        return cls(
            user_id=header.user_id,
            record_id=header.record_id,
            data_length=header.data_length,
            description=header.description,
            byte_offset=byte_offset,
            extended=isinstance(header, EvlrHeader),
        )

    @property
    def key(self) -> tuple:
        """The (user_id, record_id) pair identifying the record kind."""
        return (self.user_id, self.record_id)

    @property
    def header_size(self) -> int:
        """Size of the header kind this entry was read from."""
        return EvlrHeader.SIZE if self.extended else VlrHeader.SIZE

    def payload_offset(self) -> int:
        """Absolute offset of the first payload byte after the header."""
        return self.byte_offset + self.header_size

    def __str__(self) -> str:
        return (f"VlrIndexEntry(user_id={self.user_id!r}, record_id={self.record_id}, "
                f"length={self.data_length}, offset={self.byte_offset})")
