from abc import ABC, abstractmethod
from typing import BinaryIO

from ..config import MAX_VLR_DATA_LENGTH
from ..primitives import EvlrHeader, VlrHeader


class Vlr(ABC):
    """
    Abstract payload of a VLR or EVLR.

    Every record kind knows its own identity (USER_ID, RECORD_ID,
    DESCRIPTION) and how many bytes it encodes to. The enclosing writer
    asks a payload for its header and writes header then payload; the
    enclosing reader picks the decoder from the header before any payload
    instance exists (see registry.VlrRegistry).
    """

    USER_ID = ""
    RECORD_ID = 0
    DESCRIPTION = ""

    @property
    def user_id(self) -> str:
        return self.USER_ID

    @property
    def record_id(self) -> int:
        return self.RECORD_ID

    @property
    def description(self) -> str:
        return self.DESCRIPTION

    @abstractmethod
    def size(self) -> int:
        """
        Return the payload length in bytes.

        This is exactly len(self.serialize()) and is the value written
        to the header's data_length.
        """
        pass

    @abstractmethod
    def serialize(self) -> bytes:
        """Encode the payload (without any header)."""
        pass

    def write(self, stream: BinaryIO) -> None:
        """Write the encoded payload at the current stream position."""
        stream.write(self.serialize())

    def header(self) -> VlrHeader:
        """
        Return the short header describing this payload.

        Raises:
            ValueError: If the payload is too large for a 16-bit data_length
        """
        size = self.size()
        if size > MAX_VLR_DATA_LENGTH:
            raise ValueError(
                f"{type(self).__name__} payload of {size} bytes does not fit a VLR "
                f"(max {MAX_VLR_DATA_LENGTH}); use extended_header()")

        return VlrHeader(
            user_id=self.user_id,
            record_id=self.record_id,
            data_length=size,
            description=self.description,
        )

    def extended_header(self) -> EvlrHeader:
        """Return the extended header describing this payload."""
        return EvlrHeader(
            user_id=self.user_id,
            record_id=self.record_id,
            data_length=self.size(),
            description=self.description,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(size={self.size()})"
