from typing import BinaryIO

from ..config import TEXT_ENCODING, TEXT_ERRORS
from ..primitives.stream import Buffer, read_exact
from .vlr import Vlr


class WktVlr(Vlr):
    """
    Coordinate reference system as OGC WKT text (LASF_Projection 2112).

    The text fills the whole payload: no length prefix and no terminator
    is assumed, and any trailing NULs a writer left in place are kept.
    Bytes that are not valid UTF-8 survive a round trip through
    surrogate escapes.
    """

    USER_ID = "LASF_Projection"
    RECORD_ID = 2112
    DESCRIPTION = ""

    def __init__(self, wkt: str = ""):
        if not isinstance(wkt, str):
            raise TypeError(f"WktVlr requires str, got {type(wkt)}")
        self.wkt = wkt

    @classmethod
    def read(cls, stream: BinaryIO, byte_size: int) -> "WktVlr":
        return cls.deserialize(read_exact(stream, byte_size, cls.__name__))

    @classmethod
    def deserialize(cls, data: Buffer) -> "WktVlr":
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"Expected bytes or bytearray, got {type(data)}")
        return cls(bytes(data).decode(TEXT_ENCODING, errors=TEXT_ERRORS))

    def serialize(self) -> bytes:
        return self.wkt.encode(TEXT_ENCODING, errors=TEXT_ERRORS)

    def size(self) -> int:
        return len(self.serialize())

    @property
    def text(self) -> str:
        """The WKT with any trailing NUL terminators removed."""
        return self.wkt.rstrip("\0")

    def __eq__(self, other: object) -> bool:
        return isinstance(other, WktVlr) and self.wkt == other.wkt

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        preview = self.text if len(self.text) <= 40 else self.text[:37] + "..."
        return f"WktVlr({preview!r})"
