from typing import BinaryIO, Union

from ..config import TEXT_ENCODING, TEXT_ERRORS
from ..exceptions import TruncatedInputError

Buffer = Union[bytes, bytearray, memoryview]


def read_exact(stream: BinaryIO, size: int, what: str = "record") -> bytes:
    """
    Read exactly ``size`` bytes from a binary stream.

    Args:
        stream: Any object with a ``read(n)`` method returning bytes
        size: Number of bytes required
        what: Name of the thing being read, used in the error message

    Returns:
        The bytes read

    Raises:
        TruncatedInputError: If the stream ends before ``size`` bytes
    """
    if size < 0:
        raise ValueError(f"Cannot read a negative byte count: {size}")

    data = stream.read(size)
    if data is None or len(data) < size:
        got = 0 if data is None else len(data)
        raise TruncatedInputError(
            f"{what} requires {size} bytes, stream provided {got}")
    return bytes(data)


def check_buffer(data: Buffer, size: int, what: str = "record") -> None:
    """Raise TruncatedInputError if ``data`` holds fewer than ``size`` bytes."""
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f"Expected bytes or bytearray, got {type(data)}")

    if len(data) < size:
        raise TruncatedInputError(
            f"{what} requires {size} bytes, buffer holds {len(data)}")


def check_uint(value: int, limit: int, what: str) -> None:
    """Raise TypeError/ValueError unless ``value`` is an int in [0, limit]."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{what} requires int, got {type(value)}")
    if not (0 <= value <= limit):
        raise ValueError(f"{what} value {value} out of range [0, {limit}]")


def check_float(value: float, what: str) -> None:
    """Raise TypeError unless ``value`` is a real number."""
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise TypeError(f"{what} requires float, got {type(value)}")


def encode_text(value: str, width: int, what: str) -> bytes:
    """
    Encode a text field, checking that it fits in ``width`` bytes.

    Bytes that are not valid UTF-8 come back from decode_text as lone
    surrogates and are restored here unchanged. The result is not padded;
    ``struct`` pads ``Ns`` fields with NULs.
    """
    if not isinstance(value, str):
        raise TypeError(f"{what} requires str, got {type(value)}")

    try:
        encoded = value.encode(TEXT_ENCODING, errors=TEXT_ERRORS)
    except UnicodeEncodeError as e:
        raise ValueError(f"{what} cannot be encoded: {e.reason}") from e
    if len(encoded) > width:
        raise ValueError(
            f"{what} too long: {len(encoded)} bytes > {width}")
    return encoded


def decode_text(raw: bytes) -> str:
    """Decode a fixed-width field, stopping at the first NUL."""
    end = raw.find(b"\0")
    if end != -1:
        raw = raw[:end]
    return raw.decode(TEXT_ENCODING, errors=TEXT_ERRORS)
