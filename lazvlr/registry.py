"""
Dispatch from a record header to the decoder for its payload.

A reader decodes a header first, then asks the registry which payload
class owns the header's (user_id, record_id) pair. Decoders are plain
callables taking ``(stream, data_length)``; the payload classmethods
``read`` have exactly that shape.
"""

import io
import logging
from typing import BinaryIO, Callable, Dict, Iterator, Optional, Tuple, Union

from .exceptions import UnknownRecordError
from .primitives import EvlrHeader, VlrHeader
from .primitives.stream import Buffer
from .vlrs import (
    COPC_HIERARCHY_RECORD_ID,
    COPC_USER_ID,
    CopcInfoVlr,
    EbVlr,
    HierarchyPage,
    LazVlr,
    RawVlr,
    WktVlr,
)

logger = logging.getLogger(__name__)

Decoder = Callable[[BinaryIO, int], object]
RecordKey = Tuple[str, int]


class VlrRegistry:
    """
    Mapping of (user_id, record_id) to payload decoders.

    In strict mode an unknown pair raises UnknownRecordError; otherwise
    the payload is returned as a RawVlr so it can be copied through.
    """

    def __init__(self, strict: bool = False):
        self.strict = strict
        self._decoders: Dict[RecordKey, Decoder] = {}

    def register(self, user_id: str, record_id: int, decoder: Decoder) -> None:
        """
        Register the decoder for a record kind.

        Raises:
            ValueError: If the pair already has a decoder
        """
        key = (user_id, record_id)
        if key in self._decoders:
            raise ValueError(f"A decoder is already registered for {key}")
        self._decoders[key] = decoder

    def unregister(self, user_id: str, record_id: int) -> None:
        self._decoders.pop((user_id, record_id), None)

    def lookup(self, user_id: str, record_id: int) -> Optional[Decoder]:
        return self._decoders.get((user_id, record_id))

    def decode(self, header: Union[VlrHeader, EvlrHeader], stream: BinaryIO):
        """
        Decode the payload that follows ``header`` in ``stream``.

        Exactly header.data_length bytes are consumed on success.

        Raises:
            UnknownRecordError: In strict mode, for an unregistered pair
            TruncatedInputError: If the stream ends inside the payload
            MisalignedPayloadError: If the length does not fit the kind
        """
        decoder = self.lookup(header.user_id, header.record_id)
        if decoder is None:
            if self.strict:
                raise UnknownRecordError(
                    f"No decoder registered for ({header.user_id!r}, {header.record_id})")
            logger.warning("No decoder for (%r, %d), keeping %d raw bytes",
                           header.user_id, header.record_id, header.data_length)
            return RawVlr.read(stream, header.user_id, header.record_id,
                               header.data_length, header.description)

        logger.debug("Decoding (%r, %d) with %s, %d bytes",
                     header.user_id, header.record_id,
                     getattr(decoder, "__qualname__", decoder), header.data_length)
        return decoder(stream, header.data_length)

    def decode_bytes(self, header: Union[VlrHeader, EvlrHeader], data: Buffer):
        """Decode a payload already held in memory."""
        return self.decode(header, io.BytesIO(bytes(data)))

    def __contains__(self, key: RecordKey) -> bool:
        return key in self._decoders

    def __iter__(self) -> Iterator[RecordKey]:
        return iter(self._decoders)

    def __len__(self) -> int:
        return len(self._decoders)


def default_registry(strict: bool = False) -> VlrRegistry:
    """Return a registry that knows every payload kind of this package."""
    registry = VlrRegistry(strict=strict)
    for kind in (LazVlr, EbVlr, WktVlr, CopcInfoVlr):
        registry.register(kind.USER_ID, kind.RECORD_ID, kind.read)
    registry.register(COPC_USER_ID, COPC_HIERARCHY_RECORD_ID, HierarchyPage.read)
    return registry
