class VlrError(Exception):
    """Base class for VLR encode/decode errors."""
    pass


class TruncatedInputError(VlrError):
    """Raised when fewer bytes are available than a fixed-size record needs."""
    pass


class MisalignedPayloadError(VlrError):
    """Raised when a payload length is not a whole number of entries."""
    pass


class UnknownRecordError(VlrError):
    """Raised by a strict registry for an unregistered (user_id, record_id)."""
    pass
