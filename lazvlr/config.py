"""
Package-wide constants for the VLR layer.

Record kinds carry their own identity (user id, record id, description) as
class attributes; the values here are the defaults shared between them.
"""

# Text fields inside headers and payloads
TEXT_ENCODING = "utf-8"
# Bytes that are not valid UTF-8 survive a decode/encode round trip
TEXT_ERRORS = "surrogateescape"

# Short VLR headers store data_length in 16 bits
MAX_VLR_DATA_LENGTH = 0xFFFF

# Compression descriptor defaults
DEFAULT_CHUNK_SIZE = 50_000
VARIABLE_CHUNK_SIZE = 0xFFFFFFFF  # chunk table carries per-chunk point counts
LAZPERF_VERSION = (3, 4, 3)  # (major, minor, revision)

# num_points / num_bytes are not trustworthy; writers fill them with -1
LEGACY_UNSET = b"\xff" * 8
