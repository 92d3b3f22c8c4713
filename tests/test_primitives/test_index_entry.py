import dataclasses

import pytest

from lazvlr.primitives import EvlrHeader, VlrHeader, VlrIndexEntry


class TestVlrIndexEntry:
    """Tests for VlrIndexEntry construction from headers."""

    def test_from_short_header(self):
        """All header fields and the offset are carried over."""
        header = VlrHeader("LASF_Projection", 2112, 500, "wkt")
        entry = VlrIndexEntry.from_header(header, 375)

        assert entry.user_id == "LASF_Projection"
        assert entry.record_id == 2112
        assert entry.data_length == 500
        assert entry.description == "wkt"
        assert entry.byte_offset == 375

    def test_from_extended_header(self):
        """Extended headers give the same entry shape."""
        header = EvlrHeader("copc", 1000, 2 ** 33, "EPT hierarchy")
        entry = VlrIndexEntry.from_header(header, 10 ** 9)

        assert entry.data_length == 2 ** 33
        assert entry.byte_offset == 10 ** 9

    def test_header_kind_agnostic(self):
        """Equal fields give equal entries whatever the header kind."""
        short = VlrIndexEntry.from_header(VlrHeader("copc", 1, 160, "info"), 100)
        extended = VlrIndexEntry.from_header(EvlrHeader("copc", 1, 160, "info"), 100)

        assert short == extended
        assert hash(short) == hash(extended)

    def test_immutable(self):
        """Entries cannot be changed after construction."""
        entry = VlrIndexEntry.from_header(VlrHeader("copc", 1, 160), 0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            entry.byte_offset = 5

    def test_negative_offset_rejected(self):
        """Offsets before the start of the file are rejected."""
        with pytest.raises(ValueError, match="Byte offset must be non-negative"):
            VlrIndexEntry.from_header(VlrHeader(), -1)

    def test_from_header_invalid_type(self):
        """Only header objects can build an entry."""
        with pytest.raises(TypeError, match="Expected VlrHeader or EvlrHeader"):
            VlrIndexEntry.from_header({"user_id": "copc"}, 0)

    def test_key_and_payload_offset(self):
        """key is the routing pair; payload starts after the short header."""
        entry = VlrIndexEntry.from_header(VlrHeader("copc", 1, 160), 375)

        assert entry.key == ("copc", 1)
        assert entry.extended is False
        assert entry.payload_offset() == 375 + 54

    def test_payload_offset_follows_header_kind(self):
        """An entry from an extended header skips the 60-byte header."""
        entry = VlrIndexEntry.from_header(EvlrHeader("copc", 1000, 320), 375)

        assert entry.extended is True
        assert entry.header_size == 60
        assert entry.payload_offset() == 375 + 60
