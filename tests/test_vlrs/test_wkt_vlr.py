import io

import pytest

from lazvlr.exceptions import TruncatedInputError
from lazvlr.vlrs import WktVlr

WKT = 'PROJCS["WGS 84 / UTM zone 33N",GEOGCS["WGS 84"],UNIT["metre",1]]'


class TestWktVlr:
    """Tests for the coordinate-system text payload."""

    def test_identity(self):
        """The header carries the LASF_Projection/2112 identity."""
        header = WktVlr(WKT).header()
        assert (header.user_id, header.record_id) == ("LASF_Projection", 2112)
        assert header.data_length == len(WKT)

    def test_read_exact_byte_size(self):
        """Exactly byte_size bytes are consumed, no terminator assumed."""
        stream = io.BytesIO(WKT.encode() + b"NEXT")
        vlr = WktVlr.read(stream, len(WKT))

        assert vlr.wkt == WKT
        assert stream.read() == b"NEXT"

    def test_roundtrip_with_terminator(self):
        """A trailing NUL written by another tool is kept."""
        data = WKT.encode() + b"\0"
        vlr = WktVlr.deserialize(data)

        assert vlr.size() == len(data)
        assert vlr.serialize() == data
        assert vlr.text == WKT

    def test_non_utf8_bytes_preserved(self):
        """Bytes that are not UTF-8 are written back unchanged."""
        data = b"GEOGCS[\"caf\xe9\"]"
        assert WktVlr.deserialize(data).serialize() == data

    def test_multibyte_size(self):
        """size() counts encoded bytes, not characters."""
        assert WktVlr("é").size() == 2

    def test_read_truncated_stream(self):
        """A stream shorter than the length raises TruncatedInputError."""
        with pytest.raises(TruncatedInputError):
            WktVlr.read(io.BytesIO(b"abc"), 10)

    def test_invalid_type(self):
        """Only str is accepted."""
        with pytest.raises(TypeError, match="WktVlr requires str"):
            WktVlr(b"bytes")

    def test_equality(self):
        """Records compare by text."""
        assert WktVlr(WKT) == WktVlr(WKT)
        assert WktVlr(WKT) != WktVlr("")
