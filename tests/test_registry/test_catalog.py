import io

import pytest

from lazvlr import VlrCatalog, default_registry
from lazvlr.primitives import VlrHeader, VlrIndexEntry
from lazvlr.vlrs import CopcInfoVlr, LazVlr, WktVlr


def write_records(payloads) -> bytes:
    stream = io.BytesIO()
    for vlr in payloads:
        vlr.header().write(stream)
        vlr.write(stream)
    return stream.getvalue()


class TestVlrCatalog:
    """Tests for the payload-free record index."""

    def test_index_then_random_access(self):
        """Walk headers only, then seek straight to one payload."""
        payloads = [CopcInfoVlr(halfsize=8.0), LazVlr.from_format(6), WktVlr("LOCAL_CS[]")]
        stream = io.BytesIO(write_records(payloads))

        catalog = VlrCatalog()
        for _ in payloads:
            offset = stream.tell()
            header = VlrHeader.read(stream)
            catalog.add(VlrIndexEntry.from_header(header, offset))
            stream.seek(header.data_length, io.SEEK_CUR)

        entry = catalog.find("LASF_Projection", 2112)
        assert entry.byte_offset == 2 * VlrHeader.SIZE + 160 + LazVlr.from_format(6).size()

        stream.seek(entry.byte_offset)
        header = VlrHeader.read(stream)
        assert default_registry().decode(header, stream) == WktVlr("LOCAL_CS[]")

    def test_find_missing(self):
        """An empty catalog finds nothing."""
        assert VlrCatalog().find("copc", 1) is None

    def test_find_all_and_contains(self):
        """find_all filters by user id and optionally record id."""
        catalog = VlrCatalog()
        catalog.add(VlrIndexEntry("copc", 1, 160, "", 0))
        catalog.add(VlrIndexEntry("copc", 1000, 96, "", 500))
        catalog.add(VlrIndexEntry("LASF_Spec", 4, 192, "", 700))

        assert len(catalog.find_all("copc")) == 2
        assert len(catalog.find_all("copc", 1000)) == 1
        assert ("LASF_Spec", 4) in catalog
        assert ("LASF_Spec", 5) not in catalog
        assert [e.byte_offset for e in catalog] == [0, 500, 700]

    def test_get_entries_is_copy(self):
        """Clearing the returned list leaves the catalog intact."""
        catalog = VlrCatalog()
        catalog.add(VlrIndexEntry("copc", 1, 160, "", 0))
        catalog.get_entries().clear()
        assert len(catalog) == 1

    def test_add_invalid_type(self):
        """Only index entries can be added."""
        with pytest.raises(TypeError, match="Expected VlrIndexEntry"):
            VlrCatalog().add(("copc", 1))
