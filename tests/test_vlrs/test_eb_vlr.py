import io
import math
import struct

import pytest

from lazvlr.exceptions import MisalignedPayloadError, TruncatedInputError
from lazvlr.vlrs import EbDataType, EbField, EbOptions, EbVlr


def height_field() -> EbField:
    return EbField(
        name="height_above_ground",
        data_type=EbDataType.SHORT,
        options=EbOptions.NO_DATA | EbOptions.SCALE | EbOptions.OFFSET,
        description="HAG in cm",
        no_data=(-9999.0, 0.0, 0.0),
        scale=(0.01, 0.0, 0.0),
        offset=(0.0, 0.0, 0.0),
    )


class TestEbField:
    """Tests for one 192-byte extra byte descriptor."""

    def test_size(self):
        """One field is 192 bytes."""
        assert EbField.SIZE == 192
        assert len(EbField().serialize()) == 192

    def test_serialize_layout(self):
        """Fields land at their documented offsets."""
        data = height_field().serialize()

        assert data[0:2] == b"\0\0"
        assert data[2] == EbDataType.SHORT
        assert data[3] == 0b11001
        assert data[4:36] == b"height_above_ground" + b"\0" * 13
        assert data[36:40] == b"\0" * 4
        assert struct.unpack_from("<3d", data, 40) == (-9999.0, 0.0, 0.0)
        assert struct.unpack_from("<3d", data, 40 + 3 * 24) == (0.01, 0.0, 0.0)
        assert data[160:192] == b"HAG in cm" + b"\0" * 23

    def test_roundtrip(self):
        """A field survives serialize/deserialize."""
        field = height_field()
        assert EbField.deserialize(field.serialize()) == field

    def test_unused_components_preserved(self):
        """Scalar fields keep whatever the second and third slots hold."""
        field = EbField(name="intensity2", data_type=EbDataType.USHORT,
                        minval=(1.0, 123.5, -7.25), maxval=(2.0, float("inf"), 1e300))
        restored = EbField.deserialize(field.serialize())

        assert restored.minval == (1.0, 123.5, -7.25)
        assert restored.maxval[1] == float("inf")
        assert restored.maxval[2] == 1e300

    def test_nan_no_data_roundtrip(self):
        """NaN markers compare equal after a roundtrip."""
        field = EbField(name="nan", data_type=EbDataType.DOUBLE,
                        options=EbOptions.NO_DATA, no_data=(float("nan"), 0.0, 0.0))
        restored = EbField.deserialize(field.serialize())

        assert math.isnan(restored.no_data[0])
        assert restored == field

    def test_reserved_and_unused_bytes_preserved(self):
        """Reserved and unused bytes come back as written."""
        field = EbField(name="r", reserved=b"\x01\x02", unused=b"abcd")
        restored = EbField.deserialize(field.serialize())

        assert restored.reserved == b"\x01\x02"
        assert restored.unused == b"abcd"

    def test_non_utf8_text_roundtrip(self):
        """Latin-1 name and description bytes decode and encode unchanged."""
        data = struct.pack("<2sBB32s4s15d32s", b"\0\0", EbDataType.UCHAR, 0,
                           b"\xb0" * 20, b"\0" * 4, *([0.0] * 15), b"d\xe9bit" + b"\xe9" * 27)
        field = EbField.deserialize(data)

        assert field.serialize() == data
        assert EbVlr.deserialize(data).serialize() == data

    def test_name_too_long(self):
        """A name over 32 bytes is rejected."""
        with pytest.raises(ValueError, match="name too long"):
            EbField(name="n" * 33)

    def test_vector_width_checked(self):
        """Value arrays need exactly three components."""
        with pytest.raises(ValueError, match="requires 3 components"):
            EbField(scale=(1.0, 2.0))

    @pytest.mark.parametrize("data_type, count, base, size", [
        (1, 1, EbDataType.UCHAR, 1),
        (4, 1, EbDataType.SHORT, 2),
        (10, 1, EbDataType.DOUBLE, 8),
        (13, 2, EbDataType.USHORT, 4),
        (29, 3, EbDataType.FLOAT, 12),
        (30, 3, EbDataType.DOUBLE, 24),
    ])
    def test_element_layout(self, data_type, count, base, size):
        """Data types map to element count, base type and size."""
        field = EbField(data_type=data_type)
        assert field.element_count == count
        assert field.base_type == base
        assert field.byte_size == size

    def test_undocumented_bytes_size_in_options(self):
        """For data type 0 the options byte is the byte count."""
        field = EbField(data_type=EbDataType.UNDOCUMENTED, options=5)

        assert field.byte_size == 5
        assert field.element_count == 0
        assert field.has_no_data is False

    def test_reserved_data_type_size(self):
        """Reserved data types have no byte size."""
        with pytest.raises(ValueError, match="Reserved extra byte data type"):
            EbField(data_type=31).byte_size

    def test_option_flags(self):
        """Option bits map to the has_* properties."""
        field = height_field()
        assert field.has_no_data
        assert not field.has_min
        assert not field.has_max
        assert field.has_scale
        assert field.has_offset


class TestEbVlr:
    """Tests for the extra-attribute descriptor payload."""

    def test_identity(self):
        """The header carries the LASF_Spec/4 identity."""
        header = EbVlr().header()
        assert (header.user_id, header.record_id) == ("LASF_Spec", 4)

    def test_add_field_grows_size(self):
        """Each added field adds 192 bytes."""
        vlr = EbVlr()
        assert vlr.size() == 0

        vlr.add_field(height_field())
        assert vlr.size() == 192

        vlr.add_field(EbField(name="second", data_type=EbDataType.FLOAT))
        assert vlr.size() == 384
        assert vlr.header().data_length == 384

    def test_add_field_invalid_type(self):
        """Only EbField values can be added."""
        with pytest.raises(TypeError, match="Expected EbField"):
            EbVlr().add_field("height")

    def test_read_two_fields(self):
        """A 384-byte payload holds exactly two fields."""
        vlr = EbVlr([height_field(), EbField(name="b", data_type=EbDataType.UCHAR)])
        data = vlr.serialize()
        assert len(data) == 384

        restored = EbVlr.read(io.BytesIO(data), 384)
        assert len(restored) == 2
        assert restored == vlr

    def test_read_misaligned(self):
        """A 385-byte payload is rejected."""
        data = EbVlr([height_field(), height_field()]).serialize() + b"\0"
        with pytest.raises(MisalignedPayloadError, match="not a multiple of 192"):
            EbVlr.read(io.BytesIO(data), 385)

    def test_deserialize_misaligned(self):
        """A buffer off the field boundary is rejected."""
        with pytest.raises(MisalignedPayloadError):
            EbVlr.deserialize(b"\0" * 100)

    def test_read_truncated_stream(self):
        """A stream shorter than the length raises TruncatedInputError."""
        with pytest.raises(TruncatedInputError):
            EbVlr.read(io.BytesIO(b"\0" * 192), 384)

    def test_empty_payload(self):
        """An empty payload has no fields."""
        assert len(EbVlr.deserialize(b"")) == 0

    def test_get_field(self):
        """Fields are found by name."""
        vlr = EbVlr([height_field()])
        assert vlr.get_field("height_above_ground").data_type == EbDataType.SHORT

        with pytest.raises(KeyError):
            vlr.get_field("missing")

    def test_point_byte_size(self):
        """Per-point size sums every field."""
        vlr = EbVlr([height_field(), EbField(data_type=EbDataType.UNDOCUMENTED, options=3),
                     EbField(data_type=29)])
        assert vlr.point_byte_size() == 2 + 3 + 12
