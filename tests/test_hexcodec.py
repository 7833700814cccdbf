# tests/test_hexcodec.py
import pytest

from lector_nfc_qt5.codec.hexcodec import DecodeError, DecodeErrorKind, decode, encode


def test_encode_pads_and_uppercases():
    assert encode(b"\x05\xff\x00\xab") == "05FF00AB"


def test_encode_accepts_pyscard_int_lists():
    assert encode([0x3B, 0x8F, 0x80]) == "3B8F80"


def test_encode_empty():
    assert encode(b"") == ""


def test_encode_with_separator():
    assert encode(b"\x04\xa1\xb2", " ") == "04 A1 B2"


@pytest.mark.parametrize("data", [b"", b"\x00", bytes(range(256)), b"\xe8\x03" + bytes(14)])
def test_round_trip(data):
    assert decode(encode(data)) == data


def test_decode_is_case_insensitive():
    assert decode("ff") == decode("FF") == b"\xff"
    assert decode("aBcD") == b"\xab\xcd"


def test_decode_empty():
    assert decode("") == b""


@pytest.mark.parametrize("text", ["A", "ABC", "0000F"])
def test_decode_odd_length(text):
    with pytest.raises(DecodeError) as exc:
        decode(text)
    assert exc.value.kind is DecodeErrorKind.INVALID_LENGTH


@pytest.mark.parametrize("text", ["GG01", "0x01", "12 4", "é1"])
def test_decode_non_hex(text):
    with pytest.raises(DecodeError) as exc:
        decode(text)
    assert exc.value.kind is DecodeErrorKind.INVALID_CHARACTER


def test_decode_error_is_a_value_error():
    with pytest.raises(ValueError):
        decode("Z0")


@pytest.mark.parametrize("data", [[256], [0x12, -1], [0x1FF]])
def test_encode_rejects_out_of_range_values(data):
    with pytest.raises(ValueError):
        encode(data)
