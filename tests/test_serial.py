import struct

import pytest
from hypothesis import given, strategies as st

from parahuff import serial

HEADER = 8 * 257


def test_empty_input_is_header_of_zeros():
    assert serial.compress(b"") == bytes(HEADER)
    assert serial.decompress(bytes(HEADER)) == b""


def test_header_holds_length_and_frequencies():
    blob = serial.compress(b"abcab")
    values = struct.unpack_from("<257Q", blob)
    assert values[0] == 5
    assert values[1 + ord("a")] == 2
    assert values[1 + ord("b")] == 2
    assert values[1 + ord("c")] == 1
    assert sum(values[1:]) == 5


def test_single_symbol_has_empty_payload():
    blob = serial.compress(b"zzzz")
    assert len(blob) == HEADER
    assert serial.decompress(blob) == b"zzzz"


def test_two_symbols_pack_into_one_byte():
    blob = serial.compress(b"ab")
    assert blob[HEADER:] == bytes([0x40])


@given(st.binary(max_size=2000))
def test_round_trip(data):
    assert serial.decompress(serial.compress(data)) == data


@given(st.binary(min_size=1, max_size=500))
def test_payload_never_exceeds_input(data):
    assert len(serial.compress(data)) - HEADER <= len(data)


def test_skewed_input_compresses():
    data = b"a" * 1000 + b"b" * 10 + b"c"
    blob = serial.compress(data)
    assert len(blob) - HEADER < len(data) // 4
    assert serial.decompress(blob) == data


def test_truncated_header_raises():
    with pytest.raises(ValueError):
        serial.decompress(b"\x00" * 100)


def test_truncated_payload_raises():
    data = bytes(range(256)) * 4
    blob = serial.compress(data)
    with pytest.raises(ValueError):
        serial.decompress(blob[: HEADER + 10])


def test_missing_frequencies_raise():
    blob = struct.pack("<257Q", 5, *([0] * 256))
    with pytest.raises(ValueError):
        serial.decompress(blob)


def test_file_round_trip(tmp_path):
    source = tmp_path / "input.bin"
    packed = tmp_path / "packed.bin"
    restored = tmp_path / "restored.bin"
    data = b"the quick brown fox jumps over the lazy dog" * 20
    source.write_bytes(data)
    written = serial.compress_file(source, packed)
    assert written == packed.stat().st_size
    assert serial.decompress_file(packed, restored) == len(data)
    assert restored.read_bytes() == data


def test_main_compress_and_decompress(tmp_path, capsys):
    source = tmp_path / "input.txt"
    packed = tmp_path / "packed.bin"
    restored = tmp_path / "restored.txt"
    source.write_bytes(b"hello huffman")
    assert serial.main(["compress", str(source), str(packed)]) == 0
    out = capsys.readouterr().out
    assert "Time taken:" in out
    assert "l 2" in out
    assert serial.main(["decompress", str(packed), str(restored)]) == 0
    assert restored.read_bytes() == b"hello huffman"


def test_main_reports_bad_input(tmp_path):
    broken = tmp_path / "broken.bin"
    broken.write_bytes(b"\x01\x02")
    assert serial.main(["decompress", str(broken), str(tmp_path / "out")]) == 1