import heapq

import pytest
from hypothesis import given, strategies as st

from parahuff.tree import (
    HuffmanNode,
    build_code_table,
    build_tree,
    count_frequencies,
    decode_bits,
    pack_bits,
)

_inputs = st.binary(min_size=1, max_size=400)


def _tree(data):
    return build_tree(count_frequencies(data))


def _encoded(data):
    root = _tree(data)
    payload, bit_count = pack_bits(data, build_code_table(root))
    return root, payload, bit_count


def _optimal_cost(frequencies):
    heap = [count for count in frequencies if count > 0]
    heapq.heapify(heap)
    cost = 0
    while len(heap) > 1:
        merged = heapq.heappop(heap) + heapq.heappop(heap)
        cost += merged
        heapq.heappush(heap, merged)
    return cost


def test_count_frequencies_counts_each_byte():
    frequencies = count_frequencies(b"abracadabra")
    assert len(frequencies) == 256
    assert frequencies[ord("a")] == 5
    assert frequencies[ord("b")] == 2
    assert sum(frequencies) == len(b"abracadabra")


def test_build_tree_empty_returns_none():
    assert build_tree([0] * 256) is None
    assert build_code_table(None) == {}


@pytest.mark.parametrize(
    "frequencies", [[1] * 10, [0] * 3 + [-1] + [0] * 252]
)
def test_build_tree_rejects_bad_tables(frequencies):
    with pytest.raises(ValueError):
        build_tree(frequencies)


def test_single_symbol_tree_is_leaf():
    root = _tree(b"zzzz")
    assert root.is_leaf()
    assert root.letter == ord("z")
    assert root.count == 4
    assert build_code_table(root) == {ord("z"): ""}


def test_worked_example_codes_and_packing():
    table = build_code_table(_tree(b"aab"))
    assert table == {ord("b"): "0", ord("a"): "1"}
    assert pack_bits(b"aab", table) == (b"\xc0", 3)


def test_root_count_is_total():
    data = b"the quick brown fox jumps over the lazy dog"
    root = _tree(data)
    assert root.count == len(data)
    assert not root.is_leaf()


@given(_inputs)
def test_code_table_is_prefix_free_and_complete(data):
    table = build_code_table(_tree(data))
    assert set(table) == set(data)
    codes = sorted(table.values())
    if len(codes) > 1:
        for first, second in zip(codes, codes[1:]):
            assert not second.startswith(first)
        assert sum(2.0 ** -len(code) for code in codes) == pytest.approx(1.0)


@given(_inputs)
def test_encoded_length_is_optimal(data):
    _, _, bit_count = _encoded(data)
    assert bit_count == _optimal_cost(count_frequencies(data))


@given(_inputs)
def test_round_trip_with_bit_count(data):
    root, payload, bit_count = _encoded(data)
    assert len(payload) == (bit_count + 7) // 8
    assert decode_bits(payload, root, bit_count, len(data)) == data
    if not root.is_leaf():
        assert decode_bits(payload, root, bit_count) == data


@given(_inputs)
def test_round_trip_with_limit_only(data):
    root, payload, _ = _encoded(data)
    assert decode_bits(payload, root, limit=len(data)) == data


def test_limit_truncates_output():
    data = b"mississippi"
    root, payload, bit_count = _encoded(data)
    assert decode_bits(payload, root, bit_count, 4) == data[:4]
    assert decode_bits(payload, root, bit_count, 0) == b""


def test_deep_tree_round_trip():
    frequencies = [0] * 256
    a, b = 1, 1
    for letter in range(40):
        frequencies[letter] = a
        a, b = b, a + b
    root = build_tree(frequencies)
    table = build_code_table(root)
    assert max(len(code) for code in table.values()) == 39
    data = bytes(range(40)) * 3
    payload, bit_count = pack_bits(data, table)
    assert decode_bits(payload, root, bit_count) == data


def test_pack_bits_missing_symbol():
    with pytest.raises(ValueError):
        pack_bits(b"abc", build_code_table(_tree(b"ab")))


def test_pack_bits_empty():
    assert pack_bits(b"", build_code_table(_tree(b"ab"))) == (b"", 0)


def test_decode_single_leaf_with_limit():
    leaf = HuffmanNode(count=3, letter=ord("q"))
    assert decode_bits(b"", leaf, 0, 3) == b"qqq"


def test_decode_without_tree_and_data():
    assert decode_bits(b"", None) == b""


@pytest.mark.parametrize(
    "payload, root, bit_count",
    [
        (b"", HuffmanNode(count=3, letter=ord("q")), None),
        (b"\x00", _tree(b"ab"), 9),
        (b"\x00", _tree(b"ab"), -1),
        (b"\x01", None, None),
    ],
)
def test_decode_rejects_bad_arguments(payload, root, bit_count):
    with pytest.raises(ValueError):
        decode_bits(payload, root, bit_count)