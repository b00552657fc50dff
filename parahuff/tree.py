"""Huffman tree construction, code tables and bit packing shared by all formats."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import islice
from typing import Iterable, Iterator, Mapping, Optional, Sequence

SYMBOLS = 256


@dataclass(eq=False)
class HuffmanNode:
    """A node of a Huffman tree; leaves carry a byte value in ``letter``."""

    count: int
    letter: int = 0
    left: Optional["HuffmanNode"] = None
    right: Optional["HuffmanNode"] = None

    def is_leaf(self) -> bool:
        """Return True when the node has no children."""
        return self.left is None and self.right is None


def count_frequencies(data: bytes) -> list[int]:
    """Return the number of occurrences of each of the 256 byte values."""
    frequencies = [0] * SYMBOLS
    for byte in data:
        frequencies[byte] += 1
    return frequencies


def build_tree(frequencies: Sequence[int]) -> Optional[HuffmanNode]:
    """Build the Huffman tree for a 256-entry frequency table.

    Leaves are created in ascending byte order; before every merge the
    unmerged nodes are stably sorted by count and the two smallest become
    the left and right children of a new node. Returns None when no symbol
    has a non-zero count, and the single leaf when only one symbol occurs.
    """
    if len(frequencies) != SYMBOLS:
        raise ValueError(f"expected {SYMBOLS} frequencies, got {len(frequencies)}")
    if any(count < 0 for count in frequencies):
        raise ValueError("frequencies must not be negative")

    nodes = [
        HuffmanNode(count=count, letter=letter)
        for letter, count in enumerate(frequencies)
        if count > 0
    ]
    distinct = len(nodes)
    if distinct == 0:
        return None

    root = nodes[0]
    for step in range(distinct - 1):
        merged = 2 * step
        end = distinct + step
        nodes[merged:end] = sorted(nodes[merged:end], key=lambda node: node.count)
        left, right = nodes[merged], nodes[merged + 1]
        root = HuffmanNode(count=left.count + right.count, left=left, right=right)
        nodes.append(root)
    return root


def build_code_table(root: Optional[HuffmanNode]) -> dict[int, str]:
    """Map every leaf's byte value to its code, written as a string of '0' and '1'."""
    table: dict[int, str] = {}
    if root is None:
        return table
    stack: list[tuple[HuffmanNode, str]] = [(root, "")]
    while stack:
        node, code = stack.pop()
        if node.is_leaf():
            table[node.letter] = code
            continue
        if node.right is not None:
            stack.append((node.right, code + "1"))
        if node.left is not None:
            stack.append((node.left, code + "0"))
    return table


def pack_bits(data: Iterable[int], table: Mapping[int, str]) -> tuple[bytes, int]:
    """Encode ``data`` with ``table``, most significant bit first.

    Returns the packed bytes, the last one padded with zero bits, and the
    number of meaningful bits.
    """
    try:
        bits = "".join(table[byte] for byte in data)
    except KeyError as exc:
        raise ValueError(f"symbol {exc.args[0]} has no code") from None
    bit_count = len(bits)
    if bit_count == 0:
        return b"", 0
    padded = bits + "0" * (-bit_count % 8)
    return int(padded, 2).to_bytes(len(padded) // 8, "big"), bit_count


def _iter_bits(payload: bytes, bit_count: int) -> Iterator[int]:
    bits = ((byte >> shift) & 1 for byte in payload for shift in range(7, -1, -1))
    return islice(bits, bit_count)


def decode_bits(
    payload: bytes,
    root: Optional[HuffmanNode],
    bit_count: Optional[int] = None,
    limit: Optional[int] = None,
) -> bytes:
    """Walk the tree over the bits of ``payload`` and return the decoded bytes.

    ``bit_count`` bounds how many bits are read (all of them by default);
    ``limit`` stops decoding once that many symbols have been produced.
    A tree made of a single leaf has empty codes, so it needs ``limit``.
    """
    available = len(payload) * 8
    if bit_count is None:
        bit_count = available
    elif not 0 <= bit_count <= available:
        raise ValueError(f"bit count {bit_count} outside 0..{available}")
    if limit is not None and limit < 0:
        raise ValueError("limit must not be negative")
    if limit == 0:
        return b""

    if root is None:
        if bit_count == 0:
            return b""
        raise ValueError("cannot decode bits without a tree")
    if root.is_leaf():
        if limit is None:
            raise ValueError("a single-symbol tree needs an explicit limit")
        return bytes([root.letter]) * limit

    output = bytearray()
    node = root
    for bit in _iter_bits(payload, bit_count):
        child = node.right if bit else node.left
        if child is None:
            raise ValueError("bit sequence leaves the tree")
        node = child
        if node.is_leaf():
            output.append(node.letter)
            node = root
            if limit is not None and len(output) >= limit:
                break
    return bytes(output)