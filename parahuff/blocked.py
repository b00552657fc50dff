"""Block-split Huffman format: every block carries its own frequency table.

Layout, all integers little-endian 32-bit:

* the original length and the number of blocks;
* the file offset of each block;
* per block: 256 byte frequencies followed by the block's packed codes.

The input is cut into ``blocks`` equal parts of ``length // blocks`` bytes;
the last part also takes the remainder.
"""

from __future__ import annotations

import struct
import sys
from itertools import accumulate
from typing import Optional, Sequence

from . import tree
from .serial import PathLike, _command_parser, _even_bounds, _run_command, _timed, _transcode

_PREAMBLE = struct.Struct("<II")
_FREQUENCIES = struct.Struct(f"<{tree.SYMBOLS}I")
FREQUENCY_TABLE_SIZE = _FREQUENCIES.size
_MAX_UINT32 = 2**32 - 1


def _header_size(blocks: int) -> int:
    return (blocks + 2) * 4


def _encode_block(chunk: bytes) -> bytes:
    frequencies = tree.count_frequencies(chunk)
    table = tree.build_code_table(tree.build_tree(frequencies))
    payload, _ = tree.pack_bits(chunk, table)
    return _FREQUENCIES.pack(*frequencies) + payload


def compress(data: bytes, blocks: int) -> bytes:
    """Compress ``data`` split into ``blocks`` independently coded blocks."""
    data = bytes(data)
    if blocks < 1:
        raise ValueError("the number of blocks must be at least 1")
    if len(data) > _MAX_UINT32:
        raise ValueError("input is too large for 32-bit lengths")

    encoded = [
        _encode_block(data[start : start + size])
        for start, size in _even_bounds(len(data), blocks)
    ]
    offsets = list(
        accumulate((len(block) for block in encoded[:-1]), initial=_header_size(blocks))
    )
    if offsets[-1] + len(encoded[-1]) > _MAX_UINT32:
        raise ValueError("compressed output is too large for 32-bit offsets")
    header = _PREAMBLE.pack(len(data), blocks) + struct.pack(f"<{blocks}I", *offsets)
    return header + b"".join(encoded)


def decompress(blob: bytes) -> bytes:
    """Restore the original bytes from data produced by :func:`compress`."""
    blob = bytes(blob)
    if len(blob) < _PREAMBLE.size:
        raise ValueError("compressed data is shorter than its header")
    length, blocks = _PREAMBLE.unpack_from(blob)
    if blocks == 0:
        raise ValueError("compressed data declares no blocks")
    header_size = _header_size(blocks)
    if len(blob) < header_size:
        raise ValueError(
            f"compressed data is {len(blob)} bytes, shorter than the "
            f"{header_size}-byte header"
        )
    offsets = struct.unpack_from(f"<{blocks}I", blob, _PREAMBLE.size)
    limits = [*offsets, len(blob)]

    output = bytearray()
    for index, ((_, size), begin, end) in enumerate(
        zip(_even_bounds(length, blocks), limits, limits[1:])
    ):
        if begin < header_size or end - begin < FREQUENCY_TABLE_SIZE:
            raise ValueError(f"block {index} has an invalid offset or is truncated")
        if size == 0:
            continue
        root = tree.build_tree(_FREQUENCIES.unpack_from(blob, begin))
        if root is None:
            raise ValueError(f"block {index} has no symbol frequencies")
        payload = blob[begin + FREQUENCY_TABLE_SIZE : end]
        decoded = tree.decode_bits(payload, root, limit=size)
        if len(decoded) != size:
            raise ValueError(
                f"block {index} decodes to {len(decoded)} bytes, expected {size}"
            )
        output += decoded
    return bytes(output)


def compress_file(source: PathLike, destination: PathLike, blocks: int) -> int:
    """Compress the file ``source`` into ``destination``; return bytes written."""
    return _transcode(compress, source, destination, blocks)


def decompress_file(source: PathLike, destination: PathLike) -> int:
    """Decompress the file ``source`` into ``destination``; return bytes written."""
    return _transcode(decompress, source, destination)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command entry point: ``compress|decompress <source> <destination>``."""
    args = _command_parser(
        "parahuff-blocked",
        "Huffman compression with independently coded blocks.",
        parts="blocks",
    ).parse_args(argv)

    def run() -> None:
        data = args.source.read_bytes()
        if args.action == "compress":
            result = _timed(compress, data, args.blocks)
        else:
            result = _timed(decompress, data)
        args.destination.write_bytes(result)

    return _run_command(run)


if __name__ == "__main__":
    sys.exit(main())