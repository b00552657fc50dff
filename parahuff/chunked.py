"""Chunked Huffman format: one shared code table, independently padded chunks.

Layout, all integers little-endian:

* the original length as a 64-bit integer;
* the 256 byte frequencies of the whole input as 64-bit integers;
* the number of chunks as a 32-bit integer;
* the length in bits of each chunk's code stream as 64-bit integers;
* each chunk's packed codes, padded with zero bits to a whole byte.

The input is cut into ``chunks`` equal parts of ``length // chunks`` bytes;
the last part also takes the remainder. Every chunk is coded with the tree
built from the frequencies of the whole input.
"""

from __future__ import annotations

import struct
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from . import tree
from .serial import PathLike, _command_parser, _even_bounds, _run_command, _transcode

_PREAMBLE = struct.Struct(f"<{tree.SYMBOLS + 1}QI")
PREAMBLE_SIZE = _PREAMBLE.size
_BIT_LENGTH_SIZE = 8
_MAX_UINT32 = 2**32 - 1


class ChunkedFormatError(ValueError):
    """Raised when data does not follow the chunked format."""


@dataclass(frozen=True)
class _Header:
    length: int
    frequencies: tuple[int, ...]
    bit_lengths: tuple[int, ...]

    @property
    def size(self) -> int:
        return PREAMBLE_SIZE + _BIT_LENGTH_SIZE * len(self.bit_lengths)


def _byte_length(bits: int) -> int:
    return (bits + 7) // 8


def _read_header(blob: bytes) -> _Header:
    if len(blob) < PREAMBLE_SIZE:
        raise ChunkedFormatError(
            f"compressed data is {len(blob)} bytes, shorter than the "
            f"{PREAMBLE_SIZE}-byte header"
        )
    length, *rest = _PREAMBLE.unpack_from(blob)
    frequencies, chunks = tuple(rest[: tree.SYMBOLS]), rest[tree.SYMBOLS]
    total = sum(frequencies)
    if total != length:
        raise ChunkedFormatError(
            f"sum of global frequencies {total} does not equal output length {length}"
        )
    if len(blob) < PREAMBLE_SIZE + _BIT_LENGTH_SIZE * chunks:
        raise ChunkedFormatError(
            f"compressed data is {len(blob)} bytes, too short for {chunks} chunk lengths"
        )
    bit_lengths = struct.unpack_from(f"<{chunks}Q", blob, PREAMBLE_SIZE)
    return _Header(length, frequencies, tuple(bit_lengths))


def compress(data: bytes, chunks: int) -> bytes:
    """Compress ``data`` as ``chunks`` chunks sharing one Huffman code table."""
    data = bytes(data)
    if chunks < 1:
        raise ValueError("the number of chunks must be at least 1")
    if chunks > _MAX_UINT32:
        raise ValueError("the number of chunks must fit in 32 bits")

    frequencies = tree.count_frequencies(data)
    table = tree.build_code_table(tree.build_tree(frequencies))
    encoded = [
        tree.pack_bits(data[start : start + size], table)
        for start, size in _even_bounds(len(data), chunks)
    ]
    bit_lengths = [bits for _, bits in encoded]
    header = _PREAMBLE.pack(len(data), *frequencies, chunks) + struct.pack(
        f"<{chunks}Q", *bit_lengths
    )
    return header + b"".join(payload for payload, _ in encoded)


def decompress(blob: bytes) -> bytes:
    """Restore the original bytes from data produced by :func:`compress`."""
    blob = bytes(blob)
    header = _read_header(blob)
    payload = blob[header.size :]
    expected = sum(_byte_length(bits) for bits in header.bit_lengths)
    if expected != len(payload):
        raise ChunkedFormatError(
            f"compressed region is {len(payload)} bytes, expected {expected}"
        )

    root = tree.build_tree(header.frequencies)
    if root is None:
        return b""
    if root.is_leaf():
        if any(header.bit_lengths):
            raise ChunkedFormatError("a single-symbol input carries no code bits")
        return bytes([root.letter]) * header.length

    output = bytearray()
    offset = 0
    for bits in header.bit_lengths:
        size = _byte_length(bits)
        output += tree.decode_bits(payload[offset : offset + size], root, bit_count=bits)
        offset += size
    if len(output) != header.length:
        raise ChunkedFormatError(
            f"compressed data decodes to {len(output)} bytes, expected {header.length}"
        )
    return bytes(output)


def compress_file(source: PathLike, destination: PathLike, chunks: int) -> int:
    """Compress the file ``source`` into ``destination``; return bytes written."""
    return _transcode(compress, source, destination, chunks)


def decompress_file(source: PathLike, destination: PathLike) -> int:
    """Decompress the file ``source`` into ``destination``; return bytes written."""
    return _transcode(decompress, source, destination)


def _format_lengths(bit_lengths: Sequence[int]) -> str:
    return "[" + ", ".join(str(bits) for bits in bit_lengths) + "]"


def _run_compress(source: Path, destination: Path, chunks: int) -> None:
    started = time.perf_counter_ns()
    data = source.read_bytes()
    result = compress(data, chunks)
    header = _read_header(result)
    print(f"With {chunks} chunks and bit lengths {_format_lengths(header.bit_lengths)}")
    destination.write_bytes(result)
    elapsed = time.perf_counter_ns() - started
    print(
        f"Finished with {chunks} chunks | input size {len(data)} | "
        f"output size {len(result) - header.size} | nanoseconds {elapsed}"
    )


def _run_decompress(source: Path, destination: Path) -> None:
    blob = source.read_bytes()
    header = _read_header(blob)
    print(
        f"File contains {len(header.bit_lengths)} chunks with bit lengths: "
        f"{_format_lengths(header.bit_lengths)}"
    )
    started = time.process_time()
    result = decompress(blob)
    elapsed_ms = int((time.process_time() - started) * 1000)
    print(
        f"Compressed region length {len(blob) - header.size}, "
        f"output len {header.length}"
    )
    destination.write_bytes(result)
    print(f"Time taken: {elapsed_ms // 1000}:{elapsed_ms % 1000} s")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command entry point: ``compress|decompress <source> <destination>``."""
    args = _command_parser(
        "parahuff-chunked",
        "Huffman compression with a shared table and separate chunks.",
        parts="chunks",
    ).parse_args(argv)

    def run() -> None:
        if args.action == "compress":
            _run_compress(args.source, args.destination, args.chunks)
        else:
            _run_decompress(args.source, args.destination)

    return _run_command(run)


if __name__ == "__main__":
    sys.exit(main())