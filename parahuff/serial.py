"""Single-stream Huffman format: length, 256 frequencies, then packed codes."""

from __future__ import annotations

import argparse
import os
import struct
import sys
import time
from pathlib import Path
from typing import Callable, Iterator, Optional, Sequence, Union

from .tree import SYMBOLS, build_code_table, build_tree, count_frequencies, decode_bits, pack_bits

_HEADER = struct.Struct(f"<{SYMBOLS + 1}Q")
HEADER_SIZE = _HEADER.size

PathLike = Union[str, Path]


def _encode(data: bytes, frequencies: Sequence[int]) -> bytes:
    table = build_code_table(build_tree(frequencies))
    payload, _ = pack_bits(data, table)
    return _HEADER.pack(len(data), *frequencies) + payload


def _even_bounds(length: int, parts: int) -> Iterator[tuple[int, int]]:
    """Yield ``(start, size)`` for ``parts`` slices of ``length`` bytes.

    Every slice holds ``length // parts`` bytes; the last also takes the
    remainder.
    """
    base = length // parts
    for index in range(parts):
        size = base if index < parts - 1 else length - (parts - 1) * base
        yield index * base, size


def _transcode(
    action: Callable[..., bytes], source: PathLike, destination: PathLike, *args
) -> int:
    """Apply ``action`` to the file ``source``, write ``destination``, return its size."""
    result = action(Path(source).read_bytes(), *args)
    Path(destination).write_bytes(result)
    return len(result)


def compress(data: bytes) -> bytes:
    """Compress ``data`` into the serial format.

    The result is the input length and the 256 byte frequencies as
    little-endian 64-bit integers, followed by the packed Huffman codes.
    """
    data = bytes(data)
    return _encode(data, count_frequencies(data))


def decompress(blob: bytes) -> bytes:
    """Restore the original bytes from data produced by :func:`compress`."""
    blob = bytes(blob)
    if len(blob) < HEADER_SIZE:
        raise ValueError(
            f"compressed data is {len(blob)} bytes, shorter than the "
            f"{HEADER_SIZE}-byte header"
        )
    length, *frequencies = _HEADER.unpack_from(blob)
    if length == 0:
        return b""
    root = build_tree(frequencies)
    if root is None:
        raise ValueError("header has no symbol frequencies for a non-empty output")
    output = decode_bits(blob[HEADER_SIZE:], root, limit=length)
    if len(output) != length:
        raise ValueError(
            f"compressed data decodes to {len(output)} bytes, expected {length}"
        )
    return output


def compress_file(source: PathLike, destination: PathLike) -> int:
    """Compress the file ``source`` into ``destination``; return bytes written."""
    return _transcode(compress, source, destination)


def decompress_file(source: PathLike, destination: PathLike) -> int:
    """Decompress the file ``source`` into ``destination``; return bytes written."""
    return _transcode(decompress, source, destination)


def _report_time(started: float) -> None:
    elapsed_ms = int((time.process_time() - started) * 1000)
    print(f"Time taken: {elapsed_ms // 1000}:{elapsed_ms % 1000} s")


def _timed(action: Callable[..., bytes], *args) -> bytes:
    """Run ``action`` and print the processor time it took."""
    started = time.process_time()
    result = action(*args)
    _report_time(started)
    return result


def _command_parser(
    prog: str, description: str, parts: Optional[str] = None
) -> argparse.ArgumentParser:
    """Build the ``compress|decompress <source> <destination>`` parser.

    With ``parts`` set, a ``--<parts>`` option gives the number of pieces to
    split the input into.
    """
    parser = argparse.ArgumentParser(prog=prog, description=description)
    parser.add_argument("action", choices=("compress", "decompress"))
    parser.add_argument("source", type=Path)
    parser.add_argument("destination", type=Path)
    if parts is not None:
        parser.add_argument(
            f"--{parts}",
            type=int,
            default=os.cpu_count() or 1,
            help=f"number of {parts} to split the input into when compressing",
        )
    return parser


def _run_command(run: Callable[[], None]) -> int:
    """Run a command body, reporting file and format errors as exit status 1."""
    try:
        run()
    except (OSError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


def _run_compress(source: Path, destination: Path) -> None:
    data = source.read_bytes()
    started = time.process_time()
    frequencies = count_frequencies(data)
    for letter, count in enumerate(frequencies):
        if count:
            print(f"{chr(letter)} {count}")
    result = _encode(data, frequencies)
    _report_time(started)
    destination.write_bytes(result)


def _run_decompress(source: Path, destination: Path) -> None:
    blob = source.read_bytes()
    destination.write_bytes(_timed(decompress, blob))


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command entry point: ``compress|decompress <source> <destination>``."""
    args = _command_parser(
        "parahuff-serial", "Huffman compression of a single file."
    ).parse_args(argv)
    handler = _run_compress if args.action == "compress" else _run_decompress
    return _run_command(lambda: handler(args.source, args.destination))


if __name__ == "__main__":
    sys.exit(main())