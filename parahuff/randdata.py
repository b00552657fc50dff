"""Generation of files filled with random bytes, sized by strings such as '1.5MB'."""

from __future__ import annotations

import random
import re
import sys
from pathlib import Path
from typing import Optional, Sequence, Union

_MAX_ARGUMENT_LENGTH = 1000
_MAX_SIZE = 2**64 - 1
_UNIT_POWERS = {"k": 1, "m": 2, "g": 3}
_FLOAT = re.compile(r"\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_INTEGER_PREFIX = re.compile(r"\s*\+?(\d+)")

USAGE = (
    "Usage: {prog} <file> <size>\n"
    'Size can also be "<number>KB", "<number>MB", or "<number>GB"'
)


def parse_size(text: str) -> int:
    """Parse a byte count such as '100', '2KB', '1.5MB' or '20GB'.

    Raises ValueError when the text is not a valid, positive size.
    """
    if not text or len(text) >= _MAX_ARGUMENT_LENGTH:
        raise ValueError(f"invalid size: {text!r}")

    if text[-1] in "Bb":
        if len(text) < 2:
            raise ValueError(f"invalid size: {text!r}")
        power = _UNIT_POWERS.get(text[-2].lower())
        number = text[:-2]
        if power is None or not _FLOAT.fullmatch(number):
            raise ValueError(f"invalid size: {text!r}")
        value = float(number)
        if value <= 0.0:
            raise ValueError(f"invalid size: {text!r}")
        for _ in range(power):
            value *= 1024.0
        size = int(value)
    else:
        match = _INTEGER_PREFIX.match(text)
        if match is None:
            raise ValueError(f"invalid size: {text!r}")
        size = min(int(match.group(1)), _MAX_SIZE)

    if size == 0:
        raise ValueError(f"invalid size: {text!r}")
    return size


def generate(size: int, seed: Optional[int] = None) -> bytes:
    """Return ``size`` random bytes; the same seed gives the same bytes."""
    if size < 0:
        raise ValueError("size must not be negative")
    return random.Random(seed).randbytes(size)


def write_random_file(
    path: Union[str, Path], size: int, seed: Optional[int] = None
) -> Path:
    """Write ``size`` random bytes to ``path`` and return the path."""
    target = Path(path)
    target.write_bytes(generate(size, seed))
    return target


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command entry point: ``<file> <size>``."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 2:
        print(USAGE.format(prog="parahuff-randdata"), file=sys.stderr)
        return 1
    path, size_text = args
    try:
        size = parse_size(size_text)
    except ValueError:
        print("ERROR: invalid file size.", file=sys.stderr)
        return 1
    write_random_file(path, size)
    return 0


if __name__ == "__main__":
    sys.exit(main())