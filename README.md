# parahuff

Huffman compression of byte data in three container formats, plus a small
tool for producing files of random bytes. Only the standard library is
needed.

- **serial** (`parahuff.serial`) – the whole input is coded with one Huffman
  tree. The file holds the original length and the 256 byte frequencies as
  little-endian 64-bit integers, followed by the packed codes.
- **blocked** (`parahuff.blocked`) – the input is cut into `blocks` parts of
  `length // blocks` bytes, the last part taking the remainder. Each block
  carries its own table of 256 frequencies and is coded on its own. All
  header fields are little-endian 32-bit integers: the original length, the
  number of blocks and the file offset of each block. Inputs and outputs
  must therefore stay below 4 GiB.
- **chunked** (`parahuff.chunked`) – the input is cut into chunks the same
  way, but every chunk is coded with one tree built from the frequencies of
  the whole input. The header records the original length, the global
  frequencies, the number of chunks and the exact bit length of every
  chunk; each chunk is padded to a whole byte.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Command line

```
parahuff-serial  compress|decompress SOURCE DESTINATION
parahuff-blocked compress|decompress SOURCE DESTINATION [--blocks N]
parahuff-chunked compress|decompress SOURCE DESTINATION [--chunks N]
parahuff-randdata FILE SIZE
```

`--blocks` and `--chunks` only matter when compressing; they default to the
number of CPUs. Decompression reads the count from the file.

- `parahuff-serial compress` prints every byte value that occurs with its
  count, then the processor time taken.
- `parahuff-blocked` prints the processor time taken.
- `parahuff-chunked compress` prints the bit length of each chunk and a
  summary with input size, compressed payload size and elapsed nanoseconds;
  `decompress` prints the chunk bit lengths, the payload and output lengths,
  and the processor time taken.

A file that cannot be read or written, or compressed data that is
malformed, is reported as `error: ...` on standard error with exit status 1.

`parahuff-randdata FILE SIZE` writes SIZE random bytes to FILE. SIZE is a
whole number of bytes, or a number (fractions allowed) followed by `KB`,
`MB` or `GB` in either case, meaning multiples of 1024, 1024² or 1024³. A
size that is missing, zero or malformed prints `ERROR: invalid file size.`
and exits with status 1; a wrong number of arguments prints usage.

## Library use

```python
from parahuff import serial, blocked, chunked, randdata

data = randdata.generate(4096, seed=1)

assert serial.decompress(serial.compress(data)) == data
assert blocked.decompress(blocked.compress(data, 4)) == data
assert chunked.decompress(chunked.compress(data, 4)) == data
```

Every format module also has `compress_file` and `decompress_file`, which
read a source path, write a destination path and return the number of bytes
written:

```python
serial.compress_file("input.bin", "input.huf")
serial.decompress_file("input.huf", "restored.bin")

blocked.compress_file("input.bin", "input.hufb", 8)
chunked.compress_file("input.bin", "input.hufc", 8)

randdata.write_random_file("random.bin", randdata.parse_size("1.5MB"), seed=7)
```

`randdata.parse_size` raises `ValueError` for an invalid size; `generate`
returns the same bytes for the same seed.

Malformed input raises `ValueError`. In the chunked format,
`chunked.ChunkedFormatError` (a `ValueError`) is raised when the header does
not agree with the data: frequencies that do not add up to the stored
length, a payload of the wrong size, or code bits that do not decode to the
stored length.

The Huffman machinery lives in `parahuff.tree`:

- `count_frequencies(data)` – 256 byte counts;
- `build_tree(frequencies)` – a tree of `HuffmanNode` objects (`None` for
  empty input, a single leaf when only one byte value occurs);
- `build_code_table(root)` – byte value to code string of `'0'`/`'1'`;
- `pack_bits(data, table)` – packed bytes, most significant bit first, and
  the number of meaningful bits;
- `decode_bits(payload, root, bit_count, limit)` – decoded bytes, reading at
  most `bit_count` bits and stopping after `limit` symbols.

## What it does not do

Blocks and chunks are coded one after another in a single process. The
package does not spread work across processes, machines or GPUs; the split
only determines the file layout.