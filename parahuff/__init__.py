"""Huffman compression in serial, blocked and chunked formats, and random test data."""

__version__ = "0.1.0"
__all__ = ["tree", "randdata", "serial", "blocked", "chunked"]