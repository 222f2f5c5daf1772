"""
HuffmanCodec

Builds the frequency table, tree and code table once from a source text and
then turns text into a string of '0'/'1' characters and back. Nothing is
mutable after construction, so one codec can be shared freely.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Union

import huffman as huff
from frequency import build_frequency_table
from text_source import iter_lines, read_text_file

logger = logging.getLogger(__name__)

NEWLINE = "\n"
BITS_PER_SYMBOL = 8 # size of one symbol before coding


@dataclass(frozen=True)
class CompressionStats:
    symbols: int
    original_bits: int
    encoded_bits: int
    compression_ratio: float  # encoded / original
    average_code_length: float


class HuffmanCodec:
    def __init__(self, text: str):
        ft = build_frequency_table(text)
        self._frequencies: Mapping[str, int] = MappingProxyType(dict(ft))
        self._tree = huff.build_huffman_tree(self._frequencies)
        self._codes: Mapping[str, str] = MappingProxyType(huff.generate_huffman_codes(self._tree))
        logger.debug("codec ready: %d symbols", len(self._codes))

    @classmethod
    def from_file(cls, path: Union[str, Path], encoding: Optional[str] = None) -> "HuffmanCodec":
        return cls(read_text_file(path, encoding))

    @property
    def frequencies(self) -> Mapping[str, int]:
        return self._frequencies

    @property
    def codes(self) -> Mapping[str, str]:
        return self._codes

    @property
    def tree(self) -> Optional[huff.HuffmanNode]:
        return self._tree

    @property
    def alphabet_size(self) -> int:
        return len(self._frequencies)

    def get_character_code(self, symbol: str) -> str:
        """Code for symbol, or "" when the symbol is not in the table."""
        return self._codes.get(symbol, "")

    def encode(self, text: str) -> str:
        """
        Encode text line by line, adding the newline code after every line
        that was followed by a line break.

        Raises UnencodableSymbolError if any symbol (newline included) has no code.
        """
        return huff.huffman_encode(self._symbols(text), self._codes)

    def encode_file(self, path: Union[str, Path], encoding: Optional[str] = None) -> str:
        return self.encode(read_text_file(path, encoding))

    def decode(self, bits: str) -> str:
        """
        Decode a '0'/'1' string produced by encode.

        Raises InvalidCodeError on a bad bit or a truncated code, and
        EmptyAlphabetError when the codec was built from an empty source.
        """
        return huff.huffman_decode(bits, self._tree)

    def compression_stats(self, text: str) -> CompressionStats:
        encoded = self.encode(text)
        original_bits = len(text) * BITS_PER_SYMBOL
        return CompressionStats(
            symbols=len(text),
            original_bits=original_bits,
            encoded_bits=len(encoded),
            compression_ratio=len(encoded) / max(1, original_bits),
            average_code_length=huff.average_code_length(self._codes, self._frequencies),
        )

    @staticmethod
    def _symbols(text: str) -> Iterator[str]:
        for line, terminated in iter_lines(text):
            yield from line
            if terminated:
                yield NEWLINE

    def __repr__(self) -> str:
        return f"HuffmanCodec(alphabet_size={self.alphabet_size})"
