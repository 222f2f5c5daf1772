import random

import pytest

from codec import HuffmanCodec
from huffman import EmptyAlphabetError, InvalidCodeError, UnencodableSymbolError, UnreadableSourceError, is_prefix_free

SAMPLE = "the quick brown fox\njumps over the lazy dog\n\twith tabs & symbols!\n"


def test_roundtrip_source_text():
	codec = HuffmanCodec(SAMPLE)
	assert codec.decode(codec.encode(SAMPLE)) == SAMPLE


def test_roundtrip_random_text_over_alphabet():
	codec = HuffmanCodec(SAMPLE)
	rng = random.Random(7)
	alphabet = sorted(codec.codes)
	for n in (1, 2, 3, 50, 500):
		text = "".join(rng.choice(alphabet) for _ in range(n))
		assert codec.decode(codec.encode(text)) == text


def test_roundtrip_all_byte_values():
	text = "".join(chr(i) for i in range(256)) * 3
	codec = HuffmanCodec(text)
	assert codec.alphabet_size == 256
	assert codec.decode(codec.encode(text)) == text


def test_codes_are_prefix_free():
	assert is_prefix_free(HuffmanCodec(SAMPLE).codes)


def test_determinism():
	assert dict(HuffmanCodec(SAMPLE).codes) == dict(HuffmanCodec(SAMPLE).codes)


def test_single_symbol_source():
	codec = HuffmanCodec("aaaa")
	assert codec.get_character_code("a") == "0"
	assert codec.encode("aaaa") == "0000"
	assert codec.decode("0000") == "aaaa"
	with pytest.raises(InvalidCodeError):
		codec.decode("0001")


def test_empty_source():
	codec = HuffmanCodec("")
	assert dict(codec.codes) == {}
	assert codec.tree is None
	assert codec.encode("") == ""
	assert codec.decode("") == ""
	with pytest.raises(EmptyAlphabetError):
		codec.decode("0")
	with pytest.raises(UnencodableSymbolError):
		codec.encode("a")


def test_unknown_symbol():
	codec = HuffmanCodec("ab")
	with pytest.raises(UnencodableSymbolError) as info:
		codec.encode("abc")
	assert info.value.symbol == "c"


def test_invalid_bit():
	codec = HuffmanCodec("ab")
	with pytest.raises(InvalidCodeError):
		codec.decode("012")


def test_truncated_code():
	codec = HuffmanCodec("ab\ncd")
	with pytest.raises(InvalidCodeError):
		codec.decode("11")


def test_newline_handling():
	codec = HuffmanCodec("ab\ncd")
	newline = codec.get_character_code("\n")
	assert newline
	expected = "".join(codec.get_character_code(c) for c in "ab") + newline + "".join(codec.get_character_code(c) for c in "cd")
	assert codec.encode("ab\ncd") == expected
	assert codec.encode("ab\ncd") == "111001100110"
	assert codec.decode(expected) == "ab\ncd"


def test_trailing_newline_is_encoded():
	codec = HuffmanCodec("ab\n")
	assert codec.encode("ab\n").endswith(codec.get_character_code("\n"))
	assert codec.decode(codec.encode("ab\n")) == "ab\n"


def test_newline_without_code_is_unencodable():
	codec = HuffmanCodec("ab")
	with pytest.raises(UnencodableSymbolError) as info:
		codec.encode("a\nb")
	assert info.value.symbol == "\n"


def test_get_character_code_absent_is_empty():
	assert HuffmanCodec("ab").get_character_code("z") == ""


def test_tables_are_read_only():
	codec = HuffmanCodec("ab")
	with pytest.raises(TypeError):
		codec.codes["z"] = "1"
	with pytest.raises(TypeError):
		codec.frequencies["z"] = 1


def test_from_file_and_encode_file(tmp_path):
	path = tmp_path / "src.txt"
	path.write_bytes(SAMPLE.encode("latin-1"))
	codec = HuffmanCodec.from_file(path)
	assert dict(codec.frequencies) == dict(HuffmanCodec(SAMPLE).frequencies)
	assert codec.decode(codec.encode_file(path)) == SAMPLE


def test_from_missing_file(tmp_path):
	with pytest.raises(UnreadableSourceError):
		HuffmanCodec.from_file(tmp_path / "nope.txt")


def test_compression_stats():
	codec = HuffmanCodec("aab")
	stats = codec.compression_stats("aab")
	assert stats.symbols == 3
	assert stats.original_bits == 24
	assert stats.encoded_bits == 3
	assert stats.compression_ratio == pytest.approx(3 / 24)
	assert stats.average_code_length == pytest.approx(1.0)
