import io

import pytest

import cli
from codec import HuffmanCodec


@pytest.fixture
def source(tmp_path):
	path = tmp_path / "source.txt"
	path.write_text("ab\ncd", encoding="latin-1")
	return path


def test_codes(source, capsys):
	assert cli.main(["codes", str(source)]) == 0
	lines = capsys.readouterr().out.splitlines()
	assert len(lines) == 5
	assert "'\\n'\t1\t110" in lines


def test_encode_defaults_to_source(source, capsys):
	assert cli.main(["encode", str(source)]) == 0
	assert capsys.readouterr().out.strip() == "111001100110"


def test_encode_other_input(source, tmp_path, capsys):
	other = tmp_path / "other.txt"
	other.write_text("dcba", encoding="latin-1")
	assert cli.main(["encode", str(source), str(other)]) == 0
	bits = capsys.readouterr().out.strip()
	assert HuffmanCodec("ab\ncd").decode(bits) == "dcba"


def test_decode(source, capsys):
	assert cli.main(["decode", str(source), "111001100110"]) == 0
	assert capsys.readouterr().out == "ab\ncd"


def test_decode_from_stdin(source, capsys, monkeypatch):
	monkeypatch.setattr("sys.stdin", io.StringIO("10111\n"))
	assert cli.main(["decode", str(source), "-"]) == 0
	assert capsys.readouterr().out == "da"


def test_failures_exit_with_status_1(source, tmp_path, capsys):
	assert cli.main(["decode", str(source), "012"]) == 1
	assert "error:" in capsys.readouterr().err

	other = tmp_path / "other.txt"
	other.write_text("xyz", encoding="latin-1")
	assert cli.main(["encode", str(source), str(other)]) == 1

	assert cli.main(["codes", str(tmp_path / "missing.txt")]) == 1


def test_subcommand_required():
	with pytest.raises(SystemExit):
		cli.main([])


def test_unknown_encoding_exits_with_status_1(source, capsys):
	assert cli.main(["--encoding", "nope", "codes", str(source)]) == 1
	assert "error:" in capsys.readouterr().err


def test_unknown_log_level_is_a_usage_error(source, capsys):
	with pytest.raises(SystemExit) as info:
		cli.main(["--log-level", "chatty", "codes", str(source)])
	assert info.value.code == 2
	assert "unknown log level" in capsys.readouterr().err
