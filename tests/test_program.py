import pytest

from pipeview.errors import EmptyProgramError, ProgramFormatError
from pipeview.program import load_program, parse_program


def test_parse_program_skips_comments_and_blanks():
    text = "# demo\n00a63820\n\n  00E04020  # reads $7\n"
    assert parse_program(text) == [0x00A63820, 0x00E04020]


def test_parse_program_reports_every_invalid_line():
    with pytest.raises(ProgramFormatError) as exc:
        parse_program("00a63820\nzz\n123\n")
    assert exc.value.invalid == ["zz", "123"]
    assert "8 hexadecimal characters" in str(exc.value)


def test_parse_program_rejects_empty_text():
    with pytest.raises(EmptyProgramError):
        parse_program("\n# nothing\n")


def test_load_program(tmp_path):
    path = tmp_path / "prog.hex"
    path.write_text("20080005\n2009000a\n", encoding="utf-8")
    assert load_program(str(path)) == [0x20080005, 0x2009000A]
