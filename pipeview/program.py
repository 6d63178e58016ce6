import re

from .errors import EmptyProgramError, ProgramFormatError

HEX_REGEX = re.compile(r'^[0-9a-fA-F]{8}$')


def parse_program(text):
    """One 8-digit hex word per line; blank lines and # comments are skipped."""
    lines = [line.split('#', 1)[0].strip() for line in text.splitlines()]
    lines = [line for line in lines if line]
    if not lines:
        raise EmptyProgramError("Please enter at least one MIPS instruction in hexadecimal format.")
    invalid = [line for line in lines if not HEX_REGEX.match(line)]
    if invalid:
        raise ProgramFormatError(invalid)
    return [int(line, 16) for line in lines]


def load_program(path):
    with open(path, "r", encoding="utf-8") as f:
        return parse_program(f.read())
