import pytest

from pipeview.decoder import (InstructionKind, convert_hex_immediates_to_decimal, decode, decode_all,
                              disassemble, instruction_label)


def test_r_type_fields():
    d = decode(0x00A63820)
    assert d.kind is InstructionKind.R
    assert (d.opcode, d.rs, d.rt, d.rd, d.funct) == (0, 5, 6, 7, 0x20)
    assert d.writes_register


@pytest.mark.parametrize("word, rd", [
    (0x8C0F0000, 15),   # lw $15, 0($0)
    (0x20080005, 8),    # addi $8, $0, 5
    (0x3C181234, 24),   # lui $24, 0x1234
    (0x37185678, 24),   # ori $24, $24, 0x5678
])
def test_i_type_writers_use_rt(word, rd):
    d = decode(word)
    assert d.kind is InstructionKind.I
    assert d.rd == rd == d.rt
    assert d.funct == 0


@pytest.mark.parametrize("word", [
    0xAC0A0000,  # sw
    0x11000002,  # beq
    0xFC000000,  # opcode 63, unknown
])
def test_i_type_non_writers(word):
    d = decode(word)
    assert d.kind is InstructionKind.I
    assert d.rd == 0
    assert not d.writes_register


def test_jump_kinds():
    j = decode(0x08000010)
    jal = decode(0x0C000010)
    assert j.kind is jal.kind is InstructionKind.J
    assert j.rd == 0
    assert jal.rd == 31


def test_decode_masks_to_32_bits():
    assert decode(0x1_00A63820) == decode(0x00A63820)


def test_decode_all_keeps_order():
    decoded = decode_all([0x00A63820, 0x8C0F0000])
    assert [d.word for d in decoded] == [0x00A63820, 0x8C0F0000]


def test_every_opcode_decodes():
    for opcode in range(64):
        d = decode((opcode << 26) | (3 << 21) | (4 << 16) | (5 << 11))
        assert d.kind in set(InstructionKind)
        if opcode == 0:
            assert d.rd == 5
        elif opcode == 3:
            assert d.rd == 31
        elif opcode == 2:
            assert d.rd == 0
        elif 8 <= opcode <= 15 or 32 <= opcode <= 37:
            assert d.rd == 4
        else:
            assert d.rd == 0


def test_disassemble_label():
    assert disassemble(0x00A63820).startswith("add")
    assert instruction_label(0, 0x00A63820).startswith("I0 | 00a63820 (add")


@pytest.mark.parametrize("asm, expected", [
    ("andi $t0, $t0, 0xffff", "andi $t0, $t0, -1"),
    ("addiu $sp, $sp, 0x8000", "addiu $sp, $sp, -32768"),
    ("ori $t8, $t8, 0x5678", "ori $t8, $t8, 22136"),
    ("j 0x123456", "j 1193046"),
])
def test_hex_immediates_become_signed_decimals(asm, expected):
    assert convert_hex_immediates_to_decimal(asm) == expected
