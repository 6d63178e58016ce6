import re
from dataclasses import dataclass
from enum import Enum

from capstone import Cs, CS_ARCH_MIPS, CS_MODE_MIPS32, CS_MODE_BIG_ENDIAN

LINK_REGISTER = 31

# Opcode ranges whose rt field is the destination register
LOAD_OPCODES = range(32, 38)
IMMEDIATE_OPCODES = range(8, 16)
JUMP_OPCODES = (2, 3)
JAL_OPCODE = 3


class InstructionKind(Enum):
    R = "R"
    I = "I"
    J = "J"


@dataclass(frozen=True)
class DecodedInstruction:
    word: int
    opcode: int
    rs: int
    rt: int
    rd: int  # effective destination, 0 = writes no register
    funct: int
    kind: InstructionKind

    @property
    def writes_register(self) -> bool:
        return self.rd != 0


def decode(word: int) -> DecodedInstruction:
    """Split a 32-bit instruction word into its register-usage fields.

    Never fails: opcodes outside the known ranges decode as I-type
    instructions that write no register.
    """
    word &= 0xFFFFFFFF
    opcode = (word >> 26) & 0x3F
    rs = (word >> 21) & 0x1F
    rt = (word >> 16) & 0x1F

    if opcode == 0:
        kind = InstructionKind.R
        rd = (word >> 11) & 0x1F
        funct = word & 0x3F
    elif opcode in JUMP_OPCODES:
        kind = InstructionKind.J
        rd = LINK_REGISTER if opcode == JAL_OPCODE else 0
        funct = 0
    else:
        kind = InstructionKind.I
        rd = rt if (opcode in LOAD_OPCODES or opcode in IMMEDIATE_OPCODES) else 0
        funct = 0

    return DecodedInstruction(word, opcode, rs, rt, rd, funct, kind)


def decode_all(words):
    return tuple(decode(w) for w in words)


# --- Disassembly (labels only, never used by the simulation) ---
md = Cs(CS_ARCH_MIPS, CS_MODE_MIPS32 + CS_MODE_BIG_ENDIAN)


def convert_hex_immediates_to_decimal(disasm: str) -> str:
    def replace_hex(match):
        value = int(match.group(0), 16)
        # 16-bit immediates are shown signed, wider values (jump targets) as is
        if 0x8000 <= value <= 0xFFFF:
            value -= 0x10000
        return str(value)
    return re.sub(r'0x[0-9a-fA-F]+', replace_hex, disasm)


def disassemble(word: int) -> str:
    word &= 0xFFFFFFFF
    decoded = list(md.disasm(word.to_bytes(4, 'big'), 0))
    if not decoded:
        return f".word 0x{word:08x}"
    op = decoded[0]
    asm = f"{op.mnemonic} {op.op_str}".strip()
    return convert_hex_immediates_to_decimal(asm)


def instruction_label(index: int, word: int) -> str:
    return f"I{index} | {word & 0xFFFFFFFF:08x} ({disassemble(word)})"
