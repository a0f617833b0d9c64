"""
Toy machine instruction definitions.

This module defines every supported instruction with its opcode, format type,
operand syntax and the mapping from textual operands to physical register
fields. The C-type family does not place its operands consistently, so the
mapping is spelled out per mnemonic and shared by the encoder and decoder.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional
from enum import Enum, IntEnum, auto


class Opcode(IntEnum):
    """6-bit opcode values (bits 5:0 of every word)."""

    HALT = 0b000000
    ADD = 0b000001
    ADDI = 0b000010
    BNE = 0b000011
    MUL = 0b000100
    LUI = 0b000101
    LW = 0b000110
    SW = 0b000111
    BLT = 0b001000
    SLLI = 0b001001
    SUB = 0b001010


class InstructionFormat(Enum):
    """Instruction word layouts."""

    A = auto()  # reg-reg-reg: 0 | rs2 | rs1 | rd | opcode
    B = auto()  # reg-reg-imm: imm[15:0] | rs1 | rd | opcode
    C = auto()  # branch/store: imm_high | field | field | imm_low | opcode
    HALT = auto()  # all zero


class Syntax(Enum):
    """Textual operand shapes."""

    REG_REG_REG = auto()  # rd, rs1, rs2
    REG_REG_IMM = auto()  # rd, rs1, imm
    REG_IMM = auto()  # rd, imm
    REG_MEM = auto()  # rd, imm(rs1)
    MEM_STORE = auto()  # rs2, imm(rs1)
    BRANCH = auto()  # rs1, rs2, imm
    NONE = auto()


class Field(Enum):
    """Physical 5-bit register slots, named by their bit positions."""

    HIGH = 16  # bits 20:16
    MID = 11  # bits 15:11
    LOW = 6  # bits 10:6

    @property
    def shift(self) -> int:
        return self.value


OPCODE_MASK = 0x3F
REG_MASK = 0x1F
IMM_MASK = 0xFFFF


@dataclass
class Instruction:
    """
    Definition of a toy machine instruction.

    Attributes:
        mnemonic: Lower-case mnemonic
        opcode: 6-bit opcode
        format: Instruction format type
        syntax: Operand shape used by the parser and the disassembler
        fields: Operand role ("rd", "rs1", "rs2") -> physical register slot
    """

    mnemonic: str
    opcode: Opcode
    format: InstructionFormat
    syntax: Syntax
    fields: Dict[str, Field] = field(default_factory=dict)

    def operand_count(self) -> int:
        """Number of comma-separated operands expected in source text."""
        return {
            Syntax.REG_REG_REG: 3,
            Syntax.REG_REG_IMM: 3,
            Syntax.BRANCH: 3,
            Syntax.REG_IMM: 2,
            Syntax.REG_MEM: 2,
            Syntax.MEM_STORE: 2,
            Syntax.NONE: 0,
        }[self.syntax]


# Slot assignments shared by the A- and B-type instructions
_REG_REG_FIELDS = {"rs2": Field.HIGH, "rs1": Field.MID, "rd": Field.LOW}
_REG_IMM_FIELDS = {"rs1": Field.MID, "rd": Field.LOW}


# =============================================================================
# Instruction table
# =============================================================================

INSTRUCTIONS = {
    # -------------------------------------------------------------------------
    # A-Type (Register-Register)
    # -------------------------------------------------------------------------
    "add": Instruction("add", Opcode.ADD, InstructionFormat.A, Syntax.REG_REG_REG, _REG_REG_FIELDS),
    "mul": Instruction("mul", Opcode.MUL, InstructionFormat.A, Syntax.REG_REG_REG, _REG_REG_FIELDS),
    "sub": Instruction("sub", Opcode.SUB, InstructionFormat.A, Syntax.REG_REG_REG, _REG_REG_FIELDS),
    # -------------------------------------------------------------------------
    # B-Type (Register-Immediate)
    # -------------------------------------------------------------------------
    "addi": Instruction("addi", Opcode.ADDI, InstructionFormat.B, Syntax.REG_REG_IMM, _REG_IMM_FIELDS),
    "slli": Instruction("slli", Opcode.SLLI, InstructionFormat.B, Syntax.REG_REG_IMM, _REG_IMM_FIELDS),
    "lw": Instruction("lw", Opcode.LW, InstructionFormat.B, Syntax.REG_MEM, _REG_IMM_FIELDS),
    # rs1 is fixed to 0 for lui
    "lui": Instruction("lui", Opcode.LUI, InstructionFormat.B, Syntax.REG_IMM, {"rd": Field.LOW}),
    # -------------------------------------------------------------------------
    # C-Type (Branch/Store, split immediate)
    # Each mnemonic places its registers differently.
    # -------------------------------------------------------------------------
    "bne": Instruction(
        "bne", Opcode.BNE, InstructionFormat.C, Syntax.BRANCH,
        {"rs1": Field.HIGH, "rs2": Field.MID},
    ),
    "sw": Instruction(
        "sw", Opcode.SW, InstructionFormat.C, Syntax.MEM_STORE,
        {"rs1": Field.HIGH, "rs2": Field.MID},  # base, value
    ),
    "blt": Instruction(
        "blt", Opcode.BLT, InstructionFormat.C, Syntax.BRANCH,
        {"rs2": Field.HIGH, "rs1": Field.MID},
    ),
    # -------------------------------------------------------------------------
    # Halt
    # -------------------------------------------------------------------------
    "halt": Instruction("halt", Opcode.HALT, InstructionFormat.HALT, Syntax.NONE),
}

_BY_OPCODE = {instr.opcode: instr for instr in INSTRUCTIONS.values()}


def get_instruction(mnemonic: str) -> Optional[Instruction]:
    """
    Look up an instruction by mnemonic.

    Args:
        mnemonic: Instruction mnemonic (case-insensitive)

    Returns:
        Instruction object if found, None otherwise
    """
    return INSTRUCTIONS.get(mnemonic.lower())


def get_instruction_by_opcode(opcode: int) -> Optional[Instruction]:
    """Look up an instruction by its 6-bit opcode value."""
    try:
        return _BY_OPCODE[Opcode(opcode)]
    except ValueError:
        return None


def get_all_mnemonics() -> list:
    """Get a list of all supported instruction mnemonics."""
    return list(INSTRUCTIONS.keys())
