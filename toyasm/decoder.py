"""
Toy machine instruction decoder.

Inverts the encoder: the low 6 bits select the instruction, and the
instruction's operand field mapping says which register slot holds which
operand. Words with no defined instruction decode to an "unknown" result
instead of raising, so a disassembly can run past data.
"""

from dataclasses import dataclass
from typing import Optional

from .encoder import encode_instruction, to_signed16
from .instructions import (
    OPCODE_MASK,
    REG_MASK,
    Instruction,
    InstructionFormat,
    Syntax,
    get_instruction_by_opcode,
)


@dataclass
class DecodedInstruction:
    """
    Result of decoding one 32-bit word.

    Attributes:
        word: Raw 32-bit word
        opcode: Low 6 bits of the word
        instruction: Matching definition, or None for an unknown word
        rd, rs1, rs2: Register operands (0 when unused)
        imm: Sign-extended immediate (0 when unused)
    """

    word: int
    opcode: int
    instruction: Optional[Instruction] = None
    rd: int = 0
    rs1: int = 0
    rs2: int = 0
    imm: int = 0

    @property
    def known(self) -> bool:
        return self.instruction is not None

    @property
    def mnemonic(self) -> str:
        return self.instruction.mnemonic if self.instruction else "unknown"

    @property
    def text(self) -> str:
        return format_instruction(self)


def extract_c_immediate(word: int) -> int:
    """Reassemble the split C-type immediate: (imm_high << 5) | imm_low."""
    imm_high = (word >> 21) & 0x7FF
    imm_low = (word >> 6) & 0x1F
    return to_signed16((imm_high << 5) | imm_low)


def decode_word(word: int) -> DecodedInstruction:
    """
    Decode a 32-bit instruction word.

    Args:
        word: Instruction word (only the low 32 bits are considered)

    Returns:
        DecodedInstruction; ``known`` is False for unassigned opcodes, for
        non-zero words carrying the halt opcode, and for words with non-zero
        reserved bits (A-type bits 31:21, lui bits 15:11)
    """
    word &= 0xFFFFFFFF
    opcode = word & OPCODE_MASK
    result = DecodedInstruction(word=word, opcode=opcode)

    instr = get_instruction_by_opcode(opcode)
    if instr is None:
        return result

    fmt = instr.format
    if fmt == InstructionFormat.HALT:
        if word == 0:
            result.instruction = instr
        return result

    result.instruction = instr
    for role, slot in instr.fields.items():
        setattr(result, role, (word >> slot.shift) & REG_MASK)

    if fmt == InstructionFormat.B:
        result.imm = to_signed16(word >> 16)
    elif fmt == InstructionFormat.C:
        result.imm = extract_c_immediate(word)

    # Only canonical words decode; anything else would not reassemble
    if encode_instruction(instr, result.rd, result.rs1, result.rs2, result.imm) != word:
        return DecodedInstruction(word=word, opcode=opcode)

    return result


def format_instruction(decoded: DecodedInstruction) -> str:
    """
    Render a decoded instruction as assembly text.

    Immediates are printed in decimal without a leading "+".
    """
    instr = decoded.instruction
    if instr is None:
        return f"unknown 0x{decoded.word:08X}"

    m = instr.mnemonic
    rd, rs1, rs2, imm = decoded.rd, decoded.rs1, decoded.rs2, decoded.imm
    syntax = instr.syntax

    if syntax == Syntax.REG_REG_REG:
        return f"{m} x{rd}, x{rs1}, x{rs2}"
    elif syntax == Syntax.REG_REG_IMM:
        return f"{m} x{rd}, x{rs1}, {imm}"
    elif syntax == Syntax.REG_IMM:
        return f"{m} x{rd}, {imm}"
    elif syntax == Syntax.REG_MEM:
        return f"{m} x{rd}, {imm}(x{rs1})"
    elif syntax == Syntax.MEM_STORE:
        return f"{m} x{rs2}, {imm}(x{rs1})"
    elif syntax == Syntax.BRANCH:
        return f"{m} x{rs1}, x{rs2}, {imm}"
    return m


def disassemble_word(word: int) -> str:
    """Decode a word straight to assembly text."""
    return format_instruction(decode_word(word))


def format_binary_fields(word: int) -> str:
    """
    Format a word as grouped binary: 0b<31:21>_<20:16>_<15:11>_<10:6>_<5:0>.
    """
    bits = f"{word & 0xFFFFFFFF:032b}"
    return f"0b{bits[0:11]}_{bits[11:16]}_{bits[16:21]}_{bits[21:26]}_{bits[26:32]}"
