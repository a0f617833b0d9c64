"""
Toy machine instruction encoder.

Encodes instructions into 32-bit machine words based on their format type.
Out-of-range registers and immediates are truncated to their field width,
never rejected.
"""

from .instructions import (
    INSTRUCTIONS,
    IMM_MASK,
    OPCODE_MASK,
    REG_MASK,
    Field,
    Instruction,
    InstructionFormat,
)
from .errors import EncodingError


def sign_extend(value: int, bits: int) -> int:
    """Sign-extend a value to the specified number of bits."""
    sign_bit = 1 << (bits - 1)
    return (value & (sign_bit - 1)) - (value & sign_bit)


def to_signed16(value: int) -> int:
    """Truncate to 16 bits and reinterpret as two's-complement."""
    return sign_extend(value & IMM_MASK, 16)


def encode_reg_reg(opcode: int, rd: int, rs1: int, rs2: int) -> int:
    """
    Encode an A-type instruction.

    Format: [0(11) | rs2(5) | rs1(5) | rd(5) | opcode(6)]
    """
    encoding = opcode & OPCODE_MASK
    encoding |= (rd & REG_MASK) << 6
    encoding |= (rs1 & REG_MASK) << 11
    encoding |= (rs2 & REG_MASK) << 16
    return encoding


def encode_reg_imm(opcode: int, rd: int, rs1: int, imm: int) -> int:
    """
    Encode a B-type instruction.

    Format: [imm[15:0](16) | rs1(5) | rd(5) | opcode(6)]
    """
    encoding = opcode & OPCODE_MASK
    encoding |= (rd & REG_MASK) << 6
    encoding |= (rs1 & REG_MASK) << 11
    encoding |= (imm & IMM_MASK) << 16
    return encoding


def encode_branch_or_store(opcode: int, field_a: int, field_b: int, offset: int) -> int:
    """
    Encode a C-type instruction.

    Format: [imm[15:5](11) | field_a(5) | field_b(5) | imm[4:0](5) | opcode(6)]

    field_a lands in bits 20:16 and field_b in bits 15:11. Which source
    operand goes where is decided by the caller.
    """
    imm = offset & IMM_MASK
    imm_high = (imm >> 5) & 0x7FF
    imm_low = imm & 0x1F

    encoding = opcode & OPCODE_MASK
    encoding |= imm_low << 6
    encoding |= (field_b & REG_MASK) << 11
    encoding |= (field_a & REG_MASK) << 16
    encoding |= imm_high << 21
    return encoding


def encode_halt() -> int:
    """The halt word is all zero."""
    return 0


def encode_instruction(
    instr: Instruction,
    rd: int = 0,
    rs1: int = 0,
    rs2: int = 0,
    imm: int = 0,
) -> int:
    """
    Encode an instruction based on its format and operand field mapping.

    Args:
        instr: Instruction definition
        rd: Destination register
        rs1: Source register 1 (base register for loads and stores)
        rs2: Source register 2 (value register for stores)
        imm: Immediate value or branch/store offset

    Returns:
        32-bit encoded instruction
    """
    fmt = instr.format
    operands = {"rd": rd, "rs1": rs1, "rs2": rs2}

    if fmt == InstructionFormat.A:
        return encode_reg_reg(instr.opcode, rd, rs1, rs2)
    elif fmt == InstructionFormat.B:
        # lui has no rs1 slot; bits 15:11 stay zero
        base = rs1 if "rs1" in instr.fields else 0
        return encode_reg_imm(instr.opcode, rd, base, imm)
    elif fmt == InstructionFormat.C:
        slots = {slot: operands[role] for role, slot in instr.fields.items()}
        return encode_branch_or_store(
            instr.opcode, slots[Field.HIGH], slots[Field.MID], imm
        )
    elif fmt == InstructionFormat.HALT:
        return encode_halt()
    else:
        raise EncodingError(f"Unknown instruction format: {fmt}")


# =============================================================================
# Per-mnemonic helpers
# =============================================================================


def encode_add(rd: int, rs1: int, rs2: int) -> int:
    return encode_instruction(INSTRUCTIONS["add"], rd=rd, rs1=rs1, rs2=rs2)


def encode_sub(rd: int, rs1: int, rs2: int) -> int:
    return encode_instruction(INSTRUCTIONS["sub"], rd=rd, rs1=rs1, rs2=rs2)


def encode_mul(rd: int, rs1: int, rs2: int) -> int:
    return encode_instruction(INSTRUCTIONS["mul"], rd=rd, rs1=rs1, rs2=rs2)


def encode_addi(rd: int, rs1: int, imm: int) -> int:
    return encode_instruction(INSTRUCTIONS["addi"], rd=rd, rs1=rs1, imm=imm)


def encode_slli(rd: int, rs1: int, imm: int) -> int:
    return encode_instruction(INSTRUCTIONS["slli"], rd=rd, rs1=rs1, imm=imm)


def encode_lui(rd: int, imm: int) -> int:
    return encode_instruction(INSTRUCTIONS["lui"], rd=rd, imm=imm)


def encode_lw(rd: int, rs1: int, offset: int) -> int:
    return encode_instruction(INSTRUCTIONS["lw"], rd=rd, rs1=rs1, imm=offset)


def encode_sw(rs1: int, rs2: int, offset: int) -> int:
    """sw rs2, offset(rs1): rs1 is the base, rs2 the stored value."""
    return encode_instruction(INSTRUCTIONS["sw"], rs1=rs1, rs2=rs2, imm=offset)


def encode_bne(rs1: int, rs2: int, offset: int) -> int:
    return encode_instruction(INSTRUCTIONS["bne"], rs1=rs1, rs2=rs2, imm=offset)


def encode_blt(rs1: int, rs2: int, offset: int) -> int:
    return encode_instruction(INSTRUCTIONS["blt"], rs1=rs1, rs2=rs2, imm=offset)
