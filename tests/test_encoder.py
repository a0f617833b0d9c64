"""
Tests for the instruction encoder.
"""

import pytest

from toyasm.encoder import (
    encode_add,
    encode_addi,
    encode_blt,
    encode_bne,
    encode_branch_or_store,
    encode_halt,
    encode_instruction,
    encode_lui,
    encode_lw,
    encode_mul,
    encode_reg_imm,
    encode_reg_reg,
    encode_slli,
    encode_sub,
    encode_sw,
    sign_extend,
    to_signed16,
)
from toyasm.instructions import INSTRUCTIONS, Opcode


def field(word, shift, width=5):
    return (word >> shift) & ((1 << width) - 1)


class TestSignHelpers:
    """Tests for sign extension helpers."""

    def test_sign_extend_negative(self):
        assert sign_extend(0xFFF8, 16) == -8

    def test_sign_extend_positive(self):
        assert sign_extend(0x7FFF, 16) == 32767

    def test_to_signed16_truncates(self):
        assert to_signed16(0x1FFFF) == -1
        assert to_signed16(0x18000) == -32768
        assert to_signed16(40000) == 40000 - 65536


class TestATypeEncoding:
    """Tests for reg-reg-reg encoding."""

    def test_add(self):
        assert encode_add(1, 1, 3) == 0b00000000000_00011_00001_00001_000001

    def test_mul(self):
        assert encode_mul(1, 1, 3) == 0b00000000000_00011_00001_00001_000100

    def test_sub(self):
        assert encode_sub(4, 5, 6) == 0b00000000000_00110_00101_00100_001010

    def test_generic_matches_wrapper(self):
        assert encode_reg_reg(Opcode.ADD, 7, 8, 9) == encode_add(7, 8, 9)

    def test_reserved_bits_zero(self):
        word = encode_add(31, 31, 31)
        assert word >> 21 == 0

    def test_swapping_sources_only_moves_source_fields(self):
        """Swapping rs1/rs2 changes only bits 20:11."""
        a = encode_add(5, 7, 9)
        b = encode_add(5, 9, 7)
        assert (a ^ b) & ~(0x3FF << 11) == 0
        assert field(a, 6) == field(b, 6) == 5
        assert a & 0x3F == b & 0x3F == Opcode.ADD

    def test_register_out_of_range_is_masked(self):
        # x33 truncates to x1
        assert encode_add(33, 0, 0) == encode_add(1, 0, 0) == 0x41


class TestBTypeEncoding:
    """Tests for reg-reg-imm encoding."""

    def test_addi_zero(self):
        assert encode_addi(1, 0, 0) == 0b00000000000_00000_00000_00001_000010

    def test_addi_ten(self):
        assert encode_addi(1, 0, 10) == 0x000A0042

    def test_lui(self):
        assert encode_lui(2, 42) == 0b00000000001_01010_00000_00010_000101

    def test_lui_leaves_rs1_zero(self):
        assert field(encode_lui(31, -1), 11) == 0

    def test_lw(self):
        assert encode_lw(3, 1, 4) == 0b00000000000_00100_00001_00011_000110

    def test_slli(self):
        word = encode_slli(2, 3, 4)
        assert word == (4 << 16) | (3 << 11) | (2 << 6) | Opcode.SLLI

    def test_negative_immediate(self):
        assert encode_addi(1, 1, -1) >> 16 == 0xFFFF

    def test_immediate_is_truncated(self):
        """17-bit values are masked to 16 bits, not rejected."""
        assert encode_reg_imm(Opcode.ADDI, 1, 0, 0x1FFFF) == encode_addi(1, 0, -1)
        assert encode_addi(1, 0, 0x12345) == encode_addi(1, 0, 0x2345)


class TestCTypeEncoding:
    """Tests for the split-immediate branch/store encoding."""

    def test_generic_is_order_agnostic(self):
        word = encode_branch_or_store(Opcode.BNE, 1, 2, 0)
        assert field(word, 16) == 1
        assert field(word, 11) == 2

    def test_bne_field_placement(self):
        word = encode_bne(3, 8, -28)
        assert field(word, 16) == 3
        assert field(word, 11) == 8
        assert word == 0b11111111111_00011_01000_00100_000011

    def test_bne_second_example(self):
        assert encode_bne(2, 1, -44) == 0b11111111110_00010_00001_10100_000011

    def test_bne_minus_eight(self):
        assert encode_bne(3, 2, -8) == 0b11111111111_00011_00010_11000_000011

    def test_blt_is_inverse_of_bne(self):
        word = encode_blt(5, 6, 12)
        assert field(word, 16) == 6
        assert field(word, 11) == 5
        assert word == 0b00000000000_00110_00101_01100_001000

    def test_blt_sixteen(self):
        assert encode_blt(4, 5, 16) == 0b00000000000_00101_00100_10000_001000

    def test_sw_base_high_value_mid(self):
        # sw x6, 0(x4)
        assert encode_sw(4, 6, 0) == 0b00000000000_00100_00110_00000_000111
        # sw x5, +4(x4)
        assert encode_sw(4, 5, 4) == 0b00000000000_00100_00101_00100_000111

    def test_split_immediate(self):
        word = encode_bne(0, 0, 0x1234)
        assert field(word, 21, 11) == 0x1234 >> 5
        assert field(word, 6) == 0x1234 & 0x1F

    def test_offset_truncated(self):
        assert encode_bne(1, 2, 0x10008) == encode_bne(1, 2, 8)


class TestHalt:
    def test_halt_is_zero(self):
        assert encode_halt() == 0

    def test_halt_ignores_operands(self):
        assert encode_instruction(INSTRUCTIONS["halt"], rd=5, rs1=6, rs2=7, imm=99) == 0


class TestOpcodes:
    """Every encoded word carries its opcode in bits 5:0."""

    @pytest.mark.parametrize("mnemonic", [m for m in INSTRUCTIONS if m != "halt"])
    def test_opcode_in_low_bits(self, mnemonic):
        instr = INSTRUCTIONS[mnemonic]
        word = encode_instruction(instr, rd=31, rs1=31, rs2=31, imm=-1)
        assert word & 0x3F == instr.opcode
