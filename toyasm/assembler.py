"""
Main assembler implementation.

Single-pass assembler for toy machine assembly. Every line is encoded on its
own, in source order; there are no labels and no cross-line state. The first
bad line aborts the whole run.
"""

from typing import List, Tuple

from .parser import Parser, ParsedLine, parse_line, parse_immediate, parse_memory_operand
from .registers import parse_register
from .instructions import Instruction, Syntax, get_instruction
from .encoder import encode_instruction
from .decoder import format_binary_fields
from .objfile import ObjectFormat, write_object
from .errors import AssemblerError, ParseError


_SYNTAX_HINTS = {
    Syntax.REG_REG_REG: "rd, rs1, rs2",
    Syntax.REG_REG_IMM: "rd, rs1, imm",
    Syntax.REG_IMM: "rd, imm",
    Syntax.REG_MEM: "rd, imm(rs1)",
    Syntax.MEM_STORE: "rs2, imm(rs1)",
    Syntax.BRANCH: "rs1, rs2, imm",
    Syntax.NONE: "no operands",
}


def _register(token: str) -> int:
    try:
        return parse_register(token)
    except ValueError:
        raise ParseError(f"Invalid register: {token}") from None


def parse_operands(instr: Instruction, operands: List[str]) -> Tuple[int, int, int, int]:
    """
    Parse operands for an instruction.

    Returns:
        Tuple of (rd, rs1, rs2, imm)
    """
    expected = instr.operand_count()
    if len(operands) != expected:
        raise ParseError(
            f"{instr.mnemonic} requires {expected} operands "
            f"({_SYNTAX_HINTS[instr.syntax]}), got {len(operands)}"
        )

    rd = rs1 = rs2 = imm = 0
    syntax = instr.syntax

    if syntax == Syntax.REG_REG_REG:
        rd = _register(operands[0])
        rs1 = _register(operands[1])
        rs2 = _register(operands[2])

    elif syntax == Syntax.REG_REG_IMM:
        rd = _register(operands[0])
        rs1 = _register(operands[1])
        imm = parse_immediate(operands[2])

    elif syntax == Syntax.REG_IMM:
        rd = _register(operands[0])
        imm = parse_immediate(operands[1])

    elif syntax == Syntax.REG_MEM:
        # Load: rd, offset(rs1)
        rd = _register(operands[0])
        imm, rs1_name = parse_memory_operand(operands[1])
        rs1 = _register(rs1_name)

    elif syntax == Syntax.MEM_STORE:
        # Store: rs2, offset(rs1)
        rs2 = _register(operands[0])
        imm, rs1_name = parse_memory_operand(operands[1])
        rs1 = _register(rs1_name)

    elif syntax == Syntax.BRANCH:
        rs1 = _register(operands[0])
        rs2 = _register(operands[1])
        imm = parse_immediate(operands[2])

    return rd, rs1, rs2, imm


def encode_line(mnemonic: str, operands: List[str]) -> int:
    """
    Encode one tokenized instruction line.

    Raises:
        ParseError: Unknown mnemonic or malformed operand
    """
    instr = get_instruction(mnemonic)
    if instr is None:
        raise ParseError(f"Unrecognized instruction: {mnemonic}")

    rd, rs1, rs2, imm = parse_operands(instr, operands)
    return encode_instruction(instr, rd, rs1, rs2, imm)


class Assembler:
    """
    Toy machine assembler.

    Encodes each instruction line independently and collects the words in
    program order.
    """

    def __init__(self, verbose: bool = False):
        """
        Initialize the assembler.

        Args:
            verbose: If True, print detailed assembly information
        """
        self.verbose = verbose
        self.parser = Parser()
        self.instructions: List[int] = []  # encoded 32-bit instructions
        self.source_map: List[Tuple[int, str, int]] = []  # (addr, original_line, line_num)

    def log(self, message: str) -> None:
        """Print message if verbose mode is enabled."""
        if self.verbose:
            print(message)

    def assemble_file(
        self,
        input_path: str,
        output_path: str = None,
        object_format: ObjectFormat = ObjectFormat.RAW,
    ) -> List[int]:
        """
        Assemble an assembly file.

        Args:
            input_path: Path to input .asm file
            output_path: Path to output object file (optional)
            object_format: Object file layout for output_path

        Returns:
            List of 32-bit encoded instructions
        """
        self.log(f"Assembling: {input_path}")
        lines = self.parser.parse_file(input_path)
        self._encode_lines(lines)

        if output_path:
            self.write_object(output_path, object_format)
            self.log(f"Output written to: {output_path}")

        return self.instructions

    def assemble_string(self, source: str) -> List[int]:
        """
        Assemble from a string.

        Args:
            source: Assembly source code

        Returns:
            List of 32-bit encoded instructions
        """
        lines = self.parser.parse_string(source)
        self._encode_lines(lines)
        return self.instructions

    def assemble_line(self, text: str) -> int:
        """Encode a single line of source; it must hold an instruction."""
        try:
            line = parse_line(text, 1)
        except ParseError as e:
            raise ParseError(e.detail, 1, text.strip()) from None
        if not line.mnemonic:
            raise ParseError("No instruction on line", 1, text)
        return self._encode(line)

    def _encode_lines(self, lines: List[ParsedLine]) -> None:
        self.log("\n=== Encoding instructions ===")
        self.instructions = []
        self.source_map = []
        instructions = []
        source_map = []
        address = 0

        for line in lines:
            # Skip blank and comment-only lines
            if not line.mnemonic:
                continue

            encoded = self._encode(line)
            instructions.append(encoded)
            source_map.append((address, line.original, line.line_num))
            self.log(
                f"  0x{address:04X}: {encoded:08X}  "
                f"{line.mnemonic} {', '.join(line.operands)}"
            )
            address += 4

        # Only a fully encoded program is kept
        self.instructions = instructions
        self.source_map = source_map
        self.log(f"\n  Total instructions: {len(self.instructions)}")

    def _encode(self, line: ParsedLine) -> int:
        try:
            return encode_line(line.mnemonic, line.operands)
        except AssemblerError as e:
            # Re-raise with line info
            raise type(e)(e.detail, line.line_num, line.original.strip()) from None

    def write_object(self, output_path: str, object_format: ObjectFormat = ObjectFormat.RAW) -> None:
        """
        Write assembled instructions to an object file.

        Args:
            output_path: Path to output file
            object_format: RAW or LEGACY layout
        """
        write_object(output_path, self.instructions, object_format)

    def write_text_dump(self, output_path: str) -> None:
        """Write the grouped-binary dump, one word per line."""
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(self.get_binary_dump())

    def get_hex_string(self) -> str:
        """
        Get assembled instructions as a hex string.

        Returns:
            String with one hex instruction per line
        """
        return "\n".join(f"{instr:08x}" for instr in self.instructions)

    def get_binary_dump(self) -> str:
        """Grouped binary text, one line per word, newline terminated."""
        return "".join(f"{format_binary_fields(instr)}\n" for instr in self.instructions)

    def get_listing(self) -> str:
        """
        Get an assembly listing showing addresses, encodings, and source.

        Returns:
            Formatted listing string
        """
        lines = []
        lines.append("Address   Code       Source")
        lines.append("-" * 60)

        for (addr, source, line_num), code in zip(self.source_map, self.instructions):
            lines.append(f"0x{addr:04X}:   {code:08X}   {source.strip()}")

        return "\n".join(lines)
