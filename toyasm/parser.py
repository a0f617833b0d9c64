"""
Assembly source file parser.

Handles tokenization, comment stripping and operand parsing. There are no
labels or directives: every non-blank line is one instruction.
"""

import re
from typing import List, Tuple, Optional
from dataclasses import dataclass
from .errors import ParseError


_DECIMAL_RE = re.compile(r"^[0-9]+$")
_HEX_RE = re.compile(r"^0[xX][0-9a-fA-F]+$")
_MEMORY_RE = re.compile(r"^\s*([^()\s]*)\s*\(\s*([^()\s]+)\s*\)\s*$")


@dataclass
class ParsedLine:
    """
    Represents a parsed line of assembly.

    Attributes:
        line_num: Original line number in source file
        mnemonic: Instruction mnemonic (None for blank/comment-only lines)
        operands: List of operand strings
        original: Original line text
    """

    line_num: int
    mnemonic: Optional[str] = None
    operands: List[str] = None
    original: str = ""

    def __post_init__(self):
        if self.operands is None:
            self.operands = []


def strip_comments(line: str) -> str:
    """Remove a # comment from a line."""
    hash_pos = line.find("#")
    if hash_pos >= 0:
        return line[:hash_pos]
    return line


def parse_immediate(value_str: str) -> int:
    """
    Parse an immediate value from string.

    Supports:
    - Decimal: 123, +4, -45
    - Hexadecimal: 0x1A, 0X1a, -0x10

    The value is returned unmasked; the encoder truncates it to its field.

    Returns:
        Integer value
    """
    token = value_str.strip()

    if not token:
        raise ParseError("Invalid immediate: empty value")

    body = token
    negative = False
    if body[0] in "+-":
        negative = body[0] == "-"
        body = body[1:]

    if _HEX_RE.match(body):
        result = int(body[2:], 16)
    elif _DECIMAL_RE.match(body):
        result = int(body, 10)
    else:
        raise ParseError(f"Invalid immediate: {token}")

    return -result if negative else result


def parse_memory_operand(operand: str) -> Tuple[int, str]:
    """
    Parse a memory operand in the form offset(register).

    Examples:
    - "4(x1)" -> (4, "x1")
    - "-8(x2)" -> (-8, "x2")
    - "+4(x4)" -> (4, "x4")
    - "(x3)" -> (0, "x3")

    Returns:
        Tuple of (offset, register_name)
    """
    match = _MEMORY_RE.match(operand)
    if not match:
        raise ParseError(f"Invalid memory operand syntax: {operand}")

    offset_str = match.group(1).strip()
    reg_str = match.group(2).strip()

    offset = parse_immediate(offset_str) if offset_str else 0
    return offset, reg_str


def tokenize_operands(operand_str: str) -> List[str]:
    """
    Split operand string into individual operands.

    Handles commas as separators and parentheses for memory operands.
    """
    operands = []
    current = ""
    paren_depth = 0

    for char in operand_str:
        if char == "(":
            paren_depth += 1
            current += char
        elif char == ")":
            paren_depth -= 1
            current += char
        elif char == "," and paren_depth == 0:
            if not current.strip():
                raise ParseError(f"Invalid operand list: {operand_str.strip()}")
            operands.append(current.strip())
            current = ""
        else:
            current += char

    if current.strip():
        operands.append(current.strip())
    elif operands:
        # Trailing comma
        raise ParseError(f"Invalid operand list: {operand_str.strip()}")

    return operands


def parse_line(line: str, line_num: int) -> ParsedLine:
    """
    Parse a single line of assembly.

    Returns:
        ParsedLine object containing parsed components
    """
    result = ParsedLine(line_num=line_num, original=line)

    line = strip_comments(line).strip()

    # Blank or comment-only
    if not line:
        return result

    parts = line.split(None, 1)
    result.mnemonic = parts[0].lower()
    if len(parts) > 1:
        result.operands = tokenize_operands(parts[1])

    return result


class Parser:
    """
    Assembly file parser.

    Provides methods to parse entire files and extract the instruction lines.
    """

    def __init__(self):
        self.lines: List[ParsedLine] = []

    def parse_file(self, filepath: str) -> List[ParsedLine]:
        """
        Parse an assembly file.

        Args:
            filepath: Path to the assembly file

        Returns:
            List of ParsedLine objects
        """
        with open(filepath, "r", encoding="utf-8") as f:
            content = f.read()
        return self.parse_string(content)

    def parse_string(self, content: str) -> List[ParsedLine]:
        """
        Parse assembly source from a string.

        Args:
            content: Assembly source code string

        Returns:
            List of ParsedLine objects
        """
        self.lines = []

        for i, line in enumerate(content.splitlines(), start=1):
            try:
                self.lines.append(parse_line(line, i))
            except ParseError as e:
                raise ParseError(e.detail, i, line.strip()) from None

        return self.lines

    def get_instructions(self) -> List[ParsedLine]:
        """Get only instruction lines (excluding blank and comment lines)."""
        return [line for line in self.lines if line.mnemonic]
