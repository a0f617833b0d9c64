"""
Register name parsing.

Registers are written x0-x31. The encoding gives x0 no special meaning.
"""

import re

REGISTER_COUNT = 32

_REGISTER_RE = re.compile(r"^x([0-9]+)$", re.IGNORECASE)


def parse_register(name: str) -> int:
    """
    Parse a register name and return its number.

    Numerals outside 0-31 are accepted here; the encoder masks them to
    5 bits.

    Args:
        name: Register name (e.g., "x0", "x17")

    Returns:
        Register number

    Raises:
        ValueError: If the register name is invalid
    """
    match = _REGISTER_RE.match(name.strip())
    if not match:
        raise ValueError(f"Invalid register: {name}")
    return int(match.group(1), 10)


def is_valid_register(name: str) -> bool:
    """Check if a string is a valid register name."""
    return _REGISTER_RE.match(name.strip()) is not None


def get_register_name(num: int) -> str:
    """Get the x-name for a register number."""
    if not 0 <= num < REGISTER_COUNT:
        raise ValueError(f"Invalid register number: {num}")
    return f"x{num}"
