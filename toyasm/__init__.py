"""
Toy Assembler - assembler and disassembler for a 32-bit toy register machine.

This package translates between mnemonic assembly and fixed-width 32-bit
instruction words in both directions.
"""

__version__ = "1.0.0"

from .assembler import Assembler
from .disassembler import Disassembler
from .decoder import decode_word, disassemble_word
from .errors import AssemblerError, ParseError, EncodingError, ObjectFileError, ConfigError
from .objfile import ObjectFormat

__all__ = [
    "Assembler",
    "Disassembler",
    "decode_word",
    "disassemble_word",
    "AssemblerError",
    "ParseError",
    "EncodingError",
    "ObjectFileError",
    "ConfigError",
    "ObjectFormat",
]
