"""
Object file containers.

Two incompatible layouts exist and are never mixed:

- RAW: a flat run of 32-bit words, each little-endian, with no header.
- LEGACY: big-endian magic 0x00C0FFEE, big-endian instruction count, then
  the words, also big-endian.
"""

import struct
import warnings
from enum import Enum
from typing import Iterable, List

from .errors import ObjectFileError, ObjectFileWarning


LEGACY_MAGIC = 0xC0FFEE
LEGACY_HEADER = struct.Struct(">II")
WORD_SIZE = 4


class ObjectFormat(Enum):
    """Object file layout selector."""

    RAW = "raw"
    LEGACY = "legacy"

    @classmethod
    def from_name(cls, name: str) -> "ObjectFormat":
        try:
            return cls(name.lower())
        except ValueError:
            choices = ", ".join(f.value for f in cls)
            raise ValueError(f"Unknown object format '{name}' (expected one of: {choices})")


def pack_words(words: Iterable[int], fmt: ObjectFormat = ObjectFormat.RAW) -> bytes:
    """Serialize instruction words into an object file image."""
    words = [w & 0xFFFFFFFF for w in words]

    if fmt == ObjectFormat.RAW:
        return struct.pack(f"<{len(words)}I", *words)
    elif fmt == ObjectFormat.LEGACY:
        header = LEGACY_HEADER.pack(LEGACY_MAGIC, len(words))
        return header + struct.pack(f">{len(words)}I", *words)
    else:
        raise ObjectFileError(f"Unknown object format: {fmt}")


def unpack_words(data: bytes, fmt: ObjectFormat = ObjectFormat.RAW) -> List[int]:
    """
    Deserialize an object file image into instruction words.

    Raises:
        ObjectFileError: If a LEGACY image has a bad header or length
    """
    if fmt == ObjectFormat.RAW:
        remainder = len(data) % WORD_SIZE
        if remainder:
            warnings.warn(
                f"Object file length {len(data)} is not a multiple of {WORD_SIZE}; "
                f"discarding {remainder} trailing byte(s)",
                ObjectFileWarning,
            )
            data = data[: len(data) - remainder]
        count = len(data) // WORD_SIZE
        return list(struct.unpack(f"<{count}I", data))

    elif fmt == ObjectFormat.LEGACY:
        if len(data) < LEGACY_HEADER.size:
            raise ObjectFileError(
                f"File too small for header: {len(data)} bytes, need {LEGACY_HEADER.size}"
            )
        magic, count = LEGACY_HEADER.unpack_from(data)
        if magic != LEGACY_MAGIC:
            raise ObjectFileError(
                f"Bad magic number 0x{magic:X} (expected 0x{LEGACY_MAGIC:X})"
            )
        expected = LEGACY_HEADER.size + count * WORD_SIZE
        if len(data) != expected:
            raise ObjectFileError(
                f"File size mismatch: expected {expected} bytes, got {len(data)}"
            )
        return list(struct.unpack_from(f">{count}I", data, LEGACY_HEADER.size))

    else:
        raise ObjectFileError(f"Unknown object format: {fmt}")


def write_object(path: str, words: Iterable[int], fmt: ObjectFormat = ObjectFormat.RAW) -> None:
    """Write instruction words to an object file."""
    with open(path, "wb") as f:
        f.write(pack_words(words, fmt))


def read_object(path: str, fmt: ObjectFormat = ObjectFormat.RAW) -> List[int]:
    """Read instruction words from an object file."""
    with open(path, "rb") as f:
        data = f.read()
    return unpack_words(data, fmt)
