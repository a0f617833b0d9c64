"""
Disassembler: object files and word lists back to assembly text.
"""

from typing import Iterable, List

from .decoder import DecodedInstruction, decode_word
from .objfile import ObjectFormat, read_object, unpack_words


class Disassembler:
    """
    Toy machine disassembler.

    Decodes words in program order. Unknown words are listed and skipped
    over; they never stop the run.
    """

    def __init__(self, verbose: bool = False):
        self.verbose = verbose
        self.decoded: List[DecodedInstruction] = []

    def log(self, message: str) -> None:
        """Print message if verbose mode is enabled."""
        if self.verbose:
            print(message)

    def disassemble_words(self, words: Iterable[int]) -> List[str]:
        """
        Decode a sequence of instruction words.

        Returns:
            Assembly text for each word, in order
        """
        self.decoded = [decode_word(word) for word in words]

        unknown = sum(1 for d in self.decoded if not d.known)
        self.log(f"Decoded {len(self.decoded)} words ({unknown} unknown)")

        return [d.text for d in self.decoded]

    def disassemble_bytes(self, data: bytes, object_format: ObjectFormat = ObjectFormat.RAW) -> List[str]:
        """Decode an in-memory object file image."""
        return self.disassemble_words(unpack_words(data, object_format))

    def disassemble_file(self, input_path: str, object_format: ObjectFormat = ObjectFormat.RAW) -> List[str]:
        """Decode an object file from disk."""
        self.log(f"Disassembling: {input_path} ({object_format.value})")
        return self.disassemble_words(read_object(input_path, object_format))

    def get_listing(self) -> str:
        """
        Get the disassembly listing.

        Each line reads ``ADDRESS: WORD  TEXT``, addresses starting at 0 and
        advancing by 4.
        """
        return "\n".join(
            f"{addr * 4:08X}: {d.word:08X}  {d.text}" for addr, d in enumerate(self.decoded)
        )
