"""
Compare assembled words against an expected-output file.

Expected files list one word per line as grouped binary, e.g.
``0b00000000000_00000_00000_00001_000010``. Lines not starting with "0b"
are ignored, so comments and blank lines may be mixed in.
"""

import re
from dataclasses import dataclass, field
from typing import List

from .decoder import format_binary_fields
from .errors import ParseError


_BINARY_RE = re.compile(r"^[01]+$")


@dataclass
class Mismatch:
    index: int
    expected: int
    actual: int


@dataclass
class VerifyReport:
    """Outcome of comparing actual words with expected words."""

    actual_count: int
    expected_count: int
    matches: List[bool] = field(default_factory=list)
    mismatches: List[Mismatch] = field(default_factory=list)

    @property
    def count_matches(self) -> bool:
        return self.actual_count == self.expected_count

    @property
    def match_count(self) -> int:
        return sum(self.matches)

    @property
    def all_match(self) -> bool:
        return self.count_matches and not self.mismatches

    def summary(self) -> str:
        if not self.count_matches:
            return (
                f"Expected {self.expected_count} instructions, "
                f"got {self.actual_count}"
            )
        lines = []
        for m in self.mismatches:
            lines.append(f"Instruction {m.index + 1}: mismatch")
            lines.append(f"  expected: {format_binary_fields(m.expected)}")
            lines.append(f"  actual:   {format_binary_fields(m.actual)}")
        lines.append(
            f"{self.match_count} of {self.actual_count} instructions match, "
            f"{self.actual_count - self.match_count} differ"
        )
        return "\n".join(lines)


def parse_expected(text: str) -> List[int]:
    """
    Parse an expected-output file into words.

    Raises:
        ParseError: If a "0b" line is not a valid binary number
    """
    words = []
    for line_num, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line.startswith("0b"):
            continue
        digits = line[2:].replace("_", "")
        if not _BINARY_RE.match(digits):
            raise ParseError(f"Invalid expected value: {line}", line_num, line)
        words.append(int(digits, 2))
    return words


def compare_words(actual: List[int], expected: List[int]) -> VerifyReport:
    """
    Compare two word lists position by position.

    A count mismatch is reported without comparing individual words.
    """
    report = VerifyReport(actual_count=len(actual), expected_count=len(expected))
    if not report.count_matches:
        return report

    for i, (a, e) in enumerate(zip(actual, expected)):
        ok = a == e
        report.matches.append(ok)
        if not ok:
            report.mismatches.append(Mismatch(index=i, expected=e, actual=a))
    return report


def verify_file(actual: List[int], expected_path: str) -> VerifyReport:
    """Compare against an expected-output file on disk."""
    with open(expected_path, "r", encoding="utf-8") as f:
        return compare_words(actual, parse_expected(f.read()))
