"""Package version parsing and ordering.

Version string format:
    {number}(.{number|word})*(-{word}(.{word})*)?

Examples:
    1.0, 2.3.10, 2.0.pre, 2.0-pre, 1.0.0.rc1

Segments are split on dots and on digit/letter boundaries. Numeric segments
compare numerically, word segments compare lexically and always sort before
numeric ones, so ``2.0.pre < 2.0 < 2.0.1``. Missing trailing segments count
as zero, so ``1.0 == 1.0.0``. A hyphen is read as ``.pre.``. Any word
segment makes the version a prerelease.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import total_ordering

VERSION_PATTERN = re.compile(
    r"^"
    r"[0-9]+(?:\.[0-9a-zA-Z]+)*"  # release part: 1.2.3, 1.0.rc1
    r"(?:-[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?"  # hyphenated prerelease: -pre, -beta.2
    r"$"
)

_SEGMENT_PATTERN = re.compile(r"[0-9]+|[a-zA-Z]+")

Segment = int | str


def _split_segments(raw: str) -> tuple[Segment, ...]:
    normalized = raw.replace("-", ".pre.")
    return tuple(
        int(token) if token.isdigit() else token for token in _SEGMENT_PATTERN.findall(normalized)
    )


def _canonical(segments: tuple[Segment, ...]) -> tuple[Segment, ...]:
    end = len(segments)
    while end > 1 and segments[end - 1] == 0:
        end -= 1
    return segments[:end]


def _compare_segment(lhs: Segment, rhs: Segment) -> int:
    if isinstance(lhs, int) and isinstance(rhs, int):
        return (lhs > rhs) - (lhs < rhs)
    if isinstance(lhs, str) and isinstance(rhs, str):
        return (lhs > rhs) - (lhs < rhs)
    # Words sort before numbers.
    return -1 if isinstance(lhs, str) else 1


@total_ordering
@dataclass(frozen=True, eq=False)
class Version:
    """Parsed package version.

    Attributes:
        raw: Original version string, written verbatim to the index.
        segments: Parsed numeric and word segments.
    """

    raw: str
    segments: tuple[Segment, ...] = field(repr=False)

    def __str__(self) -> str:
        """Return the raw version string."""
        return self.raw

    @property
    def prerelease(self) -> bool:
        """True if any segment is a word."""
        return any(isinstance(s, str) for s in self.segments)

    def compare(self, other: Version) -> int:
        """Three-way comparison: negative, zero or positive."""
        lhs, rhs = self.segments, other.segments
        for i in range(max(len(lhs), len(rhs))):
            a = lhs[i] if i < len(lhs) else 0
            b = rhs[i] if i < len(rhs) else 0
            result = _compare_segment(a, b)
            if result:
                return result
        return 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare(other) == 0

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare(other) < 0

    def __hash__(self) -> int:
        return hash(_canonical(self.segments))


def parse_version(version_str: str) -> Version:
    """Parse a version string.

    Args:
        version_str: Version string, surrounding whitespace is ignored.

    Returns:
        Version with parsed segments.

    Raises:
        ValueError: If the string is not a valid version.
    """
    raw = version_str.strip()
    if not VERSION_PATTERN.match(raw):
        msg = f"Invalid version string: {version_str!r}"
        raise ValueError(msg)
    return Version(raw=raw, segments=_split_segments(raw))
