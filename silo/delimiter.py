from __future__ import annotations

from typing import Iterable, List, Optional, Tuple, TYPE_CHECKING

from .constants import (
    ASCII_PUNCTUATION_RANGES,
    BASE_DELIMITER_CHARS,
    DECLARATION_SEPARATOR,
    MAX_DELIMITER_LENGTH,
    NON_DELIMITER_CHARS,
)
from .errors import EmptyLine, EmptyPath, InvalidDeclaration, NoSafeDelimiter

if TYPE_CHECKING:
    from .document import Record


def logical_lines(text: str) -> List[str]:
    """Split text into lines, treating CRLF and lone CR as LF.

    A final line break does not produce a trailing empty line.
    """
    if not text:
        return []
    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def is_delimiter_char(ch: str) -> bool:
    """Permissive rule: any character but space, tab, LF and CR."""
    return ch not in NON_DELIMITER_CHARS


def is_ascii_punctuation(ch: str) -> bool:
    cp = ord(ch)
    for lo, hi in ASCII_PUNCTUATION_RANGES:
        if lo <= cp <= hi:
            return True
    return False


def is_valid_delimiter(delimiter: str, *, ascii_only: bool = False) -> bool:
    classify = is_ascii_punctuation if ascii_only else is_delimiter_char
    return bool(delimiter) and all(classify(ch) for ch in delimiter)


def detect_delimiter(line: str, *, ascii_only: bool = False) -> Tuple[str, str]:
    """Split a declaration line into (delimiter, path).

    The delimiter is the maximal run of delimiter characters at the very start
    of the line; it must be followed by exactly one space. The remainder,
    stripped, is the path.

    Raises:
        EmptyLine: the line is blank.
        InvalidDeclaration: no delimiter run, or no space after it.
        EmptyPath: nothing follows the separator.
    """
    if not line.strip():
        raise EmptyLine()
    classify = is_ascii_punctuation if ascii_only else is_delimiter_char

    i = 0
    n = len(line)
    while i < n and classify(line[i]):
        i += 1
    if i == 0:
        raise InvalidDeclaration(line)
    if i >= n or line[i] != DECLARATION_SEPARATOR:
        raise InvalidDeclaration(line)

    path = line[i + 1:].strip()
    if not path:
        raise EmptyPath()
    return line[:i], path


def find_collision(records: Iterable["Record"], delimiter: str) -> Optional["Record"]:
    """Return the first record with a content line that would read as a declaration."""
    prefix = delimiter + DECLARATION_SEPARATOR
    for rec in records:
        for line in logical_lines(rec.content):
            if line.startswith(prefix):
                return rec
    return None


def select_safe_delimiter(records: Iterable["Record"]) -> str:
    """Pick the shortest, most preferred base delimiter no content line collides with.

    Candidates are each of '>', '=', '*', '-' repeated 1..50 times. A content
    line starting with c*k + ' ' has a leading run of exactly k copies of c, so
    every line rules out at most one candidate; an elimination table indexed by
    (char, length) keeps this linear in the content size.
    """
    eliminated = {ch: [False] * (MAX_DELIMITER_LENGTH + 1) for ch in BASE_DELIMITER_CHARS}
    remaining = len(BASE_DELIMITER_CHARS) * MAX_DELIMITER_LENGTH

    for rec in records:
        for line in logical_lines(rec.content):
            if not line:
                continue
            row = eliminated.get(line[0])
            if row is None:
                continue
            run = len(line) - len(line.lstrip(line[0]))
            if run > MAX_DELIMITER_LENGTH or row[run]:
                continue
            if line[run:run + 1] == DECLARATION_SEPARATOR:
                row[run] = True
                remaining -= 1
                if remaining == 0:
                    raise NoSafeDelimiter(
                        "unable to find a safe delimiter: every candidate of length 1-"
                        f"{MAX_DELIMITER_LENGTH} over {' '.join(BASE_DELIMITER_CHARS)} conflicts with file content"
                    )

    for length in range(1, MAX_DELIMITER_LENGTH + 1):
        for ch in BASE_DELIMITER_CHARS:
            if not eliminated[ch][length]:
                return ch * length
    raise NoSafeDelimiter("unable to find a safe delimiter")
