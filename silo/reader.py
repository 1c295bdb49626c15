from __future__ import annotations

from typing import List

from .constants import DECLARATION_SEPARATOR, TEXT_ENCODING, TEXT_ERRORS
from .delimiter import detect_delimiter, logical_lines
from .document import Document, Record
from .errors import DeclarationError, DelimiterDetectionFailed, SiloIOError


def _close(rec: Record, buf: List[str]) -> None:
    content = "\n".join(buf)
    if content:
        content += "\n"
    rec.content = content


def parse_document(text: str, *, ascii_only: bool = False) -> Document:
    """Parse archive text into a Document.

    The delimiter is detected once, on the first non-blank line, and from then
    on only an exact "<delimiter> " prefix starts a new record. Leading blank
    lines are skipped; input with nothing else yields an empty Document.

    Args:
        text: Whole archive text; CRLF and CR line endings are accepted.
        ascii_only: Restrict delimiter characters to ASCII punctuation.

    Raises:
        DelimiterDetectionFailed: first declaration line is malformed.
        InvalidPath: a declared path is unsafe (line number attached).
        DuplicatePath: a path is declared twice.
    """
    lines = logical_lines(text)
    doc = Document()

    idx = 0
    while idx < len(lines) and not lines[idx].strip():
        idx += 1
    if idx >= len(lines):
        return doc

    try:
        delim, first_path = detect_delimiter(lines[idx], ascii_only=ascii_only)
    except DeclarationError as exc:
        raise DelimiterDetectionFailed(idx + 1, exc) from exc
    doc.delimiter = delim
    prefix = delim + DECLARATION_SEPARATOR

    current = doc.add(first_path, "", line=idx + 1)
    buf: List[str] = []
    for lineno, line in enumerate(lines[idx + 1:], start=idx + 2):
        if line.startswith(prefix):
            _close(current, buf)
            current = doc.add(line[len(prefix):].strip(), "", line=lineno)
            buf = []
        else:
            buf.append(line)
    _close(current, buf)
    return doc


def load_document(path: str, *, ascii_only: bool = False) -> Document:
    """Read and parse an archive file."""
    try:
        with open(path, "rb") as fh:
            data = fh.read()
    except OSError as exc:
        raise SiloIOError("read archive", path, exc) from exc
    return parse_document(data.decode(TEXT_ENCODING, TEXT_ERRORS), ascii_only=ascii_only)
