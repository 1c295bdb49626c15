from __future__ import annotations

import io
from typing import TextIO

from .constants import DECLARATION_SEPARATOR, TEXT_ENCODING, TEXT_ERRORS
from .delimiter import find_collision, is_valid_delimiter, select_safe_delimiter
from .document import Document
from .errors import DelimiterCollision, InvalidDelimiter, NoSafeDelimiter, SiloIOError
from .pathutil import check_declarable


def resolve_delimiter(doc: Document) -> str:
    """Return the delimiter a write of doc will use.

    An unset delimiter is auto-selected and stored on the document. An explicit
    one is checked for characters that could never be read back and for
    content lines it would collide with.

    Raises:
        NoSafeDelimiter: auto-selection exhausted every candidate.
        InvalidDelimiter: explicit delimiter is empty or contains whitespace.
        UndeclarablePath: a record path would not survive a declaration line.
        DelimiterCollision: explicit delimiter prefixes a content line.
    """
    for rec in doc.records:
        check_declarable(rec.path)
    if not doc.delimiter:
        doc.delimiter = select_safe_delimiter(doc.records)
        return doc.delimiter

    delim = doc.delimiter
    if not is_valid_delimiter(delim):
        raise InvalidDelimiter(delim)
    hit = find_collision(doc.records, delim)
    if hit is not None:
        try:
            suggestion = select_safe_delimiter(doc.records)
        except NoSafeDelimiter as exc:
            raise DelimiterCollision(delim, hit.path, suggestion_error=exc) from exc
        raise DelimiterCollision(delim, hit.path, suggestion=suggestion)
    return delim


def write_document(doc: Document, sink: TextIO) -> str:
    """Serialize doc to a text sink and return the delimiter used.

    Nothing is written unless the delimiter resolves cleanly.
    """
    delim = resolve_delimiter(doc)
    for rec in doc.records:
        sink.write(f"{delim}{DECLARATION_SEPARATOR}{rec.path}\n")
        content = rec.content
        if content and not content.endswith("\n"):
            content += "\n"
        sink.write(content)
    return delim


def dumps(doc: Document) -> str:
    buf = io.StringIO()
    write_document(doc, buf)
    return buf.getvalue()


def save_document(doc: Document, path: str) -> str:
    """Write doc to an archive file; returns the delimiter used."""
    text = dumps(doc)
    try:
        with open(path, "wb") as fh:
            fh.write(text.encode(TEXT_ENCODING, TEXT_ERRORS))
    except OSError as exc:
        raise SiloIOError("write archive", path, exc) from exc
    return doc.delimiter  # resolved by dumps()
