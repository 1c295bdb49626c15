from __future__ import annotations

from typing import Optional, Sequence


class SiloError(Exception):
    """Base class for silo-specific errors."""


def _at_line(msg: str, line: Optional[int]) -> str:
    return f"line {line}: {msg}" if line is not None else msg


# Declaration line (delimiter detection)
class DeclarationError(SiloError):
    def __init__(self, msg: str, line: Optional[int] = None):
        super().__init__(_at_line(msg, line))
        self.line = line


class EmptyLine(DeclarationError):
    def __init__(self, line: Optional[int] = None):
        super().__init__("empty line cannot contain a delimiter", line)


class InvalidDeclaration(DeclarationError):
    def __init__(self, text: str, line: Optional[int] = None):
        super().__init__(f"invalid file declaration: {text!r}", line)
        self.text = text


class EmptyPath(DeclarationError):
    def __init__(self, line: Optional[int] = None):
        super().__init__("declaration has an empty path", line)


class DelimiterDetectionFailed(SiloError):
    def __init__(self, line: int, reason: DeclarationError):
        super().__init__(f"error detecting delimiter on line {line}: {reason}")
        self.line = line
        self.reason = reason


# Path safety
class InvalidPath(SiloError):
    reason = "invalid path"

    def __init__(self, path: str, line: Optional[int] = None):
        super().__init__(_at_line(f"{self.reason}: {path!r}", line))
        self.path = path
        self.line = line


class AbsolutePathNotAllowed(InvalidPath):
    reason = "absolute paths not allowed"


class ParentReferenceNotAllowed(InvalidPath):
    reason = "parent directory references not allowed"


class NullByteInPath(InvalidPath):
    reason = "null character in path"


class UndeclarablePath(InvalidPath):
    reason = "path has a line break or surrounding whitespace and cannot be declared"


class DuplicatePath(SiloError):
    def __init__(self, path: str, line: Optional[int] = None):
        super().__init__(_at_line(f"duplicate path: {path}", line))
        self.path = path
        self.line = line


# Delimiter choice
class InvalidDelimiter(SiloError):
    def __init__(self, delimiter: str):
        super().__init__(
            f"invalid delimiter {delimiter!r}: must be non-empty and contain no spaces, tabs or line breaks"
        )
        self.delimiter = delimiter


class NoSafeDelimiter(SiloError):
    pass


class DelimiterCollision(SiloError):
    def __init__(
        self,
        delimiter: str,
        path: str,
        suggestion: Optional[str] = None,
        suggestion_error: Optional[NoSafeDelimiter] = None,
    ):
        if suggestion is not None:
            msg = (
                f"delimiter {delimiter!r} conflicts with content in file {path}. "
                f"Try the auto-selected delimiter {suggestion!r} (omit -d) or choose a different delimiter"
            )
        else:
            msg = (
                f"delimiter {delimiter!r} conflicts with content in file {path}, "
                f"and no safe delimiter could be auto-selected: {suggestion_error}"
            )
        super().__init__(msg)
        self.delimiter = delimiter
        self.path = path
        self.suggestion = suggestion
        self.suggestion_error = suggestion_error


# Filesystem collaborators
class SiloIOError(SiloError):
    def __init__(self, op: str, path: str, cause: Optional[BaseException] = None):
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"failed to {op} {path}{detail}")
        self.op = op
        self.path = path


class NoMatches(SiloError):
    def __init__(self, patterns: Sequence[str]):
        super().__init__("no files matched the specified patterns: " + ", ".join(patterns))
        self.patterns = list(patterns)


class DestinationExists(SiloError):
    def __init__(self, path: str, detail: str = "destination exists"):
        super().__init__(f"{detail}: {path}")
        self.path = path
