from __future__ import annotations

import os
from typing import Optional

from .errors import (
    AbsolutePathNotAllowed,
    InvalidPath,
    NullByteInPath,
    ParentReferenceNotAllowed,
    UndeclarablePath,
)


def validate_path(path: str, line: Optional[int] = None) -> None:
    """Reject archive paths that are unsafe to materialize.

    Rules, checked in order:
    - Empty or '.' -> InvalidPath
    - Absolute on this host (or leading '/') -> AbsolutePathNotAllowed
    - Contains '..' anywhere, not just as a segment -> ParentReferenceNotAllowed
    - Contains NUL -> NullByteInPath

    The '..' test is a plain substring test, so a file literally named
    'a..b' is rejected as well.
    """
    if path == "" or path == ".":
        raise InvalidPath(path, line)
    if os.path.isabs(path) or path.startswith("/"):
        raise AbsolutePathNotAllowed(path, line)
    if ".." in path:
        raise ParentReferenceNotAllowed(path, line)
    if "\x00" in path:
        raise NullByteInPath(path, line)


def check_declarable(path: str) -> None:
    """Reject paths a declaration line cannot carry intact.

    The parser splits on LF/CR and strips the path, so either would change
    the path on the way back in.
    """
    if "\n" in path or "\r" in path or path != path.strip():
        raise UndeclarablePath(path)


def to_archive_path(p: str) -> str:
    """Host path -> forward-slash archive form."""
    if os.sep != "/":
        p = p.replace(os.sep, "/")
    if os.altsep and os.altsep != "/":
        p = p.replace(os.altsep, "/")
    return p


def to_host_path(root: str, path: str) -> str:
    """Join a forward-slash archive path onto a host directory."""
    return os.path.join(root, *path.split("/"))
