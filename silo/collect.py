"""
collect.py
Build a Document from the filesystem:
- Expand glob patterns safely (no absolute paths, no '..', percent-escapes decoded first)
- Walk a directory tree into records relative to its root
- Read an explicit list of files
File contents are read as bytes and decoded UTF-8 with surrogateescape so that
arbitrary bytes survive a pack/unpack cycle.
"""

from __future__ import annotations

import errno
import glob
import os
import stat
from enum import Enum
from typing import List, Optional, Sequence
from urllib.parse import unquote_plus

from .constants import TEXT_ENCODING, TEXT_ERRORS
from .document import Document
from .errors import (
    AbsolutePathNotAllowed,
    InvalidPath,
    NoMatches,
    ParentReferenceNotAllowed,
    SiloIOError,
)
from .pathutil import to_archive_path


class GlobMode(Enum):
    STANDARD = "standard"  # '**' behaves like '*'
    ENHANCED = "enhanced"  # '**' crosses directories
    BOTH = "both"          # enhanced, then standard if that found nothing


def _has_drive_letter(p: str) -> bool:
    return len(p) >= 2 and p[1] == ":" and p[0].isascii() and p[0].isalpha()


class GlobExpander:
    """Expand user-supplied patterns without letting results escape working_dir."""

    def __init__(self, working_dir: Optional[str] = None, *, allow_absolute: bool = False):
        self.working_dir = os.path.abspath(working_dir or os.getcwd())
        self.allow_absolute = allow_absolute

    def validate_pattern(self, pattern: str) -> None:
        if "%" in pattern:
            decoded = unquote_plus(pattern)
            if decoded != pattern:
                try:
                    self.validate_pattern(decoded)
                except InvalidPath as exc:
                    raise type(exc)(pattern) from exc

        if not self.allow_absolute:
            if os.path.isabs(pattern) or pattern.startswith(("/", "\\")) or _has_drive_letter(pattern):
                raise AbsolutePathNotAllowed(pattern)
        if ".." in pattern:
            raise ParentReferenceNotAllowed(pattern)

    def validate_match(self, path: str) -> None:
        self.validate_pattern(path)
        if not os.path.isabs(path):
            if ".." in to_archive_path(path).split("/"):
                raise ParentReferenceNotAllowed(path)
            return
        rel = os.path.relpath(path, self.working_dir)
        if rel == ".." or rel.startswith(".." + os.sep):
            raise ParentReferenceNotAllowed(path)

    def _glob(self, pattern: str, recursive: bool) -> List[str]:
        # '*' matches dotfiles too
        return sorted(glob.glob(pattern, root_dir=self.working_dir, recursive=recursive, include_hidden=True))

    def _normalize(self, match: str) -> str:
        if os.path.isabs(match):
            rel = os.path.relpath(match, self.working_dir)
            if not rel.startswith(".."):
                match = rel
        return to_archive_path(os.path.normpath(match))

    def expand(self, patterns: Sequence[str], mode: GlobMode = GlobMode.BOTH) -> List[str]:
        """Return matched paths, forward-slashed, deduplicated in first-seen order.

        A pattern that matches nothing but names an existing path is used as-is.
        """
        out: List[str] = []
        seen = set()
        for pattern in patterns:
            self.validate_pattern(pattern)
            if mode is GlobMode.STANDARD:
                matches = self._glob(pattern, recursive=False)
            elif mode is GlobMode.ENHANCED:
                matches = self._glob(pattern, recursive=True)
            else:
                matches = self._glob(pattern, recursive=True) or self._glob(pattern, recursive=False)

            if not matches and os.path.lexists(os.path.join(self.working_dir, pattern)):
                matches = [pattern]

            for m in matches:
                self.validate_match(m)
                norm = self._normalize(m)
                if norm not in seen:
                    seen.add(norm)
                    out.append(norm)
        return out


def expand_patterns(
    patterns: Sequence[str],
    mode: GlobMode = GlobMode.BOTH,
    working_dir: Optional[str] = None,
) -> List[str]:
    return GlobExpander(working_dir).expand(patterns, mode)


def _read_text(full: str, shown: str) -> str:
    try:
        with open(full, "rb") as fh:
            data = fh.read()
    except OSError as exc:
        raise SiloIOError("read file", shown, exc) from exc
    return data.decode(TEXT_ENCODING, TEXT_ERRORS)


def read_directory_tree(root: str) -> Document:
    """Record every regular file under root, paths relative to root, sorted."""

    def _walk_error(exc: OSError) -> None:
        raise SiloIOError("walk directory", exc.filename or root, exc) from exc

    found = []
    for dirpath, _dirnames, filenames in os.walk(root, onerror=_walk_error):
        for fn in filenames:
            full = os.path.join(dirpath, fn)
            if not os.path.isfile(full):
                continue
            found.append((to_archive_path(os.path.relpath(full, start=root)), full))

    doc = Document()
    for arc, full in sorted(found):
        doc.add(arc, _read_text(full, arc))
    return doc


def read_files(paths: Sequence[str], *, root: Optional[str] = None) -> Document:
    """Read explicit files; each is stored under its given path, sorted."""
    loaded = []
    for p in paths:
        full = os.path.join(root, p) if root else p
        try:
            st = os.stat(full)
        except OSError as exc:
            raise SiloIOError("stat file", p, exc) from exc
        if stat.S_ISDIR(st.st_mode):
            err = IsADirectoryError(errno.EISDIR, "path is a directory, not a file", p)
            raise SiloIOError("read file", p, err) from err
        loaded.append((to_archive_path(os.path.normpath(p)), _read_text(full, p)))

    doc = Document()
    for arc, content in sorted(loaded):
        doc.add(arc, content)
    return doc


def collect(
    patterns: Sequence[str],
    mode: GlobMode = GlobMode.BOTH,
    *,
    working_dir: Optional[str] = None,
) -> Document:
    """Expand patterns and load the matches into a Document (delimiter unset).

    A single directory match is walked as a tree; otherwise every match must be
    a regular file.
    """
    working_dir = os.path.abspath(working_dir or os.getcwd())
    paths = expand_patterns(patterns, mode, working_dir)
    if not paths:
        raise NoMatches(patterns)
    if len(paths) == 1:
        only = os.path.join(working_dir, paths[0])
        if os.path.isdir(only):
            return read_directory_tree(only)
    return read_files(paths, root=working_dir)
