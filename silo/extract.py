from __future__ import annotations

import os
from dataclasses import dataclass

from .constants import DEFAULT_EXISTS_POLICY, EXISTS_POLICIES, TEXT_ENCODING, TEXT_ERRORS
from .document import Document
from .errors import DestinationExists, SiloIOError
from .pathutil import to_host_path, validate_path


@dataclass
class ExtractStats:
    written: int = 0
    skipped: int = 0
    renamed: int = 0
    bytes: int = 0


def _next_nonconflicting_path(path: str) -> str:
    if not os.path.lexists(path):
        return path
    base_dir = os.path.dirname(path)
    root, ext = os.path.splitext(os.path.basename(path))
    i = 1
    while True:
        candidate = os.path.join(base_dir, f"{root} ({i}){ext}")
        if not os.path.lexists(candidate):
            return candidate
        i += 1


def write_to_directory(
    doc: Document,
    outdir: str = ".",
    *,
    exists: str = DEFAULT_EXISTS_POLICY,
    quiet: bool = False,
) -> ExtractStats:
    """Materialize every record under outdir.

    Args:
        doc: Parsed or collected document.
        outdir: Destination root; created if missing.
        exists: What to do when a destination file exists: overwrite, skip,
            rename (append ' (n)' before the extension) or fail.
        quiet: Suppress per-file progress lines.

    Raises:
        DestinationExists: policy 'fail' hit an existing file, or a directory
            sits where a file must go.
        SiloIOError: a directory or file could not be created.
    """
    if exists not in EXISTS_POLICIES:
        raise ValueError(f"unknown exists policy: {exists}")
    stats = ExtractStats()
    total = len(doc)

    for n, rec in enumerate(doc.records, start=1):
        # Documents built by hand may bypass the parser's checks.
        validate_path(rec.path)
        dst = to_host_path(outdir or ".", rec.path)
        parent = os.path.dirname(dst) or "."
        try:
            os.makedirs(parent, exist_ok=True)
        except OSError as exc:
            raise SiloIOError("create directory", parent, exc) from exc

        actual_dst = dst
        if os.path.lexists(actual_dst):
            if os.path.isdir(actual_dst) and not os.path.islink(actual_dst):
                raise DestinationExists(actual_dst, "cannot overwrite directory with file")
            if exists == "overwrite" and os.path.islink(actual_dst):
                # replace the link itself, never write through it
                try:
                    os.remove(actual_dst)
                except OSError as exc:
                    raise SiloIOError("remove link", actual_dst, exc) from exc
            elif exists == "skip":
                if not quiet:
                    print(f"    skipping: {rec.path} (exists)")
                stats.skipped += 1
                continue
            if exists == "rename":
                actual_dst = _next_nonconflicting_path(actual_dst)
            elif exists == "fail":
                raise DestinationExists(actual_dst)

        data = rec.content.encode(TEXT_ENCODING, TEXT_ERRORS)
        if not quiet:
            print(f" unpacking: {n:>4}/{total:<4} {rec.path}")
        try:
            with open(actual_dst, "wb") as fh:
                fh.write(data)
        except OSError as exc:
            raise SiloIOError("write file", actual_dst, exc) from exc
        if actual_dst != dst:
            if not quiet:
                print(f"       note: renamed to {actual_dst}")
            stats.renamed += 1
        stats.written += 1
        stats.bytes += len(data)
    return stats
