from __future__ import annotations

import argparse
import sys
import time
from typing import List, Optional

from silo.collect import GlobMode, collect
from silo.constants import DEFAULT_EXISTS_POLICY, EXISTS_POLICIES, TEXT_ENCODING, TEXT_ERRORS
from silo.errors import SiloError
from silo.extract import write_to_directory
from silo.reader import load_document
from silo.writer import dumps, save_document


def _mib(n: int) -> float:
    return n / (1024.0 * 1024.0)


def cmd_pack(
    patterns: list[str],
    *,
    output: Optional[str] = None,
    delimiter: Optional[str] = None,
    enhanced: bool = False,
    quiet: bool = False,
) -> bool:
    """Pack files matching patterns (or a single directory tree) into an archive.

    Args:
        patterns: Glob patterns, file paths, or one directory.
        output: Archive path to write; standard output when None.
        delimiter: Explicit delimiter; auto-selected when None or empty.
        enhanced: Let '**' match across directories without the standard fallback.
        quiet: Only print the final summary.

    Status lines go to standard error so standard output stays a clean archive.
    """
    t0 = time.time()
    mode = GlobMode.ENHANCED if enhanced else GlobMode.BOTH
    doc = collect(patterns, mode)
    doc.delimiter = delimiter or None

    if output:
        delim = save_document(doc, output)
    else:
        text = dumps(doc)
        delim = doc.delimiter
        out = getattr(sys.stdout, "buffer", None)
        if out is not None:
            out.write(text.encode(TEXT_ENCODING, TEXT_ERRORS))
            out.flush()
        else:
            sys.stdout.write(text)
            sys.stdout.flush()

    total_bytes = 0
    for rec in doc.records:
        total_bytes += len(rec.content.encode(TEXT_ENCODING, TEXT_ERRORS))
        if not quiet:
            print(f"   packing: {rec.path}", file=sys.stderr)
    dt = max(0.000001, time.time() - t0)
    print(
        f"Done: packed {len(doc)} files ({_mib(total_bytes):.2f} MiB) in {dt:.1f}s; "
        f"delimiter={delim!r} -> {output or '<stdout>'}",
        file=sys.stderr,
    )
    return True


def cmd_unpack(
    archive: str,
    *,
    outdir: str = ".",
    exists: str = DEFAULT_EXISTS_POLICY,
    ascii_only: bool = False,
    quiet: bool = False,
) -> bool:
    """Unpack an archive file into outdir."""
    t0 = time.time()
    doc = load_document(archive, ascii_only=ascii_only)
    stats = write_to_directory(doc, outdir, exists=exists, quiet=quiet)
    dt = max(0.000001, time.time() - t0)
    print(
        f"Done: unpacked {stats.written}/{len(doc)} files ({_mib(stats.bytes):.2f} MiB) to {outdir} "
        f"in {dt:.1f}s; skipped={stats.skipped} renamed={stats.renamed}"
    )
    return True


def cmd_list(archive: str, *, ascii_only: bool = False) -> bool:
    """List archive records as file<TAB>size<TAB>path."""
    doc = load_document(archive, ascii_only=ascii_only)
    if doc.delimiter is None:
        print("(empty archive)")
        return True
    print(f"delimiter\t{doc.delimiter}")
    for rec in doc.records:
        size = len(rec.content.encode(TEXT_ENCODING, TEXT_ERRORS))
        print(f"file\t{size}\t{rec.path}")
    return True


def main(argv: List[str] | None = None):
    ap = argparse.ArgumentParser(
        prog="silo",
        description="Pack files into a single delimiter-framed text archive, and unpack them again",
        epilog="Security: patterns and archive paths containing '..' or absolute paths are rejected.",
    )
    sub = ap.add_subparsers(dest="cmd", required=True)

    ap_pack = sub.add_parser("pack", help="Pack a directory or files matching patterns")
    ap_pack.add_argument("patterns", nargs="+", help="Directory, files or glob patterns")
    ap_pack.add_argument("-o", "--output", help="Output archive path (default: stdout)")
    ap_pack.add_argument("-d", "--delimiter", help="Delimiter to use (auto-selected if omitted)")
    ap_pack.add_argument("--enhanced", action="store_true", help="Enhanced glob: '**' matches across directories")
    ap_pack.add_argument("--quiet", help="limit outputs to summaries only", action="store_true")

    ap_unpack = sub.add_parser("unpack", help="Unpack an archive into a directory tree")
    ap_unpack.add_argument("archive", help="Archive path")
    ap_unpack.add_argument("-o", "--outdir", default=".", help="Output directory (default: .)")
    ap_unpack.add_argument(
        "--exists",
        choices=list(EXISTS_POLICIES),
        default=DEFAULT_EXISTS_POLICY,
        help=(
            "What to do if a destination file exists: overwrite, skip, "
            "rename (append ' (n)' before extension), or fail. Default: overwrite"
        ),
    )
    ap_unpack.add_argument("--ascii", action="store_true", help="Only accept ASCII punctuation delimiters")
    ap_unpack.add_argument("--quiet", help="limit outputs to summaries only", action="store_true")

    ap_list = sub.add_parser("list", help="List archive contents")
    ap_list.add_argument("archive", help="Archive path")
    ap_list.add_argument("--ascii", action="store_true", help="Only accept ASCII punctuation delimiters")

    args = ap.parse_args(argv)
    try:
        if args.cmd == "pack":
            cmd_pack(
                args.patterns,
                output=args.output,
                delimiter=args.delimiter,
                enhanced=args.enhanced,
                quiet=args.quiet,
            )
        elif args.cmd == "unpack":
            cmd_unpack(args.archive, outdir=args.outdir, exists=args.exists, ascii_only=args.ascii, quiet=args.quiet)
        elif args.cmd == "list":
            cmd_list(args.archive, ascii_only=args.ascii)
        else:
            raise RuntimeError("Unknown command")
    except (SiloError, OSError, ValueError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
