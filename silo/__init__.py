"""
Silo: a reversible, delimiter-framed text archive.

A silo archive is plain text: each file starts with a declaration line
"<delimiter> <path>" followed by the file's lines, up to the next declaration
or the end of the stream. One delimiter frames every file in an archive.

- Delimiter detection from the first declaration (any non-whitespace run,
  or ASCII punctuation only for the older rule)
- Path safety checks (no absolute paths, no '..', no NUL, no duplicates)
- Collision-free delimiter auto-selection over '>', '=', '*', '-' runs
- Secure glob expansion, directory walk, and extraction with conflict policies
- `silo pack`, `silo unpack`, `silo list` via the CLI
"""

__version__ = "0.2"

__all__ = [
    "constants",
    "document",
    "delimiter",
    "reader",
    "writer",
    "collect",
    "extract",
]

# Programmatic API: silo.reader.parse_document / silo.writer.dumps, plus the
# CLI functions in silo.cli (cmd_pack/cmd_unpack/cmd_list) which take normal parameters.
