import hashlib
from typing import List

from pg_ddl_core.lib.errors import SqlFileError


HEADER_PREFIX = "-- "


def strip_header(content: str) -> str:
    """Strip the generated header (timestamps etc) so only the DDL body remains."""
    lines = content.split("\n")
    for idx, line in enumerate(lines):
        if not line.startswith(HEADER_PREFIX) and line.strip() != "":
            return "\n".join(lines[idx:]).strip()
    # Nothing but comments and blank lines
    return content.strip()


def normalize(content: str) -> str:
    """
    Canonicalize a DDL file for equality tests.

    Removes the generated header, right-trims every line and drops blank lines,
    so header timestamps and whitespace-only edits never count as changes.
    """
    ddl = strip_header(content)
    lines = [line.rstrip() for line in ddl.split("\n")]
    return "\n".join(line for line in lines if line.strip() != "")


def fingerprint(content: str) -> str:
    """Content hash of the normalized DDL."""
    return hashlib.sha256(normalize(content).encode("utf-8")).hexdigest()


def ddl_lines(content: str) -> List[str]:
    """Header-stripped DDL split into lines, as used by the line differ."""
    return strip_header(content).split("\n")


def read_sql_file(path: str) -> str:
    """Read a captured file; bytes that are not valid UTF-8 become U+FFFD."""
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            return f.read()
    except OSError as e:
        raise SqlFileError(path, e.strerror or str(e)) from e
