import pytest

from pg_ddl_core.lib.errors import SqlFileError
from pg_ddl_core.lib.normalize import fingerprint, normalize, strip_header, ddl_lines, read_sql_file


def test_strip_header_removes_leading_comments():
    content = "-- Extracted: 2026-01-18\n-- Source: dev\n\nCREATE TABLE a (id int);\n"
    assert strip_header(content) == "CREATE TABLE a (id int);"


def test_strip_header_keeps_comments_after_body_starts():
    content = "-- header\nCREATE TABLE a (\n-- inline note\n  id int\n);"
    assert strip_header(content) == "CREATE TABLE a (\n-- inline note\n  id int\n);"


def test_strip_header_only_comments_falls_back_to_trimmed_content():
    content = "\n-- just a note\n-- another\n\n"
    assert strip_header(content) == "-- just a note\n-- another"


def test_comment_without_space_is_not_header():
    # Only "-- " prefixed lines count as header
    content = "--nospace\nCREATE TABLE a (id int);"
    assert strip_header(content) == content


def test_normalize_ignores_trailing_whitespace_and_blank_lines():
    a = "CREATE TABLE a (\n  id int   \n\n);\n\n"
    b = "CREATE TABLE a (\n  id int\n);"
    assert normalize(a) == normalize(b)


def test_normalize_keeps_leading_indentation():
    assert normalize("CREATE TABLE a (\n  id int\n);") != normalize("CREATE TABLE a (\nid int\n);")


def test_fingerprint_ignores_header_timestamps():
    body = "CREATE VIEW v AS SELECT 1;"
    first = "-- Extracted: 2026-01-01 00:00:00\n\n" + body
    second = "-- Extracted: 2026-02-02 12:34:56\n-- by someone else\n" + body
    assert fingerprint(first) == fingerprint(second)


def test_fingerprint_detects_body_change():
    assert fingerprint("SELECT 1;") != fingerprint("SELECT 2;")


def test_ddl_lines_splits_stripped_body():
    assert ddl_lines("-- h\nA\nB") == ["A", "B"]


def test_read_sql_file_replaces_invalid_bytes(tmp_path):
    path = tmp_path / "t.sql"
    path.write_bytes(b"SELECT '\xe9';")
    assert read_sql_file(str(path)) == "SELECT '�';"


def test_read_sql_file_missing_raises_typed_error(tmp_path):
    missing = str(tmp_path / "missing.sql")
    with pytest.raises(SqlFileError) as excinfo:
        read_sql_file(missing)
    assert excinfo.value.path == missing
