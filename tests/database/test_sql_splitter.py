from pathlib import Path

from src.homestay_staff.homestay_staff.database.bootstrap import _strip_create_db_and_use, iter_sql_statements

SCHEMA = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def test_splitter_ignores_semicolons_in_quotes_and_comments():
    sql = """
    -- comment; with semicolon
    INSERT INTO t VALUES ('a;b');
    SELECT 1;
    """

    assert list(iter_sql_statements(sql)) == ["INSERT INTO t VALUES ('a;b')", "SELECT 1"]


def test_create_database_and_use_are_stripped():
    sql = "CREATE DATABASE IF NOT EXISTS homestay_db;\nUSE homestay_db;\nSELECT 1;"

    assert list(iter_sql_statements(_strip_create_db_and_use(sql))) == ["SELECT 1"]


def test_schema_declares_one_log_per_day():
    statements = list(iter_sql_statements(SCHEMA.read_text(encoding="utf-8")))

    tables = [s for s in statements if s.upper().startswith("CREATE TABLE")]
    assert len(tables) == 4
    attendance = next(s for s in tables if "attendance_logs" in s.split("(")[0])
    assert "CONSTRAINT uq_attendance_staff_day UNIQUE (staff_id, work_date)" in attendance
