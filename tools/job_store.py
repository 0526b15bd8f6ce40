"""
Job Store — SQLite persistence for the employer registry and canonical jobs.

This module is the only writer to the jobs table. Upserts are idempotent:
repeated sightings of the same identity key refresh `last_seen_at` and never
create a second row.
"""

import logging
import os
import sqlite3
import uuid
from datetime import datetime, timezone
from typing import Optional

from config.settings import settings
from models.job import Employer, JobPosting

logger = logging.getLogger(__name__)


SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS employers (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL UNIQUE COLLATE NOCASE,
    careers_url TEXT,
    source TEXT,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS jobs (
    id TEXT PRIMARY KEY,
    employer_id TEXT REFERENCES employers(id),
    employer_name TEXT,
    title TEXT NOT NULL,
    location TEXT,
    job_url TEXT UNIQUE,
    source_careers_url TEXT,
    employment_type TEXT,
    posted_at TEXT,
    closing_date TEXT,
    raw_text_snippet TEXT,
    description TEXT,
    source TEXT,
    first_seen_at TEXT NOT NULL,
    last_seen_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_jobs_posted_at ON jobs(posted_at);
CREATE INDEX IF NOT EXISTS idx_employers_careers_url ON employers(careers_url);
"""

JOB_COLUMNS = (
    "id", "employer_id", "employer_name", "title", "location", "job_url",
    "source_careers_url", "employment_type", "posted_at", "closing_date",
    "raw_text_snippet", "description", "source", "first_seen_at", "last_seen_at",
)


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _get_connection(db_path: str = None) -> sqlite3.Connection:
    """Get a SQLite connection, creating the database directory if needed."""
    db_path = db_path or settings.db_path
    directory = os.path.dirname(db_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def init_db(db_path: str = None) -> str:
    """Create the employers and jobs tables if they don't exist. Returns the db path."""
    db_path = db_path or settings.db_path
    conn = _get_connection(db_path)
    try:
        conn.executescript(SCHEMA_SQL)
        conn.commit()
    finally:
        conn.close()
    return db_path


# ── Employers ────────────────────────────────────────────────


def upsert_employer(
    name: str,
    source: str = "",
    careers_url: Optional[str] = None,
    db_path: str = None,
    now: Optional[str] = None,
) -> Optional[str]:
    """
    Insert an employer or update the existing one with the same name.

    Names compare case-insensitively. An existing careers URL is never
    cleared; it is only replaced when a new one is supplied.

    Returns:
        The employer id, or None if the write failed.
    """
    now = now or _utc_now()
    conn = _get_connection(db_path)
    try:
        with conn:
            conn.execute(
                """
                INSERT INTO employers (id, name, careers_url, source, updated_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(name) DO UPDATE SET
                    careers_url = COALESCE(excluded.careers_url, employers.careers_url),
                    updated_at = excluded.updated_at
                """,
                (str(uuid.uuid4()), name, careers_url or None, source, now),
            )
            row = conn.execute("SELECT id FROM employers WHERE name = ?", (name,)).fetchone()
        return row["id"] if row else None
    except sqlite3.Error as e:
        logger.error("Error upserting employer %s: %s", name, e)
        return None
    finally:
        conn.close()


def _select_employers(where: str = "", db_path: str = None) -> list[Employer]:
    conn = _get_connection(db_path)
    try:
        rows = conn.execute(f"SELECT * FROM employers {where} ORDER BY name").fetchall()
        return [Employer(**dict(row)) for row in rows]
    finally:
        conn.close()


def get_all_employers(db_path: str = None) -> list[Employer]:
    return _select_employers("", db_path)


def get_employers_without_careers_url(db_path: str = None) -> list[Employer]:
    """Employers still in the Unknown state."""
    return _select_employers("WHERE careers_url IS NULL OR careers_url = ''", db_path)


def get_employers_with_careers_url(db_path: str = None) -> list[Employer]:
    """Employers in the Resolved state."""
    return _select_employers("WHERE careers_url IS NOT NULL AND careers_url != ''", db_path)


# ── Jobs ─────────────────────────────────────────────────────


def upsert_job(job: JobPosting, db_path: str = None, now: Optional[str] = None) -> str:
    """
    Insert a job, or refresh the existing row with the same identity.

    The existing row is matched by id, or by job_url when one is set. On a
    repeat sighting only last_seen_at, closing_date (when supplied) and
    description (when non-empty) change. Both statements run in a single
    transaction, so there is no window between the existence check and the
    write.

    Returns:
        "inserted" or "updated".

    Raises:
        sqlite3.Error: if the row could not be written.
    """
    now = now or _utc_now()
    values = job.model_dump()
    values["job_url"] = values["job_url"] or None
    values["first_seen_at"] = now
    values["last_seen_at"] = now

    conn = _get_connection(db_path)
    try:
        with conn:
            placeholders = ", ".join(f":{col}" for col in JOB_COLUMNS)
            cursor = conn.execute(
                f"INSERT OR IGNORE INTO jobs ({', '.join(JOB_COLUMNS)}) VALUES ({placeholders})",
                values,
            )
            if cursor.rowcount == 1:
                return "inserted"

            cursor = conn.execute(
                """
                UPDATE jobs SET
                    last_seen_at = :last_seen_at,
                    closing_date = COALESCE(:closing_date, closing_date),
                    description = CASE
                        WHEN COALESCE(:description, '') != '' THEN :description
                        ELSE description
                    END
                WHERE id = :id OR (:job_url IS NOT NULL AND job_url = :job_url)
                """,
                values,
            )
            if cursor.rowcount == 0:
                raise sqlite3.IntegrityError(f"Job {job.id} was rejected by the store")
            return "updated"
    finally:
        conn.close()


def get_job(job_id: str, db_path: str = None) -> Optional[dict]:
    conn = _get_connection(db_path)
    try:
        row = conn.execute("SELECT * FROM jobs WHERE id = ?", (job_id,)).fetchone()
        return dict(row) if row else None
    finally:
        conn.close()


def get_all_jobs(db_path: str = None) -> list[dict]:
    """All jobs, most recently posted first (undated last), then most recently seen."""
    conn = _get_connection(db_path)
    try:
        rows = conn.execute(
            """
            SELECT * FROM jobs
            ORDER BY posted_at IS NULL, posted_at DESC, last_seen_at DESC
            """
        ).fetchall()
        return [dict(row) for row in rows]
    finally:
        conn.close()


def get_job_count(db_path: str = None) -> int:
    """Return total number of stored jobs."""
    conn = _get_connection(db_path)
    try:
        return conn.execute("SELECT COUNT(*) FROM jobs").fetchone()[0]
    finally:
        conn.close()
