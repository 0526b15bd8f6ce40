import sqlite3
import unittest

from models.job import JobPosting
from tests.fakes import temp_db_path
from tools import job_store


def _job(**overrides) -> JobPosting:
    values = {
        "id": "job-1",
        "employer_name": "Acme Corp",
        "title": "Graduate Analyst",
        "location": "London",
        "job_url": "https://acme.example/jobs/1",
        "description": "Original description",
        "source": "EmployerSite",
    }
    values.update(overrides)
    return JobPosting(**values)


class TestUpsertJob(unittest.TestCase):
    def setUp(self):
        self.db_path = temp_db_path()
        job_store.init_db(self.db_path)

    def test_insert_sets_both_timestamps(self):
        status = job_store.upsert_job(_job(), db_path=self.db_path, now="2026-01-01T09:00:00+00:00")
        self.assertEqual(status, "inserted")
        row = job_store.get_job("job-1", self.db_path)
        self.assertEqual(row["first_seen_at"], "2026-01-01T09:00:00+00:00")
        self.assertEqual(row["first_seen_at"], row["last_seen_at"])

    def test_repeat_sighting_is_idempotent(self):
        job_store.upsert_job(_job(), db_path=self.db_path, now="2026-01-01T09:00:00+00:00")
        status = job_store.upsert_job(
            _job(title="Changed Title", location="Leeds"),
            db_path=self.db_path,
            now="2026-01-02T09:00:00+00:00",
        )

        self.assertEqual(status, "updated")
        self.assertEqual(job_store.get_job_count(self.db_path), 1)
        row = job_store.get_job("job-1", self.db_path)
        self.assertEqual(row["first_seen_at"], "2026-01-01T09:00:00+00:00")
        self.assertEqual(row["last_seen_at"], "2026-01-02T09:00:00+00:00")
        self.assertEqual(row["title"], "Graduate Analyst")
        self.assertEqual(row["location"], "London")

    def test_empty_description_never_erases(self):
        job_store.upsert_job(_job(), db_path=self.db_path, now="2026-01-01T09:00:00+00:00")
        job_store.upsert_job(_job(description=""), db_path=self.db_path, now="2026-01-02T09:00:00+00:00")
        job_store.upsert_job(_job(description=None), db_path=self.db_path, now="2026-01-03T09:00:00+00:00")

        row = job_store.get_job("job-1", self.db_path)
        self.assertEqual(row["description"], "Original description")

    def test_new_description_and_closing_date_overwrite(self):
        job_store.upsert_job(_job(closing_date="2026-02-01"), db_path=self.db_path)
        job_store.upsert_job(_job(description="Longer text"), db_path=self.db_path)
        row = job_store.get_job("job-1", self.db_path)
        self.assertEqual(row["description"], "Longer text")
        self.assertEqual(row["closing_date"], "2026-02-01")

        job_store.upsert_job(_job(closing_date="2026-03-01"), db_path=self.db_path)
        self.assertEqual(job_store.get_job("job-1", self.db_path)["closing_date"], "2026-03-01")

    def test_same_url_under_another_id_converges(self):
        job_store.upsert_job(_job(id="hash-id"), db_path=self.db_path)
        status = job_store.upsert_job(_job(id="url-id", description="From board"), db_path=self.db_path)

        self.assertEqual(status, "updated")
        self.assertEqual(job_store.get_job_count(self.db_path), 1)
        self.assertEqual(job_store.get_job("hash-id", self.db_path)["description"], "From board")

    def test_postings_without_url_do_not_collide(self):
        job_store.upsert_job(_job(id="a", job_url=None), db_path=self.db_path)
        job_store.upsert_job(_job(id="b", job_url=""), db_path=self.db_path)
        self.assertEqual(job_store.get_job_count(self.db_path), 2)

    def test_rejected_row_raises(self):
        job = _job()
        job.title = None  # violates NOT NULL
        with self.assertRaises(sqlite3.Error):
            job_store.upsert_job(job, db_path=self.db_path)
        self.assertEqual(job_store.get_job_count(self.db_path), 0)

    def test_all_jobs_ordered_by_posting_date(self):
        job_store.upsert_job(_job(id="old", job_url="https://x/1", posted_at="2026-01-01"), db_path=self.db_path)
        job_store.upsert_job(_job(id="undated", job_url="https://x/2", posted_at=None), db_path=self.db_path)
        job_store.upsert_job(_job(id="new", job_url="https://x/3", posted_at="2026-02-01"), db_path=self.db_path)

        ids = [row["id"] for row in job_store.get_all_jobs(self.db_path)]
        self.assertEqual(ids, ["new", "old", "undated"])


class TestEmployers(unittest.TestCase):
    def setUp(self):
        self.db_path = temp_db_path()
        job_store.init_db(self.db_path)

    def test_name_is_case_insensitive_identity(self):
        first = job_store.upsert_employer("Acme Corp", source="uk300", db_path=self.db_path)
        second = job_store.upsert_employer("ACME CORP", source="uk300", db_path=self.db_path)
        self.assertEqual(first, second)
        self.assertEqual(len(job_store.get_all_employers(self.db_path)), 1)

    def test_careers_url_is_never_cleared(self):
        job_store.upsert_employer("Acme Corp", careers_url="https://acme.example/careers", db_path=self.db_path)
        job_store.upsert_employer("Acme Corp", careers_url=None, db_path=self.db_path)

        resolved = job_store.get_employers_with_careers_url(self.db_path)
        self.assertEqual([e.careers_url for e in resolved], ["https://acme.example/careers"])
        self.assertEqual(job_store.get_employers_without_careers_url(self.db_path), [])

    def test_resolved_and_unknown_split(self):
        job_store.upsert_employer("Acme Corp", careers_url="https://acme.example/careers", db_path=self.db_path)
        job_store.upsert_employer("Globex", db_path=self.db_path)

        self.assertEqual([e.name for e in job_store.get_employers_with_careers_url(self.db_path)], ["Acme Corp"])
        unknown = job_store.get_employers_without_careers_url(self.db_path)
        self.assertEqual([e.name for e in unknown], ["Globex"])
        self.assertFalse(unknown[0].is_resolved)


if __name__ == "__main__":
    unittest.main()
