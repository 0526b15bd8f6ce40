import sqlite3
import unittest
from unittest.mock import patch

from models.job import Employer, RawPosting
from stages.dedup import identity_key, normalize_url, save_postings, to_job
from tests.fakes import temp_db_path
from tools import job_store


class TestIdentityKey(unittest.TestCase):
    def test_normalize_url_drops_tracking_and_fragment(self):
        self.assertEqual(
            normalize_url("HTTPS://UK.LinkedIn.com/jobs/view/123/?refId=abc&trackingId=x&utm_source=y&b=2&a=1#top"),
            "https://uk.linkedin.com/jobs/view/123?a=1&b=2",
        )

    def test_normalize_url_empty(self):
        self.assertEqual(normalize_url(""), "")
        self.assertEqual(normalize_url("   "), "")

    def test_same_job_different_tracking_same_key(self):
        a = RawPosting(title="Analyst", url="https://board.example/job/1?trk=a")
        b = RawPosting(title="Analyst (renamed)", url="https://board.example/job/1/?trk=b")
        self.assertEqual(identity_key(a), identity_key(b))

    def test_content_hash_without_url(self):
        a = RawPosting(title="Graduate  Analyst", company="Acme", location="London")
        b = RawPosting(title="graduate analyst", company="ACME", location=" london ")
        c = RawPosting(title="Graduate Analyst", company="Acme", location="Leeds")
        self.assertEqual(identity_key(a), identity_key(b))
        self.assertNotEqual(identity_key(a), identity_key(c))

    def test_url_and_hash_keys_never_collide(self):
        with_url = RawPosting(title="x", url="https://a.example/1")
        without = RawPosting(title="x")
        self.assertNotEqual(identity_key(with_url), identity_key(without))


class TestToJob(unittest.TestCase):
    def test_employer_fields_are_linked(self):
        employer = Employer(id="emp-1", name="Acme Corp", careers_url="https://acme.example/careers")
        job = to_job(RawPosting(title="Intern", company="ignored", url="https://acme.example/j"), "EmployerSite", employer)
        self.assertEqual(job.employer_id, "emp-1")
        self.assertEqual(job.employer_name, "Acme Corp")
        self.assertEqual(job.source_careers_url, "https://acme.example/careers")

    def test_board_posting_uses_company(self):
        job = to_job(RawPosting(title="Analyst", company="Globex", url=""), "Reed.co.uk")
        self.assertIsNone(job.employer_id)
        self.assertEqual(job.employer_name, "Globex")
        self.assertIsNone(job.job_url)


class TestSavePostings(unittest.TestCase):
    def setUp(self):
        self.db_path = temp_db_path()
        job_store.init_db(self.db_path)

    def test_counts_inserted_and_updated(self):
        postings = [
            RawPosting(title="A", url="https://x.example/1"),
            RawPosting(title="B", url="https://x.example/2"),
        ]
        first = save_postings(postings, "Test", db_path=self.db_path)
        second = save_postings(postings, "Test", db_path=self.db_path)

        self.assertEqual(first, {"inserted": 2, "updated": 0, "skipped": 0})
        self.assertEqual(second, {"inserted": 0, "updated": 2, "skipped": 0})
        self.assertEqual(job_store.get_job_count(self.db_path), 2)

    def test_failure_is_skipped_not_fatal(self):
        postings = [
            RawPosting(title="A", url="https://x.example/1"),
            RawPosting(title="B", url="https://x.example/2"),
            RawPosting(title="C", url="https://x.example/3"),
        ]
        real_upsert = job_store.upsert_job

        def flaky(job, db_path=None, now=None):
            if job.title == "B":
                raise sqlite3.OperationalError("database is locked")
            return real_upsert(job, db_path=db_path, now=now)

        with patch("stages.dedup.job_store.upsert_job", side_effect=flaky):
            counts = save_postings(postings, "Test", db_path=self.db_path)

        self.assertEqual(counts, {"inserted": 2, "updated": 0, "skipped": 1})
        self.assertEqual(job_store.get_job_count(self.db_path), 2)


if __name__ == "__main__":
    unittest.main()
