import unittest
from datetime import datetime, timezone

from models.config import HarvestRules
from tools.dom import Document
from tools.text_extractor import (
    clean_whitespace,
    extract_job_links,
    parse_day_month_year,
    parse_relative_date,
)

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


class TestExtractJobLinks(unittest.TestCase):
    def setUp(self):
        self.rules = HarvestRules()

    def _links(self, body: str):
        document = Document.from_html(f"<html><body>{body}</body></html>", "https://acme.example/careers")
        return extract_job_links(document, self.rules)

    def test_keyword_and_length_filter(self):
        links = self._links(
            '<a href="/jobs/1">Graduate Analyst Programme</a>'
            '<a href="/about">About Us</a>'
            '<a href="/jobs/3">Intern</a>'  # 6 chars, lower bound
            f'<a href="/jobs/4">{"Analyst " * 20}</a>'  # too long
            '<a href="/jobs/5">Grad</a>'  # too short, no keyword
        )
        self.assertEqual(
            [link["url"] for link in links],
            ["https://acme.example/jobs/1", "https://acme.example/jobs/3"],
        )

    def test_case_insensitive_keywords(self):
        links = self._links('<a href="/p">SUMMER PLACEMENT 2026</a>')
        self.assertEqual(len(links), 1)

    def test_non_http_links_and_duplicates_skipped(self):
        links = self._links(
            '<a href="mailto:grad@acme.example">Graduate enquiries</a>'
            '<a href="javascript:void(0)">Graduate scheme</a>'
            '<a href="/jobs/1">Graduate Analyst</a>'
            '<a href="/jobs/1">Graduate Analyst</a>'
        )
        self.assertEqual(len(links), 1)

    def test_custom_rules(self):
        self.rules = HarvestRules(keywords=["apprentice"], min_text_length=3, max_text_length=40)
        links = self._links('<a href="/a">Apprentice</a><a href="/b">Graduate Analyst</a>')
        self.assertEqual([link["text"] for link in links], ["Apprentice"])


class TestParseRelativeDate(unittest.TestCase):
    def test_formats(self):
        cases = {
            "New": "2026-03-10T12:00:00+00:00",
            "Just now": "2026-03-10T12:00:00+00:00",
            "Yesterday": "2026-03-09T12:00:00+00:00",
            "2d": "2026-03-08T12:00:00+00:00",
            "3 days ago": "2026-03-07T12:00:00+00:00",
            "1 week ago": "2026-03-03T12:00:00+00:00",
            "2w": "2026-02-24T12:00:00+00:00",
            "5h": "2026-03-10T07:00:00+00:00",
            "1 month ago": "2026-02-08T12:00:00+00:00",
        }
        for text, expected in cases.items():
            with self.subTest(text=text):
                self.assertEqual(parse_relative_date(text, now=NOW), expected)

    def test_unreadable(self):
        self.assertIsNone(parse_relative_date("", now=NOW))
        self.assertIsNone(parse_relative_date("Easy Apply", now=NOW))


class TestHelpers(unittest.TestCase):
    def test_clean_whitespace(self):
        self.assertEqual(clean_whitespace("  a \n\n b\t c "), "a b c")
        self.assertEqual(clean_whitespace(None), "")

    def test_parse_day_month_year(self):
        self.assertEqual(parse_day_month_year("05/04/2026"), "2026-04-05")
        self.assertIsNone(parse_day_month_year("2026-04-05"))
        self.assertIsNone(parse_day_month_year(""))


if __name__ == "__main__":
    unittest.main()
