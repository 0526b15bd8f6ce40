import unittest

from models.config import DiscoveryRules, UrlHeuristic
from stages.discovery import discover_urls, resolve_careers_url
from tests.fakes import make_context
from tools import job_store


class TestResolveCareersUrl(unittest.TestCase):
    def setUp(self):
        self.rules = DiscoveryRules()

    def test_heuristic_substring_match(self):
        self.assertEqual(resolve_careers_url("Amazon Studios Ltd", self.rules), "https://www.amazon.jobs/")
        self.assertEqual(resolve_careers_url("PwC UK", self.rules), "https://www.pwc.co.uk/careers.html")

    def test_no_match(self):
        self.assertIsNone(resolve_careers_url("Acme Widgets", self.rules))

    def test_first_table_entry_wins(self):
        rules = DiscoveryRules(heuristics=[
            UrlHeuristic(match="google", url="https://careers.google.com/"),
            UrlHeuristic(match="amazon", url="https://www.amazon.jobs/"),
        ])
        self.assertEqual(resolve_careers_url("Google and Amazon Alumni", rules), "https://careers.google.com/")

    def test_lookup_takes_precedence(self):
        url = resolve_careers_url("Amazon", self.rules, lookup=lambda name: "https://lookup.example/amazon")
        self.assertEqual(url, "https://lookup.example/amazon")

    def test_lookup_miss_falls_back_to_heuristics(self):
        self.assertEqual(resolve_careers_url("Amazon", self.rules, lookup=lambda name: None), "https://www.amazon.jobs/")

    def test_lookup_error_is_contained(self):
        def broken(name):
            raise TimeoutError("search API down")

        self.assertEqual(resolve_careers_url("Amazon", self.rules, lookup=broken), "https://www.amazon.jobs/")
        self.assertIsNone(resolve_careers_url("Acme", self.rules, lookup=broken))


class TestDiscoverUrls(unittest.TestCase):
    def test_unknown_employers_are_resolved_where_possible(self):
        context = make_context()
        job_store.upsert_employer("Amazon Studios Ltd", source="uk300", db_path=context.db_path)
        job_store.upsert_employer("Acme Widgets", source="uk300", db_path=context.db_path)
        job_store.upsert_employer("Globex", careers_url="https://globex.example/careers", db_path=context.db_path)

        summary = discover_urls(context)

        self.assertEqual(summary, {"unknown": 2, "resolved": 1})
        resolved = {e.name: e.careers_url for e in job_store.get_employers_with_careers_url(context.db_path)}
        self.assertEqual(resolved["Amazon Studios Ltd"], "https://www.amazon.jobs/")
        self.assertEqual(resolved["Globex"], "https://globex.example/careers")
        self.assertEqual([e.name for e in job_store.get_employers_without_careers_url(context.db_path)], ["Acme Widgets"])

    def test_unresolved_employer_is_retried_next_run(self):
        context = make_context()
        job_store.upsert_employer("Acme Widgets", db_path=context.db_path)
        self.assertEqual(discover_urls(context)["resolved"], 0)

        context.careers_lookup = lambda name: "https://acme.example/careers"
        self.assertEqual(discover_urls(context), {"unknown": 1, "resolved": 1})
        self.assertEqual(job_store.get_employers_without_careers_url(context.db_path), [])


if __name__ == "__main__":
    unittest.main()
