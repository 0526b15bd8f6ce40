import unittest

from connectors.base import Connector
from graph.workflow import RUN_ALL, build_workflow, run_forever, run_pipeline
from models.job import RawPosting
from stages.boards import scrape_boards
from tests.fakes import make_context
from tools import job_store


class StubConnector(Connector):
    def __init__(self, name, postings=(), error=None):
        self.name = name
        self.source = name.upper()
        self.postings = list(postings)
        self.error = error
        self.queries = []

    def scrape(self, query):
        self.queries.append(query)
        if self.error:
            raise self.error
        return self.postings


class TestScrapeBoards(unittest.TestCase):
    def test_partial_failure_is_contained(self):
        a = StubConnector("a", [RawPosting(title="A1", url="https://a.example/1")])
        b = StubConnector("b", error=RuntimeError("selector engine crashed"))
        c = StubConnector("c", [RawPosting(title="C1", url="https://c.example/1")])
        context = make_context(connectors=[a, b, c])

        summary = scrape_boards(context)

        self.assertEqual(len(c.queries), 1)
        self.assertEqual(summary["failed"], ["b: selector engine crashed"])
        self.assertEqual(summary["connectors"]["a"]["inserted"], 1)
        self.assertEqual(summary["connectors"]["c"]["inserted"], 1)
        sources = sorted(row["source"] for row in job_store.get_all_jobs(context.db_path))
        self.assertEqual(sources, ["A", "C"])

    def test_connectors_share_the_context_query(self):
        a = StubConnector("a")
        context = make_context(connectors=[a])
        scrape_boards(context)
        self.assertIs(a.queries[0], context.query)


class TestRunPipeline(unittest.TestCase):
    def setUp(self):
        self.calls = []

        def stage(name, error=None):
            def run(context):
                self.calls.append(name)
                if error:
                    raise error
                return {"count": len(self.calls)}
            return run

        self.registry = {
            "one": stage("one"),
            "two": stage("two", ValueError("boom")),
            "three": stage("three"),
        }

    def test_stages_run_in_order_and_failures_are_isolated(self):
        state = run_pipeline(make_context(), ["one", "two", "three"], registry=self.registry)

        self.assertEqual(self.calls, ["one", "two", "three"])
        self.assertEqual(state["results"], [{"stage": "one", "count": 1}, {"stage": "three", "count": 3}])
        self.assertEqual(state["errors"], ["two: boom"])

    def test_single_stage(self):
        state = run_pipeline(make_context(), ["three"], registry=self.registry)
        self.assertEqual(self.calls, ["three"])
        self.assertEqual(state["errors"], [])

    def test_unknown_stage(self):
        with self.assertRaises(ValueError):
            build_workflow(make_context(), ["one", "nope"], registry=self.registry)

    def test_run_all_order(self):
        self.assertEqual(RUN_ALL, ["fetch-employers", "discover-urls", "scrape-jobs", "scrape-boards", "export"])

    def test_empty_pipeline_stages_in_default_graph(self):
        context = make_context(connectors=[])
        state = run_pipeline(context, ["discover-urls", "scrape-jobs", "scrape-boards", "export"])

        self.assertEqual(state["errors"], [])
        self.assertEqual([r["stage"] for r in state["results"]], ["discover-urls", "scrape-jobs", "scrape-boards", "export"])
        self.assertEqual(state["results"][-1]["exported"], 0)


class TestRunForever(unittest.TestCase):
    def test_cycles_are_sequential_and_sleep_between(self):
        sleeps = []
        cycles = []
        context = make_context(connectors=[])

        count = run_forever(
            context,
            interval_minutes=30,
            stages=["scrape-boards"],
            sleep=sleeps.append,
            max_cycles=3,
            on_cycle=lambda cycle, state: cycles.append((cycle, state["errors"])),
        )

        self.assertEqual(count, 3)
        self.assertEqual(cycles, [(1, []), (2, []), (3, [])])
        self.assertEqual(sleeps, [1800, 1800])

    def test_failing_cycle_does_not_stop_the_loop(self):
        cycles = []

        def on_cycle(cycle, state):
            cycles.append(cycle)
            if cycle == 1:
                raise RuntimeError("report failed")

        count = run_forever(
            make_context(connectors=[]),
            interval_minutes=1,
            stages=["scrape-boards"],
            sleep=lambda seconds: None,
            max_cycles=2,
            on_cycle=on_cycle,
        )
        self.assertEqual(count, 2)
        self.assertEqual(cycles, [1, 2])


if __name__ == "__main__":
    unittest.main()
