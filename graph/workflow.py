"""
LangGraph Workflow — sequences the harvest pipeline stages.

Graph structure (run-all):
    fetch-employers → discover-urls → scrape-jobs → scrape-boards → export

Stages run strictly one after another. Each node catches its own stage's
exceptions and records them in the state, so a failed stage never stops the
ones after it. There is no global transaction: whatever a stage stored
before failing stays stored, and rerunning is safe because every write is an
idempotent upsert.
"""

import logging
import time
from typing import Callable, Optional

from langgraph.graph import END, StateGraph

from models.state import PipelineContext, PipelineState
from stages.boards import scrape_boards
from stages.discovery import discover_urls
from stages.employers import fetch_employers
from stages.exporter import export_jobs
from stages.harvest import scrape_jobs

logger = logging.getLogger(__name__)


STAGES: dict[str, Callable[[PipelineContext], dict]] = {
    "fetch-employers": fetch_employers,
    "discover-urls": discover_urls,
    "scrape-jobs": scrape_jobs,
    "scrape-boards": scrape_boards,
    "export": export_jobs,
}

RUN_ALL = list(STAGES)


def _stage_node(name: str, stage: Callable[[PipelineContext], dict], context: PipelineContext):
    """Wrap a stage as a graph node that never raises."""

    def node(state: PipelineState) -> dict:
        logger.info("Stage %s starting", name)
        try:
            summary = stage(context)
        except Exception as e:
            logger.exception("Stage %s failed", name)
            return {"results": [], "errors": [f"{name}: {e}"]}

        logger.info("Stage %s finished: %s", name, summary)
        return {"results": [{"stage": name, **summary}], "errors": []}

    return node


def build_workflow(context: PipelineContext, stages: list[str], registry: Optional[dict] = None):
    """
    Build and compile a linear graph over the given stage names.

    Args:
        context: Passed to every stage.
        stages: Stage names, in execution order.
        registry: Stage name -> callable (defaults to STAGES).

    Returns:
        Compiled StateGraph ready to invoke.
    """
    registry = registry or STAGES
    unknown = [name for name in stages if name not in registry]
    if unknown:
        raise ValueError(f"Unknown stage(s): {', '.join(unknown)}")

    workflow = StateGraph(PipelineState)
    for name in stages:
        workflow.add_node(name, _stage_node(name, registry[name], context))

    workflow.set_entry_point(stages[0])
    for current, following in zip(stages, stages[1:]):
        workflow.add_edge(current, following)
    workflow.add_edge(stages[-1], END)

    return workflow.compile()


def run_pipeline(
    context: PipelineContext,
    stages: Optional[list[str]] = None,
    registry: Optional[dict] = None,
) -> PipelineState:
    """Run the given stages (default: all) once and return the final state."""
    stages = list(stages or RUN_ALL)
    initial_state: PipelineState = {"stages": stages, "results": [], "errors": []}
    if not stages:
        return initial_state

    graph = build_workflow(context, stages, registry)
    return graph.invoke(initial_state)


def run_forever(
    context: PipelineContext,
    interval_minutes: float,
    stages: Optional[list[str]] = None,
    sleep: Callable[[float], None] = time.sleep,
    max_cycles: Optional[int] = None,
    on_cycle: Optional[Callable[[int, PipelineState], None]] = None,
) -> int:
    """
    Run the pipeline, sleep `interval_minutes`, repeat.

    Runs happen in this one thread, so a run never overlaps the previous
    one; a run longer than the interval just delays the next. A cycle that
    raises is logged and the loop carries on.

    Returns:
        Number of cycles run (only reached when max_cycles is set).
    """
    cycle = 0
    while max_cycles is None or cycle < max_cycles:
        cycle += 1
        logger.info("Cycle #%d starting", cycle)
        try:
            state = run_pipeline(context, stages)
            if on_cycle:
                on_cycle(cycle, state)
        except Exception:
            logger.exception("Cycle #%d failed", cycle)

        if max_cycles is not None and cycle >= max_cycles:
            break
        logger.info("Sleeping %s minutes until next run", interval_minutes)
        sleep(interval_minutes * 60)

    return cycle
