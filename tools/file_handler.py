"""
File Handler Tool — loads the sources config, writes CSV snapshots and summaries.
"""

import csv
import logging
import os
from collections import Counter

import yaml

from models.config import SourcesConfig

logger = logging.getLogger(__name__)


def load_sources_config(yaml_path: str) -> SourcesConfig:
    """
    Load connector, heuristic and pacing configuration from a YAML file.

    A missing file, or any missing key, falls back to the built-in defaults.

    Args:
        yaml_path: Path to sources.yaml.

    Returns:
        Validated SourcesConfig.

    Raises:
        pydantic.ValidationError: if a value has the wrong type or range.
    """
    if not yaml_path or not os.path.exists(yaml_path):
        logger.warning("Sources config %s not found, using built-in defaults", yaml_path)
        return SourcesConfig()

    with open(yaml_path, "r") as f:
        data = yaml.safe_load(f) or {}

    return SourcesConfig(**data)


def union_fieldnames(records: list[dict]) -> list[str]:
    """Every key used by any record, in order of first appearance."""
    fieldnames = []
    seen = set()
    for record in records:
        for key in record:
            if key not in seen:
                seen.add(key)
                fieldnames.append(key)
    return fieldnames


def save_to_csv(records: list[dict], output_dir: str, filename: str = "jobs_latest.csv") -> str:
    """
    Save records to a CSV file.

    The header is the union of all record keys, so records of different
    shapes line up; missing values are written as empty cells.

    Args:
        records: List of dicts to save.
        output_dir: Directory to save the file in.
        filename: File name inside output_dir.

    Returns:
        Path to the saved file.
    """
    os.makedirs(output_dir, exist_ok=True)
    filepath = os.path.join(output_dir, filename)

    with open(filepath, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=union_fieldnames(records), restval="")
        writer.writeheader()
        writer.writerows(records)

    return filepath


def summarize(records: list[dict]) -> dict:
    """Counts of records by employer and by source, largest first."""
    by_employer = Counter(r.get("employer_name") or "Unknown" for r in records)
    by_source = Counter(r.get("source") or "Unknown" for r in records)
    return {
        "total": len(records),
        "by_employer": sorted(by_employer.items(), key=lambda x: (-x[1], x[0])),
        "by_source": sorted(by_source.items(), key=lambda x: (-x[1], x[0])),
    }


def generate_summary(records: list[dict]) -> str:
    """
    Generate a human-readable summary of the stored jobs.

    Args:
        records: List of job dicts.

    Returns:
        Formatted summary string.
    """
    if not records:
        return "No jobs found."

    summary = summarize(records)

    lines = [
        f"{'=' * 50}",
        f"  JOB HARVEST SUMMARY",
        f"{'=' * 50}",
        f"  Total jobs: {summary['total']}",
        f"",
        f"  By Source:",
    ]
    for source, count in summary["by_source"]:
        lines.append(f"    - {source}: {count}")

    lines.append(f"")
    lines.append(f"  By Employer (top 20):")
    for employer, count in summary["by_employer"][:20]:
        lines.append(f"    - {employer}: {count}")

    lines.append(f"{'=' * 50}")

    return "\n".join(lines)
