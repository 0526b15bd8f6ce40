"""
Export Stage — snapshots the job store to a workbook and a flat CSV file.

Both files are rendered from the same in-memory records; the column set is
the union of every record's fields. Each format is written independently,
so a failure in one still leaves the other on disk.
"""

import logging
import os

import pandas as pd
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE

from models.state import PipelineContext
from tools import job_store
from tools.file_handler import save_to_csv, summarize, union_fieldnames

logger = logging.getLogger(__name__)


def _worksheet_value(value):
    """Strip control characters that worksheets cannot store."""
    if isinstance(value, str):
        return ILLEGAL_CHARACTERS_RE.sub("", value)
    return value


def save_to_excel(records: list[dict], output_dir: str, filename: str = "jobs_latest.xlsx") -> str:
    """
    Write records to an .xlsx workbook.

    Sheets: "Jobs" (one row per record), "By Employer" and "By Source"
    (job counts).

    Returns:
        Path to the saved file.
    """
    os.makedirs(output_dir, exist_ok=True)
    filepath = os.path.join(output_dir, filename)

    jobs = pd.DataFrame.from_records(records, columns=union_fieldnames(records)).map(_worksheet_value)
    summary = summarize(records)
    by_employer = pd.DataFrame(summary["by_employer"], columns=["employer_name", "jobs"]).map(_worksheet_value)
    by_source = pd.DataFrame(summary["by_source"], columns=["source", "jobs"]).map(_worksheet_value)

    with pd.ExcelWriter(filepath, engine="openpyxl") as writer:
        jobs.to_excel(writer, sheet_name="Jobs", index=False)
        by_employer.to_excel(writer, sheet_name="By Employer", index=False)
        by_source.to_excel(writer, sheet_name="By Source", index=False)

    return filepath


def export_jobs(context: PipelineContext) -> dict:
    """Export every stored job. Writes nothing when the store is empty."""
    logger.info("Starting export...")
    records = job_store.get_all_jobs(context.db_path)
    logger.info("Fetched %d jobs from database", len(records))

    if not records:
        logger.info("No jobs to export")
        return {"exported": 0}

    output_dir = context.settings.export_dir
    summary = {"exported": len(records), "xlsx": None, "csv": None, "failed": []}

    for key, writer in (("csv", save_to_csv), ("xlsx", save_to_excel)):
        try:
            summary[key] = writer(records, output_dir)
        except Exception as e:
            logger.exception("%s export failed", key.upper())
            summary["failed"].append(f"{key}: {e}")
            continue
        logger.info("Exported %s to %s", key.upper(), summary[key])

    if len(summary["failed"]) == 2:
        raise RuntimeError(f"Export failed: {'; '.join(summary['failed'])}")
    return summary
