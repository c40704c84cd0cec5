"""End-to-end triage: normalize, analyze, profile, assemble.

Usage::

    from survey_triage.pipeline import run_triage, triage_file

    outcome = triage_file("survey.csv", rules=DEFAULT_RULES.with_empty())
    print(outcome.report.to_text())
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import pandas as pd
import polars as pl

from .completeness import CompletenessSummary, analyze, column_missing_profile
from .loading import load_table, pl_load_table
from .normalize import NormalizationResult, normalize
from .polars_triage import pl_analyze, pl_column_missing_profile, pl_normalize
from .report import TriageReport, assemble_report
from .rules import DEFAULT_RULES, MissingValueRules

log = logging.getLogger("survey_triage.pipeline")


@dataclass(frozen=True)
class TriageOutcome:
    normalization: NormalizationResult
    vector: Any
    summary: CompletenessSummary
    profile: Any
    report: TriageReport


def run_triage(
    table,
    rules: MissingValueRules = DEFAULT_RULES,
    index_base: int = 0,
    segments: int = 10,
) -> TriageOutcome:
    """Run the full pipeline over a pandas or polars DataFrame.

    ``table`` is never modified; running twice gives the same outcome.
    """
    if isinstance(table, pl.DataFrame):
        result = pl_normalize(table, rules)
        vector, summary = pl_analyze(result.normalized_table, index_base=index_base)
        profile = pl_column_missing_profile(result.normalized_table)
    elif isinstance(table, pd.DataFrame):
        result = normalize(table, rules)
        vector, summary = analyze(result.normalized_table, index_base=index_base)
        profile = column_missing_profile(result.normalized_table)
    else:
        raise TypeError(f"Expected a pandas or polars DataFrame, got {type(table).__name__}")

    result.warn_if_noop()
    report = assemble_report(result, vector, summary, profile=profile, segments=segments)
    log.info(
        "triage records=%d complete=%d fraction=%.4f cells_changed=%d",
        summary.total_records, summary.complete_count,
        summary.complete_fraction, result.cells_changed,
    )
    return TriageOutcome(result, vector, summary, profile, report)


def triage_file(
    path: str,
    rules: MissingValueRules = DEFAULT_RULES,
    index_base: int = 0,
    segments: int = 10,
    engine: str = "pandas",
) -> TriageOutcome:
    if engine == "pandas":
        table = load_table(path)
    elif engine == "polars":
        table = pl_load_table(path)
    else:
        raise ValueError(f"engine must be 'pandas' or 'polars', got {engine!r}")
    return run_triage(table, rules=rules, index_base=index_base, segments=segments)
