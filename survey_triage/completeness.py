"""Record completeness analysis.

A record is complete when none of its cells holds the missing marker.
Empty strings count as present: they only affect completeness after a
normalizer pass whose rules include ``""``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

import numpy as np
import pandas as pd

from .table import CellTag, cell_tag, check_table

log = logging.getLogger("survey_triage.completeness")

VALID_INDEX_BASES = (0, 1)


def _check_index_base(index_base: int) -> int:
    if index_base not in VALID_INDEX_BASES:
        raise ValueError(f"index_base must be 0 or 1, got {index_base!r}")
    return index_base


@dataclass(frozen=True)
class CompletenessSummary:
    """Counts and positions of complete records.

    ``complete_row_indices`` are positions in the source row order,
    offset by ``index_base``, strictly increasing.
    """
    total_records: int
    complete_count: int
    complete_fraction: float
    complete_row_indices: Tuple[int, ...]
    index_base: int = 0

    @property
    def incomplete_count(self) -> int:
        return self.total_records - self.complete_count


def completeness_vector(df: pd.DataFrame) -> pd.Series:
    """One boolean per record, True when no cell is missing."""
    check_table(df)
    vector = ~df.isna().any(axis=1)
    return vector.astype(bool).rename('complete')


def summarize_vector(vector: Any, index_base: int = 0) -> CompletenessSummary:
    """Build a summary from any one-dimensional boolean sequence."""
    _check_index_base(index_base)
    flags = np.asarray(vector, dtype=bool)
    total = len(flags)
    positions = np.flatnonzero(flags)
    complete_count = len(positions)
    return CompletenessSummary(
        total_records=total,
        complete_count=complete_count,
        complete_fraction=complete_count / total if total else 0.0,
        complete_row_indices=tuple(int(p) + index_base for p in positions),
        index_base=index_base,
    )


def analyze(df: pd.DataFrame, index_base: int = 0) -> Tuple[pd.Series, CompletenessSummary]:
    """Compute the completeness vector and summary for ``df``.

    Never modifies ``df``.  An empty table yields an empty vector and a
    summary with ``complete_fraction == 0``.
    """
    vector = completeness_vector(df)
    summary = summarize_vector(vector, index_base=index_base)
    log.debug(
        "analyzed records=%d complete=%d fraction=%.4f",
        summary.total_records, summary.complete_count, summary.complete_fraction,
    )
    return vector, summary


PROFILE_COLUMNS = [
    'column', 'missing_count', 'missing_per', 'empty_count', 'empty_per',
    'text_count', 'numeric_count',
]


def _per(count: int, length: int) -> float:
    return count / length if length else 0.0


def column_missing_profile(df: pd.DataFrame) -> pd.DataFrame:
    """Per-column counts of missing, empty, text and numeric cells.

    ``empty_count`` exposes empty strings that are still present after
    normalization, which is where a rule set without ``""`` leaves gaps.
    """
    check_table(df)
    length = len(df)
    rows = []
    for col in df.columns:
        tags = df[col].map(cell_tag).value_counts()
        missing_count = int(tags.get(CellTag.MISSING, 0))
        empty_count = int(tags.get(CellTag.EMPTY, 0))
        rows.append({
            'column': col,
            'missing_count': missing_count,
            'missing_per': _per(missing_count, length),
            'empty_count': empty_count,
            'empty_per': _per(empty_count, length),
            'text_count': int(tags.get(CellTag.TEXT, 0)),
            'numeric_count': int(tags.get(CellTag.NUMERIC, 0)),
        })
    return pd.DataFrame(rows, columns=PROFILE_COLUMNS)


def completeness_by_segment(
    vector: Any, segments: int = 10, index_base: int = 0,
) -> List[Dict[str, Any]]:
    """Split the vector into contiguous segments and summarize each.

    Segments keep source order, so a falling ``complete_fraction`` across
    segments means complete records cluster early in the file.  ``start``
    and ``end`` are inclusive row positions offset by ``index_base``.
    """
    _check_index_base(index_base)
    if segments < 1:
        raise ValueError(f"segments must be >= 1, got {segments!r}")
    flags = np.asarray(vector, dtype=bool)
    if len(flags) == 0:
        return []

    out = []
    for seg_no, positions in enumerate(np.array_split(np.arange(len(flags)), min(segments, len(flags)))):
        seg_flags = flags[positions]
        complete_count = int(seg_flags.sum())
        out.append({
            'segment': seg_no,
            'start': int(positions[0]) + index_base,
            'end': int(positions[-1]) + index_base,
            'records': len(positions),
            'complete_count': complete_count,
            'complete_fraction': _per(complete_count, len(positions)),
        })
    return out
