"""Report assembly.

Turns normalization and completeness results into plot-ready and
text-ready structures.  Rendering (HTML, plots) happens elsewhere; this
module only fixes the shape of what gets handed over.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import pandas as pd

from .completeness import CompletenessSummary, completeness_by_segment
from .normalize import NormalizationResult


@dataclass(frozen=True)
class TriageReport:
    """Everything a renderer needs.

    Attributes:
        strip_points: (row_index, is_complete) for every record, in source order
        scalars: headline numbers for textual reporting
        complete_row_indices: positions of complete records
        segments: per-segment completeness, see ``completeness_by_segment``
        column_profile: per-column missing/empty counts, one dict per column
        changed_by_column: cells normalized to missing, per column
        warnings: advisory messages, e.g. a rule set that matched nothing
    """
    strip_points: Tuple[Tuple[int, bool], ...]
    scalars: Dict[str, Any]
    complete_row_indices: Tuple[int, ...] = ()
    segments: List[Dict[str, Any]] = field(default_factory=list)
    column_profile: List[Dict[str, Any]] = field(default_factory=list)
    changed_by_column: Dict[str, int] = field(default_factory=dict)
    warnings: Tuple[str, ...] = ()

    def strip_points_df(self) -> pd.DataFrame:
        return pd.DataFrame(
            list(self.strip_points), columns=['row_index', 'is_complete'],
        ).astype({'row_index': 'int64', 'is_complete': 'bool'})

    def to_obj(self) -> Dict[str, Any]:
        """JSON-serializable representation."""
        return {
            'scalars': dict(self.scalars),
            'strip_points': [[i, c] for i, c in self.strip_points],
            'complete_row_indices': list(self.complete_row_indices),
            'segments': [dict(s) for s in self.segments],
            'column_profile': [dict(p) for p in self.column_profile],
            'changed_by_column': {str(k): v for k, v in self.changed_by_column.items()},
            'warnings': list(self.warnings),
        }

    def to_json(self, **kwargs) -> str:
        return json.dumps(self.to_obj(), **kwargs)

    def to_text(self) -> str:
        s = self.scalars
        base = 'one' if s['index_base'] == 1 else 'zero'
        lines = [
            f"records:            {s['total_records']}",
            f"complete records:   {s['complete_count']} ({s['complete_fraction']:.2%})",
            f"incomplete records: {s['incomplete_count']}",
            f"cells normalized:   {s['cells_changed']}",
        ]
        if self.segments:
            lines.append(f"complete fraction by segment ({base}-based rows):")
            for seg in self.segments:
                lines.append(
                    f"  rows {seg['start']:>6}-{seg['end']:<6} "
                    f"{seg['complete_count']:>6}/{seg['records']:<6} "
                    f"({seg['complete_fraction']:.2%})"
                )
        for warning in self.warnings:
            lines.append(f"warning: {warning}")
        return '\n'.join(lines)


def _profile_records(profile: Any) -> List[Dict[str, Any]]:
    if profile is None:
        return []
    if isinstance(profile, pd.DataFrame):
        records = profile.to_dict(orient='records')
    else:
        # polars
        records = profile.to_dicts()
    return [{k: (v.item() if isinstance(v, np.generic) else v) for k, v in r.items()}
            for r in records]


def assemble_report(
    result: NormalizationResult,
    vector: Any,
    summary: CompletenessSummary,
    profile: Optional[Any] = None,
    segments: int = 10,
) -> TriageReport:
    """Combine pipeline outputs into a ``TriageReport``."""
    flags = np.asarray(vector, dtype=bool)
    if len(flags) != summary.total_records:
        raise ValueError(
            f"completeness vector has {len(flags)} entries but the summary "
            f"covers {summary.total_records} records"
        )
    base = summary.index_base
    strip_points = tuple((pos + base, bool(flag)) for pos, flag in enumerate(flags))

    warnings = []
    if result.is_noop and result.total_cells:
        warnings.append(result.noop_message())

    scalars = {
        'total_records': summary.total_records,
        'complete_count': summary.complete_count,
        'incomplete_count': summary.incomplete_count,
        'complete_fraction': summary.complete_fraction,
        'cells_changed': result.cells_changed,
        'index_base': base,
        'rules': result.rules.describe(),
    }

    return TriageReport(
        strip_points=strip_points,
        scalars=scalars,
        complete_row_indices=summary.complete_row_indices,
        segments=completeness_by_segment(flags, segments=segments, index_base=base),
        column_profile=_profile_records(profile),
        changed_by_column=dict(result.changed_by_column),
        warnings=tuple(warnings),
    )
