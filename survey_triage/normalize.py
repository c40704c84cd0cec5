"""Missing-value normalization.

Rewrites every cell whose raw string form matches a rule set into the
canonical missing marker, and reports exactly how many cells changed.

Usage::

    result = normalize(df, DEFAULT_RULES)
    result.normalized_table  # new frame, ``df`` is untouched
    result.cells_changed     # 0 means the rules matched nothing
    result.warn_if_noop()
"""
from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, field
from typing import Dict

import pandas as pd

from .rules import DEFAULT_RULES, MissingValueRules
from .table import MISSING, defensive_copy

log = logging.getLogger("survey_triage.normalize")


class RuleMismatchWarning(UserWarning):
    """The configured missing-value rules matched no cell of a non-empty table."""
    pass


@dataclass(frozen=True)
class NormalizationResult:
    """Outcome of a normalization pass.

    Attributes:
        normalized_table: a new frame with matched cells set to MISSING
        cells_changed: number of cells rewritten to MISSING
        changed_by_column: per-column breakdown of cells_changed, in column order
        rules: the rule set that was applied
    """
    normalized_table: pd.DataFrame
    cells_changed: int
    changed_by_column: Dict[str, int] = field(default_factory=dict)
    rules: MissingValueRules = DEFAULT_RULES

    @property
    def is_noop(self) -> bool:
        return self.cells_changed == 0

    @property
    def total_cells(self) -> int:
        rows, cols = self.normalized_table.shape
        return rows * cols

    def noop_message(self) -> str:
        return (
            f"Missing-value rules {self.rules.describe()} matched none of "
            f"{self.total_cells} cells; the rules probably don't match this "
            "table's missing-value encoding"
        )

    def warn_if_noop(self) -> bool:
        """Warn when a non-empty table came through unchanged.

        Returns True when a warning was emitted.
        """
        if not self.is_noop or self.total_cells == 0:
            return False
        msg = self.noop_message()
        log.warning(msg)
        warnings.warn(msg, RuleMismatchWarning, stacklevel=2)
        return True


def missing_mask(ser: pd.Series, rules: MissingValueRules) -> pd.Series:
    """Boolean mask of the cells in ``ser`` that the rules treat as missing."""
    if len(ser) == 0:
        return pd.Series([], index=ser.index, dtype=bool)
    return ser.map(rules.matches).astype(bool)


def normalize(df: pd.DataFrame, rules: MissingValueRules = DEFAULT_RULES) -> NormalizationResult:
    """Replace raw "no answer" encodings with the missing marker.

    The input frame is never modified.  Cells that are already missing
    are left alone and not counted, so normalizing twice changes nothing
    the second time.
    """
    normalized = defensive_copy(df)
    changed_by_column: Dict[str, int] = {}

    for col in normalized.columns:
        ser = normalized[col]
        mask = missing_mask(ser, rules)
        changed = int(mask.sum())
        changed_by_column[col] = changed
        if changed:
            normalized[col] = ser.mask(mask, MISSING)

    cells_changed = sum(changed_by_column.values())
    log.debug(
        "normalized rows=%d cols=%d rules=%s cells_changed=%d",
        len(normalized), len(normalized.columns), rules.describe(), cells_changed,
    )
    return NormalizationResult(
        normalized_table=normalized,
        cells_changed=cells_changed,
        changed_by_column=changed_by_column,
        rules=rules,
    )
