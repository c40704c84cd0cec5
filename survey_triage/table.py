"""Table invariants and cell tagging.

A table is a DataFrame whose columns are unique and shared by every
record.  Cells are raw text, numbers, empty strings, or the canonical
missing marker ``MISSING`` (``pd.NA``), which only the normalizer
introduces.
"""
from __future__ import annotations

import enum
import numbers
from typing import Any

import pandas as pd

MISSING = pd.NA


class InvariantViolation(Exception):
    """A table broke a structural invariant the pipeline relies on."""
    pass


class CellTag(enum.Enum):
    MISSING = 'missing'
    TEXT = 'text'
    NUMERIC = 'numeric'
    EMPTY = 'empty'


def is_missing(value: Any) -> bool:
    """True for the missing marker, and for the null values pandas treats alike."""
    if value is None:
        return True
    if not pd.api.types.is_scalar(value):
        return False
    return bool(pd.isna(value))


def cell_tag(value: Any) -> CellTag:
    if is_missing(value):
        return CellTag.MISSING
    if isinstance(value, str):
        return CellTag.EMPTY if value == '' else CellTag.TEXT
    if isinstance(value, numbers.Number) and not isinstance(value, bool):
        return CellTag.NUMERIC
    return CellTag.TEXT


def check_table(df: pd.DataFrame) -> pd.DataFrame:
    """Fail loudly when column names are not unique."""
    if not df.columns.is_unique:
        dupes = df.columns[df.columns.duplicated()].unique().tolist()
        raise InvariantViolation(
            f"Table has duplicate column names {dupes!r}; every record must share "
            "one set of distinct columns"
        )
    return df


def defensive_copy(df: pd.DataFrame) -> pd.DataFrame:
    """Deep copy ``df`` as an object frame, checking that nothing was lost."""
    check_table(df)
    copied = df.astype(object).copy(deep=True)
    if copied.shape != df.shape or not copied.columns.equals(df.columns):
        raise InvariantViolation(
            f"Defensive copy changed table shape from {df.shape} to {copied.shape}"
        )
    return copied
