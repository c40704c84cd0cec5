"""Normalization and completeness for Polars DataFrames.

Mirrors normalize.py and completeness.py using polars expressions.  The
missing marker is polars ``null``; a cell's string form is its
``cast(pl.String)`` value.  Summary types are shared with the pandas
path so reports don't care which engine produced them.

Usage::

    from survey_triage.polars_triage import pl_normalize, pl_analyze

    result = pl_normalize(pl_df, DEFAULT_RULES)
    vector, summary = pl_analyze(result.normalized_table)
"""
from __future__ import annotations

import logging
from typing import Dict, Tuple

import polars as pl

from .completeness import CompletenessSummary, PROFILE_COLUMNS, summarize_vector, _per
from .normalize import NormalizationResult
from .rules import DEFAULT_RULES, MissingValueRules

log = logging.getLogger("survey_triage.polars_triage")


def pl_cell_text(col: str, dtype: pl.DataType) -> pl.Expr:
    """A column's cells in the same string form ``str(value)`` gives pandas cells."""
    if dtype == pl.Boolean:
        return (
            pl.when(pl.col(col)).then(pl.lit('True'))
            .when(~pl.col(col)).then(pl.lit('False'))
            .otherwise(pl.lit(None, dtype=pl.String))
        )
    return pl.col(col).cast(pl.String)


def pl_is_missing(col: str, dtype: pl.DataType) -> pl.Expr:
    """True where a cell is null, or NaN in a float column."""
    expr = pl.col(col).is_null()
    if dtype.is_float():
        expr = expr | pl.col(col).is_nan().fill_null(False)
    return expr


def pl_missing_mask(col: str, rules: MissingValueRules, dtype: pl.DataType = pl.String()) -> pl.Expr:
    """Expression that is True where column ``col`` matches the rules.

    Cells that are already missing (null, or NaN in float columns) never match.
    """
    tokens = sorted(rules.canonical_tokens())
    if not tokens:
        return pl.lit(False)
    text = pl_cell_text(col, dtype)
    if rules.strip_whitespace:
        text = text.str.strip_chars()
    if not rules.case_sensitive:
        text = text.str.to_lowercase()
    return (text.is_in(tokens) & ~pl_is_missing(col, dtype)).fill_null(False)


def pl_normalize(df: pl.DataFrame, rules: MissingValueRules = DEFAULT_RULES) -> NormalizationResult:
    """Polars counterpart of ``normalize.normalize``."""
    if df.height == 0 or df.width == 0:
        changed_by_column: Dict[str, int] = {c: 0 for c in df.columns}
        return NormalizationResult(df.clone(), 0, changed_by_column, rules)

    schema = df.schema
    masks = df.select([pl_missing_mask(c, rules, schema[c]).alias(c) for c in df.columns])
    counts = masks.select(pl.all().cast(pl.UInt32).sum()).row(0, named=True)
    changed_by_column = {c: int(counts[c]) for c in df.columns}

    normalized = df.with_columns([
        pl.when(pl_missing_mask(c, rules, schema[c])).then(None).otherwise(pl.col(c)).alias(c)
        for c in df.columns if changed_by_column[c]
    ])
    cells_changed = sum(changed_by_column.values())
    log.debug(
        "normalized rows=%d cols=%d rules=%s cells_changed=%d",
        df.height, df.width, rules.describe(), cells_changed,
    )
    return NormalizationResult(normalized, cells_changed, changed_by_column, rules)


def pl_completeness_vector(df: pl.DataFrame) -> pl.Series:
    if df.width == 0:
        return pl.Series('complete', [True] * df.height, dtype=pl.Boolean)
    schema = df.schema
    return df.select(
        (~pl.any_horizontal([pl_is_missing(c, schema[c]) for c in df.columns])).alias('complete')
    ).to_series()


def pl_analyze(df: pl.DataFrame, index_base: int = 0) -> Tuple[pl.Series, CompletenessSummary]:
    """Polars counterpart of ``completeness.analyze``."""
    vector = pl_completeness_vector(df)
    summary = summarize_vector(vector.to_numpy(), index_base=index_base)
    return vector, summary


def pl_column_missing_profile(df: pl.DataFrame) -> pl.DataFrame:
    """Polars counterpart of ``completeness.column_missing_profile``."""
    length = df.height
    rows = []
    for col in df.columns:
        ser = df[col]
        dt = ser.dtype
        missing_count = int(ser.null_count())
        if dt.is_float():
            missing_count += int(ser.is_nan().sum())
        present = length - missing_count
        empty_count = 0
        text_count = 0
        numeric_count = 0
        if dt.is_numeric():
            numeric_count = present
        elif dt in (pl.Utf8, pl.String):
            empty_count = int((ser == '').sum())
            text_count = present - empty_count
        else:
            text_count = present
        rows.append({
            'column': col,
            'missing_count': missing_count,
            'missing_per': _per(missing_count, length),
            'empty_count': empty_count,
            'empty_per': _per(empty_count, length),
            'text_count': text_count,
            'numeric_count': numeric_count,
        })
    if not rows:
        return pl.DataFrame(schema={c: (pl.String if c == 'column' else pl.Float64)
                                    for c in PROFILE_COLUMNS})
    return pl.DataFrame(rows).select(PROFILE_COLUMNS)
