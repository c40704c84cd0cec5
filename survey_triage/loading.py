"""Load delimited survey exports with every cell kept as its literal string.

No type inference and no missing-value detection happen here: ``"NA"``,
``"N/A"`` and ``""`` all arrive as plain strings, so that deciding what
counts as missing is left entirely to the normalizer.
"""
import csv
import logging
import os

import pandas as pd
import polars as pl

from .table import InvariantViolation, check_table

log = logging.getLogger("survey_triage.loading")

SEPARATORS = {
    ".csv": ",",
    ".tsv": "\t",
}


def _separator_for(path: str) -> str:
    ext = os.path.splitext(path)[1].lower()
    try:
        return SEPARATORS[ext]
    except KeyError:
        raise ValueError(f"Unsupported file format: {ext}") from None


def check_field_counts(path: str, sep: str, encoding: str = "utf-8-sig") -> int:
    """Verify every row has as many fields as the header.

    Both parsers would otherwise pad short rows, so this is checked on
    the raw file.  A blank line is a row with one empty field: a record
    in a single-column file, a structural mismatch anywhere else.
    Returns the number of data records.
    """
    bad = []
    expected = None
    records = 0
    with open(path, newline="", encoding=encoding) as fh:
        reader = csv.reader(fh, delimiter=sep)
        for row in reader:
            n_fields = len(row) or 1
            if expected is None:
                expected = n_fields
                continue
            records += 1
            if n_fields != expected:
                bad.append((reader.line_num, n_fields))
    if bad:
        shown = ", ".join(f"line {ln} has {n}" for ln, n in bad[:10])
        raise InvariantViolation(
            f"{path}: {len(bad)} row(s) don't have the header's {expected} fields ({shown})"
        )
    return records


def _check_record_count(path: str, loaded: int, records: int) -> None:
    if loaded != records:
        raise InvariantViolation(
            f"{path}: parsed {loaded} record(s) but the file holds {records}"
        )


def load_table(path: str, encoding: str = "utf-8-sig") -> pd.DataFrame:
    """Read a .csv/.tsv file into an all-string pandas DataFrame.

    Rows whose field count differs from the header raise InvariantViolation.
    """
    sep = _separator_for(path)
    records = check_field_counts(path, sep, encoding=encoding)
    df = pd.read_csv(
        path, sep=sep, dtype=str, encoding=encoding,
        keep_default_na=False, na_filter=False, skip_blank_lines=False,
    )
    # field counts are checked, so the only nulls are blank single-column records
    df = df.fillna("")
    _check_record_count(path, len(df), records)
    check_table(df)
    log.info("loaded path=%s rows=%d cols=%d", path, len(df), len(df.columns))
    return df


def pl_load_table(path: str) -> pl.DataFrame:
    """Read a UTF-8 .csv/.tsv file into an all-string polars DataFrame."""
    sep = _separator_for(path)
    records = check_field_counts(path, sep)
    df = pl.read_csv(
        path, separator=sep, infer_schema=False,
        missing_utf8_is_empty_string=True,
    )
    df = df.fill_null("")
    _check_record_count(path, df.height, records)
    log.info("loaded path=%s rows=%d cols=%d", path, df.height, df.width)
    return df
