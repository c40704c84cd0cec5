"""Tests for record completeness analysis."""
import pandas as pd
import pytest

from survey_triage.completeness import (
    analyze, column_missing_profile, completeness_by_segment, summarize_vector,
)
from survey_triage.table import MISSING


def five_record_df():
    """First two records fully populated, the last three each missing one cell."""
    return pd.DataFrame({
        'a': ['x', 'y', MISSING, 'z', 'w'],
        'b': ['1', '2', '3', MISSING, '5'],
        'c': ['p', 'q', 'r', 's', MISSING],
    }, dtype=object)


# ============================================================================
# Tests: analyze
# ============================================================================

class TestAnalyze:
    def test_two_of_five_complete(self):
        vector, summary = analyze(five_record_df())
        assert vector.tolist() == [True, True, False, False, False]
        assert summary.total_records == 5
        assert summary.complete_count == 2
        assert summary.incomplete_count == 3
        assert summary.complete_fraction == pytest.approx(0.4)
        assert summary.complete_row_indices == (0, 1)
        assert summary.index_base == 0

    def test_one_based(self):
        _, summary = analyze(five_record_df(), index_base=1)
        assert summary.complete_row_indices == (1, 2)

    def test_bad_index_base(self):
        with pytest.raises(ValueError, match="index_base"):
            analyze(five_record_df(), index_base=2)

    def test_vector_follows_source_order(self):
        df = five_record_df().iloc[::-1].reset_index(drop=True)
        vector, summary = analyze(df)
        assert vector.tolist() == [False, False, False, True, True]
        assert summary.complete_row_indices == (3, 4)
        assert vector.name == 'complete'

    def test_indices_strictly_increasing(self):
        df = pd.DataFrame({'a': ['x', MISSING, 'y', 'z', MISSING, 'w']}, dtype=object)
        _, summary = analyze(df)
        idx = summary.complete_row_indices
        assert list(idx) == sorted(set(idx))
        assert idx == (0, 2, 3, 5)

    def test_empty_string_counts_as_present(self):
        df = pd.DataFrame({'a': ['', 'x'], 'b': ['', '']})
        vector, summary = analyze(df)
        assert vector.tolist() == [True, True]
        assert summary.complete_fraction == 1.0

    def test_input_not_mutated(self):
        df = five_record_df()
        before = df.copy()
        analyze(df)
        pd.testing.assert_frame_equal(df, before)


class TestAnalyzeEdgeCases:
    def test_zero_records(self):
        df = pd.DataFrame({'a': pd.Series([], dtype=object)})
        vector, summary = analyze(df)
        assert len(vector) == 0
        assert summary.total_records == 0
        assert summary.complete_count == 0
        assert summary.complete_fraction == 0
        assert summary.complete_row_indices == ()

    def test_zero_columns(self):
        vector, summary = analyze(pd.DataFrame())
        assert len(vector) == 0
        assert summary.complete_fraction == 0

    def test_records_without_columns_are_complete(self):
        vector, summary = analyze(pd.DataFrame(index=range(3)))
        assert vector.tolist() == [True, True, True]
        assert summary.complete_count == 3

    def test_summarize_plain_list(self):
        summary = summarize_vector([False, True, True])
        assert summary.complete_row_indices == (1, 2)
        assert summary.complete_fraction == pytest.approx(2 / 3)


# ============================================================================
# Tests: column_missing_profile
# ============================================================================

class TestColumnMissingProfile:
    def test_counts(self):
        df = pd.DataFrame({
            'region': ['Rabat', MISSING, '', 'Fes'],
            'age': [34, 51, MISSING, MISSING],
        }, dtype=object)
        profile = column_missing_profile(df).set_index('column')
        assert profile.loc['region', 'missing_count'] == 1
        assert profile.loc['region', 'empty_count'] == 1
        assert profile.loc['region', 'text_count'] == 2
        assert profile.loc['region', 'empty_per'] == pytest.approx(0.25)
        assert profile.loc['age', 'missing_count'] == 2
        assert profile.loc['age', 'numeric_count'] == 2
        assert profile.loc['age', 'missing_per'] == pytest.approx(0.5)

    def test_empty_table(self):
        df = pd.DataFrame({'a': pd.Series([], dtype=object)})
        profile = column_missing_profile(df)
        assert profile['missing_per'].tolist() == [0.0]
        assert profile['empty_per'].tolist() == [0.0]

    def test_no_columns(self):
        profile = column_missing_profile(pd.DataFrame())
        assert len(profile) == 0
        assert 'missing_count' in profile.columns


# ============================================================================
# Tests: completeness_by_segment
# ============================================================================

class TestCompletenessBySegment:
    def test_early_clustering_visible(self):
        vector = [True] * 4 + [False] * 6
        segs = completeness_by_segment(vector, segments=2)
        assert [s['complete_fraction'] for s in segs] == [0.8, 0.0]
        assert [(s['start'], s['end']) for s in segs] == [(0, 4), (5, 9)]
        assert sum(s['records'] for s in segs) == 10

    def test_more_segments_than_records(self):
        segs = completeness_by_segment([True, False], segments=10)
        assert len(segs) == 2
        assert segs[1]['complete_count'] == 0

    def test_one_based_bounds(self):
        segs = completeness_by_segment([True, True, False], segments=1, index_base=1)
        assert segs == [{
            'segment': 0, 'start': 1, 'end': 3, 'records': 3,
            'complete_count': 2, 'complete_fraction': pytest.approx(2 / 3),
        }]

    def test_empty(self):
        assert completeness_by_segment([], segments=3) == []

    def test_bad_segments(self):
        with pytest.raises(ValueError, match="segments"):
            completeness_by_segment([True], segments=0)

    def test_accepts_series(self):
        vector, _ = analyze(pd.DataFrame({'a': ['x', MISSING, 'y', 'z']}, dtype=object))
        segs = completeness_by_segment(vector, segments=2)
        assert [s['complete_count'] for s in segs] == [1, 2]
