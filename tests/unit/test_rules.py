"""Tests for missing-value rule sets and the option mapping builder."""
import numpy as np
import pandas as pd
import pytest

from survey_triage.rules import (
    DEFAULT_RULES, MissingValueRules, RuleConfigError, TOKEN_OPTION_DEFAULTS,
    rules_from_options,
)


# ============================================================================
# Tests: MissingValueRules.matches
# ============================================================================

class TestMatches:
    def test_default_tokens(self):
        assert DEFAULT_RULES.matches('NA') is True
        assert DEFAULT_RULES.matches('N/A') is True

    def test_exact_match_only(self):
        assert DEFAULT_RULES.matches('na') is False
        assert DEFAULT_RULES.matches(' NA') is False
        assert DEFAULT_RULES.matches('NA ') is False
        assert DEFAULT_RULES.matches('NAN') is False

    def test_empty_string_not_matched_by_default(self):
        assert DEFAULT_RULES.matches('') is False

    def test_with_empty(self):
        rules = DEFAULT_RULES.with_empty()
        assert rules.matches('') is True
        assert rules.matches('NA') is True
        # the original is unchanged
        assert DEFAULT_RULES.matches('') is False

    def test_numeric_string_form(self):
        rules = MissingValueRules(frozenset(['-99']))
        assert rules.matches(-99) is True
        assert rules.matches(np.int64(-99)) is True
        assert rules.matches('-99') is True
        assert rules.matches(99) is False

    def test_missing_marker_never_matches(self):
        rules = MissingValueRules(frozenset(['<NA>', 'None', 'nan']))
        assert rules.matches(pd.NA) is False
        assert rules.matches(None) is False
        assert rules.matches(np.nan) is False

    def test_case_insensitive(self):
        rules = MissingValueRules(frozenset(['NA']), case_sensitive=False)
        assert rules.matches('na') is True
        assert rules.matches('Na') is True
        assert rules.matches(' na') is False

    def test_strip_whitespace(self):
        rules = MissingValueRules(frozenset(['N/A']), strip_whitespace=True)
        assert rules.matches('  N/A ') is True
        assert rules.matches('n/a') is False

    def test_strip_makes_blank_match_empty_token(self):
        rules = MissingValueRules(frozenset(['']), strip_whitespace=True)
        assert rules.matches('   ') is True


class TestRuleConstruction:
    def test_bare_string_is_one_token(self):
        rules = MissingValueRules('N/A')
        assert rules.tokens == frozenset(['N/A'])

    def test_non_string_token_rejected(self):
        with pytest.raises(RuleConfigError, match="must be strings"):
            MissingValueRules(frozenset([1]))

    def test_with_tokens_extends(self):
        rules = DEFAULT_RULES.with_tokens('-99', 'refused')
        assert rules.tokens == frozenset(['NA', 'N/A', '-99', 'refused'])

    def test_rules_are_hashable_and_comparable(self):
        assert DEFAULT_RULES == MissingValueRules(frozenset(['N/A', 'NA']))
        assert len({DEFAULT_RULES, MissingValueRules(frozenset(['NA', 'N/A']))}) == 1

    def test_describe(self):
        assert DEFAULT_RULES.describe() == "{'N/A', 'NA'}"
        relaxed = MissingValueRules(frozenset(['NA']), case_sensitive=False, strip_whitespace=True)
        assert relaxed.describe() == "{'NA'} (case-insensitive, stripped)"


# ============================================================================
# Tests: rules_from_options
# ============================================================================

class TestRulesFromOptions:
    def test_empty_mapping_is_default(self):
        assert rules_from_options({}) == DEFAULT_RULES

    def test_empty_string_opt_in(self):
        rules = rules_from_options({'': True})
        assert rules.tokens == frozenset(['NA', 'N/A', ''])
        assert rules.match_empty is True

    def test_disable_token(self):
        rules = rules_from_options({'N/A': False})
        assert rules.tokens == frozenset(['NA'])

    def test_extra_tokens_and_flags(self):
        rules = rules_from_options({
            'extra_tokens': ['-99'],
            'case_sensitive': False,
            'strip_whitespace': True,
        })
        assert '-99' in rules.tokens
        assert rules.case_sensitive is False
        assert rules.strip_whitespace is True

    def test_unknown_option_rejected(self):
        with pytest.raises(RuleConfigError, match="Unknown missing-value option"):
            rules_from_options({'NULL': True})

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            rules_from_options({'case_insensitive': True})

    def test_toggle_keys_are_the_tokens(self):
        all_on = rules_from_options({tok: True for tok in TOKEN_OPTION_DEFAULTS})
        assert all_on.tokens == frozenset(TOKEN_OPTION_DEFAULTS)
        all_off = rules_from_options({tok: False for tok in TOKEN_OPTION_DEFAULTS})
        assert all_off.tokens == frozenset()

    def test_unknown_option_lists_toggles(self):
        with pytest.raises(RuleConfigError, match=r"\['NA', 'N/A', ''\]"):
            rules_from_options({'NULL': True})
