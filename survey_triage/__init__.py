from .rules import DEFAULT_RULES, MissingValueRules, RuleConfigError, rules_from_options
from .table import MISSING, CellTag, InvariantViolation, cell_tag, is_missing
from .normalize import NormalizationResult, RuleMismatchWarning, normalize
from .completeness import (
    CompletenessSummary, analyze, column_missing_profile, completeness_by_segment,
)
from .report import TriageReport, assemble_report
from .pipeline import TriageOutcome, run_triage, triage_file

__version__ = "0.1.0"
