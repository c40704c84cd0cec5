"""Missing-value rule sets.

A rule set is the collection of raw string tokens that denote "no answer"
in a survey export.  Matching is exact and case-sensitive unless a rule
set is explicitly built with relaxed matching.

Usage::

    from survey_triage.rules import DEFAULT_RULES, rules_from_options

    DEFAULT_RULES.matches("NA")            # True
    DEFAULT_RULES.matches("")              # False
    DEFAULT_RULES.with_empty().matches("") # True

    rules_from_options({"NA": True, "N/A": True, "": True})
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, FrozenSet, Iterable, Mapping

from .table import is_missing


class RuleConfigError(ValueError):
    """Raised when a rule option mapping can't be turned into a rule set."""
    pass


def _as_token_set(tokens: Iterable[str]) -> FrozenSet[str]:
    if isinstance(tokens, str):
        # a bare string would otherwise be split into characters
        tokens = [tokens]
    token_set = frozenset(tokens)
    for tok in token_set:
        if not isinstance(tok, str):
            raise RuleConfigError(f"missing-value tokens must be strings, got {tok!r}")
    return token_set


@dataclass(frozen=True)
class MissingValueRules:
    """Raw string patterns that denote a missing answer.

    Attributes:
        tokens: exact strings treated as missing
        case_sensitive: when False, tokens and cells are lowercased before comparing
        strip_whitespace: when True, surrounding whitespace is removed from cells
    """
    tokens: FrozenSet[str] = field(default_factory=frozenset)
    case_sensitive: bool = True
    strip_whitespace: bool = False

    def __post_init__(self):
        object.__setattr__(self, 'tokens', _as_token_set(self.tokens))

    @property
    def match_empty(self) -> bool:
        return '' in self.tokens

    def canonical(self, text: str) -> str:
        """Apply the configured relaxations to a raw string."""
        if self.strip_whitespace:
            text = text.strip()
        if not self.case_sensitive:
            # must agree with polars str.to_lowercase()
            text = text.lower()
        return text

    def canonical_tokens(self) -> FrozenSet[str]:
        return frozenset(self.canonical(tok) for tok in self.tokens)

    def matches(self, value: Any) -> bool:
        """True when ``value`` is a raw encoding of "no answer".

        Cells that already hold the missing marker never match, so a
        table normalized once is left alone by a second pass.
        """
        if is_missing(value):
            return False
        text = value if isinstance(value, str) else str(value)
        if self.case_sensitive and not self.strip_whitespace:
            return text in self.tokens
        return self.canonical(text) in self.canonical_tokens()

    def with_tokens(self, *extra: str) -> 'MissingValueRules':
        return replace(self, tokens=self.tokens | _as_token_set(extra))

    def with_empty(self) -> 'MissingValueRules':
        """Extend the rule set so that empty strings count as missing."""
        return self.with_tokens('')

    def describe(self) -> str:
        toks = ', '.join(repr(t) for t in sorted(self.tokens))
        flags = []
        if not self.case_sensitive:
            flags.append('case-insensitive')
        if self.strip_whitespace:
            flags.append('stripped')
        suffix = f" ({', '.join(flags)})" if flags else ''
        return f"{{{toks}}}{suffix}"


DEFAULT_TOKENS = ('NA', 'N/A')

DEFAULT_RULES = MissingValueRules(frozenset(DEFAULT_TOKENS))

# empty string is opt-in, everything else documented is on by default
TOKEN_OPTION_DEFAULTS = {
    'NA': True,
    'N/A': True,
    '': False,
}

FLAG_OPTIONS = ('case_sensitive', 'strip_whitespace')


def rules_from_options(options: Mapping[str, Any]) -> MissingValueRules:
    """Build a rule set from a flat option mapping.

    Recognized keys are the token toggles ``"NA"``, ``"N/A"`` and ``""``
    (booleans), ``"extra_tokens"`` (an iterable of further strings), and
    the matching flags ``"case_sensitive"`` / ``"strip_whitespace"``.
    Omitted token toggles fall back to ``TOKEN_OPTION_DEFAULTS``.
    """
    unknown = [k for k in options
               if k not in TOKEN_OPTION_DEFAULTS and k not in FLAG_OPTIONS and k != 'extra_tokens']
    if unknown:
        raise RuleConfigError(
            f"Unknown missing-value option(s) {unknown!r}. Expected token toggles "
            f"{list(TOKEN_OPTION_DEFAULTS)!r}, 'extra_tokens', or flags {list(FLAG_OPTIONS)!r}"
        )

    tokens = set()
    for token, default in TOKEN_OPTION_DEFAULTS.items():
        if bool(options.get(token, default)):
            tokens.add(token)
    tokens |= _as_token_set(options.get('extra_tokens', ()))

    return MissingValueRules(
        frozenset(tokens),
        case_sensitive=bool(options.get('case_sensitive', True)),
        strip_whitespace=bool(options.get('strip_whitespace', False)),
    )
