"""
Macro normalization for journal manuscripts.

Rewrites the journal's own LaTeX macros into plain LaTeX that pandoc can read.
This is a table-driven text substitution, not a parser:

- each rule is applied once, in table order, over the whole text
- ``command`` rules only match a one-line argument without nested braces
- begin/end markers are rewritten independently; balance is not checked
- em/en dashes become ``---``/``--`` everywhere, including verbatim spans

Anything that matches no rule passes through unchanged.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional
import logging

from latex2docx.rules.load_rules import MacroRule, load_default_rules

logger = logging.getLogger(__name__)


@dataclass
class NormalizationResult:
    """Normalized text plus the number of replacements made per rule id."""
    text: str
    counts: Dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.counts.values())


def apply_rule(text: str, rule: MacroRule) -> tuple[str, int]:
    """Apply one rule to every occurrence in ``text``."""
    pattern = rule.compile()
    if pattern is None:
        n = text.count(rule.search)
        if n:
            text = text.replace(rule.search, rule.render())
        return text, n
    return pattern.subn(lambda m: rule.render(m.group(1)), text)


def normalize_text(text: str, rules: Optional[List[MacroRule]] = None) -> NormalizationResult:
    """
    Rewrite every known macro in ``text``.

    Args:
        text: LaTeX source
        rules: Ordered rule table (defaults to the packaged journal rules)

    Returns:
        NormalizationResult with the rewritten text and per-rule counts
    """
    if rules is None:
        rules = load_default_rules()

    counts: Dict[str, int] = {}
    for rule in rules:
        text, n = apply_rule(text, rule)
        if n:
            counts[rule.id] = n
            logger.debug(f"{rule.id}: {n} replacement(s)")

    result = NormalizationResult(text=text, counts=counts)
    logger.info(f"Normalized {result.total} macro/typography occurrence(s) using {len(rules)} rules")
    return result


def normalize_latex(text: str) -> str:
    """Shortcut returning only the normalized text."""
    return normalize_text(text).text
