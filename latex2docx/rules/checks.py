from __future__ import annotations
from dataclasses import dataclass
from typing import List

from latex2docx.rules.load_rules import MacroRule

# Journal vocabulary every rule pack has to handle
REQUIRED_MACROS = [
    "articletitleru", "articletitleen",
    "authorru", "authoren",
    "institution", "institutionen",
    "abstractru", "abstracten",
    "keywordsru", "keywordsen",
    "funding", "fundingen",
    "forcitation", "forcitationen",
    "aboutauthor",
    "\\bibliographyru", "\\referencesen",
    "\\begin{bibliolist}", "\\end{bibliolist}",
    "\\begin{bibliolistnum}", "\\end{bibliolistnum}",
]

@dataclass
class RulePackCheckResult:
    ok: bool
    missing: List[str]
    shadowed: List[str]
    notes: List[str]

def find_shadowed_rules(rules: List[MacroRule]) -> List[str]:
    """Rules whose matches would already be consumed by an earlier, shorter rule."""
    shadowed = []
    for i, later in enumerate(rules):
        for earlier in rules[:i]:
            if earlier.lead != later.lead and later.lead.startswith(earlier.lead):
                shadowed.append(f"{later.id} (shadowed by {earlier.id})")
                break
    return shadowed

def check_rule_pack(rules: List[MacroRule]) -> RulePackCheckResult:
    covered = {r.search for r in rules}
    missing = [m for m in REQUIRED_MACROS if m not in covered]
    shadowed = find_shadowed_rules(rules)
    notes = []
    if missing:
        notes.append("Missing macros are passed to pandoc unchanged.")
    if shadowed:
        notes.append("Move longer macro names above the shorter ones they start with.")
    if not missing and not shadowed:
        notes.append("All journal macros covered, rule order is safe.")
    return RulePackCheckResult(ok=not missing and not shadowed, missing=missing, shadowed=shadowed, notes=notes)
