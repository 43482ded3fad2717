from __future__ import annotations
from typing import List
import re

from latex2docx.models import Finding
from latex2docx.rules.load_rules import MacroRule

_ENVIRONMENTS = ["bibliolist", "bibliolistnum"]

def _line_of(text: str, pos: int) -> int:
    return text.count("\n", 0, pos) + 1

def lint_residual_macros(normalized: str, rules: List[MacroRule]) -> List[Finding]:
    """Journal macros that survived normalization (usually a multi-line argument)."""
    findings: List[Finding] = []
    for rule in rules:
        if rule.kind != "command":
            continue
        patt = re.compile(re.escape("\\" + rule.search) + r"(?![A-Za-z])")
        for m in patt.finditer(normalized):
            findings.append(Finding(
                rule_id="macro.residual",
                severity="warning",
                category="normalization",
                message=f"\\{rule.search} was not converted (argument spans lines or has nested braces).",
                line=_line_of(normalized, m.start()),
                details={"rule": rule.id},
            ))
    return findings

def lint_environment_balance(source: str) -> List[Finding]:
    findings: List[Finding] = []
    for env in _ENVIRONMENTS:
        begins = len(re.findall(re.escape(f"\\begin{{{env}}}"), source))
        ends = len(re.findall(re.escape(f"\\end{{{env}}}"), source))
        if begins != ends:
            findings.append(Finding(
                rule_id="environment.unbalanced",
                severity="warning",
                category="structure",
                message=f"{env}: {begins} \\begin vs {ends} \\end.",
                details={"environment": env, "begin": str(begins), "end": str(ends)},
            ))
    return findings
