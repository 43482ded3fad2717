from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Pattern
import re
import yaml

RULE_KINDS = ("command", "literal")
TRANSFORMS = ("none", "upper")
ARG_PLACEHOLDER = "{arg}"

DEFAULT_RULE_PACK = str(Path(__file__).parent / "vestnik_macros.yml")

@dataclass
class MacroRule:
    id: str
    kind: str                 # command|literal
    search: str               # macro name for "command", exact text for "literal"
    replace: str = ""
    transform: str = "none"
    category: str = "general"
    rationale: str = ""

    @property
    def lead(self) -> str:
        """Literal text every match of this rule starts with."""
        if self.kind == "command":
            return "\\" + self.search + "{"
        return self.search

    def compile(self) -> Optional[Pattern[str]]:
        # one-line argument, no nested braces
        if self.kind != "command":
            return None
        return re.compile(re.escape(self.lead) + r"([^}\n]*)\}")

    def render(self, arg: str = "") -> str:
        if self.transform == "upper":
            arg = arg.upper()
        return self.replace.replace(ARG_PLACEHOLDER, arg)

def load_rule_pack(path: Optional[str] = None) -> Dict[str, Any]:
    with open(path or DEFAULT_RULE_PACK, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}

def load_macro_rules(rule_pack: Dict[str, Any]) -> List[MacroRule]:
    rules: List[MacroRule] = []
    for r in rule_pack.get("macro_rules", []) or []:
        kind = str(r.get("kind", "literal"))
        if kind not in RULE_KINDS:
            raise ValueError(f"Rule {r.get('id')!r}: unknown kind {kind!r}")
        transform = str(r.get("transform", "none"))
        if transform not in TRANSFORMS:
            raise ValueError(f"Rule {r.get('id')!r}: unknown transform {transform!r}")
        search = r.get("macro") if kind == "command" else r.get("search")
        if not search:
            raise ValueError(f"Rule {r.get('id')!r}: missing {'macro' if kind == 'command' else 'search'}")
        rules.append(MacroRule(
            id=r["id"],
            kind=kind,
            search=str(search),
            replace=str(r.get("replace") or ""),
            transform=transform,
            category=r.get("category", "general"),
            rationale=r.get("rationale", ""),
        ))
    return rules

def load_default_rules() -> List[MacroRule]:
    return load_macro_rules(load_rule_pack(DEFAULT_RULE_PACK))
