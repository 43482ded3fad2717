from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

@dataclass
class Finding:
    rule_id: str
    severity: str  # info|warning|critical
    message: str
    category: str = "general"
    line: Optional[int] = None
    details: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

@dataclass
class OutputInventory:
    status: str  # "ok" | "failed"
    headings: List[str] = field(default_factory=list)
    paragraph_count: int = 0
    table_count: int = 0
    message: str = ""
