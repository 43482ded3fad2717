from __future__ import annotations
from typing import Dict, Any, List
import json

def write_json(path: str, payload: Dict[str, Any]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)

def render_summary(payload: Dict[str, Any]) -> str:
    lines: List[str] = []
    norm = payload.get("normalization", {})
    lines.append(f"Replacements: {norm.get('total', 0)}")
    for rule_id, n in sorted((norm.get("counts") or {}).items()):
        lines.append(f"- {rule_id}: {n}")
    inv = payload.get("inventory", {})
    if inv.get("status") == "ok":
        lines.append(f"Output: {len(inv.get('headings') or [])} headings, "
                     f"{inv.get('paragraph_count')} paragraphs, {inv.get('table_count')} tables")
    findings = payload.get("findings", []) or []
    if findings:
        lines.append("Findings")
        for fnd in findings[:40]:
            where = f" (line {fnd['line']})" if fnd.get("line") else ""
            lines.append(f"- [{fnd['severity'].upper()}] {fnd['rule_id']}: {fnd['message']}{where}")
        if len(findings) > 40:
            lines.append(f"... plus {len(findings)-40} more.")
    return "\n".join(lines)

def render_guidance(output_docx: str) -> str:
    lines = [
        "",
        "Final check in Word:",
        "",
        f"1. Open the file: {output_docx}",
        "2. Check formatting:",
        "   - Body text: Times New Roman 12pt, line spacing 1.5",
        "   - Footnotes: Times New Roman 10pt, line spacing 1.0",
        "   - First-line indent: 1.25 cm",
        "   - Margins: 2.54 cm (1 inch) on all sides",
        "3. Check page numbering",
        "4. Check footnotes and the reference list",
        "",
        "IMPORTANT: some formatting may need manual",
        "   correction in Microsoft Word.",
        "",
        f"Done! File saved: {output_docx}",
    ]
    return "\n".join(lines)
