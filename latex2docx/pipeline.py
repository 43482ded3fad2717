from __future__ import annotations
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Optional
import logging
import os
import tempfile

from latex2docx.adapters.docx_adapter import inventory_docx
from latex2docx.adapters.pandoc_adapter import (
    DEFAULT_PANDOC,
    DEFAULT_REFERENCE_DOC,
    ConversionOptions,
    pandoc_version,
    require_pandoc,
    resolve_reference_doc,
    run_pandoc,
)
from latex2docx.errors import InputNotFoundError, InputReadError
from latex2docx.lint import lint_environment_balance, lint_residual_macros
from latex2docx.normalize import normalize_text
from latex2docx.rules.checks import check_rule_pack
from latex2docx.rules.load_rules import DEFAULT_RULE_PACK, load_macro_rules, load_rule_pack

logger = logging.getLogger(__name__)

DOCX_SUFFIX = ".docx"


@dataclass
class ConverterConfig:
    """Runtime settings for one conversion run."""
    pandoc_binary: str = field(default_factory=lambda: os.environ.get("LATEX2DOCX_PANDOC", DEFAULT_PANDOC))
    reference_doc: Optional[str] = None  # None -> DEFAULT_REFERENCE_DOC in the working directory
    rules_path: str = DEFAULT_RULE_PACK
    encoding: str = "utf-8"  # of the source manuscript; the file handed to pandoc is always UTF-8


def default_output_path(input_tex: str) -> str:
    return str(Path(input_tex).with_suffix(DOCX_SUFFIX))


@contextmanager
def transient_file(text: str, encoding: str = "utf-8", suffix: str = ".tex") -> Iterator[str]:
    """Write ``text`` to a uniquely named temp file, removed on every exit path."""
    f = tempfile.NamedTemporaryFile(mode="w", encoding=encoding, prefix="latex2docx.", suffix=suffix, delete=False)
    try:
        with f:
            f.write(text)
        logger.debug(f"Transient file: {f.name}")
        yield f.name
    finally:
        try:
            os.unlink(f.name)
        except FileNotFoundError:
            pass
        logger.debug(f"Removed transient file: {f.name}")


def _noop(message: str) -> None:
    pass


def run_pipeline(
    *,
    input_tex: str,
    output_docx: Optional[str] = None,
    config: Optional[ConverterConfig] = None,
    pandoc: Optional[str] = None,
    progress: Callable[[str], None] = _noop,
) -> Dict[str, Any]:
    """
    Normalize journal macros in ``input_tex`` and convert it to DOCX with pandoc.

    Raises:
        PandocNotFoundError: pandoc is missing (checked before any file work)
        InputNotFoundError: ``input_tex`` does not exist
        InputReadError: ``input_tex`` is unreadable or not in ``config.encoding``
        ConversionError: pandoc failed; no output file is left behind
    """
    config = config or ConverterConfig()
    ts = datetime.now(timezone.utc).isoformat(timespec="seconds")

    pandoc = pandoc or require_pandoc(config.pandoc_binary)
    version = pandoc_version(pandoc)
    progress(f"Using pandoc version {version or 'unknown'}")

    if not Path(input_tex).is_file():
        raise InputNotFoundError(f"File '{input_tex}' not found")

    output_docx = output_docx or default_output_path(input_tex)
    progress(f"Input file:  {input_tex}")
    progress(f"Output file: {output_docx}")

    # Normalize
    progress("Preparing file for conversion...")
    rules = load_macro_rules(load_rule_pack(config.rules_path))
    checklist = check_rule_pack(rules)
    if not checklist.ok:
        logger.warning(f"Rule pack check failed: missing={checklist.missing} shadowed={checklist.shadowed}")

    try:
        source = Path(input_tex).read_text(encoding=config.encoding)
    except UnicodeDecodeError as e:
        raise InputReadError(
            f"File '{input_tex}' is not valid {config.encoding} (byte {e.start}); "
            "re-save it as UTF-8 or pass --encoding"
        ) from e
    except OSError as e:
        raise InputReadError(f"Cannot read '{input_tex}': {e.strerror or e}") from e
    except LookupError as e:
        raise InputReadError(f"Unknown encoding '{config.encoding}'") from e
    normalized = normalize_text(source, rules)

    findings = []
    findings.extend(lint_environment_balance(source))
    findings.extend(lint_residual_macros(normalized.text, rules))
    for fnd in findings:
        logger.warning(f"{fnd.rule_id}: {fnd.message}" + (f" (line {fnd.line})" if fnd.line else ""))
    progress(f"Preprocessing complete ({normalized.total} replacements)")

    # Reference template
    reference_path = config.reference_doc or DEFAULT_REFERENCE_DOC
    reference_doc = resolve_reference_doc(reference_path)
    if reference_doc:
        progress(f"Using style file: {reference_doc}")
    else:
        progress(f"Warning: style file '{reference_path}' not found")
        progress("   pandoc default styles will be used")
        progress("   Run 'latex2docx --create-reference' to create the style file")

    options = ConversionOptions(reference_doc=reference_doc)

    # Convert
    progress("Converting to DOCX...")
    with transient_file(normalized.text) as tmp_tex:
        conversion = run_pandoc(pandoc, tmp_tex, output_docx, options)
    progress("Conversion completed successfully!")

    inventory = inventory_docx(conversion.output_path)

    payload: Dict[str, Any] = {
        "timestamp_utc": ts,
        "input_tex": input_tex,
        "output_docx": conversion.output_path,
        "pandoc": {"path": pandoc, "version": version, "options": options.to_args()},
        "reference_doc": reference_doc,
        "rule_pack": {"ok": checklist.ok, "missing": checklist.missing, "shadowed": checklist.shadowed, "notes": checklist.notes},
        "normalization": {"total": normalized.total, "counts": normalized.counts},
        "findings": [f.to_dict() for f in findings],
        "inventory": inventory.__dict__,
    }
    return payload
