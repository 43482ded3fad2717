from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional
from pathlib import Path
import subprocess
import tempfile
import logging
import os
import shutil

from latex2docx.errors import ConversionError, PandocNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_PANDOC = "pandoc"
DEFAULT_REFERENCE_DOC = "reference-vestnik.docx"
PANDOC_INSTALL_HINT = "Install pandoc: brew install pandoc (macOS) or apt-get install pandoc (Linux)"


@dataclass
class ConversionOptions:
    """Fixed pandoc option set for journal submissions."""
    from_format: str = "latex"
    to_format: str = "docx"
    standalone: bool = True
    number_sections: bool = True
    toc: bool = False
    reference_doc: Optional[str] = None

    def to_args(self) -> List[str]:
        args = [f"--from={self.from_format}", f"--to={self.to_format}"]
        if self.standalone:
            args.append("--standalone")
        if self.number_sections:
            args.append("--number-sections")
        args.append(f"--toc={'true' if self.toc else 'false'}")
        if self.reference_doc:
            args.append(f"--reference-doc={self.reference_doc}")
        return args


@dataclass
class ConversionResult:
    """Result of a pandoc run."""
    status: str  # "ok"
    output_path: str
    command: List[str] = field(default_factory=list)
    message: str = ""


def find_pandoc(binary: str = DEFAULT_PANDOC) -> Optional[str]:
    """Resolve pandoc on PATH (or an explicit path to an executable)."""
    return shutil.which(binary)


def require_pandoc(binary: str = DEFAULT_PANDOC) -> str:
    pandoc = find_pandoc(binary)
    if not pandoc:
        raise PandocNotFoundError(f"pandoc is not installed ({binary!r} not found). {PANDOC_INSTALL_HINT}")
    return pandoc


def pandoc_version(pandoc: str) -> Optional[str]:
    """Version string from the first line of ``pandoc --version``."""
    try:
        result = subprocess.run([pandoc, "--version"], capture_output=True, text=True)
    except OSError as e:
        logger.warning(f"Could not query pandoc version: {e}")
        return None
    if result.returncode != 0 or not result.stdout.strip():
        return None
    first = result.stdout.splitlines()[0].split()
    return first[1] if len(first) > 1 else None


def resolve_reference_doc(explicit: Optional[str] = None, default: str = DEFAULT_REFERENCE_DOC) -> Optional[str]:
    """
    Pick the reference template.

    An explicit path wins; otherwise the conventional file in the current
    directory. Returns None when the chosen file does not exist.
    """
    candidate = explicit or default
    if Path(candidate).is_file():
        return candidate
    logger.info(f"Reference template not found: {candidate}")
    return None


def build_pandoc_command(pandoc: str, input_path: str, output_path: str, options: ConversionOptions) -> List[str]:
    return [pandoc, *options.to_args(), input_path, "-o", output_path]


def run_pandoc(
    pandoc: str,
    input_path: str,
    output_path: str,
    options: ConversionOptions,
) -> ConversionResult:
    """
    Convert ``input_path`` to ``output_path`` with pandoc.

    pandoc writes into a temporary directory next to the output; the file replaces
    ``output_path`` only when pandoc succeeds. A failed run never leaves a
    partial document behind.

    Raises:
        ConversionError: pandoc could not be started or exited non-zero
    """
    out = Path(output_path)
    out_dir = out.parent if str(out.parent) else Path(".")
    out_dir.mkdir(parents=True, exist_ok=True)

    # pandoc creates the staged file itself, so it gets umask-default permissions
    with tempfile.TemporaryDirectory(prefix=f".{out.stem}.", dir=str(out_dir)) as staging_dir:
        staging_path = os.path.join(staging_dir, out.name)
        cmd = build_pandoc_command(pandoc, input_path, staging_path, options)
        logger.info(f"Running pandoc: {' '.join(cmd)}")

        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as e:
            raise ConversionError(f"Could not start pandoc: {type(e).__name__}: {e}") from e

        if result.stderr.strip():
            logger.info(f"pandoc stderr: {result.stderr.strip()}")

        if result.returncode != 0:
            raise ConversionError(
                f"pandoc failed with exit code {result.returncode}: {result.stderr.strip()}",
                returncode=result.returncode,
                stderr=result.stderr,
            )

        os.replace(staging_path, str(out))

    return ConversionResult(
        status="ok",
        output_path=str(out),
        command=cmd,
        message="Converted via pandoc.",
    )
