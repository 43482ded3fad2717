from __future__ import annotations

from latex2docx.normalize import NormalizationResult, normalize_latex, normalize_text
from latex2docx.pipeline import ConverterConfig, run_pipeline

__all__ = ["ConverterConfig", "NormalizationResult", "normalize_latex", "normalize_text", "run_pipeline"]
