"""Exceptions raised by the conversion pipeline.

Every failure that should stop a run derives from :class:`Latex2DocxError`,
so the CLI can report it and exit with status 1.
"""
from __future__ import annotations


class Latex2DocxError(Exception):
    """Base class for fatal pipeline errors."""


class PandocNotFoundError(Latex2DocxError):
    """pandoc is not installed or not on PATH."""


class InputNotFoundError(Latex2DocxError):
    """The source manuscript does not exist."""


class ConversionError(Latex2DocxError):
    """pandoc exited with a failure status."""

    def __init__(self, message: str, returncode: int | None = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class InputReadError(Latex2DocxError):
    """The source manuscript exists but cannot be read or decoded."""
