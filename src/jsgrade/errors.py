"""Exceptions raised when a grading run cannot produce results."""

from __future__ import annotations

from pathlib import Path


class GradingError(Exception):
    """Base class for run-aborting grading failures."""


class SubmissionReadError(GradingError):
    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not read submission {path}: {reason}")


class SubmissionParseError(GradingError):
    def __init__(
        self,
        path: Path,
        description: str,
        line: int | None = None,
        column: int | None = None,
    ):
        self.path = path
        self.description = description
        self.line = line
        self.column = column
        location = f":{line}:{column}" if line is not None else ""
        super().__init__(f"Could not parse submission {path}{location}: {description}")
