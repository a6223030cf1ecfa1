"""Base data structures for the rubric check system."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Category(str, Enum):
    FUNCTIONAL = "functional"
    BOUNDARY = "boundary"
    EXCEPTION = "exception"


class Status(str, Enum):
    PASS = "Pass"
    FAIL = "Fail"


class CheckResult(BaseModel):
    """Outcome of evaluating a single rubric check.

    Field aliases are the names the scoring endpoint expects, so
    ``to_payload()`` is what goes on the wire.

    Attributes:
        identifier: Name of the check (e.g. "ClassDefinition").
        category: Which plain-text output file the verdict lands in.
        max_score: Points available for this check.
        earned_score: Points awarded (max_score on pass, 0 on fail).
        status: Pass or Fail.
        mandatory: Whether the check must pass for the submission to pass.
        feedback: Student-facing explanation, empty on pass.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    identifier: str = Field(alias="methodName")
    category: Category = Field(default=Category.FUNCTIONAL, alias="methodType")
    max_score: int = Field(default=1, ge=0, alias="actualScore")
    earned_score: int = Field(default=0, ge=0, alias="earnedScore")
    status: Status
    mandatory: bool = Field(default=True, alias="isMandatory")
    feedback: str = Field(default="", alias="errorMessage")

    @property
    def passed(self) -> bool:
        return self.status is Status.PASS

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


def build_result(
    identifier: str,
    feedback: list[str],
    category: Category = Category.FUNCTIONAL,
    max_score: int = 1,
    mandatory: bool = True,
) -> CheckResult:
    """Turn collected feedback into a verdict: no feedback means the check passed."""
    passed = not feedback
    return CheckResult(
        identifier=identifier,
        category=category,
        max_score=max_score,
        earned_score=max_score if passed else 0,
        status=Status.PASS if passed else Status.FAIL,
        mandatory=mandatory,
        feedback=", ".join(feedback),
    )
