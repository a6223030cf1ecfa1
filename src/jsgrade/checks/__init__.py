"""Rubric check system for grading submissions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from jsgrade.checks.base import Category, CheckResult, Status, build_result
from jsgrade.checks.structural import (
    check_class_definition,
    check_class_methods,
    check_object_instantiation,
)
from jsgrade.syntax import Program


@dataclass(frozen=True)
class RubricCheck:
    """A check, the suffix that derives its result key, and the options it takes."""

    key_suffix: str
    run: Callable[..., CheckResult]
    options: tuple[str, ...] = ()

    def result_key(self, base: str) -> str:
        return f"{base}{self.key_suffix}"

    def evaluate(self, tree: Program, logger: logging.Logger, **options: str) -> CheckResult:
        return self.run(tree, logger, **{name: options[name] for name in self.options})


RUBRIC: tuple[RubricCheck, ...] = (
    RubricCheck("", check_class_definition),
    RubricCheck("-object-instantiation", check_object_instantiation, ("class_name",)),
    RubricCheck(
        "-class-methods", check_class_methods, ("class_name", "method_name")
    ),
)

__all__ = [
    "Category",
    "CheckResult",
    "RUBRIC",
    "RubricCheck",
    "Status",
    "build_result",
    "check_class_definition",
    "check_class_methods",
    "check_object_instantiation",
]
