from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from jsgrade.checks import RUBRIC, CheckResult, RubricCheck
from jsgrade.syntax import Program


@dataclass
class ResultSet:
    """All check outcomes of one grading run, keyed by result key."""

    results: dict[str, CheckResult] = field(default_factory=dict)
    custom_data: str = ""

    def __iter__(self):
        return iter(self.results.values())

    def __len__(self) -> int:
        return len(self.results)

    @property
    def earned_score(self) -> int:
        return sum(r.earned_score for r in self.results.values())

    @property
    def max_score(self) -> int:
        return sum(r.max_score for r in self.results.values())

    @property
    def all_passed(self) -> bool:
        return all(r.passed for r in self.results.values())


def read_custom_data(path: Path, logger: logging.Logger) -> str:
    """Read the auxiliary side file, or return "" if it cannot be read."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Error reading custom data file {path}: {e}")
        return ""


def build_result_set(
    tree: Program,
    base_key: str,
    auxiliary_path: Path,
    logger: logging.Logger,
    class_name: str = "Person",
    method_name: str = "greet",
    rubric: tuple[RubricCheck, ...] = RUBRIC,
) -> ResultSet:
    """Run every rubric check once and attach the auxiliary data."""
    result_set = ResultSet()
    for check in rubric:
        key = check.result_key(base_key)
        if key in result_set.results:
            raise ValueError(f"Duplicate result key: {key}")
        result_set.results[key] = check.evaluate(
            tree, logger, class_name=class_name, method_name=method_name
        )

    result_set.custom_data = read_custom_data(auxiliary_path, logger)
    logger.debug(f"Loaded {len(result_set.custom_data)} characters of custom data")
    return result_set
