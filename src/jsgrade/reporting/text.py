from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable

from jsgrade.checks.base import Category, CheckResult


def status_line(result: CheckResult) -> str:
    return f"{result.identifier}={'PASS' if result.passed else 'FAIL'}\n"


def write_status_lines(
    results: Iterable[CheckResult],
    output_for: Callable[[Category], Path | None],
    logger: logging.Logger,
) -> list[Path]:
    """Append ``<identifier>=<PASS|FAIL>`` for each result to its category's file.

    Results whose category has no file are logged and skipped. Returns the
    files written, in first-write order.
    """
    written: list[Path] = []
    for result in results:
        path = output_for(result.category)
        if path is None:
            logger.warning(
                f"No text output configured for category '{result.category.value}', "
                f"skipping {result.identifier}"
            )
            continue
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "a", encoding="utf-8") as f:
            f.write(status_line(result))
        if path not in written:
            written.append(path)
    return written
