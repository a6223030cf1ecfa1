from __future__ import annotations

from pathlib import Path

from junitparser import Failure, JUnitXml, TestCase, TestSuite

from jsgrade.config import JUNIT_FILENAME
from jsgrade.results import ResultSet


def write_junit(output_dir: Path, result_set: ResultSet, result_key: str) -> Path:
    """Write junit.xml summarising the run, return path."""
    xml = JUnitXml()
    suite = TestSuite("jsgrade")

    suite.add_property("result_key", result_key)
    suite.add_property("earned_score", str(result_set.earned_score))
    suite.add_property("max_score", str(result_set.max_score))

    for result in result_set:
        case = TestCase(result.identifier)
        case.classname = result.category.value
        if not result.passed:
            case.result = Failure(result.feedback)
        suite.add_testcase(case)

    # Use append (not +=) to preserve properties
    xml.append(suite)

    junit_path = output_dir / JUNIT_FILENAME
    junit_path.parent.mkdir(parents=True, exist_ok=True)
    xml.write(str(junit_path), pretty=True)
    return junit_path
