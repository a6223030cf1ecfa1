"""XML case reports in the ``<test-cases><case>...`` layout.

``fragments`` mode appends one complete document per result, so a file
holding several results is a run of concatenated documents. ``document``
mode writes a single ``test-cases`` root with one ``case`` per result.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Iterable

from jsgrade.checks.base import CheckResult

XML_DECLARATION = '<?xml version="1.0"?>\n'


def _case_element(result: CheckResult) -> ET.Element:
    case = ET.Element("case")
    # test-case-type carries the status, as the consuming dashboard reads it
    ET.SubElement(case, "test-case-type").text = result.status.value
    ET.SubElement(case, "name").text = result.identifier
    ET.SubElement(case, "status").text = result.status.value
    return case


def _render(root: ET.Element) -> str:
    ET.indent(root, space="  ")
    return XML_DECLARATION + ET.tostring(root, encoding="unicode")


def render_fragment(result: CheckResult) -> str:
    """A standalone ``test-cases`` document holding one case."""
    root = ET.Element("test-cases")
    root.append(_case_element(result))
    return _render(root)


def render_document(results: Iterable[CheckResult]) -> str:
    root = ET.Element("test-cases")
    for result in results:
        root.append(_case_element(result))
    return _render(root) + "\n"


def write_xml_report(path: Path, results: Iterable[CheckResult], mode: str = "fragments") -> Path:
    """Write the case report to path, returning it.

    In fragments mode each result is appended to whatever the file already
    holds; document mode replaces the file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    if mode == "document":
        path.write_text(render_document(results), encoding="utf-8")
        return path
    if mode != "fragments":
        raise ValueError(f"Unknown XML report mode: {mode}")

    for result in results:
        with open(path, "a", encoding="utf-8") as f:
            f.write(render_fragment(result))
    return path
