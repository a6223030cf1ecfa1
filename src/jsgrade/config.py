from __future__ import annotations

from pathlib import Path
from typing import Literal

import httpx
import yaml
from expandvars import expandvars
from pydantic import BaseModel, ConfigDict, field_validator

from jsgrade.checks.base import Category

DEFAULT_ENDPOINT_URL = "https://compiler.techademy.com/v1/mfa-results/push"
DEFAULT_RESULT_KEY = "d805050e-a0d8-49b0-afbd-46a486105170"

XML_REPORT_FILENAMES = ("yaksha-test-cases.xml", "test-report.xml")
JUNIT_FILENAME = "junit.xml"
DEBUG_LOG_FILENAME = "grader-debug.log"

_PATH_FIELDS = ("submission_path", "auxiliary_path", "output_dir")


def _default_text_outputs() -> dict[Category, str]:
    return {
        Category.FUNCTIONAL: "output_revised.txt",
        Category.BOUNDARY: "output_boundary_revised.txt",
        Category.EXCEPTION: "output_exception_revised.txt",
    }


class GraderConfig(BaseModel):
    """Where a grading run reads from and writes to.

    Relative paths are interpreted against the working directory of the
    process, except when loaded from a file (see load_config).
    """

    model_config = ConfigDict(extra="forbid")

    submission_path: Path = Path("../index.js")
    auxiliary_path: Path = Path("../custom.ih")
    output_dir: Path = Path(".")
    endpoint_url: str = DEFAULT_ENDPOINT_URL
    result_key: str = DEFAULT_RESULT_KEY
    expected_class: str = "Person"
    expected_method: str = "greet"
    xml_mode: Literal["fragments", "document"] = "fragments"
    submit: bool = True
    request_timeout: float = 30.0
    text_outputs: dict[Category, str] = _default_text_outputs()

    @field_validator("endpoint_url")
    @classmethod
    def expand_endpoint_url(cls, v: str) -> str:
        try:
            expanded = expandvars(v, nounset=True)
        except Exception as e:
            raise ValueError(f"endpoint_url has an unset variable: {e}") from e

        try:
            url = httpx.URL(expanded)
        except httpx.InvalidURL as e:
            raise ValueError(f"endpoint_url is not a valid URL: {e}") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise ValueError("endpoint_url must be an absolute http(s) URL")
        return expanded

    @field_validator("request_timeout")
    @classmethod
    def timeout_must_be_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("request_timeout must be positive")
        return v

    @field_validator("result_key", "expected_class", "expected_method")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    def output_files(self) -> list[Path]:
        """Every artifact a run writes, in cleanup order."""
        names = list(self.text_outputs.values())
        names.extend(XML_REPORT_FILENAMES)
        names.append(JUNIT_FILENAME)
        return [self.output_dir / name for name in names]

    def text_output_for(self, category: Category) -> Path | None:
        name = self.text_outputs.get(category)
        if name is None:
            return None
        return self.output_dir / name


def load_config(path: Path) -> GraderConfig:
    """Load and validate a grader config from a YAML file."""
    config_dir = path.parent.resolve()

    with open(path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")

    config = GraderConfig(**raw)

    # Resolve relative paths given in the file against the file's directory
    updates = {}
    for name in _PATH_FIELDS:
        if name not in raw:
            continue
        value: Path = getattr(config, name)
        if not value.is_absolute():
            updates[name] = (config_dir / value).resolve()

    return config.model_copy(update=updates)
