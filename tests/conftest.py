"""Pytest configuration and fixtures."""

import json
import logging
from pathlib import Path

import httpx
import pytest

from jsgrade.config import GraderConfig

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def cleanup_loggers():
    """Clean up jsgrade loggers after each test to prevent name collisions."""
    yield

    loggers_to_remove = [
        name
        for name in logging.Logger.manager.loggerDict.keys()
        if name.startswith("jsgrade")
    ]

    for name in loggers_to_remove:
        logger = logging.getLogger(name)
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()
        del logging.Logger.manager.loggerDict[name]


@pytest.fixture
def logger():
    """DEBUG-level logger that propagates to caplog."""
    logger = logging.getLogger("jsgrade_test")
    logger.setLevel(logging.DEBUG)
    return logger


@pytest.fixture
def reference_source() -> str:
    return (FIXTURES / "reference_submission.js").read_text()


@pytest.fixture
def workspace(tmp_path):
    """A grading layout: submission and custom data one level above the output dir."""
    out = tmp_path / "test"
    out.mkdir()
    return tmp_path


@pytest.fixture
def make_config(workspace):
    """Build a GraderConfig whose I/O all lives under the temporary workspace."""

    def _make(source: str | None = None, custom: str | None = "custom-blob", **overrides):
        submission = workspace / "index.js"
        aux = workspace / "custom.ih"
        if source is not None:
            submission.write_text(source)
        if custom is not None:
            aux.write_text(custom)
        values = {
            "submission_path": submission,
            "auxiliary_path": aux,
            "output_dir": workspace / "test",
            "endpoint_url": "https://scores.example.test/push",
        }
        values.update(overrides)
        return GraderConfig(**values)

    return _make


class RecordingEndpoint:
    """httpx.MockTransport handler that records every JSON body it receives."""

    def __init__(self, status_code: int = 200, fail_on: set[int] | None = None):
        self.status_code = status_code
        self.fail_on = fail_on or set()
        self.requests: list[httpx.Request] = []

    @property
    def bodies(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        index = len(self.requests)
        self.requests.append(request)
        if index in self.fail_on:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(self.status_code, json={"ok": self.status_code < 400})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def endpoint() -> RecordingEndpoint:
    return RecordingEndpoint()


@pytest.fixture
def make_endpoint():
    return RecordingEndpoint
