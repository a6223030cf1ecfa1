from __future__ import annotations

import pytest

from jsgrade.errors import SubmissionParseError, SubmissionReadError
from jsgrade.runner import Runner, delete_output_files

KEY = "d805050e-a0d8-49b0-afbd-46a486105170"
TEXT_OUTPUTS = (
    "output_revised.txt",
    "output_boundary_revised.txt",
    "output_exception_revised.txt",
)


def _read_lines(path) -> list[str]:
    return path.read_text().splitlines()


def test_reference_submission_end_to_end(make_config, reference_source, endpoint, logger):
    config = make_config(reference_source)
    report = Runner(config, logger, transport=endpoint.transport()).execute()

    assert report.result_set.all_passed
    out = config.output_dir
    assert _read_lines(out / "output_revised.txt") == [
        "ClassDefinition=PASS",
        "ObjectInstantiation=PASS",
        "ClassMethods=PASS",
    ]
    assert not (out / "output_boundary_revised.txt").exists()
    assert not (out / "output_exception_revised.txt").exists()

    assert len(endpoint.requests) == 3
    assert len(report.submissions) == 3
    assert all(b["customData"] == "custom-blob" for b in endpoint.bodies)

    for name in ("yaksha-test-cases.xml", "test-report.xml"):
        text = (out / name).read_text()
        assert text.count("<case>") == 3
        assert "<status>Pass</status>" in text
    assert (out / "junit.xml").exists()


def test_empty_submission_fails_every_check(make_config, endpoint, logger):
    config = make_config("")
    report = Runner(config, logger, transport=endpoint.transport()).execute()

    assert [r.passed for r in report.result_set] == [False, False, False]
    assert _read_lines(config.output_dir / "output_revised.txt") == [
        "ClassDefinition=FAIL",
        "ObjectInstantiation=FAIL",
        "ClassMethods=FAIL",
    ]
    assert len(endpoint.requests) == 3


def test_text_keys_match_result_set(make_config, reference_source, endpoint, logger):
    config = make_config(reference_source)
    report = Runner(config, logger, transport=endpoint.transport()).execute()

    written = set()
    for name in TEXT_OUTPUTS:
        path = config.output_dir / name
        if path.exists():
            written |= {line.split("=")[0] for line in _read_lines(path)}
    assert written == {r.identifier for r in report.result_set}


def test_rerun_replaces_previous_outputs(make_config, reference_source, endpoint, logger):
    config = make_config(reference_source)
    Runner(config, logger, transport=endpoint.transport()).execute()
    Runner(config, logger, transport=endpoint.transport()).execute()

    out = config.output_dir
    assert len(_read_lines(out / "output_revised.txt")) == 3
    assert (out / "yaksha-test-cases.xml").read_text().count("<case>") == 3
    assert (out / "test-report.xml").read_text().count("<case>") == 3


def test_remote_failure_keeps_local_outputs(make_config, reference_source, make_endpoint, logger):
    endpoint = make_endpoint(fail_on={0, 1, 2})
    config = make_config(reference_source)
    report = Runner(config, logger, transport=endpoint.transport()).execute()

    assert not any(s.delivered for s in report.submissions)
    assert len(_read_lines(config.output_dir / "output_revised.txt")) == 3


def test_submit_disabled_makes_no_calls(make_config, reference_source, endpoint, logger):
    config = make_config(reference_source, submit=False)
    report = Runner(config, logger, transport=endpoint.transport()).execute()
    assert endpoint.requests == []
    assert report.submissions == []


def test_missing_custom_data_is_not_fatal(make_config, reference_source, endpoint, logger):
    config = make_config(reference_source, custom=None)
    report = Runner(config, logger, transport=endpoint.transport()).execute()
    assert report.result_set.custom_data == ""
    assert all(b["customData"] == "" for b in endpoint.bodies)


def test_document_xml_mode(make_config, reference_source, endpoint, logger):
    config = make_config(reference_source, xml_mode="document")
    Runner(config, logger, transport=endpoint.transport()).execute()
    text = (config.output_dir / "test-report.xml").read_text()
    assert text.count("<test-cases>") == 1
    assert text.count("<case>") == 3


def test_unreadable_submission_aborts(make_config, endpoint, logger):
    config = make_config(None)
    runner = Runner(config, logger, transport=endpoint.transport())
    with pytest.raises(SubmissionReadError):
        runner.execute()
    assert endpoint.requests == []
    assert not (config.output_dir / "output_revised.txt").exists()


def test_parse_error_aborts_without_partial_results(make_config, endpoint, logger):
    config = make_config("class Person {")
    runner = Runner(config, logger, transport=endpoint.transport())
    with pytest.raises(SubmissionParseError):
        runner.execute()
    assert endpoint.requests == []
    assert list(config.output_dir.iterdir()) == []


def test_cleanup_removes_stale_outputs(make_config, logger):
    config = make_config("")
    for path in config.output_files():
        path.write_text("stale")
    unrelated = config.output_dir / "keep.txt"
    unrelated.write_text("keep")

    deleted = Runner(config, logger).cleanup()

    assert sorted(deleted) == sorted(config.output_files())
    assert list(config.output_dir.iterdir()) == [unrelated]


def test_cleanup_twice_on_empty_dir(tmp_path, logger):
    paths = [tmp_path / "output_revised.txt", tmp_path / "test-report.xml"]
    assert delete_output_files(paths, logger) == []
    assert delete_output_files(paths, logger) == []
    assert list(tmp_path.iterdir()) == []


def test_malformed_endpoint_keeps_local_outputs(make_config, reference_source, endpoint, logger):
    # bypass config validation to reach the reporter with a bad URL
    config = make_config(reference_source).model_copy(
        update={"endpoint_url": "http://[::1"}
    )
    report = Runner(config, logger, transport=endpoint.transport()).execute()

    assert not any(s.delivered for s in report.submissions)
    out = config.output_dir
    assert len(_read_lines(out / "output_revised.txt")) == 3
    assert (out / "test-report.xml").exists()
    assert (out / "junit.xml").exists()


def test_deeply_nested_submission_aborts(make_config, endpoint, logger, caplog):
    caplog.set_level("ERROR", logger="jsgrade_test")
    config = make_config("[" * 5000 + "]" * 5000)
    runner = Runner(config, logger, transport=endpoint.transport())

    with pytest.raises(SubmissionParseError, match="nested too deeply"):
        runner.execute()
    assert "Error parsing student's file" in caplog.text
    assert endpoint.requests == []
