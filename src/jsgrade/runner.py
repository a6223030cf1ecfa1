from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import httpx

from jsgrade.config import XML_REPORT_FILENAMES, GraderConfig
from jsgrade.errors import SubmissionParseError, SubmissionReadError
from jsgrade.reporting.case_xml import write_xml_report
from jsgrade.reporting.junit import write_junit
from jsgrade.reporting.submit import SubmissionOutcome, submit_results
from jsgrade.reporting.text import write_status_lines
from jsgrade.results import ResultSet, build_result_set
from jsgrade.syntax import parse_source


@dataclass
class RunReport:
    result_set: ResultSet
    submissions: list[SubmissionOutcome] = field(default_factory=list)
    files_written: list[Path] = field(default_factory=list)


def delete_output_files(paths: list[Path], logger: logging.Logger) -> list[Path]:
    """Delete each path that exists; missing files are skipped. Returns what was deleted."""
    deleted = []
    for path in paths:
        try:
            path.unlink()
        except FileNotFoundError:
            continue
        logger.info(f"Deleted: {path}")
        deleted.append(path)
    return deleted


class Runner:
    """Orchestrates one grading run: cleanup, then grade."""

    def __init__(
        self,
        config: GraderConfig,
        logger: logging.Logger,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config
        self.logger = logger
        self.transport = transport

    def cleanup(self) -> list[Path]:
        return delete_output_files(self.config.output_files(), self.logger)

    def read_submission(self) -> str:
        path = self.config.submission_path
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            self.logger.error(f"Error reading student's file {path}: {e}")
            raise SubmissionReadError(path, str(e)) from e

    def grade(self) -> RunReport:
        """Parse the submission, run the rubric and drive every reporter.

        Raises:
            SubmissionReadError: the submission file could not be read.
            SubmissionParseError: the submission is not valid JavaScript.
        """
        cfg = self.config
        source = self.read_submission()
        try:
            tree = parse_source(source, cfg.submission_path)
        except SubmissionParseError as e:
            self.logger.error(f"Error parsing student's file: {e}")
            raise

        result_set = build_result_set(
            tree,
            base_key=cfg.result_key,
            auxiliary_path=cfg.auxiliary_path,
            logger=self.logger,
            class_name=cfg.expected_class,
            method_name=cfg.expected_method,
        )
        for key, result in result_set.results.items():
            self.logger.debug(f"{key}: {result.identifier} {result.status.value}")

        report = RunReport(result_set=result_set)

        if cfg.submit:
            report.submissions = submit_results(
                result_set,
                url=cfg.endpoint_url,
                base_key=cfg.result_key,
                logger=self.logger,
                timeout=cfg.request_timeout,
                transport=self.transport,
            )
        else:
            self.logger.info("Remote submission disabled, skipping")

        for name in XML_REPORT_FILENAMES:
            report.files_written.append(
                write_xml_report(cfg.output_dir / name, result_set, mode=cfg.xml_mode)
            )

        report.files_written.extend(
            write_status_lines(result_set, cfg.text_output_for, self.logger)
        )
        report.files_written.append(
            write_junit(cfg.output_dir, result_set, cfg.result_key)
        )

        self.logger.debug(
            f"Grading complete: {result_set.earned_score}/{result_set.max_score} points"
        )
        return report

    def execute(self) -> RunReport:
        """Delete stale outputs, then grade."""
        self.logger.debug("Starting grading run")
        self.cleanup()
        return self.grade()
