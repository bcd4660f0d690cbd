"""Sniff runner for checking token streams and token dump files.

Dispatches every enabled sniff over a stream and aggregates results across
files. Files are independent, so they can be checked in parallel.
"""

from __future__ import annotations

import concurrent.futures
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from docsniff.config import DocsniffConfig
from docsniff.sniffs.base import BaseSniff, Diagnostic, DiagnosticCollector, Metric
from docsniff.sniffs.doc_comment import ClassCommentSniff, FileCommentSniff
from docsniff.tokens import TokenStream, TokenStreamError, load_token_dump

logger = logging.getLogger(__name__)


@dataclass
class FileResult:
    """Result of checking one token stream.

    Attributes:
        source: Name of the checked file or stream.
        status: "fail" if any error was reported, "pass" otherwise.
        diagnostics: Diagnostics in emission order.
        metrics: Metrics in recording order.
    """

    source: str
    status: Literal["pass", "fail"]
    diagnostics: list[Diagnostic]
    metrics: list[Metric]


@dataclass
class RunSummary:
    """Aggregated results from checking multiple files.

    Attributes:
        status: "pass" if every file passes, "fail" otherwise.
        files_checked: Number of files checked.
        total_diagnostics: Total number of diagnostics across all files.
        errors: Number of error-severity diagnostics.
        warnings: Number of warning-severity diagnostics.
        results: Individual results, in input order.
        all_diagnostics: Flattened list of all diagnostics.
    """

    status: Literal["pass", "fail"]
    files_checked: int
    total_diagnostics: int
    errors: int
    warnings: int
    results: list[FileResult]
    all_diagnostics: list[Diagnostic]


class SniffRunner:
    """Runs the doc comment sniffs over token streams."""

    def __init__(self, config: DocsniffConfig | None = None, parallel: bool = True) -> None:
        """Initialize the runner.

        Args:
            config: Sniff configuration. Defaults to DocsniffConfig().
            parallel: Whether to check multiple files in parallel.
        """
        self.config = config or DocsniffConfig()
        self.parallel = parallel

    def create_sniffs(self) -> list[BaseSniff]:
        """Create the sniffs enabled by the configuration."""
        sniffs: list[BaseSniff] = []
        if self.config.check_file_comments:
            sniffs.append(FileCommentSniff(self.config))
        if self.config.check_class_comments:
            sniffs.append(ClassCommentSniff(self.config))
        return sniffs

    def check_stream(self, stream: TokenStream, source: str = "<stream>") -> FileResult:
        """Check one token stream.

        Args:
            stream: Tokens to check.
            source: Name reported with each diagnostic.

        Returns:
            FileResult for the stream.
        """
        sink = DiagnosticCollector(stream=stream, source=source)

        for sniff in self.create_sniffs():
            anchors = set(sniff.register())
            resume_at = 0
            for index, token in enumerate(stream):
                if index < resume_at or token.kind not in anchors:
                    continue
                resume = sniff.process(stream, index, sink)
                if resume is not None:
                    resume_at = resume
            logger.debug("%s: %s done", source, sniff.name)

        status: Literal["pass", "fail"] = "fail" if sink.errors else "pass"
        return FileResult(
            source=source,
            status=status,
            diagnostics=sink.diagnostics,
            metrics=sink.metrics,
        )

    def check_file(self, path: Path) -> FileResult:
        """Load a JSON token dump and check it.

        Unreadable or malformed dumps become a failing result with a single
        InvalidTokenDump error.
        """
        try:
            stream = load_token_dump(path)
        except (OSError, TokenStreamError) as e:
            logger.debug("Could not load %s: %s", path, e)
            return FileResult(
                source=str(path),
                status="fail",
                diagnostics=[
                    Diagnostic(
                        severity="error",
                        code="InvalidTokenDump",
                        message="Could not read token dump: %s",
                        data=(str(e),),
                        source=str(path),
                    )
                ],
                metrics=[],
            )
        return self.check_stream(stream, source=str(path))

    def check_paths(self, paths: list[Path]) -> RunSummary:
        """Check token dump files.

        Args:
            paths: Token dump files to check.

        Returns:
            RunSummary with results in the order of paths.
        """
        if self.parallel and len(paths) > 1:
            results = self._run_parallel(paths)
        else:
            results = [self.check_file(path) for path in paths]
        return self._aggregate_results(results)

    def _run_parallel(self, paths: list[Path]) -> list[FileResult]:
        """Check files using a ThreadPoolExecutor, keeping input order."""
        with concurrent.futures.ThreadPoolExecutor() as executor:
            return list(executor.map(self.check_file, paths))

    def _aggregate_results(self, results: list[FileResult]) -> RunSummary:
        """Aggregate per-file results into a summary."""
        all_diagnostics: list[Diagnostic] = []
        for result in results:
            all_diagnostics.extend(result.diagnostics)

        errors = sum(1 for d in all_diagnostics if d.severity == "error")
        warnings = len(all_diagnostics) - errors

        has_failures = any(result.status == "fail" for result in results)
        status: Literal["pass", "fail"] = "fail" if has_failures else "pass"

        return RunSummary(
            status=status,
            files_checked=len(results),
            total_diagnostics=len(all_diagnostics),
            errors=errors,
            warnings=warnings,
            results=results,
            all_diagnostics=all_diagnostics,
        )
