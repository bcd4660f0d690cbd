"""Doc comment sniffs.

Provides the sniffs that check file and class doc comments, the reporting
sink they write to, and the runner that drives them over token streams.
"""

from __future__ import annotations

from docsniff.sniffs.base import (
    BaseSniff,
    Diagnostic,
    DiagnosticCollector,
    Metric,
    ReportSink,
    Severity,
)
from docsniff.sniffs.doc_comment import ClassCommentSniff, DocCommentSniff, FileCommentSniff
from docsniff.sniffs.runner import FileResult, RunSummary, SniffRunner
from docsniff.sniffs.tag_rules import CLASS_TAGS, FILE_TAGS, TagRule, TagTable, tag_table

__all__ = [
    # Base types
    "BaseSniff",
    "Diagnostic",
    "DiagnosticCollector",
    "Metric",
    "ReportSink",
    "Severity",
    # Sniffs
    "ClassCommentSniff",
    "DocCommentSniff",
    "FileCommentSniff",
    # Rule tables
    "CLASS_TAGS",
    "FILE_TAGS",
    "TagRule",
    "TagTable",
    "tag_table",
    # Runner
    "FileResult",
    "RunSummary",
    "SniffRunner",
]
