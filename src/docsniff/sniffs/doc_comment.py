"""File and class doc comment sniffs.

Verifies that:
- A doc comment exists and uses the "/**" style.
- Required tags are present and non-repeatable tags occur once.
- Tags appear in the expected order and carry content.
- @package and @subpackage names follow the underscore-name format
  (reported only when enforce_package_naming is set).
"""

from __future__ import annotations

import logging
from abc import abstractmethod

from docsniff.config import DocsniffConfig
from docsniff.sniffs.base import BaseSniff, ReportSink
from docsniff.sniffs.locator import (
    CommentLocation,
    locate_class_comment,
    locate_file_comment,
)
from docsniff.sniffs.package_name import name_format_checks
from docsniff.sniffs.tag_checker import check_tags
from docsniff.sniffs.tag_extractor import CommentTags, extract_tags
from docsniff.sniffs.tag_rules import CommentScope, tag_table
from docsniff.tokens import TokenStream

logger = logging.getLogger(__name__)


class DocCommentSniff(BaseSniff):
    """Structural checks shared by file and class doc comments.

    Subclasses only decide how the comment is found and where the runner
    resumes afterwards.
    """

    scope: CommentScope = "file"

    def __init__(self, config: DocsniffConfig | None = None) -> None:
        self.config = config or DocsniffConfig()
        self.table = tag_table(self.scope)
        self.content_checks = name_format_checks(self.config.enforce_package_naming)

    @abstractmethod
    def locate(self, stream: TokenStream, position: int, sink: ReportSink) -> CommentLocation:
        """Find the doc comment for the anchor at position."""

    def resume_position(self, stream: TokenStream) -> int | None:
        """Where dispatch continues after this anchor has been processed."""
        return None

    def process(self, stream: TokenStream, position: int, sink: ReportSink) -> int | None:
        location = self.locate(stream, position, sink)
        logger.debug("%s comment for token %d: %s", self.scope, position, location.status)
        if location.region is None:
            return self.resume_position(stream)

        tags = extract_tags(stream, location.region)
        self.check_comment(tags, sink)
        return self.resume_position(stream)

    def check_comment(self, tags: CommentTags, sink: ReportSink) -> None:
        """Run the tag checks on an extracted comment."""
        check_tags(
            tags,
            self.table,
            sink,
            content_checks=self.content_checks,
            require_content=self.config.require_tag_content,
        )


class FileCommentSniff(DocCommentSniff):
    """Checks the doc comment at the top of a file.

    Only the first open tag of a file is examined; the rest of the file is
    skipped once it has been processed.
    """

    name = "file-comment"
    scope: CommentScope = "file"

    def register(self) -> tuple[str, ...]:
        return ("open_tag",)

    def locate(self, stream: TokenStream, position: int, sink: ReportSink) -> CommentLocation:
        return locate_file_comment(stream, position, sink)

    def resume_position(self, stream: TokenStream) -> int | None:
        return len(stream) + 1

    def check_comment(self, tags: CommentTags, sink: ReportSink) -> None:
        if self.config.report_missing_php_version and not tags.php_version_mentioned:
            sink.add_warning("PHP version not specified", tags.region.closer, "MissingVersion")
        super().check_comment(tags, sink)


class ClassCommentSniff(DocCommentSniff):
    """Checks the doc comment in front of each class, interface and trait."""

    name = "class-comment"
    scope: CommentScope = "class"

    def register(self) -> tuple[str, ...]:
        return ("class", "interface", "trait")

    def locate(self, stream: TokenStream, position: int, sink: ReportSink) -> CommentLocation:
        return locate_class_comment(stream, position, sink)
