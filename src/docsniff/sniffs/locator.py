"""Locate the doc comment attached to a file or class anchor.

A lookup ends in one of four outcomes:
- no_comment: nothing to check and nothing to report (file is only "?>")
- missing: no doc comment where one is expected
- wrong_style: a comment is there but it is not a "/**" comment
- found: a doc comment region was located
Only "found" lets the caller go on with tag checks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

from docsniff.sniffs.base import ReportSink
from docsniff.tokens import Token, TokenStream

logger = logging.getLogger(__name__)

LocateStatus = Literal["no_comment", "missing", "wrong_style", "found"]

CLASS_MODIFIERS = ("abstract", "final", "readonly")


@dataclass(frozen=True)
class CommentRegion:
    """Token span of one doc comment, from its opener to its closer."""

    opener: int
    closer: int

    def __post_init__(self) -> None:
        if self.opener >= self.closer:
            raise ValueError(
                f"Doc comment opener ({self.opener}) must precede its closer ({self.closer})"
            )


@dataclass(frozen=True)
class CommentLocation:
    """Outcome of a doc comment lookup.

    Attributes:
        status: One of "no_comment", "missing", "wrong_style", "found".
        region: The located comment, only set when status is "found".
        error_position: Token the missing/wrong-style error was anchored to.
    """

    status: LocateStatus
    region: CommentRegion | None = None
    error_position: int | None = None

    @property
    def found(self) -> bool:
        return self.status == "found"


def _region(token: Token) -> CommentRegion:
    if token.comment_opener is None or token.comment_closer is None:
        raise ValueError(f"Doc comment marker {token.content!r} is not paired")
    return CommentRegion(opener=token.comment_opener, closer=token.comment_closer)


def locate_file_comment(stream: TokenStream, anchor: int, sink: ReportSink) -> CommentLocation:
    """Find the doc comment at the top of a file.

    Skips whitespace after the open tag, a leading declare(...) statement and
    a vim modeline comment before deciding.

    Args:
        stream: Token stream of the file.
        anchor: Index of the opening PHP tag.
        sink: Where the missing/wrong-style error and the metric go.

    Returns:
        The lookup outcome.
    """
    start = stream.find_next("whitespace", anchor + 1, exclude=True)

    token = stream.get(start)
    if token is not None and token.kind == "declare":
        semicolon = stream.find_next("semicolon", start + 1)
        start = (
            stream.find_next("whitespace", semicolon + 1, exclude=True)
            if semicolon is not None
            else None
        )
        token = stream.get(start)

    if token is not None and token.kind == "comment" and "vim:" in token.content:
        start = stream.find_next("whitespace", start + 1, exclude=True)
        token = stream.get(start)

    error_position = anchor + 1 if stream.get(anchor + 1) is not None else anchor

    if token is not None and token.kind == "close_tag":
        logger.debug("File at token %d closes before any content", anchor)
        return CommentLocation(status="no_comment")

    if token is not None and token.kind == "comment":
        sink.add_error(
            'You must use "/**" style comments for a file comment',
            error_position,
            "WrongStyle",
        )
        sink.record_metric(anchor, "File has doc comment", "yes")
        return CommentLocation(status="wrong_style", error_position=error_position)

    if token is None or token.kind != "doc_comment_open_tag":
        sink.add_error("Missing file doc comment", error_position, "Missing")
        sink.record_metric(anchor, "File has doc comment", "no")
        return CommentLocation(status="missing", error_position=error_position)

    sink.record_metric(anchor, "File has doc comment", "yes")
    return CommentLocation(status="found", region=_region(token))


def locate_class_comment(stream: TokenStream, anchor: int, sink: ReportSink) -> CommentLocation:
    """Find the doc comment in front of a class, interface or trait keyword.

    Walks backwards over whitespace and class modifiers.

    Args:
        stream: Token stream of the file.
        anchor: Index of the class/interface/trait keyword.
        sink: Where the missing/wrong-style error and the metric go.

    Returns:
        The lookup outcome.
    """
    keyword = stream[anchor].content.lower()
    end = stream.find_previous(("whitespace", *CLASS_MODIFIERS), anchor - 1, exclude=True)
    token = stream.get(end)

    if token is None or token.kind not in ("doc_comment_close_tag", "comment"):
        sink.add_error("Missing %s doc comment", anchor, "Missing", (keyword,))
        sink.record_metric(anchor, "Class has doc comment", "no")
        return CommentLocation(status="missing", error_position=anchor)

    sink.record_metric(anchor, "Class has doc comment", "yes")
    if token.kind == "comment":
        sink.add_error(
            'You must use "/**" style comments for a %s comment',
            anchor,
            "WrongStyle",
            (keyword,),
        )
        return CommentLocation(status="wrong_style", error_position=anchor)

    return CommentLocation(status="found", region=_region(token))
