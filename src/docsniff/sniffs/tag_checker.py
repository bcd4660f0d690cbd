"""Presence, cardinality, content and order checks for doc comment tags.

Checks walk the rule table in declaration order and, per tag, the
occurrences in document order, so a given comment always produces the same
diagnostic sequence.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence

from docsniff.sniffs.base import ReportSink
from docsniff.sniffs.tag_extractor import CommentTags, TagOccurrence
from docsniff.sniffs.tag_rules import TagRule, TagTable

ContentCheck = Callable[[Sequence[TagOccurrence], ReportSink], object]


def find_order_violation(
    rule: TagRule, tags: CommentTags, table: TagTable
) -> TagOccurrence | None:
    """Find the first occurrence of a tag that comes after a later-ranked tag.

    Only the tag that appears too late is reported; the later-ranked tag that
    appears too early is not reported again, since every misordered pair is
    caught from its earlier-ranked side.

    Args:
        rule: Rule of the tag being checked.
        tags: Tags of the comment.
        table: Table giving the expected order.

    Returns:
        The offending occurrence, or None if the tag is in order.
    """
    rank = table.rank(rule.name)
    if rank is None:
        return None

    later: list[int] = []
    for occurrence in tags.occurrences:
        other = table.rank(occurrence.name)
        if other is not None and other > rank:
            later.append(occurrence.position)
    if not later:
        return None

    first_later = min(later)
    for occurrence in tags.occurrences:
        if occurrence.name == rule.name and occurrence.position > first_later:
            return occurrence
    return None


def check_tags(
    tags: CommentTags,
    table: TagTable,
    sink: ReportSink,
    *,
    content_checks: Mapping[str, ContentCheck] | None = None,
    require_content: bool = True,
) -> None:
    """Run every tag check for one doc comment.

    Args:
        tags: Tags extracted from the comment.
        table: Rules for the comment's scope.
        sink: Where diagnostics are reported.
        content_checks: Per-tag content validators, keyed by tag name.
        require_content: Report tags that have no content on their line.
    """
    content_checks = content_checks or {}
    groups = tags.by_name()
    docblock = table.scope

    for rule in table:
        occurrences = groups.get(rule.name, [])
        if not occurrences:
            if rule.required:
                sink.add_error(
                    "Missing %s tag in %s comment",
                    tags.region.closer,
                    f"Missing{rule.code_name}Tag",
                    (rule.name, docblock),
                )
            continue

        if not rule.allow_multiple:
            for extra in occurrences[1:]:
                sink.add_error(
                    "Only one %s tag is allowed in a %s comment",
                    extra.position,
                    "DuplicateTag",
                    (rule.name, docblock),
                )

        if require_content:
            for occurrence in occurrences:
                if occurrence.content is None:
                    sink.add_error(
                        "Content missing for %s tag in %s comment",
                        occurrence.position,
                        f"Empty{rule.code_name}Tag",
                        (rule.name, docblock),
                    )

        misplaced = find_order_violation(rule, tags, table)
        if misplaced is not None:
            sink.add_error(
                "The %s tag is in the wrong position; the tag %s",
                misplaced.position,
                f"{rule.code_name}TagOrder",
                (rule.name, rule.order_text),
            )

        check = content_checks.get(rule.name)
        if check is not None:
            check(occurrences, sink)
