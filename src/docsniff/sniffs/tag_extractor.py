"""Extract tags and their content from a located doc comment."""

from __future__ import annotations

from dataclasses import dataclass

from docsniff.sniffs.locator import CommentRegion
from docsniff.tokens import TokenStream


@dataclass(frozen=True)
class TagOccurrence:
    """One "@tag" line inside a doc comment.

    Attributes:
        name: Tag name including the "@".
        position: Index of the tag token.
        content_position: Index of the string token on the same line, if any.
        content: Text of that string token, if any.
    """

    name: str
    position: int
    content_position: int | None = None
    content: str | None = None


@dataclass
class CommentTags:
    """All tags of one doc comment, in document order.

    Attributes:
        region: The comment the tags were read from.
        occurrences: Every tag occurrence in document order.
        php_version_mentioned: Whether a line before the first tag mentions
            "PHP version".
    """

    region: CommentRegion
    occurrences: list[TagOccurrence]
    php_version_mentioned: bool = False

    def by_name(self) -> dict[str, list[TagOccurrence]]:
        """Group occurrences by tag name, keeping document order."""
        groups: dict[str, list[TagOccurrence]] = {}
        for occurrence in self.occurrences:
            groups.setdefault(occurrence.name, []).append(occurrence)
        return groups

    def positions(self, name: str) -> list[int]:
        """Token positions of every occurrence of a tag."""
        return [o.position for o in self.occurrences if o.name == name]


def find_tag_content(stream: TokenStream, tag: int, closer: int) -> int | None:
    """Find the string token that follows a tag on the same line.

    Args:
        stream: Token stream of the file.
        tag: Index of the tag token.
        closer: Index of the comment closer.

    Returns:
        Index of the content token, or None if the tag has no content.
    """
    for index in range(tag + 1, closer):
        token = stream[index]
        if token.kind == "doc_comment_string":
            return index
        if token.kind in ("whitespace", "doc_comment_whitespace") and "\n" not in token.content:
            continue
        return None
    return None


def extract_tags(stream: TokenStream, region: CommentRegion) -> CommentTags:
    """Collect the tags of a doc comment.

    Args:
        stream: Token stream of the file.
        region: The comment to read.

    Returns:
        CommentTags for the comment.
    """
    occurrences: list[TagOccurrence] = []
    php_version_mentioned = False

    for index in range(region.opener + 1, region.closer):
        token = stream[index]
        if token.kind == "doc_comment_tag":
            content_position = find_tag_content(stream, index, region.closer)
            occurrences.append(
                TagOccurrence(
                    name=token.content,
                    position=index,
                    content_position=content_position,
                    content=(
                        stream[content_position].content if content_position is not None else None
                    ),
                )
            )
        elif (
            not occurrences
            and token.kind == "doc_comment_string"
            and "php version" in token.content.lower()
        ):
            php_version_mentioned = True

    return CommentTags(
        region=region,
        occurrences=occurrences,
        php_version_mentioned=php_version_mentioned,
    )
