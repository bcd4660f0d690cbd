"""Tag rule tables for file and class doc comments.

Both tables list the same tags in the same order; they differ in which tags
are required and which may repeat. Declaration order is the expected tag
order inside a comment.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Literal

CommentScope = Literal["file", "class"]


@dataclass(frozen=True)
class TagRule:
    """Rule for one doc comment tag.

    Attributes:
        name: Tag name including the "@" (e.g., "@package").
        required: Whether the tag must be present.
        allow_multiple: Whether the tag may occur more than once.
        order_text: Human-readable ordering rule used in messages.
    """

    name: str
    required: bool
    allow_multiple: bool
    order_text: str

    @property
    def code_name(self) -> str:
        """Tag name as used inside diagnostic codes ("@package" -> "Package")."""
        bare = self.name[1:]
        return bare[:1].upper() + bare[1:]


class TagTable:
    """Ordered collection of tag rules for one comment scope."""

    def __init__(self, scope: CommentScope, rules: list[TagRule]) -> None:
        self.scope = scope
        self._rules = {rule.name: rule for rule in rules}
        self._ranks = {rule.name: rank for rank, rule in enumerate(rules)}

    def __iter__(self) -> Iterator[TagRule]:
        return iter(self._rules.values())

    def __contains__(self, name: object) -> bool:
        return name in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def get(self, name: str) -> TagRule | None:
        """Return the rule for a tag, or None for tags outside the table."""
        return self._rules.get(name)

    def rank(self, name: str) -> int | None:
        """Return the ordinal position of a tag, or None if unknown."""
        return self._ranks.get(name)


# (name, order_text) pairs in the expected order
_ORDER: list[tuple[str, str]] = [
    ("@category", "precedes @package"),
    ("@package", "follows @category"),
    ("@subpackage", "follows @package"),
    ("@author", "follows @subpackage (if used) or @package"),
    ("@copyright", "follows @author"),
    ("@license", "follows @copyright (if used) or @author"),
    ("@version", "follows @license"),
    ("@link", "follows @version"),
    ("@see", "follows @link"),
    ("@since", "follows @see (if used) or @link"),
    ("@deprecated", "follows @since (if used) or @see (if used) or @link"),
]

# name -> (required, allow_multiple)
_FILE_FLAGS: dict[str, tuple[bool, bool]] = {
    "@category": (False, False),
    "@package": (True, False),
    "@subpackage": (False, False),
    "@author": (True, True),
    "@copyright": (True, True),
    "@license": (True, False),
    "@version": (False, False),
    "@link": (True, True),
    "@see": (False, True),
    "@since": (False, False),
    "@deprecated": (False, False),
}

_CLASS_FLAGS: dict[str, tuple[bool, bool]] = {
    "@category": (False, False),
    "@package": (True, False),
    "@subpackage": (True, False),
    "@author": (True, True),
    "@copyright": (False, True),
    "@license": (False, False),
    "@version": (False, False),
    "@link": (False, True),
    "@see": (False, True),
    "@since": (False, False),
    "@deprecated": (False, False),
}


def _build_table(scope: CommentScope, flags: dict[str, tuple[bool, bool]]) -> TagTable:
    rules = [
        TagRule(
            name=name,
            required=flags[name][0],
            allow_multiple=flags[name][1],
            order_text=order_text,
        )
        for name, order_text in _ORDER
    ]
    return TagTable(scope, rules)


FILE_TAGS = _build_table("file", _FILE_FLAGS)
CLASS_TAGS = _build_table("class", _CLASS_FLAGS)

_TABLES: dict[CommentScope, TagTable] = {"file": FILE_TAGS, "class": CLASS_TAGS}


def tag_table(scope: CommentScope) -> TagTable:
    """Select the rule table for a comment scope.

    Args:
        scope: "file" or "class".

    Returns:
        The read-only TagTable for that scope.

    Raises:
        KeyError: If scope is not a known comment scope.
    """
    return _TABLES[scope]
