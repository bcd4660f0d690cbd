"""Underscore-name format checks for @package and @subpackage content.

A valid name looks like "Ucfirst_Ucfirst": no spaces, starts with a capital
letter, and every underscore-separated segment starts with a capital.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from docsniff.sniffs.base import ReportSink
from docsniff.sniffs.tag_extractor import TagOccurrence

_DISALLOWED_PACKAGE_CHARS = re.compile(r"[^A-Za-z_]")


def _ucfirst(segment: str) -> str:
    return segment[:1].upper() + segment[1:]


def is_underscore_name(text: str) -> bool:
    """Check whether text already is a valid underscore-separated name.

    Args:
        text: Tag content to check.

    Returns:
        True for names like "My_Package".
    """
    if " " in text:
        return False
    if not re.match(r"[A-Z]", text):
        return False
    return all(segment[:1] == segment[:1].upper() for segment in text.split("_"))


def _join_segments(text: str) -> str:
    return "_".join(_ucfirst(segment) for segment in text.split("_") if segment)


def suggest_package_name(content: str) -> str:
    """Suggest a valid @package name for arbitrary content.

    Spaces become underscores, surrounding underscores and characters outside
    [A-Za-z_] are dropped, and every segment is capitalised.

    >>> suggest_package_name("my package")
    'My_Package'
    """
    text = content.replace(" ", "_").strip("_")
    text = _DISALLOWED_PACKAGE_CHARS.sub("", text)
    return _join_segments(text)


def suggest_subpackage_name(content: str) -> str:
    """Suggest a valid @subpackage name.

    Unlike suggest_package_name, other characters are kept as they are.
    """
    return _join_segments(content.replace(" ", "_"))


@dataclass(frozen=True)
class NameFinding:
    """An invalid name and the suggested replacement."""

    position: int
    content: str
    suggestion: str


@dataclass(frozen=True)
class NameFormatCheck:
    """Content validator for one tag.

    Findings are always computed; they are reported only when enforce is set.

    Attributes:
        label: Word used in the message ("Package", "Subpackage").
        code: Diagnostic code ("InvalidPackage").
        normalize: Function producing the suggested name.
        enforce: Whether findings are reported as warnings.
    """

    label: str
    code: str
    normalize: Callable[[str], str]
    enforce: bool = False

    def findings(self, occurrences: Sequence[TagOccurrence]) -> list[NameFinding]:
        """Compute the invalid names among the given tag occurrences."""
        found: list[NameFinding] = []
        for occurrence in occurrences:
            content = occurrence.content
            if content is None or is_underscore_name(content):
                continue
            suggestion = self.normalize(content)
            if suggestion != content:
                found.append(NameFinding(occurrence.position, content, suggestion))
        return found

    def __call__(self, occurrences: Sequence[TagOccurrence], sink: ReportSink) -> list[NameFinding]:
        found = self.findings(occurrences)
        if self.enforce:
            for finding in found:
                sink.add_warning(
                    f'{self.label} name "%s" is not valid; consider "%s" instead',
                    finding.position,
                    self.code,
                    (finding.content, finding.suggestion),
                )
        return found


def name_format_checks(enforce: bool = False) -> dict[str, NameFormatCheck]:
    """Content validators keyed by the tag they apply to."""
    return {
        "@package": NameFormatCheck("Package", "InvalidPackage", suggest_package_name, enforce),
        "@subpackage": NameFormatCheck(
            "Subpackage", "InvalidSubpackage", suggest_subpackage_name, enforce
        ),
    }
