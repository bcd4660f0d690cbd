"""Base sniff classes and reporting models for doc comment checks.

Provides the reporting sink the sniffs write diagnostics to and the abstract
sniff every check implements.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal

from docsniff.tokens import TokenStream

Severity = Literal["error", "warning"]

DiagnosticKind = Literal[
    "missing_comment",
    "wrong_comment_style",
    "duplicate_tag",
    "missing_required_tag",
    "tag_out_of_order",
    "empty_tag_content",
    "invalid_tag_content",
    "missing_php_version",
    "invalid_input",
    "other",
]

_KIND_PATTERNS: list[tuple[re.Pattern[str], DiagnosticKind]] = [
    (re.compile(r"^Missing$"), "missing_comment"),
    (re.compile(r"^WrongStyle$"), "wrong_comment_style"),
    (re.compile(r"^DuplicateTag$"), "duplicate_tag"),
    (re.compile(r"^MissingVersion$"), "missing_php_version"),
    (re.compile(r"^Missing\w+Tag$"), "missing_required_tag"),
    (re.compile(r"^\w+TagOrder$"), "tag_out_of_order"),
    (re.compile(r"^Empty\w+Tag$"), "empty_tag_content"),
    (re.compile(r"^InvalidTokenDump$"), "invalid_input"),
    (re.compile(r"^Invalid\w+$"), "invalid_tag_content"),
]


def classify_code(code: str) -> DiagnosticKind:
    """Map a diagnostic code onto its error-taxonomy kind.

    Args:
        code: Machine-readable code such as "MissingPackageTag".

    Returns:
        The taxonomy kind, or "other" for unknown codes.
    """
    for pattern, kind in _KIND_PATTERNS:
        if pattern.match(code):
            return kind
    return "other"


@dataclass
class Diagnostic:
    """A single violation reported by a sniff.

    Attributes:
        severity: "error" or "warning".
        code: Stable machine-readable code (e.g., "DuplicateTag").
        message: printf-style message template.
        data: Values substituted into the message template.
        position: Index of the token the diagnostic is anchored to.
        line: Source line of that token, when known.
        source: Name of the checked file or stream.
    """

    severity: Severity
    code: str
    message: str
    data: tuple[str, ...] = ()
    position: int = 0
    line: int | None = None
    source: str = ""

    @property
    def text(self) -> str:
        """Message with its data substituted."""
        if not self.data:
            return self.message
        return self.message % self.data

    @property
    def kind(self) -> DiagnosticKind:
        """Taxonomy kind derived from the code."""
        return classify_code(self.code)


@dataclass(frozen=True)
class Metric:
    """A metric recorded against a token (e.g., "File has doc comment")."""

    position: int
    name: str
    value: str


class ReportSink(ABC):
    """Destination for diagnostics and metrics produced by sniffs."""

    @abstractmethod
    def add_error(
        self, message: str, position: int, code: str, data: Sequence[str] = ()
    ) -> None:
        """Report an error anchored at a token position."""

    @abstractmethod
    def add_warning(
        self, message: str, position: int, code: str, data: Sequence[str] = ()
    ) -> None:
        """Report a warning anchored at a token position."""

    @abstractmethod
    def record_metric(self, position: int, name: str, value: str) -> None:
        """Record an informational metric for a token position."""


@dataclass
class DiagnosticCollector(ReportSink):
    """In-memory sink keeping diagnostics and metrics in emission order.

    Attributes:
        stream: Token stream the diagnostics refer to, used to resolve lines.
        source: Name of the checked file or stream.
        diagnostics: Everything reported so far.
        metrics: Every metric recorded so far.
    """

    stream: TokenStream | None = None
    source: str = ""
    diagnostics: list[Diagnostic] = field(default_factory=list)
    metrics: list[Metric] = field(default_factory=list)

    def add_error(
        self, message: str, position: int, code: str, data: Sequence[str] = ()
    ) -> None:
        self._add("error", message, position, code, data)

    def add_warning(
        self, message: str, position: int, code: str, data: Sequence[str] = ()
    ) -> None:
        self._add("warning", message, position, code, data)

    def record_metric(self, position: int, name: str, value: str) -> None:
        self.metrics.append(Metric(position=position, name=name, value=value))

    def _add(
        self,
        severity: Severity,
        message: str,
        position: int,
        code: str,
        data: Sequence[str],
    ) -> None:
        token = self.stream.get(position) if self.stream is not None else None
        self.diagnostics.append(
            Diagnostic(
                severity=severity,
                code=code,
                message=message,
                data=tuple(data),
                position=position,
                line=token.line if token is not None else None,
                source=self.source,
            )
        )

    @property
    def errors(self) -> list[Diagnostic]:
        """Error-severity diagnostics."""
        return [d for d in self.diagnostics if d.severity == "error"]

    @property
    def warnings(self) -> list[Diagnostic]:
        """Warning-severity diagnostics."""
        return [d for d in self.diagnostics if d.severity == "warning"]


class BaseSniff(ABC):
    """Abstract base class for all sniffs.

    A sniff registers the token kinds it wants to be called for. The runner
    calls process() for every matching token and honours the returned resume
    position.
    """

    #: Short name used in logs and results.
    name: str = "sniff"

    @abstractmethod
    def register(self) -> tuple[str, ...]:
        """Return the token kinds this sniff is anchored to."""

    @abstractmethod
    def process(self, stream: TokenStream, position: int, sink: ReportSink) -> int | None:
        """Check the anchor token at position.

        Args:
            stream: The token stream being checked.
            position: Index of the anchor token.
            sink: Where diagnostics and metrics are reported.

        Returns:
            Index the runner should resume dispatching this sniff from, or
            None to continue with the next token.
        """
