"""Token stream model consumed by the sniffs.

Tokens are produced by an external PHP tokenizer. This module only models the
parts of a token the sniffs read (kind, content, line, doc comment pairing)
and offers the forward/backward searches the sniffs are written against.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Collection, Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, get_args, overload

logger = logging.getLogger(__name__)

TokenKind = Literal[
    "open_tag",
    "close_tag",
    "whitespace",
    "comment",
    "doc_comment_open_tag",
    "doc_comment_close_tag",
    "doc_comment_tag",
    "doc_comment_string",
    "doc_comment_whitespace",
    "doc_comment_star",
    "semicolon",
    "declare",
    "class",
    "interface",
    "trait",
    "abstract",
    "final",
    "readonly",
    "other",
]

KNOWN_KINDS: frozenset[str] = frozenset(get_args(TokenKind))


class TokenStreamError(ValueError):
    """Raised when token records cannot form a valid stream."""


@dataclass(frozen=True)
class Token:
    """A single token of the source stream.

    Attributes:
        kind: Normalized token category (e.g., "doc_comment_tag").
        content: Raw text of the token.
        line: 1-based line the token starts on.
        comment_opener: For doc comment tokens, index of the opening marker.
        comment_closer: For doc comment tokens, index of the closing marker.
    """

    kind: str
    content: str
    line: int = 1
    comment_opener: int | None = None
    comment_closer: int | None = None


def normalize_kind(raw: str) -> str:
    """Map a tokenizer type name onto the kind vocabulary.

    Accepts both PHP constant names ("T_DOC_COMMENT_TAG") and the short
    lower-case form ("doc_comment_tag"). Unknown names become "other".

    Args:
        raw: Type name as produced by the tokenizer.

    Returns:
        Normalized kind.
    """
    kind = raw.strip()
    if kind.upper().startswith("T_"):
        kind = kind[2:]
    kind = kind.lower()
    return kind if kind in KNOWN_KINDS else "other"


class TokenStream(Sequence[Token]):
    """Randomly indexable, immutable sequence of tokens."""

    def __init__(self, tokens: Iterable[Token]) -> None:
        self._tokens: tuple[Token, ...] = tuple(tokens)

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> TokenStream:
        """Build a stream from plain token records.

        Each record needs a "type" (or "kind") and a "content"; "line" is
        optional and derived from newlines in earlier content when missing.
        Doc comment openers and closers are paired here.

        Args:
            records: Token records in source order.

        Returns:
            A new TokenStream.

        Raises:
            TokenStreamError: If a record is malformed or doc comment markers
                do not pair up.
        """
        rows: list[dict[str, Any]] = []
        line = 1
        for index, record in enumerate(records):
            raw_kind = record.get("type", record.get("kind"))
            content = record.get("content")
            if not isinstance(raw_kind, str) or not isinstance(content, str):
                raise TokenStreamError(f"Token {index} needs a string type and content")
            token_line = record.get("line")
            if token_line is None:
                token_line = line
            elif not isinstance(token_line, int) or isinstance(token_line, bool):
                raise TokenStreamError(f"Token {index} has a non-integer line")
            rows.append({"kind": normalize_kind(raw_kind), "content": content, "line": token_line})
            line = token_line + content.count("\n")

        openers: list[int] = []
        for index, row in enumerate(rows):
            if row["kind"] == "doc_comment_open_tag":
                openers.append(index)
            elif row["kind"] == "doc_comment_close_tag":
                if not openers:
                    raise TokenStreamError(f"Doc comment closer at token {index} has no opener")
                opener = openers.pop()
                rows[opener]["comment_closer"] = index
                rows[index]["comment_opener"] = opener
        if openers:
            raise TokenStreamError(f"Doc comment opened at token {openers[-1]} is never closed")

        # Tokens inside a comment share the pairing of their markers
        for index, row in enumerate(rows):
            if row["kind"] == "doc_comment_open_tag":
                closer = row["comment_closer"]
                row["comment_opener"] = index
                rows[closer]["comment_closer"] = closer
                for inner in rows[index + 1 : closer]:
                    inner.setdefault("comment_opener", index)
                    inner.setdefault("comment_closer", closer)

        return cls(Token(**row) for row in rows)

    @overload
    def __getitem__(self, index: int) -> Token: ...

    @overload
    def __getitem__(self, index: slice) -> Sequence[Token]: ...

    def __getitem__(self, index: int | slice) -> Token | Sequence[Token]:
        return self._tokens[index]

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(self._tokens)

    def get(self, index: int | None) -> Token | None:
        """Return the token at index, or None outside the stream."""
        if index is None or index < 0 or index >= len(self._tokens):
            return None
        return self._tokens[index]

    def find_next(
        self,
        kinds: str | Collection[str],
        start: int,
        end: int | None = None,
        exclude: bool = False,
    ) -> int | None:
        """Find the next token of (or, with exclude, not of) the given kinds.

        Args:
            kinds: Kind or kinds to look for.
            start: First index to inspect.
            end: Index to stop before. Defaults to the end of the stream.
            exclude: Match tokens whose kind is NOT in kinds.

        Returns:
            Index of the matching token, or None.
        """
        wanted = {kinds} if isinstance(kinds, str) else set(kinds)
        stop = len(self._tokens) if end is None else min(end, len(self._tokens))
        for index in range(max(start, 0), stop):
            if (self._tokens[index].kind in wanted) != exclude:
                return index
        return None

    def find_previous(
        self,
        kinds: str | Collection[str],
        start: int,
        end: int | None = None,
        exclude: bool = False,
    ) -> int | None:
        """Search backwards from start (inclusive) down to end (exclusive).

        Args:
            kinds: Kind or kinds to look for.
            start: First index to inspect.
            end: Index to stop after. Defaults to the start of the stream.
            exclude: Match tokens whose kind is NOT in kinds.

        Returns:
            Index of the matching token, or None.
        """
        wanted = {kinds} if isinstance(kinds, str) else set(kinds)
        stop = -1 if end is None else max(end, -1)
        for index in range(min(start, len(self._tokens) - 1), stop, -1):
            if (self._tokens[index].kind in wanted) != exclude:
                return index
        return None


def load_token_dump(path: Path) -> TokenStream:
    """Load a JSON token dump written by the external tokenizer.

    The dump is either a list of token records or an object holding them
    under "tokens".

    Args:
        path: Path to the JSON file.

    Returns:
        TokenStream for the dump.

    Raises:
        TokenStreamError: If the file is not UTF-8 JSON or has the wrong shape.
        OSError: If the file cannot be read.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise TokenStreamError(f"{path}: invalid JSON ({e.msg} at line {e.lineno})") from e
    except UnicodeDecodeError as e:
        raise TokenStreamError(f"{path}: not valid UTF-8 ({e.reason} at byte {e.start})") from e

    if isinstance(data, dict):
        data = data.get("tokens")
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise TokenStreamError(f"{path}: expected a list of token records")

    stream = TokenStream.from_records(data)
    logger.debug("Loaded %d tokens from %s", len(stream), path)
    return stream
