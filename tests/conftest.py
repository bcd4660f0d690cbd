"""Pytest configuration and fixtures for docsniff tests."""

from __future__ import annotations

import os
from typing import Any

import pytest

from docsniff.tokens import TokenStream

# Set a fixed terminal width to prevent line wrapping issues in CI
# This must be set before any Rich imports
os.environ.setdefault("COLUMNS", "200")
os.environ.setdefault("LINES", "50")
# Disable Rich's terminal detection to ensure consistent output
os.environ.setdefault("TERM", "dumb")

Record = dict[str, Any]


class PhpTokens:
    """Builds token records shaped like the PHP tokenizer output."""

    CLASS_TAGS = [
        "@category PHP",
        "@package My_Package",
        "@subpackage Sub_Package",
        "@author Jane Doe <jane@example.com>",
    ]

    FILE_TAGS = [
        "@category PHP",
        "@package My_Package",
        "@author Jane Doe <jane@example.com>",
        "@copyright 2024 Example Ltd",
        "@license MIT",
        "@link https://example.com",
    ]

    @staticmethod
    def open_tag() -> list[Record]:
        return [{"type": "T_OPEN_TAG", "content": "<?php\n"}]

    @staticmethod
    def close_tag() -> list[Record]:
        return [{"type": "T_CLOSE_TAG", "content": "?>"}]

    @staticmethod
    def ws(text: str = "\n") -> list[Record]:
        return [{"type": "T_WHITESPACE", "content": text}]

    @staticmethod
    def comment(text: str = "// comment\n") -> list[Record]:
        return [{"type": "T_COMMENT", "content": text}]

    @staticmethod
    def declare() -> list[Record]:
        return [
            {"type": "T_DECLARE", "content": "declare"},
            {"type": "T_OPEN_PARENTHESIS", "content": "("},
            {"type": "T_STRING", "content": "strict_types"},
            {"type": "T_EQUAL", "content": "="},
            {"type": "T_LNUMBER", "content": "1"},
            {"type": "T_CLOSE_PARENTHESIS", "content": ")"},
            {"type": "T_SEMICOLON", "content": ";"},
            {"type": "T_WHITESPACE", "content": "\n"},
        ]

    @staticmethod
    def doc(*lines: str) -> list[Record]:
        """A "/** ... */" comment with one token group per line.

        Lines starting with "@" become a tag plus its content string.
        """
        records: list[Record] = [{"type": "T_DOC_COMMENT_OPEN_TAG", "content": "/**"}]
        for line in lines:
            records += [
                {"type": "T_DOC_COMMENT_WHITESPACE", "content": "\n"},
                {"type": "T_DOC_COMMENT_WHITESPACE", "content": " "},
                {"type": "T_DOC_COMMENT_STAR", "content": "*"},
            ]
            if not line:
                continue
            records.append({"type": "T_DOC_COMMENT_WHITESPACE", "content": " "})
            if line.startswith("@"):
                name, _, rest = line.partition(" ")
                records.append({"type": "T_DOC_COMMENT_TAG", "content": name})
                if rest.strip():
                    records += [
                        {"type": "T_DOC_COMMENT_WHITESPACE", "content": " "},
                        {"type": "T_DOC_COMMENT_STRING", "content": rest.strip()},
                    ]
            else:
                records.append({"type": "T_DOC_COMMENT_STRING", "content": line})
        records += [
            {"type": "T_DOC_COMMENT_WHITESPACE", "content": "\n"},
            {"type": "T_DOC_COMMENT_WHITESPACE", "content": " "},
            {"type": "T_DOC_COMMENT_CLOSE_TAG", "content": "*/"},
        ]
        return records

    @staticmethod
    def class_(keyword: str = "class", name: str = "Foo", modifiers: tuple[str, ...] = ()) -> list[Record]:
        records: list[Record] = []
        for modifier in modifiers:
            records += [
                {"type": f"T_{modifier.upper()}", "content": modifier},
                {"type": "T_WHITESPACE", "content": " "},
            ]
        records += [
            {"type": f"T_{keyword.upper()}", "content": keyword},
            {"type": "T_WHITESPACE", "content": " "},
            {"type": "T_STRING", "content": name},
            {"type": "T_WHITESPACE", "content": "\n"},
            {"type": "T_OPEN_CURLY_BRACKET", "content": "{"},
            {"type": "T_WHITESPACE", "content": "\n"},
            {"type": "T_CLOSE_CURLY_BRACKET", "content": "}"},
            {"type": "T_WHITESPACE", "content": "\n"},
        ]
        return records

    @staticmethod
    def records(*chunks: list[Record]) -> list[Record]:
        return [record for chunk in chunks for record in chunk]

    def stream(self, *chunks: list[Record]) -> TokenStream:
        return TokenStream.from_records(self.records(*chunks))


@pytest.fixture
def php() -> PhpTokens:
    """Token record builder."""
    return PhpTokens()
