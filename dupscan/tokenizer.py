"""
DupScan: token fingerprint code clone detector
for multi-language source trees.

Copyright (c) 2026 Den Rozhnovskiy
Licensed under the MIT License.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Final


class TokenType(str, Enum):
    IDENTIFIER = "identifier"
    KEYWORD = "keyword"
    LITERAL = "literal"
    OPERATOR = "operator"
    PUNCTUATION = "punctuation"
    COMMENT = "comment"
    WHITESPACE = "whitespace"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class Token:
    text: str
    line: int
    column: int
    token_type: TokenType

    def normalized_text(self) -> str:
        """
        Placeholder form used for renamed-clone comparison: identifiers and
        literals collapse to a single symbol, everything else keeps its text.
        """
        if self.token_type is TokenType.IDENTIFIER:
            return "$ID"
        if self.token_type is TokenType.LITERAL:
            return "$LIT"
        return self.text


# One merged set for Rust, Python and JavaScript/TypeScript. The language
# hint passed to the tokenizer does not select a subset.
KEYWORDS: Final = frozenset(
    {
        # Rust
        "fn", "let", "mut", "const", "static", "struct", "enum", "impl",
        "trait", "pub", "mod", "use", "crate", "self", "super", "where",
        "async", "await", "move", "ref", "match", "if", "else", "loop",
        "while", "for", "in", "break", "continue", "return", "type", "as",
        "dyn", "unsafe", "extern",
        # Python
        "def", "class", "import", "from", "with", "try", "except", "finally",
        "raise", "pass", "yield", "lambda", "global", "nonlocal", "assert",
        "del", "True", "False", "None", "and", "or", "not", "is",
        # JavaScript / TypeScript
        "function", "var", "extends", "implements", "interface", "namespace",
        "module", "export", "default", "new", "delete", "typeof",
        "instanceof", "this", "null", "undefined", "true", "false", "void",
        "throw", "catch", "debugger", "switch", "case",
    }
)  # fmt: skip

OPERATOR_CHARS: Final = frozenset("+-*%=<>!&|^~")
PUNCTUATION_CHARS: Final = frozenset("(){}[];:,.?")
QUOTE_CHARS: Final = frozenset("\"'")


def is_keyword(word: str) -> bool:
    return word in KEYWORDS


def _is_ascii_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def iter_tokens(source: str, language: str = "unknown") -> Iterator[Token]:
    """
    Lex ``source`` into a flat token stream.

    One approximate grammar serves every language; ``language`` is accepted
    for callers that know it but does not change the output. Comments and
    whitespace never produce tokens. Unterminated strings and block comments
    run to the end of input. Characters outside the known classes are
    skipped.
    """
    n = len(source)
    i = 0
    line = 1
    column = 1

    while i < n:
        ch = source[i]

        if ch == "\n":
            line += 1
            column = 1
            i += 1
            continue

        if ch.isspace():
            column += 1
            i += 1
            continue

        if ch.isalpha() or ch == "_":
            start = i
            i += 1
            while i < n and (source[i].isalnum() or source[i] == "_"):
                i += 1
            word = source[start:i]
            token_type = TokenType.KEYWORD if is_keyword(word) else TokenType.IDENTIFIER
            yield Token(word, line, column, token_type)
            column += len(word)
            continue

        if _is_ascii_digit(ch):
            start = i
            i += 1
            while i < n and (_is_ascii_digit(source[i]) or source[i] in "._"):
                i += 1
            number = source[start:i]
            yield Token(number, line, column, TokenType.LITERAL)
            column += len(number)
            continue

        if ch in QUOTE_CHARS:
            start = i
            start_line = line
            start_column = column
            i += 1
            while i < n:
                nxt = source[i]
                escaped = source[i - 1] == "\\" and i - 1 > start
                i += 1
                if nxt == ch and not escaped:
                    break
                if nxt == "\n":
                    line += 1
            literal = source[start:i]
            yield Token(literal, start_line, start_column, TokenType.LITERAL)
            last_newline = literal.rfind("\n")
            if last_newline == -1:
                column += len(literal)
            else:
                column = len(literal) - last_newline
            continue

        if ch == "/":
            nxt = source[i + 1] if i + 1 < n else ""
            if nxt == "/":
                end = source.find("\n", i)
                if end == -1:
                    end = n
                column += end - i
                i = end
            elif nxt == "*":
                i += 2
                column += 2
                while i < n:
                    if source[i] == "\n":
                        line += 1
                        column = 1
                        i += 1
                    elif source.startswith("*/", i):
                        column += 2
                        i += 2
                        break
                    else:
                        column += 1
                        i += 1
            else:
                yield Token(ch, line, column, TokenType.OPERATOR)
                column += 1
                i += 1
            continue

        if ch in OPERATOR_CHARS:
            yield Token(ch, line, column, TokenType.OPERATOR)
        elif ch in PUNCTUATION_CHARS:
            yield Token(ch, line, column, TokenType.PUNCTUATION)
        column += 1
        i += 1


def tokenize_source(source: str, language: str = "unknown") -> list[Token]:
    return list(iter_tokens(source, language))
