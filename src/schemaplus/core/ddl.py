"""Tokenizer for the DDL statements SQLite stores in its catalog.

This is not a SQL parser. It splits a creation statement into
tokens so that the extractors can pattern-match on keywords and identifiers
without tripping over quoting. Supported grammar subset:

- whitespace and comments (`-- ...` to end of line, `/* ... */`) are skipped
- WORD:   bare identifier or keyword, `[A-Za-z_][A-Za-z0-9_$]*`
- QUOTED: quoted identifier, `"..."` (escape `""`), `` `...` `` (escape
          ``` `` ```) or `[...]` (no escape); `value` holds the bare name
- STRING: `'...'` literal (escape `''`)
- NUMBER: digits with an optional fraction
- PUNCT:  `(`, `)`, `,`, `;` and `.`
- OP:     any other single character

Every token records its source span and its parenthesis depth. Parentheses
themselves sit at the depth outside them. Unterminated quotes and comments
swallow the rest of the text; tokenizing never fails.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

_WORD_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_$]*")
_NUMBER_RE = re.compile(r"\d+(?:\.\d*)?")
_IDENTIFIER_QUOTES = {'"': '"', "`": "`", "[": "]"}
_PUNCTUATION = "(),;."


class TokenKind(str, Enum):
    """Lexical category of a DDL token."""

    WORD = "WORD"
    QUOTED = "QUOTED"
    STRING = "STRING"
    NUMBER = "NUMBER"
    PUNCT = "PUNCT"
    OP = "OP"


@dataclass(frozen=True)
class Token:
    """A token with its raw text, normalized value and source position."""

    kind: TokenKind
    text: str
    value: str
    start: int
    end: int
    depth: int

    def is_keyword(self, *words: str) -> bool:
        """Return True for a bare word equal to one of `words` (case-insensitive)."""
        if self.kind is not TokenKind.WORD:
            return False
        upper = self.text.upper()
        return any(upper == w.upper() for w in words)

    def is_punct(self, char: str) -> bool:
        """Return True if this token is the punctuation character `char`."""
        return self.kind is TokenKind.PUNCT and self.text == char

    @property
    def is_identifier(self) -> bool:
        """True for tokens that can name a schema object or column."""
        return self.kind in (TokenKind.WORD, TokenKind.QUOTED)


def _scan_quoted(sql: str, start: int, closer: str) -> int:
    """Return the end offset of the quoted run opening at `start`."""
    pos = start + 1
    while True:
        idx = sql.find(closer, pos)
        if idx == -1:
            return len(sql)
        if closer != "]" and sql.startswith(closer * 2, idx):
            pos = idx + 2
            continue
        return idx + 1


def _unquote(raw: str) -> str:
    """Strip the quotes from a quoted identifier or literal and undo escaping."""
    closer = _IDENTIFIER_QUOTES.get(raw[0], raw[0])
    if len(raw) >= 2 and raw.endswith(closer):
        body = raw[1:-1]
    else:
        body = raw[1:]
    if closer != "]":
        body = body.replace(closer * 2, closer)
    return body


def tokenize(sql: str) -> list[Token]:
    """Split a DDL statement into tokens (comments and whitespace dropped)."""
    tokens: list[Token] = []
    depth = 0
    pos = 0
    length = len(sql)

    while pos < length:
        ch = sql[pos]

        if ch.isspace():
            pos += 1
            continue

        if sql.startswith("--", pos):
            newline = sql.find("\n", pos)
            pos = length if newline == -1 else newline + 1
            continue

        if sql.startswith("/*", pos):
            close = sql.find("*/", pos + 2)
            pos = length if close == -1 else close + 2
            continue

        if ch in _IDENTIFIER_QUOTES or ch == "'":
            closer = _IDENTIFIER_QUOTES.get(ch, "'")
            end = _scan_quoted(sql, pos, closer)
            raw = sql[pos:end]
            kind = TokenKind.STRING if ch == "'" else TokenKind.QUOTED
            tokens.append(Token(kind, raw, _unquote(raw), pos, end, depth))
            pos = end
            continue

        match = _WORD_RE.match(sql, pos) or _NUMBER_RE.match(sql, pos)
        if match:
            kind = TokenKind.NUMBER if ch.isdigit() else TokenKind.WORD
            text = match.group(0)
            tokens.append(Token(kind, text, text, pos, match.end(), depth))
            pos = match.end()
            continue

        if ch == "(":
            tokens.append(Token(TokenKind.PUNCT, ch, ch, pos, pos + 1, depth))
            depth += 1
        elif ch == ")":
            depth = max(depth - 1, 0)
            tokens.append(Token(TokenKind.PUNCT, ch, ch, pos, pos + 1, depth))
        else:
            kind = TokenKind.PUNCT if ch in _PUNCTUATION else TokenKind.OP
            tokens.append(Token(kind, ch, ch, pos, pos + 1, depth))
        pos += 1

    return tokens


def matching_paren(tokens: list[Token], open_index: int) -> int | None:
    """Return the index of the `)` closing the `(` at `open_index`, or None."""
    opener = tokens[open_index]
    for idx in range(open_index + 1, len(tokens)):
        tok = tokens[idx]
        if tok.depth == opener.depth and tok.is_punct(")"):
            return idx
    return None


def split_items(
    tokens: list[Token], open_index: int, close_index: int
) -> list[list[Token]]:
    """Split the tokens between a pair of parentheses on top-level commas."""
    inner_depth = tokens[open_index].depth + 1
    items: list[list[Token]] = [[]]
    for tok in tokens[open_index + 1 : close_index]:
        if tok.depth == inner_depth and tok.is_punct(","):
            items.append([])
        else:
            items[-1].append(tok)
    return [item for item in items if item]


def quote_identifier(name: str) -> str:
    """Quote an identifier for SQLite, doubling embedded double quotes."""
    return '"' + name.replace('"', '""') + '"'
