"""locsync – Constant Block Parser.

Reads the generated string tables embedded in source files::

    /**
     * Auth errors messages (i18n keys)
     */
    export const AUTH_ERRORS = {
      invalidEmail: 'errors.invalid-email',
      // shown after three failed attempts
      tooManyAttempts:
        'errors.too-many-attempts', // two-line shape
    } as const;

A block body is tokenized and parsed into ``ConstantEntry`` records. Comments
travel with the entry they precede (or trail), and entries whose value is not
a plain string literal are kept verbatim so a rewrite never drops them.

Grammar (inside the braces)::

    body    := (comment | NEWLINE | entry)*
    entry   := (key ':' value | '...' value) ','? comment?
    key     := IDENT | STRING
    value   := expression up to the next top-level ',' or the closing brace
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterator

from locsync.core.errors import BlockNotFoundError, ParseError

_HEADER_RE = re.compile(r"export\s+const\s+([A-Z][A-Z0-9_]*)\s*=\s*\{")
_AS_CONST_RE = re.compile(r"\s*as\s+const\s*;")
_IDENT_RE = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")
_NUMBER_RE = re.compile(r"[0-9][0-9A-Za-z_.]*")

_OPENERS = "{[("
_CLOSERS = "}])"
# Binary, ternary and member operators that carry an expression onto the next line.
_OPERATORS = frozenset("+-*/%?:|&=<>!.^~")
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "0": "\0"}


# ──────────────────────────────────────────
# Tokens
# ──────────────────────────────────────────

@dataclass(frozen=True)
class Token:
    kind: str  # ident | string | number | comment | newline | spread | punct
    text: str
    start: int
    end: int


def tokenize(text: str, pos: int = 0) -> Iterator[Token]:
    """Yield tokens from ``text`` starting at ``pos``. Whitespace is dropped."""
    length = len(text)
    while pos < length:
        ch = text[pos]

        if ch == "\n":
            yield Token("newline", ch, pos, pos + 1)
            pos += 1
        elif ch in " \t\r\f\v":
            pos += 1
        elif text.startswith("//", pos):
            end = text.find("\n", pos)
            end = length if end == -1 else end
            yield Token("comment", text[pos:end].rstrip(), pos, end)
            pos = end
        elif text.startswith("/*", pos):
            end = text.find("*/", pos + 2)
            if end == -1:
                raise ParseError(f"Unterminated block comment at offset {pos}")
            yield Token("comment", text[pos:end + 2], pos, end + 2)
            pos = end + 2
        elif ch in "'\"`":
            end = _string_end(text, pos)
            yield Token("string", text[pos:end], pos, end)
            pos = end
        elif text.startswith("...", pos):
            yield Token("spread", "...", pos, pos + 3)
            pos += 3
        else:
            match = _IDENT_RE.match(text, pos) or _NUMBER_RE.match(text, pos)
            if match is None:
                yield Token("punct", ch, pos, pos + 1)
                pos += 1
                continue
            kind = "number" if ch.isdigit() else "ident"
            yield Token(kind, match.group(), pos, match.end())
            pos = match.end()


def _string_end(text: str, start: int) -> int:
    quote = text[start]
    pos = start + 1
    while pos < len(text):
        ch = text[pos]
        if ch == "\\":
            pos += 2
            continue
        if ch == quote:
            return pos + 1
        if ch == "\n" and quote != "`":
            break
        pos += 1
    raise ParseError(f"Unterminated string literal at offset {start}")


def decode_string(literal: str) -> str | None:
    """Decode a quoted literal; None for template literals with substitutions."""
    quote, inner = literal[0], literal[1:-1]
    if quote == "`" and "${" in inner:
        return None

    out: list[str] = []
    i = 0
    while i < len(inner):
        ch = inner[i]
        if ch == "\\" and i + 1 < len(inner):
            nxt = inner[i + 1]
            out.append(_ESCAPES.get(nxt, nxt))
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def quote_string(value: str) -> str:
    """Single-quoted literal for ``value`` (inverse of ``decode_string``)."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'").replace("\n", "\\n")
    return f"'{escaped}'"


# ──────────────────────────────────────────
# Structures
# ──────────────────────────────────────────

@dataclass
class ConstantEntry:
    """One property of a constant block."""
    key: str | None  # None for spreads
    raw_key: str
    raw_value: str
    value: str | None = None  # decoded when the value is a plain string literal
    leading_comments: list[str] = field(default_factory=list)
    trailing_comment: str | None = None

    @classmethod
    def string(cls, key: str, value: str) -> "ConstantEntry":
        return cls(key=key, raw_key=key, raw_value=quote_string(value), value=value)

    @property
    def is_string(self) -> bool:
        return self.value is not None

    def with_value(self, value: str) -> "ConstantEntry":
        return ConstantEntry(
            key=self.key,
            raw_key=self.raw_key,
            raw_value=quote_string(value),
            value=value,
            leading_comments=list(self.leading_comments),
            trailing_comment=self.trailing_comment,
        )


@dataclass
class ConstantBlock:
    """A located ``export const NAME = { ... } as const;`` block."""
    name: str
    entries: list[ConstantEntry]
    start: int  # offset of 'export'
    end: int  # offset just past ';'
    dangling_comments: list[str] = field(default_factory=list)

    def get(self, key: str) -> ConstantEntry | None:
        for entry in self.entries:
            if entry.key == key:
                return entry
        return None

    def values(self) -> list[str]:
        return [e.value for e in self.entries if e.value is not None]


# ──────────────────────────────────────────
# Parsing
# ──────────────────────────────────────────

def _read_body(content: str, open_index: int) -> tuple[list[Token], int]:
    """Tokens between ``{`` at ``open_index`` and its matching ``}``."""
    depth = 0
    tokens: list[Token] = []
    for token in tokenize(content, open_index + 1):
        if token.kind == "punct" and token.text in _OPENERS:
            depth += 1
        elif token.kind == "punct" and token.text in _CLOSERS:
            if depth == 0:
                if token.text != "}":
                    raise ParseError(f"Unbalanced '{token.text}' at offset {token.start}")
                return tokens, token.start
            depth -= 1
        tokens.append(token)
    raise ParseError(f"Unterminated object literal at offset {open_index}")


def parse_entries(content: str, tokens: list[Token]) -> tuple[list[ConstantEntry], list[str]]:
    """Parse body tokens into entries plus comments left after the last entry."""
    entries: list[ConstantEntry] = []
    pending: list[str] = []
    i = 0
    n = len(tokens)

    def skip_blank(j: int) -> int:
        while j < n and tokens[j].kind == "newline":
            j += 1
        return j

    while i < n:
        token = tokens[i]
        if token.kind == "newline":
            i += 1
            continue
        if token.kind == "comment":
            pending.append(token.text)
            i += 1
            continue

        if token.kind == "spread":
            key, raw_key = None, ""
            value_start = i
        elif token.kind in ("ident", "string", "number"):
            key = decode_string(token.text) if token.kind == "string" else token.text
            raw_key = token.text
            i = skip_blank(i + 1)
            if i >= n or tokens[i].text != ":":
                raise ParseError(
                    f"Expected ':' after property '{raw_key}' at offset {token.start}"
                )
            value_start = skip_blank(i + 1)
        else:
            raise ParseError(f"Unexpected '{token.text}' at offset {token.start}")

        value_end = _read_value(tokens, value_start)
        if value_end <= value_start:
            raise ParseError(f"Missing value for property '{raw_key}' at offset {token.start}")

        value_tokens = tokens[value_start:value_end]
        raw_value = content[value_tokens[0].start:value_tokens[-1].end]
        value = None
        if key is not None and len(value_tokens) == 1 and value_tokens[0].kind == "string":
            value = decode_string(value_tokens[0].text)

        # Same-line tail: optional comma and comments, up to the newline.
        trailing: str | None = None
        i = value_end
        while i < n and (tokens[i].kind == "comment" or tokens[i].text == ","):
            if tokens[i].kind == "comment":
                trailing = tokens[i].text if trailing is None else f"{trailing} {tokens[i].text}"
            i += 1

        entries.append(
            ConstantEntry(
                key=key,
                raw_key=raw_key,
                raw_value=raw_value,
                value=value,
                leading_comments=pending,
                trailing_comment=trailing,
            )
        )
        pending = []

    return entries, pending


def _read_value(tokens: list[Token], start: int) -> int:
    """Index just past the value's last token.

    At the top level a value ends at a comma, a comment or a line break;
    inside brackets all three belong to the value. A line break (and any
    comment before it) is crossed when the expression continues, i.e. the
    line ends in an operator or the next line starts with one.
    """
    depth = 0
    i = start
    end = start
    while i < len(tokens):
        token = tokens[i]
        if depth == 0:
            if token.kind == "punct" and token.text == ",":
                break
            if token.kind in ("newline", "comment"):
                if not _continues(tokens, i, tokens[end - 1] if end > start else None):
                    break
                i += 1
                continue
        if token.kind == "punct":
            if token.text in _OPENERS:
                depth += 1
            elif token.text in _CLOSERS:
                depth -= 1
        i += 1
        end = i
    return end


def _is_operator(token: Token) -> bool:
    return token.kind == "punct" and token.text in _OPERATORS


def _continues(tokens: list[Token], i: int, last: Token | None) -> bool:
    if last is not None and _is_operator(last):
        return True
    while i < len(tokens) and tokens[i].kind in ("newline", "comment"):
        i += 1
    return i < len(tokens) and _is_operator(tokens[i])


def _parse_at(content: str, match: re.Match) -> ConstantBlock | None:
    tokens, close_index = _read_body(content, match.end() - 1)
    tail = _AS_CONST_RE.match(content, close_index + 1)
    if tail is None:
        return None
    entries, dangling = parse_entries(content, tokens)
    return ConstantBlock(
        name=match.group(1),
        entries=entries,
        start=match.start(),
        end=tail.end(),
        dangling_comments=dangling,
    )


def iter_blocks(content: str) -> Iterator[ConstantBlock]:
    """Yield every ``as const`` block in file order."""
    pos = 0
    while True:
        match = _HEADER_RE.search(content, pos)
        if match is None:
            return
        block = _parse_at(content, match)
        if block is None:
            pos = match.end()
            continue
        yield block
        pos = block.end


def find_block(content: str, name: str) -> ConstantBlock | None:
    """Locate a block by constant name; None when absent."""
    for match in _HEADER_RE.finditer(content):
        if match.group(1) != name:
            continue
        block = _parse_at(content, match)
        if block is None:
            raise ParseError(f"Constant {name} is not terminated by 'as const;'")
        return block
    return None


def require_block(content: str, name: str, file_path: str) -> ConstantBlock:
    block = find_block(content, name)
    if block is None:
        raise BlockNotFoundError(name, file_path)
    return block
