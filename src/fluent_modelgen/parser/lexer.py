# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexical scanner for Java declaration sources.

Only the shape of declarations matters to the generator, so every operator
that is not structurally significant is folded into a single OPERATOR kind.
"""

import enum
from dataclasses import dataclass

# ###############
# Public Interface
# ###############


class TokenType(enum.Enum):
    """All token types produced by the Java declaration lexer."""

    # Keywords
    PACKAGE = "package"
    IMPORT = "import"
    CLASS = "class"
    INTERFACE = "interface"
    ENUM = "enum"
    EXTENDS = "extends"
    IMPLEMENTS = "implements"
    SUPER = "super"
    VOID = "void"
    DEFAULT = "default"
    TRUE = "true"
    FALSE = "false"
    NULL = "null"

    # Modifiers
    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"
    ABSTRACT = "abstract"
    STATIC = "static"
    FINAL = "final"
    TRANSIENT = "transient"
    VOLATILE = "volatile"
    SYNCHRONIZED = "synchronized"
    NATIVE = "native"
    STRICTFP = "strictfp"

    # Symbols
    LBRACE = "{"
    RBRACE = "}"
    LPAREN = "("
    RPAREN = ")"
    LANGLE = "<"
    RANGLE = ">"
    LBRACKET = "["
    RBRACKET = "]"
    COMMA = ","
    DOT = "."
    SEMICOLON = ";"
    EQUALS = "="
    AT = "@"
    QUESTION = "?"
    AMPERSAND = "&"
    STAR = "*"
    ELLIPSIS = "..."

    # Any other operator (arithmetic, logical, lambda arrow, ...)
    OPERATOR = "OPERATOR"

    # Literals
    STRING = "STRING"
    CHAR = "CHAR"
    NUMBER = "NUMBER"

    # Identifiers
    IDENTIFIER = "IDENTIFIER"

    # End of file
    EOF = "EOF"


MODIFIER_TYPES: frozenset[TokenType] = frozenset(
    {
        TokenType.PUBLIC,
        TokenType.PROTECTED,
        TokenType.PRIVATE,
        TokenType.ABSTRACT,
        TokenType.STATIC,
        TokenType.FINAL,
        TokenType.TRANSIENT,
        TokenType.VOLATILE,
        TokenType.SYNCHRONIZED,
        TokenType.NATIVE,
        TokenType.STRICTFP,
        TokenType.DEFAULT,
    }
)


@dataclass(frozen=True)
class Token:
    """One token of a .java file.

    ``value`` is the source text, except for STRING and CHAR tokens where it
    holds the decoded content. ``line`` and ``column`` are 1-based and point
    at the first character.
    """

    type: TokenType
    value: str
    line: int
    column: int


class LexerError(Exception):
    """A .java file cannot be split into tokens; ``line`` and ``column`` locate the problem."""

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"Line {line}, column {column}: {message}")
        self.line = line
        self.column = column


def tokenize(source: str) -> list[Token]:
    """Split the text of a .java file into tokens.

    Comments and whitespace are dropped. The last token is EOF.

    Raises:
        LexerError: On a character Java does not allow outside literals, an
            unterminated literal or comment, or a malformed escape.
    """
    return _Lexer(source).tokenize()


# ################
# Implementation
# ################

_KEYWORDS: dict[str, TokenType] = {
    "package": TokenType.PACKAGE,
    "import": TokenType.IMPORT,
    "class": TokenType.CLASS,
    "interface": TokenType.INTERFACE,
    "enum": TokenType.ENUM,
    "extends": TokenType.EXTENDS,
    "implements": TokenType.IMPLEMENTS,
    "super": TokenType.SUPER,
    "void": TokenType.VOID,
    "default": TokenType.DEFAULT,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "null": TokenType.NULL,
    "public": TokenType.PUBLIC,
    "protected": TokenType.PROTECTED,
    "private": TokenType.PRIVATE,
    "abstract": TokenType.ABSTRACT,
    "static": TokenType.STATIC,
    "final": TokenType.FINAL,
    "transient": TokenType.TRANSIENT,
    "volatile": TokenType.VOLATILE,
    "synchronized": TokenType.SYNCHRONIZED,
    "native": TokenType.NATIVE,
    "strictfp": TokenType.STRICTFP,
}

_SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "<": TokenType.LANGLE,
    ">": TokenType.RANGLE,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
    "@": TokenType.AT,
    "?": TokenType.QUESTION,
    "&": TokenType.AMPERSAND,
    "*": TokenType.STAR,
}

# Characters that only ever start an operator we do not need to distinguish.
_OPERATOR_CHARS = "+-/%!~|^:="

_ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "s": " ",
    "0": "\0",
    "\\": "\\",
    '"': '"',
    "'": "'",
}


class _Lexer:
    """Single-pass scanner over one source string."""

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0
        self._line = 1
        self._column = 1
        self._tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        self._skip_whitespace_and_comments()
        while self._pos < len(self._source):
            self._scan_token()
            self._skip_whitespace_and_comments()
        self._tokens.append(Token(TokenType.EOF, "", self._line, self._column))
        return self._tokens

    # ------------------------------------------------------------------
    # Cursor
    # ------------------------------------------------------------------

    def _current(self) -> str:
        return self._peek(0)

    def _peek(self, offset: int = 1) -> str:
        """Return the character *offset* positions ahead; empty past the end."""
        index = self._pos + offset
        return self._source[index] if index < len(self._source) else ""

    def _advance(self) -> str:
        ch = self._source[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._column = 1
        else:
            self._column += 1
        return ch

    # ------------------------------------------------------------------
    # Trivia
    # ------------------------------------------------------------------

    def _skip_whitespace_and_comments(self) -> None:
        while True:
            ch = self._current()
            if ch and ch in " \t\r\n\f":
                self._advance()
            elif ch == "/" and self._peek() == "/":
                self._skip_line_comment()
            elif ch == "/" and self._peek() == "*":
                self._skip_block_comment()
            else:
                return

    def _skip_line_comment(self) -> None:
        while self._current() not in ("", "\n"):
            self._advance()

    def _skip_block_comment(self) -> None:
        line, col = self._line, self._column
        end = self._source.find("*/", self._pos + 2)
        if end < 0:
            raise LexerError("Unterminated block comment", line, col)
        while self._pos < end + 2:
            self._advance()

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    def _scan_token(self) -> None:
        ch = self._current()
        line = self._line
        col = self._column

        if ch == "." and self._peek() == "." and self._peek(2) == ".":
            for _ in range(3):
                self._advance()
            self._tokens.append(Token(TokenType.ELLIPSIS, "...", line, col))
        elif ch == "." and self._peek().isdigit():
            self._scan_number(line, col)
        elif ch == ".":
            self._advance()
            self._tokens.append(Token(TokenType.DOT, ".", line, col))
        elif ch == "=" and self._peek() != "=":
            self._advance()
            self._tokens.append(Token(TokenType.EQUALS, "=", line, col))
        elif ch == "&" and self._peek() in "&=":
            self._scan_operator(line, col)
        elif ch in _SINGLE_CHAR_TOKENS:
            self._advance()
            self._tokens.append(Token(_SINGLE_CHAR_TOKENS[ch], ch, line, col))
        elif ch in _OPERATOR_CHARS:
            self._scan_operator(line, col)
        elif ch == '"':
            if self._peek() == '"' and self._peek(2) == '"':
                self._scan_text_block(line, col)
            else:
                self._scan_string(line, col)
        elif ch == "'":
            self._scan_char(line, col)
        elif ch.isdigit():
            self._scan_number(line, col)
        elif ch.isalpha() or ch in "_$":
            self._scan_identifier_or_keyword(line, col)
        else:
            raise LexerError(f"Unexpected character: {ch!r}", line, col)

    def _scan_operator(self, line: int, col: int) -> None:
        """Scan a run of operator characters as one OPERATOR token.

        '<' and '>' are never folded in: they delimit type arguments.
        """
        start = self._pos
        self._advance()
        while self._pos < len(self._source) and self._current() in _OPERATOR_CHARS + "&*":
            self._advance()
        self._tokens.append(Token(TokenType.OPERATOR, self._source[start : self._pos], line, col))

    # ------------------------------------------------------------------
    # Literals
    # ------------------------------------------------------------------

    def _scan_escape(self, chars: list[str], line: int, col: int) -> None:
        """Decode one backslash escape sequence into *chars*."""
        self._advance()  # backslash
        if self._pos >= len(self._source):
            raise LexerError("Unterminated string literal", line, col)
        esc = self._current()
        if esc in _ESCAPES:
            chars.append(_ESCAPES[esc])
            self._advance()
        elif esc == "u":
            while self._current() == "u":
                self._advance()
            digits = self._source[self._pos : self._pos + 4]
            try:
                chars.append(chr(int(digits, 16)))
            except ValueError:
                raise LexerError(f"Invalid unicode escape: '\\u{digits}'", self._line, self._column) from None
            for _ in range(4):
                self._advance()
        elif esc == "\n":
            self._advance()
        else:
            raise LexerError(f"Invalid escape sequence: '\\{esc}'", self._line, self._column)

    def _scan_string(self, line: int, col: int) -> None:
        self._advance()
        chars: list[str] = []
        while self._pos < len(self._source):
            ch = self._current()
            if ch == '"':
                self._advance()
                self._tokens.append(Token(TokenType.STRING, "".join(chars), line, col))
                return
            if ch == "\n":
                raise LexerError("Unterminated string literal", line, col)
            if ch == "\\":
                self._scan_escape(chars, line, col)
            else:
                chars.append(ch)
                self._advance()
        raise LexerError("Unterminated string literal", line, col)

    def _scan_text_block(self, line: int, col: int) -> None:
        """Scan a triple-quoted text block; content is kept undecoded apart from escapes."""
        for _ in range(3):
            self._advance()
        chars: list[str] = []
        while self._pos < len(self._source):
            if self._current() == '"' and self._peek() == '"' and self._peek(2) == '"':
                for _ in range(3):
                    self._advance()
                self._tokens.append(Token(TokenType.STRING, "".join(chars), line, col))
                return
            if self._current() == "\\":
                self._scan_escape(chars, line, col)
            else:
                chars.append(self._advance())
        raise LexerError("Unterminated text block", line, col)

    def _scan_char(self, line: int, col: int) -> None:
        """Scan a single-quoted character literal."""
        self._advance()  # opening '
        chars: list[str] = []
        while self._pos < len(self._source):
            ch = self._current()
            if ch == "'":
                self._advance()
                self._tokens.append(Token(TokenType.CHAR, "".join(chars), line, col))
                return
            if ch == "\n":
                break
            if ch == "\\":
                self._scan_escape(chars, line, col)
            else:
                chars.append(ch)
                self._advance()
        raise LexerError("Unterminated character literal", line, col)

    def _scan_number(self, line: int, col: int) -> None:
        """Scan a numeric literal of any radix, suffix or exponent as one NUMBER token."""
        start = self._pos
        while self._pos < len(self._source):
            ch = self._current()
            if ch.isalnum() or ch == "_":
                self._advance()
            elif ch == "." and self._peek() != ".":
                self._advance()
            elif ch in "+-" and self._source[self._pos - 1] in "eEpP" and not self._source[start:].startswith(
                ("0x", "0X")
            ):
                self._advance()
            else:
                break
        self._tokens.append(Token(TokenType.NUMBER, self._source[start : self._pos], line, col))

    def _scan_identifier_or_keyword(self, line: int, col: int) -> None:
        start = self._pos
        while self._current() and (self._current().isalnum() or self._current() in "_$"):
            self._advance()
        word = self._source[start : self._pos]
        self._tokens.append(Token(_KEYWORDS.get(word, TokenType.IDENTIFIER), word, line, col))
