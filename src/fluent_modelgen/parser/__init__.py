# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexer and parser for Java declaration sources."""

from fluent_modelgen.parser.lexer import LexerError, Token, TokenType, tokenize
from fluent_modelgen.parser.parser import ParseError, parse

__all__ = [
    "tokenize",
    "Token",
    "TokenType",
    "LexerError",
    "parse",
    "ParseError",
]
