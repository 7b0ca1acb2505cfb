# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Recursive-descent parser for Java declaration sources.

Converts a token stream produced by the lexer into a CompilationUnit. Only
declarations are modelled; method bodies, initializers and constructors are
skipped by bracket balancing.
"""

from fluent_modelgen.model.declarations import (
    Annotation,
    AnnotationValue,
    ArrayValue,
    ClassValue,
    CompilationUnit,
    DeclarationKind,
    FieldDecl,
    ImportDecl,
    LiteralValue,
    NameValue,
    TypeDecl,
    TypeRef,
)
from fluent_modelgen.parser.lexer import MODIFIER_TYPES, Token, TokenType, tokenize

# ###############
# Public Interface
# ###############


class ParseError(Exception):
    """The token stream does not form a compilation unit this reader understands."""

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"Line {line}, column {column}: {message}")
        self.line = line
        self.column = column


def parse(source: str, source_path: str | None = None) -> CompilationUnit:
    """Parse Java source text into a CompilationUnit of declarations.

    Names are kept as written; see :mod:`fluent_modelgen.compiler.resolution`
    for qualification.

    Args:
        source: The full text of a .java file.
        source_path: Optional path recorded on the unit and its declarations.

    Returns:
        A CompilationUnit instance.

    Raises:
        LexerError: When the text cannot be tokenized.
        ParseError: When the tokens do not form a declaration.
    """
    return _Parser(tokenize(source), source_path).parse()


# ################
# Implementation
# ################

_OPENERS: dict[TokenType, TokenType] = {
    TokenType.LBRACE: TokenType.RBRACE,
    TokenType.LPAREN: TokenType.RPAREN,
    TokenType.LBRACKET: TokenType.RBRACKET,
}

_CLOSERS: frozenset[TokenType] = frozenset(_OPENERS.values())


class _Parser:
    """Recursive-descent parser for Java token streams."""

    def __init__(self, tokens: list[Token], source_path: str | None) -> None:
        self._tokens = tokens
        self._pos = 0
        self._source_path = source_path
        self._package = ""

    def parse(self) -> CompilationUnit:
        """Parse the full token stream and return a CompilationUnit."""
        unit = CompilationUnit(source_path=self._source_path)
        if self._check_word("module") or self._check_word("open"):
            # module-info.java declares no types.
            return unit
        annotations = self._parse_annotations()
        if self._check(TokenType.PACKAGE):
            self._advance()
            unit.package_name = self._parse_qualified_name()
            self._expect(TokenType.SEMICOLON)
            annotations = []
        self._package = unit.package_name
        while self._check(TokenType.IMPORT, TokenType.SEMICOLON):
            if self._check(TokenType.SEMICOLON):
                self._advance()
                continue
            unit.imports.append(self._parse_import())
        while not self._at_end():
            if self._check(TokenType.SEMICOLON):
                self._advance()
                continue
            unit.types.append(self._parse_type_declaration(outer=None, leading=annotations))
            annotations = []
        return unit

    # ------------------------------------------------------------------
    # Token cursor
    # ------------------------------------------------------------------

    def _current(self) -> Token:
        return self._tokens[self._pos]

    def _peek_type(self, offset: int = 0) -> TokenType:
        """Return the token type *offset* tokens ahead of the current one."""
        index = min(self._pos + offset, len(self._tokens) - 1)
        return self._tokens[index].type

    def _peek_value(self, offset: int = 0) -> str:
        index = min(self._pos + offset, len(self._tokens) - 1)
        return self._tokens[index].value

    def _at_end(self) -> bool:
        return self._check(TokenType.EOF)

    def _advance(self) -> Token:
        """Return the current token and move past it; EOF is never passed."""
        token = self._current()
        self._pos = min(self._pos + 1, len(self._tokens) - 1)
        return token

    def _expect(self, *types: TokenType) -> Token:
        """Advance over a token of one of *types*, or raise ParseError."""
        if not self._check(*types):
            wanted = " or ".join(repr(kind.value) for kind in types)
            found = self._current().value or self._peek_type().value
            raise self._error(f"Expected {wanted}, got {found!r}")
        return self._advance()

    def _check(self, *types: TokenType) -> bool:
        return self._peek_type() in types

    def _check_word(self, word: str, offset: int = 0) -> bool:
        """Return True if the token at *offset* is the contextual keyword *word*."""
        return self._peek_type(offset) == TokenType.IDENTIFIER and self._peek_value(offset) == word

    def _error(self, message: str) -> ParseError:
        tok = self._current()
        return ParseError(message, tok.line, tok.column)

    def _skip_balanced(self) -> None:
        """Skip a bracketed group starting at the current opener, nested groups included."""
        opener = self._expect(*_OPENERS)
        stack = [_OPENERS[opener.type]]
        while stack:
            tok = self._current()
            if tok.type == TokenType.EOF:
                raise ParseError(f"Unbalanced {opener.value!r}", opener.line, opener.column)
            if tok.type in _OPENERS:
                stack.append(_OPENERS[tok.type])
            elif tok.type in _CLOSERS:
                if tok.type != stack[-1]:
                    raise ParseError(f"Unexpected {tok.value!r}", tok.line, tok.column)
                stack.pop()
            self._advance()

    def _skip_expression(self, *terminators: TokenType) -> list[Token]:
        """Consume tokens up to (not including) a terminator at bracket depth zero.

        Angle brackets are tracked so that generic arguments such as
        ``new HashMap<K, V>()`` do not end the expression at their comma.
        """
        consumed: list[Token] = []
        angle = 0
        while True:
            tok = self._current()
            if tok.type == TokenType.EOF:
                raise self._error("Unexpected end of input in expression")
            if tok.type in terminators and (angle == 0 or tok.type == TokenType.SEMICOLON):
                return consumed
            if tok.type in _OPENERS:
                start = self._pos
                self._skip_balanced()
                consumed.extend(self._tokens[start : self._pos])
                continue
            if tok.type in _CLOSERS:
                raise self._error(f"Unexpected {tok.value!r} in expression")
            if tok.type == TokenType.LANGLE:
                angle += 1
            elif tok.type == TokenType.RANGLE and angle > 0:
                angle -= 1
            consumed.append(self._advance())

    # ------------------------------------------------------------------
    # Names and imports
    # ------------------------------------------------------------------

    def _parse_qualified_name(self) -> str:
        """Parse: identifier (. identifier)*"""
        parts = [self._expect(TokenType.IDENTIFIER).value]
        while self._check(TokenType.DOT) and self._peek_type(1) == TokenType.IDENTIFIER:
            self._advance()  # consume .
            parts.append(self._advance().value)
        return ".".join(parts)

    def _parse_import(self) -> ImportDecl:
        """Parse: import [static] <name> [.*] ;"""
        self._expect(TokenType.IMPORT)
        is_static = False
        if self._check(TokenType.STATIC):
            self._advance()
            is_static = True
        name = self._parse_qualified_name()
        on_demand = False
        if self._check(TokenType.DOT):
            self._advance()
            self._expect(TokenType.STAR)
            on_demand = True
        self._expect(TokenType.SEMICOLON)
        return ImportDecl(name=name, is_static=is_static, on_demand=on_demand)

    # ------------------------------------------------------------------
    # Modifiers and annotations
    # ------------------------------------------------------------------

    def _parse_annotations(self) -> list[Annotation]:
        """Parse a run of annotation uses (stops before '@interface')."""
        annotations: list[Annotation] = []
        while self._check(TokenType.AT) and self._peek_type(1) != TokenType.INTERFACE:
            annotations.append(self._parse_annotation())
        return annotations

    def _parse_modifiers(self) -> tuple[list[str], list[Annotation]]:
        """Parse interleaved modifiers and annotations."""
        modifiers: list[str] = []
        annotations: list[Annotation] = []
        while True:
            if self._check(*MODIFIER_TYPES):
                modifiers.append(self._advance().value)
            elif self._check(TokenType.AT) and self._peek_type(1) != TokenType.INTERFACE:
                annotations.append(self._parse_annotation())
            elif self._check_word("sealed"):
                modifiers.append(self._advance().value)
            elif self._check_word("non") and self._peek_value(1) == "-" and self._check_word("sealed", 2):
                for _ in range(3):
                    self._advance()
                modifiers.append("non-sealed")
            else:
                return modifiers, annotations

    def _parse_annotation(self) -> Annotation:
        """Parse: @ <name> [ ( [element-value | name = element-value, ...] ) ]"""
        self._expect(TokenType.AT)
        annotation = Annotation(name=self._parse_qualified_name())
        if not self._check(TokenType.LPAREN):
            return annotation
        self._advance()  # consume (
        if self._check(TokenType.RPAREN):
            self._advance()
            return annotation
        if self._check(TokenType.IDENTIFIER) and self._peek_type(1) == TokenType.EQUALS:
            while True:
                key = self._expect(TokenType.IDENTIFIER).value
                self._expect(TokenType.EQUALS)
                annotation.values[key] = self._parse_element_value()
                if not self._check(TokenType.COMMA):
                    break
                self._advance()
        else:
            annotation.values["value"] = self._parse_element_value()
        self._expect(TokenType.RPAREN)
        return annotation

    def _parse_element_value(self) -> AnnotationValue:
        """Parse an annotation element value: nested annotation, array, or expression."""
        if self._check(TokenType.AT):
            return self._parse_annotation()
        if self._check(TokenType.LBRACE):
            self._advance()
            array = ArrayValue()
            while not self._check(TokenType.RBRACE):
                array.values.append(self._parse_element_value())
                if not self._check(TokenType.COMMA):
                    break
                self._advance()
            self._expect(TokenType.RBRACE)
            return array
        tokens = self._skip_expression(TokenType.COMMA, TokenType.RPAREN, TokenType.RBRACE)
        if not tokens:
            raise self._error("Expected annotation element value")
        return _interpret_expression(tokens)

    # ------------------------------------------------------------------
    # Types
    # ------------------------------------------------------------------

    def _parse_type(self) -> TypeRef:
        """Parse a type: primitive or class type with type arguments, then array dimensions."""
        self._parse_annotations()
        parts = [self._expect(TokenType.IDENTIFIER).value]
        arguments: list[TypeRef] = []
        if self._check(TokenType.LANGLE):
            arguments = self._parse_type_arguments()
        while self._check(TokenType.DOT) and self._peek_type(1) in (TokenType.IDENTIFIER, TokenType.AT):
            self._advance()  # consume .
            self._parse_annotations()
            parts.append(self._expect(TokenType.IDENTIFIER).value)
            if self._check(TokenType.LANGLE):
                # Arguments of an outer type are dropped; the innermost ones are kept.
                arguments = self._parse_type_arguments()
        ref = TypeRef(name=".".join(parts), arguments=arguments)
        ref.dimensions = self._parse_dimensions()
        return ref

    def _parse_dimensions(self) -> int:
        dims = 0
        while True:
            self._parse_annotations()
            if not (self._check(TokenType.LBRACKET) and self._peek_type(1) == TokenType.RBRACKET):
                return dims
            self._advance()
            self._advance()
            dims += 1

    def _parse_type_arguments(self) -> list[TypeRef]:
        """Parse: < [type-argument (, type-argument)*] >"""
        self._expect(TokenType.LANGLE)
        arguments: list[TypeRef] = []
        while not self._check(TokenType.RANGLE):
            arguments.append(self._parse_type_argument())
            if not self._check(TokenType.COMMA):
                break
            self._advance()
        self._expect(TokenType.RANGLE)
        return arguments

    def _parse_type_argument(self) -> TypeRef:
        self._parse_annotations()
        if not self._check(TokenType.QUESTION):
            return self._parse_type()
        self._advance()
        if self._check(TokenType.EXTENDS):
            self._advance()
            return TypeRef(name="?", bound=self._parse_type(), bound_kind="extends")
        if self._check(TokenType.SUPER):
            self._advance()
            return TypeRef(name="?", bound=self._parse_type(), bound_kind="super")
        return TypeRef(name="?")

    def _parse_type_parameters(self) -> list[str]:
        """Parse: < name [extends bound (& bound)*] (, ...)* >, returning the names."""
        self._expect(TokenType.LANGLE)
        names: list[str] = []
        while True:
            self._parse_annotations()
            names.append(self._expect(TokenType.IDENTIFIER).value)
            if self._check(TokenType.EXTENDS):
                self._advance()
                self._parse_type()
                while self._check(TokenType.AMPERSAND):
                    self._advance()
                    self._parse_type()
            if not self._check(TokenType.COMMA):
                break
            self._advance()
        self._expect(TokenType.RANGLE)
        return names

    def _parse_type_list(self) -> list[TypeRef]:
        types = [self._parse_type()]
        while self._check(TokenType.COMMA):
            self._advance()
            types.append(self._parse_type())
        return types

    # ------------------------------------------------------------------
    # Type declarations
    # ------------------------------------------------------------------

    def _parse_type_declaration(self, outer: TypeDecl | None, leading: list[Annotation]) -> TypeDecl:
        """Parse a class, interface, enum, record or annotation type declaration."""
        modifiers, annotations = self._parse_modifiers()
        return self._parse_type_declaration_after_modifiers(outer, modifiers, leading + annotations)

    def _parse_type_declaration_after_modifiers(
        self,
        outer: TypeDecl | None,
        modifiers: list[str],
        annotations: list[Annotation],
    ) -> TypeDecl:
        tok = self._current()
        if tok.type == TokenType.CLASS:
            kind = DeclarationKind.CLASS
        elif tok.type == TokenType.INTERFACE:
            kind = DeclarationKind.INTERFACE
        elif tok.type == TokenType.ENUM:
            kind = DeclarationKind.ENUM
        elif tok.type == TokenType.AT and self._peek_type(1) == TokenType.INTERFACE:
            self._advance()  # @
            kind = DeclarationKind.ANNOTATION
        elif self._check_word("record") and self._peek_type(1) == TokenType.IDENTIFIER:
            kind = DeclarationKind.RECORD
        else:
            raise ParseError(f"Expected type declaration, got {tok.value!r}", tok.line, tok.column)
        self._advance()  # consume the declaration keyword

        name = self._expect(TokenType.IDENTIFIER).value
        if outer is None:
            qualified = f"{self._package}.{name}" if self._package else name
        else:
            qualified = f"{outer.qualified_name}.{name}"
        decl = TypeDecl(
            name=name,
            qualified_name=qualified,
            package_name=self._package,
            kind=kind,
            modifiers=modifiers,
            annotations=annotations,
            source_path=self._source_path,
        )
        if self._check(TokenType.LANGLE):
            decl.type_parameters = self._parse_type_parameters()
        if kind == DeclarationKind.RECORD:
            decl.record_components = self._parse_record_header()
        self._parse_supertypes(decl)
        if kind == DeclarationKind.ENUM:
            self._parse_enum_body(decl)
        else:
            self._parse_class_body(decl)
        return decl

    def _parse_supertypes(self, decl: TypeDecl) -> None:
        """Parse extends / implements / permits clauses."""
        while True:
            if self._check(TokenType.EXTENDS):
                self._advance()
                if decl.kind == DeclarationKind.INTERFACE:
                    decl.interfaces.extend(self._parse_type_list())
                else:
                    decl.superclass = self._parse_type()
            elif self._check(TokenType.IMPLEMENTS):
                self._advance()
                decl.interfaces.extend(self._parse_type_list())
            elif self._check_word("permits"):
                self._advance()
                self._parse_type_list()
            else:
                return

    def _parse_record_header(self) -> list[FieldDecl]:
        """Parse: ( [component (, component)*] )"""
        self._expect(TokenType.LPAREN)
        components: list[FieldDecl] = []
        while not self._check(TokenType.RPAREN):
            modifiers, annotations = self._parse_modifiers()
            field_type = self._parse_type()
            if self._check(TokenType.ELLIPSIS):
                self._advance()
                field_type.dimensions += 1
            name = self._expect(TokenType.IDENTIFIER).value
            components.append(FieldDecl(name=name, type=field_type, modifiers=modifiers, annotations=annotations))
            if not self._check(TokenType.COMMA):
                break
            self._advance()
        self._expect(TokenType.RPAREN)
        return components

    def _parse_enum_body(self, decl: TypeDecl) -> None:
        """Parse: { constant [(args)] [{body}] (, ...)* [;] members* }"""
        self._expect(TokenType.LBRACE)
        while not self._check(TokenType.SEMICOLON, TokenType.RBRACE):
            self._parse_annotations()
            self._expect(TokenType.IDENTIFIER)
            if self._check(TokenType.LPAREN):
                self._skip_balanced()
            if self._check(TokenType.LBRACE):
                self._skip_balanced()
            if not self._check(TokenType.COMMA):
                break
            self._advance()
        if self._check(TokenType.SEMICOLON):
            self._advance()
        self._parse_members(decl)
        self._expect(TokenType.RBRACE)

    def _parse_class_body(self, decl: TypeDecl) -> None:
        """Parse: { member* }"""
        self._expect(TokenType.LBRACE)
        self._parse_members(decl)
        self._expect(TokenType.RBRACE)

    def _parse_members(self, decl: TypeDecl) -> None:
        while not self._check(TokenType.RBRACE, TokenType.EOF):
            self._parse_member(decl)

    def _parse_member(self, decl: TypeDecl) -> None:
        """Parse one class body member, recording fields and nested types."""
        if self._check(TokenType.SEMICOLON):
            self._advance()
            return
        if self._check(TokenType.LBRACE):
            self._skip_balanced()  # instance initializer
            return
        modifiers, annotations = self._parse_modifiers()
        if self._check(TokenType.LBRACE):
            self._skip_balanced()  # static initializer
            return
        if (
            self._check(TokenType.CLASS, TokenType.INTERFACE, TokenType.ENUM)
            or (self._check(TokenType.AT) and self._peek_type(1) == TokenType.INTERFACE)
            or (self._check_word("record") and self._peek_type(1) == TokenType.IDENTIFIER)
        ):
            decl.nested.append(self._parse_type_declaration_after_modifiers(decl, modifiers, annotations))
            return
        if self._check(TokenType.LANGLE):
            self._parse_type_parameters()  # generic method or constructor
        if self._check(TokenType.IDENTIFIER) and self._peek_type(1) == TokenType.LPAREN:
            self._advance()  # constructor name
            self._skip_method_rest()
            return
        if self._check(TokenType.VOID):
            self._advance()
            self._expect(TokenType.IDENTIFIER)
            self._skip_method_rest()
            return
        if self._check(TokenType.IDENTIFIER) and self._peek_type(1) == TokenType.LBRACE and (
            decl.kind == DeclarationKind.RECORD
        ):
            self._advance()  # compact canonical constructor
            self._skip_balanced()
            return
        member_type = self._parse_type()
        name = self._expect(TokenType.IDENTIFIER).value
        if self._check(TokenType.LPAREN):
            self._skip_method_rest()
            return
        self._parse_field_declarators(decl, member_type, name, modifiers, annotations)

    def _skip_method_rest(self) -> None:
        """Skip a method's parameter list, throws clause, default value and body."""
        self._skip_balanced()  # parameters
        self._parse_dimensions()
        if self._check_word("throws"):
            self._advance()
            self._parse_type_list()
        if self._check(TokenType.DEFAULT):
            self._advance()
            if self._check(TokenType.LBRACE, TokenType.AT):
                self._parse_element_value()
            else:
                self._skip_expression(TokenType.SEMICOLON)
        if self._check(TokenType.LBRACE):
            self._skip_balanced()
        else:
            self._expect(TokenType.SEMICOLON)

    def _parse_field_declarators(
        self,
        decl: TypeDecl,
        member_type: TypeRef,
        first_name: str,
        modifiers: list[str],
        annotations: list[Annotation],
    ) -> None:
        """Parse: name [dims] [= init] (, name [dims] [= init])* ;"""
        name = first_name
        while True:
            field_type = member_type.model_copy(deep=True)
            field_type.dimensions += self._parse_dimensions()
            if self._check(TokenType.EQUALS):
                self._advance()
                self._skip_expression(TokenType.COMMA, TokenType.SEMICOLON)
            decl.fields.append(
                FieldDecl(name=name, type=field_type, modifiers=list(modifiers), annotations=list(annotations))
            )
            if not self._check(TokenType.COMMA):
                break
            self._advance()
            name = self._expect(TokenType.IDENTIFIER).value
        self._expect(TokenType.SEMICOLON)


def _interpret_expression(tokens: list[Token]) -> AnnotationValue:
    """Turn the tokens of an element value expression into a typed value."""
    text = " ".join(tok.value for tok in tokens)
    if len(tokens) == 1:
        tok = tokens[0]
        if tok.type in (TokenType.STRING, TokenType.CHAR):
            return LiteralValue(value=tok.value, text=tok.value)
        if tok.type in (TokenType.TRUE, TokenType.FALSE):
            return LiteralValue(value=tok.type == TokenType.TRUE, text=tok.value)
        if tok.type == TokenType.NUMBER:
            return LiteralValue(value=tok.value, text=tok.value)
        if tok.type == TokenType.NULL:
            return LiteralValue(value=None, text=tok.value)
        if tok.type == TokenType.IDENTIFIER:
            return NameValue(name=tok.value)
    class_literal = _class_literal(tokens)
    if class_literal is not None:
        return ClassValue(type=class_literal)
    if _is_qualified_name(tokens):
        return NameValue(name="".join(tok.value for tok in tokens))
    if all(tok.type == TokenType.STRING or tok.value == "+" for tok in tokens):
        joined = "".join(tok.value for tok in tokens if tok.type == TokenType.STRING)
        return LiteralValue(value=joined, text=text)
    return LiteralValue(value=text, text=text)


def _class_literal(tokens: list[Token]) -> TypeRef | None:
    """Recognize ``Name(.Name)* ([])* . class``."""
    if len(tokens) < 3 or tokens[-1].type != TokenType.CLASS or tokens[-2].type != TokenType.DOT:
        return None
    body = tokens[:-2]
    dims = 0
    while len(body) >= 2 and body[-1].type == TokenType.RBRACKET and body[-2].type == TokenType.LBRACKET:
        body = body[:-2]
        dims += 1
    if not _is_qualified_name(body):
        return None
    return TypeRef(name="".join(tok.value for tok in body), dimensions=dims)


def _is_qualified_name(tokens: list[Token]) -> bool:
    if not tokens or len(tokens) % 2 == 0:
        return False
    for index, tok in enumerate(tokens):
        expected = TokenType.IDENTIFIER if index % 2 == 0 else TokenType.DOT
        if tok.type != expected:
            return False
    return True
