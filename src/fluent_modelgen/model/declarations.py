# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Source-level declarations read from Java compilation units.

These models are what the source reader hands to the generator: type
declarations with their annotations, type parameters, supertypes and fields.
Type names are qualified by name resolution after parsing; until then they
hold the text as written.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############


class TypeRef(BaseModel):
    """A reference to a (possibly generic or array) type.

    Wildcards are represented with ``name == "?"`` and an optional bound.
    """

    name: str
    arguments: list[TypeRef] = _Field(default_factory=list)
    dimensions: int = 0
    bound: TypeRef | None = None
    bound_kind: Literal["extends", "super"] | None = None

    @property
    def simple_name(self) -> str:
        return self.name.rsplit(".", 1)[-1]

    @property
    def package_name(self) -> str:
        return self.name.rsplit(".", 1)[0] if "." in self.name else ""

    @property
    def is_wildcard(self) -> bool:
        return self.name == "?"

    def render(self) -> str:
        """Render the reference as Java source text."""
        if self.is_wildcard:
            if self.bound is None:
                return "?"
            return f"? {self.bound_kind} {self.bound.render()}"
        text = self.name
        if self.arguments:
            text += "<" + ", ".join(arg.render() for arg in self.arguments) + ">"
        return text + "[]" * self.dimensions


class ClassValue(BaseModel):
    """A class literal element value, e.g. ``Customer.class``."""

    kind: Literal["class"] = "class"
    type: TypeRef


class LiteralValue(BaseModel):
    """A literal element value (string, number, boolean, char or any other expression text)."""

    kind: Literal["literal"] = "literal"
    value: str | bool | None = None
    text: str = ""


class NameValue(BaseModel):
    """A (possibly qualified) name used as an element value, e.g. an enum constant."""

    kind: Literal["name"] = "name"
    name: str


class ArrayValue(BaseModel):
    """An array initializer element value, e.g. ``{A.class, B.class}``."""

    kind: Literal["array"] = "array"
    values: list[AnnotationValue] = _Field(default_factory=list)


class Annotation(BaseModel):
    """An annotation use with its element values.

    A single unnamed element value is stored under the key ``"value"``.
    Annotations may appear nested as element values.
    """

    kind: Literal["annotation"] = "annotation"
    name: str
    values: dict[str, AnnotationValue] = _Field(default_factory=dict)

    @property
    def simple_name(self) -> str:
        return self.name.rsplit(".", 1)[-1]

    def matches(self, qualified_names: Iterable[str]) -> bool:
        """Return True if this annotation is one of *qualified_names*.

        An annotation whose name could not be resolved keeps its bare simple
        name; it matches by simple name.
        """
        for qualified in qualified_names:
            if self.name == qualified:
                return True
            if "." not in self.name and qualified.rsplit(".", 1)[-1] == self.name:
                return True
        return False

    def class_names(self, element: str = "value") -> list[str]:
        """Return the type names of the class literals held by *element*."""
        value = self.values.get(element)
        if value is None:
            return []
        return [v.type.name for v in _flatten(value) if isinstance(v, ClassValue)]


# An annotation element value. The `kind` discriminator keeps deserialization unambiguous.
AnnotationValue = Annotated[
    ClassValue | LiteralValue | NameValue | ArrayValue | Annotation,
    _Field(discriminator="kind"),
]


class DeclarationKind(Enum):
    """The kind of a type declaration."""

    CLASS = "class"
    INTERFACE = "interface"
    ENUM = "enum"
    RECORD = "record"
    ANNOTATION = "@interface"


class FieldDecl(BaseModel):
    """A field (or record component) of a type declaration."""

    name: str
    type: TypeRef
    modifiers: list[str] = _Field(default_factory=list)
    annotations: list[Annotation] = _Field(default_factory=list)

    @property
    def is_static(self) -> bool:
        return "static" in self.modifiers

    @property
    def is_transient(self) -> bool:
        return "transient" in self.modifiers

    def find_annotation(self, qualified_names: Iterable[str]) -> Annotation | None:
        return _find_annotation(self.annotations, qualified_names)


class TypeDecl(BaseModel):
    """A class, interface, enum, record or annotation type declaration."""

    name: str
    qualified_name: str = ""
    package_name: str = ""
    kind: DeclarationKind = DeclarationKind.CLASS
    modifiers: list[str] = _Field(default_factory=list)
    annotations: list[Annotation] = _Field(default_factory=list)
    type_parameters: list[str] = _Field(default_factory=list)
    superclass: TypeRef | None = None
    interfaces: list[TypeRef] = _Field(default_factory=list)
    fields: list[FieldDecl] = _Field(default_factory=list)
    record_components: list[FieldDecl] = _Field(default_factory=list)
    nested: list[TypeDecl] = _Field(default_factory=list)
    source_path: str | None = None
    synthetic: bool = False

    @property
    def is_interface(self) -> bool:
        return self.kind in (DeclarationKind.INTERFACE, DeclarationKind.ANNOTATION)

    def find_annotation(self, qualified_names: Iterable[str]) -> Annotation | None:
        return _find_annotation(self.annotations, qualified_names)

    def walk(self) -> Iterator[TypeDecl]:
        """Yield this declaration followed by all nested declarations, depth first."""
        yield self
        for inner in self.nested:
            yield from inner.walk()


class ImportDecl(BaseModel):
    """An import declaration."""

    name: str
    is_static: bool = False
    on_demand: bool = False


class CompilationUnit(BaseModel):
    """Top-level model representing the parsed contents of a single .java file."""

    package_name: str = ""
    imports: list[ImportDecl] = _Field(default_factory=list)
    types: list[TypeDecl] = _Field(default_factory=list)
    source_path: str | None = None

    def declarations(self) -> Iterator[TypeDecl]:
        """Yield every declaration in the unit, nested ones included."""
        for decl in self.types:
            yield from decl.walk()


# ################
# Implementation
# ################


def _flatten(value: AnnotationValue) -> Iterator[AnnotationValue]:
    if isinstance(value, ArrayValue):
        for inner in value.values:
            yield from _flatten(inner)
    else:
        yield value


def _find_annotation(annotations: list[Annotation], qualified_names: Iterable[str]) -> Annotation | None:
    names = tuple(qualified_names)
    for annotation in annotations:
        if annotation.matches(names):
            return annotation
    return None


# Resolve forward references in self-referential models.
TypeRef.model_rebuild()
ArrayValue.model_rebuild()
Annotation.model_rebuild()
FieldDecl.model_rebuild()
TypeDecl.model_rebuild()
