# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Name resolution for parsed compilation units.

Rewrites the type names of a parsed unit (field types, supertypes, annotation
names and class literals) into qualified names, in place. A name is looked up
in this order:

1. type parameters in scope (kept as written),
2. member types of the enclosing declarations,
3. single-type imports,
4. declarations of the same package,
5. ``java.lang``,
6. on-demand imports, where the known declarations or the well-known library
   types can satisfy the name.

A name that cannot be resolved is qualified with the unit's own package,
unless the unit has on-demand imports: the name might come from any of them,
so it is kept as the bare simple name.
"""

from __future__ import annotations

from collections.abc import Container

from fluent_modelgen.model.declarations import (
    Annotation,
    AnnotationValue,
    ArrayValue,
    ClassValue,
    CompilationUnit,
    FieldDecl,
    TypeDecl,
    TypeRef,
)
from fluent_modelgen.model.types import JAVA_LANG_TYPES

# ###############
# Public Interface
# ###############

PRIMITIVE_TYPES: dict[str, str] = {
    "boolean": "java.lang.Boolean",
    "byte": "java.lang.Byte",
    "short": "java.lang.Short",
    "int": "java.lang.Integer",
    "long": "java.lang.Long",
    "char": "java.lang.Character",
    "float": "java.lang.Float",
    "double": "java.lang.Double",
}


def _package_types(package: str, *names: str) -> set[str]:
    return {f"{package}.{name}" for name in names}


_PERSISTENCE_NAMES = (
    "Access",
    "Basic",
    "CascadeType",
    "Column",
    "Convert",
    "DiscriminatorColumn",
    "DiscriminatorValue",
    "ElementCollection",
    "Embeddable",
    "Embedded",
    "EmbeddedId",
    "Entity",
    "EnumType",
    "Enumerated",
    "FetchType",
    "GeneratedValue",
    "GenerationType",
    "Id",
    "IdClass",
    "Inheritance",
    "InheritanceType",
    "JoinColumn",
    "JoinTable",
    "Lob",
    "ManyToMany",
    "ManyToOne",
    "MapKey",
    "MappedSuperclass",
    "OneToMany",
    "OneToOne",
    "OrderBy",
    "Table",
    "Temporal",
    "Transient",
    "Version",
)

_METAMODEL_NAMES = (
    "CollectionAttribute",
    "EmbeddableType",
    "EntityType",
    "ListAttribute",
    "MapAttribute",
    "MappedSuperclassType",
    "SetAttribute",
    "SingularAttribute",
    "StaticMetamodel",
)

# Library types an on-demand import can bring into scope.
WELL_KNOWN_TYPES: frozenset[str] = frozenset(
    _package_types("jakarta.persistence", *_PERSISTENCE_NAMES)
    | _package_types("javax.persistence", *_PERSISTENCE_NAMES)
    | _package_types("jakarta.persistence.metamodel", *_METAMODEL_NAMES)
    | _package_types("javax.persistence.metamodel", *_METAMODEL_NAMES)
    | _package_types(
        "java.util",
        "ArrayList",
        "Calendar",
        "Collection",
        "Currency",
        "Date",
        "HashMap",
        "HashSet",
        "LinkedHashMap",
        "LinkedHashSet",
        "LinkedList",
        "List",
        "Locale",
        "Map",
        "Optional",
        "Set",
        "SortedMap",
        "SortedSet",
        "TreeMap",
        "TreeSet",
        "UUID",
    )
    | _package_types(
        "java.time",
        "Duration",
        "Instant",
        "LocalDate",
        "LocalDateTime",
        "LocalTime",
        "MonthDay",
        "OffsetDateTime",
        "OffsetTime",
        "Period",
        "Year",
        "YearMonth",
        "ZoneId",
        "ZonedDateTime",
    )
    | _package_types("java.math", "BigDecimal", "BigInteger")
    | _package_types("java.sql", "Date", "Time", "Timestamp")
    | _package_types("java.io", "Serializable")
)


def resolve_unit(unit: CompilationUnit, known: Container[str]) -> None:
    """Qualify every type name in *unit* in place.

    Args:
        unit: A parsed compilation unit.
        known: Qualified names of all declarations known to the reader,
            used for same-package and on-demand import lookups.
    """
    resolver = _Resolver(unit, known)
    for decl in unit.types:
        resolver.resolve_declaration(decl, enclosing=[], type_parameters=frozenset())


# ################
# Implementation
# ################


class _Resolver:
    """Resolves names within one compilation unit."""

    def __init__(self, unit: CompilationUnit, known: Container[str]) -> None:
        self._unit = unit
        self._known = known
        self._single: dict[str, str] = {}
        self._on_demand: list[str] = []
        for imp in unit.imports:
            if imp.is_static:
                continue
            if imp.on_demand:
                self._on_demand.append(imp.name)
            else:
                self._single[imp.name.rsplit(".", 1)[-1]] = imp.name

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def resolve_declaration(
        self,
        decl: TypeDecl,
        enclosing: list[TypeDecl],
        type_parameters: frozenset[str],
    ) -> None:
        scope = [*enclosing, decl]
        params = type_parameters | frozenset(decl.type_parameters)
        for annotation in decl.annotations:
            self._resolve_annotation(annotation, scope, params)
        if decl.superclass is not None:
            self._resolve_ref(decl.superclass, scope, params)
        for ref in decl.interfaces:
            self._resolve_ref(ref, scope, params)
        for fld in [*decl.record_components, *decl.fields]:
            self._resolve_field(fld, scope, params)
        for inner in decl.nested:
            inner_params = params if "static" not in inner.modifiers else frozenset()
            self.resolve_declaration(inner, scope, inner_params)

    def _resolve_field(self, fld: FieldDecl, scope: list[TypeDecl], params: frozenset[str]) -> None:
        for annotation in fld.annotations:
            self._resolve_annotation(annotation, scope, params)
        self._resolve_ref(fld.type, scope, params)

    def _resolve_annotation(self, annotation: Annotation, scope: list[TypeDecl], params: frozenset[str]) -> None:
        annotation.name = self.qualify(annotation.name, scope, params)
        for value in annotation.values.values():
            self._resolve_value(value, scope, params)

    def _resolve_value(self, value: AnnotationValue, scope: list[TypeDecl], params: frozenset[str]) -> None:
        if isinstance(value, ClassValue):
            self._resolve_ref(value.type, scope, params)
        elif isinstance(value, ArrayValue):
            for inner in value.values:
                self._resolve_value(inner, scope, params)
        elif isinstance(value, Annotation):
            self._resolve_annotation(value, scope, params)

    def _resolve_ref(self, ref: TypeRef, scope: list[TypeDecl], params: frozenset[str]) -> None:
        if ref.is_wildcard:
            if ref.bound is not None:
                self._resolve_ref(ref.bound, scope, params)
            return
        ref.name = self.qualify(ref.name, scope, params)
        for arg in ref.arguments:
            self._resolve_ref(arg, scope, params)

    # ------------------------------------------------------------------
    # Names
    # ------------------------------------------------------------------

    def qualify(self, name: str, scope: list[TypeDecl], params: frozenset[str]) -> str:
        """Return the qualified form of *name* as seen from *scope*."""
        head, _, rest = name.partition(".")
        if rest:
            resolved = self._lookup(head, scope, params)
            if resolved is None:
                # Already qualified, e.g. java.util.List.
                return name
            return f"{resolved}.{rest}"
        if name in PRIMITIVE_TYPES or name in params:
            return name
        resolved = self._lookup(name, scope, params)
        if resolved is not None:
            return resolved
        if self._on_demand:
            return name
        package = self._unit.package_name
        return f"{package}.{name}" if package else name

    def _lookup(self, simple: str, scope: list[TypeDecl], params: frozenset[str]) -> str | None:
        if simple in params:
            return simple
        for decl in reversed(scope):
            if decl.name == simple:
                return decl.qualified_name
            for inner in decl.nested:
                if inner.name == simple:
                    return inner.qualified_name
        if simple in self._single:
            return self._single[simple]
        package = self._unit.package_name
        same_package = f"{package}.{simple}" if package else simple
        if same_package in self._known:
            return same_package
        for top in self._unit.types:
            if top.name == simple:
                return top.qualified_name
        if simple in JAVA_LANG_TYPES:
            return f"java.lang.{simple}"
        for prefix in self._on_demand:
            candidate = f"{prefix}.{simple}"
            if candidate in self._known or candidate in WELL_KNOWN_TYPES:
                return candidate
        return None
