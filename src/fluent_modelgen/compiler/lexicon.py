# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Type lexicon: classifies referenced types for the model writer.

A referenced type is classified by its qualified name (string, boolean,
number, comparable) and by the mapping annotations on its declaration, if the
source reader knows it (entity, embeddable, mapped superclass, basic).
"""

from __future__ import annotations

import re

from fluent_modelgen.compiler.resolution import PRIMITIVE_TYPES
from fluent_modelgen.host.environment import SourceReader
from fluent_modelgen.model.declarations import DeclarationKind, TypeDecl, TypeRef
from fluent_modelgen.model.types import AttributeType, PersistenceType, TypeArgument

# ###############
# Public Interface
# ###############


def persistence_names(simple_name: str) -> tuple[str, str]:
    """Return the current and legacy qualified names of a ``persistence`` annotation."""
    return f"jakarta.persistence.{simple_name}", f"javax.persistence.{simple_name}"


ENTITY = persistence_names("Entity")
EMBEDDABLE = persistence_names("Embeddable")
MAPPED_SUPERCLASS = persistence_names("MappedSuperclass")
ID = persistence_names("Id")
EMBEDDED_ID = persistence_names("EmbeddedId")
TRANSIENT = persistence_names("Transient")
STATIC_METAMODEL = persistence_names("metamodel.StaticMetamodel")

STRING_TYPE = "java.lang.String"
BOOLEAN_TYPE = "java.lang.Boolean"

NUMBER_TYPES: frozenset[str] = frozenset(
    {
        "java.lang.Byte",
        "java.lang.Short",
        "java.lang.Integer",
        "java.lang.Long",
        "java.lang.Float",
        "java.lang.Double",
        "java.math.BigInteger",
        "java.math.BigDecimal",
    }
)

COMPARABLE_TYPES: frozenset[str] = NUMBER_TYPES | frozenset(
    {
        STRING_TYPE,
        BOOLEAN_TYPE,
        "java.lang.Character",
        "java.time.Duration",
        "java.time.Instant",
        "java.time.LocalDate",
        "java.time.LocalDateTime",
        "java.time.LocalTime",
        "java.time.MonthDay",
        "java.time.OffsetDateTime",
        "java.time.OffsetTime",
        "java.time.Year",
        "java.time.YearMonth",
        "java.time.ZonedDateTime",
        "java.util.Calendar",
        "java.util.Date",
        "java.util.UUID",
        "java.sql.Date",
        "java.sql.Time",
        "java.sql.Timestamp",
    }
)


def box(name: str) -> str:
    """Return the boxed type name for a primitive, or *name* unchanged."""
    return PRIMITIVE_TYPES.get(name, name)


def erasure(name: str) -> str:
    """Strip the type arguments from a type name; array brackets are kept."""
    return _TYPE_ARGUMENTS.sub("", name)


def persistence_type_of(decl: TypeDecl) -> PersistenceType:
    """Classify a declaration by its mapping annotations."""
    if decl.find_annotation(ENTITY):
        return PersistenceType.ENTITY
    if decl.find_annotation(EMBEDDABLE):
        return PersistenceType.EMBEDDABLE
    if decl.find_annotation(MAPPED_SUPERCLASS):
        return PersistenceType.MAPPED_SUPERCLASS
    return PersistenceType.BASIC


class Lexicon:
    """Classifies type names using the declarations known to a source reader."""

    def __init__(self, reader: SourceReader) -> None:
        self._reader = reader
        self._cache: dict[str, TypeArgument] = {}

    def type_argument(self, text: str) -> TypeArgument:
        """Return the classified TypeArgument for a (possibly primitive or parameterized) type.

        Classification looks at the erasure only; the type arguments are kept
        for declarations.
        """
        cached = self._cache.get(text)
        if cached is not None:
            return cached
        name = box(erasure(text))
        is_number = name in NUMBER_TYPES
        argument = TypeArgument(
            name=name,
            generic_name=text if "<" in text else None,
            persistence_type=self.persistence_type(name),
            is_string=name == STRING_TYPE,
            is_boolean=name == BOOLEAN_TYPE,
            is_number=is_number,
            is_comparable=is_number or self._is_comparable(name, set()),
        )
        self._cache[text] = argument
        return argument

    def persistence_type(self, name: str) -> PersistenceType:
        """Return the persistence kind of *name*.

        A type the reader does not know is assumed to be an entity when its
        metamodel companion ``Name_`` is known, and basic otherwise.
        """
        decl = self._reader.resolve(name)
        if decl is not None:
            return persistence_type_of(decl)
        if self._reader.resolve(f"{name}_") is not None:
            return PersistenceType.ENTITY
        return PersistenceType.BASIC

    @staticmethod
    def attribute_type(ref: TypeRef) -> AttributeType | None:
        """Return the attribute flavour of a metamodel member type, or None if it is not one."""
        return AttributeType.of(ref.name)

    def _is_comparable(self, name: str, seen: set[str]) -> bool:
        if name in COMPARABLE_TYPES:
            return True
        if name in seen:
            return False
        seen.add(name)
        decl = self._reader.resolve(name)
        if decl is None:
            return False
        if decl.kind is DeclarationKind.ENUM:
            return True
        supertypes = list(decl.interfaces)
        if decl.superclass is not None:
            supertypes.append(decl.superclass)
        for ref in supertypes:
            if ref.name == "java.lang.Comparable" or self._is_comparable(ref.name, seen):
                return True
        return False


# ################
# Implementation
# ################

_TYPE_ARGUMENTS = re.compile(r"<.*>")
