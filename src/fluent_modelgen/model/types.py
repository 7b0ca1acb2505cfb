# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Type classification for the normalized metamodel.

The closed variant sets used throughout the generator: the persistence kind of
a referenced type, the flavour of a metamodel attribute, and the classified
type argument the model writer chooses its wrapper classes from.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

# ###############
# Public Interface
# ###############

METAMODEL_PACKAGE = "jakarta.persistence.metamodel."
METAMODEL_PACKAGE_LEGACY = "javax.persistence.metamodel."

# Simple names of java.lang types that compete with imports of the same name.
JAVA_LANG_TYPES: frozenset[str] = frozenset(
    {
        "Boolean",
        "Byte",
        "CharSequence",
        "Character",
        "Class",
        "Comparable",
        "Deprecated",
        "Double",
        "Enum",
        "Error",
        "Exception",
        "Float",
        "FunctionalInterface",
        "Integer",
        "Iterable",
        "Long",
        "Math",
        "Number",
        "Object",
        "Override",
        "Record",
        "Runnable",
        "RuntimeException",
        "SafeVarargs",
        "Short",
        "String",
        "StringBuilder",
        "SuppressWarnings",
        "System",
        "Throwable",
        "Void",
    }
)


def companion_name(qualified_name: str) -> str:
    """Return the qualified name of the metamodel companion of *qualified_name*."""
    return f"{qualified_name}_"


class PersistenceType(Enum):
    """Persistence kind of a type, derived from its mapping annotations."""

    ENTITY = "entity"
    EMBEDDABLE = "embeddable"
    MAPPED_SUPERCLASS = "mapped-superclass"
    BASIC = "basic"

    @property
    def is_struct(self) -> bool:
        """True for types with attributes of their own (anything but BASIC)."""
        return self is not PersistenceType.BASIC

    @property
    def is_entity(self) -> bool:
        return self is PersistenceType.ENTITY

    @property
    def is_embeddable(self) -> bool:
        return self is PersistenceType.EMBEDDABLE


class AttributeType(Enum):
    """Flavour of a static metamodel attribute, named after its companion type."""

    SINGULAR = "SingularAttribute"
    LIST = "ListAttribute"
    SET = "SetAttribute"
    COLLECTION = "CollectionAttribute"
    MAP = "MapAttribute"

    @property
    def simple_name(self) -> str:
        return self.value

    @property
    def is_plural(self) -> bool:
        return self in (AttributeType.LIST, AttributeType.SET, AttributeType.COLLECTION)

    @property
    def type_argument_count(self) -> int:
        """Number of type arguments the attribute companion type takes."""
        return 3 if self is AttributeType.MAP else 2

    @property
    def java_type(self) -> str | None:
        """Qualified name of the Java container type matching this flavour."""
        return _JAVA_TYPES.get(self)

    @classmethod
    def of(cls, qualified_name: str) -> AttributeType | None:
        """Return the flavour for a qualified attribute type name.

        Only names under the current or the legacy metamodel package are
        recognized; anything else yields None.
        """
        for prefix in (METAMODEL_PACKAGE, METAMODEL_PACKAGE_LEGACY):
            if qualified_name.startswith(prefix):
                simple = qualified_name[len(prefix) :]
                for member in cls:
                    if member.value == simple:
                        return member
        return None


class TypeArgument(BaseModel):
    """A classified type referenced by an attribute (value, key or enclosing type).

    ``name`` is the erasure and drives classification and lookups;
    ``generic_name`` keeps the type arguments of a parameterized type, e.g.
    ``java.util.List<java.lang.Integer>``.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    generic_name: str | None = None
    persistence_type: PersistenceType = PersistenceType.BASIC
    is_string: bool = False
    is_boolean: bool = False
    is_number: bool = False
    is_comparable: bool = False

    @property
    def simple_name(self) -> str:
        return self.name.rsplit(".", 1)[-1]

    @property
    def package_name(self) -> str:
        return self.name.rsplit(".", 1)[0] if "." in self.name else ""

    @property
    def declared_name(self) -> str:
        """The name to declare the type with, type arguments included."""
        return self.generic_name or self.name


# ################
# Implementation
# ################

_JAVA_TYPES: dict[AttributeType, str] = {
    AttributeType.LIST: "java.util.List",
    AttributeType.SET: "java.util.Set",
    AttributeType.COLLECTION: "java.util.Collection",
    AttributeType.MAP: "java.util.Map",
}
