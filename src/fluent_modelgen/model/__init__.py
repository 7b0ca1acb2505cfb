# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Declaration model and normalized metamodel (entities, attributes, traits)."""

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
from fluent_modelgen.model.entities import Attribute, Entity, MappableType, RepositoryTrait
from fluent_modelgen.model.types import (
    METAMODEL_PACKAGE,
    METAMODEL_PACKAGE_LEGACY,
    AttributeType,
    PersistenceType,
    TypeArgument,
    companion_name,
)

__all__ = [
    # Declarations
    "TypeRef",
    "ClassValue",
    "LiteralValue",
    "NameValue",
    "ArrayValue",
    "Annotation",
    "AnnotationValue",
    "DeclarationKind",
    "FieldDecl",
    "TypeDecl",
    "ImportDecl",
    "CompilationUnit",
    # Type classification
    "METAMODEL_PACKAGE",
    "METAMODEL_PACKAGE_LEGACY",
    "companion_name",
    "PersistenceType",
    "AttributeType",
    "TypeArgument",
    # Metamodel
    "Attribute",
    "Entity",
    "RepositoryTrait",
    "MappableType",
]
