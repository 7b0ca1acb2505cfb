# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Derives static metamodel companions for persistent classes that have none.

The derived ``Name_`` declaration mirrors what a JPA metamodel processor
writes: it is annotated ``@StaticMetamodel(Name.class)``, extends the
superclass companion when the superclass is persistent, and declares one
attribute member per persistent field.
"""

from __future__ import annotations

from fluent_modelgen.compiler.lexicon import STATIC_METAMODEL, TRANSIENT, box, persistence_type_of
from fluent_modelgen.host.environment import SourceReader
from fluent_modelgen.model.declarations import Annotation, ClassValue, FieldDecl, TypeDecl, TypeRef
from fluent_modelgen.model.types import METAMODEL_PACKAGE, METAMODEL_PACKAGE_LEGACY, AttributeType, companion_name

# ###############
# Public Interface
# ###############

OBJECT_TYPE = "java.lang.Object"


def derive_metamodel(declarations: list[TypeDecl], reader: SourceReader) -> list[TypeDecl]:
    """Return synthetic companions for the persistent *declarations* lacking one.

    Args:
        declarations: Top-level declarations offered in a round.
        reader: The source reader, used to look up existing companions and
            superclasses.

    Returns:
        The synthesized companion declarations, in the order of *declarations*.
    """
    derived: list[TypeDecl] = []
    for decl in declarations:
        if decl.synthetic or not persistence_type_of(decl).is_struct:
            continue
        if reader.resolve(companion_name(decl.qualified_name)) is not None:
            continue
        derived.append(_derive(decl, reader))
    return derived


class MetamodelOverlay:
    """A source reader that also serves derived companions.

    Wraps the host's reader; companions derived through :meth:`derive` are
    returned by :meth:`resolve` for the rest of the session.
    """

    def __init__(self, reader: SourceReader) -> None:
        self._reader = reader
        self._derived: dict[str, TypeDecl] = {}

    def root_declarations(self, round_number: int) -> list[TypeDecl]:
        return self._reader.root_declarations(round_number)

    def resolve(self, qualified_name: str) -> TypeDecl | None:
        derived = self._derived.get(qualified_name)
        return derived if derived is not None else self._reader.resolve(qualified_name)

    def derive(self, declarations: list[TypeDecl]) -> list[TypeDecl]:
        """Derive and register companions for *declarations*; return the new ones."""
        companions = derive_metamodel(declarations, self)
        for companion in companions:
            self._derived[companion.qualified_name] = companion
        return companions


# ################
# Implementation
# ################

_PLURAL_TYPES: dict[str, AttributeType] = {
    "java.util.List": AttributeType.LIST,
    "java.util.Set": AttributeType.SET,
    "java.util.Collection": AttributeType.COLLECTION,
    "java.util.Map": AttributeType.MAP,
}


def _is_legacy(decl: TypeDecl) -> bool:
    return any(annotation.name.startswith("javax.persistence.") for annotation in decl.annotations)


def _derive(decl: TypeDecl, reader: SourceReader) -> TypeDecl:
    legacy = _is_legacy(decl)
    prefix = METAMODEL_PACKAGE_LEGACY if legacy else METAMODEL_PACKAGE
    companion = TypeDecl(
        name=f"{decl.name}_",
        qualified_name=companion_name(decl.qualified_name),
        package_name=decl.package_name,
        modifiers=["public", "abstract"],
        annotations=[
            Annotation(
                name=STATIC_METAMODEL[1] if legacy else STATIC_METAMODEL[0],
                values={"value": ClassValue(type=TypeRef(name=decl.qualified_name))},
            )
        ],
        source_path=decl.source_path,
        synthetic=True,
    )
    if decl.superclass is not None:
        parent = reader.resolve(decl.superclass.name)
        if parent is not None and persistence_type_of(parent).is_struct:
            companion.superclass = TypeRef(name=companion_name(parent.qualified_name))

    owner = TypeRef(name=decl.qualified_name)
    for fld in [*decl.record_components, *decl.fields]:
        if fld.is_static or fld.is_transient or fld.find_annotation(TRANSIENT):
            continue
        flavour, arguments = _attribute_shape(fld.type, decl.type_parameters)
        companion.fields.append(
            FieldDecl(
                name=fld.name,
                type=TypeRef(name=prefix + flavour.simple_name, arguments=[owner, *arguments]),
                modifiers=["public", "static", "volatile"],
            )
        )
    return companion


def _attribute_shape(ref: TypeRef, type_parameters: list[str]) -> tuple[AttributeType, list[TypeRef]]:
    """Return the attribute flavour and the value (or key and value) type arguments of a field type."""
    flavour = _PLURAL_TYPES.get(ref.name) if ref.dimensions == 0 else None
    if flavour is None:
        return AttributeType.SINGULAR, [_value_ref(ref, type_parameters)]
    arguments = [_value_ref(arg, type_parameters) for arg in ref.arguments]
    expected = flavour.type_argument_count - 1
    if len(arguments) != expected:
        # Raw collection type.
        arguments = [TypeRef(name=OBJECT_TYPE) for _ in range(expected)]
    return flavour, arguments


def _value_ref(ref: TypeRef, type_parameters: list[str]) -> TypeRef:
    if ref.is_wildcard:
        return _value_ref(ref.bound, type_parameters) if ref.bound is not None else TypeRef(name=OBJECT_TYPE)
    if ref.name in type_parameters:
        return TypeRef(name=OBJECT_TYPE, dimensions=ref.dimensions)
    if ref.dimensions:
        return TypeRef(name=ref.name, dimensions=ref.dimensions)
    return TypeRef(name=box(ref.name), arguments=[_nested_ref(arg, type_parameters) for arg in ref.arguments])


def _nested_ref(ref: TypeRef, type_parameters: list[str]) -> TypeRef:
    # Nested wildcards are kept as written.
    if ref.is_wildcard:
        bound = _nested_ref(ref.bound, type_parameters) if ref.bound is not None else None
        return TypeRef(name="?", bound=bound, bound_kind=ref.bound_kind if bound is not None else None)
    return _value_ref(ref, type_parameters)
