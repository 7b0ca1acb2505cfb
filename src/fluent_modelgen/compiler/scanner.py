# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Scanner: folds the declarations of a round into the normalized metamodel.

Three kinds of declarations are picked up:

* static metamodel companions (``@StaticMetamodel(Target.class)``), which
  become :class:`~fluent_modelgen.model.entities.Entity` records;
* interfaces annotated ``@RepositoryTrait``, which become
  :class:`~fluent_modelgen.model.entities.RepositoryTrait` records;
* records annotated ``@Mappable``, which become
  :class:`~fluent_modelgen.model.entities.MappableType` records.

After the companions are read, a second pass links each entity to its super
entity, fills in descendants, rejects cyclic inheritance and materializes
``all_attributes`` top-down.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from fluent_modelgen.compiler.lexicon import (
    EMBEDDED_ID,
    ID,
    STATIC_METAMODEL,
    Lexicon,
    box,
    persistence_type_of,
)
from fluent_modelgen.compiler.metamodel import OBJECT_TYPE
from fluent_modelgen.host.environment import HostEnvironment
from fluent_modelgen.model.declarations import DeclarationKind, TypeDecl, TypeRef
from fluent_modelgen.model.entities import Attribute, Entity, MappableType, RepositoryTrait
from fluent_modelgen.model.types import AttributeType, PersistenceType, companion_name

# ###############
# Public Interface
# ###############


class ScanError(Exception):
    """Raised for a malformed metamodel companion; reported as a log record."""


@dataclass
class ScanResult:
    """Everything the scanner found in one round.

    Attributes:
        entities: Entities of this round by target qualified name, in scan order.
        auxiliary: Super entities outside the round, loaded for attribute
            inheritance only.
        traits: Repository traits of this round.
        mappables: Mappable record types of this round.
    """

    entities: dict[str, Entity] = field(default_factory=dict)
    auxiliary: dict[str, Entity] = field(default_factory=dict)
    traits: list[RepositoryTrait] = field(default_factory=list)
    mappables: list[MappableType] = field(default_factory=list)


def scan(declarations: list[TypeDecl], env: HostEnvironment, lexicon: Lexicon) -> ScanResult:
    """Scan *declarations* (and their nested declarations) into a ScanResult.

    Problems are reported through the environment's log sink; the offending
    member, entity or inheritance family is skipped.
    """
    return _Scanner(env, lexicon).scan(declarations)


def type_name(ref: TypeRef) -> str:
    """Return the name used for a type argument.

    Primitives are boxed; array brackets and nested type arguments are kept.
    A top-level wildcard stands for its bound.
    """
    if ref.is_wildcard:
        return type_name(ref.bound) if ref.bound is not None else OBJECT_TYPE
    if ref.dimensions or ref.arguments:
        return ref.render()
    return box(ref.name)


# ################
# Implementation
# ################


class _Scanner:
    """Builds the metamodel of one round."""

    def __init__(self, env: HostEnvironment, lexicon: Lexicon) -> None:
        self._env = env
        self._reader = env.reader
        self._lexicon = lexicon
        api = env.options.api_package
        self._trait_annotation = (f"{api}.RepositoryTrait",)
        self._mappable_annotation = (f"{env.options.query_package}.Mappable", f"{api}.Mappable")

    def scan(self, declarations: list[TypeDecl]) -> ScanResult:
        result = ScanResult()
        for root in declarations:
            for decl in root.walk():
                self._classify(decl, result)
        self._load_auxiliary(result)
        self._reject_cycles(result)
        self._link_descendants(result)
        self._materialize(result)
        return result

    def _classify(self, decl: TypeDecl, result: ScanResult) -> None:
        if decl.find_annotation(STATIC_METAMODEL):
            try:
                entity = self._build_entity(decl)
            except ScanError as exc:
                self._env.error("Invalid metamodel %s: %s", decl.qualified_name, exc)
                return
            if entity.qualified_name in result.entities:
                self._env.debug("Duplicate metamodel for %s ignored: %s", entity.qualified_name, decl.qualified_name)
                return
            result.entities[entity.qualified_name] = entity
        elif decl.find_annotation(self._trait_annotation):
            if not decl.is_interface:
                self._env.warning("RepositoryTrait %s is not an interface; ignored", decl.qualified_name)
                return
            result.traits.append(self._build_trait(decl))
        elif decl.kind is DeclarationKind.RECORD and decl.find_annotation(self._mappable_annotation):
            result.mappables.append(
                MappableType(
                    qualified_name=decl.qualified_name,
                    component_types=[type_name(component.type) for component in decl.record_components],
                )
            )

    # ------------------------------------------------------------------
    # Entities
    # ------------------------------------------------------------------

    def _build_entity(self, companion: TypeDecl, auxiliary: bool = False) -> Entity:
        """Build a provisional entity (own attributes only) from its companion."""
        annotation = companion.find_annotation(STATIC_METAMODEL)
        targets = annotation.class_names("value") if annotation is not None else []
        if not targets:
            raise ScanError("@StaticMetamodel has no target class")
        target = targets[0]
        target_decl = self._reader.resolve(target)
        kind = self._lexicon.persistence_type(target)
        if target_decl is None:
            self._env.warning("Target %s of %s cannot be resolved; assuming an entity", target, companion.qualified_name)
            kind = PersistenceType.ENTITY
        elif kind is PersistenceType.BASIC:
            self._env.warning("Target %s has no mapping annotation; assuming an entity", target)
            kind = PersistenceType.ENTITY

        entity = Entity(
            qualified_name=target,
            package_name=target_decl.package_name if target_decl is not None else companion.package_name,
            metamodel_name=companion.qualified_name,
            persistence_type=kind,
            super_entity=self._super_entity(companion, target_decl),
            source_path=target_decl.source_path if target_decl is not None else companion.source_path,
            auxiliary=auxiliary,
        )
        for member in companion.fields:
            attribute = self._build_attribute(entity, member.name, member.type)
            if attribute is not None:
                entity.attributes.append(attribute)
        if kind.is_entity:
            entity.id_type = self._id_type(target_decl)
        return entity

    def _build_attribute(self, entity: Entity, name: str, ref: TypeRef) -> Attribute | None:
        flavour = self._lexicon.attribute_type(ref)
        if flavour is None:
            self._env.debug("Skip member %s.%s: %s is not a metamodel attribute", entity.simple_name, name, ref.name)
            return None
        if len(ref.arguments) != flavour.type_argument_count:
            self._env.error(
                "Malformed attribute %s.%s: %s takes %d type arguments, got %d",
                entity.simple_name,
                name,
                flavour.simple_name,
                flavour.type_argument_count,
                len(ref.arguments),
            )
            return None
        names = [type_name(arg) for arg in ref.arguments]
        return Attribute(
            entity=entity.qualified_name,
            name=name,
            enclosing_type=self._lexicon.type_argument(names[0]),
            value_type=self._lexicon.type_argument(names[-1]),
            key_type=self._lexicon.type_argument(names[1]) if flavour is AttributeType.MAP else None,
            attribute_type=flavour,
        )

    def _super_entity(self, companion: TypeDecl, target_decl: TypeDecl | None) -> str | None:
        """Return the nearest ancestor of the target that is itself a metamodel target."""
        if companion.superclass is not None:
            parent = self._reader.resolve(companion.superclass.name)
            if parent is not None:
                annotation = parent.find_annotation(STATIC_METAMODEL)
                names = annotation.class_names("value") if annotation is not None else []
                if names:
                    return names[0]
            elif companion.superclass.name.endswith("_"):
                return companion.superclass.name[:-1]
        ancestor = self._superclass_of(target_decl)
        while ancestor is not None:
            if (
                self._reader.resolve(companion_name(ancestor.qualified_name)) is not None
                or persistence_type_of(ancestor).is_struct
            ):
                return ancestor.qualified_name
            ancestor = self._superclass_of(ancestor)
        return None

    def _superclass_of(self, decl: TypeDecl | None) -> TypeDecl | None:
        if decl is None or decl.superclass is None:
            return None
        return self._reader.resolve(decl.superclass.name)

    def _id_type(self, target_decl: TypeDecl | None) -> str | None:
        """Return the type of the nearest ``@Id``/``@EmbeddedId`` field up the class hierarchy."""
        seen: set[str] = set()
        decl = target_decl
        while decl is not None and decl.qualified_name not in seen:
            seen.add(decl.qualified_name)
            for member in decl.fields:
                if member.find_annotation(ID) or member.find_annotation(EMBEDDED_ID):
                    return type_name(member.type)
            decl = self._superclass_of(decl)
        return None

    def _load_auxiliary(self, result: ScanResult) -> None:
        """Load super entities that are not part of this round from their companions."""
        pending = list(result.entities.values())
        while pending:
            entity = pending.pop(0)
            parent = entity.super_entity
            if parent is None or parent in result.entities or parent in result.auxiliary:
                continue
            companion = self._reader.resolve(companion_name(parent))
            if companion is None or not companion.find_annotation(STATIC_METAMODEL):
                self._env.debug("Super entity %s of %s has no metamodel", parent, entity.qualified_name)
                continue
            try:
                auxiliary = self._build_entity(companion, auxiliary=True)
            except ScanError as exc:
                self._env.error("Invalid metamodel %s: %s", companion.qualified_name, exc)
                continue
            result.auxiliary[parent] = auxiliary
            pending.append(auxiliary)

    # ------------------------------------------------------------------
    # Linking
    # ------------------------------------------------------------------

    def _reject_cycles(self, result: ScanResult) -> None:
        """Drop every entity whose super-entity chain runs into a cycle."""
        known = {**result.auxiliary, **result.entities}
        rejected: set[str] = set()
        for start in known:
            path: list[str] = []
            current: str | None = start
            while current is not None and current in known and current not in rejected:
                if current in path:
                    cycle = path[path.index(current) :] + [current]
                    self._env.error("Cyclic inheritance: %s", " -> ".join(cycle))
                    rejected.update(path)
                    break
                path.append(current)
                current = known[current].super_entity
            else:
                if current is not None and current in rejected:
                    rejected.update(path)
        for name in rejected:
            result.entities.pop(name, None)
            result.auxiliary.pop(name, None)

    def _link_descendants(self, result: ScanResult) -> None:
        for entity in result.entities.values():
            parent = result.entities.get(entity.super_entity) if entity.super_entity else None
            if parent is not None:
                parent.descendants.append(entity.qualified_name)

    def _materialize(self, result: ScanResult) -> None:
        known = {**result.auxiliary, **result.entities}
        done: dict[str, list[Attribute]] = {}

        def _all(entity: Entity) -> list[Attribute]:
            if entity.qualified_name not in done:
                parent = known.get(entity.super_entity) if entity.super_entity else None
                inherited = _all(parent) if parent is not None else []
                done[entity.qualified_name] = [*inherited, *entity.attributes]
            return done[entity.qualified_name]

        for entity in known.values():
            entity.all_attributes = list(_all(entity))

    # ------------------------------------------------------------------
    # Traits
    # ------------------------------------------------------------------

    def _build_trait(self, decl: TypeDecl) -> RepositoryTrait:
        annotation = decl.find_annotation(self._trait_annotation)
        return RepositoryTrait(
            qualified_name=decl.qualified_name,
            type_parameters=list(decl.type_parameters),
            targets=annotation.class_names("targets") if annotation is not None else [],
            excludes=annotation.class_names("excludes") if annotation is not None else [],
        )
