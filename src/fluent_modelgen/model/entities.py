# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Normalized metamodel: entities, attributes, repository traits and mappable types."""

from __future__ import annotations

from pydantic import BaseModel, model_validator
from pydantic import Field as _Field

from fluent_modelgen.model.types import AttributeType, PersistenceType, TypeArgument

# ###############
# Public Interface
# ###############


class Attribute(BaseModel):
    """One persistent attribute of an entity, read from its metamodel companion.

    Attributes:
        entity: Qualified name of the entity owning the attribute.
        name: The attribute (field) name.
        enclosing_type: Where the attribute physically lives; the entity itself
            or one of its mapped superclasses.
        value_type: The attribute's value (or element) type.
        key_type: The key type of a map attribute; absent for other flavours.
        attribute_type: The attribute flavour.
    """

    entity: str
    name: str
    enclosing_type: TypeArgument
    value_type: TypeArgument
    key_type: TypeArgument | None = None
    attribute_type: AttributeType = AttributeType.SINGULAR

    @model_validator(mode="after")
    def _check_key_type(self) -> Attribute:
        if self.attribute_type is AttributeType.MAP and self.key_type is None:
            raise ValueError(f"map attribute '{self.name}' requires a key type")
        if self.attribute_type is not AttributeType.MAP and self.key_type is not None:
            raise ValueError(f"attribute '{self.name}' is not a map but has a key type")
        return self

    @property
    def capitalized_name(self) -> str:
        return self.name[:1].upper() + self.name[1:]


class Entity(BaseModel):
    """An entity, embeddable or mapped superclass known through its metamodel companion.

    ``all_attributes`` is materialized by the scanner once inheritance links
    are known: the super-entity chain's attributes top-down, then the own ones.
    """

    qualified_name: str
    package_name: str = ""
    metamodel_name: str = ""
    persistence_type: PersistenceType = PersistenceType.ENTITY
    id_type: str | None = None
    super_entity: str | None = None
    descendants: list[str] = _Field(default_factory=list)
    attributes: list[Attribute] = _Field(default_factory=list)
    all_attributes: list[Attribute] = _Field(default_factory=list)
    source_path: str | None = None
    auxiliary: bool = False

    @property
    def simple_name(self) -> str:
        return self.qualified_name.rsplit(".", 1)[-1]

    @property
    def model_name(self) -> str:
        """Qualified name of the fluent model emitted for this entity."""
        return self._sibling("Model")

    @property
    def repository_name(self) -> str:
        """Qualified name of the repository interface emitted for this entity."""
        return self._sibling("Repository_")

    def _sibling(self, suffix: str) -> str:
        name = self.simple_name + suffix
        return f"{self.package_name}.{name}" if self.package_name else name


class RepositoryTrait(BaseModel):
    """A user interface marked as a reusable repository trait.

    Attributes:
        qualified_name: The trait interface's qualified name.
        type_parameters: The trait's declared type parameter names, in order.
        targets: Entities the trait is restricted to; empty means all.
        excludes: Entities the trait never applies to.
    """

    qualified_name: str
    type_parameters: list[str] = _Field(default_factory=list)
    targets: list[str] = _Field(default_factory=list)
    excludes: list[str] = _Field(default_factory=list)

    @property
    def arity(self) -> int:
        return len(self.type_parameters)

    def applies_to(self, entity_name: str) -> bool:
        """Return True if the trait is mixed into the repository of *entity_name*."""
        if entity_name in self.excludes:
            return False
        return not self.targets or entity_name in self.targets


class MappableType(BaseModel):
    """A record type annotated as a mapping target for query results."""

    qualified_name: str
    component_types: list[str] = _Field(default_factory=list)

    @property
    def simple_name(self) -> str:
        return self.qualified_name.rsplit(".", 1)[-1]
