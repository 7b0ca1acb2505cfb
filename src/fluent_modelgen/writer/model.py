# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Writer for the per-entity fluent model ``<Target>Model``.

The model holds three nested classes, one per role a source plays in a
criteria query:

* ``Root_`` wraps the query root and implements ``RootAware``;
* ``Join_`` wraps a supplier of a ``Join`` and offers joins and paths;
* ``Path_`` wraps a supplier of a ``Path``; it has no joins and nested struct
  attributes yield deeper paths.

All three are rendered by the same attribute walker; only the source
expression and the set of emitted accessors differ per role.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum

from fluent_modelgen.host.environment import HostEnvironment
from fluent_modelgen.host.filer import FilerError
from fluent_modelgen.model.entities import Attribute, Entity
from fluent_modelgen.model.types import AttributeType, TypeArgument, companion_name
from fluent_modelgen.writer.imports import ImportBuilder
from fluent_modelgen.writer.source import compose, generated_annotation, write_source
from fluent_modelgen.writer.template import Template

# ###############
# Public Interface
# ###############


class SourceRole(Enum):
    """The role of the source wrapped by a nested model class."""

    ROOT = "Root_"
    JOIN = "Join_"
    PATH = "Path_"

    @property
    def class_name(self) -> str:
        return self.value

    @property
    def has_joins(self) -> bool:
        return self is not SourceRole.PATH


def path_class(value: TypeArgument, symbol: str) -> tuple[str, str]:
    """Return the typed path wrapper for a basic value type.

    The wrapper is chosen by priority: string, boolean, number, comparable,
    and any other type.

    Args:
        value: The classified value type.
        symbol: The name to write for the value type in the current file.

    Returns:
        The wrapper type as declared and the constructor expression used to
        create it.
    """
    if value.is_string:
        return "Criteria.StringPath", "Criteria.StringPath"
    if value.is_boolean:
        return "Criteria.BooleanPath", "Criteria.BooleanPath"
    if value.is_number:
        return f"Criteria.NumberPath<{symbol}>", "Criteria.NumberPath<>"
    if value.is_comparable:
        return f"Criteria.ComparablePath<{symbol}>", "Criteria.ComparablePath<>"
    return f"Criteria.AnyPath<{symbol}>", "Criteria.AnyPath<>"


class ModelWriter:
    """Renders and writes fluent models.

    Args:
        env: The host environment.
        entities: Every entity known in the session by qualified name; used
            to find the model and companion of referenced struct types.
    """

    def __init__(self, env: HostEnvironment, entities: Mapping[str, Entity]) -> None:
        self._env = env
        self._entities = entities

    def write(self, entity: Entity) -> bool:
        """Write the model of *entity*; return False if the file could not be created."""
        try:
            text = self.render(entity)
            write_source(self._env, entity.model_name, text, originating=entity.qualified_name)
        except (FilerError, OSError) as exc:
            self._env.error("Problem opening file to write %s class: %s", entity.model_name, exc)
            return False
        return True

    def render(self, entity: Entity) -> str:
        """Return the complete source text of the model of *entity*."""
        model_name = entity.simple_name + "Model"
        imports = ImportBuilder(entity.package_name, legacy=self._env.legacy, own_type=model_name)
        target = imports.add(entity.qualified_name)
        imports.add(f"{self._env.options.api_package}.*")
        generated = generated_annotation(imports)
        classes = {
            role: _AttributeClassGenerator(role, entity, imports, self._entities).render() for role in SourceRole
        }
        body = Template.of(_MODEL).bind(
            {
                "Generated": generated,
                "ModelName": model_name,
                "Entity": target,
                "Root": imports.add(_CRITERIA + "Root"),
                "AbstractQuery": imports.add(_CRITERIA + "AbstractQuery"),
                "CriteriaBuilder": imports.add(_CRITERIA + "CriteriaBuilder"),
                "RootClass": classes[SourceRole.ROOT],
                "JoinClass": classes[SourceRole.JOIN],
                "PathClass": classes[SourceRole.PATH],
            }
        )
        return compose(imports, body.text)


# ################
# Implementation
# ################

_CRITERIA = "jakarta.persistence.criteria."

_MODEL = """
    $Generated$
    @SuppressWarnings("unchecked")
    public class $ModelName$ {

        public static Root_ root($Root$<$Entity$> root, $AbstractQuery$<?> query, $CriteriaBuilder$ builder) {
            return new Root_(root, query, builder);
        }

        public static RootSource<$Entity$, Root_> root() {
            return new RootSource<>() {
                @Override
                public Root_ root($Root$<$Entity$> source, $AbstractQuery$<?> query, $CriteriaBuilder$ builder) {
                    return new Root_(source, query, builder);
                }

                @Override
                public Class<$Entity$> rootClass() {
                    return $Entity$.class;
                }
            };
        }

        $RootClass$

        $JoinClass$

        $PathClass$
    }
    """

_ROOT_CLASS = """
    public static class Root_ implements RootAware<$Entity$> {
        private final $Root$<$Entity$> root;
        private final $AbstractQuery$<?> query;
        private final $CriteriaBuilder$ builder;

        public Root_($Root$<$Entity$> root, $AbstractQuery$<?> query, $CriteriaBuilder$ builder) {
            this.root = root;
            this.query = query;
            this.builder = builder;
        }

        @Override
        public $Root$<$Entity$> get() {
            return root;
        }

        @Override
        public $CriteriaBuilder$ builder() {
            return builder;
        }

        @Override
        public $AbstractQuery$<?> query() {
            return query;
        }

        @Override
        public Root_ with($Root$<$Entity$> root, $AbstractQuery$<?> query) {
            return new Root_(root, query, builder);
        }

        @Override
        public Class<$Entity$> type() {
            return $Entity$.class;
        }$Members$
    }
    """

_SUPPLIED_CLASS = """
    public static class $ClassName$ implements $Supplier$<$Source$>, QueryAware, BuilderAware, Typed<$Entity$> {
        private final $Supplier$<$Source$> source;
        private final $AbstractQuery$<?> query;
        private final $CriteriaBuilder$ builder;

        public $ClassName$($Supplier$<$Source$> source, $AbstractQuery$<?> query, $CriteriaBuilder$ builder) {
            this.source = source;
            this.query = query;
            this.builder = builder;
        }

        @Override
        public $Source$ get() {
            return source.get();
        }

        @Override
        public $CriteriaBuilder$ builder() {
            return builder;
        }

        @Override
        public $AbstractQuery$<?> query() {
            return query;
        }

        @Override
        public Class<$Entity$> type() {
            return $Entity$.class;
        }$Members$
    }
    """

_STRUCT_JOINS = """
    public $Model$.Join_ join$Name$() {
        return new $Model$.Join_(() -> get().join($Token$), query(), builder());
    }

    public $Model$.Join_ leftJoin$Name$() {
        return new $Model$.Join_(() -> get().join($Token$, $JoinType$.LEFT), query(), builder());
    }
    """

_STRUCT_PATH = """
    public $Model$.Path_ get$Name$() {
        return new $Model$.Path_(() -> get().get($Token$), query(), builder());
    }
    """

_BASIC_PATH = """
    public $PathClass$ get$Name$() {
        return new $PathConstructor$(() -> get().get($Token$), builder());
    }
    """

_COLLECTION = """
    public Criteria.CollectionExp<$Value$, $Container$<$Value$>, $Expression$<$Container$<$Value$>>> get$Name$() {
        return new Criteria.CollectionExp<>(() -> $Source$.get($Token$), builder());
    }
    """

_MAP_JOIN = """
    public $Predicate$ join$Name$($BiFunction$<$KeyPath$, $ValuePath$, $Predicate$> fun) {
        $MapJoin$<$Entity$, $Key$, $Value$> join = get().join($Token$);
        return fun.apply($KeyNew$, $ValueNew$);
    }
    """

_MAP_GET = """
    public $Expression$<$Map$<$Key$, $Value$>> get$Name$() {
        return $Source$.get($Token$);
    }
    """

_ROOT_TREAT = """
    public $Model$.Root_ as$DescendantName$() {
        return new $Model$.Root_(builder().treat(get(), $Descendant$.class), query(), builder());
    }
    """

_SUPPLIED_TREAT = """
    public $Model$.$ClassName$ as$DescendantName$() {
        return new $Model$.$ClassName$(() -> builder().treat(get(), $Descendant$.class), query(), builder());
    }
    """

_SOURCE_TYPES: dict[SourceRole, str] = {
    SourceRole.ROOT: "Root",
    SourceRole.JOIN: "Join",
    SourceRole.PATH: "Path",
}


class _AttributeClassGenerator:
    """Renders one nested model class by walking the entity's attributes."""

    def __init__(
        self,
        role: SourceRole,
        entity: Entity,
        imports: ImportBuilder,
        entities: Mapping[str, Entity],
    ) -> None:
        self._role = role
        self._entity = entity
        self._imports = imports
        self._entities = entities

    def render(self) -> str:
        members = [self._attribute_methods(attribute) for attribute in self._entity.all_attributes]
        members.extend(self._treat_method(name) for name in self._entity.descendants)
        members = [member for member in members if member]
        block = "".join("\n\n" + Template(member.rstrip("\n")).indent(0) for member in members)
        return self._class_template().bind("Members", block).text

    def _class_template(self) -> Template:
        bindings = {
            "Entity": self._symbol(self._entity.qualified_name),
            "AbstractQuery": self._symbol(_CRITERIA + "AbstractQuery"),
            "CriteriaBuilder": self._symbol(_CRITERIA + "CriteriaBuilder"),
        }
        if self._role is SourceRole.ROOT:
            bindings["Root"] = self._symbol(_CRITERIA + "Root")
            return Template.of(_ROOT_CLASS).bind(bindings)
        source = self._symbol(_CRITERIA + _SOURCE_TYPES[self._role])
        wildcard = "?, " if self._role is SourceRole.JOIN else ""
        bindings["ClassName"] = self._role.class_name
        bindings["Supplier"] = self._symbol("java.util.function.Supplier")
        bindings["Source"] = f"{source}<{wildcard}{bindings['Entity']}>"
        return Template.of(_SUPPLIED_CLASS).bind(bindings)

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------

    def _attribute_methods(self, attribute: Attribute) -> str:
        bindings = {"Name": attribute.capitalized_name, "Token": self._token(attribute)}
        if attribute.attribute_type is AttributeType.MAP:
            return self._map_methods(attribute, bindings)
        if attribute.attribute_type.is_plural:
            return self._plural_methods(attribute, bindings)
        return self._singular_methods(attribute, bindings)

    def _singular_methods(self, attribute: Attribute, bindings: dict[str, str]) -> str:
        value = attribute.value_type
        if self._is_struct(value):
            bindings["Model"] = self._model(value)
            parts = []
            if self._role.has_joins:
                bindings["JoinType"] = self._symbol(_CRITERIA + "JoinType")
                parts.append(_STRUCT_JOINS)
            parts.append(_STRUCT_PATH)
            return self._join(parts, bindings)
        declared, constructor = path_class(value, self._symbol(value.declared_name))
        bindings["PathClass"] = declared
        bindings["PathConstructor"] = constructor
        return self._join([_BASIC_PATH], bindings)

    def _plural_methods(self, attribute: Attribute, bindings: dict[str, str]) -> str:
        value = attribute.value_type
        parts = []
        if self._is_struct(value) and self._role.has_joins:
            bindings["Model"] = self._model(value)
            bindings["JoinType"] = self._symbol(_CRITERIA + "JoinType")
            parts.append(_STRUCT_JOINS)
        bindings["Value"] = self._symbol(value.declared_name)
        bindings["Container"] = self._symbol(attribute.attribute_type.java_type)
        bindings["Expression"] = self._symbol(_CRITERIA + "Expression")
        bindings["Source"] = self._typed_source(attribute)
        parts.append(_COLLECTION)
        return self._join(parts, bindings)

    def _map_methods(self, attribute: Attribute, bindings: dict[str, str]) -> str:
        key, value = attribute.key_type, attribute.value_type
        bindings["Key"] = self._symbol(key.declared_name)
        bindings["Value"] = self._symbol(value.declared_name)
        bindings["Expression"] = self._symbol(_CRITERIA + "Expression")
        bindings["Map"] = self._symbol("java.util.Map")
        bindings["Source"] = self._typed_source(attribute)
        parts = []
        if self._role.has_joins:
            bindings["Entity"] = self._symbol(self._entity.qualified_name)
            bindings["Predicate"] = self._symbol(_CRITERIA + "Predicate")
            bindings["BiFunction"] = self._symbol("java.util.function.BiFunction")
            bindings["MapJoin"] = self._symbol(_CRITERIA + "MapJoin")
            bindings["KeyPath"], bindings["KeyNew"] = self._map_path(key, "join.key()")
            bindings["ValuePath"], bindings["ValueNew"] = self._map_path(value, "join.value()")
            parts.append(_MAP_JOIN)
        parts.append(_MAP_GET)
        return self._join(parts, bindings)

    def _map_path(self, argument: TypeArgument, accessor: str) -> tuple[str, str]:
        """Return the path type and constructor call for a map key or value."""
        if self._is_struct(argument):
            model = self._model(argument)
            return f"{model}.Path_", f"new {model}.Path_(() -> {accessor}, query(), builder())"
        declared, constructor = path_class(argument, self._symbol(argument.declared_name))
        return declared, f"new {constructor}(() -> {accessor}, builder())"

    def _treat_method(self, descendant: str) -> str:
        bindings = {
            "Model": self._model_name(descendant),
            "Descendant": self._symbol(descendant),
            "DescendantName": descendant.rsplit(".", 1)[-1],
            "ClassName": self._role.class_name,
        }
        template = _ROOT_TREAT if self._role is SourceRole.ROOT else _SUPPLIED_TREAT
        return Template.of(template).bind(bindings).text

    # ------------------------------------------------------------------
    # Names
    # ------------------------------------------------------------------

    def _join(self, parts: list[str], bindings: dict[str, str]) -> str:
        return "\n".join(Template.of(part).bind(bindings).text for part in parts)

    def _symbol(self, qualified_name: str) -> str:
        return self._imports.add(qualified_name)

    def _is_struct(self, argument: TypeArgument) -> bool:
        return argument.persistence_type.is_struct and argument.name in self._entities

    def _model(self, argument: TypeArgument) -> str:
        return self._model_name(argument.name)

    def _model_name(self, qualified_name: str) -> str:
        entity = self._entities.get(qualified_name)
        return self._symbol(entity.model_name if entity is not None else qualified_name + "Model")

    def _token(self, attribute: Attribute) -> str:
        """Return the companion field expression naming the attribute, e.g. ``Customer_.firstName``."""
        enclosing = self._entities.get(attribute.enclosing_type.name)
        companion = enclosing.metamodel_name if enclosing is not None else companion_name(attribute.enclosing_type.name)
        return f"{self._symbol(companion)}.{attribute.name}"

    def _typed_source(self, attribute: Attribute) -> str:
        """Return the source expression typed exactly as the attribute's declaring type.

        ``Path.get`` on plural and map attributes requires the path type to
        match the declaring type, so inherited attributes go through a cast.
        """
        enclosing = attribute.enclosing_type.name
        if enclosing == self._entity.qualified_name:
            return "get()"
        source = self._symbol(_CRITERIA + _SOURCE_TYPES[self._role])
        owner = self._symbol(enclosing)
        if self._role is SourceRole.JOIN:
            return f"(({source}<?, {owner}>) ({source}<?, ?>) get())"
        return f"(({source}<{owner}>) ({source}<?>) get())"
