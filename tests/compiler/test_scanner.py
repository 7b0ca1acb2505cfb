# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the metamodel scanner."""

import logging
from pathlib import Path

import pytest

from fluent_modelgen.compiler.lexicon import Lexicon
from fluent_modelgen.compiler.metamodel import MetamodelOverlay
from fluent_modelgen.compiler.scanner import ScanResult, scan, type_name
from fluent_modelgen.compiler.sources import SourceSet
from fluent_modelgen.host.environment import HostEnvironment
from fluent_modelgen.host.filer import MemoryFiler
from fluent_modelgen.model.declarations import TypeRef
from fluent_modelgen.model.types import AttributeType, PersistenceType

SHOP = "com.example.shop"

# ###############
# Helpers
# ###############


def _scan_sources(sources: SourceSet, round_number: int = 0) -> tuple[ScanResult, HostEnvironment]:
    overlay = MetamodelOverlay(sources)
    env = HostEnvironment(overlay, MemoryFiler())
    declarations = overlay.root_declarations(round_number)
    declarations.extend(overlay.derive(declarations))
    return scan(declarations, env, Lexicon(overlay)), env


def _scan(sources: dict[str, str]) -> tuple[ScanResult, HostEnvironment]:
    return _scan_sources(SourceSet.from_mapping(sources))


@pytest.fixture
def shop(shop_dir: Path) -> tuple[ScanResult, HostEnvironment]:
    return _scan_sources(SourceSet.from_directories([shop_dir]))


# ###############
# Shop Fixture
# ###############


def test_shop_entities(shop: tuple[ScanResult, HostEnvironment]) -> None:
    result, env = shop
    assert env.error_count == 0
    assert env.warning_count == 0
    kinds = {name.removeprefix(SHOP + "."): entity.persistence_type for name, entity in result.entities.items()}
    assert kinds == {
        "customer.Address": PersistenceType.EMBEDDABLE,
        "customer.Customer": PersistenceType.ENTITY,
        "customer.Organization": PersistenceType.ENTITY,
        "customer.ZipCode": PersistenceType.EMBEDDABLE,
        "inherit.ChildEntity": PersistenceType.ENTITY,
        "inherit.RootEntity": PersistenceType.ENTITY,
        "inherit.SpecialEntity": PersistenceType.ENTITY,
        "inherit.SuperEntity": PersistenceType.MAPPED_SUPERCLASS,
        "project.Issue": PersistenceType.ENTITY,
        "project.Project": PersistenceType.ENTITY,
    }
    assert result.auxiliary == {}


def test_shop_customer_attributes(shop: tuple[ScanResult, HostEnvironment]) -> None:
    """Attributes come from the companion in member order; constant members are skipped."""
    result, _ = shop
    customer = result.entities[f"{SHOP}.customer.Customer"]
    assert customer.metamodel_name == f"{SHOP}.customer.Customer_"
    assert customer.package_name == f"{SHOP}.customer"
    assert customer.id_type == "java.lang.Long"
    assert [(a.name, a.attribute_type, a.value_type.name) for a in customer.attributes] == [
        ("id", AttributeType.SINGULAR, "java.lang.Long"),
        ("firstName", AttributeType.SINGULAR, "java.lang.String"),
        ("lastName", AttributeType.SINGULAR, "java.lang.String"),
        ("age", AttributeType.SINGULAR, "java.lang.Integer"),
        ("active", AttributeType.SINGULAR, "java.lang.Boolean"),
        ("birthday", AttributeType.SINGULAR, "java.time.LocalDate"),
        ("type", AttributeType.SINGULAR, f"{SHOP}.customer.CustomerType"),
        ("organizations", AttributeType.LIST, f"{SHOP}.customer.Organization"),
    ]
    assert customer.all_attributes == customer.attributes
    by_name = {a.name: a for a in customer.attributes}
    assert by_name["type"].value_type.is_comparable
    assert by_name["organizations"].value_type.persistence_type is PersistenceType.ENTITY
    assert by_name["id"].enclosing_type.name == customer.qualified_name


def test_shop_inheritance(shop: tuple[ScanResult, HostEnvironment]) -> None:
    """Inherited attributes come first, and descendants are the direct children."""
    result, _ = shop
    root = result.entities[f"{SHOP}.inherit.RootEntity"]
    special = result.entities[f"{SHOP}.inherit.SpecialEntity"]
    base = result.entities[f"{SHOP}.inherit.SuperEntity"]

    assert root.super_entity == base.qualified_name
    assert special.super_entity == root.qualified_name
    assert base.descendants == [root.qualified_name]
    assert root.descendants == [special.qualified_name]
    assert special.descendants == []

    assert [a.name for a in root.attributes] == ["name", "amount", "tags", "childrenMap"]
    assert [a.name for a in root.all_attributes] == ["id", "createdBy", "name", "amount", "tags", "childrenMap"]
    assert [a.name for a in special.all_attributes] == [*(a.name for a in root.all_attributes), "special"]
    assert root.all_attributes[0].enclosing_type.name == base.qualified_name
    assert root.id_type == "java.lang.Long"
    assert base.id_type is None


def test_shop_map_attribute(shop: tuple[ScanResult, HostEnvironment]) -> None:
    result, _ = shop
    root = result.entities[f"{SHOP}.inherit.RootEntity"]
    children = next(a for a in root.attributes if a.name == "childrenMap")
    assert children.attribute_type is AttributeType.MAP
    assert children.key_type is not None
    assert children.key_type.name == "java.lang.String"
    assert children.value_type.name == f"{SHOP}.inherit.ChildEntity"


def test_shop_traits_and_mappables(shop: tuple[ScanResult, HostEnvironment]) -> None:
    result, _ = shop
    traits = {trait.qualified_name: trait for trait in result.traits}
    assert set(traits) == {f"{SHOP}.repo.Audit", f"{SHOP}.repo.Pageable"}
    audit = traits[f"{SHOP}.repo.Audit"]
    assert audit.type_parameters == ["PK", "E"]
    assert audit.excludes == [f"{SHOP}.project.Issue"]
    assert not audit.applies_to(f"{SHOP}.project.Issue")
    assert audit.applies_to(f"{SHOP}.project.Project")
    assert traits[f"{SHOP}.repo.Pageable"].arity == 1

    assert [(m.qualified_name, m.component_types) for m in result.mappables] == [
        (f"{SHOP}.dto.CustomerSummary", ["java.lang.String", "java.lang.Long"]),
    ]


# ###############
# Edge Cases
# ###############


def test_unresolvable_target_is_assumed_entity(caplog: pytest.LogCaptureFixture) -> None:
    result, env = _scan(
        {"p/Ghost_.java": "package p; @jakarta.persistence.metamodel.StaticMetamodel(Ghost.class) class Ghost_ {}"}
    )
    assert result.entities["p.Ghost"].persistence_type is PersistenceType.ENTITY
    assert env.warning_count == 1
    assert "cannot be resolved" in caplog.text


def test_unmarked_target_is_assumed_entity() -> None:
    result, env = _scan(
        {
            "p/A.java": "package p; class A {}",
            "p/A_.java": "package p; @jakarta.persistence.metamodel.StaticMetamodel(A.class) class A_ {}",
        }
    )
    assert result.entities["p.A"].persistence_type is PersistenceType.ENTITY
    assert env.warning_count == 1


def test_companion_without_target_is_an_error(caplog: pytest.LogCaptureFixture) -> None:
    result, env = _scan({"p/X_.java": "package p; @jakarta.persistence.metamodel.StaticMetamodel class X_ {}"})
    assert result.entities == {}
    assert env.error_count == 1
    assert "Invalid metamodel p.X_" in caplog.text


def test_malformed_attribute_is_skipped(caplog: pytest.LogCaptureFixture) -> None:
    result, env = _scan(
        {
            "p/A.java": "package p; @jakarta.persistence.Entity class A { @jakarta.persistence.Id Long id; }",
            "p/A_.java": """
                package p;
                import jakarta.persistence.metamodel.*;
                @StaticMetamodel(A.class)
                class A_ {
                    public static volatile SingularAttribute<A> broken;
                    public static volatile SingularAttribute<A, Long> id;
                }
                """,
        }
    )
    assert [a.name for a in result.entities["p.A"].attributes] == ["id"]
    assert env.error_count == 1
    assert "takes 2 type arguments, got 1" in caplog.text


def test_cyclic_inheritance_is_rejected(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.ERROR)
    result, env = _scan(
        {
            "p/A_.java": "package p; @jakarta.persistence.metamodel.StaticMetamodel(A.class) class A_ extends B_ {}",
            "p/B_.java": "package p; @jakarta.persistence.metamodel.StaticMetamodel(B.class) class B_ extends A_ {}",
            "p/C_.java": "package p; @jakarta.persistence.metamodel.StaticMetamodel(C.class) class C_ extends A_ {}",
            "p/D_.java": "package p; @jakarta.persistence.metamodel.StaticMetamodel(D.class) class D_ {}",
        }
    )
    assert list(result.entities) == ["p.D"]
    assert env.error_count >= 1
    assert "Cyclic inheritance" in caplog.text


def test_duplicate_companion_is_ignored() -> None:
    result, env = _scan(
        {
            "p/A.java": "package p; @jakarta.persistence.Entity class A {}",
            "p/A_.java": "package p; @jakarta.persistence.metamodel.StaticMetamodel(A.class) class A_ {}",
            "q/Other_.java": "package q; @jakarta.persistence.metamodel.StaticMetamodel(p.A.class) class Other_ {}",
        }
    )
    assert result.entities["p.A"].metamodel_name == "p.A_"
    assert env.error_count == 0


def test_trait_on_a_class_is_ignored() -> None:
    result, env = _scan({"p/T.java": "package p; @jpa.fluent.core.RepositoryTrait class T<R> {}"})
    assert result.traits == []
    assert env.warning_count == 1


def test_trait_targets() -> None:
    result, _ = _scan(
        {
            "p/T.java": """
                package p;
                import jpa.fluent.core.RepositoryTrait;
                @RepositoryTrait(targets = {A.class, B.class})
                interface T<PK, E, R> {}
                """,
        }
    )
    trait = result.traits[0]
    assert trait.targets == ["p.A", "p.B"]
    assert trait.applies_to("p.A")
    assert not trait.applies_to("p.C")


def test_super_entity_from_earlier_round_is_auxiliary() -> None:
    sources = SourceSet()
    sources.add_source("package p; @jakarta.persistence.MappedSuperclass class Base { @jakarta.persistence.Id Long id; }")
    sources.add_source("package p; @jakarta.persistence.Entity class Child extends Base { String name; }", round_number=1)
    overlay = MetamodelOverlay(sources)
    overlay.derive(overlay.root_declarations(0))

    env = HostEnvironment(overlay, MemoryFiler())
    declarations = overlay.root_declarations(1)
    declarations.extend(overlay.derive(declarations))
    result = scan(declarations, env, Lexicon(overlay))

    assert list(result.entities) == ["p.Child"]
    assert list(result.auxiliary) == ["p.Base"]
    assert result.auxiliary["p.Base"].auxiliary
    assert [a.name for a in result.entities["p.Child"].all_attributes] == ["id", "name"]
    assert result.entities["p.Child"].id_type == "java.lang.Long"


def test_type_name_keeps_array_brackets() -> None:
    assert type_name(TypeRef(name="byte", dimensions=1)) == "byte[]"
    assert type_name(TypeRef(name="int")) == "java.lang.Integer"
    assert type_name(TypeRef(name="?")) == "java.lang.Object"
    assert type_name(TypeRef(name="?", bound=TypeRef(name="java.lang.Number"), bound_kind="extends")) == "java.lang.Number"


def test_type_name_keeps_type_arguments() -> None:
    nested = TypeRef(name="java.util.List", arguments=[TypeRef(name="java.lang.Integer")])
    ref = TypeRef(name="java.util.Map", arguments=[TypeRef(name="java.lang.String"), nested])
    assert type_name(ref) == "java.util.Map<java.lang.String, java.util.List<java.lang.Integer>>"


def test_parameterized_attribute_types_are_kept() -> None:
    result, _ = _scan(
        {
            "p/Thing.java": """
                package p;
                import java.util.List;
                import java.util.Map;
                import java.util.Set;
                import jakarta.persistence.*;
                @Entity
                class Thing {
                    @Id Long id;
                    Map<String, List<Integer>> nested;
                    Set<List<? extends Number>> groups;
                }
                """,
            "p/Doc.java": "package p; @jakarta.persistence.Entity class Doc { @jakarta.persistence.Id Long id; }",
            "p/Doc_.java": """
                package p;
                import java.util.Map;
                import jakarta.persistence.metamodel.*;
                @StaticMetamodel(Doc.class)
                class Doc_ {
                    public static volatile SingularAttribute<Doc, Map<String, Object>> settings;
                }
                """,
        }
    )
    nested = result.entities["p.Thing"].attributes[1]
    assert nested.attribute_type is AttributeType.MAP
    assert nested.value_type.name == "java.util.List"
    assert nested.value_type.declared_name == "java.util.List<java.lang.Integer>"
    assert nested.key_type is not None and nested.key_type.declared_name == "java.lang.String"

    groups = result.entities["p.Thing"].attributes[2]
    assert groups.value_type.declared_name == "java.util.List<? extends java.lang.Number>"

    settings = result.entities["p.Doc"].attributes[0]
    assert settings.attribute_type is AttributeType.SINGULAR
    assert settings.value_type.name == "java.util.Map"
    assert settings.value_type.declared_name == "java.util.Map<java.lang.String, java.lang.Object>"
