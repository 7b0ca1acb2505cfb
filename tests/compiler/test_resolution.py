# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for name resolution of parsed compilation units."""

from fluent_modelgen.compiler.resolution import PRIMITIVE_TYPES, resolve_unit
from fluent_modelgen.model.declarations import CompilationUnit, TypeDecl
from fluent_modelgen.parser.parser import parse

# ###############
# Helpers
# ###############


def _resolved(source: str, known: set[str] | None = None) -> CompilationUnit:
    unit = parse(source)
    resolve_unit(unit, known or set())
    return unit


def _field_types(decl: TypeDecl) -> dict[str, str]:
    return {f.name: f.type.render() for f in decl.fields}


# ###############
# Normal Cases
# ###############


def test_single_type_import_wins() -> None:
    """A single-type import qualifies the simple name."""
    unit = _resolved(
        """
        package com.example;
        import java.util.List;
        import java.time.LocalDate;
        class A { List<LocalDate> dates; }
        """
    )
    assert _field_types(unit.types[0]) == {"dates": "java.util.List<java.time.LocalDate>"}


def test_same_package_declaration() -> None:
    """A known declaration of the unit's package resolves without an import."""
    unit = _resolved("package com.example; class A { Address home; }", known={"com.example.Address"})
    assert _field_types(unit.types[0]) == {"home": "com.example.Address"}


def test_java_lang_types() -> None:
    unit = _resolved("package p; class A { String name; Long id; Object any; }")
    assert _field_types(unit.types[0]) == {
        "name": "java.lang.String",
        "id": "java.lang.Long",
        "any": "java.lang.Object",
    }


def test_primitives_stay_primitive() -> None:
    unit = _resolved("package p; class A { int a; boolean b; }")
    assert _field_types(unit.types[0]) == {"a": "int", "b": "boolean"}
    assert PRIMITIVE_TYPES["int"] == "java.lang.Integer"


def test_type_parameters_are_kept() -> None:
    """Type parameters in scope are never qualified, also inside nested non-static types."""
    unit = _resolved("package p; class Box<T> { T value; class Inner { T item; } static class Nested { T item; } }")
    box = unit.types[0]
    assert _field_types(box) == {"value": "T"}
    inner, nested = box.nested
    assert _field_types(inner) == {"item": "T"}
    # A static nested type does not see the outer type parameter.
    assert _field_types(nested) == {"item": "p.T"}


def test_member_types_of_enclosing_declarations() -> None:
    unit = _resolved("package p; class Order { Status status; enum Status { OPEN } }")
    assert _field_types(unit.types[0]) == {"status": "p.Order.Status"}


def test_on_demand_import_of_known_declaration() -> None:
    unit = _resolved(
        "package p; import com.example.shop.*; class A { Customer c; }",
        known={"com.example.shop.Customer"},
    )
    assert _field_types(unit.types[0]) == {"c": "com.example.shop.Customer"}


def test_on_demand_import_of_well_known_type() -> None:
    unit = _resolved("package p; import jakarta.persistence.*; @Entity class A { @Id Long id; }")
    decl = unit.types[0]
    assert decl.annotations[0].name == "jakarta.persistence.Entity"
    assert decl.fields[0].annotations[0].name == "jakarta.persistence.Id"


def test_already_qualified_names_are_kept() -> None:
    unit = _resolved("package p; class A { java.util.Set<java.math.BigDecimal> amounts; }")
    assert _field_types(unit.types[0]) == {"amounts": "java.util.Set<java.math.BigDecimal>"}


def test_qualified_name_with_imported_head() -> None:
    """``Map.Entry`` resolves its head through the import."""
    unit = _resolved("package p; import java.util.Map; class A { Map.Entry<String, Long> e; }")
    assert unit.types[0].fields[0].type.name == "java.util.Map.Entry"


def test_class_literals_in_annotations() -> None:
    unit = _resolved(
        """
        package com.example;
        import jakarta.persistence.metamodel.StaticMetamodel;
        @StaticMetamodel(Customer.class)
        class Customer_ {}
        """,
        known={"com.example.Customer"},
    )
    annotation = unit.types[0].annotations[0]
    assert annotation.name == "jakarta.persistence.metamodel.StaticMetamodel"
    assert annotation.class_names() == ["com.example.Customer"]


def test_supertypes_and_wildcard_bounds() -> None:
    unit = _resolved(
        "package p; import java.io.Serializable; import java.util.List;"
        " class A extends Base implements Serializable { List<? extends Number> n; }",
        known={"p.Base"},
    )
    decl = unit.types[0]
    assert decl.superclass is not None and decl.superclass.name == "p.Base"
    assert decl.interfaces[0].name == "java.io.Serializable"
    assert decl.fields[0].type.render() == "java.util.List<? extends java.lang.Number>"


# ###############
# Fallbacks
# ###############


def test_unknown_name_falls_back_to_own_package() -> None:
    unit = _resolved("package p; class A { Mystery m; }")
    assert _field_types(unit.types[0]) == {"m": "p.Mystery"}


def test_unknown_name_kept_bare_with_on_demand_imports() -> None:
    """The name might come from any on-demand import, so it stays unqualified."""
    unit = _resolved("package p; import org.other.*; class A { Mystery m; }")
    assert _field_types(unit.types[0]) == {"m": "Mystery"}


def test_import_shadows_java_lang() -> None:
    unit = _resolved("package p; import com.example.String; class A { String s; }")
    assert _field_types(unit.types[0]) == {"s": "com.example.String"}
