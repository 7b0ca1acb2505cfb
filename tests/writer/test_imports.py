# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for per-file import bookkeeping."""

import pytest

from fluent_modelgen.writer.imports import ImportBuilder, to_dialect

# ###############
# Normal Cases
# ###############


def test_imported_name_is_shortened() -> None:
    imports = ImportBuilder("com.example")
    assert imports.add("java.util.List") == "List"
    assert imports.add("java.util.List") == "List"
    assert imports.emit() == "import java.util.List;"


def test_java_lang_and_own_package_are_not_imported() -> None:
    imports = ImportBuilder("com.example")
    assert imports.add("java.lang.String") == "String"
    assert imports.add("com.example.Customer") == "Customer"
    assert imports.emit() == ""


def test_conflicting_simple_name_stays_qualified() -> None:
    """The first name to claim a simple name wins; later ones are written qualified."""
    imports = ImportBuilder("com.example")
    assert imports.add("java.util.Date") == "Date"
    assert imports.add("java.sql.Date") == "java.sql.Date"
    assert imports.emit() == "import java.util.Date;"


def test_java_lang_names_are_never_shadowed() -> None:
    imports = ImportBuilder("com.example")
    assert imports.add("com.other.String") == "com.other.String"
    assert imports.add("java.lang.String") == "String"
    assert imports.emit() == ""


def test_array_brackets_are_carried_through() -> None:
    imports = ImportBuilder("p")
    assert imports.add("java.math.BigDecimal[]") == "BigDecimal[]"
    assert imports.add("byte[][]") == "byte[][]"
    assert imports.emit() == "import java.math.BigDecimal;"


def test_unqualified_names_pass_through() -> None:
    imports = ImportBuilder("p")
    assert imports.add("T") == "T"
    assert imports.add("int") == "int"
    assert imports.emit() == ""


def test_own_type_claims_its_simple_name() -> None:
    """A type of another package named like the declared type stays qualified."""
    imports = ImportBuilder("com.a", own_type="OrderModel")
    assert imports.add("com.b.OrderModel") == "com.b.OrderModel"
    assert imports.add("com.a.OrderModel") == "OrderModel"
    assert imports.emit() == ""


def test_own_type_in_the_default_package() -> None:
    imports = ImportBuilder("", own_type="Mappers")
    assert imports.add("com.b.Mappers") == "com.b.Mappers"
    assert imports.add("Mappers") == "Mappers"
    assert imports.emit() == ""


def test_parameterized_names_import_every_argument() -> None:
    imports = ImportBuilder("p")
    text = imports.add("java.util.Map<java.lang.String, java.util.List<java.math.BigDecimal>>")
    assert text == "Map<String, List<BigDecimal>>"
    assert imports.emit().split("\n") == [
        "import java.math.BigDecimal;",
        "import java.util.List;",
        "import java.util.Map;",
    ]


def test_parameterized_names_keep_wildcards_and_conflicts() -> None:
    imports = ImportBuilder("p")
    imports.add("java.util.Date")
    text = imports.add("java.util.List<? extends java.sql.Date>[]")
    assert text == "List<? extends java.sql.Date>[]"
    assert imports.add("java.util.Set<? super java.lang.Integer>") == "Set<? super Integer>"


def test_wildcard_imports() -> None:
    imports = ImportBuilder("p")
    assert imports.add("jpa.fluent.core.*") == ""
    assert imports.add("p.*") == ""
    assert imports.emit() == "import jpa.fluent.core.*;"


def test_emit_is_sorted_and_unique() -> None:
    imports = ImportBuilder("p")
    for name in ["java.util.Map", "jakarta.persistence.criteria.Root", "java.util.List", "java.util.Map"]:
        imports.add(name)
    assert imports.emit().split("\n") == [
        "import jakarta.persistence.criteria.Root;",
        "import java.util.List;",
        "import java.util.Map;",
    ]


# ###############
# Dialect
# ###############


def test_legacy_builder_emits_javax() -> None:
    imports = ImportBuilder("p", legacy=True)
    assert imports.add("jakarta.persistence.criteria.Root") == "Root"
    assert imports.add("javax.persistence.criteria.Root") == "Root"
    assert imports.emit() == "import javax.persistence.criteria.Root;"


def test_legacy_conflict_is_rendered_in_javax() -> None:
    imports = ImportBuilder("p", legacy=True)
    imports.add("com.example.Path")
    assert imports.add("jakarta.persistence.criteria.Path") == "javax.persistence.criteria.Path"


@pytest.mark.parametrize(
    ("name", "legacy", "expected"),
    [
        ("jakarta.persistence.criteria.Root", True, "javax.persistence.criteria.Root"),
        ("javax.persistence.criteria.Root", False, "jakarta.persistence.criteria.Root"),
        ("jakarta.persistence.criteria.Root", False, "jakarta.persistence.criteria.Root"),
        ("javax.annotation.processing.Generated", False, "javax.annotation.processing.Generated"),
        ("java.util.List", True, "java.util.List"),
    ],
)
def test_to_dialect(name: str, legacy: bool, expected: str) -> None:
    assert to_dialect(name, legacy) == expected
