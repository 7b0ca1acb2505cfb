# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""End-to-end tests for the round driver."""

from pathlib import Path

import pytest

from fluent_modelgen.compiler.processor import ModelProcessor
from fluent_modelgen.compiler.sources import SourceSet
from fluent_modelgen.host.environment import HostEnvironment
from fluent_modelgen.host.filer import MemoryFiler
from fluent_modelgen.host.options import GeneratorOptions
from fluent_modelgen.writer.model import ModelWriter

SHOP = "com.example.shop"
API = "jpa.fluent.core"

# ###############
# Helpers
# ###############


def _env(sources: SourceSet, legacy: bool = False, **options: str) -> HostEnvironment:
    return HostEnvironment(sources, MemoryFiler(), GeneratorOptions.from_mapping(options), legacy=legacy)


def _shop_env(shop_dir: Path, legacy: bool = False, **options: str) -> HostEnvironment:
    return _env(SourceSet.from_directories([shop_dir]), legacy, **options)


def _text(env: HostEnvironment, qualified_name: str) -> str:
    assert isinstance(env.filer, MemoryFiler)
    return env.filer.text(qualified_name)


_MODELS = [
    f"{SHOP}.customer.AddressModel",
    f"{SHOP}.customer.CustomerModel",
    f"{SHOP}.customer.OrganizationModel",
    f"{SHOP}.customer.ZipCodeModel",
    f"{SHOP}.inherit.ChildEntityModel",
    f"{SHOP}.inherit.RootEntityModel",
    f"{SHOP}.inherit.SpecialEntityModel",
    f"{SHOP}.project.IssueModel",
    f"{SHOP}.project.ProjectModel",
]

_API_FILES = [
    f"{API}.BuilderAware",
    f"{API}.QueryAware",
    f"{API}.Typed",
    f"{API}.RootAware",
    f"{API}.RootSource",
    f"{API}.Repository",
    f"{API}.Criteria",
]

_REPOSITORIES = [
    f"{SHOP}.customer.CustomerRepository_",
    f"{SHOP}.customer.OrganizationRepository_",
    f"{SHOP}.inherit.ChildEntityRepository_",
    f"{SHOP}.inherit.RootEntityRepository_",
    f"{SHOP}.inherit.SpecialEntityRepository_",
    f"{SHOP}.project.IssueRepository_",
    f"{SHOP}.project.ProjectRepository_",
]


# ###############
# Whole Session
# ###############


def test_shop_generates_every_file(shop_dir: Path) -> None:
    """Models first, then the API package, Mappers and the repositories."""
    env = _shop_env(shop_dir)
    generated = ModelProcessor(env).process(0)

    assert generated == [*_MODELS, *_API_FILES, f"{SHOP}.dto.Mappers", *_REPOSITORIES]
    assert env.error_count == 0
    assert env.filer.created[f"{SHOP}.customer.CustomerModel"] == f"{SHOP}.customer.Customer"


def test_mapped_superclass_and_embeddables_get_no_repository(shop_dir: Path) -> None:
    env = _shop_env(shop_dir)
    generated = ModelProcessor(env).process(0)
    assert f"{SHOP}.inherit.SuperEntityModel" not in generated
    assert f"{SHOP}.inherit.SuperEntityRepository_" not in generated
    assert f"{SHOP}.customer.AddressRepository_" not in generated
    assert f"{SHOP}.customer.AddressModel" in generated


def test_output_is_deterministic(shop_dir: Path) -> None:
    first = _shop_env(shop_dir)
    second = _shop_env(shop_dir)
    ModelProcessor(first).process(0)
    ModelProcessor(second).process(0)
    assert isinstance(first.filer, MemoryFiler) and isinstance(second.filer, MemoryFiler)
    assert first.filer.files == second.filer.files


def test_processing_a_round_again_writes_nothing(shop_dir: Path) -> None:
    env = _shop_env(shop_dir)
    processor = ModelProcessor(env)
    processor.process(0)

    assert processor.process(0) == []
    assert processor.process() == []
    assert env.error_count == 0


def test_registry_tracks_every_file(shop_dir: Path) -> None:
    env = _shop_env(shop_dir)
    processor = ModelProcessor(env)
    generated = processor.process(0)
    assert processor.registry == set(generated)
    assert set(env.filer.created) == set(generated)


# ###############
# Rounds
# ###############


def test_later_round_writes_only_new_models_and_repositories() -> None:
    sources = SourceSet()
    sources.add_source("package p; @jakarta.persistence.Entity class A { @jakarta.persistence.Id Long id; }")
    sources.add_source(
        "package p; @jakarta.persistence.Entity class B { @jakarta.persistence.Id Long id; A parent; }",
        round_number=1,
    )
    env = _env(sources)
    processor = ModelProcessor(env)

    first = processor.process()
    second = processor.process()

    assert first[0] == "p.AModel"
    assert f"{API}.Criteria" in first
    assert second == ["p.BModel", "p.BRepository_"]
    # The model of B navigates to A through the model of the earlier round.
    assert "public AModel.Join_ joinParent()" in _text(env, "p.BModel")


def test_round_without_entities_writes_nothing() -> None:
    sources = SourceSet.from_mapping({"p/A.java": "package p; class A {}"})
    env = _env(sources)
    assert ModelProcessor(env).process(0) == []
    assert env.filer.created == {}


# ###############
# Options
# ###############


def test_add_repository_false(shop_dir: Path) -> None:
    env = _shop_env(shop_dir, addRepository="false")
    generated = ModelProcessor(env).process(0)
    assert not any(name.endswith("Repository_") for name in generated)
    assert f"{API}.Repository" in generated


def test_derive_metamodel_false_uses_only_existing_companions(shop_dir: Path) -> None:
    env = _shop_env(shop_dir, deriveMetamodel="false")
    generated = ModelProcessor(env).process(0)
    models = [name for name in generated if name.endswith("Model")]
    assert models == _MODELS[:4]


def test_custom_api_package(shop_dir: Path) -> None:
    env = _shop_env(shop_dir, apiPackage="com.example.query")
    generated = ModelProcessor(env).process(0)
    assert "com.example.query.Criteria" in generated
    assert "import com.example.query.*;" in _text(env, f"{SHOP}.customer.CustomerModel")


def test_existing_api_type_is_not_written() -> None:
    sources = SourceSet.from_mapping(
        {
            "p/A.java": "package p; @jakarta.persistence.Entity class A { @jakarta.persistence.Id Long id; }",
            "api/Criteria.java": f"package {API}; public class Criteria {{}}",
        }
    )
    env = _env(sources)
    generated = ModelProcessor(env).process(0)
    assert f"{API}.Criteria" not in generated
    assert f"{API}.RootAware" in generated


def test_mappers_fall_back_to_api_package() -> None:
    sources = SourceSet.from_mapping(
        {"p/A.java": "package p; @jakarta.persistence.Entity class A { @jakarta.persistence.Id Long id; }"}
    )
    env = _env(sources)
    assert f"{API}.Mappers" in ModelProcessor(env).process(0)


def test_legacy_dialect(shop_dir: Path) -> None:
    env = _shop_env(shop_dir, legacy=True)
    ModelProcessor(env).process(0)
    model = _text(env, f"{SHOP}.customer.CustomerModel")
    assert "import javax.persistence.criteria.CriteriaBuilder;" in model
    assert "jakarta.persistence" not in model
    assert "import javax.persistence.criteria.Predicate;" in _text(env, f"{API}.Criteria")


# ###############
# Error Cases
# ###############


def test_entity_without_id_gets_no_repository(caplog: pytest.LogCaptureFixture) -> None:
    sources = SourceSet.from_mapping({"p/A.java": "package p; @jakarta.persistence.Entity class A { String name; }"})
    env = _env(sources)
    generated = ModelProcessor(env).process(0)
    assert "p.AModel" in generated
    assert "p.ARepository_" not in generated
    assert env.warning_count == 1
    assert "No id found on p.A" in caplog.text


def test_filer_refusal_is_reported(shop_dir: Path, caplog: pytest.LogCaptureFixture) -> None:
    """A model the filer refuses is reported; its repository is not written either."""
    env = _shop_env(shop_dir)
    env.filer.created[f"{SHOP}.project.IssueModel"] = None
    generated = ModelProcessor(env).process(0)

    assert f"{SHOP}.project.IssueModel" not in generated
    assert f"{SHOP}.project.IssueRepository_" not in generated
    assert f"{SHOP}.project.ProjectModel" in generated
    assert env.error_count == 1
    assert "Problem opening file to write" in caplog.text


def test_unexpected_failure_never_escapes(shop_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def _explode(self: ModelWriter, entity: object) -> str:
        raise RuntimeError("boom")

    monkeypatch.setattr(ModelWriter, "render", _explode)
    env = _shop_env(shop_dir)
    assert ModelProcessor(env).process(0) == []
    assert env.error_count == 1


def test_source_errors_do_not_stop_generation() -> None:
    sources = SourceSet.from_mapping(
        {
            "p/Broken.java": "package p; class Broken {",
            "p/A.java": "package p; @jakarta.persistence.Entity class A { @jakarta.persistence.Id Long id; }",
        }
    )
    env = _env(sources)
    assert "p.AModel" in ModelProcessor(env).process(0)
    assert len(sources.errors) == 1


# ###############
# Generated Content
# ###############


def test_repository_mixes_in_applicable_traits(shop_dir: Path) -> None:
    env = _shop_env(shop_dir)
    ModelProcessor(env).process(0)

    customer = _text(env, f"{SHOP}.customer.CustomerRepository_")
    assert (
        "public interface CustomerRepository_ extends Repository<Long, Customer, CustomerModel.Root_>, "
        "Audit<Long, Customer>, Pageable<CustomerModel.Root_> {"
    ) in customer
    assert "import com.example.shop.repo.Audit;" in customer

    issue = _text(env, f"{SHOP}.project.IssueRepository_")
    assert "extends Repository<Long, Issue, IssueModel.Root_>, Pageable<IssueModel.Root_> {" in issue
    assert "Audit" not in issue


def test_treat_methods_for_descendants(shop_dir: Path) -> None:
    env = _shop_env(shop_dir)
    ModelProcessor(env).process(0)
    model = _text(env, f"{SHOP}.inherit.RootEntityModel")
    assert "public SpecialEntityModel.Root_ asSpecialEntity() {" in model
    assert "public SpecialEntityModel.Join_ asSpecialEntity() {" in model
    assert "public SpecialEntityModel.Path_ asSpecialEntity() {" in model
    assert "asRootEntity" not in _text(env, f"{SHOP}.inherit.SpecialEntityModel")


def test_inherited_attributes_use_the_declaring_companion(shop_dir: Path) -> None:
    env = _shop_env(shop_dir)
    ModelProcessor(env).process(0)
    model = _text(env, f"{SHOP}.inherit.SpecialEntityModel")
    assert "get().get(SuperEntity_.id)" in model
    assert "get().get(SpecialEntity_.special)" in model
    assert "((Root<RootEntity>) (Root<?>) get()).get(RootEntity_.tags)" in model
    assert "((Join<?, RootEntity>) (Join<?, ?>) get()).get(RootEntity_.tags)" in model


def test_mappers_for_mappable_records(shop_dir: Path) -> None:
    env = _shop_env(shop_dir)
    ModelProcessor(env).process(0)
    mappers = _text(env, f"{SHOP}.dto.Mappers")
    assert mappers.startswith(f"package {SHOP}.dto;\n")
    assert "Mapper<E, R, CustomerSummary> customerSummary(" in mappers
    assert "Criteria.Selector<E, R, String> e1, Criteria.Selector<E, R, Long> e2)" in mappers
    assert "Criteria.Selector<E, R, String> e1, Criteria.Selector<E, R, Long> e2, Grouping<E, R> grouping)" in mappers


def _nested_class(text: str, class_name: str) -> str:
    start = text.index(f"public static class {class_name} ")
    end = text.find("public static class ", start + 1)
    return text[start:end] if end >= 0 else text[start:]


def test_customer_joins_its_organizations(shop_dir: Path) -> None:
    env = _shop_env(shop_dir)
    ModelProcessor(env).process(0)
    root = _nested_class(_text(env, f"{SHOP}.customer.CustomerModel"), "Root_")
    assert "public OrganizationModel.Join_ joinOrganizations() {" in root
    assert "return new OrganizationModel.Join_(() -> get().join(Customer_.organizations), query(), builder());" in root
    assert (
        "public Criteria.CollectionExp<Organization, List<Organization>, Expression<List<Organization>>> "
        "getOrganizations() {"
    ) in root


def test_embedded_paths_reach_the_zip_code(shop_dir: Path) -> None:
    env = _shop_env(shop_dir)
    ModelProcessor(env).process(0)
    organization = _nested_class(_text(env, f"{SHOP}.customer.OrganizationModel"), "Join_")
    assert "public AddressModel.Path_ getAddress() {" in organization
    assert "return new AddressModel.Path_(() -> get().get(Organization_.address), query(), builder());" in organization

    address = _nested_class(_text(env, f"{SHOP}.customer.AddressModel"), "Path_")
    assert "public ZipCodeModel.Path_ getZipCode() {" in address
    assert "join" not in address

    zip_code = _nested_class(_text(env, f"{SHOP}.customer.ZipCodeModel"), "Path_")
    assert "public Criteria.StringPath getCode() {" in zip_code
    assert "return new Criteria.StringPath(() -> get().get(ZipCode_.code), builder());" in zip_code


def test_inherited_id_types_the_repository(shop_dir: Path) -> None:
    env = _shop_env(shop_dir)
    ModelProcessor(env).process(0)
    repository = _text(env, f"{SHOP}.inherit.RootEntityRepository_")
    assert (
        "public interface RootEntityRepository_ extends Repository<Long, RootEntity, RootEntityModel.Root_>, "
        "Audit<Long, RootEntity>, Pageable<RootEntityModel.Root_> {\n"
    ) in repository
    assert "return RootEntityModel.root();" in repository
