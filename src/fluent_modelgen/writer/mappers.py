# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Writer for the ``Mappers`` class: typed result mappers for query projections.

``Mappers`` carries a fixed set of single-value result records and, for each
record type annotated ``@Mappable``, a pair of factory methods taking one
selector per record component. It lives in the common package of the
mappable types, or in the API package when there are none.
"""

from __future__ import annotations

from collections.abc import Sequence

from fluent_modelgen.host.environment import HostEnvironment
from fluent_modelgen.host.filer import FilerError
from fluent_modelgen.model.entities import MappableType
from fluent_modelgen.writer.imports import ImportBuilder
from fluent_modelgen.writer.source import compose, generated_annotation, write_source
from fluent_modelgen.writer.template import Template

# ###############
# Public Interface
# ###############

MAPPERS = "Mappers"


def common_package(qualified_names: Sequence[str], default: str) -> str:
    """Return the longest package prefix shared by all *qualified_names*.

    Returns *default* when there are no names or they share no package.
    """
    packages = [name.rsplit(".", 1)[0].split(".") if "." in name else [] for name in qualified_names]
    if not packages:
        return default
    common: list[str] = []
    for segments in zip(*packages):
        if any(segment != segments[0] for segment in segments):
            break
        common.append(segments[0])
    return ".".join(common) or default


class MappersWriter:
    """Renders and writes the ``Mappers`` class.

    Args:
        env: The host environment.
        registry: Qualified names generated so far in the session.
        mappables: Mappable record types, in discovery order.
    """

    def __init__(self, env: HostEnvironment, registry: set[str], mappables: Sequence[MappableType]) -> None:
        self._env = env
        self._registry = registry
        self._mappables = mappables
        self.package = common_package([m.qualified_name for m in mappables], env.options.api_package)

    @property
    def qualified_name(self) -> str:
        return f"{self.package}.{MAPPERS}"

    def write(self) -> bool:
        """Write ``Mappers`` unless it already exists; return False when skipped or failed."""
        name = self.qualified_name
        if name in self._registry or self._env.reader.resolve(name) is not None:
            self._env.debug("Skip api class %s", name)
            return False
        try:
            write_source(self._env, name, self.render())
        except (FilerError, OSError) as exc:
            self._env.error("Problem opening file to write %s class: %s", name, exc)
            return False
        self._registry.add(name)
        return True

    def render(self) -> str:
        imports = ImportBuilder(self.package, legacy=self._env.legacy, own_type=MAPPERS)
        api = self._env.options.api_package
        query = self._env.options.query_package
        bindings = {
            "Generated": generated_annotation(imports),
            "Arrays": imports.add("java.util.Arrays"),
            "Criteria": imports.add(f"{api}.Criteria"),
            "RootAware": imports.add(f"{api}.RootAware"),
            "Mapper": imports.add(f"{query}.Mapper"),
            "Selector": imports.add(f"{query}.Selector"),
            "Grouping": imports.add(f"{query}.Grouping"),
            "BigDecimal": imports.add("java.math.BigDecimal"),
            "Date": imports.add("java.util.Date"),
            "LocalDate": imports.add("java.time.LocalDate"),
            "LocalDateTime": imports.add("java.time.LocalDateTime"),
        }
        methods = [self._mapper_methods(mappable, imports, bindings) for mappable in self._mappables]
        bindings["MapperMethods"] = "".join("\n\n" + method.rstrip("\n") for method in methods)
        return compose(imports, Template.of(_MAPPERS).bind(bindings).text)

    def _mapper_methods(self, mappable: MappableType, imports: ImportBuilder, names: dict[str, str]) -> str:
        simple = mappable.simple_name
        arguments = ", ".join(
            f"{names['Criteria']}.Selector<E, R, {imports.add(component)}> e{index}"
            for index, component in enumerate(mappable.component_types, start=1)
        )
        selectors = ", ".join(
            f"{names['Selector']}.of(e{index})" for index in range(1, len(mappable.component_types) + 1)
        )
        grouping = f"{names['Grouping']}<E, R> grouping"
        grouping_arguments = f"{arguments}, {grouping}" if arguments else grouping
        return (
            Template.of(_MAPPER_METHODS)
            .bind(names)
            .bind(
                {
                    "Dto": imports.add(mappable.qualified_name),
                    "method": simple[:1].lower() + simple[1:],
                    "Arguments": arguments,
                    "GroupingArguments": grouping_arguments,
                    "Selectors": selectors,
                }
            )
            .text
        )


# ################
# Implementation
# ################

_MAPPERS = """
    $Generated$
    public abstract class Mappers {

        public record IntegerResult(Integer value) { }
        public record LongResult(Long value) { }
        public record StringResult(String value) { }
        public record BigDecimalResult($BigDecimal$ value) { }
        public record DateResult($Date$ value) { }
        public record LocalDateResult($LocalDate$ value) { }
        public record LocalDateTimeResult($LocalDateTime$ value) { }

        public static <E, R extends $RootAware$<E>> $Mapper$<E, R, IntegerResult> integerResult(
                $Criteria$.Selector<E, R, Integer> e1) {
            return $Mapper$.construct(IntegerResult.class, $Arrays$.asList($Selector$.of(e1)), $Grouping$.empty());
        }

        public static <E, R extends $RootAware$<E>> $Mapper$<E, R, LongResult> longResult(
                $Criteria$.Selector<E, R, Long> e1) {
            return $Mapper$.construct(LongResult.class, $Arrays$.asList($Selector$.of(e1)), $Grouping$.empty());
        }

        public static <E, R extends $RootAware$<E>> $Mapper$<E, R, StringResult> stringResult(
                $Criteria$.Selector<E, R, String> e1) {
            return $Mapper$.construct(StringResult.class, $Arrays$.asList($Selector$.of(e1)), $Grouping$.empty());
        }

        public static <E, R extends $RootAware$<E>> $Mapper$<E, R, BigDecimalResult> bigDecimalResult(
                $Criteria$.Selector<E, R, $BigDecimal$> e1) {
            return $Mapper$.construct(BigDecimalResult.class, $Arrays$.asList($Selector$.of(e1)), $Grouping$.empty());
        }

        public static <E, R extends $RootAware$<E>> $Mapper$<E, R, DateResult> dateResult(
                $Criteria$.Selector<E, R, $Date$> e1) {
            return $Mapper$.construct(DateResult.class, $Arrays$.asList($Selector$.of(e1)), $Grouping$.empty());
        }

        public static <E, R extends $RootAware$<E>> $Mapper$<E, R, LocalDateResult> localDateResult(
                $Criteria$.Selector<E, R, $LocalDate$> e1) {
            return $Mapper$.construct(LocalDateResult.class, $Arrays$.asList($Selector$.of(e1)), $Grouping$.empty());
        }

        public static <E, R extends $RootAware$<E>> $Mapper$<E, R, LocalDateTimeResult> localDateTimeResult(
                $Criteria$.Selector<E, R, $LocalDateTime$> e1) {
            return $Mapper$.construct(LocalDateTimeResult.class, $Arrays$.asList($Selector$.of(e1)), $Grouping$.empty());
        }$MapperMethods$
    }
    """

_MAPPER_METHODS = """
    public static <E, R extends $RootAware$<E>> $Mapper$<E, R, $Dto$> $method$(
            $Arguments$) {
        return $Mapper$.construct($Dto$.class, $Arrays$.asList($Selectors$), $Grouping$.empty());
    }

    public static <E, R extends $RootAware$<E>> $Mapper$<E, R, $Dto$> $method$(
            $GroupingArguments$) {
        return $Mapper$.construct($Dto$.class, $Arrays$.asList($Selectors$), grouping);
    }
    """
