# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Writer for the shared API package.

The API package holds the interfaces every generated model and repository
builds on: ``BuilderAware``, ``QueryAware``, ``Typed``, ``RootAware``,
``RootSource``, ``Repository`` and ``Criteria``, the expression wrappers of the
fluent DSL. Their text does not depend on the scanned entities. A file is
skipped when the source reader already knows its type or when it was
generated earlier in the session.
"""

from __future__ import annotations

from fluent_modelgen.host.environment import HostEnvironment
from fluent_modelgen.host.filer import FilerError
from fluent_modelgen.writer.imports import ImportBuilder
from fluent_modelgen.writer.source import compose, generated_annotation, write_source
from fluent_modelgen.writer.template import Template

# ###############
# Public Interface
# ###############

BUILDER_AWARE = "BuilderAware"
QUERY_AWARE = "QueryAware"
TYPED = "Typed"
ROOT_AWARE = "RootAware"
ROOT_SOURCE = "RootSource"
REPOSITORY = "Repository"
CRITERIA = "Criteria"

API_TYPES: tuple[str, ...] = (BUILDER_AWARE, QUERY_AWARE, TYPED, ROOT_AWARE, ROOT_SOURCE, REPOSITORY, CRITERIA)


class ApiWriter:
    """Writes the API package once per session.

    Args:
        env: The host environment.
        registry: Qualified names generated so far in the session; updated
            with every file written.
    """

    def __init__(self, env: HostEnvironment, registry: set[str]) -> None:
        self._env = env
        self._registry = registry
        self.package = env.options.api_package

    def write_all(self) -> list[str]:
        """Write every API type that does not exist yet; return the names written."""
        written = []
        for name in API_TYPES:
            if self.write(name):
                written.append(f"{self.package}.{name}")
        return written

    def write(self, name: str) -> bool:
        """Write the API type *name*; return False when skipped or failed."""
        qualified_name = f"{self.package}.{name}"
        if qualified_name in self._registry or self._env.reader.resolve(qualified_name) is not None:
            self._env.debug("Skip api class %s", qualified_name)
            return False
        imports = ImportBuilder(self.package, legacy=self._env.legacy, own_type=name)
        for dependency in _API_IMPORTS[name]:
            imports.add(dependency)
        body = Template.of(_API_BODIES[name]).bind("Generated", generated_annotation(imports))
        try:
            write_source(self._env, qualified_name, compose(imports, body.text))
        except (FilerError, OSError) as exc:
            self._env.error("Problem opening file to write %s class: %s", qualified_name, exc)
            return False
        self._registry.add(qualified_name)
        return True


# ################
# Implementation
# ################

_CRITERIA = "jakarta.persistence.criteria."

_API_IMPORTS: dict[str, tuple[str, ...]] = {
    BUILDER_AWARE: (_CRITERIA + "CriteriaBuilder",),
    QUERY_AWARE: (_CRITERIA + "AbstractQuery",),
    TYPED: (),
    ROOT_AWARE: (_CRITERIA + "AbstractQuery", _CRITERIA + "Root", "java.util.function.Supplier"),
    ROOT_SOURCE: (_CRITERIA + "AbstractQuery", _CRITERIA + "CriteriaBuilder", _CRITERIA + "Root"),
    REPOSITORY: ("java.io.Serializable",),
    CRITERIA: (
        _CRITERIA + "CriteriaBuilder",
        _CRITERIA + "Expression",
        _CRITERIA + "Order",
        _CRITERIA + "Path",
        _CRITERIA + "Predicate",
        "java.math.BigDecimal",
        "java.math.BigInteger",
        "java.util.Collection",
        "java.util.Map",
        "java.util.Objects",
        "java.util.function.Supplier",
        "java.util.regex.Pattern",
    ),
}

_API_BODIES: dict[str, str] = {
    BUILDER_AWARE: """
        $Generated$
        public interface BuilderAware {
            CriteriaBuilder builder();
        }
        """,
    QUERY_AWARE: """
        $Generated$
        public interface QueryAware {
            AbstractQuery<?> query();
        }
        """,
    TYPED: """
        $Generated$
        public interface Typed<E> {
            Class<E> type();
        }
        """,
    ROOT_AWARE: """
        $Generated$
        public interface RootAware<E> extends Supplier<Root<E>>, BuilderAware, QueryAware, Typed<E> {
            RootAware<E> with(Root<E> root, AbstractQuery<?> query);
        }
        """,
    ROOT_SOURCE: """
        $Generated$
        public interface RootSource<E, R extends RootAware<E>> {
            R root(Root<E> root, AbstractQuery<?> query, CriteriaBuilder builder);
            Class<E> rootClass();
        }
        """,
    REPOSITORY: """
        $Generated$
        public interface Repository<PK extends Serializable, E, R extends RootAware<E>> {
            RootSource<E, R> rootSource();
        }
        """,
    CRITERIA: r"""
        $Generated$
        public class Criteria {

            public static class AnyPath<E> implements AnyExpression<E, Path<E>> {
                private final Supplier<Path<E>> path;
                private final CriteriaBuilder builder;
                public AnyPath(Supplier<Path<E>> path, CriteriaBuilder builder) {
                    this.path = path;
                    this.builder = builder;
                }
                @Override public Path<E> get() { return path.get(); }
                @Override public CriteriaBuilder builder() { return builder; }
            }

            public static class AnyExp<E> implements AnyExpression<E, Expression<E>> {
                private final Supplier<Expression<E>> expression;
                private final CriteriaBuilder builder;
                public AnyExp(Supplier<Expression<E>> expression, CriteriaBuilder builder) {
                    this.expression = expression;
                    this.builder = builder;
                }
                @Override public Expression<E> get() { return expression.get(); }
                @Override public CriteriaBuilder builder() { return builder; }
            }

            public static class ComparablePath<E extends Comparable<? super E>>
                    extends AnyPath<E> implements ComparableExpression<E, Path<E>> {
                public ComparablePath(Supplier<Path<E>> path, CriteriaBuilder builder) {
                    super(path, builder);
                }
            }

            public static class ComparableExp<E extends Comparable<? super E>>
                    extends AnyExp<E> implements ComparableExpression<E, Expression<E>> {
                public ComparableExp(Supplier<Expression<E>> expression, CriteriaBuilder builder) {
                    super(expression, builder);
                }
            }

            public static class StringPath extends AnyPath<String> implements StringExpression<Path<String>> {
                public StringPath(Supplier<Path<String>> path, CriteriaBuilder builder) {
                    super(path, builder);
                }
            }

            public static class StringExp extends AnyExp<String> implements StringExpression<Expression<String>> {
                public StringExp(Supplier<Expression<String>> expression, CriteriaBuilder builder) {
                    super(expression, builder);
                }
            }

            public static class BooleanPath extends AnyPath<Boolean> implements BooleanExpression<Path<Boolean>> {
                public BooleanPath(Supplier<Path<Boolean>> path, CriteriaBuilder builder) {
                    super(path, builder);
                }
            }

            public static class BooleanExp extends AnyExp<Boolean> implements BooleanExpression<Expression<Boolean>> {
                public BooleanExp(Supplier<Expression<Boolean>> expression, CriteriaBuilder builder) {
                    super(expression, builder);
                }
            }

            public static class NumberPath<T extends Number> extends AnyPath<T> implements NumberExpression<T, Path<T>> {
                public NumberPath(Supplier<Path<T>> path, CriteriaBuilder builder) {
                    super(path, builder);
                }
            }

            public static class NumberExp<T extends Number> extends AnyExp<T> implements NumberExpression<T, Expression<T>> {
                public NumberExp(Supplier<Expression<T>> expression, CriteriaBuilder builder) {
                    super(expression, builder);
                }
            }

            public static class AnyCollectionExp<C extends Collection<?>, T extends Expression<C>>
                    implements AnyCollectionExpression<C, T> {
                private final Supplier<T> expression;
                private final CriteriaBuilder builder;
                public AnyCollectionExp(Supplier<T> expression, CriteriaBuilder builder) {
                    this.expression = expression;
                    this.builder = builder;
                }
                @Override public T get() { return expression.get(); }
                @Override public CriteriaBuilder builder() { return builder; }
            }

            public static class CollectionExp<E, C extends Collection<E>, T extends Expression<C>>
                    extends AnyCollectionExp<C, T> implements CollectionExpression<E, C, T> {
                public CollectionExp(Supplier<T> expression, CriteriaBuilder builder) {
                    super(expression, builder);
                }
            }

            public static class MapExp<K, V> implements MapExpression<K, V, Expression<Map<K, V>>> {
                private final Supplier<Expression<Map<K, V>>> expression;
                private final CriteriaBuilder builder;
                public MapExp(Supplier<Expression<Map<K, V>>> expression, CriteriaBuilder builder) {
                    this.expression = expression;
                    this.builder = builder;
                }
                @Override public Expression<Map<K, V>> get() { return expression.get(); }
                @Override public CriteriaBuilder builder() { return builder; }
            }

            // ------------------------------------------------------------------------

            public interface AnyExpression<E, T extends Expression<E>> extends Supplier<T>, BuilderAware {
                T get();
                default Predicate eq(Expression<?> y) { return builder().equal(get(), y); }
                default Predicate eq(Object y) { return absent(y) ? null : builder().equal(get(), y); }
                default Predicate ne(Expression<?> y) { return builder().notEqual(get(), y); }
                default Predicate ne(Object y) { return absent(y) ? null : builder().notEqual(get(), y); }
                default Predicate isNull() { return builder().isNull(get()); }
                default Predicate nonNull() { return builder().isNotNull(get()); }
                default Predicate in(Collection<?> values) {
                    return (Objects.isNull(values) || values.isEmpty()) ? null : get().in(values);
                }
                default Predicate in(Expression<?>... values) { return get().in(values); }
                default Order asc() { return builder().asc(get()); }
                default Order desc() { return builder().desc(get()); }
                default NumberExp<Long> count() { return new NumberExp<>(() -> builder().count(get()), builder()); }
                default NumberExp<Long> countDistinct() { return new NumberExp<>(() -> builder().countDistinct(get()), builder()); }
            }

            public interface ComparableExpression<E extends Comparable<? super E>, T extends Expression<E>>
                    extends AnyExpression<E, T> {
                default Predicate gt(Expression<? extends E> y) { return builder().greaterThan(get(), y); }
                default Predicate gt(E y) { return absent(y) ? null : builder().greaterThan(get(), y); }
                default Predicate ge(Expression<? extends E> y) { return builder().greaterThanOrEqualTo(get(), y); }
                default Predicate ge(E y) { return absent(y) ? null : builder().greaterThanOrEqualTo(get(), y); }
                default Predicate lt(Expression<? extends E> y) { return builder().lessThan(get(), y); }
                default Predicate lt(E y) { return absent(y) ? null : builder().lessThan(get(), y); }
                default Predicate le(Expression<? extends E> y) { return builder().lessThanOrEqualTo(get(), y); }
                default Predicate le(E y) { return absent(y) ? null : builder().lessThanOrEqualTo(get(), y); }
                default Predicate between(Expression<? extends E> x, Expression<? extends E> y) {
                    return builder().between(get(), x, y);
                }
                default Predicate between(E x, E y) {
                    if (absent(x) && absent(y)) {
                        return null;
                    } else if (absent(y)) {
                        return ge(x);
                    } else if (absent(x)) {
                        return le(y);
                    } else {
                        return builder().between(get(), x, y);
                    }
                }
                default ComparableExp<E> max() { return new ComparableExp<>(() -> builder().greatest(get()), builder()); }
                default ComparableExp<E> min() { return new ComparableExp<>(() -> builder().least(get()), builder()); }
            }

            public interface StringExpression<T extends Expression<String>> extends ComparableExpression<String, T> {
                default Predicate like(Expression<String> pattern) { return builder().like(get(), pattern, '\\'); }
                default Predicate like(String pattern) { return absent(pattern) ? null : builder().like(get(), escaped(pattern), '\\'); }
                default Predicate likePartial(String pattern) { return absent(pattern) ? null : builder().like(get(), escapedPartial(pattern), '\\'); }
                default Predicate notLike(Expression<String> pattern) { return builder().notLike(get(), pattern, '\\'); }
                default Predicate notLike(String pattern) { return absent(pattern) ? null : builder().notLike(get(), escaped(pattern), '\\'); }
                default Predicate notLikePartial(String pattern) { return absent(pattern) ? null : builder().notLike(get(), escapedPartial(pattern), '\\'); }
                default StringExp concat(String y) { return new StringExp(() -> builder().concat(get(), y), builder()); }
                default StringExp concat(Expression<String> y) { return new StringExp(() -> builder().concat(get(), y), builder()); }
                default StringExp substring(int from) { return new StringExp(() -> builder().substring(get(), from), builder()); }
                default StringExp substring(int from, int len) { return new StringExp(() -> builder().substring(get(), from, len), builder()); }
                default StringExp trim() { return new StringExp(() -> builder().trim(get()), builder()); }
                default StringExp lower() { return new StringExp(() -> builder().lower(get()), builder()); }
                default StringExp upper() { return new StringExp(() -> builder().upper(get()), builder()); }
                default NumberExp<Integer> length() { return new NumberExp<>(() -> builder().length(get()), builder()); }

                Pattern ESCAPE_PATTERN = Pattern.compile("([%_\\\\])");
                private static String escaped(String str) {
                    return ESCAPE_PATTERN.matcher(str).replaceAll("\\\\$1") + "%";
                }
                private static String escapedPartial(String str) {
                    return "%" + ESCAPE_PATTERN.matcher(str).replaceAll("\\\\$1") + "%";
                }
            }

            public interface BooleanExpression<T extends Expression<Boolean>> extends ComparableExpression<Boolean, T> {
                default Predicate isTrue() { return builder().isTrue(get()); }
                default Predicate isFalse() { return builder().isFalse(get()); }
            }

            public interface NumberExpression<E extends Number, T extends Expression<E>> extends AnyExpression<E, T> {
                default Predicate gt(Expression<? extends Number> y) { return builder().gt(get(), y); }
                default Predicate gt(Number y) { return Objects.isNull(y) ? null : builder().gt(get(), y); }
                default Predicate ge(Expression<? extends Number> y) { return builder().ge(get(), y); }
                default Predicate ge(Number y) { return Objects.isNull(y) ? null : builder().ge(get(), y); }
                default Predicate lt(Expression<? extends Number> y) { return builder().lt(get(), y); }
                default Predicate lt(Number y) { return Objects.isNull(y) ? null : builder().lt(get(), y); }
                default Predicate le(Expression<? extends Number> y) { return builder().le(get(), y); }
                default Predicate le(Number y) { return Objects.isNull(y) ? null : builder().le(get(), y); }
                default Predicate between(Number x, Number y) {
                    if (Objects.isNull(x) && Objects.isNull(y)) {
                        return null;
                    } else if (Objects.isNull(y)) {
                        return ge(x);
                    } else if (Objects.isNull(x)) {
                        return le(y);
                    } else {
                        return builder().and(ge(x), le(y));
                    }
                }
                default NumberExp<E> max() { return new NumberExp<>(() -> builder().max(get()), builder()); }
                default NumberExp<E> min() { return new NumberExp<>(() -> builder().min(get()), builder()); }
                default NumberExp<E> sum() { return new NumberExp<>(() -> builder().sum(get()), builder()); }
                default NumberExp<Double> avg() { return new NumberExp<>(() -> builder().avg(get()), builder()); }
                default NumberExp<E> neg() { return new NumberExp<>(() -> builder().neg(get()), builder()); }
                default NumberExp<E> abs() { return new NumberExp<>(() -> builder().abs(get()), builder()); }
                default NumberExp<Long> toLong() { return new NumberExp<>(() -> builder().toLong(get()), builder()); }
                default NumberExp<Integer> toInteger() { return new NumberExp<>(() -> builder().toInteger(get()), builder()); }
                default NumberExp<Float> toFloat() { return new NumberExp<>(() -> builder().toFloat(get()), builder()); }
                default NumberExp<Double> toDouble() { return new NumberExp<>(() -> builder().toDouble(get()), builder()); }
                default NumberExp<BigDecimal> toBigDecimal() { return new NumberExp<>(() -> builder().toBigDecimal(get()), builder()); }
                default NumberExp<BigInteger> toBigInteger() { return new NumberExp<>(() -> builder().toBigInteger(get()), builder()); }
            }

            public interface AnyCollectionExpression<C extends Collection<?>, T extends Expression<C>>
                    extends AnyExpression<C, T> {
                default Predicate isEmpty() { return builder().isEmpty(get()); }
                default Predicate isNotEmpty() { return builder().isNotEmpty(get()); }
                default NumberExp<Integer> size() { return new NumberExp<>(() -> builder().size(get()), builder()); }
            }

            public interface CollectionExpression<E, C extends Collection<E>, T extends Expression<C>>
                    extends AnyCollectionExpression<C, T> {
                default Predicate isMember(Expression<E> elem) { return builder().isMember(elem, get()); }
                default Predicate isMember(E elem) { return Objects.isNull(elem) ? null : builder().isMember(elem, get()); }
                default Predicate isNotMember(Expression<E> elem) { return builder().isNotMember(elem, get()); }
                default Predicate isNotMember(E elem) { return Objects.isNull(elem) ? null : builder().isNotMember(elem, get()); }
            }

            public interface AnyMapExpression<M extends Map<?, ?>, T extends Expression<M>> extends AnyExpression<M, T> {
            }

            public interface MapExpression<K, V, T extends Expression<Map<K, V>>> extends AnyMapExpression<Map<K, V>, T> {
            }

            public interface MapKeyPath<K> extends Supplier<Path<K>> {
                default Path<K> key() { return get(); }
            }

            public interface MapValuePath<V> extends Supplier<Path<V>> {
                default Path<V> value() { return get(); }
            }

            @FunctionalInterface
            public interface Selector<E, R extends RootAware<E>, T> {
                Expression<T> apply(R root);
            }

            private static boolean absent(Object obj) {
                if (Objects.isNull(obj)) {
                    return true;
                }
                if (obj instanceof String str) {
                    return str.isEmpty();
                }
                return false;
            }

        }
        """,
}
