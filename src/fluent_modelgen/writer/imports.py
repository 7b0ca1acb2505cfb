# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Per-file import bookkeeping for generated sources.

The writers work with qualified names everywhere; this is the one place where
a qualified name is shortened. It is also the one place where the persistence
namespace is rewritten for hosts on the legacy ``javax`` API.
"""

from __future__ import annotations

import re

from fluent_modelgen.model.types import JAVA_LANG_TYPES

# ###############
# Public Interface
# ###############

CURRENT_NAMESPACE = "jakarta.persistence."
LEGACY_NAMESPACE = "javax.persistence."


def to_dialect(qualified_name: str, legacy: bool) -> str:
    """Rewrite a persistence API name into the current or the legacy namespace."""
    if legacy and qualified_name.startswith(CURRENT_NAMESPACE):
        return LEGACY_NAMESPACE + qualified_name[len(CURRENT_NAMESPACE) :]
    if not legacy and qualified_name.startswith(LEGACY_NAMESPACE):
        return CURRENT_NAMESPACE + qualified_name[len(LEGACY_NAMESPACE) :]
    return qualified_name


class ImportBuilder:
    """Collects the imports of one generated file.

    Args:
        self_package: Package of the file being generated; its types are
            never imported.
        legacy: Emit persistence names in the ``javax`` namespace.
        own_type: Simple name of the top-level type declared in the file. It
            is claimed up front, so a type of another package with the same
            simple name stays qualified.
    """

    def __init__(self, self_package: str, legacy: bool = False, own_type: str | None = None) -> None:
        self.self_package = self_package
        self.legacy = legacy
        self._names: dict[str, str] = {}
        self._imports: set[str] = set()
        self._wildcards: set[str] = set()
        if own_type is not None:
            self._names[own_type] = f"{self_package}.{own_type}" if self_package else own_type

    def add(self, qualified_name: str) -> str:
        """Record *qualified_name* and return the name to write in the source.

        Returns the simple name when it is unambiguous in this file, the
        qualified name otherwise. Array brackets are carried through, and every
        name inside type arguments is recorded in turn. ``pkg.*`` adds a
        wildcard import and returns an empty string.
        """
        if "<" in qualified_name:
            return _TYPE_NAME.sub(self._add_match, qualified_name)
        name = to_dialect(qualified_name, legacy=False)
        if name.endswith("[]"):
            return self.add(name[:-2]) + "[]"
        if name.endswith(".*"):
            package = name[:-2]
            if package != self.self_package:
                self._wildcards.add(package)
            return ""
        if "." not in name:
            return name
        package, simple = name.rsplit(".", 1)
        recorded = self._names.get(simple)
        if recorded == name:
            return simple
        if recorded is None and (package == "java.lang" or simple not in JAVA_LANG_TYPES):
            self._names[simple] = name
            if package not in ("java.lang", self.self_package):
                self._imports.add(name)
            return simple
        return self._render(name)

    def emit(self) -> str:
        """Return the sorted, de-duplicated import block (no trailing newline)."""
        lines = {f"import {self._render(name)};" for name in self._imports}
        lines.update(f"import {self._render(package)}.*;" for package in self._wildcards)
        return "\n".join(sorted(lines))

    def _render(self, qualified_name: str) -> str:
        return to_dialect(qualified_name, self.legacy)

    def _add_match(self, match: re.Match[str]) -> str:
        word = match.group(0)
        return word if word in _BOUND_KEYWORDS else self.add(word)


# ################
# Implementation
# ################

_TYPE_NAME = re.compile(r"[A-Za-z_$][\w$]*(?:\.[A-Za-z_$][\w$]*)*")
_BOUND_KEYWORDS = frozenset({"extends", "super"})
