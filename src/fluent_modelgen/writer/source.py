# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Assembling and writing complete generated source files."""

from __future__ import annotations

from fluent_modelgen.host.environment import HostEnvironment
from fluent_modelgen.writer.imports import ImportBuilder

# ###############
# Public Interface
# ###############

GENERATOR_NAME = "fluent_modelgen.compiler.processor.ModelProcessor"
GENERATED_ANNOTATION = "javax.annotation.processing.Generated"


def generated_annotation(imports: ImportBuilder) -> str:
    """Return the ``@Generated`` line, importing the annotation into *imports*."""
    return f'@{imports.add(GENERATED_ANNOTATION)}(value = "{GENERATOR_NAME}")'


def compose(imports: ImportBuilder, body: str) -> str:
    """Return the complete file text: package clause, imports and body.

    Trailing whitespace is stripped from every line and the file ends with a
    single newline.
    """
    parts = []
    if imports.self_package:
        parts.append(f"package {imports.self_package};")
    block = imports.emit()
    if block:
        parts.append(block)
    parts.append(body.strip("\n"))
    text = "\n\n".join(parts)
    return "\n".join(line.rstrip() for line in text.split("\n")) + "\n"


def write_source(env: HostEnvironment, qualified_name: str, text: str, originating: str | None = None) -> None:
    """Create *qualified_name* through the host filer and write *text* in one call.

    Raises:
        FilerError: If the filer refuses the file.
        OSError: If writing fails.
    """
    with env.filer.create(qualified_name, originating) as sink:
        sink.write(text.encode("utf-8"))
    env.debug("Generated %s", qualified_name)
