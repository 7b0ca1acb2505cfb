# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Minimal placeholder templates for generated Java source.

Placeholders look like ``$Name$``. Binding is plain text splicing: a
multi-line value is indented to the column of its placeholder, and
placeholders that were never bound stay in the output verbatim.
"""

from __future__ import annotations

import re
import textwrap
from collections.abc import Mapping

# ###############
# Public Interface
# ###############

INDENT_WIDTH = 4


class Template:
    """An immutable piece of template text."""

    def __init__(self, text: str) -> None:
        self._text = text

    @classmethod
    def of(cls, text: str) -> Template:
        """Create a template from a literal, dedented, without its leading newline."""
        text = textwrap.dedent(text)
        if text.startswith("\n"):
            text = text[1:]
        return cls(text)

    @property
    def text(self) -> str:
        return self._text

    def __str__(self) -> str:
        return self._text

    def bind(self, name: str | Mapping[str, object], value: object = None) -> Template:
        """Return a new template with placeholders substituted.

        Args:
            name: A placeholder name (``"$Name$"`` or ``"Name"``), or a mapping
                of names to values.
            value: The value when a single name is given. Templates are
                rendered to their text; anything else goes through ``str``.
        """
        bindings = dict(name) if isinstance(name, Mapping) else {name: value}
        values = {_placeholder(key): _render(val) for key, val in bindings.items()}

        def _substitute(match: re.Match[str]) -> str:
            replacement = values.get(match.group(0))
            if replacement is None:
                return match.group(0)
            line_start = self._text.rfind("\n", 0, match.start()) + 1
            before = self._text[line_start : match.start()]
            prefix = before[: len(before) - len(before.lstrip())]
            return replacement.replace("\n", "\n" + prefix)

        substituted = _PLACEHOLDER.sub(_substitute, self._text)
        return Template(_strip_blank_line_indent(substituted))

    def indent(self, level: int) -> str:
        """Return the text shifted so its first non-blank line starts at column ``4 * level``."""
        lines = self._text.split("\n")
        first = next((line for line in lines if line.strip()), "")
        delta = INDENT_WIDTH * level - (len(first) - len(first.lstrip(" ")))
        shifted = []
        for line in lines:
            if not line.strip():
                shifted.append("")
            elif delta >= 0:
                shifted.append(" " * delta + line)
            else:
                leading = len(line) - len(line.lstrip(" "))
                shifted.append(line[min(-delta, leading) :])
        return "\n".join(shifted)


def placeholders(text: str) -> list[str]:
    """Return the placeholders left in *text*, in order of appearance."""
    return _PLACEHOLDER.findall(text)


# ################
# Implementation
# ################

_PLACEHOLDER = re.compile(r"\$[A-Za-z_]\w*\$")


def _placeholder(name: str) -> str:
    return name if name.startswith("$") else f"${name}$"


def _render(value: object) -> str:
    text = value.text if isinstance(value, Template) else str(value)
    return text.rstrip("\n")


def _strip_blank_line_indent(text: str) -> str:
    return "\n".join(line if line.strip() else "" for line in text.split("\n"))
