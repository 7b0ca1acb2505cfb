# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Generator options, read from a string map like annotation-processor options."""

from __future__ import annotations

import re
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from fluent_modelgen.gen_logging import get_logger

logger = get_logger(__name__)

# ###############
# Public Interface
# ###############

DEFAULT_API_PACKAGE = "jpa.fluent.core"
DEFAULT_QUERY_PACKAGE = "jpa.fluent.query"


class OptionsError(Exception):
    """Raised when a generator option has an invalid value."""


class GeneratorOptions(BaseModel):
    """Recognized generator options.

    Attributes:
        debug: Enables debug-level diagnostics.
        add_repository: Emit a repository interface per entity.
        derive_metamodel: Synthesize metamodel companions for persistent
            classes that have none.
        api_package: Package of the shared API interfaces.
        query_package: Package of the runtime ``Mapper``/``Selector``/``Grouping`` types.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    debug: bool = False
    add_repository: bool = Field(alias="addRepository", default=True)
    derive_metamodel: bool = Field(alias="deriveMetamodel", default=True)
    api_package: str = Field(alias="apiPackage", default=DEFAULT_API_PACKAGE)
    query_package: str = Field(alias="queryPackage", default=DEFAULT_QUERY_PACKAGE)

    @field_validator("debug", "add_repository", "derive_metamodel", mode="before")
    @classmethod
    def _parse_boolean(cls, value: object) -> bool:
        # Only a case-insensitive "true" is true, as with Boolean.parseBoolean.
        if isinstance(value, bool):
            return value
        return isinstance(value, str) and value.lower() == "true"

    @field_validator("api_package", "query_package")
    @classmethod
    def _check_package(cls, value: str) -> str:
        if not _PACKAGE_NAME.match(value):
            raise ValueError(f"'{value}' is not a valid package name")
        return value

    @classmethod
    def from_mapping(cls, options: Mapping[str, object]) -> GeneratorOptions:
        """Build options from a ``key -> value`` map.

        Unknown keys are reported at warning level and ignored.

        Raises:
            OptionsError: If a recognized option has an invalid value.
        """
        known: dict[str, object] = {}
        for key, value in options.items():
            if key in _OPTION_KEYS:
                known[key] = value
            else:
                logger.warning("Unrecognized generator option '%s' ignored", key)
        try:
            return cls.model_validate(known)
        except ValidationError as exc:
            raise OptionsError(f"Invalid generator options: {exc}") from exc


# ################
# Implementation
# ################

_PACKAGE_NAME = re.compile(r"^[A-Za-z_$][\w$]*(\.[A-Za-z_$][\w$]*)*$")

_OPTION_KEYS: frozenset[str] = frozenset(
    {"debug", "addRepository", "deriveMetamodel", "apiPackage", "queryPackage"}
)
