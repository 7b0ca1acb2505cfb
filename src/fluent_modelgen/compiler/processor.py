# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""The driver: runs the generator round by round.

Each round scans the declarations the host offers, writes a model for every
new entity and embeddable, and, once any model exists, the API package, the
``Mappers`` class and the repositories. The generation registry persists
across rounds so nothing is written twice in a session. No exception escapes
a round; every failure becomes a log record.
"""

from __future__ import annotations

import traceback

from fluent_modelgen.compiler.lexicon import Lexicon
from fluent_modelgen.compiler.metamodel import MetamodelOverlay
from fluent_modelgen.compiler.scanner import ScanResult, scan
from fluent_modelgen.host.environment import HostEnvironment
from fluent_modelgen.model.entities import Entity, MappableType, RepositoryTrait
from fluent_modelgen.model.types import PersistenceType
from fluent_modelgen.writer.api import ApiWriter
from fluent_modelgen.writer.mappers import MappersWriter
from fluent_modelgen.writer.model import ModelWriter
from fluent_modelgen.writer.repository import RepositoryWriter

# ###############
# Public Interface
# ###############


class ModelProcessor:
    """Generates fluent models, the API package and repositories for a session.

    When the ``deriveMetamodel`` option is set, the environment's reader is
    wrapped so that derived companions resolve like real ones.

    Attributes:
        registry: Qualified names of every file generated in the session.
        entities: Every entity scanned in the session, by qualified name.
        traits: Repository traits scanned in the session.
        mappables: Mappable record types scanned in the session.
    """

    def __init__(self, env: HostEnvironment) -> None:
        self._env = env
        self._overlay: MetamodelOverlay | None = None
        if env.options.derive_metamodel:
            self._overlay = MetamodelOverlay(env.reader)
            env.reader = self._overlay
        self.registry: set[str] = set()
        self.entities: dict[str, Entity] = {}
        self.traits: list[RepositoryTrait] = []
        self.mappables: list[MappableType] = []
        self._next_round = 0

    def process(self, round_number: int | None = None) -> list[str]:
        """Run one round; return the qualified names generated in it.

        Args:
            round_number: The round to process; defaults to the round after
                the previous call.
        """
        if round_number is None:
            round_number = self._next_round
        self._next_round = round_number + 1
        try:
            return self._process(round_number)
        except Exception as exc:
            self._env.error("Unexpected failure in round %d: %s", round_number, exc)
            self._env.debug("%s", traceback.format_exc())
            return []

    def scan(self, round_number: int = 0) -> ScanResult:
        """Scan round *round_number* without writing anything."""
        declarations = list(self._env.reader.root_declarations(round_number))
        if self._overlay is not None:
            declarations.extend(self._overlay.derive(declarations))
        result = scan(declarations, self._env, Lexicon(self._env.reader))
        for name, entity in result.auxiliary.items():
            self.entities.setdefault(name, entity)
        self.entities.update(result.entities)
        known_traits = {trait.qualified_name for trait in self.traits}
        self.traits.extend(trait for trait in result.traits if trait.qualified_name not in known_traits)
        known_mappables = {mappable.qualified_name for mappable in self.mappables}
        self.mappables.extend(m for m in result.mappables if m.qualified_name not in known_mappables)
        return result

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def _process(self, round_number: int) -> list[str]:
        result = self.scan(round_number)
        self._env.debug(
            "Round %d: %d entities, %d traits, %d mappables",
            round_number,
            len(result.entities),
            len(result.traits),
            len(result.mappables),
        )
        generated = self._write_models(result)
        if generated:
            generated.extend(ApiWriter(self._env, self.registry).write_all())
            mappers = MappersWriter(self._env, self.registry, self.mappables)
            if mappers.write():
                generated.append(mappers.qualified_name)
            if self._env.options.add_repository:
                generated.extend(self._write_repositories())
        return generated

    def _write_models(self, result: ScanResult) -> list[str]:
        writer = ModelWriter(self._env, self.entities)
        written = []
        for entity in result.entities.values():
            if entity.persistence_type not in _MODEL_KINDS or entity.model_name in self.registry:
                continue
            if writer.write(entity):
                self.registry.add(entity.model_name)
                written.append(entity.model_name)
        return written

    def _write_repositories(self) -> list[str]:
        writer = RepositoryWriter(self._env, self.traits)
        written = []
        for entity in self.entities.values():
            if not entity.persistence_type.is_entity or entity.model_name not in self.registry:
                continue
            if entity.repository_name in self.registry:
                continue
            if writer.write(entity):
                self.registry.add(entity.repository_name)
                written.append(entity.repository_name)
        return written


# ################
# Implementation
# ################

_MODEL_KINDS = (PersistenceType.ENTITY, PersistenceType.EMBEDDABLE)
