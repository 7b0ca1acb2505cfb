# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Writer for ``<Target>Repository_`` interfaces."""

from __future__ import annotations

from collections.abc import Sequence

from fluent_modelgen.host.environment import HostEnvironment
from fluent_modelgen.host.filer import FilerError
from fluent_modelgen.model.entities import Entity, RepositoryTrait
from fluent_modelgen.writer.imports import ImportBuilder
from fluent_modelgen.writer.source import compose, generated_annotation, write_source
from fluent_modelgen.writer.template import Template

# ###############
# Public Interface
# ###############


def trait_clause(trait: RepositoryTrait, symbol: str, id_type: str, entity: str, root: str) -> str:
    """Return the extends-clause entry for *trait*, chosen by the trait's arity.

    One type parameter receives the model root, two receive the id and entity
    types, three receive all of them. Any other arity keeps the trait's own
    type parameter names.
    """
    if trait.arity == 1:
        arguments = [root]
    elif trait.arity == 2:
        arguments = [id_type, entity]
    elif trait.arity == 3:
        arguments = [id_type, entity, root]
    else:
        arguments = trait.type_parameters
    return f"{symbol}<{', '.join(arguments)}>" if arguments else symbol


class RepositoryWriter:
    """Renders and writes repository interfaces.

    Args:
        env: The host environment.
        traits: Repository traits known in the session, in discovery order.
    """

    def __init__(self, env: HostEnvironment, traits: Sequence[RepositoryTrait]) -> None:
        self._env = env
        self._traits = traits

    def write(self, entity: Entity) -> bool:
        """Write the repository of *entity*; return False if skipped or failed."""
        if not entity.persistence_type.is_entity:
            return False
        if entity.id_type is None:
            self._env.warning("No id found on %s; repository not generated", entity.qualified_name)
            return False
        try:
            write_source(
                self._env, entity.repository_name, self.render(entity), originating=entity.qualified_name
            )
        except (FilerError, OSError) as exc:
            self._env.error("Problem opening file to write %s class: %s", entity.repository_name, exc)
            return False
        return True

    def render(self, entity: Entity) -> str:
        """Return the complete source text of the repository of *entity*."""
        class_name = entity.simple_name + "Repository_"
        imports = ImportBuilder(entity.package_name, legacy=self._env.legacy, own_type=class_name)
        target = imports.add(entity.qualified_name)
        imports.add(f"{self._env.options.api_package}.*")
        generated = generated_annotation(imports)
        id_type = imports.add(entity.id_type or "java.io.Serializable")
        root = imports.add(entity.model_name) + ".Root_"
        traits = "".join(
            ", " + trait_clause(trait, imports.add(trait.qualified_name), id_type, target, root)
            for trait in self._traits
            if trait.applies_to(entity.qualified_name)
        )
        body = Template.of(_REPOSITORY).bind(
            {
                "Generated": generated,
                "ClassName": class_name,
                "Id": id_type,
                "Entity": target,
                "Root": root,
                "Model": imports.add(entity.model_name),
                "Traits": traits,
            }
        )
        return compose(imports, body.text)


# ################
# Implementation
# ################

_REPOSITORY = """
    $Generated$
    public interface $ClassName$ extends Repository<$Id$, $Entity$, $Root$>$Traits$ {

        default RootSource<$Entity$, $Root$> rootSource() {
            return $Model$.root();
        }
    }
    """
