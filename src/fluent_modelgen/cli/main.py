# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the fluent-modelgen command-line interface."""

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path

from fluent_modelgen.compiler.processor import ModelProcessor
from fluent_modelgen.compiler.sources import Dialect, SourceSet, detect_dialect
from fluent_modelgen.gen_logging import configure_logging
from fluent_modelgen.host.environment import HostEnvironment
from fluent_modelgen.host.filer import DirectoryFiler, Filer, MemoryFiler
from fluent_modelgen.host.options import GeneratorOptions, OptionsError
from fluent_modelgen.model.entities import Entity
from fluent_modelgen.workspace.config import (
    WorkspaceConfig,
    WorkspaceConfigError,
    find_workspace_config,
    load_workspace_config,
)

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the fluent-modelgen CLI."""
    parser = argparse.ArgumentParser(
        prog="fluent-modelgen",
        description="fluent-modelgen: fluent criteria query models from JPA static metamodels",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # generate subcommand
    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate fluent models, the API package and repositories",
        description="Read Java sources and write the generated sources to the output directory.",
    )
    _add_common_arguments(generate_parser)
    generate_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output directory (default: 'output-directory' of the workspace file, or build/generated-sources)",
    )
    generate_parser.add_argument(
        "--no-repository",
        action="store_true",
        help="Do not generate repository interfaces",
    )

    # scan subcommand
    scan_parser = subparsers.add_parser(
        "scan",
        help="Print the entities found in the sources",
        description="Read Java sources and print the normalized entity registry without writing files.",
    )
    _add_common_arguments(scan_parser)

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################


@dataclass
class _Session:
    """Everything a subcommand needs once the workspace is loaded."""

    directory: Path
    config: WorkspaceConfig
    sources: SourceSet
    env: HostEnvironment


def _add_common_arguments(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Workspace directory (default: current directory)",
    )
    subparser.add_argument(
        "-A",
        dest="options",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Generator option, e.g. -AapiPackage=com.example.query (repeatable)",
    )
    subparser.add_argument(
        "--dialect",
        choices=["auto", "jakarta", "javax"],
        default=None,
        help="Persistence namespace of the generated code (default: from the workspace file, or auto)",
    )
    subparser.add_argument("--debug", action="store_true", help="Print debug diagnostics")
    subparser.add_argument("--quiet", action="store_true", help="Print warnings and errors only")


def _dispatch(args: argparse.Namespace) -> int:
    """Run the selected subcommand and return its exit code."""
    if args.command == "generate":
        return _cmd_generate(args)
    if args.command == "scan":
        return _cmd_scan(args)
    return 0


def _cmd_generate(args: argparse.Namespace) -> int:
    """Handle the generate subcommand."""
    directory = Path(args.directory).resolve()
    config = _load_config(directory)
    if config is None:
        return 1
    output = Path(args.output).resolve() if args.output else directory / config.output_directory
    extra = {"addRepository": "false"} if args.no_repository else {}
    session = _open_session(args, directory, config, DirectoryFiler(output), extra, exclude=[output])
    if session is None:
        return 1
    if not session.sources.units:
        print("No .java files found in the workspace.")
        return 1 if session.sources.errors else 0

    generated = ModelProcessor(session.env).process(0)
    for name in generated:
        print(f"  {name}")
    print(f"Generated {len(generated)} file(s) in '{output}'.")
    return _exit_code(session)


def _cmd_scan(args: argparse.Namespace) -> int:
    """Handle the scan subcommand."""
    directory = Path(args.directory).resolve()
    config = _load_config(directory)
    if config is None:
        return 1
    session = _open_session(args, directory, config, MemoryFiler(), {})
    if session is None:
        return 1

    processor = ModelProcessor(session.env)
    result = processor.scan(0)
    if not result.entities:
        print("No entities found.")
    for entity in result.entities.values():
        _print_entity(entity)
    for trait in processor.traits:
        print(f"Repository trait {trait.qualified_name}<{', '.join(trait.type_parameters)}>")
        if trait.targets:
            print(f"  targets: {', '.join(trait.targets)}")
        if trait.excludes:
            print(f"  excludes: {', '.join(trait.excludes)}")
    for mappable in processor.mappables:
        print(f"Mappable {mappable.qualified_name}({', '.join(mappable.component_types)})")
    return _exit_code(session)


def _load_config(directory: Path) -> WorkspaceConfig | None:
    """Load the workspace file of *directory*, or the defaults when there is none."""
    if not directory.exists():
        print(f"Error: directory '{directory}' does not exist.", file=sys.stderr)
        return None
    path = find_workspace_config(directory)
    if path is None:
        return WorkspaceConfig()
    try:
        return load_workspace_config(path)
    except WorkspaceConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return None


def _open_session(
    args: argparse.Namespace,
    directory: Path,
    config: WorkspaceConfig,
    filer: Filer,
    extra: dict[str, str],
    exclude: list[Path] | None = None,
) -> _Session | None:
    """Merge options, configure logging, read the sources and build the host environment."""
    raw_options = dict(config.options)
    for item in args.options:
        key, sep, value = item.partition("=")
        if not sep or not key:
            print(f"Error: invalid option '{item}', expected KEY=VALUE.", file=sys.stderr)
            return None
        raw_options[key] = value
    raw_options.update(extra)

    configure_logging(debug=args.debug or raw_options.get("debug", "").lower() == "true", quiet=args.quiet)
    try:
        options = GeneratorOptions.from_mapping(raw_options)
    except OptionsError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return None

    source_dirs = [directory / source for source in config.source_directories]
    sources = SourceSet.from_directories(source_dirs, exclude=exclude or [])

    dialect_name = args.dialect or config.dialect
    dialect = detect_dialect(sources) if dialect_name == "auto" else Dialect(dialect_name)
    env = HostEnvironment(sources, filer, options, legacy=dialect.is_legacy)
    return _Session(directory=directory, config=config, sources=sources, env=env)


def _print_entity(entity: Entity) -> None:
    details = entity.persistence_type.value
    if entity.id_type is not None:
        details += f", id: {entity.id_type}"
    print(f"{entity.qualified_name} ({details})")
    if entity.super_entity is not None:
        print(f"  extends: {entity.super_entity}")
    if entity.descendants:
        print(f"  descendants: {', '.join(entity.descendants)}")
    for attribute in entity.all_attributes:
        arguments = [attribute.value_type.declared_name]
        if attribute.key_type is not None:
            arguments.insert(0, attribute.key_type.declared_name)
        print(f"  {attribute.name}: {attribute.attribute_type.simple_name}<{', '.join(arguments)}>")


def _exit_code(session: _Session) -> int:
    errors = len(session.sources.errors) + session.env.error_count
    if errors:
        print(f"Error: {errors} error(s) reported.", file=sys.stderr)
        return 1
    return 0
