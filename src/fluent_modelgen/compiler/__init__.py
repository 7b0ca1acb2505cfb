# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Generator pipeline: source loading, name resolution, scanning and the round driver."""

from fluent_modelgen.compiler.lexicon import Lexicon
from fluent_modelgen.compiler.metamodel import MetamodelOverlay, derive_metamodel
from fluent_modelgen.compiler.processor import ModelProcessor
from fluent_modelgen.compiler.scanner import ScanError, ScanResult, scan
from fluent_modelgen.compiler.sources import Dialect, SourceSet, detect_dialect

__all__ = [
    "Lexicon",
    "MetamodelOverlay",
    "derive_metamodel",
    "ModelProcessor",
    "ScanError",
    "ScanResult",
    "scan",
    "Dialect",
    "SourceSet",
    "detect_dialect",
]
