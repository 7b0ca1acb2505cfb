#!/usr/bin/env python3
# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run all CI checks locally: format, lint, type check, tests, a generator smoke run, and build."""

import argparse
import pathlib
import subprocess
import sys
import tempfile
import time

from yachalk import chalk

# ###############
# Public Interface
# ###############

FIXTURES = "tests/data/shop"


def steps(output: str) -> list[tuple[str, list[str]]]:
    """Return the CI steps; the smoke run writes to *output*."""
    return [
        ("Format check", ["uv", "run", "ruff", "format", "--check", "src/", "tests/", "tools/"]),
        ("Lint", ["uv", "run", "ruff", "check", "src/", "tests/", "tools/"]),
        ("Type check", ["uv", "run", "ty", "check", "src/"]),
        ("Tests", ["uv", "run", "pytest", "--cov=fluent_modelgen", "--cov-report=term-missing"]),
        ("Generator smoke run", ["uv", "run", "fluent-modelgen", "generate", FIXTURES, "-o", output, "--quiet"]),
        ("Build", ["uv", "build"]),
    ]


def main() -> int:
    """Run the CI steps and report results."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--fail-fast", action="store_true", help="Stop at the first failing step")
    args = parser.parse_args()

    results: list[tuple[str, bool, float]] = []
    with tempfile.TemporaryDirectory(prefix="modelgen-smoke-") as output:
        for name, cmd in steps(output):
            _banner(name)
            start = time.monotonic()
            proc = subprocess.run(cmd, cwd=_repo_root())
            passed = proc.returncode == 0
            results.append((name, passed, time.monotonic() - start))
            if not passed and args.fail_fast:
                break

    _banner("Summary")
    for name, passed, elapsed in results:
        colour = chalk.green if passed else chalk.red
        print(colour(f"  {'PASS' if passed else 'FAIL'}  {name} ({elapsed:.1f}s)"))
    print()
    return 0 if all(passed for _, passed, _ in results) else 1


# ################
# Implementation
# ################


def _banner(title: str) -> None:
    sep = chalk.blue("=" * 60)
    print(f"\n{sep}")
    print(chalk.blue(f"  {title}"))
    print(sep)


def _repo_root() -> pathlib.Path:
    return pathlib.Path(__file__).resolve().parent.parent


if __name__ == "__main__":
    sys.exit(main())
