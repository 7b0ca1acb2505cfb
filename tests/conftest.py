# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Shared fixtures for the fluent-modelgen test suite."""

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from fluent_modelgen.gen_logging import LOGGER_NAME

SHOP = Path(__file__).parent / "data" / "shop"


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Undo configure_logging() so every test starts with a propagating logger."""
    yield
    for name in (LOGGER_NAME, f"{LOGGER_NAME}.processor"):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)
        logger.propagate = True


@pytest.fixture
def shop_dir() -> Path:
    """Directory holding the shop fixture sources."""
    return SHOP
