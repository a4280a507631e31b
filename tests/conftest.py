from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterator

import pytest

TESTS_DIR = Path(__file__).resolve().parent
if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))

# Ensure src/ is importable without an editable install.
ROOT = TESTS_DIR.parent
SRC = str(ROOT / "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from fixtures import REFERENCE_PATH, SCENARIO_MARKDOWN, read_reference  # noqa: E402


@pytest.fixture
def reference_path() -> Path:
    return REFERENCE_PATH


@pytest.fixture
def reference_text() -> str:
    return read_reference()


@pytest.fixture
def scenario_text() -> str:
    return SCENARIO_MARKDOWN


@pytest.fixture(autouse=True)
def _reset_extract_helps_logger() -> Iterator[None]:
    yield
    logger = logging.getLogger("extract_helps")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
