from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest

# Ensure tests always import the local src tree, not an older installed wheel.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))


@pytest.fixture(autouse=True)
def _reset_dbfilter_logger():
    """Undo logging setup done by CLI invocations."""
    logger = logging.getLogger("dbfilter")
    handlers, level = logger.handlers[:], logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
