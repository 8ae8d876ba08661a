from __future__ import annotations

import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def _reset_loguru():
    """Drop sinks bound to captured streams once a test finishes."""
    yield
    logger.remove()
    logger.disable("phicode")
