from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    yield
    package_logger = logging.getLogger("sass_shake")
    for handler in list(package_logger.handlers):
        if getattr(handler, "_sass_shake_handler", False):
            package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)
