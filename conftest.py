from __future__ import annotations

from collections.abc import Iterator

import pytest
from django.core.cache import caches


@pytest.fixture(autouse=True)
def _clear_default_cache() -> Iterator[None]:
    caches["default"].clear()
    yield
    caches["default"].clear()
