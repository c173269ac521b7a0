from __future__ import annotations

import pytest

from tests.helpers import FakeUpstream


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()
