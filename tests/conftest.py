import pytest


@pytest.fixture
def anyio_backend() -> str:
    # The code under test is built on asyncio primitives.
    return "asyncio"
