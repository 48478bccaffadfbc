"""Integration test fixtures.

Provides the Starlette application wired to the shared ``docs_dir`` tree from
tests/conftest.py, and an httpx client that talks to it in-process.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest

from mdserve.config import Settings
from mdserve.server import create_app

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from pathlib import Path

    from starlette.applications import Starlette


@pytest.fixture()
def settings(docs_dir: Path) -> Settings:
    return Settings(docs={"root": str(docs_dir)})


@pytest.fixture()
def app(settings: Settings) -> Starlette:
    return create_app(settings)


@pytest.fixture()
async def client(app: Starlette) -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://localhost",
    ) as client:
        yield client
