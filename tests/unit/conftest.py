"""Fixtures for unit tests."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from fakes import make_page

from appnav.core.config import NavigatorConfig


@pytest.fixture
def page() -> MagicMock:
    return make_page()


@pytest.fixture
def browser() -> MagicMock:
    """Fake BrowserManager handing out a fresh fake page per call."""
    manager = MagicMock()
    manager.pages = []

    async def new_page():
        created = make_page()
        manager.pages.append(created)
        return created

    manager.new_page = AsyncMock(side_effect=new_page)
    return manager


@pytest.fixture
def config(tmp_path: Path) -> NavigatorConfig:
    return NavigatorConfig(output_dir=str(tmp_path / "app-map"), retries=0)
