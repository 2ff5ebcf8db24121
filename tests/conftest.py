"""Shared pytest fixtures."""

from unittest.mock import AsyncMock, MagicMock

import pytest
import yaml

from blockcms.lib.hooks import hooks


@pytest.fixture
def temp_app_yaml(tmp_path):
    """Write a dict to a temporary app.yaml and return its path."""
    config_path = tmp_path / "app.yaml"

    def _create_config(config: dict):
        with open(config_path, "w") as f:
            yaml.safe_dump(config, f)
        return config_path

    return _create_config


@pytest.fixture
def clean_hooks():
    """Save and restore hooks state around a test."""
    original_filters = {k: list(v) for k, v in hooks._filters.items()}
    original_actions = {k: list(v) for k, v in hooks._actions.items()}
    yield
    hooks._filters.clear()
    hooks._filters.update(original_filters)
    hooks._actions.clear()
    hooks._actions.update(original_actions)


@pytest.fixture
def mock_db_session():
    """A mock AsyncSession whose execute() result supports both access patterns.

    Tests adjust ``session.execute.return_value`` (or ``side_effect``) for
    the rows they need.
    """
    session = AsyncMock()

    mock_scalars = MagicMock()
    mock_scalars.all.return_value = []

    mock_result = MagicMock()
    mock_result.scalar_one_or_none.return_value = None
    mock_result.scalars.return_value = mock_scalars

    session.execute = AsyncMock(return_value=mock_result)
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.refresh = AsyncMock()
    session.add = MagicMock()
    session.delete = AsyncMock()
    return session


@pytest.fixture
def hero_block():
    return {"id": "b1", "type": "hero", "data": {"title": "Welcome"}}


@pytest.fixture
def home_page(hero_block):
    return {
        "slug": "home",
        "title": "Home",
        "status": "DRAFT",
        "body": {
            "version": 1,
            "seo": {"title": "Home", "description": "d"},
            "blocks": [hero_block],
        },
    }
