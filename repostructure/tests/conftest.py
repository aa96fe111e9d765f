import json
import logging as python_logging
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from repostructure.libs.graphql.graphql_client import GraphQLClient
from repostructure.tests.mock_server import MockGitHubTransport

FIXTURES_DIR = Path(__file__).parent / "fixtures"
GRAPHQL_FIXTURES: dict[str, Any] = json.loads((FIXTURES_DIR / "graphql.json").read_text())["data"]
INPUT_CONFIG: str = (FIXTURES_DIR / "input-config.yaml").read_text()

# Test token constant to silence S105 security warnings
TEST_GITHUB_TOKEN = "ghs_" + "test1234567890abcdefghijklmnopqrstuvwxyz"  # pragma: allowlist secret


@pytest.fixture
def mock_logger():
    """Create a mock logger."""
    logger = MagicMock()
    logger.debug = MagicMock()
    logger.info = MagicMock()
    logger.warning = MagicMock()
    logger.error = MagicMock()
    logger.exception = MagicMock()
    return logger


@pytest.fixture
def graphql_data() -> dict[str, Any]:
    """Fixture data served by the mock GitHub server."""
    return GRAPHQL_FIXTURES


@pytest.fixture
def owner() -> str:
    return GRAPHQL_FIXTURES["organization"]["login"]


@pytest.fixture
def repo() -> str:
    return GRAPHQL_FIXTURES["repository"]["name"]


@pytest.fixture
def mock_transport() -> MockGitHubTransport:
    return MockGitHubTransport()


@pytest.fixture
def graphql_client(mock_transport, mock_logger) -> GraphQLClient:
    """GraphQL client wired to the mock GitHub server."""
    return GraphQLClient(token=TEST_GITHUB_TOKEN, logger=mock_logger, transport=mock_transport)


@pytest.fixture
def input_config_env(monkeypatch: pytest.MonkeyPatch, owner: str, repo: str) -> str:
    """Action environment: INPUT_CONFIG, token and target repository."""
    monkeypatch.setenv("INPUT_CONFIG", INPUT_CONFIG)
    monkeypatch.setenv("INPUT_TOKEN", TEST_GITHUB_TOKEN)
    monkeypatch.setenv("GITHUB_REPOSITORY", f"{owner}/{repo}")
    monkeypatch.delenv("INPUT_OWNER", raising=False)
    monkeypatch.delenv("INPUT_REPO", raising=False)
    return INPUT_CONFIG


@pytest.fixture(autouse=True)
def optimize_test_environment():
    """Auto-applied fixture to keep third-party loggers quiet."""
    python_logging.getLogger("gql").setLevel(python_logging.WARNING)
    python_logging.getLogger("asyncio").setLevel(python_logging.WARNING)
    yield
