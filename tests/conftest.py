import warnings
from pathlib import Path

warnings.filterwarnings(
    "ignore",
    category=DeprecationWarning,
    message=r".*on_event is deprecated.*",
)

import pytest
from fastapi.testclient import TestClient

from insta_mongo.app import create_app
from insta_mongo.config import Settings, clear_config_cache
from tests.fixtures.fixture_data import STORE_URI, populate_fixtures_root
from tests.fixtures.mongo_mock import MockMongoServer, create_mock_mongo_server


@pytest.fixture
def fixtures_root(tmp_path: Path) -> Path:
    return populate_fixtures_root(tmp_path / "fixtures")


@pytest.fixture
def mongo_server() -> MockMongoServer:
    return create_mock_mongo_server()


@pytest.fixture
def settings(fixtures_root: Path) -> Settings:
    return Settings(fixtures_root=fixtures_root, store_uri=STORE_URI)


@pytest.fixture(autouse=True)
def _fresh_config_cache():
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def app(settings: Settings, mongo_server: MockMongoServer):
    return create_app(settings, client_factory=mongo_server.client)


@pytest.fixture
def api_client(app) -> TestClient:
    with TestClient(app) as client:
        yield client
