import os

os.environ.setdefault("DB_PATH", ":memory:")

import pytest
from fastapi.testclient import TestClient

from scorekeeper import main
from scorekeeper.repository import GameRepository


@pytest.fixture()
def repo():
    repository = GameRepository(":memory:")
    yield repository
    repository.close()


@pytest.fixture()
def client(repo, monkeypatch):
    monkeypatch.setattr(main, "repo", repo)
    return TestClient(main.app)
