import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient


def _purge_modules() -> None:
    for name in list(sys.modules):
        if name == "hlsproxy" or name.startswith("hlsproxy."):
            del sys.modules[name]


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "*")
    monkeypatch.delenv("LOG_FILE", raising=False)

    repo_root = Path(__file__).resolve().parents[1]
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))

    _purge_modules()

    from hlsproxy.main import app

    with TestClient(app) as c:
        yield c
