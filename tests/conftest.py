import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Allow running from any working directory
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from receipt_store.config import settings  # noqa: E402
from receipt_store.main import app  # noqa: E402


@pytest.fixture
def upload_root(tmp_path, monkeypatch) -> Path:
    """Points the service at an empty storage root for the duration of a test."""
    root = tmp_path / "receipts"
    monkeypatch.setattr(settings, "UPLOAD_PATH", str(root))
    return root


@pytest.fixture
def client(upload_root) -> TestClient:
    return TestClient(app)
