"""Shared pytest fixtures for GharPey API tests."""
import sys
sys.dont_write_bytecode = True

from unittest.mock import MagicMock, patch  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from gharpey.api.factory import create_app  # noqa: E402
from gharpey.enrichment.client import DisabledEnrichmentClient  # noqa: E402


@pytest.fixture
def mock_conn():
    """Replace the psycopg2 connection used by txn() with a MagicMock."""
    conn = MagicMock()
    with patch("gharpey.infra.db.get_conn", return_value=conn):
        yield conn


@pytest.fixture
def mock_cursor(mock_conn):
    """Cursor yielded by ``with txn() as cur`` while mock_conn is active."""
    return mock_conn.cursor.return_value.__enter__.return_value


@pytest.fixture
def client(mock_conn):
    """Test client with enrichment disabled and the database mocked."""
    app = create_app(enrichment_client=DisabledEnrichmentClient())
    return TestClient(app)
