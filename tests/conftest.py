"""
Shared test fixtures and configuration for pytest
"""
import tempfile
from pathlib import Path

import pytest

from forzendb import ForzenSqliteDb
from forzendb.utils.config import reset_config


@pytest.fixture
def temp_db():
    """Create a temporary database path for testing"""
    with tempfile.TemporaryDirectory() as temp_dir:
        db_path = Path(temp_dir) / "test_forzen.db"
        yield db_path


@pytest.fixture
async def db(temp_db):
    """ForzenSqliteDb on a temporary file, closed after the test"""
    database = ForzenSqliteDb(temp_db)
    yield database
    await database.end_session()


@pytest.fixture(autouse=True)
def clear_config():
    """Reset the configuration singleton around each test"""
    reset_config()
    yield
    reset_config()
