import os
import tempfile

# must be in place before dsmovie.config.environment is imported
_tmp_dir = tempfile.mkdtemp(prefix="dsmovie-tests-")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("JWT_ALGORITHM", "HS256")
os.environ["USE_SQLITE"] = "true"
os.environ.setdefault("SQLITE_PATH", os.path.join(_tmp_dir, "dsmovie-test.db"))
os.environ.setdefault("LOG_DIR", os.path.join(_tmp_dir, "logs"))

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from dsmovie.db.database import Base, enable_sqlite_foreign_keys
import dsmovie.db.models  # noqa: F401


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database, shared by every thread of the test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    """Create a session on the fresh database."""
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False)
    db = TestingSessionLocal()
    yield db
    db.close()
