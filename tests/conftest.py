"""
Shared fixtures: one in-memory SQLite database, rebuilt for every test.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_JSON"] = "false"
os.environ["ENVIRONMENT"] = "testing"

import pytest
from fastapi.testclient import TestClient

from poi_catalog.core.db import Base, SessionLocal, engine, init_db
from poi_catalog.core.metrics import reset_metrics
from poi_catalog.main import create_app


@pytest.fixture(scope="function")
def db_session():
    init_db()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)
        reset_metrics()


@pytest.fixture(scope="function")
def client(db_session):
    with TestClient(create_app()) as test_client:
        yield test_client
