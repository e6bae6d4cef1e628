"""
Pytest configuration and fixtures for backend tests.
"""

import os

# Settings are read once at import time; point them at throwaway backends
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["EVENTS_ENABLED"] = "false"
os.environ["ORDER_COUNTER_BACKEND"] = "store"
os.environ["ENVIRONMENT"] = "test"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from rest_api.main import app
from rest_api.models import Base
from rest_api.repositories import MemoryDocumentStore, SqlDocumentStore, get_document_store
from rest_api.services.domain import MenuService, OrderService
from shared.infrastructure.db import create_session_factory
from shared.security.auth import issue_owner_token


OWNER_ID = "owner-0001"
OWNER_EMAIL = "priya@example.com"


@pytest.fixture(scope="function")
def memory_store():
    """Fresh in-process document store."""
    return MemoryDocumentStore()


@pytest.fixture(scope="function")
def sql_engine():
    """
    SQLite in-memory engine shared by every session of one test.
    Tables are created before and dropped after the test.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def sql_store(sql_engine):
    return SqlDocumentStore(create_session_factory(sql_engine))


@pytest.fixture(params=["memory", "sql"])
def any_store(request):
    """Runs a test once against each document store implementation."""
    if request.param == "memory":
        return request.getfixturevalue("memory_store")
    return request.getfixturevalue("sql_store")


@pytest.fixture
def menu_service(memory_store):
    return MenuService(memory_store, OWNER_ID)


@pytest.fixture
def order_service(memory_store):
    return OrderService(memory_store, OWNER_ID)


@pytest.fixture
def paneer(menu_service):
    """An available dish with distinct half and full prices."""
    return menu_service.add_item("Paneer Tikka", "120", "200", "Starters")


@pytest.fixture
def naan(menu_service):
    return menu_service.add_item("Butter Naan", "30", "50", "Breads")


@pytest.fixture(scope="function")
def client(memory_store):
    """
    Create a test client whose routes use the test's memory store.
    """
    app.dependency_overrides[get_document_store] = lambda: memory_store

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def owner_token():
    return issue_owner_token(OWNER_ID, email=OWNER_EMAIL)


@pytest.fixture
def auth_headers(owner_token):
    """Authorization header for the test owner."""
    return {"Authorization": f"Bearer {owner_token}"}
