"""Pytest fixtures for marketplace stores, services and the API."""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from src.database.seed import seed_demo_data
from src.database.store import MarketplaceStore
from src.database.store_real import MarketplaceStore as SqlMarketplaceStore


@pytest.fixture
def db():
    """In-memory marketplace store for tests."""
    return MarketplaceStore()


@pytest.fixture
def sql_db():
    """SQLAlchemy store on a private in-memory SQLite database."""
    store = SqlMarketplaceStore("sqlite://")
    store.create_tables()
    return store


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """Runs the test against both store implementations."""
    return request.getfixturevalue("db" if request.param == "memory" else "sql_db")


@pytest.fixture
def seeded_store(store):
    seed_demo_data(store)
    return store


def make_world(store, *, client_balance="100", contractor_balance="10", price="80", status="in_progress"):
    """One client, one contractor, one contract and one unpaid job."""
    client = store.create_profile(
        first_name="Ada", last_name="Client", profession="Founder", role="client", balance=Decimal(client_balance)
    )
    contractor = store.create_profile(
        first_name="Bob", last_name="Builder", profession="Builder", role="contractor", balance=Decimal(contractor_balance)
    )
    contract = store.create_contract(client_id=client.id, contractor_id=contractor.id, terms="build it", status=status)
    job = store.create_job(contract_id=contract.id, description="foundation", price=Decimal(price))
    return {"client": client.id, "contractor": contractor.id, "contract": contract.id, "job": job.id}


@pytest.fixture
def world(store):
    return make_world(store)


@pytest.fixture
def api_client(db, monkeypatch):
    """TestClient over the app with the store dependency pointed at a seeded in-memory store."""
    from src.api.dependencies import get_db
    from src.api.main import app

    monkeypatch.delenv("ADMIN_API_KEYS", raising=False)
    seed_demo_data(db)
    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def build_world():
    return make_world
