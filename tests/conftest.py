import os

# Settings are read at import time; provide test values before importing the app
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from datetime import datetime, timedelta, UTC
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from jose import jwt

from ledger_api.database import get_db
from ledger_api.config import settings
# Import the models package so every table is registered on Base.metadata
from ledger_api.models import Base
# Import FastAPI app AFTER model imports
from ledger_api.main import app

# Test database (SQLite in-memory for speed)
# Use StaticPool to ensure all connections share the same in-memory database
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create fresh database for each test"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """FastAPI test client with test database; runs the app lifespan"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def create_test_token(user_id: str = "test-user-123", expired: bool = False) -> str:
    """
    Generate valid JWT token for testing.

    Args:
        user_id: User ID to embed in 'sub' claim
        expired: If True, create expired token

    Returns:
        Encoded JWT token
    """
    if expired:
        exp = datetime.now(UTC) - timedelta(minutes=5)
    else:
        exp = datetime.now(UTC) + timedelta(minutes=15)

    payload = {"sub": user_id, "exp": exp, "iat": datetime.now(UTC)}

    token = jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")
    return token


@pytest.fixture
def mock_jwt_token():
    """Generate valid JWT token"""
    return create_test_token()


@pytest.fixture
def auth_headers(mock_jwt_token):
    """Authorization headers for authenticated requests"""
    return {"Authorization": f"Bearer {mock_jwt_token}"}


@pytest.fixture
def user_a_headers():
    """Authorization headers for user A"""
    token = create_test_token(user_id="user-a")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_b_headers():
    """Authorization headers for user B"""
    token = create_test_token(user_id="user-b")
    return {"Authorization": f"Bearer {token}"}


# Request helpers shared by the test modules


def create_account(client, headers, name: str = "Checking", currency_type: str = "USD") -> dict:
    response = client.post(
        "/accounts", headers=headers, json={"name": name, "currencyType": currency_type}
    )
    assert response.status_code == 201, response.text
    return response.json()


def create_payee(client, headers, name: str = "Grocer") -> dict:
    response = client.post("/payees", headers=headers, json={"name": name})
    assert response.status_code == 201, response.text
    return response.json()


def create_category(client, headers, name: str, parent_id: int | None = None) -> dict:
    if parent_id is None:
        response = client.post("/categories", headers=headers, json={"name": name})
    else:
        response = client.post(
            "/categories/subcategory", headers=headers, json={"name": name, "parentId": parent_id}
        )
    assert response.status_code == 201, response.text
    return response.json()


def create_transaction(
    client,
    headers,
    account_id: int,
    payee_id: int,
    splits: list[dict],
    date: str = "2024-03-15",
    transaction_type: str = "EXPENSE",
    memo: str | None = None,
):
    """Post a transaction and return the raw response"""
    body = {
        "date": date,
        "payeeId": payee_id,
        "accountId": account_id,
        "type": transaction_type,
        "splits": splits,
    }
    if memo is not None:
        body["memo"] = memo
    return client.post("/transactions", headers=headers, json=body)


@pytest.fixture
def ledger(client, auth_headers):
    """Account, payee and a small category tree for the default user"""
    account = create_account(client, auth_headers)
    payee = create_payee(client, auth_headers)
    food = create_category(client, auth_headers, "Food")
    groceries = create_category(client, auth_headers, "Groceries", parent_id=food["id"])
    transport = create_category(client, auth_headers, "Transport")
    return {
        "account": account,
        "payee": payee,
        "food": food,
        "groceries": groceries,
        "transport": transport,
    }
