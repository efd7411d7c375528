"""
Shared fixtures: an in-memory database per test, an app built around it,
and helpers to register users and seed products.
"""

import os

os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("APP_LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient

from database import Database
from main import create_app
from models.product import ProductModel
from models.user import UserModel


@pytest.fixture
def database():
    db = Database("sqlite://")
    db.create_all()
    yield db
    db.drop_all()
    db.dispose()


@pytest.fixture
def db_session(database):
    session = database.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(database):
    app = create_app(database)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def register(client):
    """Sign up a user through the API and return id, token and auth headers."""
    counter = {"n": 0}

    def _register(name="Test User", email=None, password="TestPass123!"):
        counter["n"] += 1
        email = email or f"user{counter['n']}@example.com"
        resp = client.post("/api/auth/signup", json={"name": name, "email": email, "password": password})
        assert resp.status_code == 201, resp.text
        body = resp.json()
        return {
            "id": body["user"]["id"],
            "email": email,
            "token": body["token"],
            "headers": {"Authorization": f"Bearer {body['token']}"},
        }

    return _register


@pytest.fixture
def create_product(client):
    """Create a product through the API as the user behind ``headers``."""

    def _create(headers, **overrides):
        payload = {
            "name": "Test Item",
            "description": "A test item for the catalog",
            "price": 10,
            "category": "Clothing",
            "stock": 5,
        }
        payload.update(overrides)
        resp = client.post("/api/products", json=payload, headers=headers)
        assert resp.status_code == 201, resp.text
        return resp.json()["data"]

    return _create


@pytest.fixture
def make_user(db_session):
    """Insert a user straight into the database."""
    counter = {"n": 0}

    def _make(name="Seller"):
        counter["n"] += 1
        user = UserModel(name=name, email=f"seller{counter['n']}@example.com")
        user.set_password("secret123")
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_product(db_session):
    """Insert a product straight into the database."""

    def _make(author, **fields):
        values = {
            "name": "Plain Tee",
            "description": "A plain cotton tee shirt",
            "price": 20.0,
            "category": "Clothing",
            "stock": 10,
        }
        values.update(fields)
        product = ProductModel(author_id=author.id, **values)
        db_session.add(product)
        db_session.commit()
        db_session.refresh(product)
        return product

    return _make
