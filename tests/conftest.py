import asyncio
import os
import tempfile

_TMP = tempfile.mkdtemp(prefix="menudigital-tests-")

# Must be in place before the app (and its settings) are imported
os.environ["ENV_MODE"] = "development"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP}/menudigital.db"
os.environ["LOCAL_STORAGE_DIRECTORY"] = f"{_TMP}/uploads"
os.environ["PUBLIC_BASE_URL"] = "http://testserver"
os.environ.pop("CART_TTL_SECONDS", None)

import pytest
from fastapi.testclient import TestClient

from menudigital.database import drop_db
from menudigital.main import app
from menudigital.services.auth import reset_auth_service
from menudigital.services.kv import reset_kv_store
from menudigital.services.kv.base import SessionStorage
from menudigital.services.kv.memory import MemoryKeyValueStore
from menudigital.services.storage import reset_storage_service

SLUG = "tacos-don-pepe"


@pytest.fixture
def client():
    reset_kv_store()
    reset_auth_service()
    reset_storage_service()
    with TestClient(app) as test_client:
        yield test_client
    asyncio.run(drop_db())


@pytest.fixture
def session_storage():
    return SessionStorage(MemoryKeyValueStore(), "shopper-1")


def sign_up(client, email="owner@tacos.mx", password="secret123", name="Pepe"):
    """Helper: create an admin account and return its auth headers."""
    response = client.post(
        "/api/auth/signup",
        json={"email": email, "password": password, "name": name},
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def create_company(client, headers, name="Tacos Don Pepe", slug=None, whatsapp="+52 1 234 567 890"):
    response = client.post(
        "/api/admin/company",
        json={"name": name, "slug": slug, "whatsapp": whatsapp},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


def create_category(client, headers, name):
    """Helper: create a category and return its id."""
    response = client.post("/api/admin/categories", json={"name": name}, headers=headers)
    assert response.status_code == 201, response.text
    return next(c["id"] for c in response.json()["categories"] if c["name"] == name)


def create_product(client, headers, name, price, category_id=None, status="active"):
    """Helper: create a product and return its id."""
    response = client.post(
        "/api/admin/products",
        json={"name": name, "price": price, "category_id": category_id, "status": status},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return next(p["id"] for p in response.json()["products"] if p["name"] == name)


@pytest.fixture
def owner(client):
    return sign_up(client)


@pytest.fixture
def restaurant(client, owner):
    """A company with a small catalog. Returns product ids by name."""
    create_company(client, owner)
    tacos = create_category(client, owner, "Tacos")
    drinks = create_category(client, owner, "Bebidas")
    create_category(client, owner, "Postres")

    return {
        "Taco": create_product(client, owner, "Taco", 2.5, tacos),
        "Gringa": create_product(client, owner, "Gringa", 4.0, tacos),
        "Agua": create_product(client, owner, "Agua", 1.0, drinks),
        "Refresco": create_product(client, owner, "Refresco", 1.5, drinks, status="inactive"),
        "Salsa": create_product(client, owner, "Salsa", 0.5),
    }
