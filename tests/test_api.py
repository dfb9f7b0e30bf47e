"""
Tests de la API HTTP con TestClient.

La base es SQLite en memoria (via override de `get_db`) y el servicio de
extracción es el falso de `conftest.py`.
"""

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from api.dependencies import get_current_user_id, get_db
from api import main as api_main
from api.main import app
from recipe_ai_core import engine
from recipe_ai_core.config import get_settings
from recipe_ai_core.errors import RateLimited, UpstreamUnavailable
from recipe_ai_core.fingerprint import hash_bytes

IMAGE = b"\xff\xd8\xff fake jpeg"

PANCAKES = {
    "recipe_name": "PANCAKES",
    "servings": 4,
    "ingredients": [{"quantity": "2", "unit": "cups", "item": "flour"}],
    "instructions": ["Mix", "Cook"],
    "nutrition": {"calories": 350, "protein_g": 8, "fat_g": 12, "carbs_g": 50},
}


@pytest.fixture
def client(db_engine):
    Session = sessionmaker(bind=db_engine, autoflush=False, future=True)

    def override_get_db():
        db = Session()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user_id] = lambda: "user-1"
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def fake_service(monkeypatch, fake_service_factory):
    service = fake_service_factory(extraction=PANCAKES)
    monkeypatch.setattr(engine, "_default_service", lambda: service)
    return service


def _scan(client, content=IMAGE, filename="receta.jpg", content_type="image/jpeg", **data):
    return client.post(
        "/api/v1/scan",
        files={"file": (filename, content, content_type)},
        data=data,
    )


def test_health(client):
    assert client.get("/").json()["status"] == "ok"
    assert client.get("/health").json()["version"] == "0.1.0"


def test_scan_returns_recipe(client, fake_service):
    response = _scan(client)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["cached"] is False
    assert body["filename"] == "receta.jpg"
    assert body["file_hash"] == hash_bytes(IMAGE)
    assert body["recipe_data"]["recipe_name"] == "Pancakes"
    assert body["recipe_data"]["instructions"] == [
        {"step_number": 1, "text": "Mix"},
        {"step_number": 2, "text": "Cook"},
    ]
    assert fake_service.extract_calls[0]["mime_type"] == "image/jpeg"


def test_scan_detects_mime_from_extension(client, fake_service):
    response = _scan(client, filename="libro.PDF", content_type="application/octet-stream")

    assert response.status_code == 200
    assert fake_service.extract_calls[0]["mime_type"] == "application/pdf"


def test_scan_rejects_unsupported_file(client, fake_service):
    response = _scan(client, filename="receta.gif", content_type="image/gif")

    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "invalid_input"
    assert fake_service.extract_calls == []


def test_scan_rejects_empty_file(client, fake_service):
    response = _scan(client, content=b"")

    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "invalid_input"


def test_scan_maps_rate_limit_to_429(client, fake_service):
    fake_service.extraction = RateLimited(
        "Cuota de la API excedida. Reintentar en 20 segundos.",
        upstream_message="Rate limit reached",
        retry_after="20",
    )

    response = _scan(client)

    assert response.status_code == 429
    assert response.json()["detail"] == {"error": "rate_limited", "message": "Rate limit reached"}
    assert response.headers["retry-after"] == "20"


def test_scan_maps_upstream_errors_to_502(client, fake_service):
    fake_service.extraction = UpstreamUnavailable("Error de la API de OpenAI: 500", status_code=500)
    assert _scan(client).status_code == 502

    fake_service.extraction = "not json at all"
    response = _scan(client)
    assert response.status_code == 502
    assert response.json()["detail"]["error"] == "malformed_response"


def test_save_then_scan_hits_cache(client, fake_service):
    scanned = _scan(client).json()

    saved = client.post(
        "/api/v1/recipes",
        json={"recipe": scanned["recipe_data"], "file_hash": scanned["file_hash"]},
    )
    assert saved.status_code == 201

    again = _scan(client)
    assert again.json()["cached"] is True
    assert again.json()["recipe_data"]["recipe_name"] == "Pancakes"
    assert len(fake_service.extract_calls) == 1

    debug = _scan(client, debug="true")
    assert debug.json()["cached"] is False
    assert len(fake_service.extract_calls) == 2


def test_duplicate_save_returns_409(client):
    payload = {"recipe": {"recipe_name": "Soup"}, "file_hash": "c" * 64}

    assert client.post("/api/v1/recipes", json=payload).status_code == 201
    response = client.post("/api/v1/recipes", json=payload)

    assert response.status_code == 409
    assert "recipe_id" in response.json()["detail"]


def test_recipe_crud(client):
    created = client.post(
        "/api/v1/recipes",
        json={
            "recipe": {
                "recipe_name": "Soup",
                "ingredients": [{"item": "water"}],
                "instructions": [{"step_number": 1, "text": "Boil"}],
                "nutrition": {"calories": 10},
                "nutrition_ai_estimated": True,
                "nutrition_servings_used": 4,
            }
        },
    ).json()
    recipe_id = created["id"]
    assert created["recipe"]["nutrition_ai_estimated"] is True
    assert created["recipe"]["nutrition_servings_used"] == 4

    listed = client.get("/api/v1/recipes").json()
    assert [r["id"] for r in listed] == [recipe_id]

    updated = client.put(
        f"/api/v1/recipes/{recipe_id}",
        json={"recipe": {"recipe_name": "Better Soup"}},
    )
    assert updated.status_code == 200
    assert client.get(f"/api/v1/recipes/{recipe_id}").json()["recipe"]["recipe_name"] == "Better Soup"

    assert client.delete(f"/api/v1/recipes/{recipe_id}").status_code == 204
    assert client.get(f"/api/v1/recipes/{recipe_id}").status_code == 404


def test_recipes_are_owner_scoped(client):
    recipe_id = client.post("/api/v1/recipes", json={"recipe": {"recipe_name": "Mía"}}).json()["id"]

    app.dependency_overrides[get_current_user_id] = lambda: "user-2"

    assert client.get(f"/api/v1/recipes/{recipe_id}").status_code == 404
    assert client.get("/api/v1/recipes").json() == []


@pytest.fixture
def jwt_secret(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "test-secret-for-recipe-ai-core-tests")
    get_settings.cache_clear()
    yield "test-secret-for-recipe-ai-core-tests"
    get_settings.cache_clear()


def test_auth_requires_bearer_token(client, jwt_secret):
    app.dependency_overrides.pop(get_current_user_id)

    assert client.get("/api/v1/recipes").status_code == 401
    assert client.get("/api/v1/recipes", headers={"Authorization": "Token abc"}).status_code == 401
    assert client.get("/api/v1/recipes", headers={"Authorization": "Bearer nope"}).status_code == 401

    bad = jwt.encode({"sub": "user-1"}, "another-secret-that-is-long-enough-too", algorithm="HS256")
    assert client.get("/api/v1/recipes", headers={"Authorization": f"Bearer {bad}"}).status_code == 401

    token = jwt.encode({"sub": "user-1"}, jwt_secret, algorithm="HS256")
    response = client.get("/api/v1/recipes", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200


def test_startup_creates_tables(monkeypatch):
    calls = []
    monkeypatch.setattr(api_main, "init_db", lambda: calls.append("init_db"))

    with TestClient(app) as c:
        assert calls == ["init_db"]
        assert c.get("/health").json()["status"] == "ok"
