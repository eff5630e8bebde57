"""HTTP tests for the course listing endpoints."""

from __future__ import annotations

import hashlib
import time

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from nacl.signing import SigningKey

from app.auth import token
from app.courses.dependencies import get_current_user_id, get_db
from app.main import app
from conftest import TEACHER

SECRET = "test-secret"


@pytest.fixture
def client(site_db):
    app.dependency_overrides[get_db] = lambda: site_db
    app.dependency_overrides[get_current_user_id] = lambda: TEACHER
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def signed_client(site_db, monkeypatch):
    monkeypatch.setattr(token, "SECRET_KEY", SECRET)
    app.dependency_overrides[get_db] = lambda: site_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def signed_headers(path: str, sub: str = str(TEACHER), key: SigningKey | None = None) -> dict:
    key = key or SigningKey.generate()
    public_key = key.verify_key.encode()
    ts = str(int(time.time()))
    bearer = jwt.encode({"sub": sub, "cid": hashlib.sha256(public_key).hexdigest()}, SECRET, algorithm="HS256")
    return {
        "Authorization": f"Bearer {bearer}",
        "X-Client-Public-Key": public_key.hex(),
        "X-Client-Timestamp": ts,
        "X-Client-Signature": key.sign(f"{ts}:{path}".encode()).signature.hex(),
    }


def test_my_prestations_envelope(client) -> None:
    response = client.get("/courses/my-prestations")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["userid"] == TEACHER
    assert body["count"] == 3
    assert [c["id"] for c in body["courses"]] == [12, 10, 11]
    assert set(body["courses"][0]) == {
        "id", "fullname", "shortname", "startdate", "enddate", "status", "participants", "url", "visible"
    }


def test_my_prestations_filters(client) -> None:
    response = client.get("/courses/my-prestations", params={"search": "python", "period": "current"})

    assert [c["id"] for c in response.json()["courses"]] == [10]


def test_my_courses_includes_progress(client) -> None:
    response = client.get("/courses/my-courses", params={"search": "machine"})

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 1
    course = body["courses"][0]
    assert course["roles"] == ["student"]
    assert course["enablecompletion"] is True
    assert course["status"] == "current"
    assert course["progress"] == {"total": 4, "completed": 2, "percentage": 50, "has_completion": True}


def test_missing_teacher_role_returns_error_envelope(client, site_db) -> None:
    site_db.roles.docs = [r for r in site_db.roles.docs if r["shortname"] != "editingteacher"]

    response = client.get("/courses/my-prestations")

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": 'Role "editingteacher" not found'}


def test_unexpected_failure_returns_error_envelope(client, site_db) -> None:
    site_db.course_modules.docs.append({"id": 999, "course": 14, "completion": 7, "visible": 1})

    response = client.get("/courses/my-courses")

    assert response.status_code == 500
    assert response.json()["success"] is False


def test_signed_request_is_accepted(signed_client) -> None:
    response = signed_client.get("/courses/my-courses", headers=signed_headers("/courses/my-courses"))

    assert response.status_code == 200
    assert response.json()["userid"] == TEACHER


def test_missing_bearer_token_is_rejected(signed_client) -> None:
    headers = signed_headers("/courses/my-courses")
    del headers["Authorization"]

    assert signed_client.get("/courses/my-courses", headers=headers).status_code == 401


def test_signature_for_another_path_is_rejected(signed_client) -> None:
    headers = signed_headers("/courses/my-prestations")

    assert signed_client.get("/courses/my-courses", headers=headers).status_code == 401


def test_token_bound_to_another_key_is_rejected(signed_client) -> None:
    headers = signed_headers("/courses/my-courses")
    other = signed_headers("/courses/my-courses")
    headers["X-Client-Public-Key"] = other["X-Client-Public-Key"]
    headers["X-Client-Signature"] = other["X-Client-Signature"]

    response = signed_client.get("/courses/my-courses", headers=headers)

    assert response.status_code == 401
    assert response.json()["detail"] == "Client mismatch"


def test_stale_timestamp_is_rejected(signed_client) -> None:
    key = SigningKey.generate()
    headers = signed_headers("/courses/my-courses", key=key)
    ts = str(int(time.time()) - 3600)
    headers["X-Client-Timestamp"] = ts
    headers["X-Client-Signature"] = key.sign(f"{ts}:/courses/my-courses".encode()).signature.hex()

    response = signed_client.get("/courses/my-courses", headers=headers)

    assert response.json()["detail"] == "Stale request"


def test_non_numeric_subject_is_rejected(signed_client) -> None:
    headers = signed_headers("/courses/my-courses", sub="alice")

    assert signed_client.get("/courses/my-courses", headers=headers).status_code == 401


def test_non_numeric_timestamp_is_rejected(signed_client) -> None:
    headers = signed_headers("/courses/my-courses")
    headers["X-Client-Timestamp"] = "yesterday"

    response = signed_client.get("/courses/my-courses", headers=headers)

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid timestamp"
