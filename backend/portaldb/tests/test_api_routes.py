from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from portaldb.apps.accounts import models as account_models
from portaldb.apps.training import models as training_models
from portaldb.database import Base, get_db
from portaldb.main import app
from portaldb.security import create_access_token, get_current_active_user

Role = account_models.PlatformRole


@pytest.fixture()
def api_session():
    # TestClient runs sync endpoints on worker threads, so share one connection.
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        app.dependency_overrides.clear()


def _create_user(db, email: str, role, **fields) -> account_models.User:
    user = account_models.User(email=email, name=email.split("@")[0], primary_role=role, is_active=True, **fields)
    user.roles.append(account_models.UserRole(role=role))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _client_as(db, user) -> TestClient:
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_current_active_user] = lambda: user
    return TestClient(app)


def test_health(api_session):
    client = TestClient(app)

    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/").json()["status"] == "ok"


def test_bearer_token_resolves_user(api_session):
    user = _create_user(api_session, "student@example.com", Role.STUDENT)
    app.dependency_overrides[get_db] = lambda: api_session
    client = TestClient(app)
    token = create_access_token(data={"sub": user.id})

    ok = client.get("/navigation", headers={"Authorization": f"Bearer {token}"})
    bad = client.get("/navigation", headers={"Authorization": "Bearer not-a-token"})

    assert ok.status_code == 200
    assert ok.json()["primary_role"] == "STUDENT"
    assert bad.status_code == 401


def test_navigation_for_current_user(api_session):
    admin = _create_user(api_session, "admin@example.com", Role.ADMIN)
    client = _client_as(api_session, admin)

    body = client.get("/navigation", params={"pathname": "/admin/waitlist"}).json()

    core = [link["href"] for link in body["core"]]
    assert body["primary_role"] == "ADMIN"
    assert "/admin/waitlist" in core
    assert {"/messages", "/notifications"} <= set(core)
    assert body["more"][0]["label"] == "Main"


def test_readiness_me_and_reviewer_only_lookup(api_session):
    instructor = _create_user(api_session, "inst@example.com", Role.INSTRUCTOR)
    client = _client_as(api_session, instructor)

    me = client.get("/training/readiness/me")
    other = client.get(f"/training/readiness/{instructor.id}")

    assert me.status_code == 200
    assert me.json()["instructor_id"] == instructor.id
    assert other.status_code == 403


def test_publish_check_reports_block_in_body(api_session, monkeypatch):
    monkeypatch.delenv("ENABLE_NATIVE_INSTRUCTOR_GATE", raising=False)
    monkeypatch.delenv("ENFORCE_PRE_OFFERING_INTERVIEW", raising=False)
    instructor = _create_user(api_session, "inst@example.com", Role.INSTRUCTOR)
    template = training_models.ClassTemplate(title="Intro", difficulty_level=training_models.CourseLevel.LEVEL_101)
    api_session.add(template)
    api_session.commit()
    client = _client_as(api_session, instructor)

    blocked = client.post("/training/offerings/publish-check", json={"template_id": template.id})
    missing = client.post("/training/offerings/publish-check", json={"template_id": "CTP-missing"})

    assert blocked.status_code == 200
    assert blocked.json()["allowed"] is False
    assert blocked.json()["code"] == "READINESS_INCOMPLETE"
    assert missing.status_code == 404


def test_feature_gate_admin_routes(api_session):
    admin = _create_user(api_session, "admin@example.com", Role.ADMIN)
    client = _client_as(api_session, admin)

    saved = client.put("/feature-gates/rules/global", json={"feature_key": "CHALLENGES", "enabled": False})
    assert saved.status_code == 200
    rule_id = saved.json()["id"]

    assert client.get("/feature-gates/CHALLENGES/enabled").json() == {"feature_key": "CHALLENGES", "enabled": False}
    assert client.get("/feature-gates/UNKNOWN/enabled").json()["enabled"] is True
    assert len(client.get("/feature-gates/rules").json()) == 1

    assert client.put("/feature-gates/rules/global", json={"feature_key": "NOPE"}).status_code == 400
    assert client.delete(f"/feature-gates/rules/{rule_id}").status_code == 204
    assert client.delete(f"/feature-gates/rules/{rule_id}").status_code == 404


def test_feature_gate_mutations_forbidden_for_non_admin(api_session):
    student = _create_user(api_session, "student@example.com", Role.STUDENT)
    client = _client_as(api_session, student)

    response = client.put("/feature-gates/rules/global", json={"feature_key": "CHALLENGES", "enabled": False})

    assert response.status_code == 403
