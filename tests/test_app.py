import json
from types import SimpleNamespace

from sqlalchemy.exc import IntegrityError

from zawaj.main import integrity_error_handler


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok"}


def test_integrity_error_renders_conflict():
    request = SimpleNamespace(method="POST", url=SimpleNamespace(path="/users"))
    exc = IntegrityError("INSERT INTO users", {}, Exception("UNIQUE constraint failed"))

    res = integrity_error_handler(request, exc)

    assert res.status_code == 409
    assert json.loads(res.body) == {"kind": "conflict", "detail": "Conflicting write"}


def test_request_validation_kind(client, make_user, as_user):
    me = make_user("male")

    res = client.put("/users/me", json={"height_cm": -3}, headers=as_user(me))

    assert res.status_code == 422
    assert res.json()["kind"] == "validation"
