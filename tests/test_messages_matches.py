import pytest

from zawaj.core import config
from zawaj.core.errors import Forbidden
from zawaj.models.match import AuditLog, Match, Message
from zawaj.modules.guardian.policy import audit_message, ensure_chat_allowed, guardians_missing_ward
from zawaj.modules.swipes.service import record_swipe


@pytest.fixture
def matched(store, make_user):
    def _match(a, b):
        record_swipe(store, a, b.id, "right")
        return record_swipe(store, b, a.id, "right").match.id

    return _match


def send(client, headers, match_id, text):
    return client.post(f"/messages/{match_id}", headers=headers, json={"text": text})


def test_send_and_list_messages(client, store, make_user, as_user, matched):
    m = make_user("male")
    f = make_user("female")
    match_id = matched(m, f)

    assert send(client, as_user(m), match_id, "  salam  ").status_code == 200
    assert send(client, as_user(f), match_id, "wa alaykum salam").status_code == 200
    assert send(client, as_user(m), match_id, "how are you?").status_code == 200

    res = client.get(f"/messages/{match_id}", headers=as_user(f))
    assert res.status_code == 200
    texts = [msg["text"] for msg in res.json()["messages"]]
    assert texts == ["salam", "wa alaykum salam", "how are you?"]

    latest = client.get(f"/messages/{match_id}", headers=as_user(f), params={"limit": 2}).json()
    assert [msg["text"] for msg in latest["messages"]] == ["wa alaykum salam", "how are you?"]

    store.db.expire_all()
    assert store.get_match_by_id(match_id).last_message_at is not None
    # individual matches are not audited
    assert store.db.query(AuditLog).count() == 0


def test_message_validation(client, make_user, as_user, matched):
    m = make_user("male")
    f = make_user("female")
    match_id = matched(m, f)

    res = send(client, as_user(m), match_id, "send nudes")
    assert res.status_code == 400
    assert res.json()["kind"] == "validation"

    res = send(client, as_user(m), match_id, "   ")
    assert res.status_code == 400

    assert send(client, as_user(m), match_id, "x" * 1001).status_code == 422


def test_outsiders_cannot_read(client, make_user, as_user, matched):
    m = make_user("male")
    f = make_user("female")
    outsider = make_user("female")
    match_id = matched(m, f)

    res = client.get(f"/messages/{match_id}", headers=as_user(outsider))
    assert res.status_code == 404
    assert send(client, as_user(outsider), match_id, "hi").status_code == 404
    assert client.get(f"/matches/{match_id}", headers=as_user(outsider)).status_code == 404


def test_blocked_conversation(client, store, make_user, as_user, matched):
    m = make_user("male")
    f = make_user("female")
    match_id = matched(m, f)
    store.upsert_block(f.id, m.id)
    store.commit()

    res = send(client, as_user(m), match_id, "hello?")
    assert res.status_code == 403
    assert res.json()["kind"] == "blocked"
    assert client.get(f"/messages/{match_id}", headers=as_user(f)).status_code == 403


def test_guardian_messages_are_audited(client, store, make_user, as_user, matched):
    guardian = make_user("mother", "son")
    female = make_user("female")
    match_id = matched(guardian, female)

    send(client, as_user(guardian), match_id, "assalamu alaykum")
    send(client, as_user(female), match_id, "wa alaykum salam")

    rows = store.db.query(AuditLog).order_by(AuditLog.id).all()
    assert [(r.match_id, r.sender_id, r.action) for r in rows] == [
        (match_id, guardian.id, "guardian_message"),
        (match_id, female.id, "guardian_message"),
    ]


def test_guardian_chat_policy(client, store, make_user, as_user, matched, monkeypatch):
    guardian = make_user("mother", "daughter")
    male = make_user("male")
    other_male = make_user("male")
    female = make_user("female")
    guardian_match = matched(guardian, male)
    plain_match = matched(other_male, female)

    monkeypatch.setattr(config, "GUARDIAN_CHAT_ALLOWED", False)

    res = send(client, as_user(male), guardian_match, "hello")
    assert res.status_code == 403
    assert res.json()["kind"] == "forbidden"
    assert store.db.query(Message).count() == 0

    assert send(client, as_user(other_male), plain_match, "hello").status_code == 200


def test_policy_helpers(store, make_user, matched):
    guardian = make_user("mother", "son")
    female = make_user("female")
    match = store.get_match_by_id(matched(guardian, female))

    with pytest.raises(Forbidden):
        ensure_chat_allowed(match, allowed=False)
    ensure_chat_allowed(match, allowed=True)
    assert audit_message(store, match, guardian.id) is True


def test_guardians_missing_ward_report(store, make_user):
    broken = make_user("mother", None)
    odd = make_user("mother", "nephew")
    make_user("mother", "son")
    make_user("female")

    assert {u.id for u in guardians_missing_ward(store)} == {broken.id, odd.id}


def test_guardians_missing_ward_reads_noisy_roles(store, make_user):
    broken = make_user(" Mother ", None)
    make_user("MOTHER", " Son\t")
    make_user("Fe male")

    assert [u.id for u in guardians_missing_ward(store)] == [broken.id]


def test_list_and_get_matches(client, make_user, as_user, matched):
    m = make_user("male")
    f1 = make_user("female")
    f2 = make_user("female")
    first = matched(m, f1)
    second = matched(m, f2)
    send(client, as_user(m), first, "you first")

    res = client.get("/matches", headers=as_user(m))
    assert res.status_code == 200
    ids = [x["id"] for x in res.json()["matches"]]
    assert ids == [first, second]

    detail = client.get(f"/matches/{second}", headers=as_user(f2)).json()
    assert {detail["user_a"]["id"], detail["user_b"]["id"]} == {m.id, f2.id}

    assert client.get("/matches", headers=as_user(f1)).json()["matches"][0]["id"] == first


def test_unmatch(client, chat, store, make_user, as_user, matched):
    guardian = make_user("mother", "son")
    female = make_user("female")
    outsider = make_user("male")
    match_id = matched(guardian, female)
    send(client, as_user(guardian), match_id, "salam")

    res = client.delete(f"/matches/{match_id}", headers=as_user(outsider))
    assert res.status_code == 403
    assert res.json()["kind"] == "forbidden"

    res = client.delete(f"/matches/{match_id}", headers=as_user(female))
    assert res.status_code == 200
    assert [e.match_id for e in chat.deleted] == [match_id]

    assert store.db.query(Match).count() == 0
    assert store.db.query(Message).count() == 0
    # audit trail outlives the match
    assert store.db.query(AuditLog).count() == 1

    assert client.delete(f"/matches/{match_id}", headers=as_user(female)).status_code == 404
    assert send(client, as_user(guardian), match_id, "hello?").status_code == 404
