import json
from datetime import timedelta

from zawaj.core.clock import today, years_before
from zawaj.models.swipe import Swipe
from zawaj.models.user import User
from zawaj.modules.swipes.service import record_swipe
from zawaj.modules.users.service import profile_completeness


def signup(client, **overrides):
    payload = {
        "display_name": "Ahmad",
        "role": "male",
        "dob": "1995-05-01",
        "muslim_affirmed": True,
    }
    payload.update(overrides)
    return client.post("/users", json=payload)


def test_create_user(client):
    res = signup(
        client,
        email=" Ahmad@Example.com ",
        origin=["Egypt", "Sudan"],
        location={"lat": 31.95, "lng": 35.93},
        want_children="yes",
    )

    assert res.status_code == 200, res.text
    body = res.json()
    assert body["email"] == "ahmad@example.com"
    assert body["role"] == "male"
    assert body["want_children"] == "yes"
    assert json.loads(body["origin"]) == ["Egypt", "Sudan"]
    assert json.loads(body["location"]) == {"lat": 31.95, "lng": 35.93}
    assert body["discoverable"] is True
    assert body["photos"] == []


def test_duplicate_email_conflicts(client):
    assert signup(client, email="a@example.com").status_code == 200

    res = signup(client, email="A@example.com")
    assert res.status_code == 409
    assert res.json()["kind"] == "conflict"


def test_signup_validation(client):
    res = signup(client, role="mother")
    assert res.status_code == 422
    assert res.json()["kind"] == "validation"

    assert signup(client, muslim_affirmed=False).status_code == 422

    too_young = years_before(today(), 18) + timedelta(days=1)
    assert signup(client, dob=too_young.isoformat()).status_code == 422

    assert signup(client, role="admin").status_code == 422


def test_guardian_signup(client):
    res = signup(client, role="mother", mother_for="daughter", ward_display_name="Maryam")
    assert res.status_code == 200
    assert res.json()["mother_for"] == "daughter"
    assert res.json()["ward_display_name"] == "Maryam"

    # ward fields only make sense for guardians
    res = signup(client, mother_for="son", ward_display_name="Yusuf")
    assert res.json()["mother_for"] is None
    assert res.json()["ward_display_name"] is None


def test_me_requires_header(client, make_user, as_user):
    assert client.get("/users/me").status_code == 401

    user = make_user("female")
    res = client.get("/users/me", headers=as_user(user))
    assert res.status_code == 200
    assert res.json()["id"] == user.id


def test_preferences_are_merged(client, make_user, as_user):
    user = make_user("male")

    res = client.put("/users/me/preferences", headers=as_user(user), json={"age_min": 25})
    assert res.status_code == 200
    assert res.json()["age_min"] == 25

    res = client.put(
        "/users/me/preferences",
        headers=as_user(user),
        json={"cities": ["Amman"], "show_only_mothers": False},
    )
    body = res.json()
    assert body["user_id"] == user.id
    assert body["age_min"] == 25
    assert body["cities"] == ["Amman"]

    res = client.put("/users/me/preferences", headers=as_user(user), json={"age_min": 40, "age_max": 30})
    assert res.status_code == 422


def test_location_and_photos(client, make_user, as_user):
    user = make_user("female")

    res = client.put("/users/me/location", headers=as_user(user), json={"location": {"lat": 30.04, "lng": 31.24}})
    assert res.status_code == 200
    assert json.loads(res.json()["location"]) == {"lat": 30.04, "lng": 31.24}

    bad = client.put("/users/me/location", headers=as_user(user), json={"location": {"lat": 120, "lng": 0}})
    assert bad.status_code == 422

    first = client.post("/users/me/photos", headers=as_user(user), json={"url": "https://cdn.example/1.jpg"})
    second = client.post("/users/me/photos", headers=as_user(user), json={"url": "https://cdn.example/2.jpg"})
    assert first.json()["ordering"] == 0
    assert second.json()["ordering"] == 1

    photos = client.get("/users/me", headers=as_user(user)).json()["photos"]
    assert [p["url"] for p in photos] == ["https://cdn.example/1.jpg", "https://cdn.example/2.jpg"]


def test_delete_account(client, chat, store, make_user, as_user):
    leaving = make_user("male")
    f1 = make_user("female")
    f2 = make_user("female")
    record_swipe(store, leaving, f1.id, "right")
    match_id = record_swipe(store, f1, leaving.id, "right").match.id
    record_swipe(store, f2, leaving.id, "right")
    store.upsert_block(leaving.id, f2.id)
    store.commit()
    leaving_id = leaving.id

    res = client.delete("/users/me", headers=as_user(leaving))

    assert res.status_code == 200
    assert [e.match_id for e in chat.deleted] == [match_id]
    store.db.expire_all()
    assert store.db.query(User).filter(User.id == leaving_id).count() == 0
    assert store.db.query(Swipe).count() == 0
    assert store.get_blocks_involving(f2.id) == []
    assert client.get("/users/me", headers={"X-User-Id": leaving_id}).status_code == 401


def test_update_profile(client, make_user, as_user):
    user = make_user("female", city="Amman")

    res = client.put(
        "/users/me",
        headers=as_user(user),
        json={
            "bio": "  Teacher, loves hiking  ",
            "profession": "Teacher",
            "education": "MA",
            "origin": ["Jordan"],
            "want_children": "maybe",
            "city": "",
        },
    )

    assert res.status_code == 200, res.text
    body = res.json()
    assert body["bio"] == "Teacher, loves hiking"
    assert body["profession"] == "Teacher"
    assert body["education"] == "MA"
    assert json.loads(body["origin"]) == ["Jordan"]
    assert body["want_children"] == "maybe"
    assert body["city"] is None
    # untouched fields keep their values
    assert body["display_name"] == user.display_name
    assert body["discoverable"] is True


def test_update_profile_toggles_discoverable(client, make_user, as_user):
    viewer = make_user("male")
    user = make_user("female")

    res = client.put("/users/me", headers=as_user(user), json={"discoverable": False})
    assert res.status_code == 200
    assert res.json()["discoverable"] is False
    assert client.get("/discovery", headers=as_user(viewer)).json()["users"] == []

    # an explicit null does not clear a required flag
    res = client.put("/users/me", headers=as_user(user), json={"discoverable": None})
    assert res.json()["discoverable"] is False

    client.put("/users/me", headers=as_user(user), json={"discoverable": True})
    ids = [u["id"] for u in client.get("/discovery", headers=as_user(viewer)).json()["users"]]
    assert ids == [user.id]


def test_update_profile_rejects_mother_without_ward(client, make_user, as_user):
    user = make_user("male")

    res = client.put("/users/me", headers=as_user(user), json={"role": "mother"})

    assert res.status_code == 400
    assert res.json()["kind"] == "validation"
    assert client.get("/users/me", headers=as_user(user)).json()["role"] == "male"

    res = client.put("/users/me", headers=as_user(user), json={"role": "mother", "mother_for": "son"})
    assert res.status_code == 200
    assert res.json()["role"] == "mother"
    assert res.json()["mother_for"] == "son"


def test_update_profile_repairs_guardian(client, make_user, as_user):
    guardian = make_user(" Mother ", None)
    female = make_user("female")

    # a guardian without a ward has no deck until repaired
    assert client.get("/discovery", headers=as_user(guardian)).json()["users"] == []

    res = client.put(
        "/users/me",
        headers=as_user(guardian),
        json={"mother_for": "son", "ward_display_name": "Yusuf"},
    )

    assert res.status_code == 200, res.text
    body = res.json()
    assert body["role"] == "mother"
    assert body["mother_for"] == "son"
    assert body["ward_display_name"] == "Yusuf"
    ids = [u["id"] for u in client.get("/discovery", headers=as_user(guardian)).json()["users"]]
    assert ids == [female.id]


def test_update_profile_leaving_guardian_role_clears_ward(client, make_user, as_user):
    user = make_user("mother", "daughter", ward_display_name="Maryam")

    res = client.put("/users/me", headers=as_user(user), json={"role": "female"})

    assert res.status_code == 200
    assert res.json()["mother_for"] is None
    assert res.json()["ward_display_name"] is None


def test_update_profile_validation(client, make_user, as_user):
    user = make_user("male")
    headers = as_user(user)

    too_young = years_before(today(), 18) + timedelta(days=1)
    assert client.put("/users/me", headers=headers, json={"dob": too_young.isoformat()}).status_code == 422
    assert client.put("/users/me", headers=headers, json={"display_name": "A"}).status_code == 422
    assert client.put("/users/me", headers=headers, json={"bio": "x" * 501}).status_code == 422
    assert client.put("/users/me", headers=headers, json={"role": "admin"}).status_code == 422
    assert client.put("/users/me", json={"bio": "hi"}).status_code == 401


def test_profile_completeness(client, store, make_user, as_user):
    user = make_user("female")
    headers = as_user(user)

    # display name and date of birth only
    res = client.get("/users/me/completeness", headers=headers)
    assert res.status_code == 200
    assert res.json() == {"completeness": 20}

    client.put(
        "/users/me",
        headers=headers,
        json={"city": "Cairo", "bio": "   ", "religiousness": 4, "prayer_freq": "always"},
    )
    # a blank bio does not count
    assert client.get("/users/me/completeness", headers=headers).json() == {"completeness": 40}

    client.post("/users/me/photos", headers=headers, json={"url": "https://cdn.example/1.jpg"})
    assert client.get("/users/me/completeness", headers=headers).json() == {"completeness": 55}

    assert client.get("/users/me/completeness").status_code == 401


def test_profile_completeness_full(store, make_user):
    user = make_user(
        "male",
        city="Amman",
        country="Jordan",
        nationality="Jordanian",
        education="BSc",
        profession="Engineer",
        sect="Sunni",
        marital_status="never_married",
        religiousness=3,
        prayer_freq="often",
        bio="Hello",
    )
    store.add_photo(user.id, "https://cdn.example/a.jpg")
    store.commit()
    store.db.refresh(user)

    assert profile_completeness(user) == 90
