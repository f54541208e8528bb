from datetime import datetime, timezone

from character_chat.services import characters as characters_module


def create_character(client, headers, **fields):
    payload = {"name": "Stoic Mentor"}
    payload.update(fields)
    response = client.post("/characters/", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def listed_ids(response):
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["total"] == len(body["items"])
    return [item["id"] for item in body["items"]]


def test_create_requires_identity(client):
    response = client.post("/characters/", json={"name": "Nobody's"})
    assert response.status_code == 401
    assert response.json()["code"] == "UNAUTHORIZED"


def test_create_sets_owner_and_never_system(client, auth_headers):
    character = create_character(
        client, auth_headers("user-alice"), is_system=True, speaking_style="formal"
    )
    assert character["user_id"] == "user-alice"
    assert character["is_system"] is False
    assert character["is_public"] is False
    assert character["speaking_style"] == "formal"
    assert character["created_at"] == character["updated_at"]


def test_create_honours_public_flag(client, auth_headers):
    character = create_character(client, auth_headers("user-alice"), is_public=True)
    assert character["is_public"] is True


def test_create_rejects_invalid_input(client, auth_headers):
    headers = auth_headers("user-alice")
    assert client.post("/characters/", json={"name": ""}, headers=headers).status_code == 422
    assert client.post("/characters/", json={}, headers=headers).status_code == 422
    response = client.post(
        "/characters/", json={"name": "Pirate", "avatar_url": "not a url"}, headers=headers
    )
    assert response.status_code == 422


def test_update_applies_only_provided_fields(client, auth_headers, monkeypatch):
    headers = auth_headers("user-alice")
    character = create_character(
        client, headers, short_description="Calm", system_prompt="Be stoic."
    )
    monkeypatch.setattr(
        characters_module, "utcnow", lambda: datetime(2030, 1, 1, 9, 30, tzinfo=timezone.utc)
    )

    response = client.patch(
        f"/characters/{character['id']}",
        json={"short_description": "Very calm", "is_public": True},
        headers=headers,
    )
    assert response.status_code == 200, response.text
    updated = response.json()
    assert updated["short_description"] == "Very calm"
    assert updated["is_public"] is True
    assert updated["system_prompt"] == "Be stoic."
    assert updated["name"] == "Stoic Mentor"
    assert updated["updated_at"].startswith("2030-01-01T09:30:00")
    assert updated["created_at"] == character["created_at"]


def test_update_can_clear_optional_text(client, auth_headers):
    headers = auth_headers("user-alice")
    character = create_character(client, headers, slug="stoic")
    response = client.patch(f"/characters/{character['id']}", json={"slug": None}, headers=headers)
    assert response.status_code == 200
    assert response.json()["slug"] is None


def test_update_rejects_null_name(client, auth_headers):
    headers = auth_headers("user-alice")
    character = create_character(client, headers)
    response = client.patch(f"/characters/{character['id']}", json={"name": None}, headers=headers)
    assert response.status_code == 422


def test_update_cannot_promote_to_system(client, auth_headers):
    headers = auth_headers("user-alice")
    character = create_character(client, headers)
    response = client.patch(f"/characters/{character['id']}", json={"is_system": True}, headers=headers)
    assert response.status_code == 200
    assert response.json()["is_system"] is False


def test_update_by_non_owner_matches_missing_character(client, auth_headers):
    character = create_character(client, auth_headers("user-alice"))
    intruder = auth_headers("user-bob")

    not_owner = client.patch(f"/characters/{character['id']}", json={"name": "Mine"}, headers=intruder)
    missing = client.patch("/characters/does-not-exist", json={"name": "Mine"}, headers=intruder)

    assert not_owner.status_code == missing.status_code == 403
    assert not_owner.json() == missing.json()


def test_update_requires_identity(client, auth_headers):
    character = create_character(client, auth_headers("user-alice"))
    response = client.patch(f"/characters/{character['id']}", json={"name": "X"})
    assert response.status_code == 401


def test_list_without_private_hides_private_characters(client, auth_headers, system_character):
    alice = auth_headers("user-alice")
    public = create_character(client, alice, name="Captain", is_public=True)
    private = create_character(client, alice, name="Diary")

    ids = listed_ids(client.get("/characters/", headers=alice))
    assert public["id"] in ids
    assert system_character.id in ids
    assert private["id"] not in ids


def test_list_anonymous_sees_public_and_system(client, auth_headers, system_character):
    public = create_character(client, auth_headers("user-alice"), is_public=True)
    create_character(client, auth_headers("user-alice"), name="Hidden")

    ids = listed_ids(client.get("/characters/", params={"include_private": "true"}))
    assert sorted(ids) == sorted([public["id"], system_character.id])


def test_list_with_private_adds_only_callers_own(client, auth_headers, system_character):
    alice = auth_headers("user-alice")
    bob = auth_headers("user-bob")
    alice_private = create_character(client, alice, name="Alice Diary")
    bob_private = create_character(client, bob, name="Bob Diary")
    bob_public = create_character(client, bob, name="Bob Captain", is_public=True)

    ids = listed_ids(client.get("/characters/", params={"include_private": "true"}, headers=alice))
    assert alice_private["id"] in ids
    assert bob_public["id"] in ids
    assert system_character.id in ids
    assert bob_private["id"] not in ids


def test_list_is_ordered_by_creation(client, auth_headers):
    alice = auth_headers("user-alice")
    first = create_character(client, alice, name="First", is_public=True)
    second = create_character(client, alice, name="Second", is_public=True)
    third = create_character(client, alice, name="Third", is_public=True)

    ids = listed_ids(client.get("/characters/"))
    assert ids == [first["id"], second["id"], third["id"]]


def test_invalid_token_is_rejected(client):
    response = client.get("/characters/", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"
