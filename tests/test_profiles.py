"""Tests for the profile routes."""
from tests.helpers import PROFILE_FIELDS, add_user, bearer

PROFILES_URL = "/api/v1/profiles"


def test_member_creates_own_profile(client, supabase):
    user_id, token = add_user(supabase, "new@example.com", profile=False)

    response = client.put(
        f"{PROFILES_URL}/me",
        json={"full_name": "New Member", **PROFILE_FIELDS},
        headers=bearer(token),
    )
    assert response.status_code == 200
    body = response.json()
    assert body["id"] == user_id
    assert body["email"] == "new@example.com"
    assert len(supabase.tables["profiles"]) == 1


def test_upsert_updates_in_place(client, supabase):
    user_id, token = add_user(supabase, "member@example.com")

    response = client.put(
        f"{PROFILES_URL}/me",
        json={**PROFILE_FIELDS, "full_name": "Renamed", "city": "Chicago"},
        headers=bearer(token),
    )
    assert response.status_code == 200
    assert response.json()["city"] == "Chicago"
    assert [p["id"] for p in supabase.tables["profiles"]] == [user_id]


def test_missing_required_field(client, supabase):
    _, token = add_user(supabase, "new@example.com", profile=False)
    fields = {k: v for k, v in PROFILE_FIELDS.items() if k != "id_number"}

    response = client.put(f"{PROFILES_URL}/me", json={"full_name": "X", **fields}, headers=bearer(token))
    assert response.status_code == 422


def test_own_profile_missing_is_404(client, supabase):
    _, token = add_user(supabase, "new@example.com", profile=False)
    assert client.get(f"{PROFILES_URL}/me", headers=bearer(token)).status_code == 404


def test_member_cannot_read_other_profile(client, supabase):
    other_id, _ = add_user(supabase, "other@example.com")
    _, token = add_user(supabase, "member@example.com")

    assert client.get(f"{PROFILES_URL}/{other_id}", headers=bearer(token)).status_code == 404


def test_admin_reads_and_lists_profiles(client, supabase):
    member_id, _ = add_user(supabase, "member@example.com")
    _, admin_token = add_user(supabase, "admin@example.com", admin=True)

    assert client.get(f"{PROFILES_URL}/{member_id}", headers=bearer(admin_token)).status_code == 200

    listing = client.get(PROFILES_URL, headers=bearer(admin_token)).json()
    assert listing["count"] == 2
    assert listing["total_pages"] == 1


def test_member_cannot_list_profiles(client, supabase):
    _, token = add_user(supabase, "member@example.com")
    response = client.get(PROFILES_URL, headers=bearer(token))
    assert response.status_code == 403


def test_profile_read_failure_is_an_error(client, supabase):
    member_id, _ = add_user(supabase, "member@example.com")
    _, admin_token = add_user(supabase, "admin@example.com", admin=True)
    supabase.fail_tables["profiles"] = RuntimeError("connection refused to db.internal:5432")

    response = client.get(f"{PROFILES_URL}/{member_id}", headers=bearer(admin_token))
    assert response.status_code == 500
    assert response.json() == {"detail": "Failed to load profile"}


def test_profile_save_failure_hides_backend_error(client, supabase):
    _, token = add_user(supabase, "member@example.com")
    supabase.fail_tables["profiles"] = RuntimeError("connection refused to db.internal:5432")

    response = client.put(
        f"{PROFILES_URL}/me",
        json={"full_name": "Member", **PROFILE_FIELDS},
        headers=bearer(token),
    )
    assert response.status_code == 500
    assert response.json() == {"detail": "Failed to save profile"}
