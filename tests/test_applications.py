"""
Tests for membership applications, the member list and dashboard statistics.

Covers:
- submission by members (always pending, profile required)
- owner/admin visibility
- ten-per-page pagination with exact counts and past-the-end pages
- status filters and status changes moving the dashboard numbers
- every read reflects the latest writes, and backend failures are errors
"""
from decimal import Decimal

import pytest

from tests.helpers import PROFILE_FIELDS, add_application, add_user, bearer

APPLICATIONS_URL = "/api/v1/applications"


@pytest.fixture
def admin_token(supabase):
    _, token = add_user(supabase, "admin@example.com", admin=True)
    return token


@pytest.fixture
def member(supabase):
    return add_user(supabase, "member@example.com")


def stats(client, token):
    response = client.get("/api/v1/dashboard/stats", headers=bearer(token))
    assert response.status_code == 200
    return response.json()


class TestSubmitApplication:
    def test_member_submits_pending_application(self, client, supabase, member):
        member_id, token = member
        response = client.post(
            APPLICATIONS_URL,
            json={"membership_type": "gold", "amount": "250.00", "payment_reference": "PAY-1"},
            headers=bearer(token),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "pending"
        assert body["user_id"] == member_id
        assert Decimal(body["amount"]) == Decimal("250.00")

    def test_status_in_payload_is_ignored(self, client, supabase, member):
        _, token = member
        response = client.post(
            APPLICATIONS_URL,
            json={"membership_type": "basic", "amount": "50", "status": "approved"},
            headers=bearer(token),
        )
        assert response.status_code == 201
        assert response.json()["status"] == "pending"

    def test_profile_required_before_applying(self, client, supabase):
        _, token = add_user(supabase, "new@example.com", profile=False)
        response = client.post(
            APPLICATIONS_URL,
            json={"membership_type": "basic", "amount": "50"},
            headers=bearer(token),
        )
        assert response.status_code == 400
        assert supabase.tables.get("membership_applications", []) == []

    @pytest.mark.parametrize("payload", [
        {"membership_type": "basic", "amount": "0"},
        {"membership_type": "diamond", "amount": "10"},
        {"amount": "10"},
    ])
    def test_invalid_payload_is_rejected(self, client, member, payload):
        _, token = member
        assert client.post(APPLICATIONS_URL, json=payload, headers=bearer(token)).status_code == 422

    def test_anonymous_cannot_submit(self, client):
        response = client.post(APPLICATIONS_URL, json={"membership_type": "basic", "amount": "50"})
        assert response.status_code == 401


class TestApplicationVisibility:
    def test_owner_sees_own_application(self, client, supabase, member):
        member_id, token = member
        row = add_application(supabase, member_id)

        response = client.get(f"{APPLICATIONS_URL}/{row['id']}", headers=bearer(token))
        assert response.status_code == 200
        assert response.json()["profile"]["email"] == "member@example.com"

    def test_other_member_gets_not_found(self, client, supabase, member):
        member_id, _ = member
        row = add_application(supabase, member_id)
        _, other_token = add_user(supabase, "other@example.com")

        response = client.get(f"{APPLICATIONS_URL}/{row['id']}", headers=bearer(other_token))
        assert response.status_code == 404

    def test_mine_lists_only_own(self, client, supabase, member):
        member_id, token = member
        other_id, _ = add_user(supabase, "other@example.com")
        add_application(supabase, member_id)
        add_application(supabase, other_id)

        response = client.get(f"{APPLICATIONS_URL}/mine", headers=bearer(token))
        assert response.status_code == 200
        assert [a["user_id"] for a in response.json()] == [member_id]


class TestAdminListing:
    def test_member_is_forbidden_and_redirected(self, client, member):
        _, token = member
        response = client.get(APPLICATIONS_URL, headers=bearer(token))
        assert response.status_code == 403
        assert response.headers["location"] == "/api/v1/auth/admin/login"

    def test_anonymous_is_unauthenticated_and_redirected(self, client):
        response = client.get(APPLICATIONS_URL)
        assert response.status_code == 401
        assert response.headers["location"] == "/api/v1/auth/admin/login"

    def test_pages_of_ten_with_exact_count(self, client, supabase, admin_token, member):
        member_id, _ = member
        for _ in range(23):
            add_application(supabase, member_id)

        first = client.get(APPLICATIONS_URL, headers=bearer(admin_token)).json()
        third = client.get(f"{APPLICATIONS_URL}?page=3", headers=bearer(admin_token)).json()
        past_end = client.get(f"{APPLICATIONS_URL}?page=4", headers=bearer(admin_token))

        assert len(first["items"]) == 10
        assert first["count"] == 23
        assert first["total_pages"] == 3
        assert len(third["items"]) == 3
        assert past_end.status_code == 200
        assert past_end.json()["items"] == []
        assert past_end.json()["count"] == 23

    def test_newest_first(self, client, supabase, admin_token, member):
        member_id, _ = member
        older = add_application(supabase, member_id)
        newer = add_application(supabase, member_id)

        items = client.get(APPLICATIONS_URL, headers=bearer(admin_token)).json()["items"]
        assert [i["id"] for i in items] == [newer["id"], older["id"]]

    def test_status_counts_sum_to_all(self, client, supabase, admin_token, member):
        member_id, _ = member
        for status in ["pending", "pending", "approved", "rejected", "approved", "pending"]:
            add_application(supabase, member_id, status=status)

        def count(status):
            url = f"{APPLICATIONS_URL}?status={status}"
            return client.get(url, headers=bearer(admin_token)).json()["count"]

        assert count("pending") == 3
        assert count("approved") == 2
        assert count("rejected") == 1
        assert count("all") == count("pending") + count("approved") + count("rejected")

    def test_page_zero_is_rejected(self, client, admin_token):
        response = client.get(f"{APPLICATIONS_URL}?page=0", headers=bearer(admin_token))
        assert response.status_code == 422

    def test_recent_is_capped_at_five(self, client, supabase, admin_token, member):
        member_id, _ = member
        rows = [add_application(supabase, member_id) for _ in range(7)]

        recent = client.get(f"{APPLICATIONS_URL}/recent", headers=bearer(admin_token)).json()
        assert [r["id"] for r in recent] == [r["id"] for r in reversed(rows[-5:])]


class TestStatusChanges:
    def test_member_cannot_change_status(self, client, supabase, member):
        member_id, token = member
        row = add_application(supabase, member_id)

        response = client.patch(
            f"{APPLICATIONS_URL}/{row['id']}/status",
            json={"status": "approved"},
            headers=bearer(token),
        )
        assert response.status_code == 403
        assert row["status"] == "pending"

    def test_approval_moves_dashboard_numbers(self, client, supabase, admin_token, member):
        member_id, _ = member
        row = add_application(supabase, member_id, amount="120.50")
        add_application(supabase, member_id, status="approved", amount="100.00")

        before = stats(client, admin_token)
        assert before["total_members"] == 1
        assert before["pending_applications"] == 1
        assert Decimal(before["total_revenue"]) == Decimal("100.00")

        response = client.patch(
            f"{APPLICATIONS_URL}/{row['id']}/status",
            json={"status": "approved", "admin_notes": "Paid in full"},
            headers=bearer(admin_token),
        )
        assert response.status_code == 200
        assert response.json()["admin_notes"] == "Paid in full"

        after = stats(client, admin_token)
        assert after["total_members"] == 2
        assert after["pending_applications"] == 0
        assert Decimal(after["total_revenue"]) == Decimal("220.50")

    def test_any_transition_is_allowed(self, client, supabase, admin_token, member):
        member_id, _ = member
        row = add_application(supabase, member_id, status="rejected")

        response = client.patch(
            f"{APPLICATIONS_URL}/{row['id']}/status",
            json={"status": "pending"},
            headers=bearer(admin_token),
        )
        assert response.status_code == 200
        assert response.json()["status"] == "pending"

    def test_unknown_application_is_404(self, client, admin_token):
        response = client.patch(
            f"{APPLICATIONS_URL}/missing/status",
            json={"status": "approved"},
            headers=bearer(admin_token),
        )
        assert response.status_code == 404


class TestFreshReads:
    def test_submission_is_visible_on_next_read(self, client, supabase, admin_token, member):
        member_id, token = member
        add_application(supabase, member_id)

        assert client.get(APPLICATIONS_URL, headers=bearer(admin_token)).json()["count"] == 1
        assert stats(client, admin_token)["pending_applications"] == 1

        client.post(
            APPLICATIONS_URL,
            json={"membership_type": "silver", "amount": "75"},
            headers=bearer(token),
        )

        assert client.get(APPLICATIONS_URL, headers=bearer(admin_token)).json()["count"] == 2
        assert stats(client, admin_token)["pending_applications"] == 2

    def test_profile_edit_shows_in_member_list(self, client, supabase, admin_token, member):
        member_id, token = member
        add_application(supabase, member_id, status="approved")

        before = client.get("/api/v1/members", headers=bearer(admin_token)).json()
        assert before["items"][0]["profile"]["full_name"] == "Member"

        client.put(
            "/api/v1/profiles/me",
            json={**PROFILE_FIELDS, "full_name": "Renamed Person"},
            headers=bearer(token),
        )

        after = client.get("/api/v1/members", headers=bearer(admin_token)).json()
        assert after["items"][0]["profile"]["full_name"] == "Renamed Person"


class TestServerRowCap:
    def test_revenue_covers_every_approved_row(self, client, supabase, admin_token, member):
        member_id, _ = member
        supabase.row_cap = 4
        for _ in range(10):
            add_application(supabase, member_id, status="approved", amount="10.00")

        body = stats(client, admin_token)
        assert body["total_members"] == 10
        assert Decimal(body["total_revenue"]) == Decimal("100.00")

    def test_own_applications_are_not_truncated(self, client, supabase, member):
        member_id, token = member
        supabase.row_cap = 3
        for _ in range(7):
            add_application(supabase, member_id)

        response = client.get(f"{APPLICATIONS_URL}/mine", headers=bearer(token))
        assert response.status_code == 200
        assert len(response.json()) == 7


class TestBackendFailures:
    """A failing backend is an error, never an empty list."""

    @pytest.mark.parametrize("url,detail", [
        (APPLICATIONS_URL, "Failed to load applications"),
        ("/api/v1/members", "Failed to load members"),
        (f"{APPLICATIONS_URL}/recent", "Failed to load recent applications"),
        ("/api/v1/dashboard/stats", "Failed to fetch dashboard statistics"),
    ])
    def test_admin_reads_report_failure(self, client, supabase, admin_token, url, detail):
        assert client.get(url, headers=bearer(admin_token)).status_code == 200

        supabase.fail_tables["membership_applications"] = RuntimeError("connection refused to db.internal:5432")

        response = client.get(url, headers=bearer(admin_token))
        assert response.status_code == 500
        assert response.json() == {"detail": detail}

    def test_empty_dataset_is_an_empty_page(self, client, admin_token):
        response = client.get(APPLICATIONS_URL, headers=bearer(admin_token))
        assert response.status_code == 200
        assert response.json()["items"] == []
        assert response.json()["count"] == 0

    def test_status_update_failure_hides_backend_error(self, client, supabase, admin_token, member):
        member_id, _ = member
        row = add_application(supabase, member_id)
        supabase.fail_tables["membership_applications"] = RuntimeError("connection refused to db.internal:5432")

        response = client.patch(
            f"{APPLICATIONS_URL}/{row['id']}/status",
            json={"status": "approved"},
            headers=bearer(admin_token),
        )
        assert response.status_code == 500
        assert response.json() == {"detail": "Failed to update application"}


class TestMembers:
    def test_members_are_approved_applications_with_contact(self, client, supabase, admin_token, member):
        member_id, _ = member
        add_application(supabase, member_id, status="approved", membership_type="platinum")
        add_application(supabase, member_id, status="pending")

        response = client.get("/api/v1/members", headers=bearer(admin_token))
        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 1
        assert body["items"][0]["membership_type"] == "platinum"
        assert body["items"][0]["profile"]["phone"] == "+1 555 0100"

    def test_members_past_the_end(self, client, admin_token):
        response = client.get("/api/v1/members?page=2", headers=bearer(admin_token))
        assert response.status_code == 200
        assert response.json() == {
            "items": [], "count": 0, "page": 2, "page_size": 10, "total_pages": 0
        }
