"""Seeding helpers shared by the route and service tests."""

PROFILE_FIELDS = {
    "phone": "+1 555 0100",
    "date_of_birth": "1990-04-12",
    "address": "1 Main Street",
    "city": "Springfield",
    "state": "IL",
    "postal_code": "62701",
    "emergency_contact": "Jordan Doe",
    "emergency_phone": "+1 555 0101",
    "id_number": "X1234567",
}


def add_user(supabase, email, admin=False, profile=True, password="secret-password"):
    """Create an auth identity (optionally with profile and admin grant). Returns (user_id, token)."""
    user_id = supabase.auth.create_user(email, password)
    if profile:
        supabase.tables.setdefault("profiles", []).append({
            "id": user_id,
            "email": email,
            "full_name": email.split("@")[0].title(),
            "id_document_path": None,
            "created_at": supabase.next_timestamp(),
            "updated_at": None,
            **PROFILE_FIELDS,
        })
    if admin:
        supabase.tables.setdefault("user_roles", []).append({
            "id": f"grant-{user_id}",
            "user_id": user_id,
            "role": "admin",
            "created_at": supabase.next_timestamp(),
        })
    return user_id, supabase.auth.issue_token(user_id)


def add_application(supabase, user_id, status="pending", amount="100.00", membership_type="basic"):
    row = {
        "id": f"app-{len(supabase.tables.get('membership_applications', [])) + 1}",
        "user_id": user_id,
        "membership_type": membership_type,
        "amount": amount,
        "payment_reference": None,
        "status": status,
        "admin_notes": None,
        "created_at": supabase.next_timestamp(),
        "updated_at": None,
    }
    supabase.tables.setdefault("membership_applications", []).append(row)
    return row


def bearer(token):
    return {"Authorization": f"Bearer {token}"}
