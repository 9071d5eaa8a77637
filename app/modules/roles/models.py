# Supabase tables: user_roles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

user_roles:
- id: uuid (primary key)
- user_id: uuid (foreign key to auth.users.id, not null, on delete cascade)
- role: text (not null) - "admin" is the only role in use
- created_at: timestamp (default: now())
- unique constraint on (user_id, role)

public.is_admin(check_user_id uuid) returns boolean
- SECURITY DEFINER so it can read user_roles regardless of the caller's RLS
- true iff a (check_user_id, 'admin') row exists
"""
