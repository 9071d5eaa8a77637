# Supabase tables: membership_applications
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

membership_applications:
- id: uuid (primary key, default gen_random_uuid())
- user_id: uuid (foreign key to profiles.id, not null, on delete cascade)
- membership_type: membership_type enum ('basic', 'silver', 'gold', 'platinum')
- amount: numeric (not null)
- payment_reference: text (nullable)
- status: application_status enum ('pending', 'approved', 'rejected'), default 'pending'
- admin_notes: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

RLS: owners may read and insert their own rows; admins may do anything.
Status changes are admin-only and any status may follow any other.
"""
