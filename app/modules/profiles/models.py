# Supabase tables: profiles, auth.users
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Authentication is handled by Supabase Auth (auth.users table)

"""
Expected Supabase table structure:

profiles:
- id: uuid (primary key, references auth.users.id, on delete cascade)
- full_name: text (not null)
- email: text (unique, not null) - synced from auth.users
- phone: text (not null)
- date_of_birth: date (not null)
- address, city, state, postal_code: text (not null)
- emergency_contact, emergency_phone: text (not null)
- id_number: text (not null) - government ID number
- id_document_path: text (nullable) - object path in the id-documents bucket
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

RLS: the owner may do anything with their own row; admins may read every row.
"""
