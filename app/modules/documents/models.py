# Supabase Storage bucket: id-documents
# This file documents the expected storage layout
# Actual operations are handled via Supabase SDK in service.py

"""
Expected bucket configuration:

id-documents:
- public: true (object URLs are readable without a session; this API
  still hands out signed URLs only after its own prefix check)
- file_size_limit: 5242880 (5 MiB)
- allowed_mime_types: image/jpeg, image/png, application/pdf

Object paths: <auth user id>/<object name>
Storage policies let an identity insert, read and update only objects whose
first path segment is its own id. Admins get no override in SQL; the
ADMIN_DOCUMENT_ACCESS setting enables an admin read path in this service.
"""
