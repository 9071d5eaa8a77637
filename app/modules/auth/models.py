# Supabase Auth
# Identities live in Supabase's auth.users table; this service never stores
# credentials. Admin status is not an auth attribute: it is a row in
# public.user_roles, resolved through the is_admin() function.

"""
Supabase Auth calls used here:
- auth.sign_up() - Register new members
- auth.sign_in_with_password() - Member and admin login
- auth.get_user() - Resolve the identity behind a bearer JWT
- auth.admin.sign_out() - Revoke the session behind a JWT
- auth.reset_password_for_email() - Send a password reset link
- auth.admin.list_users() - Look up an identity by email (bootstrap script, service role only)
"""
