# Supabase Auth + public.users
# Credentials, sessions and email confirmation live in Supabase Auth (auth.users).
# The school profile of every account lives in public.users, linked by auth_user_id.

"""
Expected Supabase table structure:

users:
- id: uuid (primary key)
- auth_user_id: uuid (references auth.users.id, unique, not null)
- email: text (unique, not null)
- name: text (not null)
- role: text (not null) - values: admin, class_teacher, subject_teacher
- phone: text (nullable)
- avatar_url: text (nullable)
- is_active: boolean (default: true)
- is_class_teacher: boolean (default: false)
- is_subject_teacher: boolean (default: false)
- email_verified: boolean (default: false)
- password_change_required: boolean (default: false) - set for accounts created by an admin
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

Supabase Auth calls used (sign-in, verify_otp and sign_out run on a fresh client per call,
since they store a session on the client):
- auth.sign_in_with_password() - login, current password check
- auth.get_user(jwt) - resolve the caller from an access token
- auth.sign_out() - drop the session of a rejected login
- auth.admin.sign_out(jwt) - logout (service role key)
- auth.verify_otp({"token_hash", "type"}) - email confirmation ("email") and password recovery ("recovery")
- auth.reset_password_for_email() - send the recovery email
- auth.admin.update_user_by_id() - set a new password (service role key)
"""
