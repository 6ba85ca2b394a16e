# Supabase Auth
# Identity comes from Supabase's built-in authentication system.
# No custom tables are required - Supabase Auth handles:
# - User registration (auth.users table)
# - User login and session management
# - JWT token generation and validation
# - Password reset emails

"""
Supabase Auth provides:
- auth.sign_up() - Register new users (display name kept in user_metadata.full_name)
- auth.sign_in_with_password() - Authenticate users
- auth.get_user() - Get current user from JWT token
- auth.sign_out() - Logout users
- auth.reset_password_for_email() - Send password reset email

Display name and photo URL are read from user_metadata (full_name / display_name,
avatar_url) and are copied into group member records, join requests and chat
messages as plain strings.
"""
