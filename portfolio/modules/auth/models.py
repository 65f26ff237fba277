# Supabase Auth
# This module uses Supabase's built-in authentication system
# No custom tables are required - Supabase Auth handles:
# - Admin login and session management
# - JWT token generation and validation
# - Password hashing and security

"""
Supabase Auth provides:
- auth.sign_in_with_password() - Authenticate the admin
- auth.get_user() - Get current user from JWT token
- auth.get_session() - Session already held by the client, if any
- auth.sign_out() - Logout

The admin account is created in the Supabase dashboard. There is no
registration route: the site has a single administrator.
"""
