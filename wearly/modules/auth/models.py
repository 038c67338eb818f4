# Supabase Auth
# This module uses Supabase's built-in authentication system
# No custom tables are required - Supabase Auth handles:
# - User login and session management (email/password and Google OAuth)
# - Access / refresh token issuance and rotation
#
# Tokens are opaque to this service: they are relayed to Supabase for
# validation and stored client-side in the sb_at / sb_rt cookies.

"""
Supabase Auth calls used here:
- auth.sign_in_with_password() - Authenticate users
- auth.refresh_session() - Rotate an access token using a refresh token
- auth.get_user() - Resolve the user behind an access token
- auth.exchange_code_for_session() - Complete a PKCE OAuth flow
"""
