# Supabase Auth (auth.users) backs every account
# Profile data lives in public.profiles, see the profiles module

"""
Account lifecycle:

sign_up(email, password, data={full_name, username})
    -> auth.users row; the on_auth_user_created trigger inserts
       public.profiles(id, full_name, username) from that metadata
    -> the user must confirm the email before the first sign-in

sign_in_with_password -> session.access_token (JWT)
    The JWT is what clients send as "Authorization: Bearer <token>".
    get_user(jwt) resolves it to the auth user on every request (cached
    for a minute per token) and the same token is attached to the
    per-request PostgREST client so row level security sees auth.uid().

Sign-up and sign-in run on a throwaway client, so the shared anon client
never carries a user session. Logout revokes the refresh tokens of the
caller's own JWT (auth.admin.sign_out) and drops its cached identity; the
JWT itself stays valid until it expires.
"""
