# Supabase table: friendships
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

friendships:
- id: uuid (primary key)
- user_id: uuid (foreign key to profiles.id, not null) - the requester
- friend_id: uuid (foreign key to profiles.id, not null) - the addressee
- status: text (not null, default: 'pending') - values: pending, accepted, declined, blocked
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
- unique constraint on (user_id, friend_id)

Database functions (all take the acting user explicitly):
- accept_friend_request(p_requester_id, p_accepter_id) -> {success, error?, message, friendship}
- decline_friend_request(p_requester_id, p_decliner_id) -> {success, error?, message}
- get_user_friends(p_user_id), get_pending_friend_requests(p_user_id),
  get_sent_friend_requests(p_user_id), get_friends_for_groups(p_user_id) -> rows
- get_friend_count(p_user_id), get_pending_requests_count(p_user_id) -> integer
"""
