# Supabase tables: groups, group_members, group_join_requests
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

groups:
- id: uuid (primary key)
- name: text (not null, max 100 chars)
- description: text (nullable)
- avatar_url, cover_image_url: text (nullable)
- creator_id: uuid (foreign key to profiles.id, not null)
- is_private: boolean (default: false)
- max_members: integer (default: 100)
- allow_member_invites: boolean (default: true)
- require_approval: boolean (default: true)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

group_members:
- id: uuid (primary key)
- group_id: uuid (foreign key to groups.id, on delete cascade)
- user_id: uuid (foreign key to profiles.id)
- role: text - values: creator, admin, member
- status: text - values: active, left, removed
- can_add_members, can_remove_members, can_edit_group_info, can_manage_permissions,
  can_delete_group, can_pin_messages, can_delete_messages: boolean
- joined_at: timestamp (default: now())

group_join_requests:
- id: uuid (primary key)
- group_id: uuid (foreign key to groups.id, on delete cascade)
- user_id: uuid (foreign key to profiles.id) - the requester
- message: text (nullable)
- status: text - values: pending, approved, rejected, cancelled
- created_at: timestamp (default: now())

Views:
- group_details: groups joined with creator profile and member counts
- user_groups: groups of the current user (auth.uid()) with their role
- pending_join_requests: pending group_join_requests with requester profile

Database functions:
- create_group(p_name, p_description, p_avatar_url, p_cover_image_url, p_is_private,
  p_max_members, p_allow_member_invites, p_require_approval, p_creator_id,
  p_initial_members, p_initial_admins) -> group id
- update_group_info(p_group_id, p_name, ..., p_updated_by)
- add_friend_to_group(p_group_id, p_friend_id, p_added_by)
- update_group_member_permissions(p_group_id, p_member_id, p_permissions, p_updated_by)
- remove_group_member(p_group_id, p_member_id, p_removed_by)
- request_to_join_group(p_group_id, p_message, p_user_id) -> request id
- approve_group_join_request(p_request_id, p_approved_by)
- reject_group_join_request(p_request_id, p_rejected_by)
"""
