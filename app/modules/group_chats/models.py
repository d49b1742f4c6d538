# Supabase tables: group_chats, group_chat_members, group_chat_messages
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

group_chats:
- id: uuid (primary key)
- name: text
- created_by: uuid (foreign key to profiles.id)
- created_at: timestamp (default: now())
- updated_at: timestamp - bumped on every new message

group_chat_members:
- group_chat_id: uuid (foreign key to group_chats.id)
- user_id: uuid (foreign key to profiles.id)
- role: text - values: admin, member
- joined_at: timestamp (default: now())

group_chat_messages:
- id: uuid (primary key)
- group_chat_id: uuid (foreign key to group_chats.id)
- author_id: uuid (foreign key to profiles.id)
- content: text (not null)
- created_at: timestamp (default: now())
"""
