# Supabase tables: one_on_one_chats, one_on_one_messages
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

one_on_one_chats:
- id: uuid (primary key)
- user1_id: uuid (foreign key to profiles.id) - the user who opened the chat
- user2_id: uuid (foreign key to profiles.id)
- created_at: timestamp (default: now())
- updated_at: timestamp - bumped on every new message

one_on_one_messages:
- id: uuid (primary key)
- chat_id: uuid (foreign key to one_on_one_chats.id, on delete cascade)
- author_id: uuid (foreign key to profiles.id)
- content: text (not null)
- created_at: timestamp (default: now())

There is no read-state column: every message authored by the other user counts as unread.
"""
