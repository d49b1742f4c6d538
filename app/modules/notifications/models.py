# Supabase table: notifications
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

notifications:
- id: uuid (primary key)
- user_id: uuid (foreign key to profiles.id) - the recipient
- type: text (e.g. friend_request, friend_accepted, group_invite, message)
- title: text
- message: text
- data: jsonb (nullable)
- is_read: boolean (default: false)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

Rows are written by database triggers; clients only read, mark read and delete.
"""
