# Supabase tables: forums, forum_posts, forum_post_comments
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

forums:
- id: uuid (primary key)
- title: text (not null)
- description: text (nullable)
- created_by: uuid (foreign key to profiles.id)
- created_at: timestamp (default: now())

forum_posts:
- id: uuid (primary key)
- forum_id: uuid (foreign key to forums.id, on delete cascade)
- author_id: uuid (foreign key to profiles.id)
- title: text (not null)
- content: text (not null)
- created_at: timestamp (default: now())

forum_post_comments:
- id: uuid (primary key)
- post_id: uuid (foreign key to forum_posts.id, on delete cascade)
- author_id: uuid (foreign key to profiles.id)
- content: text (not null)
- created_at: timestamp (default: now())
"""
