# Supabase tables: posts, post_comments, post_likes
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

posts:
- id: uuid (primary key)
- author_id: uuid (foreign key to profiles.id)
- content: text (not null)
- media_urls: text[] (default: '{}')
- post_type: text (default: 'text') - values: text, image, video, document, mixed
- created_at: timestamp (default: now())

post_comments:
- id: uuid (primary key)
- post_id: uuid (foreign key to posts.id, on delete cascade)
- author_id: uuid (foreign key to profiles.id)
- content: text (not null)
- created_at: timestamp (default: now())

post_likes:
- id: uuid (primary key)
- post_id: uuid (foreign key to posts.id, on delete cascade)
- user_id: uuid (foreign key to profiles.id)
- created_at: timestamp (default: now())
- unique constraint on (post_id, user_id)
"""
