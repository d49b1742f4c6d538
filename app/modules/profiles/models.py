# Supabase tables: profiles, appearance_settings (see appearance module)
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

profiles:
- id: uuid (primary key, references auth.users.id)
- username: text (unique)
- full_name, first_name, last_name, display_name: text (nullable)
- bio: text (nullable)
- avatar_url, cover_image_url: text (nullable)
- status: text - values: active, busy, offline, inactive
- last_seen: timestamp (nullable)
- location, website, github_url, linkedin_url, twitter_url, portfolio_url: text (nullable)
- role, company, job_title, education: text (nullable)
- skills, programming_languages, frameworks, tools, interests: text[]
- certifications, projects, achievements: jsonb
- experience_level: text - values: junior, mid, senior, lead, architect
- years_of_experience: integer (nullable)
- timezone: text (nullable)
- availability: text - values: available, busy, unavailable
- looking_for_work, remote_work: boolean
- profile_visibility: text (default: 'public') - values: public, friends, private
- theme_preference: text - values: light, dark, auto
- notification_preferences, social_links, contact_info, professional_info: jsonb
- profile_completed: boolean (default: false)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

Rows are created by a trigger on auth.users; RLS lets a user update only their own row.
"""
