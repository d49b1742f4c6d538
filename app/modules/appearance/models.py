# Supabase table: appearance_settings
# Writes go through the upsert_user_appearance_settings RPC

"""
Expected Supabase table structure:

appearance_settings:
- id: uuid (primary key)
- user_id: uuid (foreign key to profiles.id, unique)
- theme: text (default: 'light') - values: light, dark, auto
- color_palette: text (default: 'blue')
- glass_effect: text (default: 'translucent') - values: translucent, transparent, opaque
- language: text (default: 'en')
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

upsert_user_appearance_settings(user_uuid, new_theme, new_color_palette, new_glass_effect, new_language)
returns the stored row; null arguments keep the current value.
"""
