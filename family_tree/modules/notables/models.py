# Supabase table: notables
# This file documents the expected database schema

"""
Expected Supabase table structure:

notables:
- id: bigint (primary key)
- person_id: bigint (nullable, foreign key to الأشخاص.id, unique)
- woman_id: bigint (nullable, foreign key to النساء.id)
- full_name: text (nullable)
- category: text (not null)
- biography, education, positions, publications, contact_info, legacy: text (nullable)
- profile_picture_url: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

The persons details view embeds a person's notable row as `notables(...)`.
"""
