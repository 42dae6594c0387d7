# Supabase table: news_posts
# This file documents the expected database schema

"""
Expected Supabase table structure:

news_posts:
- id: bigint (primary key)
- title: text (not null)
- content: text (not null)
- author_id: uuid (foreign key to user_profiles.id)
- status: text ('draft' | 'published' | 'archived' | 'pending_approval')
- is_public: boolean (default true)
- tags: text[] (nullable)
- featured_image_url: text (nullable)
- published_at: timestamp (nullable, set when published)
- submitted_for_approval_at: timestamp (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())
"""
