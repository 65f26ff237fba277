# Supabase table: profiles
# This file documents the expected database schema
# Actual operations are handled by the generic ResourceRepository

"""
Expected Supabase table structure:
- id: uuid (primary key, generated by the admin client on insert)
- name: text (not null)
- title: text (not null)
- bio: text (not null)
- email: text (not null)
- phone: text (nullable)
- location: text (nullable)
- linkedin_url: text (nullable)
- github_url: text (nullable)
- profile_image_url: text (nullable) - remote URL or data URI
- cv_url: text (nullable)
- created_at: timestamp
- updated_at: timestamp (nullable)

Nothing enforces a single row. The site reads the first row returned by a
limit 1 query and falls back to built-in defaults when the table is empty.
"""
