# Supabase table: projects
# This file documents the expected database schema
# Actual operations are handled by the generic ResourceRepository

"""
Expected Supabase table structure:
- id: uuid (primary key, generated by the admin client on insert)
- title: text (not null)
- description: text (not null)
- technologies: text[] (default: '{}') - display order
- category: text (not null) - one of the labels in PROJECT_CATEGORIES, not enforced by the database
- image_url: text (nullable) - remote URL or data URI
- demo_url: text (nullable)
- github_url: text (nullable)
- featured: boolean (default: false)
- created_at: timestamp
- updated_at: timestamp (nullable)
"""
