# Supabase table: certificates
# This file documents the expected database schema
# Actual operations are handled by the generic ResourceRepository

"""
Expected Supabase table structure:
- id: uuid (primary key, generated by the admin client on insert)
- title: text (not null)
- institution: text (not null)
- date: date (not null)
- image_url: text (not null) - remote URL or data URI
- description: text (nullable)
- created_at: timestamp
- updated_at: timestamp (nullable)
"""
