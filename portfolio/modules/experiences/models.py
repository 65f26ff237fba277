# Supabase table: experiences
# This file documents the expected database schema
# Actual operations are handled by the generic ResourceRepository

"""
Expected Supabase table structure:
- id: uuid (primary key, generated by the admin client on insert)
- company: text (not null)
- position: text (not null)
- description: text (not null)
- start_date: date (not null)
- end_date: date (nullable) - null means current position
- technologies: text[] (default: '{}')
- achievements: text[] (default: '{}')
- created_at: timestamp
- updated_at: timestamp (nullable)
"""
