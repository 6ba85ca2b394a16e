# Supabase table: groups
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

groups:
- id: uuid (primary key, default: gen_random_uuid())
- name: text (not null)
- bio: text (not null, default: '')
- photo_url: text (nullable)
- created_by: text (not null) - identity of the creating user
- members: jsonb (not null, default: '[]') - ordered list of member objects:
    {"user_id": text, "name": text, "bio": text?, "photo_url": text?}
  optional keys are omitted rather than stored as null/''
- is_active: boolean (not null, default: true) - soft delete flag
- created_at: timestamptz (default: now())
- updated_at: timestamptz (nullable)

Index: (is_active), (created_by, is_active)
"""
