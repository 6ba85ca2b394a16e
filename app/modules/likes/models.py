# Supabase table: likes
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

likes:
- id: uuid (primary key, default: gen_random_uuid())
- from_group_id: uuid (foreign key to groups.id, not null) - the group that likes
- to_group_id: uuid (foreign key to groups.id, not null) - the group being liked
- created_at: timestamptz (default: now())

Append-only. No unique constraint on (from_group_id, to_group_id): liking twice
stores two rows.

Index: (from_group_id, to_group_id), (to_group_id)
"""
