# Supabase table: matches
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

matches:
- id: uuid (primary key, default: gen_random_uuid())
- group_id1: uuid (foreign key to groups.id, not null) - group that liked first
- group_id2: uuid (foreign key to groups.id, not null)
- matched_at: timestamptz (default: now())

The pair is unordered. There is no unique constraint on the pair: a repeated
like between already-matched groups inserts another row.

Index: (group_id1), (group_id2)
"""
