# Supabase table: join_requests
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

join_requests:
- id: uuid (primary key, default: gen_random_uuid())
- group_id: uuid (foreign key to groups.id, not null)
- user_id: text (not null) - requesting user
- user_name: text (not null) - denormalized display name
- user_email: text (nullable)
- user_photo_url: text (nullable)
- status: text (not null, default: 'pending') - values: pending, approved, rejected
- created_at: timestamptz (default: now())
- updated_at: timestamptz (default: now())

approved and rejected are terminal. A requester cancelling also lands in
'rejected'.

Index: (group_id, status, created_at), (user_id, status, created_at)
"""
