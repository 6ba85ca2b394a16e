# Supabase tables: chat_rooms, messages
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

chat_rooms:
- id: uuid (primary key, default: gen_random_uuid())
- match_id: uuid (foreign key to matches.id, not null) - one room per match
- group_id1: uuid (foreign key to groups.id, not null)
- group_id2: uuid (foreign key to groups.id, not null)
- group1_name: text (not null) - denormalized at creation
- group2_name: text (not null) - denormalized at creation
- member_ids: text[] (not null) - user ids of both groups' members
- created_at: timestamptz (default: now())
- last_message_at: timestamptz (nullable)
- last_message: text (nullable)

Index: GIN on member_ids, (match_id)

messages:
- id: uuid (primary key)
- chat_room_id: uuid (foreign key to chat_rooms.id, not null)
- sender_id: text (not null)
- sender_name: text (not null) - denormalized
- message: text (not null)
- created_at: timestamptz (default: now())

Index: (chat_room_id, created_at)
"""
