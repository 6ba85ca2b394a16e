"""
Reconcile Chat Rooms Script
Creating a match never fails because of its chat room: when chat provisioning
errors out the match is kept without one. This script finds those matches and
creates the missing rooms. Run it manually after such failures show up in logs.
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from app.config import settings
from app.database.supabase_client import create_supabase_client
from app.modules.chat.service import ChatService
from app.modules.matches.service import MatchService
from supabase import Client
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def reconcile(supabase: Client, dry_run: bool = False) -> int:
    """Create chat rooms for matches that have none. Returns the number of rooms created."""
    missing = MatchService(supabase).find_matches_without_chat_room()
    logger.info(f"Found {len(missing)} match(es) without a chat room")

    chat = ChatService(supabase)
    created = 0
    for match in missing:
        if dry_run:
            logger.info(f"[dry-run] Would create chat room for match {match.id}")
            continue
        try:
            room_id = chat.create_chat_room(match.id, match.group_id1, match.group_id2)
            created += 1
            logger.info(f"Created chat room {room_id} for match {match.id}")
        except Exception as e:
            logger.error(f"Could not create chat room for match {match.id}: {e}")
    return created


def main():
    parser = argparse.ArgumentParser(description="Create chat rooms missing for existing matches")
    parser.add_argument("--dry-run", action="store_true", help="Only report what would be created")
    args = parser.parse_args()

    try:
        supabase = create_supabase_client(settings)
        created = reconcile(supabase, dry_run=args.dry_run)
        logger.info(f"Reconciliation completed: {created} chat room(s) created")
    except Exception as e:
        logger.error(f"Error during reconciliation: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
