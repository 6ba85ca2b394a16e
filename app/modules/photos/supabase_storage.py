"""Supabase Storage bucket for group and member photos."""
import logging

from supabase import Client

logger = logging.getLogger(__name__)


class SupabaseStorage:
    def __init__(self, supabase: Client, bucket_name: str):
        if not bucket_name:
            raise ValueError("Supabase storage bucket must be configured")
        self.supabase = supabase
        self.bucket_name = bucket_name

    def upload_file(self, file_content: bytes, key: str, content_type: str = "image/jpeg") -> str:
        """Upload file to the bucket and return its public URL."""
        bucket = self.supabase.storage.from_(self.bucket_name)
        try:
            bucket.upload(
                path=key,
                file=file_content,
                file_options={"content-type": content_type, "cache-control": "3600", "upsert": "false"},
            )
        except Exception as e:
            logger.error("Supabase Storage upload failed (%s): %s", key, e)
            raise
        return bucket.get_public_url(key)

    def delete_file(self, key: str) -> bool:
        try:
            self.supabase.storage.from_(self.bucket_name).remove([key])
            return True
        except Exception as e:
            logger.warning("Failed to delete from Supabase Storage (%s): %s", key, e)
            return False
