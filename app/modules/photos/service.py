from supabase import Client
from app.config import Settings
from app.core.clock import now_ms
from app.modules.photos.s3_storage import S3Storage
from app.modules.photos.supabase_storage import SupabaseStorage
from typing import Optional, Union
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

PhotoStorage = Union[S3Storage, SupabaseStorage]

ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/png", "image/webp", "image/gif"}
MAX_PHOTO_BYTES = 5 * 1024 * 1024


def group_photo_path(group_id: str, timestamp: Optional[int] = None) -> str:
    return f"groups/{group_id}/photo_{timestamp if timestamp is not None else now_ms()}.jpg"


def member_photo_path(user_id: str, timestamp: Optional[int] = None) -> str:
    return f"members/{user_id}/photo_{timestamp if timestamp is not None else now_ms()}.jpg"


def build_photo_storage(settings: Settings, supabase: Client) -> PhotoStorage:
    """Pick the storage backend named by STORAGE_BACKEND"""
    backend = (settings.storage_backend or "supabase").lower()
    if backend == "s3":
        return S3Storage(settings)
    if backend == "supabase":
        return SupabaseStorage(supabase, settings.supabase_storage_bucket)
    raise ValueError(f"Unknown storage backend: {settings.storage_backend}")


class PhotoService:
    def __init__(self, storage: PhotoStorage):
        self.storage = storage

    def _validate(self, content: bytes, content_type: Optional[str]) -> str:
        content_type = content_type or "image/jpeg"
        if content_type not in ALLOWED_CONTENT_TYPES:
            raise HTTPException(status_code=400, detail=f"Unsupported image type: {content_type}")
        if not content:
            raise HTTPException(status_code=400, detail="Empty file")
        if len(content) > MAX_PHOTO_BYTES:
            raise HTTPException(status_code=400, detail="Photo exceeds 5 MB limit")
        return content_type

    def _upload(self, content: bytes, key: str, content_type: str) -> str:
        try:
            url = self.storage.upload_file(content, key, content_type=content_type)
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Photo upload failed: {str(e)}")
        logger.info(f"Uploaded photo {key}")
        return url

    def upload_group_photo(self, content: bytes, group_id: str, content_type: Optional[str] = None) -> str:
        """Store a group photo and return its URL"""
        content_type = self._validate(content, content_type)
        return self._upload(content, group_photo_path(group_id), content_type)

    def upload_member_photo(self, content: bytes, user_id: str, content_type: Optional[str] = None) -> str:
        """Store a member photo and return its URL"""
        content_type = self._validate(content, content_type)
        return self._upload(content, member_photo_path(user_id), content_type)
