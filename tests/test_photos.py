"""
Photo storage backends (S3 via a mocked boto3 client, Supabase Storage via the fake).
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError
from fastapi import HTTPException

from app.config import Settings
from app.modules.photos.s3_storage import S3Storage
from app.modules.photos.service import (
    PhotoService, build_photo_storage, group_photo_path, member_photo_path
)
from app.modules.photos.supabase_storage import SupabaseStorage


def _s3_settings(**overrides) -> Settings:
    values = {
        "storage_backend": "s3",
        "aws_access_key_id": "key",
        "aws_secret_access_key": "secret",
        "aws_region": "eu-west-1",
        "s3_bucket_name": "photos-bucket",
    }
    values.update(overrides)
    return Settings(**values)


def test_photo_paths():
    assert group_photo_path("g1", timestamp=1700000000000) == "groups/g1/photo_1700000000000.jpg"
    assert member_photo_path("u1", timestamp=42) == "members/u1/photo_42.jpg"


def test_s3_upload_puts_object_and_returns_bucket_url():
    client = MagicMock()
    storage = S3Storage(_s3_settings(), s3_client=client)

    url = storage.upload_file(b"jpeg-bytes", "groups/g1/photo_1.jpg", content_type="image/png")

    client.put_object.assert_called_once_with(
        Bucket="photos-bucket", Key="groups/g1/photo_1.jpg", Body=b"jpeg-bytes", ContentType="image/png"
    )
    assert url == "https://photos-bucket.s3.eu-west-1.amazonaws.com/groups/g1/photo_1.jpg"


def test_s3_url_uses_public_base_when_configured():
    storage = S3Storage(_s3_settings(s3_public_base_url="https://cdn.test/"), s3_client=MagicMock())

    assert storage.public_url("members/u1/photo_1.jpg") == "https://cdn.test/members/u1/photo_1.jpg"


def test_s3_requires_credentials():
    with pytest.raises(ValueError):
        S3Storage(_s3_settings(s3_bucket_name=None), s3_client=MagicMock())


def test_s3_delete_failure_returns_false():
    client = MagicMock()
    client.delete_object.side_effect = ClientError({"Error": {"Code": "AccessDenied", "Message": "no"}}, "DeleteObject")
    storage = S3Storage(_s3_settings(), s3_client=client)

    assert storage.delete_file("groups/g1/photo_1.jpg") is False


def test_supabase_storage_upload_and_delete(supabase):
    storage = SupabaseStorage(supabase, "group-photos")

    url = storage.upload_file(b"data", "members/u1/photo_5.jpg")

    assert url == "https://storage.test/group-photos/members/u1/photo_5.jpg"
    content, options = supabase.storage.objects[("group-photos", "members/u1/photo_5.jpg")]
    assert content == b"data"
    assert options["content-type"] == "image/jpeg"
    assert storage.delete_file("members/u1/photo_5.jpg") is True
    assert supabase.storage.objects == {}


def test_build_photo_storage_picks_backend(supabase):
    assert isinstance(build_photo_storage(Settings(storage_backend="supabase"), supabase), SupabaseStorage)
    with pytest.raises(ValueError):
        build_photo_storage(Settings(storage_backend="ftp"), supabase)


@pytest.mark.parametrize(
    "content, content_type",
    [
        (b"", "image/jpeg"),
        (b"text", "text/plain"),
        (b"x" * (5 * 1024 * 1024 + 1), "image/jpeg"),
    ],
)
def test_photo_service_rejects_bad_uploads(supabase, content, content_type):
    service = PhotoService(SupabaseStorage(supabase, "group-photos"))

    with pytest.raises(HTTPException) as exc_info:
        service.upload_group_photo(content, "g1", content_type=content_type)

    assert exc_info.value.status_code == 400
    assert supabase.storage.objects == {}


def test_photo_service_upload_failure_is_500(supabase):
    supabase.storage.fail_uploads = True
    service = PhotoService(SupabaseStorage(supabase, "group-photos"))

    with pytest.raises(HTTPException) as exc_info:
        service.upload_member_photo(b"data", "u1", content_type="image/webp")

    assert exc_info.value.status_code == 500


def test_photo_service_stores_member_photo_under_user(supabase):
    service = PhotoService(SupabaseStorage(supabase, "group-photos"))

    url = service.upload_member_photo(b"data", "u1")

    [(bucket, path)] = list(supabase.storage.objects)
    assert bucket == "group-photos"
    assert path.startswith("members/u1/photo_") and path.endswith(".jpg")
    assert url.endswith(path)
