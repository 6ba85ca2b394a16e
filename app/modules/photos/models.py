# Object storage layout for photos
# No database tables; URLs returned by the storage backend are written into
# groups.photo_url and the photo_url of member records.

"""
Paths written:
- groups/{group_id}/photo_{timestamp_ms}.jpg
- members/{user_id}/photo_{timestamp_ms}.jpg

Backends (STORAGE_BACKEND):
- supabase: bucket SUPABASE_STORAGE_BUCKET (default "group-photos"), public URL
- s3: bucket S3_BUCKET_NAME, URL under S3_PUBLIC_BASE_URL or the bucket's virtual-host URL
"""
