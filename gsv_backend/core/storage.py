"""Storage backends for volunteer documents."""
import logging
import boto3
from botocore.exceptions import ClientError
from supabase import Client
from gsv_backend.config import settings

logger = logging.getLogger(__name__)


class SupabaseStorage:
    def __init__(self, supabase: Client, bucket_name: str = None):
        self.supabase = supabase
        self.bucket_name = bucket_name or settings.documents_bucket

    def upload_file(self, file_content: bytes, key: str, content_type: str = "application/pdf") -> str:
        """Upload file to the Supabase Storage bucket and return its public URL"""
        bucket = self.supabase.storage.from_(self.bucket_name)
        bucket.upload(key, file_content, {"content-type": content_type, "cache-control": "3600", "upsert": "false"})
        return bucket.get_public_url(key)

    def delete_file(self, key: str) -> bool:
        try:
            self.supabase.storage.from_(self.bucket_name).remove([key])
            return True
        except Exception as e:
            logger.warning("Failed to delete from Supabase Storage (%s): %s", key, e)
            return False


class S3Storage:
    def __init__(self):
        if not all([settings.aws_access_key_id, settings.aws_secret_access_key, settings.s3_bucket_name]):
            raise ValueError("AWS S3 credentials and bucket name must be configured")
        self.s3_client = boto3.client(
            's3',
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            region_name=settings.aws_region
        )
        self.bucket_name = settings.s3_bucket_name

    def upload_file(self, file_content: bytes, key: str, content_type: str = "application/pdf") -> str:
        """Upload file to S3 and return the object URL"""
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=file_content,
                ContentType=content_type
            )
            return f"https://{self.bucket_name}.s3.{settings.aws_region}.amazonaws.com/{key}"
        except ClientError as e:
            logger.error(f"Failed to upload file to S3: {str(e)}")
            raise

    def delete_file(self, key: str) -> bool:
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=key)
            return True
        except ClientError as e:
            logger.error(f"Failed to delete file from S3: {str(e)}")
            return False


def get_document_storage(supabase: Client):
    if settings.document_storage_backend == "s3":
        return S3Storage()
    return SupabaseStorage(supabase)
