import logging
import os
import uuid
from datetime import datetime
from urllib.parse import quote, unquote, urlparse

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from exceptions import UploadError, ValidationError

logger = logging.getLogger(__name__)


class S3Service:
    def __init__(self, bucket_name: str, client: boto3.client, region: str = "us-east-2", max_size_mb: int = 10):
        """
        Initialize the S3 service with bucket name and region
        """
        self.bucket_name = bucket_name
        self.s3 = client
        self.region = region
        self.max_size_mb = max_size_mb

    def object_url(self, key: str) -> str:
        return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{quote(key)}"

    def key_from_url(self, url: str) -> str:
        return unquote(urlparse(url).path.lstrip("/"))

    async def upload_file(self, file: UploadFile, folder: str = "media") -> str:
        """
        Upload a media file to S3

        Args:
            file: The uploaded file; it is closed once the upload finishes or fails
            folder: Key prefix for the object

        Returns:
            The public URL of the uploaded object

        Raises:
            ValidationError: If the file is empty or larger than the size limit
            UploadError: If S3 rejects the upload
        """
        timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        extension = os.path.splitext(file.filename or "")[1].lower()
        key = f"{folder}/{timestamp}-{uuid.uuid4()}{extension}"

        try:
            file_content = await file.read()

            if not file_content:
                raise ValidationError("Uploaded media file is empty.")
            if len(file_content) > self.max_size_mb * 1024 * 1024:
                logger.warning("Rejected %s: larger than %sMB", file.filename, self.max_size_mb)
                raise ValidationError(f"File size exceeds {self.max_size_mb}MB limit")

            await run_in_threadpool(
                self.s3.put_object,
                Bucket=self.bucket_name,
                Key=key,
                Body=file_content,
                ContentType=file.content_type or "application/octet-stream",
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("S3 upload error: %s", e)
            raise UploadError() from e
        finally:
            await file.close()

        return self.object_url(key)

    def delete_file(self, url: str) -> bool:
        """Delete a previously uploaded object by its URL"""
        try:
            self.s3.delete_object(Bucket=self.bucket_name, Key=self.key_from_url(url))
            return True
        except (ClientError, BotoCoreError) as e:
            logger.error("S3 delete error for %s: %s", url, e)
            return False
