"""
Upload Broker - Presigned S3 Upload URLs

Clients upload banner and inline images straight to object storage.
This module hands out short-lived URLs that allow exactly one PUT of a
fresh object key; the upload itself never passes through the API.
"""

import asyncio
import logging
import time

from botocore.exceptions import BotoCoreError, ClientError

from blogverse.errors import StorageProviderError
from blogverse.utils.text import random_suffix


logger = logging.getLogger(__name__)

IMAGE_EXTENSION = "jpeg"
IMAGE_CONTENT_TYPE = "image/jpeg"


def new_object_key() -> str:
    """
    Build a fresh object key: random prefix plus epoch milliseconds.

    Example:
        >>> new_object_key()
        'V1StG-1718000000000.jpeg'
    """
    return f"{random_suffix(5)}-{int(time.time() * 1000)}.{IMAGE_EXTENSION}"


class UploadBroker:
    """
    Issues write-scoped presigned URLs for a single bucket.

    Args:
        client: boto3 S3 client
        bucket: Target bucket name
        expires_in: URL lifetime in seconds
    """

    def __init__(self, client, bucket: str, expires_in: int = 1000):
        self.client = client
        self.bucket = bucket
        self.expires_in = expires_in

    async def request_upload_url(self) -> str:
        key = new_object_key()

        def _sign():
            return self.client.generate_presigned_url(
                "put_object",
                Params={"Bucket": self.bucket, "Key": key, "ContentType": IMAGE_CONTENT_TYPE},
                ExpiresIn=self.expires_in,
            )

        # Signing may need to resolve credentials, which can block
        try:
            return await asyncio.to_thread(_sign)
        except (BotoCoreError, ClientError) as exc:
            logger.error(f"Could not presign upload for {key}: {exc}")
            raise StorageProviderError(exc) from exc
