"""
S3/S3-compatible implementation of object storage.

Works against AWS S3 or any S3-compatible service (Tigris, MinIO) via
AWS_ENDPOINT_URL_S3. Bucket defaults to PUBLIC_BUCKET_NAME.
"""
import logging
import os
from typing import List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from src.base_store import BaseAwsBackend
from src.errors import NotFound, ObjectStoreUnavailable
from src.object_store import ObjectStore

logger = logging.getLogger(__name__)

MISSING_OBJECT_CODES = {"NoSuchKey", "404", "NotFound"}


def _is_missing(error: ClientError) -> bool:
    return error.response.get('Error', {}).get('Code') in MISSING_OBJECT_CODES


class S3ObjectStore(BaseAwsBackend, ObjectStore):
    """Object store backed by an S3-compatible bucket."""

    service_name = "s3"
    endpoint_env_var = "AWS_ENDPOINT_URL_S3"

    def __init__(self, bucket_name: Optional[str] = None, **kwargs):
        """
        Initialize S3 object store.

        Args:
            bucket_name: Bucket name (defaults to PUBLIC_BUCKET_NAME env var)
            **kwargs: Additional keyword arguments passed to BaseAwsBackend
        """
        super().__init__(**kwargs)
        self.bucket_name = bucket_name or os.getenv('PUBLIC_BUCKET_NAME')
        if not self.bucket_name:
            raise ValueError(
                "Bucket name is required. Set PUBLIC_BUCKET_NAME environment variable "
                "or pass it as a parameter."
            )

    def put(self, key: str, body: bytes, content_type: str) -> None:
        try:
            self.client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=body,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("Failed to upload %s: %s", key, e)
            raise ObjectStoreUnavailable(f"Failed to upload {key}: {e}") from e

    def get(self, key: str) -> bytes:
        try:
            response = self.client.get_object(Bucket=self.bucket_name, Key=key)
            return response['Body'].read()
        except ClientError as e:
            if _is_missing(e):
                raise NotFound(f"Object not found: {key}") from e
            raise ObjectStoreUnavailable(f"Failed to read {key}: {e}") from e
        except BotoCoreError as e:
            raise ObjectStoreUnavailable(f"Failed to read {key}: {e}") from e

    def exists(self, key: str) -> bool:
        try:
            self.client.head_object(Bucket=self.bucket_name, Key=key)
            return True
        except ClientError as e:
            if _is_missing(e):
                return False
            raise ObjectStoreUnavailable(f"Failed to check {key}: {e}") from e
        except BotoCoreError as e:
            raise ObjectStoreUnavailable(f"Failed to check {key}: {e}") from e

    def copy(self, src_key: str, dst_key: str) -> None:
        try:
            self.client.copy_object(
                Bucket=self.bucket_name,
                CopySource={'Bucket': self.bucket_name, 'Key': src_key},
                Key=dst_key,
            )
        except ClientError as e:
            if _is_missing(e):
                raise NotFound(f"Object not found: {src_key}") from e
            raise ObjectStoreUnavailable(f"Failed to copy {src_key} to {dst_key}: {e}") from e
        except BotoCoreError as e:
            raise ObjectStoreUnavailable(f"Failed to copy {src_key} to {dst_key}: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket_name, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise ObjectStoreUnavailable(f"Failed to delete {key}: {e}") from e

    def _paginate(self, **kwargs):
        paginator = self.client.get_paginator('list_objects_v2')
        try:
            for page in paginator.paginate(Bucket=self.bucket_name, **kwargs):
                yield page
        except (ClientError, BotoCoreError) as e:
            raise ObjectStoreUnavailable(f"Failed to list {kwargs.get('Prefix')}: {e}") from e

    def list_keys(self, prefix: str) -> List[str]:
        keys = []
        for page in self._paginate(Prefix=prefix):
            keys.extend(obj['Key'] for obj in page.get('Contents', []))
        return sorted(keys)

    def list_prefixes(self, prefix: str) -> List[str]:
        prefixes = []
        for page in self._paginate(Prefix=prefix, Delimiter='/'):
            prefixes.extend(cp['Prefix'] for cp in page.get('CommonPrefixes', []))
        return sorted(prefixes)
