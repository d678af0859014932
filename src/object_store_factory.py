"""
Factory for creating object stores based on configuration.
"""
import os

from src.local_disk_object_store import LocalDiskObjectStore
from src.object_store import ObjectStore
from src.s3_object_store import S3ObjectStore


def create_object_store(state_dir: str = "state") -> ObjectStore:
    """
    Create an object store based on environment configuration.

    Returns:
        ObjectStore instance (LocalDiskObjectStore or S3ObjectStore)

    Raises:
        ValueError: If OBJECT_STORAGE_TYPE names an unknown backend

    Environment variables:
        OBJECT_STORAGE_TYPE: Type of storage ('local' or 's3', default: 'local')

        For S3 storage:
        - PUBLIC_BUCKET_NAME: Bucket holding staging/production/backups
        - AWS_ENDPOINT_URL_S3: Custom endpoint for S3-compatible services (optional)
        - AWS_ACCESS_KEY_ID / AWS_SECRET_ACCESS_KEY: Credentials (optional)
        - AWS_REGION: AWS region (default: 'us-east-1')
    """
    storage_type = os.getenv('OBJECT_STORAGE_TYPE', 'local').lower()

    if storage_type == 's3':
        return S3ObjectStore()
    if storage_type == 'local':
        return LocalDiskObjectStore(root_dir=os.path.join(state_dir, "site"))
    raise ValueError(
        f"Invalid OBJECT_STORAGE_TYPE: {storage_type}. Must be 'local' or 's3'."
    )
