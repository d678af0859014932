"""
Base classes for storage backends (local disk and AWS/S3-compatible).

Provides the shared plumbing: JSON documents on the local filesystem, and
boto3 client construction from parameters or environment variables.
"""
import os
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import boto3

from src.file_utils import load_json_file, save_json_file


class BaseLocalDiskStore(ABC):
    """
    Base class for local disk storage backends.

    Provides common functionality for storing a JSON document on the local filesystem.
    """

    def __init__(self, state_dir: str = "state"):
        """
        Initialize local disk store.

        Args:
            state_dir: Directory for storing state files (default: "state")
        """
        self.state_dir = state_dir
        os.makedirs(self.state_dir, exist_ok=True)

    @abstractmethod
    def _get_filename(self) -> str:
        """
        Get the filename for this store's document.

        Returns:
            Filename (e.g., "articles.json", "events.json")
        """

    def _get_filepath(self) -> str:
        """Get the full file path for storage."""
        return os.path.join(self.state_dir, self._get_filename())

    def _load_data(self, default_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Load JSON data from file.

        Args:
            default_data: Default data structure if file doesn't exist

        Returns:
            Loaded JSON data
        """
        return load_json_file(self._get_filepath(), default_data)

    def _save_data(self, data: Dict[str, Any], ensure_dir: bool = True) -> None:
        """
        Save JSON data to file.

        Args:
            data: Data to save
            ensure_dir: Whether to create parent directory if it doesn't exist
        """
        save_json_file(self._get_filepath(), data, ensure_dir=ensure_dir)


class BaseAwsBackend:
    """
    Base class for backends that talk to an AWS (or S3-compatible) service.

    Credentials are optional: when none are given the default boto3
    credential chain is used (instance role, shared config, etc.).
    """

    service_name = ""
    endpoint_env_var: Optional[str] = None

    def __init__(
        self,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        region: Optional[str] = None,
        client=None,
    ):
        """
        Initialize the backend.

        Args:
            access_key_id: AWS access key ID (defaults to AWS_ACCESS_KEY_ID env var)
            secret_access_key: AWS secret access key (defaults to AWS_SECRET_ACCESS_KEY env var)
            endpoint_url: Custom endpoint (defaults to the service's endpoint env var, if any)
            region: AWS region (defaults to AWS_REGION or 'us-east-1')
            client: Pre-built boto3 client, used as-is when given
        """
        self.access_key_id = access_key_id or os.getenv('AWS_ACCESS_KEY_ID')
        self.secret_access_key = secret_access_key or os.getenv('AWS_SECRET_ACCESS_KEY')
        self.endpoint_url = endpoint_url or (
            os.getenv(self.endpoint_env_var) if self.endpoint_env_var else None
        )
        self.region = region or os.getenv('AWS_REGION', 'us-east-1')

        if bool(self.access_key_id) != bool(self.secret_access_key):
            raise ValueError(
                "AWS credentials are incomplete. Set both AWS_ACCESS_KEY_ID and "
                "AWS_SECRET_ACCESS_KEY environment variables or pass them as parameters."
            )

        self.client = client if client is not None else self._create_client()

    def _create_client(self):
        """Create the boto3 client for this backend's service."""
        kwargs = {"region_name": self.region}
        if self.access_key_id:
            kwargs["aws_access_key_id"] = self.access_key_id
            kwargs["aws_secret_access_key"] = self.secret_access_key
        if self.endpoint_url:
            kwargs["endpoint_url"] = self.endpoint_url
        return boto3.client(self.service_name, **kwargs)
