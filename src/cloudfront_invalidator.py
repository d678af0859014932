"""
CloudFront implementation of CDN invalidation.
"""
import logging
import uuid
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError

from src.base_store import BaseAwsBackend
from src.cdn_invalidator import CdnInvalidator
from src.errors import CacheInvalidationFailed

logger = logging.getLogger(__name__)


class CloudFrontInvalidator(BaseAwsBackend, CdnInvalidator):
    """Invalidates paths on a single CloudFront distribution."""

    service_name = "cloudfront"

    def __init__(self, distribution_id: str, **kwargs):
        """
        Initialize CloudFront invalidator.

        Args:
            distribution_id: Production distribution ID
            **kwargs: Additional keyword arguments passed to BaseAwsBackend
        """
        super().__init__(**kwargs)
        if not distribution_id:
            raise ValueError("distribution_id is required for CloudFrontInvalidator")
        self.distribution_id = distribution_id

    def invalidate(self, path_pattern: str) -> Optional[str]:
        """
        Create an invalidation for one path pattern.

        Args:
            path_pattern: Path pattern; a leading "/" is added when missing

        Returns:
            The CloudFront invalidation ID

        Raises:
            CacheInvalidationFailed: If CloudFront rejects the request
        """
        path = path_pattern if path_pattern.startswith("/") else f"/{path_pattern}"
        logger.info("Invalidating CloudFront cache for: %s", path)
        try:
            response = self.client.create_invalidation(
                DistributionId=self.distribution_id,
                InvalidationBatch={
                    'Paths': {'Quantity': 1, 'Items': [path]},
                    'CallerReference': str(uuid.uuid4()),
                },
            )
        except (ClientError, BotoCoreError) as e:
            raise CacheInvalidationFailed(f"Invalidation of {path} failed: {e}") from e

        invalidation_id = response.get('Invalidation', {}).get('Id')
        logger.info("CloudFront invalidation created: %s", invalidation_id)
        return invalidation_id
