"""
Factory function for creating CDN invalidators.
"""
import os

from src.cdn_invalidator import CdnInvalidator, NullCdnInvalidator
from src.cloudfront_invalidator import CloudFrontInvalidator


def create_cdn_invalidator() -> CdnInvalidator:
    """
    Create a CDN invalidator based on environment configuration.

    PRODUCTION_DISTRIBUTION_ID selects CloudFront; when it is unset the
    disabled (no-op) invalidator is returned.

    Returns:
        CdnInvalidator: Configured invalidator instance
    """
    distribution_id = os.getenv('PRODUCTION_DISTRIBUTION_ID', '')
    if distribution_id:
        return CloudFrontInvalidator(distribution_id=distribution_id)
    return NullCdnInvalidator()
