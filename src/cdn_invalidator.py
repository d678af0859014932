"""
Abstract interface for CDN cache invalidation.

Invalidation is best-effort. Implementations raise CacheInvalidationFailed
and the publisher turns that into a degraded-but-successful result.
"""
import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class CdnInvalidator(ABC):
    """Abstract base class for CDN invalidation backends."""

    @abstractmethod
    def invalidate(self, path_pattern: str) -> None:
        """
        Request invalidation of cached paths.

        Args:
            path_pattern: Path or wildcard pattern, e.g. "articles/a1*" or "/*"

        Raises:
            CacheInvalidationFailed: If the request could not be made
        """


class NullCdnInvalidator(CdnInvalidator):
    """Invalidator used when no distribution is configured."""

    def invalidate(self, path_pattern: str) -> None:
        logger.info("CDN not configured, skipping cache invalidation for %s", path_pattern)
