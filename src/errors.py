"""
Error types raised by the publishing pipeline.

Hard errors abort the current operation. CacheInvalidationFailed is the one
soft error: Publisher catches it and reports a degraded (but successful)
result instead of propagating it. Backups are write-once, so a second backup
of the same target within one minute raises BackupExists.
"""


class PublishingError(Exception):
    """Base class for all publishing pipeline errors."""


class InvalidState(PublishingError):
    """Operation attempted while the article is in a disallowed status."""

    def __init__(self, article_id: str, status: str, allowed):
        self.article_id = article_id
        self.status = status
        self.allowed = sorted(allowed)
        super().__init__(
            f"Article {article_id} is '{status}', expected one of: {', '.join(self.allowed)}"
        )


class NotFound(PublishingError):
    """Article, artifact, or backup does not exist."""


class StoreUnavailable(PublishingError):
    """The article store backend failed."""


class ObjectStoreUnavailable(PublishingError):
    """The object store backend failed."""


class CacheInvalidationFailed(PublishingError):
    """The CDN rejected or failed an invalidation request."""


class NoBackupsAvailable(PublishingError):
    """Rollback requested but no backups exist."""


class Unauthorized(PublishingError):
    """Missing or invalid credentials on an admin request."""


class BackupExists(PublishingError):
    """A backup for the same target and minute has already been written."""
