"""
Configuration management for the blog publisher.
Loads environment variables and provides access to configuration settings.
"""
import logging
import os
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


class Config:
    """Configuration settings loaded from environment variables."""

    def __init__(self):
        """Initialize configuration by loading environment variables."""
        load_dotenv()

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """
        Get a configuration value by key.

        Args:
            key: Configuration key name
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        return os.getenv(key, default)

    @property
    def site_domain(self) -> str:
        """Get the public site domain used for canonical URLs."""
        return os.getenv("SITE_DOMAIN", "yourdomain.com")

    @property
    def site_title(self) -> str:
        """Get the site title shown on rendered pages."""
        return os.getenv("SITE_TITLE", "AI & Tech Blog")

    @property
    def state_dir(self) -> str:
        """Get the directory for local disk storage."""
        return os.getenv("STATE_DIR", "state")

    @property
    def article_storage_type(self) -> str:
        """Get article store backend ('local' or 'dynamodb')."""
        return os.getenv("ARTICLE_STORAGE_TYPE", "local").lower()

    @property
    def object_storage_type(self) -> str:
        """Get object store backend ('local' or 's3')."""
        return os.getenv("OBJECT_STORAGE_TYPE", "local").lower()

    @property
    def articles_table_name(self) -> str:
        """Get DynamoDB table name for articles."""
        return os.getenv("ARTICLES_TABLE_NAME", "articles")

    @property
    def public_bucket_name(self) -> str:
        """Get bucket name for rendered artifacts."""
        return os.getenv("PUBLIC_BUCKET_NAME", "")

    @property
    def production_distribution_id(self) -> str:
        """Get CloudFront distribution ID (empty disables invalidation)."""
        return os.getenv("PRODUCTION_DISTRIBUTION_ID", "")

    @property
    def cdn_enabled(self) -> bool:
        """Check if CDN invalidation is configured."""
        return bool(self.production_distribution_id)

    @property
    def admin_api_token(self) -> str:
        """Get the shared admin API token."""
        token = os.getenv("ADMIN_API_TOKEN", "")
        if not token:
            logger.warning("ADMIN_API_TOKEN is not set; admin requests will be rejected")
        return token

    @property
    def openrouter_api_key(self) -> str:
        """Get OpenRouter API key."""
        return os.getenv("OPENROUTER_API_KEY", "")

    @property
    def model_name(self) -> str:
        """Get LLM model name used for translation."""
        return os.getenv("MODEL_NAME", "google/gemini-flash-2.0")

    @property
    def server_host(self) -> str:
        """Get HTTP server host."""
        return os.getenv("SERVER_HOST", "0.0.0.0")

    @property
    def server_port(self) -> int:
        """Get HTTP server port."""
        return int(os.getenv("SERVER_PORT", "8000"))
