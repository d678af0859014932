"""
Factory function for creating article stores.
"""
import os

from src.article_store import ArticleStore
from src.dynamo_article_store import DynamoArticleStore
from src.local_disk_article_store import LocalDiskArticleStore


def create_article_store(state_dir: str = "state") -> ArticleStore:
    """
    Create an article store based on environment configuration.

    Reads the ARTICLE_STORAGE_TYPE environment variable to determine
    which implementation to use:
    - 'local' or unset: LocalDiskArticleStore (default)
    - 'dynamodb': DynamoArticleStore (table from ARTICLES_TABLE_NAME)

    Args:
        state_dir: Directory for local disk storage (default: "state")

    Returns:
        ArticleStore: Configured article store instance

    Raises:
        ValueError: If ARTICLE_STORAGE_TYPE names an unknown backend
    """
    storage_type = os.getenv('ARTICLE_STORAGE_TYPE', 'local').lower()

    if storage_type == 'dynamodb':
        return DynamoArticleStore(table_name=os.getenv('ARTICLES_TABLE_NAME', 'articles'))
    if storage_type == 'local':
        return LocalDiskArticleStore(state_dir=state_dir)
    raise ValueError(
        f"Invalid ARTICLE_STORAGE_TYPE: {storage_type}. Must be 'local' or 'dynamodb'."
    )
