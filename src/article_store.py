"""
Abstract interface for article storage backends.

Defines the interface for getting, saving, listing, and deleting articles.
Implementations can store articles locally or in a key-value database
(DynamoDB), allowing the scraper, the admin API and the publisher to share
the same article records. Writes are whole-record overwrites, last write wins.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from src.models import Article, ArticleStatus


class ArticleStore(ABC):
    """Abstract base class for article storage backends."""

    @abstractmethod
    def get(self, article_id: str) -> Optional[Article]:
        """
        Get a single article by ID.

        Args:
            article_id: The unique identifier of the article.

        Returns:
            The Article, or None if not found.

        Raises:
            StoreUnavailable: If the backend fails.
        """

    @abstractmethod
    def put(self, article: Article) -> None:
        """
        Save (create or replace) an article.

        Args:
            article: Article to persist.

        Raises:
            StoreUnavailable: If the backend fails.
        """

    @abstractmethod
    def list(self, status: Optional[ArticleStatus] = None) -> List[Article]:
        """
        List articles, optionally filtered by status.

        Args:
            status: Only return articles in this status when given.

        Returns:
            List of articles.

        Raises:
            StoreUnavailable: If the backend fails.
        """

    @abstractmethod
    def delete(self, article_id: str) -> bool:
        """
        Delete an article by ID.

        Args:
            article_id: The unique identifier of the article.

        Returns:
            True if the article was deleted, False if it was not found.

        Raises:
            StoreUnavailable: If the backend fails.
        """

    def list_published(self) -> List[Article]:
        """
        List published articles, most recent publication date first.

        Returns:
            Published articles sorted by published_date descending.
        """
        articles = self.list(ArticleStatus.PUBLISHED)
        return sorted(articles, key=lambda a: a.published_date or "", reverse=True)
