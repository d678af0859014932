"""
Local disk implementation of article storage.

Stores articles as a JSON file on the local filesystem.
Default location: state/articles.json
"""
from typing import List, Optional

from src.article_store import ArticleStore
from src.base_store import BaseLocalDiskStore
from src.models import Article, ArticleStatus


class LocalDiskArticleStore(BaseLocalDiskStore, ArticleStore):
    """
    Local disk implementation of article storage.

    Stores articles in a JSON file on the local filesystem.
    Default location: state/articles.json
    """

    def _get_filename(self) -> str:
        """Get the filename for article storage."""
        return "articles.json"

    def _load_records(self) -> List[dict]:
        data = self._load_data({"articles": []})
        return data.get("articles", [])

    def get(self, article_id: str) -> Optional[Article]:
        """
        Get a single article by ID from local disk.

        Args:
            article_id: The unique identifier of the article.

        Returns:
            Article or None if not found.
        """
        for record in self._load_records():
            if record.get("id") == article_id:
                return Article.from_dict(record)
        return None

    def put(self, article: Article) -> None:
        """
        Save (create or replace) an article on local disk.

        Args:
            article: Article to persist.
        """
        records = self._load_records()
        record = article.to_dict()

        for i, existing in enumerate(records):
            if existing.get("id") == article.id:
                records[i] = record
                self._save_data({"articles": records})
                return

        records.append(record)
        self._save_data({"articles": records})

    def list(self, status: Optional[ArticleStatus] = None) -> List[Article]:
        """
        List articles from local disk.

        Args:
            status: Optional status filter.

        Returns:
            List of articles in storage order.
        """
        articles = [Article.from_dict(record) for record in self._load_records()]
        if status is None:
            return articles
        return [a for a in articles if a.status == status]

    def delete(self, article_id: str) -> bool:
        """
        Delete an article by ID from local disk.

        Args:
            article_id: The unique identifier of the article.

        Returns:
            True if deleted, False if not found.
        """
        records = self._load_records()
        remaining = [r for r in records if r.get("id") != article_id]

        if len(remaining) == len(records):
            return False

        self._save_data({"articles": remaining})
        return True
