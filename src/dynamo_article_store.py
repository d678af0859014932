"""
DynamoDB implementation of article storage.

Each article is one item keyed by "id". Items are mapped field by field
(see article_to_item / item_to_article) so that a schema mismatch fails
loudly at the boundary instead of deep inside the publisher.
"""
import logging
from typing import Any, Dict, List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from src.article_store import ArticleStore
from src.base_store import BaseAwsBackend
from src.errors import StoreUnavailable
from src.models import (
    Article,
    ArticleContent,
    ArticleStatus,
    PublishingMetadata,
    Translation,
)

logger = logging.getLogger(__name__)


def _string(value: Optional[str]) -> Dict[str, Any]:
    if value is None:
        return {"NULL": True}
    return {"S": value}


def _read_string(attr: Optional[Dict[str, Any]], default: Optional[str] = None) -> Optional[str]:
    if not attr or "NULL" in attr:
        return default
    return attr["S"]


def article_to_item(article: Article) -> Dict[str, Dict[str, Any]]:
    """
    Convert an Article into a DynamoDB attribute map.

    Args:
        article: Article to convert

    Returns:
        Attribute map suitable for put_item
    """
    publishing = article.publishing
    return {
        "id": {"S": article.id},
        "source": {"S": article.source},
        "source_url": {"S": article.source_url},
        "title": {"S": article.title},
        "author": {"S": article.author},
        "published_date": {"S": article.published_date},
        "scraped_at": _string(article.scraped_at),
        "status": {"S": article.status.value},
        "rejection_reason": _string(article.rejection_reason),
        "content": {"M": {
            "original_html": {"S": article.content.original_html},
            "text": {"S": article.content.text},
            "images": {"L": [{"S": url} for url in article.content.images]},
        }},
        "translations": {"M": {
            lang: {"M": {
                "title": {"S": translation.title},
                "content": {"S": translation.content},
                "edited": {"BOOL": translation.edited},
                "edited_at": _string(translation.edited_at),
            }}
            for lang, translation in article.translations.items()
        }},
        "publishing": {"M": {
            "staged_at": _string(publishing.staged_at),
            "staged_by": _string(publishing.staged_by),
            "published_at": _string(publishing.published_at),
            "published_by": _string(publishing.published_by),
            "staging_url": _string(publishing.staging_url),
            "production_url": _string(publishing.production_url),
            "version": {"N": str(publishing.version)},
        }},
    }


def item_to_article(item: Dict[str, Dict[str, Any]]) -> Article:
    """
    Convert a DynamoDB attribute map into an Article.

    Args:
        item: Attribute map returned by get_item/scan

    Returns:
        Parsed Article

    Raises:
        KeyError: If a required attribute is missing
        ValueError: If the status attribute is not a known status
    """
    content = item.get("content", {}).get("M", {})
    translations = item.get("translations", {}).get("M", {})
    publishing = item.get("publishing", {}).get("M", {})

    return Article(
        id=item["id"]["S"],
        source=_read_string(item.get("source"), ""),
        source_url=_read_string(item.get("source_url"), ""),
        title=_read_string(item.get("title"), ""),
        author=_read_string(item.get("author"), ""),
        published_date=_read_string(item.get("published_date"), ""),
        scraped_at=_read_string(item.get("scraped_at")),
        status=ArticleStatus(item["status"]["S"]),
        rejection_reason=_read_string(item.get("rejection_reason")),
        content=ArticleContent(
            original_html=_read_string(content.get("original_html"), ""),
            text=_read_string(content.get("text"), ""),
            images=[entry["S"] for entry in content.get("images", {}).get("L", [])],
        ),
        translations={
            lang: Translation(
                title=_read_string(value["M"].get("title"), ""),
                content=_read_string(value["M"].get("content"), ""),
                edited=value["M"].get("edited", {}).get("BOOL", False),
                edited_at=_read_string(value["M"].get("edited_at")),
            )
            for lang, value in translations.items()
        },
        publishing=PublishingMetadata(
            staged_at=_read_string(publishing.get("staged_at")),
            staged_by=_read_string(publishing.get("staged_by")),
            published_at=_read_string(publishing.get("published_at")),
            published_by=_read_string(publishing.get("published_by")),
            staging_url=_read_string(publishing.get("staging_url")),
            production_url=_read_string(publishing.get("production_url")),
            version=int(publishing.get("version", {}).get("N", "0")),
        ),
    )


class DynamoArticleStore(BaseAwsBackend, ArticleStore):
    """
    DynamoDB implementation of article storage.

    Table name defaults to ARTICLES_TABLE_NAME (or "articles").
    """

    service_name = "dynamodb"
    endpoint_env_var = "AWS_ENDPOINT_URL_DYNAMODB"

    def __init__(self, table_name: str = "articles", **kwargs):
        """
        Initialize the DynamoDB article store.

        Args:
            table_name: DynamoDB table holding article items.
            **kwargs: Additional keyword arguments passed to BaseAwsBackend.
        """
        super().__init__(**kwargs)
        self.table_name = table_name

    def get(self, article_id: str) -> Optional[Article]:
        """
        Get a single article by ID from DynamoDB.

        Args:
            article_id: The unique identifier of the article.

        Returns:
            Article or None if not found.
        """
        try:
            response = self.client.get_item(
                TableName=self.table_name,
                Key={"id": {"S": article_id}},
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("Failed to get article %s: %s", article_id, e)
            raise StoreUnavailable(f"Failed to get article {article_id}: {e}") from e

        item = response.get("Item")
        if item is None:
            return None
        return item_to_article(item)

    def put(self, article: Article) -> None:
        """
        Save (create or replace) an article in DynamoDB.

        Args:
            article: Article to persist.
        """
        try:
            self.client.put_item(TableName=self.table_name, Item=article_to_item(article))
        except (ClientError, BotoCoreError) as e:
            logger.error("Failed to save article %s: %s", article.id, e)
            raise StoreUnavailable(f"Failed to save article {article.id}: {e}") from e

    def list(self, status: Optional[ArticleStatus] = None) -> List[Article]:
        """
        Scan articles from DynamoDB, following pagination.

        Args:
            status: Optional status filter (applied as a scan filter expression).

        Returns:
            List of articles. Items that fail to parse are logged and skipped.
        """
        scan_kwargs: Dict[str, Any] = {"TableName": self.table_name}
        if status is not None:
            scan_kwargs.update(
                FilterExpression="#status = :status",
                ExpressionAttributeNames={"#status": "status"},
                ExpressionAttributeValues={":status": {"S": status.value}},
            )

        articles = []
        while True:
            try:
                response = self.client.scan(**scan_kwargs)
            except (ClientError, BotoCoreError) as e:
                logger.error("Failed to scan articles: %s", e)
                raise StoreUnavailable(f"Failed to list articles: {e}") from e

            for item in response.get("Items", []):
                try:
                    articles.append(item_to_article(item))
                except (KeyError, ValueError) as e:
                    logger.warning("Skipping malformed article item %s: %s", item.get("id"), e)

            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return articles
            scan_kwargs["ExclusiveStartKey"] = last_key

    def delete(self, article_id: str) -> bool:
        """
        Delete an article by ID from DynamoDB.

        Args:
            article_id: The unique identifier of the article.

        Returns:
            True if deleted, False if not found.
        """
        try:
            response = self.client.delete_item(
                TableName=self.table_name,
                Key={"id": {"S": article_id}},
                ReturnValues="ALL_OLD",
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("Failed to delete article %s: %s", article_id, e)
            raise StoreUnavailable(f"Failed to delete article {article_id}: {e}") from e
        return "Attributes" in response
