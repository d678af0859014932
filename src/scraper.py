"""
Scraping collaborator interface and ingestion into the article store.

Site-specific parsing lives in Scraper subclasses. Fetching goes through an
ordered list of fetch strategies, tried until one returns HTML.
"""
import hashlib
import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, Iterable, List, Optional, Sequence

import requests

from src.article_store import ArticleStore
from src.file_utils import get_utc_timestamp
from src.models import Article, ArticleContent, ArticleStatus

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; BlogPublisherBot/1.0)"

FetchStrategy = Callable[[str], str]


def generate_article_id(url: str) -> str:
    """Stable article ID: SHA-256 hex digest of the source URL."""
    return hashlib.sha256(url.encode("utf-8")).hexdigest()


def requests_fetch(url: str) -> str:
    """
    Fetch a page with a plain HTTP GET.

    Raises:
        requests.exceptions.RequestException: On network or HTTP errors
    """
    response = requests.get(url, headers={"User-Agent": USER_AGENT}, timeout=30)
    response.raise_for_status()
    return response.text


def fetch_html(url: str, strategies: Sequence[FetchStrategy]) -> str:
    """
    Fetch a page using the first strategy that succeeds.

    Args:
        url: Page URL
        strategies: Fetch functions, tried in order

    Returns:
        Page HTML

    Raises:
        RuntimeError: If every strategy fails (the last error is chained)
    """
    last_error: Optional[Exception] = None
    for strategy in strategies:
        try:
            return strategy(url)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.warning("Fetch strategy %s failed for %s: %s",
                           getattr(strategy, "__name__", strategy), url, e)
            last_error = e
    raise RuntimeError(f"All fetch strategies failed for {url}") from last_error


class Scraper(ABC):
    """One news site: lists candidate article URLs and parses single articles."""

    def __init__(self, strategies: Optional[Sequence[FetchStrategy]] = None):
        """
        Args:
            strategies: Fetch strategies (defaults to a plain requests GET)
        """
        self.strategies = list(strategies or [requests_fetch])

    @property
    @abstractmethod
    def name(self) -> str:
        """Source name stored on each article, e.g. "techcrunch"."""

    @abstractmethod
    def list_candidates(self) -> List[str]:
        """Return article URLs from the site's listing page, newest first."""

    @abstractmethod
    def fetch_one(self, url: str) -> Dict[str, object]:
        """
        Scrape one article.

        Returns:
            Dict with 'title', 'author', 'published_date', 'original_html',
            'text' and 'images' keys
        """

    def fetch(self, url: str) -> str:
        """Fetch a page through this scraper's strategies."""
        return fetch_html(url, self.strategies)


def ingest(scraper: Scraper, store: ArticleStore, limit: int = 10) -> Dict[str, object]:
    """
    Scrape new articles from one site and store them as pending.

    Articles already in the store (same URL-derived ID) are skipped. A
    failure on one article is recorded and does not stop the others.

    Args:
        scraper: Site scraper
        store: Article store
        limit: Maximum number of candidates to examine

    Returns:
        Dict with 'new_articles' (count) and 'errors' (messages)
    """
    results = {"new_articles": 0, "errors": []}
    logger.info("Scraping %s...", scraper.name)
    candidates: Iterable[str] = scraper.list_candidates()[:limit]

    for url in candidates:
        article_id = generate_article_id(url)
        if store.get(article_id) is not None:
            logger.info("Article already exists: %s", url)
            continue
        try:
            scraped = scraper.fetch_one(url)
        except Exception as e:  # pylint: disable=broad-exception-caught
            message = f"Failed to scrape article {url}: {e}"
            logger.warning(message)
            results["errors"].append(message)
            continue

        article = Article(
            id=article_id,
            source=scraper.name,
            source_url=url,
            title=str(scraped.get("title", "")),
            author=str(scraped.get("author", "")),
            published_date=str(scraped.get("published_date", "")),
            scraped_at=get_utc_timestamp(),
            content=ArticleContent(
                original_html=str(scraped.get("original_html", "")),
                text=str(scraped.get("text", "")),
                images=list(scraped.get("images", [])),
            ),
            status=ArticleStatus.PENDING,
        )
        store.put(article)
        results["new_articles"] += 1
        logger.info("Saved article: %s", article.title)

    return results
