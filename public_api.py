"""
Public read-only API for the blog.
Serves published articles in every language and records analytics events.
"""
import logging
import math
from collections import Counter
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from src.article_store import ArticleStore
from src.errors import PublishingError
from src.event_sink import EVENT_TYPES, EventSink
from src.file_utils import get_utc_timestamp, sanitize_log_input
from src.html_renderer import make_excerpt
from src.models import DEFAULT_LANGUAGE, SUPPORTED_LANGUAGES, Article, ArticleStatus

logger = logging.getLogger('public_api')

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def summarize(article: Article, lang: str) -> dict:
    """Build the listing entry for an article in one language."""
    localized = article.localized(lang)
    return {
        "id": article.id,
        "title": localized["title"],
        "excerpt": make_excerpt(localized["content"]),
        "published_date": article.published_date,
        "source": article.source,
        "language": lang,
    }


def create_public_app(article_store: ArticleStore, event_sink: Optional[EventSink] = None) -> FastAPI:
    """
    Create the public FastAPI application.

    Args:
        article_store: Store holding article records
        event_sink: Where analytics events go (tracking disabled when None)

    Returns:
        FastAPI application instance
    """
    app = FastAPI()

    def check_language(lang: str) -> str:
        if lang not in SUPPORTED_LANGUAGES:
            raise HTTPException(status_code=400, detail=f"Unsupported language: {lang}")
        return lang

    def published() -> List[Article]:
        try:
            return article_store.list_published()
        except PublishingError as e:
            logger.error("Failed to list published articles: %s", e)
            raise HTTPException(status_code=503, detail="Article store unavailable") from e

    @app.get("/health")
    async def health():
        """Liveness check."""
        return JSONResponse({"status": "healthy", "timestamp": get_utc_timestamp()})

    @app.get("/api/articles")
    async def list_articles(
        lang: str = DEFAULT_LANGUAGE,
        category: Optional[str] = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ):
        """List published articles, newest first, one page at a time."""
        check_language(lang)
        page = max(page, 1)
        limit = min(max(limit, 1), MAX_PAGE_SIZE)

        articles = published()
        if category:
            articles = [a for a in articles if a.source == category]

        total = len(articles)
        start = (page - 1) * limit
        return JSONResponse({
            "articles": [summarize(a, lang) for a in articles[start:start + limit]],
            "total": total,
            "page": page,
            "total_pages": math.ceil(total / limit) if total else 0,
        })

    @app.get("/api/articles/search")
    async def search_articles(q: str = "", lang: str = DEFAULT_LANGUAGE):
        """Case-insensitive search over localized titles and bodies."""
        check_language(lang)
        query = q.strip().lower()
        if not query:
            return JSONResponse({"articles": [], "total": 0})

        matches = []
        for article in published():
            localized = article.localized(lang)
            if query in localized["title"].lower() or query in localized["content"].lower():
                matches.append(summarize(article, lang))
        logger.info("Search '%s' (%s) - %d results", sanitize_log_input(query), lang, len(matches))
        return JSONResponse({"articles": matches, "total": len(matches)})

    @app.get("/api/articles/{article_id}")
    async def get_article(article_id: str, lang: str = DEFAULT_LANGUAGE):
        """Get one published article."""
        check_language(lang)
        try:
            article = article_store.get(article_id)
        except PublishingError as e:
            raise HTTPException(status_code=503, detail="Article store unavailable") from e
        if article is None or article.status != ArticleStatus.PUBLISHED:
            raise HTTPException(status_code=404, detail="Article not found")

        localized = article.localized(lang)
        return JSONResponse({
            "id": article.id,
            "title": localized["title"],
            "content": localized["content"],
            "author": article.author,
            "published_date": article.published_date,
            "source": article.source,
            "source_url": article.source_url,
            "language": lang,
            "edited": localized["edited"],
            "images": list(article.content.images),
        })

    @app.get("/api/categories")
    async def categories():
        """Count published articles per source."""
        counts = Counter(a.source for a in published())
        return JSONResponse({
            "categories": [{"name": name, "count": count} for name, count in sorted(counts.items())]
        })

    @app.post("/api/analytics/track")
    async def track(request: Request):
        """Record a view/click/share event. Failures are logged, never surfaced."""
        data = await request.json()
        article_id = data.get("article_id")
        event_type = data.get("event_type")
        if not article_id or event_type not in EVENT_TYPES:
            raise HTTPException(status_code=400, detail="article_id and a valid event_type are required")

        if event_sink is not None:
            event = {
                "article_id": article_id,
                "event_type": event_type,
                "language": data.get("language", DEFAULT_LANGUAGE),
                "user_agent": request.headers.get("User-Agent"),
            }
            try:
                event_sink.record(event)
            except Exception as e:  # pylint: disable=broad-exception-caught
                logger.warning("Dropped %s event for %s: %s",
                               event_type, sanitize_log_input(article_id), e)
        return JSONResponse({"status": "ok"})

    return app
