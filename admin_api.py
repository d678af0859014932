"""
Admin API server for the blog publisher.
Review, translation editing, staging/production promotion and rollback.
"""
import json
import logging
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from src.article_store import ArticleStore
from src.errors import (
    BackupExists,
    InvalidState,
    NoBackupsAvailable,
    NotFound,
    ObjectStoreUnavailable,
    PublishingError,
    StoreUnavailable,
    Unauthorized,
)
from src.file_utils import sanitize_log_input
from src.models import TRANSLATED_LANGUAGES, ArticleStatus
from src.publisher import Publisher
from src.review import approve_article, reject_article
from src.token_verifier import TokenVerifier, parse_bearer
from src.translator import Translator, translate_article, update_translation

logger = logging.getLogger('admin_api')

ERROR_STATUS = (
    (Unauthorized, 401),
    (InvalidState, 400),
    (NotFound, 404),
    (NoBackupsAvailable, 409),
    (BackupExists, 409),
    (StoreUnavailable, 503),
    (ObjectStoreUnavailable, 503),
)


def error_status(exc: PublishingError) -> int:
    """HTTP status code for a publishing error."""
    for error_type, status_code in ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return 500


def error_response(exc: PublishingError) -> JSONResponse:
    """
    Build the failure payload for a publishing error.

    Mirrors the success shape of PublishResult so callers can always check
    the "success" field.
    """
    return JSONResponse(
        {"success": False, "message": str(exc), "error": type(exc).__name__},
        status_code=error_status(exc),
    )


def create_admin_app(
    article_store: ArticleStore,
    publisher: Publisher,
    token_verifier: TokenVerifier,
    translator: Optional[Translator] = None,
) -> FastAPI:
    """
    Create the admin FastAPI application.

    Args:
        article_store: Store holding article records
        publisher: Publisher used for staging/production/rollback
        token_verifier: Verifies the bearer token on every request
        translator: Optional machine translator for /translate

    Returns:
        FastAPI application instance
    """
    app = FastAPI()

    @app.exception_handler(PublishingError)
    async def publishing_error_handler(request: Request, exc: PublishingError):
        logger.warning("%s %s - %d %s", request.method, request.url.path, error_status(exc), exc)
        return error_response(exc)

    def authenticate(request: Request) -> str:
        """Return the verified actor; Unauthorized is answered with 401."""
        token = parse_bearer(request.headers.get("Authorization"))
        return token_verifier.verify(token)

    def load_article(article_id: str):
        article = article_store.get(article_id)
        if article is None:
            raise NotFound("Article not found")
        return article

    async def read_json_object(request: Request) -> dict:
        """Parse the request body as a JSON object; an empty body is {}."""
        body = await request.body()
        if not body:
            return {}
        try:
            data = json.loads(body)
        except ValueError as e:
            raise HTTPException(status_code=400, detail="Request body must be valid JSON") from e
        if not isinstance(data, dict):
            raise HTTPException(status_code=400, detail="Request body must be a JSON object")
        return data

    # ================== ARTICLES ==================
    @app.get("/articles")
    async def list_articles(request: Request, status: Optional[str] = None):
        """List articles, optionally filtered by status."""
        authenticate(request)
        logger.info("GET /articles status=%s", sanitize_log_input(status or "all"))
        try:
            status_filter = ArticleStatus(status) if status else None
        except ValueError as e:
            raise HTTPException(status_code=400, detail=f"Unknown status: {status}") from e
        articles = article_store.list(status_filter)
        return JSONResponse({"articles": [a.to_dict() for a in articles]})

    @app.get("/articles/{article_id}")
    async def get_article(article_id: str, request: Request):
        """Get a single article."""
        authenticate(request)
        logger.info("GET /articles/%s", sanitize_log_input(article_id))
        return JSONResponse(load_article(article_id).to_dict())

    @app.delete("/articles/{article_id}")
    async def delete_article(article_id: str, request: Request):
        """Delete an article record. Production artifacts are left in place."""
        authenticate(request)
        if not article_store.delete(article_id):
            raise NotFound("Article not found")
        logger.info("DELETE /articles/%s - 200", sanitize_log_input(article_id))
        return JSONResponse({"status": "ok", "article_id": article_id})

    @app.post("/articles/{article_id}/approve")
    async def approve(article_id: str, request: Request):
        """Approve an article for staging."""
        authenticate(request)
        article = approve_article(article_store, article_id)
        logger.info("POST /articles/%s/approve - 200", sanitize_log_input(article_id))
        return JSONResponse({"status": "ok", "article_id": article.id, "article_status": article.status.value})

    @app.post("/articles/{article_id}/reject")
    async def reject(article_id: str, request: Request):
        """Reject an article."""
        authenticate(request)
        data = await read_json_object(request)
        article = reject_article(article_store, article_id, data.get("reason"))
        logger.info("POST /articles/%s/reject - 200", sanitize_log_input(article_id))
        return JSONResponse({"status": "ok", "article_id": article.id, "article_status": article.status.value})

    @app.put("/articles/{article_id}/translations")
    async def put_translations(article_id: str, request: Request):
        """Store human-edited translations; they are protected from re-translation."""
        authenticate(request)
        data = await read_json_object(request)
        article = load_article(article_id)

        updated = []
        for lang in TRANSLATED_LANGUAGES:
            entry = data.get(lang)
            if not entry:
                continue
            if not isinstance(entry, dict) or not entry.get("title") or not entry.get("content"):
                raise HTTPException(status_code=400, detail=f"Translation '{lang}' needs title and content")
            update_translation(article, lang, entry["title"], entry["content"])
            updated.append(lang)

        if not updated:
            raise HTTPException(status_code=400, detail="No translations provided")
        article_store.put(article)
        logger.info("PUT /articles/%s/translations - 200 %s", sanitize_log_input(article_id), updated)
        return JSONResponse({"status": "ok", "article_id": article_id, "updated": updated})

    @app.post("/articles/{article_id}/translate")
    async def machine_translate(article_id: str, request: Request):
        """Machine-translate missing or unedited translations."""
        authenticate(request)
        if translator is None:
            raise HTTPException(status_code=503, detail="Translation is not configured")
        article = load_article(article_id)
        updated = translate_article(article, translator)
        article_store.put(article)
        return JSONResponse({"status": "ok", "article_id": article_id, "updated": updated})

    # ================== PUBLISHING ==================
    @app.post("/articles/{article_id}/publish/staging")
    async def publish_staging(article_id: str, request: Request):
        """Render an article into staging."""
        actor = authenticate(request)
        staging_url = publisher.publish_to_staging(article_id, actor)
        logger.info("POST /articles/%s/publish/staging - 200", sanitize_log_input(article_id))
        return JSONResponse({
            "success": True,
            "message": "Article published to staging",
            "article_id": article_id,
            "staging_url": staging_url,
        })

    @app.post("/articles/{article_id}/publish/production")
    async def publish_production(article_id: str, request: Request):
        """Promote an article from staging to production."""
        actor = authenticate(request)
        result = publisher.publish_to_production(article_id, actor)
        logger.info("POST /articles/%s/publish/production - 200 version=%s",
                    sanitize_log_input(article_id), result.version)
        return JSONResponse(result.to_dict())

    @app.post("/articles/{article_id}/unpublish")
    async def unpublish(article_id: str, request: Request):
        """Remove an article's pages from production."""
        actor = authenticate(request)
        return JSONResponse(publisher.unpublish(article_id, actor).to_dict())

    @app.get("/articles/{article_id}/publishing-status")
    async def publishing_status(article_id: str, request: Request):
        """Get publishing metadata for an article."""
        authenticate(request)
        return JSONResponse(publisher.get_publishing_status(article_id))

    @app.post("/plp/staging")
    async def plp_staging(request: Request):
        """Render the listing page into staging."""
        authenticate(request)
        keys = publisher.publish_plp_to_staging()
        logger.info("POST /plp/staging - 200")
        return JSONResponse({"success": True, "message": "Listing page published to staging", "keys": keys})

    @app.post("/plp/production")
    async def plp_production(request: Request):
        """Promote the listing page to production."""
        authenticate(request)
        result = publisher.publish_plp_to_production()
        logger.info("POST /plp/production - 200")
        return JSONResponse(result.to_dict())

    @app.post("/assets")
    async def publish_assets(request: Request):
        """Upload the shared stylesheet."""
        authenticate(request)
        return JSONResponse(publisher.publish_assets().to_dict())

    # ================== BACKUPS ==================
    @app.get("/backups")
    async def list_backups(request: Request):
        """List backups, most recent first."""
        authenticate(request)
        return JSONResponse({"backups": [b.to_dict() for b in publisher.list_backups()]})

    @app.post("/rollback")
    async def rollback(request: Request, timestamp: Optional[str] = None):
        """Restore production from the latest backup or a given timestamp."""
        authenticate(request)
        logger.info("POST /rollback timestamp=%s", sanitize_log_input(timestamp or "latest"))
        return JSONResponse(publisher.rollback(timestamp).to_dict())

    # ================== STATS ==================
    @app.get("/stats")
    async def stats(request: Request):
        """Count articles per status."""
        authenticate(request)
        articles = article_store.list()
        counts = {status.value: 0 for status in ArticleStatus}
        for article in articles:
            counts[article.status.value] += 1
        counts["total"] = len(articles)
        return JSONResponse(counts)

    return app
