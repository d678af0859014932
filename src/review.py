"""
Human review transitions: approve and reject.

Publisher only checks the statuses it needs for staging and promotion; the
review rules live here so the admin API and the CLI share them.
"""
import logging
from typing import Optional

from src.article_store import ArticleStore
from src.errors import InvalidState, NotFound
from src.file_utils import get_utc_timestamp
from src.models import Article, ArticleStatus

logger = logging.getLogger(__name__)

APPROVABLE = {
    ArticleStatus.PENDING,
    ArticleStatus.REJECTED,
    ArticleStatus.STAGED,
    ArticleStatus.PUBLISHED,
}
REJECTABLE = {ArticleStatus.PENDING, ArticleStatus.APPROVED, ArticleStatus.STAGED}


def _load(store: ArticleStore, article_id: str) -> Article:
    article = store.get(article_id)
    if article is None:
        raise NotFound(f"Article not found: {article_id}")
    return article


def approve_article(store: ArticleStore, article_id: str) -> Article:
    """
    Approve an article for staging.

    Re-approving a staged or published article starts a new edit cycle.
    A published article loses its production fields, since those only
    hold while the status is published; version is kept.

    Args:
        store: Article store
        article_id: Article to approve

    Returns:
        The updated article

    Raises:
        NotFound: Unknown article
        InvalidState: Article is already approved
    """
    article = _load(store, article_id)
    if article.status not in APPROVABLE:
        raise InvalidState(article.id, article.status.value, [s.value for s in APPROVABLE])

    if article.status == ArticleStatus.PUBLISHED:
        article.publishing.clear_production()
    article.status = ArticleStatus.APPROVED
    article.rejection_reason = None
    store.put(article)
    logger.info("Article %s approved", article.id)
    return article


def reject_article(store: ArticleStore, article_id: str, reason: Optional[str] = None) -> Article:
    """
    Reject an article.

    Args:
        store: Article store
        article_id: Article to reject
        reason: Optional free-text reason

    Returns:
        The updated article

    Raises:
        NotFound: Unknown article
        InvalidState: Article is published or already rejected
    """
    article = _load(store, article_id)
    if article.status not in REJECTABLE:
        raise InvalidState(article.id, article.status.value, [s.value for s in REJECTABLE])

    article.status = ArticleStatus.REJECTED
    article.rejection_reason = reason or "No reason provided"
    store.put(article)
    logger.info("Article %s rejected at %s", article.id, get_utc_timestamp())
    return article
