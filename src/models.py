"""
Data model for blog articles and publishing metadata.

Every record converts to and from a plain dict with to_dict()/from_dict().
The dict form is what the local disk store writes and what the HTTP
surfaces return.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

SUPPORTED_LANGUAGES = ("en", "es", "uk")
DEFAULT_LANGUAGE = "en"
TRANSLATED_LANGUAGES = ("es", "uk")


class ArticleStatus(str, Enum):
    """Review and publishing status of an article."""

    PENDING = "pending"
    APPROVED = "approved"
    STAGED = "staged"
    PUBLISHED = "published"
    REJECTED = "rejected"


@dataclass
class ArticleContent:
    """Scraped article body. Replaced wholesale on re-scrape."""

    original_html: str = ""
    text: str = ""
    images: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "original_html": self.original_html,
            "text": self.text,
            "images": list(self.images),
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ArticleContent":
        data = data or {}
        return cls(
            original_html=data.get("original_html", ""),
            text=data.get("text", ""),
            images=list(data.get("images", [])),
        )


@dataclass
class Translation:
    """A translated title/body for one language."""

    title: str
    content: str
    edited: bool = False
    edited_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "content": self.content,
            "edited": self.edited,
            "edited_at": self.edited_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Translation":
        return cls(
            title=data.get("title", ""),
            content=data.get("content", ""),
            edited=bool(data.get("edited", False)),
            edited_at=data.get("edited_at"),
        )


@dataclass
class PublishingMetadata:
    """
    Staging/production bookkeeping for an article.

    version counts successful production promotions. It only ever grows:
    rollback restores artifacts but leaves the counter alone.
    """

    staged_at: Optional[str] = None
    staged_by: Optional[str] = None
    published_at: Optional[str] = None
    published_by: Optional[str] = None
    staging_url: Optional[str] = None
    production_url: Optional[str] = None
    version: int = 0

    def clear_production(self) -> None:
        """Drop the fields that only hold while the article is live."""
        self.published_at = None
        self.published_by = None
        self.production_url = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "staged_at": self.staged_at,
            "staged_by": self.staged_by,
            "published_at": self.published_at,
            "published_by": self.published_by,
            "staging_url": self.staging_url,
            "production_url": self.production_url,
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "PublishingMetadata":
        data = data or {}
        return cls(
            staged_at=data.get("staged_at"),
            staged_by=data.get("staged_by"),
            published_at=data.get("published_at"),
            published_by=data.get("published_by"),
            staging_url=data.get("staging_url"),
            production_url=data.get("production_url"),
            version=int(data.get("version", 0)),
        )


@dataclass
class Article:
    """A scraped article and its review/publishing state."""

    id: str
    source: str
    source_url: str
    title: str
    author: str = ""
    published_date: str = ""
    scraped_at: Optional[str] = None
    content: ArticleContent = field(default_factory=ArticleContent)
    translations: Dict[str, Translation] = field(default_factory=dict)
    status: ArticleStatus = ArticleStatus.PENDING
    publishing: PublishingMetadata = field(default_factory=PublishingMetadata)
    rejection_reason: Optional[str] = None

    def localized(self, lang: str) -> Dict[str, Any]:
        """
        Get title and body text for a language.

        Falls back to the original English text when no translation exists.

        Args:
            lang: Language code

        Returns:
            Dict with 'title', 'content' and 'edited' keys
        """
        translation = self.translations.get(lang) if lang != DEFAULT_LANGUAGE else None
        if translation is None:
            return {"title": self.title, "content": self.content.text, "edited": False}
        return {
            "title": translation.title,
            "content": translation.content,
            "edited": translation.edited,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source,
            "source_url": self.source_url,
            "title": self.title,
            "author": self.author,
            "published_date": self.published_date,
            "scraped_at": self.scraped_at,
            "content": self.content.to_dict(),
            "translations": {
                lang: translation.to_dict() for lang, translation in self.translations.items()
            },
            "status": self.status.value,
            "publishing": self.publishing.to_dict(),
            "rejection_reason": self.rejection_reason,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Article":
        return cls(
            id=data["id"],
            source=data.get("source", ""),
            source_url=data.get("source_url", ""),
            title=data.get("title", ""),
            author=data.get("author", ""),
            published_date=data.get("published_date", ""),
            scraped_at=data.get("scraped_at"),
            content=ArticleContent.from_dict(data.get("content")),
            translations={
                lang: Translation.from_dict(value)
                for lang, value in (data.get("translations") or {}).items()
            },
            status=ArticleStatus(data.get("status", ArticleStatus.PENDING.value)),
            publishing=PublishingMetadata.from_dict(data.get("publishing")),
            rejection_reason=data.get("rejection_reason"),
        )


@dataclass
class BackupInfo:
    """A point-in-time copy of production artifacts."""

    timestamp: str
    path: str
    created_at: int
    kind: str
    restore_prefix: str
    article_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "path": self.path,
            "created_at": self.created_at,
            "kind": self.kind,
            "article_id": self.article_id,
        }


@dataclass
class PublishResult:
    """
    Outcome of a publish, unpublish, or rollback operation.

    success is True whenever artifacts reached their destination. A failed
    cache invalidation leaves success True and sets cache_invalidated False.
    """

    success: bool
    message: str
    article_id: Optional[str] = None
    staging_url: Optional[str] = None
    production_url: Optional[str] = None
    version: Optional[int] = None
    backup_path: Optional[str] = None
    cache_invalidated: bool = True
    invalidation_error: Optional[str] = None
    restored_keys: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "article_id": self.article_id,
            "staging_url": self.staging_url,
            "production_url": self.production_url,
            "version": self.version,
            "backup_path": self.backup_path,
            "cache_invalidated": self.cache_invalidated,
            "invalidation_error": self.invalidation_error,
            "restored_keys": list(self.restored_keys),
        }
