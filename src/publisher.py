"""
Staging -> production promotion for article detail pages (PDP) and the
shared listing page (PLP), with backup-before-overwrite and rollback.

Object key layout:
    staging/articles/{id}-{lang}.html
    production/articles/{id}-{lang}.html
    staging/index-{lang}.html, staging/index.html
    production/index-{lang}.html, production/index.html
    backups/articles/{id}/{timestamp}/{id}-{lang}.html
    backups/plp/{timestamp}/index-{lang}.html
    backups/{timestamp}/...  (full production snapshots)

Publisher holds no state between calls. Operations on the same article ID
are not serialized here; callers that run them concurrently must serialize
per ID themselves, otherwise version increments can be lost.
"""
import logging
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from src.article_store import ArticleStore
from src.cdn_invalidator import CdnInvalidator, NullCdnInvalidator
from src.errors import (
    BackupExists,
    CacheInvalidationFailed,
    InvalidState,
    NoBackupsAvailable,
    NotFound,
)
from src.file_utils import (
    format_backup_timestamp,
    parse_backup_timestamp,
    to_utc_timestamp,
)
from src.html_renderer import HtmlRenderer
from src.models import (
    DEFAULT_LANGUAGE,
    SUPPORTED_LANGUAGES,
    Article,
    ArticleStatus,
    BackupInfo,
    PublishResult,
)
from src.object_store import CSS_CONTENT_TYPE, HTML_CONTENT_TYPE, ObjectStore

logger = logging.getLogger(__name__)

STAGING_PREFIX = "staging/"
PRODUCTION_PREFIX = "production/"
BACKUPS_PREFIX = "backups/"
ARTICLE_BACKUPS_PREFIX = "backups/articles/"
PLP_BACKUPS_PREFIX = "backups/plp/"
STYLESHEET_KEY = "production/static/styles.css"

STAGEABLE = {ArticleStatus.APPROVED, ArticleStatus.STAGED}
PROMOTABLE = {ArticleStatus.STAGED, ArticleStatus.PUBLISHED}


def article_key(prefix: str, article_id: str, lang: str) -> str:
    """Key of one article detail page under staging/ or production/."""
    return f"{prefix}articles/{article_id}-{lang}.html"


def listing_filenames() -> List[str]:
    """Filenames making up the listing page: one per language plus index.html."""
    return [f"index-{lang}.html" for lang in SUPPORTED_LANGUAGES] + ["index.html"]


class Publisher:
    """Orchestrates staging, production promotion, backups and rollback."""

    def __init__(
        self,
        article_store: ArticleStore,
        object_store: ObjectStore,
        renderer: Optional[HtmlRenderer] = None,
        cdn_invalidator: Optional[CdnInvalidator] = None,
        domain: str = "yourdomain.com",
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the publisher.

        Args:
            article_store: Store holding article records
            object_store: Store holding rendered artifacts and backups
            renderer: HTML renderer (defaults to HtmlRenderer())
            cdn_invalidator: CDN invalidator (defaults to the disabled no-op)
            domain: Public domain used to build canonical URLs
            clock: Returns the current time (defaults to UTC now)
        """
        self.article_store = article_store
        self.object_store = object_store
        self.renderer = renderer or HtmlRenderer()
        self.cdn_invalidator = cdn_invalidator or NullCdnInvalidator()
        self.domain = domain
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    # ================== URLS ==================

    def staging_url(self, article_id: str) -> str:
        return f"https://staging.{self.domain}/articles/{article_id}-{DEFAULT_LANGUAGE}.html"

    def production_url(self, article_id: str) -> str:
        return f"https://{self.domain}/articles/{article_id}-{DEFAULT_LANGUAGE}.html"

    # ================== HELPERS ==================

    def _load_article(self, article_id: str) -> Article:
        article = self.article_store.get(article_id)
        if article is None:
            raise NotFound(f"Article not found: {article_id}")
        return article

    @staticmethod
    def _require_status(article: Article, allowed) -> None:
        if article.status not in allowed:
            raise InvalidState(article.id, article.status.value, [s.value for s in allowed])

    def _invalidate(self, path_pattern: str, result: PublishResult) -> None:
        """Invalidate the CDN, recording a failure on the result instead of raising."""
        try:
            self.cdn_invalidator.invalidate(path_pattern)
        except CacheInvalidationFailed as e:
            logger.warning("Cache invalidation degraded for %s: %s", path_pattern, e)
            result.cache_invalidated = False
            result.invalidation_error = str(e)

    def _backup_keys(self, pairs: List[tuple]) -> List[str]:
        """
        Copy each existing production key to its backup key.

        Missing production keys are skipped; that is the normal case for a
        first publish. Backups are never overwritten: if any target backup
        key already exists nothing is copied.

        Returns:
            Backup keys actually written

        Raises:
            BackupExists: A backup key is already taken (same target, same minute)
        """
        pending = []
        for production_key, backup_key in pairs:
            if not self.object_store.exists(production_key):
                logger.info("No production artifact at %s, nothing to back up", production_key)
                continue
            pending.append((production_key, backup_key))

        taken = [backup_key for _, backup_key in pending if self.object_store.exists(backup_key)]
        if taken:
            raise BackupExists(f"Backup already exists: {', '.join(taken)}; retry in the next minute")

        written = []
        for production_key, backup_key in pending:
            self.object_store.copy(production_key, backup_key)
            logger.info("Backed up: %s -> %s", production_key, backup_key)
            written.append(backup_key)
        return written

    def _require_staged(self, keys: List[str]) -> None:
        missing = [key for key in keys if not self.object_store.exists(key)]
        if missing:
            raise NotFound(f"Staging artifacts missing: {', '.join(missing)}")

    def _promote(self, pairs: List[tuple]) -> None:
        for staging_key, production_key in pairs:
            self.object_store.copy(staging_key, production_key)
            logger.info("Promoted: %s -> %s", staging_key, production_key)

    # ================== ARTICLE (PDP) ==================

    def publish_to_staging(self, article_id: str, actor: str) -> str:
        """
        Render an article's detail pages into staging.

        Args:
            article_id: Article to stage (status approved or staged)
            actor: Who requested the staging

        Returns:
            Canonical staging URL of the English page

        Raises:
            NotFound: Unknown article
            InvalidState: Article is not approved or staged
        """
        logger.info("Publishing article PDP %s to staging", article_id)
        article = self._load_article(article_id)
        self._require_status(article, STAGEABLE)

        for lang in SUPPORTED_LANGUAGES:
            html = self.renderer.render_article(article, lang)
            key = article_key(STAGING_PREFIX, article.id, lang)
            self.object_store.put(key, html.encode("utf-8"), HTML_CONTENT_TYPE)
            logger.info("Generated staging PDP: %s", key)

        article.status = ArticleStatus.STAGED
        article.publishing.staged_at = to_utc_timestamp(self.clock())
        article.publishing.staged_by = actor
        article.publishing.staging_url = self.staging_url(article.id)
        self.article_store.put(article)

        logger.info("Article PDP published to staging: %s", article.publishing.staging_url)
        return article.publishing.staging_url

    def publish_to_production(self, article_id: str, actor: str) -> PublishResult:
        """
        Promote an article's staged detail pages to production.

        Steps run strictly in order: backup current production pages,
        copy staging over production, update the article record, then
        invalidate the CDN. A failure in the first three aborts the
        operation; a CDN failure only marks the result as degraded.

        Args:
            article_id: Article to promote (status staged or published)
            actor: Who requested the promotion

        Returns:
            PublishResult with production URL, new version and backup path

        Raises:
            NotFound: Unknown article, or staging pages missing
            InvalidState: Article is not staged or published
            BackupExists: Promoted twice within the same minute; production
                is left untouched
        """
        logger.info("Publishing article PDP %s to production", article_id)
        article = self._load_article(article_id)
        self._require_status(article, PROMOTABLE)

        promotions = [
            (article_key(STAGING_PREFIX, article.id, lang),
             article_key(PRODUCTION_PREFIX, article.id, lang))
            for lang in SUPPORTED_LANGUAGES
        ]
        self._require_staged([staging_key for staging_key, _ in promotions])

        # 1. Backup
        timestamp = format_backup_timestamp(self.clock())
        backup_prefix = f"{ARTICLE_BACKUPS_PREFIX}{article.id}/{timestamp}/"
        backed_up = self._backup_keys([
            (production_key, f"{backup_prefix}{article.id}-{lang}.html")
            for lang, (_, production_key) in zip(SUPPORTED_LANGUAGES, promotions)
        ])
        logger.info("Created article backup: %s (%d files)", backup_prefix, len(backed_up))

        # 2. Promote
        self._promote(promotions)

        # 3. Update metadata
        article.status = ArticleStatus.PUBLISHED
        article.publishing.published_at = to_utc_timestamp(self.clock())
        article.publishing.published_by = actor
        article.publishing.production_url = self.production_url(article.id)
        article.publishing.version += 1
        self.article_store.put(article)

        result = PublishResult(
            success=True,
            message=f"Article {article.id} published to production",
            article_id=article.id,
            production_url=article.publishing.production_url,
            version=article.publishing.version,
            backup_path=backup_prefix if backed_up else None,
        )

        # 4. Invalidate cache
        self._invalidate(f"articles/{article.id}*", result)

        logger.info("Article PDP published to production (version %d)", article.publishing.version)
        return result

    def unpublish(self, article_id: str, actor: str) -> PublishResult:
        """
        Take an article's detail pages out of production.

        The live pages are archived into a backup first, then deleted. The
        article returns to approved and its production fields are cleared.
        The listing page is not regenerated.

        Args:
            article_id: Article to unpublish (status published)
            actor: Who requested the removal

        Returns:
            PublishResult with the archive path

        Raises:
            NotFound: Unknown article
            InvalidState: Article is not published
        """
        logger.info("Unpublishing article %s (requested by %s)", article_id, actor)
        article = self._load_article(article_id)
        self._require_status(article, {ArticleStatus.PUBLISHED})

        timestamp = format_backup_timestamp(self.clock())
        backup_prefix = f"{ARTICLE_BACKUPS_PREFIX}{article.id}/{timestamp}/"
        production_keys = [article_key(PRODUCTION_PREFIX, article.id, lang)
                           for lang in SUPPORTED_LANGUAGES]
        backed_up = self._backup_keys([
            (key, f"{backup_prefix}{article.id}-{lang}.html")
            for lang, key in zip(SUPPORTED_LANGUAGES, production_keys)
        ])

        for key in production_keys:
            self.object_store.delete(key)
            logger.info("Removed: %s", key)

        article.status = ArticleStatus.APPROVED
        article.publishing.clear_production()
        self.article_store.put(article)

        result = PublishResult(
            success=True,
            message=f"Article {article.id} removed from production",
            article_id=article.id,
            version=article.publishing.version,
            backup_path=backup_prefix if backed_up else None,
        )
        self._invalidate(f"articles/{article.id}*", result)
        return result

    def get_publishing_status(self, article_id: str) -> Dict[str, object]:
        """
        Get the publishing metadata of one article.

        Raises:
            NotFound: Unknown article
        """
        article = self._load_article(article_id)
        status = {"article_id": article.id, "status": article.status.value}
        status.update(article.publishing.to_dict())
        return status

    # ================== LISTING (PLP) ==================

    def publish_plp_to_staging(self) -> List[str]:
        """
        Render the listing page from all published articles into staging.

        Not triggered by article promotion; call it whenever the set of
        published articles changes.

        Returns:
            Staging keys written
        """
        logger.info("Publishing PLP to staging")
        articles = self.article_store.list_published()

        written = []
        for lang in SUPPORTED_LANGUAGES:
            html = self.renderer.render_listing(articles, lang)
            key = f"{STAGING_PREFIX}index-{lang}.html"
            self.object_store.put(key, html.encode("utf-8"), HTML_CONTENT_TYPE)
            logger.info("Generated staging PLP: %s", key)
            written.append(key)

        html = self.renderer.render_listing(articles, DEFAULT_LANGUAGE)
        key = f"{STAGING_PREFIX}index.html"
        self.object_store.put(key, html.encode("utf-8"), HTML_CONTENT_TYPE)
        written.append(key)

        logger.info("PLP staged with %d articles", len(articles))
        return written

    def publish_plp_to_production(self) -> PublishResult:
        """
        Promote the staged listing page to production.

        Backs up the current production listing, copies staging over it,
        then invalidates the index* paths.

        Returns:
            PublishResult with the backup path

        Raises:
            NotFound: Staging listing has not been rendered
            BackupExists: Listing promoted twice within the same minute
        """
        logger.info("Publishing PLP to production")
        filenames = listing_filenames()
        promotions = [(f"{STAGING_PREFIX}{name}", f"{PRODUCTION_PREFIX}{name}") for name in filenames]
        self._require_staged([staging_key for staging_key, _ in promotions])

        timestamp = format_backup_timestamp(self.clock())
        backup_prefix = f"{PLP_BACKUPS_PREFIX}{timestamp}/"
        backed_up = self._backup_keys([
            (f"{PRODUCTION_PREFIX}{name}", f"{backup_prefix}{name}") for name in filenames
        ])
        logger.info("Created PLP backup: %s (%d files)", backup_prefix, len(backed_up))

        self._promote(promotions)

        result = PublishResult(
            success=True,
            message="Listing page published to production",
            backup_path=backup_prefix if backed_up else None,
        )
        self._invalidate("index*", result)
        logger.info("PLP published to production")
        return result

    def publish_assets(self) -> PublishResult:
        """Upload the shared stylesheet to production."""
        css = self.renderer.render_stylesheet()
        self.object_store.put(STYLESHEET_KEY, css.encode("utf-8"), CSS_CONTENT_TYPE)
        result = PublishResult(success=True, message="Stylesheet published")
        self._invalidate("static/*", result)
        return result

    # ================== BACKUPS & ROLLBACK ==================

    def snapshot_production(self) -> str:
        """
        Copy the whole production tree into backups/{timestamp}/.

        Returns:
            The snapshot prefix

        Raises:
            BackupExists: A snapshot was already taken this minute
        """
        timestamp = format_backup_timestamp(self.clock())
        backup_prefix = f"{BACKUPS_PREFIX}{timestamp}/"
        if self.object_store.list_keys(backup_prefix):
            raise BackupExists(f"Snapshot already exists: {backup_prefix}")
        logger.info("Creating production snapshot: %s", backup_prefix)
        copied = self.object_store.copy_prefix(PRODUCTION_PREFIX, backup_prefix)
        logger.info("Snapshot complete (%d files)", len(copied))
        return backup_prefix

    @staticmethod
    def _backup_info(path: str, kind: str, restore_prefix: str,
                     article_id: Optional[str] = None) -> BackupInfo:
        timestamp = path.rstrip("/").rsplit("/", 1)[-1]
        created_at = parse_backup_timestamp(timestamp)
        if created_at is None:
            logger.warning("Unparseable backup timestamp in %s, sorting as oldest", path)
            created_at = 0
        return BackupInfo(
            timestamp=timestamp,
            path=path,
            created_at=created_at,
            kind=kind,
            restore_prefix=restore_prefix,
            article_id=article_id,
        )

    def list_backups(self) -> List[BackupInfo]:
        """
        List every backup, most recent first.

        Unparseable timestamps sort as the epoch (oldest) rather than failing.
        Equal timestamps keep no guaranteed order.

        Returns:
            BackupInfo entries sorted by created_at descending
        """
        logger.info("Listing available backups")
        backups = []
        for prefix in self.object_store.list_prefixes(BACKUPS_PREFIX):
            if prefix == ARTICLE_BACKUPS_PREFIX:
                for article_prefix in self.object_store.list_prefixes(ARTICLE_BACKUPS_PREFIX):
                    article_id = article_prefix[len(ARTICLE_BACKUPS_PREFIX):].rstrip("/")
                    for path in self.object_store.list_prefixes(article_prefix):
                        backups.append(self._backup_info(
                            path, "article", f"{PRODUCTION_PREFIX}articles/", article_id))
            elif prefix == PLP_BACKUPS_PREFIX:
                for path in self.object_store.list_prefixes(PLP_BACKUPS_PREFIX):
                    backups.append(self._backup_info(path, "plp", PRODUCTION_PREFIX))
            elif "latest" not in prefix:
                backups.append(self._backup_info(prefix, "full", PRODUCTION_PREFIX))

        backups.sort(key=lambda b: b.created_at, reverse=True)
        return backups

    def _restore(self, backup: BackupInfo) -> List[str]:
        logger.info("Restoring %s backup %s", backup.kind, backup.path)
        return self.object_store.copy_prefix(backup.path, backup.restore_prefix)

    def rollback(self, backup_timestamp: Optional[str] = None) -> PublishResult:
        """
        Restore production artifacts from a backup.

        Without a timestamp the single most recent backup is restored. With
        a timestamp every backup carrying it (article, listing or full
        snapshot) is restored. The whole CDN is invalidated afterwards.

        Article records are NOT touched: status, version and published_at
        keep describing the last promotion, not the restored artifacts.

        Args:
            backup_timestamp: Optional YYYY-MM-DD-HH-MM timestamp

        Returns:
            PublishResult listing the restored production keys

        Raises:
            NoBackupsAvailable: No timestamp given and no backups exist
            NotFound: No backup carries the given timestamp, or one of the
                selected backups is empty (checked before anything is copied)
        """
        backups = self.list_backups()
        if backup_timestamp:
            targets = [b for b in backups if b.timestamp == backup_timestamp]
            if not targets:
                raise NotFound(f"No backup found for timestamp {backup_timestamp}")
        else:
            if not backups:
                raise NoBackupsAvailable("No backups available")
            targets = [backups[0]]

        empty = [b.path for b in targets if not self.object_store.list_keys(b.path)]
        if empty:
            raise NotFound(f"Backup is empty: {', '.join(empty)}")

        logger.info("Rolling back to: %s", ", ".join(b.path for b in targets))
        restored = []
        for backup in targets:
            restored.extend(self._restore(backup))

        result = PublishResult(
            success=True,
            message=f"Rolled back to {targets[0].timestamp}",
            backup_path=targets[0].path,
            restored_keys=restored,
        )
        self._invalidate("/*", result)
        logger.info("Rollback completed (%d files restored)", len(restored))
        return result
