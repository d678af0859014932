"""
Unit tests for the Publisher: staging, production promotion, listing page,
backups and rollback.
"""
from unittest.mock import MagicMock

import pytest

from src.cdn_invalidator import CdnInvalidator
from src.errors import (
    BackupExists,
    CacheInvalidationFailed,
    InvalidState,
    NoBackupsAvailable,
    NotFound,
)
from src.html_renderer import HtmlRenderer
from src.local_disk_article_store import LocalDiskArticleStore
from src.local_disk_object_store import LocalDiskObjectStore
from src.models import ArticleStatus, BackupInfo, Translation
from src.publisher import Publisher, article_key, listing_filenames
from src.review import approve_article
from tests.unit.test_store_base import BaseLocalDiskStoreTests, FixedClock, make_article


class BasePublisherTests(BaseLocalDiskStoreTests):
    """Publisher wired to local disk stores and a mock CDN."""

    @pytest.fixture
    def clock(self):
        return FixedClock()

    @pytest.fixture
    def article_store(self, temp_state_dir):
        return LocalDiskArticleStore(state_dir=temp_state_dir)

    @pytest.fixture
    def object_store(self, temp_state_dir):
        return LocalDiskObjectStore(root_dir=f"{temp_state_dir}/site")

    @pytest.fixture
    def cdn(self):
        return MagicMock(spec=CdnInvalidator)

    @pytest.fixture
    def publisher(self, article_store, object_store, cdn, clock):
        return Publisher(
            article_store=article_store,
            object_store=object_store,
            renderer=HtmlRenderer(clock=clock),
            cdn_invalidator=cdn,
            domain="example.com",
            clock=clock,
        )

    def edit_and_restage(self, article_store, publisher, title):
        """Start a new edit cycle: change the title, re-approve and re-stage."""
        article = article_store.get("a1")
        article.title = title
        article_store.put(article)
        approve_article(article_store, "a1")
        publisher.publish_to_staging("a1", "alice")


class TestPublishToStaging(BasePublisherTests):
    """Test suite for publish_to_staging."""

    def test_stages_approved_article(self, publisher, article_store, object_store):
        """Test scenario: approved article is rendered to staging in every language."""
        article_store.put(make_article("a1", ArticleStatus.APPROVED))

        url = publisher.publish_to_staging("a1", "alice")

        assert url == "https://staging.example.com/articles/a1-en.html"
        for lang in ("en", "es", "uk"):
            assert object_store.exists(f"staging/articles/a1-{lang}.html")
        article = article_store.get("a1")
        assert article.status == ArticleStatus.STAGED
        assert article.publishing.staged_by == "alice"
        assert article.publishing.staged_at == "2024-11-08T12:00:00Z"
        assert article.publishing.staging_url == url

    def test_uses_translations(self, publisher, article_store, object_store):
        """Test that translated pages carry the translated title."""
        article_store.put(make_article("a1"))

        publisher.publish_to_staging("a1", "alice")

        spanish = object_store.get("staging/articles/a1-es.html").decode("utf-8")
        assert "Título a1" in spanish
        assert '<html lang="es">' in spanish

    def test_does_not_touch_production_or_listing(self, publisher, article_store, object_store):
        """Test that staging writes only the article's staging pages."""
        article_store.put(make_article("a1"))

        publisher.publish_to_staging("a1", "alice")

        assert object_store.list_keys("production/") == []
        assert not object_store.exists("staging/index.html")

    def test_restaging_is_idempotent(self, publisher, article_store, object_store):
        """Test that staging twice leaves the same artifacts and status."""
        article_store.put(make_article("a1"))

        publisher.publish_to_staging("a1", "alice")
        first = object_store.get("staging/articles/a1-en.html")
        publisher.publish_to_staging("a1", "alice")
        second = object_store.get("staging/articles/a1-en.html")

        assert first == second
        assert article_store.get("a1").status == ArticleStatus.STAGED

    @pytest.mark.parametrize("status", [
        ArticleStatus.PENDING, ArticleStatus.REJECTED, ArticleStatus.PUBLISHED,
    ])
    def test_rejects_other_statuses(self, publisher, article_store, object_store, status):
        """Test that only approved or staged articles can be staged."""
        article_store.put(make_article("a1", status))

        with pytest.raises(InvalidState) as exc_info:
            publisher.publish_to_staging("a1", "alice")

        assert exc_info.value.allowed == ["approved", "staged"]
        assert object_store.list_keys("") == []

    def test_unknown_article(self, publisher):
        """Test staging an unknown article raises NotFound."""
        with pytest.raises(NotFound):
            publisher.publish_to_staging("missing", "alice")


class TestPublishToProduction(BasePublisherTests):
    """Test suite for publish_to_production."""

    def test_first_publish_skips_backup(self, publisher, article_store, object_store, cdn):
        """Test scenario: first promotion backs up nothing and sets version 1."""
        article_store.put(make_article("a1"))
        publisher.publish_to_staging("a1", "alice")

        result = publisher.publish_to_production("a1", "alice")

        assert result.success is True
        assert result.version == 1
        assert result.backup_path is None
        assert result.production_url == "https://example.com/articles/a1-en.html"
        assert result.cache_invalidated is True
        assert object_store.list_keys("backups/") == []
        for lang in ("en", "es", "uk"):
            assert object_store.get(f"production/articles/a1-{lang}.html") == \
                object_store.get(f"staging/articles/a1-{lang}.html")

        article = article_store.get("a1")
        assert article.status == ArticleStatus.PUBLISHED
        assert article.publishing.version == 1
        assert article.publishing.published_by == "alice"
        assert article.publishing.production_url == result.production_url
        cdn.invalidate.assert_called_once_with("articles/a1*")

    def test_republish_backs_up_previous_version(self, publisher, article_store, object_store, clock):
        """Test scenario: a second promotion archives the version-1 pages."""
        article_store.put(make_article("a1", title="Original headline"))
        publisher.publish_to_staging("a1", "alice")
        publisher.publish_to_production("a1", "alice")
        version_one = object_store.get("production/articles/a1-en.html")

        clock.set(2024, 11, 9, 8, 30)
        self.edit_and_restage(article_store, publisher, "Edited headline")
        result = publisher.publish_to_production("a1", "bob")

        assert result.version == 2
        assert result.backup_path == "backups/articles/a1/2024-11-09-08-30/"
        assert object_store.get("backups/articles/a1/2024-11-09-08-30/a1-en.html") == version_one
        assert b"Edited headline" in object_store.get("production/articles/a1-en.html")
        assert article_store.get("a1").publishing.published_by == "bob"

    def test_backup_listed_after_republish(self, publisher, article_store, clock):
        """Test that a republish leaves a backup dated at the promotion time."""
        article_store.put(make_article("a1"))
        publisher.publish_to_staging("a1", "alice")
        publisher.publish_to_production("a1", "alice")

        clock.set(2024, 11, 9, 8, 30)
        publisher.publish_to_production("a1", "alice")

        backups = publisher.list_backups()
        assert len(backups) == 1
        assert backups[0].kind == "article"
        assert backups[0].article_id == "a1"
        assert backups[0].created_at >= int(clock().timestamp())

    def test_version_increments_once_per_promotion(self, publisher, article_store, clock):
        """Test that version grows by exactly one on each promotion."""
        article_store.put(make_article("a1"))
        publisher.publish_to_staging("a1", "alice")

        for expected in (1, 2, 3):
            clock.set(2024, 11, 8, 12, expected)
            result = publisher.publish_to_production("a1", "alice")
            assert result.version == expected
            assert article_store.get("a1").publishing.version == expected

    @pytest.mark.parametrize("status", [
        ArticleStatus.PENDING, ArticleStatus.APPROVED, ArticleStatus.REJECTED,
    ])
    def test_rejects_unstaged_statuses(self, publisher, article_store, object_store, status):
        """Test scenario: promotion from a non-staged status writes nothing."""
        article_store.put(make_article("a1", status))

        with pytest.raises(InvalidState):
            publisher.publish_to_production("a1", "alice")

        assert object_store.list_keys("") == []
        assert article_store.get("a1").publishing.version == 0

    def test_missing_staging_pages_abort_before_backup(self, publisher, article_store, object_store):
        """Test that a staged article without staging pages fails cleanly."""
        article_store.put(make_article("a1", ArticleStatus.STAGED))
        object_store.put("production/articles/a1-en.html", b"live", "text/html")

        with pytest.raises(NotFound):
            publisher.publish_to_production("a1", "alice")

        assert object_store.list_keys("backups/") == []
        assert object_store.get("production/articles/a1-en.html") == b"live"
        assert article_store.get("a1").status == ArticleStatus.STAGED

    def test_cache_failure_is_degraded_success(self, publisher, article_store, cdn):
        """Test that a CDN failure keeps the promotion but flags it."""
        cdn.invalidate.side_effect = CacheInvalidationFailed("throttled")
        article_store.put(make_article("a1"))
        publisher.publish_to_staging("a1", "alice")

        result = publisher.publish_to_production("a1", "alice")

        assert result.success is True
        assert result.cache_invalidated is False
        assert result.invalidation_error == "throttled"
        assert article_store.get("a1").status == ArticleStatus.PUBLISHED

    def test_same_minute_promotion_keeps_existing_backup(self, publisher, article_store, object_store, cdn, clock):
        """Test that a repeat promotion within one minute fails before touching production."""
        article_store.put(make_article("a1", title="First headline"))
        publisher.publish_to_staging("a1", "alice")
        publisher.publish_to_production("a1", "alice")
        self.edit_and_restage(article_store, publisher, "Second headline")
        publisher.publish_to_production("a1", "alice")
        self.edit_and_restage(article_store, publisher, "Third headline")
        cdn.reset_mock()

        with pytest.raises(BackupExists):
            publisher.publish_to_production("a1", "alice")

        backup = object_store.get("backups/articles/a1/2024-11-08-12-00/a1-en.html")
        assert b"First headline" in backup
        assert b"Second headline" in object_store.get("production/articles/a1-en.html")
        article = article_store.get("a1")
        assert article.status == ArticleStatus.STAGED
        assert article.publishing.version == 2
        cdn.invalidate.assert_not_called()

        clock.set(2024, 11, 8, 12, 1)
        result = publisher.publish_to_production("a1", "alice")

        assert result.version == 3
        assert b"Second headline" in object_store.get("backups/articles/a1/2024-11-08-12-01/a1-en.html")
        assert b"First headline" in object_store.get("backups/articles/a1/2024-11-08-12-00/a1-en.html")


class TestUnpublish(BasePublisherTests):
    """Test suite for unpublish."""

    def test_unpublish_archives_and_removes(self, publisher, article_store, object_store, cdn, clock):
        """Test that unpublishing archives live pages and resets the article."""
        article_store.put(make_article("a1"))
        publisher.publish_to_staging("a1", "alice")
        publisher.publish_to_production("a1", "alice")
        live = object_store.get("production/articles/a1-en.html")

        clock.set(2024, 11, 10, 9, 0)
        result = publisher.unpublish("a1", "alice")

        assert result.backup_path == "backups/articles/a1/2024-11-10-09-00/"
        assert object_store.get("backups/articles/a1/2024-11-10-09-00/a1-en.html") == live
        assert object_store.list_keys("production/articles/") == []
        article = article_store.get("a1")
        assert article.status == ArticleStatus.APPROVED
        assert article.publishing.published_at is None
        assert article.publishing.production_url is None
        assert article.publishing.version == 1
        cdn.invalidate.assert_called_with("articles/a1*")

    def test_unpublish_requires_published(self, publisher, article_store):
        """Test that only published articles can be unpublished."""
        article_store.put(make_article("a1", ArticleStatus.STAGED))

        with pytest.raises(InvalidState):
            publisher.unpublish("a1", "alice")


class TestListingPage(BasePublisherTests):
    """Test suite for listing page publication."""

    def publish(self, publisher, article_store, article_id, published_date):
        article_store.put(make_article(article_id, published_date=published_date))
        publisher.publish_to_staging(article_id, "alice")
        publisher.publish_to_production(article_id, "alice")

    def test_article_promotion_does_not_touch_listing(self, publisher, article_store, object_store):
        """Test that article promotion leaves the listing page alone."""
        self.publish(publisher, article_store, "a1", "2024-11-08T10:00:00Z")

        for name in listing_filenames():
            assert not object_store.exists(f"staging/{name}")
            assert not object_store.exists(f"production/{name}")

    def test_stage_listing(self, publisher, article_store, object_store):
        """Test that the listing is rendered for every language plus index.html."""
        self.publish(publisher, article_store, "a1", "2024-11-08T10:00:00Z")
        self.publish(publisher, article_store, "a2", "2024-11-09T10:00:00Z")
        article_store.put(make_article("a3", ArticleStatus.PENDING))

        keys = publisher.publish_plp_to_staging()

        assert keys == [
            "staging/index-en.html", "staging/index-es.html",
            "staging/index-uk.html", "staging/index.html",
        ]
        listing = object_store.get("staging/index-en.html").decode("utf-8")
        assert listing.index("Title a2") < listing.index("Title a1")
        assert "Title a3" not in listing
        assert object_store.get("staging/index.html") == object_store.get("staging/index-en.html")

    def test_promote_listing_with_backup(self, publisher, article_store, object_store, cdn, clock):
        """Test that promoting the listing backs up the previous one."""
        self.publish(publisher, article_store, "a1", "2024-11-08T10:00:00Z")
        publisher.publish_plp_to_staging()
        first = publisher.publish_plp_to_production()
        assert first.backup_path is None
        previous = object_store.get("production/index-en.html")

        clock.set(2024, 11, 9, 7, 15)
        self.publish(publisher, article_store, "a2", "2024-11-09T10:00:00Z")
        publisher.publish_plp_to_staging()
        result = publisher.publish_plp_to_production()

        assert result.backup_path == "backups/plp/2024-11-09-07-15/"
        assert object_store.get("backups/plp/2024-11-09-07-15/index-en.html") == previous
        assert b"Title a2" in object_store.get("production/index-en.html")
        cdn.invalidate.assert_called_with("index*")

    def test_promote_listing_requires_staging(self, publisher):
        """Test that promoting an unrendered listing raises NotFound."""
        with pytest.raises(NotFound):
            publisher.publish_plp_to_production()

    def test_same_minute_listing_promotion_keeps_existing_backup(self, publisher, article_store, object_store):
        """Test that the listing backup of a minute is never overwritten."""
        self.publish(publisher, article_store, "a1", "2024-11-08T10:00:00Z")
        publisher.publish_plp_to_staging()
        publisher.publish_plp_to_production()
        self.publish(publisher, article_store, "a2", "2024-11-09T10:00:00Z")
        publisher.publish_plp_to_staging()
        publisher.publish_plp_to_production()
        self.publish(publisher, article_store, "a3", "2024-11-10T10:00:00Z")
        publisher.publish_plp_to_staging()

        with pytest.raises(BackupExists):
            publisher.publish_plp_to_production()

        backup = object_store.get("backups/plp/2024-11-08-12-00/index-en.html")
        assert b"Title a1" in backup
        assert b"Title a2" not in backup
        assert b"Title a3" not in object_store.get("production/index-en.html")

    def test_publish_assets(self, publisher, object_store, cdn):
        """Test that the stylesheet is uploaded to production."""
        result = publisher.publish_assets()

        assert result.success is True
        assert b".article-card" in object_store.get("production/static/styles.css")
        cdn.invalidate.assert_called_once_with("static/*")


class TestBackupsAndRollback(BasePublisherTests):
    """Test suite for list_backups and rollback."""

    def publish_twice(self, publisher, article_store, clock):
        """Publish a1 twice so one backup holds the first version."""
        article_store.put(make_article("a1", title="Original headline"))
        publisher.publish_to_staging("a1", "alice")
        publisher.publish_to_production("a1", "alice")

        clock.set(2024, 11, 9, 8, 30)
        self.edit_and_restage(article_store, publisher, "Edited headline")
        publisher.publish_to_production("a1", "alice")

    def test_list_backups_empty(self, publisher):
        """Test listing with no backups."""
        assert publisher.list_backups() == []

    def test_list_backups_sorted_newest_first(self, publisher, object_store):
        """Test that backups of all kinds are sorted by timestamp descending."""
        object_store.put("backups/articles/a1/2024-11-08-10-00/a1-en.html", b"1", "text/html")
        object_store.put("backups/articles/a2/2024-11-10-10-00/a2-en.html", b"2", "text/html")
        object_store.put("backups/plp/2024-11-09-10-00/index-en.html", b"3", "text/html")
        object_store.put("backups/2024-11-07-10-00/index.html", b"4", "text/html")

        backups = publisher.list_backups()

        assert [b.timestamp for b in backups] == [
            "2024-11-10-10-00", "2024-11-09-10-00", "2024-11-08-10-00", "2024-11-07-10-00",
        ]
        assert [b.kind for b in backups] == ["article", "plp", "article", "full"]
        assert backups[0].path == "backups/articles/a2/2024-11-10-10-00/"

    def test_unparseable_timestamp_sorts_oldest(self, publisher, object_store):
        """Test that a bad timestamp is listed as epoch zero instead of failing."""
        object_store.put("backups/plp/not-a-date/index-en.html", b"x", "text/html")
        object_store.put("backups/plp/2024-11-09-10-00/index-en.html", b"y", "text/html")

        backups = publisher.list_backups()

        assert [b.timestamp for b in backups] == ["2024-11-09-10-00", "not-a-date"]
        assert backups[1].created_at == 0

    def test_latest_prefixes_are_ignored(self, publisher, object_store):
        """Test that a 'latest' pointer prefix is not treated as a backup."""
        object_store.put("backups/latest/index.html", b"x", "text/html")

        assert publisher.list_backups() == []

    def test_rollback_without_backups(self, publisher):
        """Test that rollback with nothing to restore raises NoBackupsAvailable."""
        with pytest.raises(NoBackupsAvailable):
            publisher.rollback()

    def test_rollback_restores_bytes_not_metadata(self, publisher, article_store, object_store, cdn, clock):
        """Test scenario: rollback restores version-1 pages and keeps version 2 metadata."""
        article_store.put(make_article("a1", title="Original headline"))
        publisher.publish_to_staging("a1", "alice")
        publisher.publish_to_production("a1", "alice")
        version_one = {lang: object_store.get(article_key("production/", "a1", lang))
                       for lang in ("en", "es", "uk")}

        clock.set(2024, 11, 9, 8, 30)
        self.edit_and_restage(article_store, publisher, "Edited headline")
        publisher.publish_to_production("a1", "alice")
        published_at = article_store.get("a1").publishing.published_at

        result = publisher.rollback()

        assert result.success is True
        assert sorted(result.restored_keys) == [
            "production/articles/a1-en.html",
            "production/articles/a1-es.html",
            "production/articles/a1-uk.html",
        ]
        for lang, content in version_one.items():
            assert object_store.get(article_key("production/", "a1", lang)) == content
        article = article_store.get("a1")
        assert article.publishing.version == 2
        assert article.status == ArticleStatus.PUBLISHED
        assert article.publishing.published_at == published_at
        cdn.invalidate.assert_called_with("/*")

    def test_rollback_to_timestamp(self, publisher, article_store, object_store, clock):
        """Test rollback to an explicit timestamp."""
        self.publish_twice(publisher, article_store, clock)

        result = publisher.rollback("2024-11-09-08-30")

        assert result.backup_path == "backups/articles/a1/2024-11-09-08-30/"
        assert b"Original headline" in object_store.get("production/articles/a1-en.html")

    def test_rollback_unknown_timestamp(self, publisher, article_store, object_store, clock):
        """Test scenario: an unknown timestamp fails loudly and changes nothing."""
        self.publish_twice(publisher, article_store, clock)
        live = object_store.get("production/articles/a1-en.html")

        with pytest.raises(NotFound):
            publisher.rollback("2099-01-01-00-00")

        assert object_store.get("production/articles/a1-en.html") == live

    def test_rollback_full_snapshot(self, publisher, object_store, clock):
        """Test that a full snapshot restores the whole production tree."""
        object_store.put("production/index.html", b"old index", "text/html")
        object_store.put("production/articles/a1-en.html", b"old article", "text/html")
        snapshot = publisher.snapshot_production()
        object_store.put("production/index.html", b"new index", "text/html")
        object_store.put("production/articles/a1-en.html", b"new article", "text/html")

        result = publisher.rollback()

        assert snapshot == "backups/2024-11-08-12-00/"
        assert result.backup_path == snapshot
        assert object_store.get("production/index.html") == b"old index"
        assert object_store.get("production/articles/a1-en.html") == b"old article"

    def test_snapshot_twice_in_one_minute(self, publisher, object_store):
        """Test that a second snapshot in the same minute leaves the first intact."""
        object_store.put("production/index.html", b"first", "text/html")
        publisher.snapshot_production()
        object_store.put("production/index.html", b"second", "text/html")

        with pytest.raises(BackupExists):
            publisher.snapshot_production()

        assert object_store.get("backups/2024-11-08-12-00/index.html") == b"first"

    def test_rollback_checks_every_target_before_copying(self, publisher, object_store, cdn, monkeypatch):
        """Test that an empty backup among several targets aborts before any restore."""
        object_store.put("backups/plp/2024-11-08-12-00/index.html", b"old index", "text/html")
        object_store.put("production/index.html", b"live index", "text/html")
        monkeypatch.setattr(publisher, "list_backups", lambda: [
            BackupInfo(timestamp="2024-11-08-12-00", path="backups/plp/2024-11-08-12-00/",
                       created_at=1731067200, kind="plp", restore_prefix="production/"),
            BackupInfo(timestamp="2024-11-08-12-00", path="backups/2024-11-08-12-00/",
                       created_at=1731067200, kind="full", restore_prefix="production/"),
        ])

        with pytest.raises(NotFound):
            publisher.rollback("2024-11-08-12-00")

        assert object_store.get("production/index.html") == b"live index"
        cdn.invalidate.assert_not_called()

    def test_rollback_cache_failure_is_degraded(self, publisher, article_store, cdn, clock):
        """Test that rollback reports a failed global invalidation without raising."""
        self.publish_twice(publisher, article_store, clock)
        cdn.invalidate.side_effect = CacheInvalidationFailed("distribution busy")

        result = publisher.rollback()

        assert result.success is True
        assert result.cache_invalidated is False


class TestPublishingStatus(BasePublisherTests):
    """Test suite for get_publishing_status."""

    def test_status_of_published_article(self, publisher, article_store):
        article_store.put(make_article("a1"))
        publisher.publish_to_staging("a1", "alice")
        publisher.publish_to_production("a1", "alice")

        status = publisher.get_publishing_status("a1")

        assert status["article_id"] == "a1"
        assert status["status"] == "published"
        assert status["version"] == 1
        assert status["staging_url"] == "https://staging.example.com/articles/a1-en.html"

    def test_status_of_unknown_article(self, publisher):
        with pytest.raises(NotFound):
            publisher.get_publishing_status("missing")

    def test_edited_translation_notice(self, publisher, article_store, object_store):
        """Test that edited translations render with the edit notice."""
        article = make_article("a1")
        article.translations["es"] = Translation(title="Editado", content="Texto.", edited=True)
        article_store.put(article)

        publisher.publish_to_staging("a1", "alice")

        assert b"edit-notice" in object_store.get("staging/articles/a1-es.html")
        assert b"<strong>Note:</strong>" not in object_store.get("staging/articles/a1-en.html")
