"""
Factory function wiring a Publisher from configuration.
"""
from typing import Optional

from src.article_store import ArticleStore
from src.article_store_factory import create_article_store
from src.cdn_invalidator_factory import create_cdn_invalidator
from src.config import Config
from src.html_renderer import HtmlRenderer
from src.object_store_factory import create_object_store
from src.publisher import Publisher


def create_publisher(config: Config, article_store: Optional[ArticleStore] = None) -> Publisher:
    """
    Create a Publisher from the configured backends.

    Args:
        config: Loaded configuration
        article_store: Reuse an existing article store instead of creating one

    Returns:
        Publisher: Publisher with article store, object store, renderer and CDN invalidator
    """
    return Publisher(
        article_store=article_store or create_article_store(state_dir=config.state_dir),
        object_store=create_object_store(state_dir=config.state_dir),
        renderer=HtmlRenderer(site_title=config.site_title),
        cdn_invalidator=create_cdn_invalidator(),
        domain=config.site_domain,
    )
