"""
Static HTML rendering for article detail pages (PDP), listing pages (PLP)
and the shared stylesheet.
"""
from datetime import datetime, timezone
from html import escape
from typing import Callable, List, Optional

from src.models import SUPPORTED_LANGUAGES, Article

LISTING_TEXT = {
    "en": {
        "title": "AI & Tech Blog",
        "tagline": "Latest news and insights from AI and technology",
        "read_more": "Read more →",
        "empty": "No articles published yet.",
    },
    "es": {
        "title": "Blog de IA y Tecnología",
        "tagline": "Últimas noticias e información de IA y tecnología",
        "read_more": "Leer más →",
        "empty": "Todavía no hay artículos publicados.",
    },
    "uk": {
        "title": "Блог про ШІ та Технології",
        "tagline": "Останні новини та інформація про ШІ та технології",
        "read_more": "Читати далі →",
        "empty": "Ще немає опублікованих статей.",
    },
}

EDIT_NOTICE = (
    '<div class="edit-notice">\n'
    '    <strong>Note:</strong> This translation has been manually reviewed and edited for accuracy.\n'
    '</div>'
)

STYLESHEET = """* { margin: 0; padding: 0; box-sizing: border-box; }
body {
    font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Ubuntu, sans-serif;
    line-height: 1.6;
    color: #333;
    background-color: #f5f5f5;
}
.container { max-width: 1200px; margin: 0 auto; padding: 0 20px; }
header { background-color: #fff; box-shadow: 0 2px 4px rgba(0,0,0,0.1); padding: 1rem 0; }
header h1 { font-size: 1.8rem; margin-bottom: 0.5rem; }
header h1 a { color: #2563eb; text-decoration: none; }
.language-switcher a { margin-right: 1rem; color: #666; text-decoration: none; }
.language-switcher a.active { color: #2563eb; font-weight: 600; }
main { padding: 2rem 0; }
article { background-color: #fff; padding: 2rem; border-radius: 8px; box-shadow: 0 2px 4px rgba(0,0,0,0.1); }
.article-header h1 { font-size: 2.5rem; margin-bottom: 1rem; color: #1a1a1a; }
.article-meta { color: #666; font-size: 0.9rem; margin-bottom: 2rem; display: flex; gap: 1rem; }
.article-footer { margin-top: 2rem; padding-top: 2rem; border-top: 1px solid #e5e5e5; }
.edit-notice { background-color: #fef3c7; border-left: 4px solid #f59e0b; padding: 1rem; margin-top: 1rem; }
.articles-grid { display: grid; grid-template-columns: repeat(auto-fill, minmax(350px, 1fr)); gap: 2rem; }
.article-card { background-color: #fff; padding: 1.5rem; border-radius: 8px; box-shadow: 0 2px 4px rgba(0,0,0,0.1); }
.article-card h2 { font-size: 1.5rem; margin-bottom: 0.5rem; }
.article-card h2 a { color: #1a1a1a; text-decoration: none; }
.excerpt { color: #666; margin: 1rem 0; }
.read-more { color: #2563eb; text-decoration: none; font-weight: 500; }
.site-footer { background-color: #1a1a1a; color: #fff; padding: 2rem 0; margin-top: 4rem; text-align: center; }
@media (max-width: 768px) {
    .articles-grid { grid-template-columns: 1fr; }
    .article-header h1 { font-size: 2rem; }
}
"""


def format_date(date_str: str) -> str:
    """Format an ISO date as "November 08, 2024", or return it unchanged."""
    try:
        parsed = datetime.fromisoformat(date_str.replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        return date_str or ""
    return parsed.strftime("%B %d, %Y")


def format_content(text: str) -> str:
    """Turn blank-line separated paragraphs into escaped <p> elements."""
    paragraphs = [p.strip() for p in text.split("\n\n") if p.strip()]
    return "\n".join(f"<p>{escape(p)}</p>" for p in paragraphs)


def make_excerpt(text: str, max_length: int = 200) -> str:
    """Cut text to max_length characters, adding an ellipsis when truncated."""
    if len(text) <= max_length:
        return text
    return text[:max_length].rstrip() + "..."


class HtmlRenderer:
    """Renders articles into standalone HTML documents."""

    def __init__(self, site_title: str = "AI & Tech Blog",
                 clock: Optional[Callable[[], datetime]] = None):
        """
        Initialize the renderer.

        Args:
            site_title: Site name used in page titles and footers
            clock: Returns the current time (defaults to UTC now)
        """
        self.site_title = site_title
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def _language_links(self, href: Callable[[str], str], current: str) -> str:
        links = []
        for lang in SUPPORTED_LANGUAGES:
            css_class = ' class="active"' if lang == current else ''
            links.append(f'<a href="{href(lang)}"{css_class}>{lang.upper()}</a>')
        return "\n                    ".join(links)

    def render_article(self, article: Article, lang: str) -> str:
        """
        Render a detail page for one article in one language.

        Args:
            article: Article to render
            lang: Language code; translations are used when present

        Returns:
            HTML document
        """
        localized = article.localized(lang)
        title = escape(localized["title"])
        article_id = escape(article.id)
        notice = EDIT_NOTICE if localized["edited"] else ""
        switcher = self._language_links(lambda code: f"/articles/{article_id}-{code}.html", lang)
        year = self.clock().year

        return f"""<!DOCTYPE html>
<html lang="{lang}">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <meta name="description" content="{escape(localized['title'][:160])}">
    <title>{title} - {escape(self.site_title)}</title>
    <link rel="stylesheet" href="/static/styles.css">
    <!-- Version: {article.publishing.version} -->
</head>
<body>
    <header>
        <nav>
            <div class="container">
                <h1><a href="/index-{lang}.html">{escape(self.site_title)}</a></h1>
                <div class="language-switcher">
                    {switcher}
                </div>
            </div>
        </nav>
    </header>
    <main class="container">
        <article>
            <header class="article-header">
                <h1>{title}</h1>
                <div class="article-meta">
                    <time datetime="{escape(article.published_date)}">{escape(format_date(article.published_date))}</time>
                    <span class="source">Source: {escape(article.source)}</span>
                </div>
            </header>
            <div class="article-content">
                {format_content(localized['content'])}
            </div>
            <footer class="article-footer">
                <p><a href="{escape(article.source_url)}" target="_blank" rel="noopener">Read original article →</a></p>
                {notice}
            </footer>
        </article>
    </main>
    <footer class="site-footer">
        <div class="container">
            <p>&copy; {year} {escape(self.site_title)}. All rights reserved.</p>
        </div>
    </footer>
</body>
</html>"""

    def _render_card(self, article: Article, lang: str, read_more: str) -> str:
        localized = article.localized(lang)
        href = f"/articles/{escape(article.id)}-{lang}.html"
        return f"""<article class="article-card">
    <h2><a href="{href}">{escape(localized['title'])}</a></h2>
    <div class="article-meta">
        <time datetime="{escape(article.published_date)}">{escape(format_date(article.published_date))}</time>
        <span class="source">{escape(article.source)}</span>
    </div>
    <p class="excerpt">{escape(make_excerpt(localized['content']))}</p>
    <a href="{href}" class="read-more">{read_more}</a>
</article>"""

    def render_listing(self, articles: List[Article], lang: str) -> str:
        """
        Render the listing page for a language.

        Args:
            articles: Articles to list, in display order
            lang: Language code

        Returns:
            HTML document
        """
        text = LISTING_TEXT.get(lang, LISTING_TEXT["en"])
        cards = "\n".join(self._render_card(a, lang, text["read_more"]) for a in articles)
        if not cards:
            cards = f'<p class="no-results">{text["empty"]}</p>'
        switcher = self._language_links(lambda code: f"/index-{code}.html", lang)
        year = self.clock().year

        return f"""<!DOCTYPE html>
<html lang="{lang}">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <meta name="description" content="{text['tagline']}">
    <title>{text['title']}</title>
    <link rel="stylesheet" href="/static/styles.css">
</head>
<body>
    <header>
        <nav>
            <div class="container">
                <h1>{text['title']}</h1>
                <p class="tagline">{text['tagline']}</p>
                <div class="language-switcher">
                    {switcher}
                </div>
            </div>
        </nav>
    </header>
    <main class="container">
        <div class="articles-grid" id="articles-grid">
{cards}
        </div>
    </main>
    <footer class="site-footer">
        <div class="container">
            <p>&copy; {year} {escape(self.site_title)}. All rights reserved.</p>
        </div>
    </footer>
</body>
</html>"""

    def render_stylesheet(self) -> str:
        """Return the shared site stylesheet."""
        return STYLESHEET
