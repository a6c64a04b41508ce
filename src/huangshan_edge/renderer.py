"""HTML rendering for article, not-found and unavailable pages.

Templates live in ``templates/`` and are rendered with autoescaping on;
the only markup inserted verbatim is the post body after it has been
through :func:`huangshan_edge.sanitizer.render_body`.
"""

import math
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from urllib.parse import quote

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from huangshan_edge.config import DEFAULT_SITE_URL
from huangshan_edge.i18n import (
    DEFAULT_LANG,
    HTML_LANG,
    MESSAGES,
    OG_LOCALE,
    SECTION_MESSAGES,
    SUPPORTED_LANGS,
    format_date,
    resolve_lang,
    translate,
)
from huangshan_edge.models import ContentType, Post
from huangshan_edge.sanitizer import is_safe_url, render_body

TEMPLATES_DIR = Path(__file__).parent / "templates"

SITE_NAME = "Huang Shan Global"
TWITTER_HANDLE = "@HuangShanGlobal"

# encodeURIComponent leaves these unescaped.
_URI_COMPONENT_SAFE = "-_.!~*'()"

ARTICLE_PROFILES: dict[ContentType, dict] = {
    ContentType.KNOWLEDGE: {
        "schema_type": "Article",
        "keywords": "logistics knowledge, China Vietnam logistics, import export guide",
        "tags": ["logistics", "China Vietnam", "import export"],
        "author_from_post": False,
        "show_updated": True,
        "show_reading_time": True,
        "show_print": True,
    },
    ContentType.NEWS: {
        "schema_type": "NewsArticle",
        "keywords": "logistics news, China Vietnam logistics, shipping news",
        "tags": ["logistics", "China Vietnam", "shipping"],
        "author_from_post": True,
        "show_updated": False,
        "show_reading_time": False,
        "show_print": False,
    },
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def encode_uri_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


class PageRenderer:
    """Renders complete, self-contained HTML documents for one site."""

    def __init__(
        self,
        site_url: str = DEFAULT_SITE_URL,
        site_name: str = SITE_NAME,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the renderer.

        Args:
            site_url: Public origin used for canonical, Open Graph and share URLs.
            site_name: Name appended to page titles and used as publisher.
            clock: Source of "now" for the copyright year and the
                ``datePublished`` fallback.
        """
        if not site_url or not site_url.strip():
            raise ValueError("site URL must not be empty")
        self.site_url = site_url.strip().rstrip("/")
        self.site_name = site_name
        self._clock = clock
        self._env = Environment(
            loader=FileSystemLoader(TEMPLATES_DIR),
            autoescape=select_autoescape(["html"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def page_url(self, content_type: ContentType, slug: str, lang: str = DEFAULT_LANG) -> str:
        """Public URL of a post; non-default languages carry ``?lang=``."""
        url = f"{self.site_url}/{ContentType(content_type).value}/{quote(slug, safe='')}"
        if lang != DEFAULT_LANG:
            url = f"{url}?lang={lang}"
        return url

    def _labels(self, content_type: ContentType, lang: str) -> dict[str, str]:
        return {**MESSAGES[lang], **SECTION_MESSAGES[content_type][lang]}

    def _base_context(self, content_type: ContentType, lang: str) -> dict:
        return {
            "lang": lang,
            "html_lang": HTML_LANG[lang],
            "content_type": content_type.value,
            "section_path": f"/{content_type.value}",
            "site_name": self.site_name,
            "t": self._labels(content_type, lang),
        }

    def render_article(
        self, content_type: ContentType, post: Post, slug: str, lang: str
    ) -> str:
        """Render the full article page for a fetched post."""
        content_type = ContentType(content_type)
        lang = resolve_lang(lang)
        profile = ARTICLE_PROFILES[content_type]
        context = self._base_context(content_type, lang)
        labels = context["t"]
        now = self._clock()

        title = post.title or labels["article"]
        excerpt = post.excerpt or ""
        category = post.category or labels["general"]
        section = post.category or labels["section"]
        keywords = f"{profile['keywords']}, {post.category or 'logistics'}"
        author = (post.author if profile["author_from_post"] else None) or self.site_name
        canonical_url = self.page_url(content_type, slug, lang)
        default_image = f"{self.site_url}/images/og-default.jpg"
        has_image = bool(post.featured_image) and is_safe_url(post.featured_image)
        image = post.featured_image if has_image else default_image

        alternates = [
            (HTML_LANG[code], self.page_url(content_type, slug, code)) for code in SUPPORTED_LANGS
        ]
        alternates.append(("x-default", self.page_url(content_type, slug)))

        structured_data = {
            "@context": "https://schema.org",
            "@type": profile["schema_type"],
            "headline": title,
            "description": excerpt,
            "image": image,
            "author": {"@type": "Organization", "name": author},
            "publisher": {
                "@type": "Organization",
                "name": self.site_name,
                "logo": {"@type": "ImageObject", "url": f"{self.site_url}/images/logo.png"},
            },
            "datePublished": post.created_at
            or now.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "mainEntityOfPage": {"@type": "WebPage", "@id": canonical_url},
            "articleSection": section,
            "keywords": keywords,
            "inLanguage": HTML_LANG[lang],
        }
        if post.updated_at:
            structured_data["dateModified"] = post.updated_at

        raw_body = post.content_html or post.content or ""
        body = render_body(post.content_html, post.content)
        reading_minutes = math.ceil(len(raw_body) / 1000) if profile["show_reading_time"] else 0

        share_url = encode_uri_component(canonical_url)
        share_links = [
            ("facebook", labels["share_facebook"],
             f"https://www.facebook.com/sharer/sharer.php?u={share_url}"),
            ("twitter", labels["share_twitter"],
             f"https://twitter.com/intent/tweet?text={encode_uri_component(title)}&url={share_url}"),
            ("linkedin", labels["share_linkedin"],
             f"https://www.linkedin.com/sharing/share-offsite/?url={share_url}"),
        ]

        context.update(
            {
                "page_title": f"{title} - {self.site_name}",
                "title": title,
                "excerpt": excerpt,
                "category": category,
                "section": section,
                "keywords": keywords,
                "author": author,
                "show_author": profile["author_from_post"] and bool(post.author),
                "featured": bool(post.featured),
                "canonical_url": canonical_url,
                "alternates": alternates,
                "og_locale": OG_LOCALE[lang],
                "image": image,
                "image_alt": title if has_image else f"{self.site_name} {labels['section']}",
                "twitter_site": TWITTER_HANDLE,
                "published_time": post.created_at,
                "modified_time": post.updated_at,
                "published_display": format_date(post.created_at, lang),
                "updated_display": format_date(post.updated_at, lang)
                if profile["show_updated"]
                else None,
                "reading_minutes": reading_minutes,
                "tags": profile["tags"],
                "structured_data": structured_data,
                "body": Markup(body) if body else None,
                "share_links": share_links,
                "show_print": profile["show_print"],
                "year": now.year,
            }
        )
        return self._env.get_template("article.html").render(**context)

    def render_not_found(self, content_type: ContentType, lang: str) -> str:
        content_type = ContentType(content_type)
        lang = resolve_lang(lang)
        context = self._base_context(content_type, lang)
        # Headline stays English so crawlers and monitors see a stable marker.
        english = translate("en", "article", content_type)
        context.update(
            {
                "status": 404,
                "headline": f"{english} Not Found",
                "page_title": f"{english} Not Found - {self.site_name}",
                "description": context["t"]["not_found_description"],
            }
        )
        return self._env.get_template("not_found.html").render(**context)

    def render_unavailable(self, content_type: ContentType, lang: str) -> str:
        content_type = ContentType(content_type)
        lang = resolve_lang(lang)
        context = self._base_context(content_type, lang)
        context.update(
            {
                "status": 503,
                "headline": context["t"]["unavailable_title"],
                "page_title": f"Service Temporarily Unavailable - {self.site_name}",
                "description": context["t"]["unavailable_description"],
            }
        )
        return self._env.get_template("unavailable.html").render(**context)
