"""Localized labels and date formatting for the three site languages.

The site uses its own language codes: ``vn`` (default), ``en`` and ``cn``.
"""

from datetime import datetime

from huangshan_edge.models import ContentType

DEFAULT_LANG = "vn"
SUPPORTED_LANGS = ("vn", "en", "cn")

LANG_ALIASES = {
    "vi": "vn",
    "vi-vn": "vn",
    "zh": "cn",
    "zh-cn": "cn",
    "en-us": "en",
}

# BCP 47 tag for <html lang> and the Open Graph locale.
HTML_LANG = {"vn": "vi", "en": "en", "cn": "zh"}
OG_LOCALE = {"vn": "vi_VN", "en": "en_US", "cn": "zh_CN"}

MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        "general": "General",
        "published": "Published",
        "updated": "Updated",
        "by": "By",
        "featured": "Featured",
        "min_read": "min read",
        "content_unavailable": "Content not available",
        "share": "Share this article",
        "share_facebook": "Share on Facebook",
        "share_twitter": "Share on Twitter",
        "share_linkedin": "Share on LinkedIn",
        "print": "Print Article",
        "rights": "All rights reserved.",
        "not_found_description": "The article you're looking for doesn't exist or has been removed.",
        "unavailable_title": "Service Temporarily Unavailable",
        "unavailable_description": (
            "We're experiencing technical difficulties. Please try again in a few moments."
        ),
    },
    "cn": {
        "general": "综合",
        "published": "发布于",
        "updated": "更新于",
        "by": "作者",
        "featured": "精选",
        "min_read": "分钟阅读",
        "content_unavailable": "内容不可用",
        "share": "分享这篇文章",
        "share_facebook": "分享到Facebook",
        "share_twitter": "分享到Twitter",
        "share_linkedin": "分享到LinkedIn",
        "print": "打印文章",
        "rights": "保留所有权利。",
        "not_found_description": "您查找的文章不存在或已被删除。",
        "unavailable_title": "服务暂时不可用",
        "unavailable_description": "我们遇到了技术问题，请稍后再试。",
    },
    "vn": {
        "general": "Chung",
        "published": "Xuất bản",
        "updated": "Cập nhật",
        "by": "Bởi",
        "featured": "Nổi bật",
        "min_read": "phút đọc",
        "content_unavailable": "Nội dung không có sẵn",
        "share": "Chia sẻ bài viết",
        "share_facebook": "Chia sẻ trên Facebook",
        "share_twitter": "Chia sẻ trên Twitter",
        "share_linkedin": "Chia sẻ trên LinkedIn",
        "print": "In bài viết",
        "rights": "Bảo lưu mọi quyền.",
        "not_found_description": "Bài viết bạn tìm kiếm không tồn tại hoặc đã bị xóa.",
        "unavailable_title": "Dịch vụ tạm thời không khả dụng",
        "unavailable_description": "Chúng tôi đang gặp sự cố kỹ thuật. Vui lòng thử lại sau ít phút.",
    },
}

SECTION_MESSAGES: dict[ContentType, dict[str, dict[str, str]]] = {
    ContentType.KNOWLEDGE: {
        "en": {
            "section": "Knowledge",
            "article": "Knowledge Article",
            "back": "Back to Knowledge",
        },
        "cn": {"section": "知识库", "article": "知识文章", "back": "返回知识库"},
        "vn": {
            "section": "Kiến thức",
            "article": "Bài viết kiến thức",
            "back": "Quay lại Kiến thức",
        },
    },
    ContentType.NEWS: {
        "en": {"section": "News", "article": "News Article", "back": "Back to News"},
        "cn": {"section": "新闻", "article": "新闻文章", "back": "返回新闻"},
        "vn": {
            "section": "Tin tức",
            "article": "Bài viết tin tức",
            "back": "Quay lại tin tức",
        },
    },
}


def resolve_lang(lang: str | None) -> str:
    """Map a ``lang`` query value onto a supported site language."""
    if not lang or not isinstance(lang, str):
        return DEFAULT_LANG
    code = lang.strip().lower()
    code = LANG_ALIASES.get(code, code)
    return code if code in SUPPORTED_LANGS else DEFAULT_LANG


def translate(lang: str, key: str, content_type: ContentType | None = None) -> str:
    lang = resolve_lang(lang)
    if content_type is not None:
        return SECTION_MESSAGES[ContentType(content_type)][lang][key]
    return MESSAGES[lang][key]


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an API timestamp; ``None`` if absent or unparseable."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError:
        return None


def format_date(value: str | None, lang: str) -> str | None:
    """Format a timestamp as a short numeric date for the language.

    en → ``1/15/2024``, cn → ``2024/1/15``, vn → ``15/1/2024``.
    """
    parsed = parse_timestamp(value)
    if parsed is None:
        return None
    lang = resolve_lang(lang)
    if lang == "en":
        return f"{parsed.month}/{parsed.day}/{parsed.year}"
    if lang == "cn":
        return f"{parsed.year}/{parsed.month}/{parsed.day}"
    return f"{parsed.day}/{parsed.month}/{parsed.year}"
