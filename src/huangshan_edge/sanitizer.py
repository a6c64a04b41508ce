"""Allow-list sanitizing of post bodies supplied by the content API."""

import re
from urllib.parse import urlparse

from bs4 import BeautifulSoup
from bs4.element import CData, Comment, Declaration, Doctype, ProcessingInstruction
from markupsafe import escape

# Removed together with everything inside them.
DROPPED_TAGS = [
    "script",
    "style",
    "iframe",
    "frame",
    "frameset",
    "object",
    "embed",
    "applet",
    "noscript",
    "template",
    "form",
    "input",
    "button",
    "select",
    "textarea",
    "link",
    "meta",
    "base",
    "svg",
    "math",
]

ALLOWED_TAGS = {
    "a", "abbr", "b", "blockquote", "br", "caption", "cite", "code", "dd", "del",
    "div", "dl", "dt", "em", "figcaption", "figure", "h1", "h2", "h3", "h4", "h5",
    "h6", "hr", "i", "img", "ins", "kbd", "li", "mark", "ol", "p", "pre", "q", "s",
    "small", "span", "strong", "sub", "sup", "table", "tbody", "td", "tfoot", "th",
    "thead", "tr", "u", "ul",
}

GLOBAL_ATTRS = {"class", "title", "lang", "dir"}

ALLOWED_ATTRS = {
    "a": {"href", "target", "rel", "name"},
    "img": {"src", "alt", "width", "height", "loading"},
    "ol": {"start", "type", "reversed"},
    "td": {"colspan", "rowspan", "align"},
    "th": {"colspan", "rowspan", "align", "scope"},
    "blockquote": {"cite"},
    "q": {"cite"},
    "del": {"cite", "datetime"},
    "ins": {"cite", "datetime"},
}

URL_ATTRS = {"href", "src", "cite"}
SAFE_SCHEMES = {"http", "https", "mailto", "tel"}

_CONTROL_AND_SPACE = re.compile(r"[\x00-\x20\x7f]+")
_TAG_LIKE = re.compile(r"<\s*/?\s*[a-zA-Z][^>]*>")
_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
_URL = re.compile(r"""https?://[^\s<>"']*[^\s<>"'.,;:!?)\]]""")


def is_safe_url(value: str, allow_data_image: bool = False) -> bool:
    """Accept relative URLs and http(s)/mailto/tel; optionally raster data: images."""
    compact = _CONTROL_AND_SPACE.sub("", value).lower()
    if not compact:
        return False
    if allow_data_image and compact.startswith("data:image/"):
        return not compact.startswith("data:image/svg")
    try:
        scheme = urlparse(compact).scheme
    except ValueError:
        return False
    return scheme == "" or scheme in SAFE_SCHEMES


def _clean_attrs(tag_name: str, attrs: dict) -> dict:
    allowed = GLOBAL_ATTRS | ALLOWED_ATTRS.get(tag_name, set())
    cleaned = {}
    for name, value in attrs.items():
        name = name.lower()
        if name not in allowed:
            continue
        if name in URL_ATTRS:
            if not isinstance(value, str) or not is_safe_url(
                value, allow_data_image=(tag_name == "img" and name == "src")
            ):
                continue
            value = value.strip()
        cleaned[name] = value

    if tag_name == "a":
        target = cleaned.get("target")
        if target not in (None, "_blank", "_self"):
            del cleaned["target"]
        if cleaned.get("target") == "_blank":
            cleaned["rel"] = "noopener noreferrer"
    return cleaned


def sanitize_html(html: str | None) -> str:
    """Reduce untrusted HTML to an allow-listed subset.

    Dangerous elements are removed with their content, other unknown
    elements are unwrapped so their text survives, and attributes are
    filtered per tag. An ``<img>`` left without a safe ``src`` is dropped.
    """
    if not html:
        return ""

    soup = BeautifulSoup(html, "html.parser")

    for tag in soup.find_all(DROPPED_TAGS):
        if not tag.decomposed:
            tag.decompose()

    for node in soup.find_all(
        string=lambda s: isinstance(s, (Comment, CData, Declaration, Doctype, ProcessingInstruction))
    ):
        node.extract()

    for tag in soup.find_all(True):
        if tag.name not in ALLOWED_TAGS:
            tag.unwrap()
            continue
        tag.attrs = _clean_attrs(tag.name, tag.attrs)
        if tag.name == "img" and "src" not in tag.attrs:
            tag.decompose()

    return str(soup).strip()


def looks_like_html(text: str) -> bool:
    return bool(_TAG_LIKE.search(text))


def _linkify(line: str) -> str:
    parts = []
    position = 0
    for match in _URL.finditer(line):
        parts.append(str(escape(line[position : match.start()])))
        url = escape(match.group(0))
        parts.append(f'<a href="{url}" target="_blank" rel="noopener noreferrer">{url}</a>')
        position = match.end()
    parts.append(str(escape(line[position:])))
    return "".join(parts)


def format_plain_text(text: str | None) -> str:
    """Turn plain text into paragraphs, keeping line breaks and linking URLs."""
    if not text:
        return ""
    paragraphs = [p.strip() for p in _PARAGRAPH_BREAK.split(text.replace("\r\n", "\n"))]
    rendered = []
    for paragraph in paragraphs:
        if not paragraph:
            continue
        lines = [_linkify(line) for line in paragraph.split("\n")]
        rendered.append(f"<p>{'<br>'.join(lines)}</p>")
    return "\n".join(rendered)


def render_body(content_html: str | None, content: str | None) -> str:
    """Pick and clean the body: sanitized HTML first, then plain text.

    Returns an empty string when neither field has anything to show.
    """
    if content_html and content_html.strip():
        return sanitize_html(content_html)
    if content and content.strip():
        if looks_like_html(content):
            return sanitize_html(content)
        return format_plain_text(content)
    return ""
