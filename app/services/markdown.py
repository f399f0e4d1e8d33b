"""
Markdown to HTML rendering for post content.
The generated HTML is sanitized with bleach before it leaves the API.
"""

import bleach
import markdown

MARKDOWN_EXTENSIONS = ["fenced_code", "tables"]

# Allowed tags
ALLOWED_TAGS = [
    "p", "br", "hr",
    "h1", "h2", "h3", "h4", "h5", "h6",
    "ul", "ol", "li",
    "blockquote", "pre", "code",
    "a", "img",
    "strong", "b", "em", "i", "del",
    "table", "thead", "tbody", "tr", "th", "td",
]

# Allowed attributes per tag
ALLOWED_ATTRIBUTES = {
    "*": ["class"],
    "a": ["href", "title"],
    "img": ["src", "alt", "title"],
    "th": ["align"],
    "td": ["align"],
}

ALLOWED_PROTOCOLS = ["http", "https", "mailto"]


def render_markdown(text: str) -> str:
    """Render markdown as sanitized HTML"""
    if not text:
        return ""
    html = markdown.markdown(text, extensions=MARKDOWN_EXTENSIONS)
    return bleach.clean(
        html,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        protocols=ALLOWED_PROTOCOLS,
        strip=True,
    )
