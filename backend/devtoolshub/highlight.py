from __future__ import annotations

import logging
from dataclasses import dataclass
from html import escape

from pygments import highlight as pygments_highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

logger = logging.getLogger(__name__)

# Fence languages that Pygments knows under a different name.
LANGUAGE_ALIASES = {
    "vue": "html",
    "vb": "html",
    "sh": "shell",
}

DEFAULT_STYLE = "default"
CSS_SCOPE = ".highlight"

_FORMATTER = HtmlFormatter(nowrap=True)


@dataclass(frozen=True)
class HighlightedCode:
    html: str
    # Empty when the block fell back to escaped plain text.
    language: str = ""

    @property
    def highlighted(self) -> bool:
        return bool(self.language)


def _plain(code: str) -> HighlightedCode:
    return HighlightedCode(html=f"<pre><code>{escape(code)}</code></pre>")


def resolve_language(language: str | None) -> str:
    lang = (language or "").strip().lower()
    return LANGUAGE_ALIASES.get(lang, lang)


def highlight_code(code: str, language: str | None = None) -> HighlightedCode:
    """Highlight a fenced code block with Pygments.

    Unknown or missing languages produce escaped plain text, so raw code
    never reaches the page unescaped.
    """
    resolved = resolve_language(language)
    if not resolved:
        return _plain(code)

    try:
        lexer = get_lexer_by_name(resolved, stripnl=False, ensurenl=False)
    except ClassNotFound:
        return _plain(code)

    body = pygments_highlight(code, lexer, _FORMATTER)
    return HighlightedCode(
        html=f'<pre><code class="language-{escape(resolved)} highlight">{body}</code></pre>',
        language=resolved,
    )


def get_highlight_css(style: str = DEFAULT_STYLE) -> str:
    """Stylesheet for highlighted blocks, scoped to ``.highlight``."""
    try:
        formatter = HtmlFormatter(style=style)
    except ClassNotFound:
        logger.warning("Unknown highlight style %r, using %r", style, DEFAULT_STYLE)
        formatter = HtmlFormatter(style=DEFAULT_STYLE)
    return formatter.get_style_defs(CSS_SCOPE)
