"""Markdown preview with VuePress-style custom containers.

``::: tip``, ``::: warning``, ``::: danger`` and ``::: details`` blocks are
cut out of the document before rendering, replaced by numbered HTML
comment placeholders, rendered separately and spliced back in.
Containers do not nest.
"""

from __future__ import annotations

import logging
import re
import secrets
from collections.abc import Callable
from dataclasses import dataclass, field
from functools import lru_cache
from html import escape

from markdown_it import MarkdownIt

from devtoolshub.highlight import HighlightedCode, highlight_code
from devtoolshub.results import ToolResult

logger = logging.getLogger(__name__)

MAX_INPUT_LENGTH = 2_000_000

CONTAINER_TYPES = ("tip", "warning", "danger", "details")

DETAILS_LABELS = {"zh-CN": "详情", "en": "Details"}
DEFAULT_DETAILS_LABEL = DETAILS_LABELS["zh-CN"]

_OPEN_LINE = re.compile(r"^\s*:::\s*(tip|warning|danger|details)(?:\s+(.*))?$")
_CLOSE_LINE = re.compile(r"^\s*:::\s*$")
_LINE_BREAK = re.compile(r"\r?\n")


@dataclass(frozen=True)
class ContainerBlock:
    type: str
    title: str | None
    content: str


@dataclass(frozen=True)
class ExtractedContainers:
    blocks: list[ContainerBlock]
    text_with_placeholders: str


@dataclass(frozen=True)
class MarkdownResult(ToolResult):
    html: str = ""
    blocks: list[ContainerBlock] = field(default_factory=list)
    text_with_placeholders: str = ""


def placeholder(index: int, nonce: str = "") -> str:
    """``<!--vue-block-N-->``, or ``<!--vue-block-<nonce>-N-->`` when a nonce is given."""
    if nonce:
        return f"<!--vue-block-{nonce}-{index}-->"
    return f"<!--vue-block-{index}-->"


# ---------------------------------------------------------------------------
# Container extraction
# ---------------------------------------------------------------------------


def extract_containers(raw: str, nonce: str = "") -> ExtractedContainers:
    """Pull container blocks out of *raw*, line by line.

    A block ends at a bare ``:::`` line, at the next opener (the current
    block is then kept as-is), or at the end of the input. Unterminated
    blocks are not an error. *nonce* goes into every placeholder so that
    comments already present in the input cannot be mistaken for one.
    """
    lines = _LINE_BREAK.split(raw)
    blocks: list[ContainerBlock] = []
    rest: list[str] = []

    i = 0
    while i < len(lines):
        opener = _OPEN_LINE.match(lines[i])
        if not opener:
            rest.append(lines[i])
            i += 1
            continue

        title = (opener.group(2) or "").strip() or None
        i += 1

        content: list[str] = []
        while i < len(lines):
            if _CLOSE_LINE.match(lines[i]):
                i += 1
                break
            if _OPEN_LINE.match(lines[i]):
                break
            content.append(lines[i])
            i += 1

        blocks.append(ContainerBlock(type=opener.group(1), title=title, content="\n".join(content)))
        rest.append(placeholder(len(blocks) - 1, nonce))

    logger.debug("Extracted %d container block(s)", len(blocks))
    return ExtractedContainers(blocks=blocks, text_with_placeholders="\n".join(rest))


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def create_renderer(
    highlighter: Callable[[str, str | None], HighlightedCode] = highlight_code,
) -> MarkdownIt:
    """CommonMark renderer with GFM tables, strikethrough and hard line breaks.

    Raw HTML stays enabled because the container placeholders are HTML
    comments.
    """

    def highlight(content: str, lang: str, attrs: str) -> str:
        return highlighter(content, lang or None).html

    md = MarkdownIt("commonmark", options_update={"breaks": True, "html": True, "highlight": highlight})
    md.enable(["table", "strikethrough"])
    return md


@lru_cache(maxsize=1)
def default_renderer() -> MarkdownIt:
    return create_renderer()


def render_container(
    block: ContainerBlock,
    renderer: MarkdownIt | None = None,
    *,
    details_label: str = DEFAULT_DETAILS_LABEL,
) -> str:
    md = renderer or default_renderer()
    body = block.content.strip()
    inner = md.render(body) if body else ""

    if block.type == "details":
        summary = escape(block.title) if block.title else escape(details_label)
        return (
            '<details class="vue-container vue-details">'
            f'<summary class="vue-container-title">{summary}</summary>{inner}</details>'
        )

    title_html = (
        f'<p class="vue-container-title"><strong>{escape(block.title)}</strong></p>' if block.title else ""
    )
    return f'<div class="vue-container vue-{block.type}">{title_html}{inner}</div>'


def parse_markdown_document(
    raw: str,
    *,
    max_length: int = MAX_INPUT_LENGTH,
    renderer: MarkdownIt | None = None,
    details_label: str = DEFAULT_DETAILS_LABEL,
) -> MarkdownResult:
    """Render a whole document, containers included.

    Oversized input is rejected before any parsing work.
    """
    if len(raw) > max_length:
        return MarkdownResult.failure(f"Input exceeds maximum length ({max_length} characters)")

    nonce = secrets.token_hex(8)
    extracted = extract_containers(raw, nonce)
    md = renderer or default_renderer()

    try:
        html = md.render(extracted.text_with_placeholders)
        for index, block in enumerate(extracted.blocks):
            rendered = render_container(block, md, details_label=details_label)
            html = html.replace(placeholder(index, nonce), rendered, 1)
    except Exception as exc:
        logger.exception("Markdown rendering failed")
        return MarkdownResult.failure(str(exc) or "Markdown render failed")

    return MarkdownResult(
        html=html,
        blocks=extracted.blocks,
        text_with_placeholders=extracted.text_with_placeholders,
    )
