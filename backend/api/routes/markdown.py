from __future__ import annotations

import asyncio
import logging
from functools import partial

from fastapi import APIRouter, HTTPException
from fastapi.responses import StreamingResponse

from config import get_settings
from devtoolshub.markdown import DETAILS_LABELS, DEFAULT_DETAILS_LABEL, parse_markdown_document
from devtoolshub.markdown_export import export_markdown_as_html, preview_html_for_copy
from schemas.api import (
    ContainerBlockResponse,
    HtmlFragmentResponse,
    MarkdownExportRequest,
    MarkdownRenderResponse,
    MarkdownRequest,
)

logger = logging.getLogger(__name__)
router = APIRouter()
settings = get_settings()


def _details_label(locale: str | None) -> str:
    return DETAILS_LABELS.get(locale or settings.display_locale, DEFAULT_DETAILS_LABEL)


def _safe_filename(name: str) -> str:
    cleaned = "".join(c for c in name if c.isalnum() or c in "-_. ").strip() or "markdown-export"
    return cleaned if cleaned.lower().endswith(".html") else f"{cleaned}.html"


@router.post("/render", response_model=MarkdownRenderResponse)
async def render(body: MarkdownRequest):
    """Render Markdown with custom containers to an HTML fragment."""
    loop = asyncio.get_running_loop()
    result = await loop.run_in_executor(
        None,
        partial(
            parse_markdown_document,
            body.markdown,
            max_length=settings.markdown_max_input_length,
            details_label=_details_label(body.locale),
        ),
    )
    if not result.ok:
        raise HTTPException(status_code=422, detail=result.error)

    return MarkdownRenderResponse(
        html=result.html,
        blocks=[
            ContainerBlockResponse(type=block.type, title=block.title, content=block.content)
            for block in result.blocks
        ],
    )


@router.post("/copy-html", response_model=HtmlFragmentResponse)
async def copy_html(body: MarkdownRequest):
    loop = asyncio.get_running_loop()
    result = await loop.run_in_executor(
        None,
        partial(
            preview_html_for_copy,
            body.markdown,
            max_length=settings.markdown_max_input_length,
            details_label=_details_label(body.locale),
        ),
    )
    if not result.ok:
        raise HTTPException(status_code=422, detail=result.error)
    return HtmlFragmentResponse(html=result.html)


@router.post("/export")
async def export(body: MarkdownExportRequest):
    """Download the rendered document as a standalone HTML file."""
    locale = body.locale or settings.display_locale
    loop = asyncio.get_running_loop()
    result = await loop.run_in_executor(
        None,
        partial(
            export_markdown_as_html,
            body.markdown,
            style=body.style or settings.highlight_style,
            lang=locale,
            max_length=settings.markdown_max_input_length,
            details_label=_details_label(locale),
        ),
    )
    if not result.ok:
        raise HTTPException(status_code=422, detail=result.error)

    filename = _safe_filename(body.filename)
    logger.info("Exported markdown document (%d chars) as %s", len(body.markdown), filename)
    return StreamingResponse(
        iter([result.html]),
        media_type="text/html; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
