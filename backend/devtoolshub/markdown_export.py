from __future__ import annotations

from dataclasses import dataclass
from html import escape

from devtoolshub.highlight import DEFAULT_STYLE, get_highlight_css
from devtoolshub.markdown import DEFAULT_DETAILS_LABEL, MAX_INPUT_LENGTH, parse_markdown_document
from devtoolshub.results import ToolResult

EXPORT_TITLE = "Markdown Export"

# Same scope and variables as the in-app preview pane.
MD_VUE_CSS = """
  .md-vue { line-height: 1.7; color: #374151; }
  .md-vue h1 { font-size: 2rem; font-weight: 700; margin-bottom: 1rem; padding-bottom: 0.3rem; border-bottom: 1px solid #e2e8f0; }
  .md-vue h2 { font-size: 1.5rem; font-weight: 600; margin-top: 2rem; margin-bottom: 0.75rem; padding-bottom: 0.25rem; border-bottom: 1px solid #e2e8f0; }
  .md-vue h3, .md-vue h4, .md-vue h5, .md-vue h6 { font-size: 1.125rem; font-weight: 600; margin-top: 1.25rem; margin-bottom: 0.5rem; }
  .md-vue p { margin-bottom: 1rem; }
  .md-vue pre { margin-bottom: 1rem; padding: 1rem 1.25rem; background: #f1f5f9; border: 1px solid #e2e8f0; border-radius: 0.5rem; overflow-x: auto; font-size: 0.875rem; }
  .md-vue :not(pre) > code { padding: 0.2em 0.4em; background: #f1f5f9; border: 1px solid #e2e8f0; border-radius: 0.25rem; font-size: 0.875em; }
  .md-vue blockquote { margin: 1rem 0; padding: 0.5rem 0 0.5rem 1rem; border-left: 4px solid #3b82f6; background: #eff6ff; }
  .md-vue table { width: 100%; margin: 1rem 0; border-collapse: collapse; font-size: 0.875rem; }
  .md-vue th, .md-vue td { padding: 0.5rem 0.75rem; border: 1px solid #e5e7eb; }
  .md-vue th { font-weight: 600; background: #f9fafb; }
  .md-vue .vue-container { margin: 1rem 0; padding: 1rem 1.25rem; border-left: 4px solid; border-radius: 0 0.5rem 0.5rem 0; }
  .md-vue .vue-tip { border-color: #22c55e; background: #f0fdf4; }
  .md-vue .vue-warning { border-color: #f59e0b; background: #fffbeb; }
  .md-vue .vue-danger { border-color: #ef4444; background: #fef2f2; }
  .md-vue .vue-details { border-color: #8b5cf6; background: #f5f3ff; }
"""


@dataclass(frozen=True)
class ExportResult(ToolResult):
    html: str = ""


def _document(body_html: str, css: str, lang: str) -> str:
    return (
        "<!DOCTYPE html>\n"
        f'<html lang="{escape(lang)}">\n'
        "<head>\n"
        '  <meta charset="utf-8">\n'
        '  <meta name="viewport" content="width=device-width, initial-scale=1">\n'
        f"  <title>{EXPORT_TITLE}</title>\n"
        f"  <style>{css}</style>\n"
        "</head>\n"
        "<body>\n"
        f'  <div class="md-vue">{body_html}</div>\n'
        "</body>\n"
        "</html>"
    )


def export_markdown_as_html(
    markdown: str,
    *,
    style: str = DEFAULT_STYLE,
    lang: str = "zh-CN",
    max_length: int = MAX_INPUT_LENGTH,
    details_label: str = DEFAULT_DETAILS_LABEL,
) -> ExportResult:
    """Render *markdown* into a standalone HTML document with embedded CSS."""
    parsed = parse_markdown_document(markdown, max_length=max_length, details_label=details_label)
    if not parsed.ok:
        return ExportResult.failure(parsed.error)
    css = MD_VUE_CSS + get_highlight_css(style)
    return ExportResult(html=_document(parsed.html, css, lang))


def preview_html_for_copy(
    markdown: str,
    *,
    max_length: int = MAX_INPUT_LENGTH,
    details_label: str = DEFAULT_DETAILS_LABEL,
) -> ExportResult:
    parsed = parse_markdown_document(markdown, max_length=max_length, details_label=details_label)
    if not parsed.ok:
        return ExportResult.failure(parsed.error)
    return ExportResult(html=f'<div class="md-vue">{parsed.html}</div>')
