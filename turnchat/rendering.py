from __future__ import annotations

import html
from typing import Iterable

import markdown

SEPARATOR_HTML = '<hr style="margin: 8px 0;">'
MARKDOWN_EXTENSIONS = [
    "fenced_code",  # ``` で囲まれたコードブロック
    "tables",
    "nl2br",
]


def _build_markdown() -> markdown.Markdown:
    md = markdown.Markdown(extensions=MARKDOWN_EXTENSIONS)
    # 生の HTML はマークアップとして解釈せず、文字列としてエスケープさせる
    md.preprocessors.deregister("html_block")
    md.inlinePatterns.deregister("html")
    return md


def render_result_html(text: str) -> str:
    md = _build_markdown()
    content = md.convert(text)
    return f'<div style="margin-bottom: 10px;">{content}</div>'


def render_error_html(text: str) -> str:
    # エラー本文は診断用にそのまま見せる
    escaped = html.escape(text)
    return f'<pre style="white-space: pre-wrap; color: #b00020;">{escaped}</pre>'


def render_results_html(results: Iterable[str], is_error: bool = False) -> str:
    render = render_error_html if is_error else render_result_html
    return SEPARATOR_HTML.join(render(result) for result in results)
