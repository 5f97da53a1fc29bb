#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Article export
==============
Renders the current version of an article to a downloadable PDF: title,
workspace, created / updated dates, author, then the content as plain text.

Rendering is synchronous (reportlab); callers run it in a worker thread.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import html
import re
from datetime import datetime
from io import BytesIO
from typing import Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer


# -----------------------------------------------------------------------------

from inkwell.schemas import ArticleOut

_MARGIN = 56

_BLOCK_BREAK_RE = re.compile(r'<\s*(br\s*/?|/p|/div|/h[1-6]|/li)\s*>', re.IGNORECASE)
_IMG_RE         = re.compile(r'<img\b[^>]*>', re.IGNORECASE)
_HTML_TAG_RE    = re.compile(r'<[^>]+>')
_BLANK_LINES_RE = re.compile(r'\n{3,}')
_UNSAFE_NAME_RE = re.compile(r'[^\w\s-]', re.ASCII)


# -----------------------------------------------------------------------------

def to_plain_text(content: str) -> str:
    """'<p>Fish &amp; chips</p><p>x</p>' → 'Fish & chips\\nx'.  Images are skipped."""
    text = _IMG_RE.sub('', content)
    text = _BLOCK_BREAK_RE.sub('\n', text)
    text = _HTML_TAG_RE.sub('', text)
    text = html.unescape(text).replace('\r\n', '\n')
    return _BLANK_LINES_RE.sub('\n\n', text).strip()


def export_filename(title: str) -> str:
    """Header-safe download name: punctuation dropped, '.pdf' appended."""
    safe = _UNSAFE_NAME_RE.sub('', title or '').strip()
    return f"{safe or 'article'}.pdf"


def _stamp(value: datetime) -> str:
    return value.strftime('%Y-%m-%d %H:%M')


# -----------------------------------------------------------------------------

def render_article_pdf(article: ArticleOut, author: Optional[str] = None) -> bytes:
    styles = getSampleStyleSheet()
    title_style = ParagraphStyle('ArticleTitle', parent=styles['Heading1'], fontSize=20, leading=24)
    meta_style = ParagraphStyle(
        'ArticleMeta', parent=styles['Normal'], fontSize=10, leading=13,
        textColor=colors.HexColor('#666666'),
    )
    body_style = ParagraphStyle('ArticleBody', parent=styles['Normal'], fontSize=12, leading=16)

    story = [
        Paragraph(html.escape(article.title or 'Untitled'), title_style),
        Spacer(1, 6),
        Paragraph(f"Workspace: {html.escape(article.workspace_id)}", meta_style),
        Paragraph(f"Created: {_stamp(article.created_at)}", meta_style),
        Paragraph(f"Updated: {_stamp(article.updated_at)}", meta_style),
    ]
    if author:
        story.append(Paragraph(f"Author: {html.escape(author)}", meta_style))
    story.append(Spacer(1, 14))

    text = to_plain_text(article.content) or '(No content)'
    for block in text.split('\n\n'):
        story.append(Paragraph(html.escape(block).replace('\n', '<br/>'), body_style))
        story.append(Spacer(1, 8))

    buf = BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=A4,
        leftMargin=_MARGIN, rightMargin=_MARGIN,
        topMargin=_MARGIN, bottomMargin=_MARGIN,
        title=article.title,
        author=author or '',
    )
    doc.build(story)
    return buf.getvalue()


# -----------------------------------------------------------------------------
