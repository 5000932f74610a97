from __future__ import annotations

import html

import markdown as md

from notedeck.core.models import Note
from notedeck.core.sanitize import sanitize_rendered_html


class MarkdownRenderer:
    def render_body(self, text: str) -> str:
        rendered = md.markdown(text or "", extensions=["fenced_code", "tables", "toc"])
        return sanitize_rendered_html(rendered)

    def render_header(self, note: Note) -> str:
        parts = [f"<h1>{html.escape(note.title) or '<em>Untitled</em>'}</h1>"]
        if note.labels:
            badges = " ".join(
                f'<span class="label">{html.escape(label)}</span>' for label in note.labels
            )
            parts.append(f'<div class="labels">{badges}</div>')
        if note.link:
            href = html.escape(note.link, quote=True)
            parts.append(f'<div class="link"><a href="{href}">{html.escape(note.link)}</a></div>')
        return "\n".join(parts)

    def render_page(self, note: Note) -> str:
        return f"""\
<html>
<head>
  <meta charset="utf-8"/>
  <style>
    body {{ font-family: sans-serif; padding: 16px; line-height: 1.5; }}
    code, pre {{ background: #f5f5f5; }}
    pre {{ padding: 12px; overflow-x: auto; }}
    a {{ text-decoration: none; }}
    a:hover {{ text-decoration: underline; }}
    .label {{ display: inline-block; padding: 0 6px; margin-right: 4px; border-radius: 4px; background: #f5f5f5; font-size: 0.85em; }}
    .link {{ margin: 6px 0 12px; font-size: 0.9em; }}
  </style>
</head>
<body>
{self.render_header(note)}
{self.render_body(note.markdown)}
</body>
</html>
"""
