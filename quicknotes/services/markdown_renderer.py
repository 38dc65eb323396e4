from __future__ import annotations

import markdown as md

from quicknotes.core.sanitize import sanitize_rendered_html
from quicknotes.settings import (
    PREVIEW_DEBOUNCE_MS_CHARS_PER_STEP,
    PREVIEW_DEBOUNCE_MS_MAX_ADD,
    PREVIEW_DEBOUNCE_MS_MIN,
)


def preview_delay_ms(
    text_len: int,
    *,
    min_ms: int = PREVIEW_DEBOUNCE_MS_MIN,
    max_add_ms: int = PREVIEW_DEBOUNCE_MS_MAX_ADD,
    chars_per_step: int = PREVIEW_DEBOUNCE_MS_CHARS_PER_STEP,
) -> int:
    """Larger notes => render the preview less often."""
    if text_len <= 0 or chars_per_step <= 0:
        return min_ms
    steps = text_len // chars_per_step
    return min_ms + min(max_add_ms, steps * min_ms)


class MarkdownRenderer:
    def __init__(self, *, extensions: list[str] | None = None):
        self.extensions = extensions or ["fenced_code", "tables"]

    def render_fragment(self, text: str) -> str:
        return sanitize_rendered_html(md.markdown(text or "", extensions=self.extensions))

    def render_page(self, text: str) -> str:
        body = self.render_fragment(text)
        return f"""\
<html>
<head>
  <meta charset="utf-8"/>
  <style>
    body {{ font-family: sans-serif; line-height: 1.5; }}
    pre {{ padding: 8px; background: #334155; }}
  </style>
</head>
<body>{body}</body>
</html>
"""
