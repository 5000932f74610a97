from .markdown_renderer import MarkdownRenderer
from .titles import extract_title, fetch_title, is_http_url

__all__ = ["MarkdownRenderer",
           "extract_title",
           "fetch_title",
           "is_http_url",
           ]
