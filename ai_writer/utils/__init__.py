"""Utility exports."""

from .file_helper import dated_path, ensure_parent, read_text, write_text
from .html import fetch_page_text, html_to_text
from .logging import configure_logging, get_logger

__all__ = [
    "dated_path",
    "ensure_parent",
    "read_text",
    "write_text",
    "fetch_page_text",
    "html_to_text",
    "configure_logging",
    "get_logger",
]
