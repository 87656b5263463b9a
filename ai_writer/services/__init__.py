"""Service layer exports."""

from .publishing_service import UNTITLED, MultiPublisher, parse_article

__all__ = ["UNTITLED", "MultiPublisher", "parse_article"]
