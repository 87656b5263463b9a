"""Helpers for fetching and flattening web pages."""

from __future__ import annotations

import re

import requests
from bs4 import BeautifulSoup

from .logging import get_logger

LOGGER = get_logger(__name__)

_NOISE_TAGS = ("script", "style", "noscript", "nav", "footer", "header", "aside", "form")
_BLANK_LINES = re.compile(r"\n{3,}")


def html_to_text(html: str, *, parser: str = "html.parser") -> str:
    """Return the readable text of an HTML document."""
    soup = BeautifulSoup(html, parser)
    for tag in soup(_NOISE_TAGS):
        tag.decompose()
    root = soup.find("article") or soup.find("main") or soup.body or soup
    lines = (line.strip() for line in root.get_text("\n").splitlines())
    text = "\n".join(line for line in lines if line)
    return _BLANK_LINES.sub("\n\n", text).strip()


def fetch_page_text(
    url: str,
    *,
    session: requests.Session | None = None,
    timeout: float = 30.0,
    limit: int = 5000,
) -> str:
    """Download ``url`` and return at most ``limit`` characters of its text."""
    client = session or requests.Session()
    response = client.get(url, timeout=timeout, headers={"User-Agent": "ai-writer/0.1"})
    response.raise_for_status()
    if not response.encoding or response.encoding.lower() == "iso-8859-1":
        response.encoding = response.apparent_encoding
    text = html_to_text(response.text)
    LOGGER.info(
        "Fetched page text",
        extra={"event": "link.fetched", "url": url, "chars": len(text)},
    )
    return text[:limit]


__all__ = ["fetch_page_text", "html_to_text"]
