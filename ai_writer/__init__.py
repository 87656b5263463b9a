"""Generate articles from notes and publish them to several blogging platforms."""

__version__ = "0.1.0"
