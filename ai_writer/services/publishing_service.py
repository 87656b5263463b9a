"""Fan one article out to every configured platform."""

from __future__ import annotations

import re
from contextlib import contextmanager
from typing import Any, Iterator, Mapping

import requests

from ..platforms.base import DEFAULT_TIMEOUT, Article, PublishOptions, PublishResult
from ..platforms.factory import DEFAULT_REGISTRY, PlatformRegistry, PlatformSpec
from ..settings.publishers import PublishersConfig, resolve_publishers
from ..utils.logging import get_logger

LOGGER = get_logger(__name__)

UNTITLED = "Untitled Article"

_TITLE_PATTERN = re.compile(r"^#[ \t]+(?!#+[ \t]*$)(\S.*?)[ \t]*(?:\n|$)", re.MULTILINE)


def parse_article(raw_text: str) -> Article:
    """Split raw Markdown into its first level-1 heading and the rest.

    Without a heading the title falls back to ``UNTITLED`` and the body is the
    input untouched.
    """
    match = _TITLE_PATTERN.search(raw_text)
    if match is None:
        return Article(title=UNTITLED, body=raw_text)
    title = match.group(1).strip()
    body = (raw_text[: match.start()] + raw_text[match.end() :]).strip()
    return Article(title=title, body=body)


class MultiPublisher:
    """Runs transform then publish for each active platform, one at a time.

    Adapters are built fresh for every call and only for platforms whose
    configuration is present; a failure inside one adapter is turned into a
    failed :class:`PublishResult` and never stops the rest of the batch.
    """

    def __init__(
        self,
        config: PublishersConfig | None = None,
        *,
        registry: PlatformRegistry = DEFAULT_REGISTRY,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._config = config if config is not None else resolve_publishers()
        self._registry = registry
        self._session = session
        self._timeout = timeout

    @property
    def config(self) -> PublishersConfig:
        return self._config

    @staticmethod
    def parse_article(raw_text: str) -> Article:
        return parse_article(raw_text)

    def configured_platforms(self) -> list[str]:
        return [spec.display_name for spec in self._registry.active(self._config)]

    def publish(
        self,
        raw_text: str,
        options: PublishOptions | Mapping[str, Any] | None = None,
    ) -> list[PublishResult]:
        options = _coerce_options(options)
        article = self._article(raw_text, options)
        specs = self._registry.active(self._config)
        LOGGER.info(
            "Publishing to %d platform(s)",
            len(specs),
            extra={
                "event": "publish.start",
                "platforms": [spec.display_name for spec in specs],
                "status": options.status.value,
            },
        )
        with self._session_scope() as session:
            results = [self._run(spec, article, options, session) for spec in specs]
        LOGGER.info(
            "Publish finished: %d/%d succeeded",
            sum(result.success for result in results),
            len(results),
            extra={"event": "publish.done"},
        )
        return results

    def publish_to(
        self,
        platform_name: str,
        raw_text: str,
        options: PublishOptions | Mapping[str, Any] | None = None,
    ) -> PublishResult:
        """Publish to a single active platform named by key or display name."""
        options = _coerce_options(options)
        spec = PlatformRegistry(self._registry.active(self._config)).get(platform_name)
        with self._session_scope() as session:
            return self._run(spec, self._article(raw_text, options), options, session)

    def _article(self, raw_text: str, options: PublishOptions) -> Article:
        article = parse_article(raw_text)
        if options.title:
            return Article(title=options.title, body=article.body)
        return article

    @contextmanager
    def _session_scope(self) -> Iterator[requests.Session]:
        """Yield the injected session, or one that lives for a single call."""
        if self._session is not None:
            yield self._session
            return
        with requests.Session() as session:
            yield session

    def _run(
        self,
        spec: PlatformSpec,
        article: Article,
        options: PublishOptions,
        session: requests.Session,
    ) -> PublishResult:
        try:
            adapter = spec.build(self._config, session=session, timeout=self._timeout)
            if not adapter.is_configured():
                LOGGER.warning(
                    "Adapter reports incomplete configuration",
                    extra={"event": "publish.unconfigured", "platform": spec.display_name},
                )
            transformed = adapter.transform(article.title, article.body)
            return adapter.publish(transformed.title, transformed.body, options)
        except Exception as exc:
            LOGGER.exception(
                "Adapter raised during publish",
                extra={"event": "publish.error", "platform": spec.display_name},
            )
            return PublishResult.failed(spec.display_name, error=str(exc) or type(exc).__name__)


def _coerce_options(options: PublishOptions | Mapping[str, Any] | None) -> PublishOptions:
    if isinstance(options, PublishOptions):
        return options
    return PublishOptions.from_mapping(options)
