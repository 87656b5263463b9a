"""Base contracts for content publishing platforms."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from enum import StrEnum
from typing import Any, ClassVar, Mapping, Sequence

import requests

from ..utils.logging import get_logger

LOGGER = get_logger(__name__)

DEFAULT_TIMEOUT = 30.0
USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class PlatformApiError(RuntimeError):
    """Raised when a platform API call fails."""

    def __init__(self, message: str, *, details: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details = dict(details or {})

    def __str__(self) -> str:
        base = super().__str__()
        if not self.details:
            return base
        try:
            detail_repr = json.dumps(self.details, ensure_ascii=False)
        except TypeError:
            detail_repr = str(self.details)
        return f"{base} | details: {detail_repr}"


class PublishStatus(StrEnum):
    """Whether a platform should publish immediately or keep a draft."""

    DRAFT = "draft"
    PUBLISH = "publish"


@dataclass(frozen=True, slots=True)
class Article:
    """A parsed article: plain title plus Markdown body."""

    title: str
    body: str


@dataclass(frozen=True, slots=True)
class PublishOptions:
    """Caller supplied knobs shared by every adapter."""

    status: PublishStatus = PublishStatus.DRAFT
    title: str | None = None
    tags: tuple[str, ...] = ()
    categories: tuple[str, ...] = ()
    extra: Mapping[str, Any] = field(default_factory=dict)

    _KNOWN_KEYS: ClassVar[frozenset[str]] = frozenset({"status", "title", "tags", "categories"})

    @property
    def is_publish(self) -> bool:
        return self.status is PublishStatus.PUBLISH

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "PublishOptions":
        """Build options from a plain mapping; unknown keys are kept in ``extra``."""
        if not data:
            return cls()
        status_raw = data.get("status") or PublishStatus.DRAFT
        try:
            status = PublishStatus(str(status_raw).lower())
        except ValueError as exc:
            allowed = ", ".join(item.value for item in PublishStatus)
            raise ValueError(f"Unsupported publish status {status_raw!r}; expected one of: {allowed}") from exc
        title = str(data.get("title") or "").strip()
        return cls(
            status=status,
            title=title or None,
            tags=_as_tuple(data.get("tags")),
            categories=_as_tuple(data.get("categories")),
            extra={k: v for k, v in data.items() if k not in cls._KNOWN_KEYS},
        )


@dataclass(slots=True)
class PublishResult:
    """Normalized outcome of one adapter's publish attempt."""

    platform: str
    success: bool
    url: str | None = None
    id: str | int | None = None
    message: str | None = None
    error: str | None = None
    copy_content: str | None = None

    @property
    def needs_manual_action(self) -> bool:
        return self.copy_content is not None

    @classmethod
    def ok(
        cls,
        platform: str,
        *,
        status: PublishStatus,
        url: str | None = None,
        id: str | int | None = None,
    ) -> "PublishResult":
        if status is PublishStatus.PUBLISH:
            message = f"Article published to {platform}"
        else:
            message = f"Article saved to {platform} as draft"
        return cls(platform=platform, success=True, url=url, id=id, message=message)

    @classmethod
    def manual(cls, platform: str, *, copy_content: str, message: str) -> "PublishResult":
        return cls(platform=platform, success=True, message=message, copy_content=copy_content)

    @classmethod
    def failed(
        cls,
        platform: str,
        *,
        error: str,
        copy_content: str | None = None,
        message: str | None = None,
    ) -> "PublishResult":
        return cls(
            platform=platform,
            success=False,
            error=error,
            copy_content=copy_content,
            message=message,
        )

    def as_dict(self) -> dict[str, Any]:
        """Return a serialisable view without empty fields."""
        return {key: value for key, value in asdict(self).items() if value is not None}


class PlatformAdapter(ABC):
    """Publishes a single article to one concrete platform.

    Subclasses hold one immutable platform config and implement
    :meth:`publish`. :meth:`transform` is an optional hook for
    platform-specific content reshaping and must be idempotent.
    """

    name: ClassVar[str] = "Base"

    def __init__(
        self,
        config: Any,
        *,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._config = config
        self._session = session or requests.Session()
        self._timeout = timeout

    @property
    def config(self) -> Any:
        return self._config

    def is_configured(self) -> bool:
        """Return whether the held config carries every required credential."""
        return bool(self._config is not None and self._config.is_complete)

    def transform(self, title: str, body: str) -> Article:
        """Adapt the article for this platform. Defaults to a pass-through."""
        return Article(title=title, body=body)

    @abstractmethod
    def publish(self, title: str, body: str, options: PublishOptions) -> PublishResult:
        """Publish the already transformed article and return the outcome."""

    def copy_content(self, title: str, body: str) -> str:
        """Return the text a user can paste into the platform by hand."""
        return f"{title}\n\n{body}".strip()

    def _require_title(self, title: str) -> None:
        if not title or not title.strip():
            raise ValueError(f"{self.name} requires a non-empty article title")

    def _manual_result(self, title: str, body: str) -> PublishResult:
        LOGGER.info(
            "No credentials configured; returning copy content",
            extra={"event": "publish.manual", "platform": self.name},
        )
        return PublishResult.manual(
            self.name,
            copy_content=self.copy_content(title, body),
            message=f"No credentials configured for {self.name}; copy the content and publish it manually",
        )

    def _failed_result(self, exc: Exception, title: str, body: str) -> PublishResult:
        LOGGER.error(
            "Publish failed: %s",
            exc,
            extra={"event": "publish.failed", "platform": self.name},
        )
        return PublishResult.failed(
            self.name,
            error=str(exc),
            copy_content=self.copy_content(title, body),
            message=f"{self.name} API publish failed; copy the content and publish it manually",
        )

    def _post(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        auth: tuple[str, str] | None = None,
        **kwargs: Any,
    ) -> requests.Response:
        """POST through the shared session, mapping transport errors to :class:`PlatformApiError`."""
        try:
            response = self._session.post(
                url,
                headers=dict(headers or {}),
                auth=auth,
                timeout=self._timeout,
                **kwargs,
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            raise PlatformApiError(
                _error_message(exc.response) or f"{self.name} request failed",
                details={"url": url, "status": _status_code(exc.response)},
            ) from exc
        except requests.RequestException as exc:
            raise PlatformApiError(
                f"Could not reach {self.name}",
                details={"url": url, "reason": str(exc)},
            ) from exc
        return response

    def _post_json(
        self,
        url: str,
        payload: Mapping[str, Any],
        *,
        headers: Mapping[str, str] | None = None,
        auth: tuple[str, str] | None = None,
    ) -> dict[str, Any]:
        """POST a JSON payload and return the decoded JSON object."""
        response = self._post(url, headers=headers, auth=auth, json=dict(payload))
        try:
            data = response.json()
        except ValueError as exc:
            raise PlatformApiError(
                f"Failed to decode {self.name} response",
                details={"url": url, "response": response.text[:200]},
            ) from exc
        if not isinstance(data, dict):
            raise PlatformApiError(
                f"Unexpected {self.name} response shape",
                details={"url": url, "response": str(data)[:200]},
            )
        return data


def _as_tuple(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(item.strip() for item in value.split(",") if item.strip())
    if isinstance(value, Sequence):
        return tuple(str(item).strip() for item in value if str(item).strip())
    return (str(value),)


def _status_code(response: requests.Response | None) -> int | None:
    return getattr(response, "status_code", None)


def _error_message(response: requests.Response | None) -> str | None:
    """Pull a human readable error out of a failed platform response."""
    if response is None:
        return None
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        nested = data.get("error")
        if isinstance(nested, dict) and nested.get("message"):
            return str(nested["message"])
        for key in ("message", "msg", "err_msg", "error"):
            value = data.get(key)
            if value:
                return str(value)
    status = _status_code(response)
    return f"HTTP {status}" if status else None
