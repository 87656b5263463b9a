"""Interfaces and basic implementations for secret resolution."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from typing import Mapping


class SecretNotFoundError(KeyError):
    """Raised when a secret cannot be resolved."""


class SecretProvider(ABC):
    """Abstract secret lookup contract."""

    @abstractmethod
    def get_secret(self, key: str) -> str:
        """Return the secret associated with ``key``."""

    def get_optional(self, key: str) -> str:
        """Return the stripped secret, or an empty string when missing or blank."""
        try:
            return self.get_secret(key).strip()
        except SecretNotFoundError:
            return ""


class EnvSecretProvider(SecretProvider):
    """Reads secrets from process environment variables."""

    def __init__(self, prefix: str = "", env: Mapping[str, str] | None = None) -> None:
        self._env = env if env is not None else os.environ
        self._prefix = prefix

    def get_secret(self, key: str) -> str:
        compound = f"{self._prefix}{key}" if self._prefix else key
        try:
            return self._env[compound.upper().replace(".", "_")]
        except KeyError as exc:
            raise SecretNotFoundError(compound) from exc


class MappingSecretProvider(SecretProvider):
    """Wraps a simple dictionary for testing."""

    def __init__(self, mapping: Mapping[str, str]) -> None:
        self._mapping = mapping

    def get_secret(self, key: str) -> str:
        try:
            return self._mapping[key]
        except KeyError as exc:
            raise SecretNotFoundError(key) from exc


def mask_secret(value: str, visible_chars: int = 4) -> str:
    """Return a log-safe rendering of ``value``."""
    if not value:
        return ""
    if len(value) <= visible_chars:
        return "*" * len(value)
    return value[:visible_chars] + "..."


__all__ = [
    "EnvSecretProvider",
    "MappingSecretProvider",
    "SecretNotFoundError",
    "SecretProvider",
    "mask_secret",
]
