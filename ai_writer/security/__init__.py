"""Security utilities package."""

from __future__ import annotations

from .credential_provider import (
    EnvSecretProvider,
    MappingSecretProvider,
    SecretNotFoundError,
    SecretProvider,
    mask_secret,
)

__all__ = [
    "EnvSecretProvider",
    "MappingSecretProvider",
    "SecretNotFoundError",
    "SecretProvider",
    "mask_secret",
]
