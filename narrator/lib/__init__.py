"""Shared utilities and configuration."""

from narrator.lib.config import NarratorConfig, get_narrator_config
from narrator.lib.exceptions import (
    NarratorError,
    ErrorKind,
    ConfigError,
    CredentialError,
    CatalogError,
    SubmitError,
    PollError,
    ResultError,
    SessionError,
)

__all__ = [
    "NarratorConfig",
    "get_narrator_config",
    "NarratorError",
    "ErrorKind",
    "ConfigError",
    "CredentialError",
    "CatalogError",
    "SubmitError",
    "PollError",
    "ResultError",
    "SessionError",
]
