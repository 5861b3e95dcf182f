"""Camb.ai provider transport."""

from narrator.services.camb.client import CambClient, DEFAULT_BASE_URL

__all__ = ["CambClient", "DEFAULT_BASE_URL"]
