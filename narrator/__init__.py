"""Asynchronous narrator client for the Camb.ai text-to-speech service."""

__version__ = "0.1.0"
