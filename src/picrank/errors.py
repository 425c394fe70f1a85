"""Exceptions raised by picrank."""

from __future__ import annotations


class PicrankError(Exception):
    """Base class for picrank errors."""


class DecodeError(PicrankError):
    """Image data cannot be turned into an analyzable image."""


class AssetNotFound(PicrankError):
    """The image source does not know the asset identifier."""

    def __init__(self, asset_identifier: str) -> None:
        super().__init__(f"asset not found: {asset_identifier}")
        self.asset_identifier = asset_identifier


class ProviderUnavailable(PicrankError):
    """A vision detector could not run. Never escapes the orchestrator."""
