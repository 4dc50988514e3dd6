"""Exception hierarchy shared by the mapping core and its entry points."""

from __future__ import annotations


class ConferenceMapperError(Exception):
    """Base class for every error raised by the conference mapper."""


class ConfigurationError(ConferenceMapperError, ValueError):
    """Invalid startup settings (digit length, phone list, ports)."""


class StoreError(ConferenceMapperError):
    """The mapping store failed to read or write."""


class MappingDecodeError(StoreError):
    """A stored conference name is not valid UTF-8."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Stored mapping for id {key} is not valid UTF-8: {reason}")
        self.key = key


class IdentifierError(ConferenceMapperError):
    """No identifier with the configured digit length could be derived."""
