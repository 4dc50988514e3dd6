"""Identifier generation, mapping persistence, and resolution."""

from .errors import (  # noqa: F401
    ConferenceMapperError,
    ConfigurationError,
    IdentifierError,
    MappingDecodeError,
    StoreError,
)
from .identifiers import IdentifierGenerator, normalize_name, validate_digits  # noqa: F401
from .resolver import MappingResolver, ResolutionResult  # noqa: F401
from .store import InMemoryMappingStore, MappingStore, SQLiteMappingStore  # noqa: F401
