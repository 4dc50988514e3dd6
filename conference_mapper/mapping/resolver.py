"""
Resolve conference mappings by id or by name.

The resolver is the single entry point used by the HTTP layer. Every call
returns a :class:`ResolutionResult`; store failures are folded into the
message instead of propagating.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from .errors import IdentifierError, MappingDecodeError, StoreError
from .identifiers import IdentifierGenerator, normalize_name
from .store import MappingStore

CREATED_MESSAGE = "Successfully created conference mapping"
RETRIEVED_MESSAGE = "Successfully retrieved conference mapping"
NOT_FOUND_MESSAGE = "No conference mapping was found"
NO_INPUT_MESSAGE = "No conference or id provided"
STORE_FAILED_MESSAGE = "Failed to store conference mapping"

DEFAULT_COLLISION_ATTEMPTS = 8


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome of a lookup; ``id`` is 0 and ``name`` empty when unresolved."""

    id: int = 0
    name: str = ""
    message: str = ""


class MappingResolver:
    """
    Orchestrate id and name lookups on top of a generator and a store.

    Parameters
    ----------
    generator:
        Identifier generator configured with the process digit length.
    store:
        Persistence for id -> name mappings.
    collision_attempts:
        How many candidate ids to probe before falling back to overwriting
        the primary id of a name.
    """

    def __init__(
        self,
        generator: IdentifierGenerator,
        store: MappingStore,
        *,
        collision_attempts: int = DEFAULT_COLLISION_ATTEMPTS,
    ) -> None:
        if collision_attempts < 1:
            raise ValueError("collision_attempts must be at least one.")
        self.generator = generator
        self.store = store
        self.collision_attempts = collision_attempts

    def resolve(self, id: int = 0, name: str = "") -> ResolutionResult:
        """Dispatch to the name path, the id path, or the no-input result."""
        if name:
            return self.resolve_or_create(name)
        if id > 0:
            return self.resolve_by_id(id)
        return ResolutionResult(message=NO_INPUT_MESSAGE)

    def resolve_or_create(self, name: str) -> ResolutionResult:
        if not name:
            return ResolutionResult(message=NO_INPUT_MESSAGE)

        normalized = normalize_name(name)
        try:
            mapping_id = self._allocate(normalized)
            self.store.put(mapping_id, normalized)
        except StoreError as exc:
            logger.error("Could not store mapping for {}: {}", normalized, exc)
            return ResolutionResult(message=f"{STORE_FAILED_MESSAGE}: {exc}")
        except IdentifierError as exc:
            logger.error("Could not derive an id for {}: {}", normalized, exc)
            return ResolutionResult(message=str(exc))

        logger.info("Mapped {} -> {}", normalized, mapping_id)
        return ResolutionResult(id=mapping_id, name=normalized, message=CREATED_MESSAGE)

    def resolve_by_id(self, id: int) -> ResolutionResult:
        if id <= 0:
            return ResolutionResult(message=NO_INPUT_MESSAGE)
        try:
            stored = self.store.get(id)
        except StoreError as exc:
            logger.error("Lookup of {} failed: {}", id, exc)
            return ResolutionResult(id=id, message=str(exc))

        if stored is None:
            return ResolutionResult(id=id, message=NOT_FOUND_MESSAGE)
        return ResolutionResult(id=id, name=stored, message=RETRIEVED_MESSAGE)

    def _allocate(self, name: str) -> int:
        """Return the first candidate id that is free or already bound to ``name``."""
        primary = self.generator.generate(name)
        for candidate in self.generator.candidates(name, limit=self.collision_attempts):
            try:
                existing = self.store.get(candidate)
            except MappingDecodeError as exc:
                logger.warning("Overwriting undecodable mapping at {}: {}", candidate, exc)
                return candidate
            if existing is None or existing == name:
                return candidate
            logger.debug("Id {} already bound to {}; probing next candidate", candidate, existing)

        logger.warning(
            "All {} candidate ids for {} are taken; overwriting {}",
            self.collision_attempts,
            name,
            primary,
        )
        return primary
