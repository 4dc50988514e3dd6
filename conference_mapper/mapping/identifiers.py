"""
Deterministic numeric identifiers for conference names.

Identifiers are derived from a stable 64-bit BLAKE2b digest so the same room
maps to the same id across processes and restarts. Whenever the reduced value
would lose its leading digit, the digest is folded back into a new hash state
until an id with exactly ``digits`` decimal digits appears.
"""

from __future__ import annotations

import hashlib
from typing import Iterator
from urllib.parse import quote

from .errors import ConfigurationError, IdentifierError

MIN_DIGITS = 6
MAX_DIGITS = 12
MAX_REHASH_ATTEMPTS = 64
DIGEST_SIZE = 8


def normalize_name(name: str) -> str:
    """
    Return the canonical form of a conference JID.

    The name is lower-cased and percent-encoded, keeping only RFC 3986
    unreserved characters and the ``@`` separator literal.

    Examples
    --------
    >>> normalize_name("Room One@Conference.Example.com")
    'room%20one@conference.example.com'
    """
    return quote(name.lower(), safe="@")


def validate_digits(digits: int) -> int:
    if isinstance(digits, bool) or not isinstance(digits, int):
        raise ConfigurationError(f"Invalid id length: {digits!r} (expected an integer)")
    if digits < MIN_DIGITS or digits > MAX_DIGITS:
        raise ConfigurationError(
            f"Invalid id length: '{digits}' ({MIN_DIGITS}-{MAX_DIGITS})"
        )
    return digits


def _digest(payload: bytes) -> bytes:
    return hashlib.blake2b(payload, digest_size=DIGEST_SIZE).digest()


class IdentifierGenerator:
    """Derive fixed-width decimal identifiers from normalized names."""

    def __init__(self, digits: int) -> None:
        self.digits = validate_digits(digits)
        self.modulus = 10**self.digits
        self.lower_bound = 10 ** (self.digits - 1)

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"IdentifierGenerator(digits={self.digits})"

    def _hash_stream(self, name: str) -> Iterator[int]:
        """Yield successive 64-bit hashes, each folding in the previous digest."""
        encoded = name.encode("utf-8")
        digest = _digest(encoded)
        while True:
            yield int.from_bytes(digest, "big")
            digest = _digest(digest + encoded)

    def candidates(self, name: str, limit: int | None = None) -> Iterator[int]:
        """
        Yield distinct identifiers with exactly ``digits`` digits for ``name``.

        The sequence is deterministic; its first element is ``generate(name)``.

        Parameters
        ----------
        name:
            Normalized conference name.
        limit:
            Stop after this many identifiers. ``None`` keeps yielding.

        Raises
        ------
        IdentifierError
            If ``MAX_REHASH_ATTEMPTS`` consecutive hashes fall below the
            lower bound.
        """
        if not name:
            raise ValueError("Cannot derive an identifier from an empty name.")

        seen: set[int] = set()
        misses = 0
        for value in self._hash_stream(name):
            if limit is not None and len(seen) >= limit:
                return
            candidate = value % self.modulus
            if candidate < self.lower_bound or candidate in seen:
                misses += 1
                if misses > MAX_REHASH_ATTEMPTS:
                    raise IdentifierError(
                        f"Exceeded {MAX_REHASH_ATTEMPTS} re-hash attempts for '{name}'."
                    )
                continue
            misses = 0
            seen.add(candidate)
            yield candidate

    def generate(self, name: str) -> int:
        """Return the primary identifier for ``name``."""
        return next(self.candidates(name, limit=1))
