"""Collision diagnostics for a digit length and a population of names."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import numpy as np

from ..mapping.identifiers import IdentifierGenerator, normalize_name


@dataclass(frozen=True)
class CollisionReport:
    names: int
    unique_ids: int
    collisions: int
    collision_rate: float
    expected_collisions: float
    capacity: int
    utilization: float


def expected_collisions(count: int, capacity: int) -> float:
    """
    Birthday approximation of colliding names among ``count`` uniform draws.

    ``count - capacity * (1 - (1 - 1/capacity) ** count)`` is the expected number
    of draws that land on an already occupied id.
    """
    if count <= 0:
        return 0.0
    occupied = capacity * -np.expm1(count * np.log1p(-1.0 / capacity))
    return float(count - occupied)


def collision_report(names: Iterable[str], digits: int) -> CollisionReport:
    """
    Summarise how many distinct names share a primary id at ``digits`` digits.

    Names are normalized and de-duplicated first, so case variants of one room
    do not count as collisions.
    """
    generator = IdentifierGenerator(digits)
    unique_names = sorted({normalize_name(name) for name in names if name})
    capacity = generator.modulus - generator.lower_bound

    if not unique_names:
        return CollisionReport(0, 0, 0, 0.0, 0.0, capacity, 0.0)

    ids = np.fromiter(
        (generator.generate(name) for name in unique_names),
        dtype=np.int64,
        count=len(unique_names),
    )
    unique_ids = int(np.unique(ids).size)
    collisions = len(unique_names) - unique_ids

    return CollisionReport(
        names=len(unique_names),
        unique_ids=unique_ids,
        collisions=collisions,
        collision_rate=collisions / len(unique_names),
        expected_collisions=expected_collisions(len(unique_names), capacity),
        capacity=capacity,
        utilization=unique_ids / capacity,
    )
