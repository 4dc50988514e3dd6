"""Collision diagnostics and mapping export."""

from .collisions import CollisionReport, collision_report, expected_collisions  # noqa: F401
from .export import export_mappings, mappings_frame  # noqa: F401
