"""
Conference mapper package.

Assigns short numeric dial-in ids to conference room JIDs and serves lookups
in both directions. Modules are grouped into the mapping core, the HTTP
surface, collision diagnostics, and shared utilities.
"""

__version__ = "0.3.0"
