"""
idforge Package

Snowflake-style distributed ID generation with NanoId and short-UID helpers,
usable as a library or as a small FastAPI service.
"""

__version__ = "0.1.0"

__all__ = [
    "api",
    "core",
    "services",
    "utils",
]
