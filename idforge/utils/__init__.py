"""
Utils Package

Identifier generation and encoding helpers for idforge.
"""

from .nanoid import generate_nanoid
from .random_string import random_string
from .snowflake_generator import (
    IdGenerator,
    SnowflakeComponents,
    SnowflakeRegistry,
    decode_snowflake_id,
    generate_snowflake_id,
    generate_snowflake_id_str,
    get_default_registry,
    get_snowflake_generator,
)
from .uid_codec import decode_uid, encode_uid

__all__ = [
    "IdGenerator",
    "SnowflakeComponents",
    "SnowflakeRegistry",
    "decode_snowflake_id",
    "get_default_registry",
    "get_snowflake_generator",
    "generate_snowflake_id",
    "generate_snowflake_id_str",
    "generate_nanoid",
    "random_string",
    "encode_uid",
    "decode_uid",
]
