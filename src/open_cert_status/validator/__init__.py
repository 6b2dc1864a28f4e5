"""Certificate chain validation."""

from .chain import DEFAULT_MAX_CHAIN_DEPTH, ChainValidator

__all__ = ["ChainValidator", "DEFAULT_MAX_CHAIN_DEPTH"]
