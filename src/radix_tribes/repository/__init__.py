"""Persistence adapters for the game state."""

from .persistence import LoadResult, PersistenceManager, decode_state, encode_state

__all__ = ["LoadResult", "PersistenceManager", "decode_state", "encode_state"]
