"""Coordinate and randomness helpers shared by the engine."""
