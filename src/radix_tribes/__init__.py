"""Radix Tribes: server-authoritative turn engine for a post-apocalyptic strategy game."""

__version__ = "0.1.0"
