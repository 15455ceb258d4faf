"""Domain model and rules for the Radix Tribes turn engine.

This package hosts the in-memory world model and every rule that mutates
it:

* Dataclasses describing every game entity (see :mod:`models`).
* Enumerations and the exception taxonomy (:mod:`enums`, :mod:`errors`).
* Rule configuration objects and static catalog data
  (:mod:`rules_config`, :mod:`catalog`).
* Pure rule functions: map generation, diplomacy, AI tribes, world
  administration, accounts and the turn engine.

Submodules are imported explicitly by callers.
"""
