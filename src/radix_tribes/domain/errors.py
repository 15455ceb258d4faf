"""Exception taxonomy for the Radix Tribes engine.

Engine functions raise these; the server boundary catches
:class:`RadixTribesError`, leaves the world untouched and reports the
failure to the caller.
"""

from __future__ import annotations


class RadixTribesError(Exception):
    """Base class for every recoverable engine error."""


class MalformedCoordinate(RadixTribesError, ValueError):
    """A hex coordinate key could not be parsed."""

    def __init__(self, text: object) -> None:
        super().__init__(f"Malformed hex coordinate: {text!r}")
        self.text = text


class UnknownEntity(RadixTribesError, LookupError):
    """Reference to an entity that does not exist."""

    kind = "entity"

    def __init__(self, identifier: str) -> None:
        super().__init__(f"Unknown {self.kind}: {identifier}")
        self.identifier = identifier


class UnknownTribe(UnknownEntity):
    kind = "tribe"


class UnknownProposal(UnknownEntity):
    kind = "proposal"


class UnknownUser(UnknownEntity):
    kind = "user"


class UnknownRequest(UnknownEntity):
    kind = "request"


class UnknownCatalogItem(UnknownEntity):
    kind = "catalog item"


class RequestAlreadyResolved(RadixTribesError):
    """A chief or asset request was already approved or denied."""


class InvalidDiplomaticAction(RadixTribesError):
    """A diplomatic command that can never be valid (e.g. targeting oneself)."""


class NoAvailableStartLocation(RadixTribesError):
    """Every starting location is already occupied."""

    def __init__(self) -> None:
        super().__init__("No available starting locations.")


class UsernameTaken(RadixTribesError):
    """Registration with a username that already exists."""


class InvalidCredentials(RadixTribesError):
    """Login with a wrong username or password."""


class TurnProcessingError(RadixTribesError):
    """The global turn advance failed; the previous world is kept."""


class PersistenceWriteFailure(RadixTribesError):
    """Writing the game data file failed."""


class PersistenceCorrupt(RadixTribesError):
    """A game data file exists but cannot be parsed or validated."""


class ServerShuttingDown(RadixTribesError):
    """A mutating command arrived after shutdown started."""

    def __init__(self) -> None:
        super().__init__("Server is shutting down; command rejected.")
