class GameError(Exception):
    """Base class for everything the game core raises."""


class DatasetParseError(GameError, ValueError):
    """A dataset line could not be turned into a Location."""

    def __init__(self, message, line=None, line_no=None):
        if line_no is not None:
            message = f"line {line_no}: {message} ({line!r})"
        super().__init__(message)
        self.line = line
        self.line_no = line_no


class EmptyEligibleSetError(GameError):
    """No location survived the eligibility filter."""


class InvalidStateError(GameError):
    """An operation was called on a snapshot in the wrong state."""


class InvalidGuessError(GameError, ValueError):
    """A guess direction string did not name a Comparison."""


class GameNotFoundError(GameError, KeyError):
    """No session is registered under the given game code."""

    def __str__(self):
        # KeyError would repr() the message
        return str(self.args[0]) if self.args else ''
