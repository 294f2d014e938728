"""Error taxonomy of the harmonic explorer."""


class HarmonicExplorerError(Exception):
    """Base class for all errors raised by the application."""


class InvalidKeyError(HarmonicExplorerError, KeyError):
    """Unknown basis or tuning selector."""

    def __str__(self) -> str:
        # KeyError quotes its argument, keep the message readable
        return str(self.args[0]) if self.args else ""


class MissingConfigurationError(HarmonicExplorerError, ValueError):
    """A required defining parameter was not supplied."""


class ValidationError(HarmonicExplorerError, ValueError):
    """Input data is malformed or out of range."""


class PlayerBusyError(HarmonicExplorerError, RuntimeError):
    """The player cannot perform the request in its current state."""
