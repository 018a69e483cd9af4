"""Exceptions raised by the Mandelbrot explorer."""


class MandelbrotError(Exception):
    """Base class for all errors raised by this package."""


class SnapshotError(MandelbrotError):
    """
    Writing a snapshot failed.

    The underlying OSError or pygame.error is chained as __cause__. Callers
    are expected to log it and carry on; a failed snapshot never ends a
    session.
    """

    def __init__(self, path, reason):
        super().__init__(f"could not write snapshot '{path}': {reason}")
        self.path = path
        self.reason = reason


class DisplayError(MandelbrotError):
    """The display or window could not be initialized."""


class ConfigError(MandelbrotError):
    """A settings file named by the user could not be read or is malformed."""
