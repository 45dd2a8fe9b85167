"""Error types raised by the extcap command router and option model.

Errors raised by capability provider callbacks are never wrapped: they reach
the top level unchanged.
"""


class ExtcapError(Exception):
    """Base class for all errors raised by this package."""


class NoInterfaceSpecified(ExtcapError):
    """An action needs ``--extcap-interface`` but it was not supplied."""

    def __init__(self, message: str = "No interface specified") -> None:
        super().__init__(message)


class NoPipeProvided(ExtcapError):
    """Capture needs ``--fifo`` but it was not supplied."""

    def __init__(self, message: str = "No FIFO pipe provided") -> None:
        super().__init__(message)


class SinkOpenError(ExtcapError):
    """The capture output sink could not be opened."""


class OptionDefinitionError(ExtcapError):
    """An option descriptor was built with invalid settings.

    This is a programming error in the backend, not a runtime condition.
    """
