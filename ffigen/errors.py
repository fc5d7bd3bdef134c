"""
Errors raised by the binding generator.

Only conditions that break the run abort it.  A type with no mapping is
never an error: the owning definition is skipped and counted instead.
"""


class FfigenError(Exception):
    """Base class for all fatal generator errors."""


class ConfigurationError(FfigenError):
    """Required configuration (e.g. the library identifier) is missing."""


class DecodeError(FfigenError):
    """The declaration stream is not a JSON array of definition records."""


class InputFormatError(FfigenError):
    """A trusted input-format contract was broken (bad parameter tag, void parameter)."""
