"""Exceptions raised by racesweep."""


class ConfigError(Exception):
    """Raised when the sweep cannot start: bad arguments or unusable output."""
