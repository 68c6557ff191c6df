"""Exceptions raised by the dodge game."""


class DodgeError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(DodgeError, ValueError):
    """A configuration value is out of range or inconsistent."""


class InvalidPhaseError(DodgeError, RuntimeError):
    """An engine operation was called in a phase that does not allow it."""

    def __init__(self, operation, phase):
        self.operation = operation
        self.phase = phase
        super().__init__(f"cannot {operation}() while phase is {phase.name}")
