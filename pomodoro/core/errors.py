from __future__ import annotations


class PomodoroError(Exception):
    """Base class for recoverable failures of external collaborators."""


class StorageError(PomodoroError):
    """Reading or writing persistent storage failed."""


class NotificationError(PomodoroError):
    """The notification service failed or is unavailable."""


class HapticError(PomodoroError):
    """The haptic service failed or is unavailable."""


class PromptError(PomodoroError):
    """The confirmation dialog could not be presented."""
