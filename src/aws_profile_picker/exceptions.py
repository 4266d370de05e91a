"""Custom exceptions for AWS Profile Picker."""


class ProfilePickerError(Exception):
    """Base exception for all AWS Profile Picker errors."""


class ConfigReadError(ProfilePickerError):
    """Failed to read or parse an AWS shared config file."""


class SessionCommandError(ProfilePickerError):
    """External session command is missing or exited with an error."""


class CommandOutputError(SessionCommandError):
    """External session command produced output that could not be parsed."""


class StateCacheError(ProfilePickerError):
    """Error reading or writing the selection cache."""


class UnknownProfileError(ProfilePickerError):
    """Requested profile is not among the configured profiles."""


class IdentityError(ProfilePickerError):
    """Failed to resolve the caller identity for the active credentials."""
