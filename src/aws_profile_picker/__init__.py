"""Pick an AWS profile and activate session credentials for it."""

__version__ = "0.1.0"
