"""Exceptions raised outside the storage result channel."""


class ConfigurationError(Exception):
    """Storage credentials or settings are missing or invalid."""
