"""Core infrastructure: configuration, constants and the exception taxonomy."""
