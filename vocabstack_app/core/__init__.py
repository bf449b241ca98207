"""Core infrastructure: configuration, extensions, errors, logging and signals."""
