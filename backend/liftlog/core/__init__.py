"""Core wiring: configuration, extensions and logging."""
