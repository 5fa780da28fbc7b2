"""Application services orchestrating units of work for each use case."""
