"""Application layer: configuration files and their conversion to domain objects."""
