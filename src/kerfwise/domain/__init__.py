"""Domain layer: value objects, errors and the catalog, validation and nesting services."""
