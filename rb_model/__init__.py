"""Pure data models: schema trees, table state and catalog entries."""
