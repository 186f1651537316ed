"""Service layer: Gremlin operations and import/export."""
