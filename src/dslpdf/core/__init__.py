"""DSL data model, validation, auto-fixing, image sources and settings."""
