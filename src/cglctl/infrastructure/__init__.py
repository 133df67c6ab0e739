"""Infrastructure layer: SQLite persistence and the Library repository."""
