"""Output layer: render ServiceResult as Rich text, quiet IDs, or JSON."""
