"""Domain entities and errors."""
