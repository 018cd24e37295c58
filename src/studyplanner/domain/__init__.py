"""Domain entities and repository protocols."""
