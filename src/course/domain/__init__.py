"""Domain model for the course catalog: value objects and their invariants."""
