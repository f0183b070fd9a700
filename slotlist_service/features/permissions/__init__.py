"""Community permission management."""
