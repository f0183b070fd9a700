"""Status endpoint."""
