"""Account lookup, nickname changes and token refresh for authenticated users."""
