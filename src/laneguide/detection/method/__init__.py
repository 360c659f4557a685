"""Vision backend implementations."""
