"""Out-of-process integrations."""
