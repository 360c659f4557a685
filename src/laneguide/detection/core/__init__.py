"""Core types: configuration, data models, interfaces and errors."""
