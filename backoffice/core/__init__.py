"""Core infrastructure: logging and application exceptions."""
