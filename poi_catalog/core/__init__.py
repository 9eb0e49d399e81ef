"""Core infrastructure: database, errors, logging, metrics."""
