"""Core models, errors and utilities."""
