"""Persistence and workflow logic for programs and reports."""
