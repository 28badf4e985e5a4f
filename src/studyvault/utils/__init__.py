"""Shared helpers (validation, identifiers)."""
