"""Shared helpers (logging set-up)."""
