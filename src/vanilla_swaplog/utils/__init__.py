"""Shared helpers for the Vanilla swap log viewer."""
