"""Bundled content document."""
