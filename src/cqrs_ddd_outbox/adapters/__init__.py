"""Adapters shipped with the core package."""
