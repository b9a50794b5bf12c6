"""Helpers shared by the registry, discovery, and catalogue packages."""
