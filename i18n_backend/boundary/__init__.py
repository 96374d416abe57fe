"""Boundary adapters: database and translation provider."""
