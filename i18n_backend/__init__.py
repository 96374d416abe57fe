"""Translation job pipeline backend."""
