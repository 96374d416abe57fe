"""Application layer: use-case services over the database boundary."""
