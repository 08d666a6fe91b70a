"""Configuration constants (see `settings`)."""
