"""AWS helpers."""
